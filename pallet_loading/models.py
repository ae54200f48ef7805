"""Data structures for the pallet loading problem.

This module contains the core data classes used throughout the solver:
- Pallet: An item with an identifier, weight and profit
- Truck: The container with a weight capacity and a pallet-count capacity
- Selection: A feasible set of pallets returned by every solver
"""

from dataclasses import dataclass, field
from typing import Tuple


class DomainError(ValueError):
    """Raised when a record is built from values outside the problem domain."""


class CapacityError(RuntimeError):
    """Raised when a solver would need more memory than it is allowed to use."""


@dataclass(frozen=True)
class Pallet:
    """A pallet that can be loaded at most once.

    Attributes:
        id: Unique non-negative identifier (assigned by the caller)
        weight: Positive weight
        profit: Non-negative profit collected if the pallet is loaded
        ratio: profit / weight, computed at construction
    """
    id: int
    weight: int
    profit: int
    ratio: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.id < 0:
            raise DomainError(f"Pallet id must be >= 0, got {self.id}")
        # ratio is undefined for weightless pallets
        if self.weight <= 0:
            raise DomainError(f"Pallet[{self.id}] weight must be > 0, got {self.weight}")
        if self.profit < 0:
            raise DomainError(f"Pallet[{self.id}] profit must be >= 0, got {self.profit}")
        object.__setattr__(self, "ratio", self.profit / self.weight)


@dataclass(frozen=True)
class Truck:
    """Capacity limits of the truck.

    A selection is feasible iff its total weight is at most max_weight
    and it holds at most max_pallets pallets.

    Attributes:
        max_weight: Maximum total weight
        max_pallets: Maximum number of pallets
    """
    max_weight: int
    max_pallets: int

    def __post_init__(self):
        if self.max_weight < 0:
            raise DomainError(f"Truck max_weight must be >= 0, got {self.max_weight}")
        if self.max_pallets < 0:
            raise DomainError(f"Truck max_pallets must be >= 0, got {self.max_pallets}")

    def fits(self, weight, count):
        """Check whether a load of the given weight and count is feasible."""
        return weight <= self.max_weight and count <= self.max_pallets


@dataclass(frozen=True)
class Selection:
    """Result of a solver run.

    Attributes:
        profit: Total profit of the loaded pallets
        weight: Total weight of the loaded pallets
        item_ids: Pallet ids in the order the solver chose them
    """
    profit: int = 0
    weight: int = 0
    item_ids: Tuple[int, ...] = ()

    @property
    def count(self):
        return len(self.item_ids)

    def as_dict(self):
        return {
            "profit": self.profit,
            "weight": self.weight,
            "count": self.count,
            "item_ids": list(self.item_ids),
        }

    @classmethod
    def from_pallets(cls, pallets):
        """Build a selection from the given pallets, in their order."""
        pallets = list(pallets)
        return cls(
            profit=sum(p.profit for p in pallets),
            weight=sum(p.weight for p in pallets),
            item_ids=tuple(p.id for p in pallets),
        )


def is_better(profit, item_ids, best_profit, best_ids):
    """Compare a candidate against the incumbent.

    Args:
        profit: Candidate profit
        item_ids: Candidate id sequence
        best_profit: Incumbent profit
        best_ids: Incumbent id sequence

    Returns:
        True if the candidate has more profit, or equal profit and fewer
        pallets, or equal profit and count and a lexicographically smaller
        id sequence.
    """
    if profit != best_profit:
        return profit > best_profit
    if len(item_ids) != len(best_ids):
        return len(item_ids) < len(best_ids)
    return tuple(item_ids) < tuple(best_ids)
