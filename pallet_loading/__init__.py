"""Profit-maximizing pallet selection for a truck with weight and count limits."""

from .models import Pallet, Truck, Selection, DomainError, CapacityError
from .bnb import solve_exact, solve_bounded, compute_upper_bound
from .knapsack_dp import solve_dp
from .heuristics import solve_approximate, solve_hybrid, greedy_fill
from .solvers import Algorithm, solve

__all__ = [
    "Pallet",
    "Truck",
    "Selection",
    "DomainError",
    "CapacityError",
    "solve_exact",
    "solve_bounded",
    "compute_upper_bound",
    "solve_dp",
    "solve_approximate",
    "solve_hybrid",
    "greedy_fill",
    "Algorithm",
    "solve",
]
