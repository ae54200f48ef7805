"""Shared configuration objects for the solvers and the command line."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SolverConfig:
    """Tuning knobs that change how (not what) the solvers compute.

    Attributes:
        hybrid_dp_threshold: The hybrid solver uses DP when the instance has
            at most this many pallets, local search otherwise
        max_dp_cells: Largest (max_weight + 1) * (max_pallets + 1) table the
            DP solver may allocate
        max_dp_id_slots: Largest number of pallet ids the DP solver may have
            to store across its id-sequence table, i.e. cells * max_pallets
        max_local_search_sweeps: Optional cap on local search sweeps; None
            runs until a local optimum is reached
    """
    hybrid_dp_threshold: int = 30
    max_dp_cells: int = 20_000_000
    max_dp_id_slots: int = 50_000_000
    max_local_search_sweeps: Optional[int] = None


DEFAULT_CONFIG = SolverConfig()


@dataclass
class RunConfig:
    data_dir: Path
    results_dir: Path
    log_dir: Path
    enable_logging: bool = False
    solver: SolverConfig = DEFAULT_CONFIG

    @staticmethod
    def from_base_dir(base_dir) -> "RunConfig":
        """Constructs a default config rooted at the supplied base directory."""
        base_dir = Path(base_dir).expanduser().resolve()
        return RunConfig(
            data_dir=base_dir / "datasets",
            results_dir=base_dir / "results",
            log_dir=base_dir / "logs",
        )
