"""Per-run results of the pallet loading solvers.

Each solver run is recorded as a RunResult (profit, chosen ids, runtime).
ResultsTable collects them into a pandas DataFrame for display, CSV export
and a per-dataset comparison of the algorithms.
"""

import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Tuple

import pandas as pd

from .solvers import Algorithm, solve


@dataclass(frozen=True)
class RunResult:
    dataset: str
    algorithm: str
    profit: int
    weight: int
    count: int
    item_ids: Tuple[int, ...]
    runtime: float


def timed_run(dataset, truck, pallets, algorithm, *, config=None, logger=None):
    """Run one solver and record its result and wall-clock time.

    Timing wraps the solver call only; it does not influence the result.
    """
    algorithm = Algorithm(algorithm)
    start = time.perf_counter()
    selection = solve(truck, pallets, algorithm, config=config, logger=logger)
    runtime = time.perf_counter() - start
    return RunResult(
        dataset=str(dataset),
        algorithm=algorithm.value,
        profit=selection.profit,
        weight=selection.weight,
        count=selection.count,
        item_ids=selection.item_ids,
        runtime=runtime,
    )


class ResultsTable:
    """Accumulates RunResults across datasets and algorithms."""

    COLUMNS = ["dataset", "algorithm", "profit", "weight", "count", "item_ids", "runtime"]

    def __init__(self):
        self.results: List[RunResult] = []

    def __len__(self):
        return len(self.results)

    def add(self, result: RunResult):
        self.results.append(result)

    def to_frame(self) -> pd.DataFrame:
        rows = [asdict(r) for r in self.results]
        return pd.DataFrame(rows, columns=self.COLUMNS)

    def to_csv(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df = self.to_frame()
        df["item_ids"] = df["item_ids"].apply(lambda ids: " ".join(str(i) for i in ids))
        df.to_csv(path, index=False)
        return path

    def summary(self) -> pd.DataFrame:
        """Best profit per dataset and each run's gap to it.

        Returns:
            DataFrame with the run columns plus best_profit, gap and
            gap_pct (percentage of the best profit, 0 when best is 0)
        """
        df = self.to_frame()
        if df.empty:
            return df.drop(columns=["item_ids"]).assign(best_profit=[], gap=[], gap_pct=[])
        df["best_profit"] = df.groupby("dataset")["profit"].transform("max")
        df["gap"] = df["best_profit"] - df["profit"]
        df["gap_pct"] = (100 * df["gap"] / df["best_profit"].where(df["best_profit"] > 0)).fillna(0.0)
        return df.drop(columns=["item_ids"])
