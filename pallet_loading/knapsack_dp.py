"""Dynamic Programming solution for the pallet loading problem.

The table is indexed by (weight budget, pallet-count budget):
dp[w][k] = best profit using total weight at most w and at most k pallets.
Each pallet is folded into the table once, reading only cells that do not
yet contain it, which keeps the problem 0/1.
"""

import numpy as np

from .config import DEFAULT_CONFIG
from .logger import NoOpLogger
from .models import CapacityError, Selection, is_better


def dp_table_cells(truck):
    """Number of cells the DP table needs for this truck."""
    return (truck.max_weight + 1) * (truck.max_pallets + 1)


def dp_id_slots(truck):
    """Upper bound on the pallet ids stored in the id-sequence table."""
    return dp_table_cells(truck) * truck.max_pallets


def _check_size(truck, config):
    W, K = truck.max_weight, truck.max_pallets
    cells = dp_table_cells(truck)
    if cells > config.max_dp_cells:
        raise CapacityError(
            f"DP table of {W + 1} x {K + 1} = {cells} cells exceeds the limit "
            f"of {config.max_dp_cells}")
    slots = dp_id_slots(truck)
    if slots > config.max_dp_id_slots:
        raise CapacityError(
            f"DP id table may hold up to {slots} pallet ids ({cells} cells x {K}), "
            f"over the limit of {config.max_dp_id_slots}")


def _fill(W, K, pallets, logger):
    """Build the tables and fold every pallet in; return (profit, ids) of the best cell."""
    dp = np.zeros((W + 1, K + 1), dtype=np.int64)
    # counts[w, k] == len(chosen[w][k]), kept to filter ties without Python loops
    counts = np.zeros((W + 1, K + 1), dtype=np.int64)
    chosen = [[()] * (K + 1) for _ in range(W + 1)]
    logger.log_dp_table(W + 1, K + 1)

    best_profit, best_ids = 0, ()

    for p in pallets:
        wt = p.weight
        if wt > W or K == 0:
            continue

        # Candidate values for cells (w, k), w >= wt, k >= 1, read before any write
        cand = dp[:W + 1 - wt, :K] + p.profit
        cand_counts = counts[:W + 1 - wt, :K] + 1
        current = dp[wt:, 1:]
        improved = cand > current
        tied = (cand == current) & (cand_counts <= counts[wt:, 1:])

        rows, cols = np.nonzero(improved | tied)
        # Descending weight: the predecessor cell (w - wt, k - 1) is always
        # visited after (w, k), so it still holds its value without this pallet
        order = np.lexsort((-cols, -rows))
        for r, c in zip(rows[order].tolist(), cols[order].tolist()):
            w, k = r + wt, c + 1
            new_ids = chosen[r][c] + (p.id,)
            value = int(cand[r, c])
            if not improved[r, c] and not is_better(value, new_ids, value, chosen[w][k]):
                continue
            dp[w, k] = value
            counts[w, k] = len(new_ids)
            chosen[w][k] = new_ids
            if is_better(value, new_ids, best_profit, best_ids):
                best_profit, best_ids = value, new_ids

    return best_profit, best_ids


def solve_dp(truck, pallets, *, config=None, logger=None):
    """Solve the weight- and count-constrained 0/1 knapsack by DP.

    For every pallet, cells are visited from max_weight down to the pallet's
    weight and from max_pallets down to 1. A cell takes the pallet when
    dp[w - weight][k - 1] + profit beats dp[w][k]; on an exact tie the
    fewer-pallets-then-lexicographic rule decides which id sequence is kept.

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Sequence of pallets
        config: Optional SolverConfig (max_dp_cells, max_dp_id_slots)
        logger: Optional SolverLogger

    Returns:
        Selection: Optimal selection

    Raises:
        CapacityError: If the tables exceed the configured limits, or memory
            runs out while they are built or filled
    """
    config = config or DEFAULT_CONFIG
    logger = logger or NoOpLogger()
    pallets = list(pallets)

    W, K = truck.max_weight, truck.max_pallets
    _check_size(truck, config)

    logger.start_run("dp", {"n_pallets": len(pallets), "max_weight": W, "max_pallets": K})
    try:
        best_profit, best_ids = _fill(W, K, pallets, logger)
    except MemoryError as exc:
        raise CapacityError(
            f"Ran out of memory in the DP tables for {W + 1} x {K + 1} cells") from exc

    weights = {p.id: p.weight for p in pallets}
    result = Selection(
        profit=best_profit,
        weight=sum(weights[i] for i in best_ids),
        item_ids=best_ids,
    )
    logger.end_run(result.as_dict())
    return result
