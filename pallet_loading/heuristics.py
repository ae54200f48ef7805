"""Greedy and hybrid solvers for the pallet loading problem.

- greedy_fill: single pass over an ordered list, loading whatever fits
- solve_approximate: best of the ratio-ordered and profit-ordered greedy
- local_search: single-flip first-improvement descent from a seed
- solve_hybrid: DP for small instances, greedy + local search otherwise
"""

import numpy as np

from .config import DEFAULT_CONFIG
from .knapsack_dp import solve_dp
from .logger import NoOpLogger
from .models import Selection, is_better
from .ordering import sort_by_ratio, sort_by_profit


def greedy_fill(truck, pallets):
    """Load pallets in the given order while they fit.

    A pallet that would break the weight or count limit is skipped and the
    scan goes on, so lighter pallets further down the list can still be
    loaded.

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Pallets, already in the desired priority order

    Returns:
        Selection: Loaded pallets in scan order
    """
    loaded = []
    weight = 0
    for p in pallets:
        if truck.fits(weight + p.weight, len(loaded) + 1):
            loaded.append(p)
            weight += p.weight
    return Selection.from_pallets(loaded)


def solve_approximate(truck, pallets, *, logger=None):
    """Run greedy_fill on a ratio-sorted and a profit-sorted copy.

    Returns the run with the higher profit; on equal profit the
    profit-sorted run is returned. O(n log n), no optimality guarantee.
    """
    logger = logger or NoOpLogger()
    logger.start_run("approximate", {"n_pallets": len(pallets), "max_weight": truck.max_weight,
                                     "max_pallets": truck.max_pallets})
    by_ratio = greedy_fill(truck, sort_by_ratio(pallets))
    by_profit = greedy_fill(truck, sort_by_profit(pallets))
    logger.info(f"Greedy by ratio: {by_ratio.profit}, greedy by profit: {by_profit.profit}")

    result = by_ratio if by_ratio.profit > by_profit.profit else by_profit
    logger.end_run(result.as_dict())
    return result


def local_search(truck, pallets, seed, *, config=None, logger=None):
    """Improve a seed selection by flipping one pallet at a time.

    Every sweep visits each pallet in the given order, flips whether it is
    loaded and recomputes the whole candidate. The flip is kept at once if
    the candidate is feasible and strictly better (profit, then fewer
    pallets, then lexicographic ids). Sweeps repeat until one makes no
    change, i.e. the selection is a local optimum for single flips.

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Pallets in scan order; item_ids follow this order
        seed: Feasible starting Selection over these pallets
        config: Optional SolverConfig (max_local_search_sweeps)
        logger: Optional SolverLogger

    Returns:
        Selection: Locally optimal selection
    """
    config = config or DEFAULT_CONFIG
    logger = logger or NoOpLogger()

    ids = np.array([p.id for p in pallets], dtype=np.int64)
    weights = np.array([p.weight for p in pallets], dtype=np.int64)
    profits = np.array([p.profit for p in pallets], dtype=np.int64)
    mask = np.isin(ids, list(seed.item_ids))

    best_profit = int(profits[mask].sum())
    best_ids = tuple(ids[mask].tolist())

    sweep = 0
    while config.max_local_search_sweeps is None or sweep < config.max_local_search_sweeps:
        sweep += 1
        flips = 0
        for i in range(len(pallets)):
            mask[i] = not mask[i]
            weight = int(weights[mask].sum())
            count = int(mask.sum())
            profit = int(profits[mask].sum())
            cand_ids = tuple(ids[mask].tolist())
            if truck.fits(weight, count) and is_better(profit, cand_ids, best_profit, best_ids):
                best_profit, best_ids = profit, cand_ids
                flips += 1
                logger.log_incumbent_update(best_profit, best_ids)
            else:
                mask[i] = not mask[i]
        logger.log_sweep(sweep, best_profit, flips)
        if flips == 0:
            break

    return Selection(profit=best_profit, weight=int(weights[mask].sum()), item_ids=best_ids)


def solve_hybrid(truck, pallets, *, config=None, logger=None):
    """Exact DP for small instances, greedy + local search for large ones.

    Instances with at most config.hybrid_dp_threshold pallets are handed to
    solve_dp. Larger ones start from the ratio-ordered greedy selection and
    descend to a single-flip local optimum, which carries no global
    optimality guarantee.
    """
    config = config or DEFAULT_CONFIG
    logger = logger or NoOpLogger()
    pallets = list(pallets)

    if len(pallets) <= config.hybrid_dp_threshold:
        logger.info(f"{len(pallets)} pallets <= {config.hybrid_dp_threshold}: using DP")
        return solve_dp(truck, pallets, config=config, logger=logger)

    logger.start_run("hybrid", {"n_pallets": len(pallets), "max_weight": truck.max_weight,
                                "max_pallets": truck.max_pallets})
    ordered = sort_by_ratio(pallets)
    seed = greedy_fill(truck, ordered)
    logger.info(f"Greedy seed: profit={seed.profit} count={seed.count}")
    result = local_search(truck, ordered, seed, config=config, logger=logger)
    logger.end_run(result.as_dict())
    return result
