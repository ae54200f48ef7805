"""Exhaustive and branch-and-bound search for the pallet loading problem.

Both solvers walk the same binary decision tree: at depth i pallet i is
either left out (explored first) or loaded (if it still fits). The tree is
traversed depth-first with an explicit stack, so instance size is not
limited by the interpreter's recursion limit. The branch-and-bound variant
prunes a node when the fractional relaxation bound cannot beat the
incumbent.
"""

from collections import deque
from itertools import islice

from .logger import NoOpLogger
from .models import Selection, is_better
from .ordering import sort_by_ratio, is_ratio_sorted


def compute_upper_bound(pallets, truck, index, profit, weight, assume_sorted=False):
    """Fractional knapsack bound on the profit reachable from a search node.

    Walks the pallets from ``index`` onwards in descending ratio order,
    taking whole pallets while they fit into the remaining weight and a
    fraction of the first one that does not. The pallet-count limit is not
    taken into account, so the value over-estimates but never
    under-estimates what the node can still reach.

    Args:
        pallets: List of pallets; only pallets[index:] are considered
        truck: Truck with the weight capacity
        index: First undecided pallet
        profit: Profit already collected by the node
        weight: Weight already loaded by the node
        assume_sorted: Skip the ordering check when the caller guarantees
            pallets[index:] is ratio-sorted

    Returns:
        float: Upper bound on the total profit of any completion of the node
    """
    if assume_sorted or is_ratio_sorted(pallets, index):
        remaining_pallets = islice(pallets, index, None)
    else:
        remaining_pallets = sort_by_ratio(pallets[index:])

    remaining = truck.max_weight - weight
    bound = float(profit)
    for p in remaining_pallets:
        if p.weight <= remaining:
            remaining -= p.weight
            bound += p.profit
        else:
            # Take fractionally
            bound += p.profit * (remaining / p.weight)
            break
    return bound


def _depth_first_search(truck, pallets, algorithm, use_bound, logger):
    """Run the include/exclude search and return the best Selection.

    Each stack entry is a partial state (index, profit, weight, ids). The
    exclude child is pushed last so it is explored first.
    """
    n = len(pallets)
    logger.start_run(algorithm, {
        "n_pallets": n,
        "max_weight": truck.max_weight,
        "max_pallets": truck.max_pallets,
    })

    best_profit, best_weight, best_ids = 0, 0, ()
    frontier = deque()
    frontier.append((0, 0, 0, ()))

    while frontier:
        index, profit, weight, ids = frontier.pop()  # DFS
        logger.log_node_visit(index, profit, weight)

        if index == n:
            logger.log_node_evaluated(profit)
            if is_better(profit, ids, best_profit, best_ids):
                best_profit, best_weight, best_ids = profit, weight, ids
                logger.log_incumbent_update(best_profit, best_ids)
            continue

        if use_bound:
            bound = compute_upper_bound(pallets, truck, index, profit, weight,
                                        assume_sorted=True)
            logger.log_bound_computation(bound, index)
            if bound <= best_profit:
                logger.log_node_pruned("bound_dominated", index)
                continue

        p = pallets[index]
        if truck.fits(weight + p.weight, len(ids) + 1):
            frontier.append((index + 1, profit + p.profit, weight + p.weight, ids + (p.id,)))
        frontier.append((index + 1, profit, weight, ids))

    result = Selection(profit=best_profit, weight=best_weight, item_ids=best_ids)
    logger.end_run(result.as_dict())
    return result


def solve_exact(truck, pallets, *, logger=None):
    """Exhaustive backtracking over every feasible subset.

    No pruning besides feasibility, so this is O(2^n); it is the
    correctness baseline for the other solvers.

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Sequence of pallets, explored in the given order
        logger: Optional SolverLogger

    Returns:
        Selection: Best selection; on equal profit the one with fewer
        pallets, then the lexicographically smaller id sequence
    """
    logger = logger or NoOpLogger()
    return _depth_first_search(truck, list(pallets), "exact", False, logger)


def solve_bounded(truck, pallets, *, logger=None):
    """Branch-and-bound using the fractional relaxation bound.

    The bound is only tight when pallets are visited in descending ratio
    order, so the search runs on a ratio-sorted copy; the caller's list is
    left untouched and the returned ids follow the sorted order.

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Sequence of pallets in any order
        logger: Optional SolverLogger

    Returns:
        Selection: Best selection found
    """
    logger = logger or NoOpLogger()
    return _depth_first_search(truck, sort_by_ratio(pallets), "bounded", True, logger)
