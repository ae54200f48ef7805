"""Test small hand-made instances on every solver.

Each instance lists its known optimum; exact, bounded and DP must reach it,
the heuristics must stay feasible and never beat it.
"""
import pytest

from pallet_loading.models import Pallet, Truck, Selection
from pallet_loading.bnb import solve_exact, solve_bounded
from pallet_loading.knapsack_dp import solve_dp
from pallet_loading.heuristics import solve_approximate, solve_hybrid
from pallet_loading.solvers import Algorithm, solve


def make_pallets(rows):
    return [Pallet(id=i, weight=w, profit=p) for i, w, p in rows]


# ============================================================
# TEST INSTANCES
# ============================================================

instances = []

# Instance 1: the reference scenario - {1,3} is too heavy, {1,2} is optimal
instances.append({
    "name": "Reference",
    "truck": Truck(max_weight=10, max_pallets=2),
    "pallets": make_pallets([(1, 6, 30), (2, 4, 14), (3, 5, 16)]),
    "optimum": 44,
})

# Instance 2: count limit binds before the weight limit
instances.append({
    "name": "Count Bound",
    "truck": Truck(max_weight=100, max_pallets=2),
    "pallets": make_pallets([(1, 10, 20), (2, 10, 25), (3, 10, 30), (4, 10, 5)]),
    "optimum": 55,
})

# Instance 3: weight limit binds, best-ratio pallet is a trap
instances.append({
    "name": "Ratio Trap",
    "truck": Truck(max_weight=10, max_pallets=5),
    "pallets": make_pallets([(1, 1, 3), (2, 10, 25), (3, 5, 11), (4, 5, 11)]),
    "optimum": 25,
})

# Instance 4: nothing fits
instances.append({
    "name": "All Too Heavy",
    "truck": Truck(max_weight=3, max_pallets=4),
    "pallets": make_pallets([(1, 4, 10), (2, 5, 12)]),
    "optimum": 0,
})

# Instance 5: zero-profit pallets must never be loaded
instances.append({
    "name": "Zero Profit",
    "truck": Truck(max_weight=10, max_pallets=4),
    "pallets": make_pallets([(1, 1, 0), (2, 3, 7), (3, 2, 0), (4, 4, 9)]),
    "optimum": 16,
})

# Instance 6: every pallet fits
instances.append({
    "name": "Loose",
    "truck": Truck(max_weight=50, max_pallets=10),
    "pallets": make_pallets([(1, 3, 4), (2, 7, 9), (3, 2, 1), (4, 8, 12), (5, 5, 5)]),
    "optimum": 31,
})

EXACT_SOLVERS = [solve_exact, solve_bounded, solve_dp]
ALL_SOLVERS = EXACT_SOLVERS + [solve_approximate, solve_hybrid]


def assert_consistent(truck, pallets, result):
    """The selection is feasible and its totals match its pallets."""
    by_id = {p.id: p for p in pallets}
    assert len(set(result.item_ids)) == len(result.item_ids)
    assert all(i in by_id for i in result.item_ids)
    assert result.profit == sum(by_id[i].profit for i in result.item_ids)
    assert result.weight == sum(by_id[i].weight for i in result.item_ids)
    assert result.weight <= truck.max_weight
    assert result.count <= truck.max_pallets


@pytest.mark.parametrize("instance", instances, ids=[i["name"] for i in instances])
def test_exact_solvers_reach_optimum(instance):
    for solver in EXACT_SOLVERS:
        result = solver(instance["truck"], instance["pallets"])
        print(f"{instance['name']}: {solver.__name__} -> {result.profit} {result.item_ids}")
        assert result.profit == instance["optimum"]
        assert_consistent(instance["truck"], instance["pallets"], result)


@pytest.mark.parametrize("instance", instances, ids=[i["name"] for i in instances])
def test_heuristics_feasible_and_dominated(instance):
    for solver in (solve_approximate, solve_hybrid):
        result = solver(instance["truck"], instance["pallets"])
        assert result.profit <= instance["optimum"]
        assert_consistent(instance["truck"], instance["pallets"], result)


def test_reference_selection():
    """Exact, bounded and DP all load pallets 1 and 2."""
    inst = instances[0]
    for solver in EXACT_SOLVERS:
        result = solver(inst["truck"], inst["pallets"])
        assert result == Selection(profit=44, weight=10, item_ids=(1, 2))


def test_equal_profit_prefers_fewer_pallets():
    truck = Truck(max_weight=10, max_pallets=3)
    pallets = make_pallets([(1, 5, 10), (2, 5, 10), (3, 2, 5), (4, 3, 5)])
    # {1,2}, {1,3,4} and {2,3,4} all reach 20
    assert solve_exact(truck, pallets).item_ids == (1, 2)
    assert solve_dp(truck, pallets).item_ids == (1, 2)
    assert solve_bounded(truck, pallets).profit == 20


def test_equal_count_prefers_smaller_ids():
    truck = Truck(max_weight=10, max_pallets=2)
    pallets = make_pallets([(1, 5, 10), (2, 5, 10), (3, 5, 10)])
    assert solve_exact(truck, pallets).item_ids == (1, 2)
    assert solve_dp(truck, pallets).item_ids == (1, 2)


@pytest.mark.parametrize("solver", ALL_SOLVERS, ids=lambda s: s.__name__)
def test_empty_pallet_list(solver):
    result = solver(Truck(max_weight=10, max_pallets=3), [])
    assert result == Selection()


@pytest.mark.parametrize("solver", ALL_SOLVERS, ids=lambda s: s.__name__)
def test_zero_pallet_capacity(solver):
    pallets = instances[0]["pallets"]
    result = solver(Truck(max_weight=10, max_pallets=0), pallets)
    assert result.profit == 0
    assert result.item_ids == ()


@pytest.mark.parametrize("solver", ALL_SOLVERS, ids=lambda s: s.__name__)
def test_zero_weight_capacity(solver):
    result = solver(Truck(max_weight=0, max_pallets=3), instances[0]["pallets"])
    assert result == Selection()


@pytest.mark.parametrize("solver", ALL_SOLVERS, ids=lambda s: s.__name__)
def test_idempotent_and_input_untouched(solver):
    inst = instances[2]
    pallets = list(inst["pallets"])
    first = solver(inst["truck"], pallets)
    second = solver(inst["truck"], pallets)
    assert first == second
    assert pallets == inst["pallets"]


def test_dispatch_by_algorithm():
    inst = instances[0]
    for algorithm in Algorithm:
        by_enum = solve(inst["truck"], inst["pallets"], algorithm)
        by_name = solve(inst["truck"], inst["pallets"], algorithm.value)
        assert by_enum == by_name
        assert by_enum == algorithm.solver(inst["truck"], inst["pallets"])


def test_unknown_algorithm_rejected():
    inst = instances[0]
    with pytest.raises(ValueError):
        solve(inst["truck"], inst["pallets"], "simulated-annealing")
