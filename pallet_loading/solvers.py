"""Solver registry and the Gurobi reference model.

This module contains:
- Algorithm: The five pallet loading solvers, selectable by name
- solve: Dispatch a tagged algorithm to its solver function
- solve_ip: Binary integer program for the same problem, solved with Gurobi
  and used as an independent check of the combinatorial solvers
"""
import sys
from enum import Enum

try:
    import gurobipy as gp
    from gurobipy import GRB
except Exception:
    gp = None
    GRB = None

from .bnb import solve_exact, solve_bounded
from .heuristics import solve_approximate, solve_hybrid
from .knapsack_dp import solve_dp
from .models import Selection, Truck, Pallet


class Algorithm(Enum):
    EXACT = "exact"
    BOUNDED = "bounded"
    DP = "dp"
    APPROXIMATE = "approximate"
    HYBRID = "hybrid"

    @property
    def solver(self):
        return _SOLVERS[self]

    @property
    def configurable(self):
        """Whether the solver accepts a SolverConfig."""
        return self in (Algorithm.DP, Algorithm.HYBRID)


_SOLVERS = {
    Algorithm.EXACT: solve_exact,
    Algorithm.BOUNDED: solve_bounded,
    Algorithm.DP: solve_dp,
    Algorithm.APPROXIMATE: solve_approximate,
    Algorithm.HYBRID: solve_hybrid,
}


def solve(truck, pallets, algorithm, *, config=None, logger=None):
    """Run one solver on an instance.

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Sequence of pallets
        algorithm: Algorithm member or its name (e.g. "dp")
        config: Optional SolverConfig, passed to solvers that use one
        logger: Optional SolverLogger

    Returns:
        Selection returned by the chosen solver
    """
    algorithm = Algorithm(algorithm)
    if algorithm.configurable:
        return algorithm.solver(truck, pallets, config=config, logger=logger)
    return algorithm.solver(truck, pallets, logger=logger)


def solve_ip(truck, pallets, time_limit=None, verbose=False):
    """Solve the pallet loading problem as a binary program with Gurobi.

    max sum(profit[i] * x[i])
    s.t. sum(weight[i] * x[i]) <= max_weight
         sum(x[i])             <= max_pallets
         x[i] in {0, 1}

    Args:
        truck: Truck with weight and pallet-count capacities
        pallets: Sequence of pallets
        time_limit: Optional time limit in seconds for Gurobi
        verbose: Whether to show Gurobi output

    Returns:
        dict with keys:
            - status: Gurobi solution status
            - obj: Objective value (total profit)
            - selection: Selection of the loaded pallets
            - model: Gurobi model object

    Raises:
        RuntimeError: If gurobipy is not available
    """
    if gp is None:
        raise RuntimeError("gurobipy is not available. Install gurobipy into the active Python environment.")

    pallets = list(pallets)
    n = len(pallets)
    model = gp.Model("pallet_loading")
    model.setParam('OutputFlag', 1 if verbose else 0)
    if time_limit is not None:
        model.setParam('TimeLimit', time_limit)

    # Decision variables: x[i] = 1 if pallet i is loaded
    x = {i: model.addVar(vtype=GRB.BINARY, name=f"x_{pallets[i].id}") for i in range(n)}
    model.update()

    model.addConstr(gp.quicksum(pallets[i].weight * x[i] for i in range(n)) <= truck.max_weight,
                    name="weight")
    model.addConstr(gp.quicksum(x[i] for i in range(n)) <= truck.max_pallets, name="count")

    model.setObjective(gp.quicksum(pallets[i].profit * x[i] for i in range(n)), GRB.MAXIMIZE)

    model.optimize()

    status = model.Status
    if status == GRB.OPTIMAL or status == GRB.TIME_LIMIT or status == GRB.SUBOPTIMAL:
        loaded = [pallets[i] for i in range(n) if x[i].X > 0.5]
        return {"status": status, "obj": model.ObjVal,
                "selection": Selection.from_pallets(loaded), "model": model}
    else:
        return {"status": status, "message": "No feasible solution or model failed"}


if __name__ == "__main__":
    args = sys.argv[1:]

    # python -m pallet_loading.solvers test-ip
    if len(args) >= 1 and args[0] in ("test-ip", "ip"):
        print("Testing IP reference model...")
        truck = Truck(max_weight=10, max_pallets=2)
        pallets = [Pallet(1, 6, 30), Pallet(2, 4, 14), Pallet(3, 5, 16)]
        result = solve_ip(truck, pallets, verbose=True)
        print("IP result:", result.get("selection"))
        print("DP result:", solve_dp(truck, pallets))
        sys.exit(0)

    print("No test specified. Use 'test-ip' as argument.")
