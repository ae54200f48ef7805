"""Pallet loading solver CLI.

Loads a truck and its candidate pallets and runs one or all of the
solvers. The truck has a weight capacity and a pallet-count capacity;
the goal is the most profitable feasible load.

Usage:
    python -m pallet_loading.main demo
    python -m pallet_loading.main solve --dataset 01 --algorithm dp
    python -m pallet_loading.main compare --dataset 01 --skip exact
    python -m pallet_loading.main compare --json instance.json --with-ip
    python -m pallet_loading.main generate --dataset 05 --pallets 40 --seed 7
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

from .config import RunConfig
from .dataparser import load_dataset, load_instance_json, write_dataset, generate_instance
from .logger import create_logger
from .models import Pallet, Truck, CapacityError
from .results import ResultsTable, timed_run
from .solvers import Algorithm, solve_ip


def create_sample_instance():
    """Return a small sample instance (truck, pallets)."""
    weights = [6, 4, 5, 3, 7, 2, 8, 5]
    profits = [30, 14, 16, 9, 28, 5, 31, 20]
    pallets = [Pallet(id=i + 1, weight=weights[i], profit=profits[i])
               for i in range(len(weights))]
    truck = Truck(max_weight=20, max_pallets=4)
    return truck, pallets


def print_instance(truck, pallets):
    print(f"Truck: max_weight={truck.max_weight}, max_pallets={truck.max_pallets}, "
          f"{len(pallets)} candidate pallets")
    for p in pallets:
        print(f"  pallet {p.id}: weight={p.weight}, profit={p.profit}, ratio={p.ratio:.2f}")


def _load(args, run_config):
    if args.json:
        return Path(args.json).stem, load_instance_json(args.json)
    data_dir = Path(args.data_dir) if args.data_dir else run_config.data_dir
    return args.dataset, load_dataset(data_dir, args.dataset)


def _logger_for(name, algorithm, run_config):
    if not run_config.enable_logging:
        return None
    return create_logger(instance_name=f"{name}_{algorithm.value}", log_dir=str(run_config.log_dir))


def _run(name, truck, pallets, algorithm, run_config):
    logger = _logger_for(name, algorithm, run_config)
    try:
        return timed_run(name, truck, pallets, algorithm, config=run_config.solver, logger=logger)
    finally:
        if logger is not None:
            logger.close()


def cmd_demo(args, run_config):
    truck, pallets = create_sample_instance()
    print_instance(truck, pallets)
    print()
    table = ResultsTable()
    for algorithm in Algorithm:
        table.add(timed_run("demo", truck, pallets, algorithm, config=run_config.solver))
    print(table.summary().to_string(index=False))
    return 0


def cmd_solve(args, run_config):
    name, (truck, pallets) = _load(args, run_config)
    result = _run(name, truck, pallets, Algorithm(args.algorithm), run_config)
    print(f"Dataset {name}: {len(pallets)} pallets, max_weight={truck.max_weight}, "
          f"max_pallets={truck.max_pallets}")
    print(f"{result.algorithm}: profit={result.profit} weight={result.weight} "
          f"pallets={result.count} ({result.runtime:.4f}s)")
    print(f"  ids: {list(result.item_ids)}")
    return 0


def cmd_compare(args, run_config):
    name, (truck, pallets) = _load(args, run_config)
    skip = set(args.skip or [])
    table = ResultsTable()
    for algorithm in Algorithm:
        if algorithm.value in skip:
            continue
        try:
            table.add(_run(name, truck, pallets, algorithm, run_config))
        except CapacityError as exc:
            print(f"{algorithm.value}: skipped ({exc})")

    if args.with_ip:
        try:
            ip = solve_ip(truck, pallets, time_limit=args.time_limit)
        except RuntimeError as exc:
            print(f"Gurobi reference skipped: {exc}")
        else:
            if 'selection' in ip:
                print(f"Gurobi reference: profit={ip['selection'].profit}")
            else:
                print("Gurobi did not return a solution:", ip.get('message'))

    print(table.summary().to_string(index=False))
    if args.output:
        path = table.to_csv(args.output)
        print(f"Results saved to: {path}")
    elif args.save:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        path = table.to_csv(run_config.results_dir / f"compare_{name}_{timestamp}.csv")
        print(f"Results saved to: {path}")
    return 0


def cmd_generate(args, run_config):
    truck, pallets = generate_instance(args.pallets, seed=args.seed)
    data_dir = Path(args.data_dir) if args.data_dir else run_config.data_dir
    write_dataset(data_dir, args.dataset, truck, pallets)
    print(f"Wrote dataset {args.dataset} ({len(pallets)} pallets) to {data_dir}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description='Select the most profitable load of pallets for a truck',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Dataset files are looked up in --data-dir (default: ./datasets):
  TruckAndPallets_<X>.csv and Pallets_<X>.csv
        """
    )
    parser.add_argument('--base-dir', type=str, default='.',
                        help='Root for datasets/, results/ and logs/ (default: .)')
    parser.add_argument('--log', action='store_true',
                        help='Write per-run log and metrics files to logs/')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('demo', help='Run every solver on a built-in sample instance')

    def add_source(p):
        src = p.add_mutually_exclusive_group(required=True)
        src.add_argument('--dataset', type=str, help='Dataset identifier <X>')
        src.add_argument('--json', type=str, help='Path to a JSON instance')
        p.add_argument('--data-dir', type=str, default=None,
                       help='Directory with the dataset CSV files')

    p_solve = sub.add_parser('solve', help='Run one solver')
    add_source(p_solve)
    p_solve.add_argument('--algorithm', type=str, default='dp',
                         choices=[a.value for a in Algorithm])

    p_compare = sub.add_parser('compare', help='Run all solvers and compare them')
    add_source(p_compare)
    p_compare.add_argument('--skip', nargs='*', choices=[a.value for a in Algorithm],
                           help='Solvers to leave out (e.g. exact on large instances)')
    p_compare.add_argument('--with-ip', action='store_true',
                           help='Also solve the integer program with Gurobi')
    p_compare.add_argument('--time-limit', type=float, default=None,
                           help='Gurobi time limit in seconds')
    p_compare.add_argument('--output', type=str, default=None, help='CSV file for the results')
    p_compare.add_argument('--save', action='store_true',
                           help='Save the results to a timestamped CSV in results/')

    p_gen = sub.add_parser('generate', help='Write a random dataset')
    p_gen.add_argument('--dataset', type=str, required=True)
    p_gen.add_argument('--pallets', type=int, default=40)
    p_gen.add_argument('--seed', type=int, default=None)
    p_gen.add_argument('--data-dir', type=str, default=None)

    return parser


COMMANDS = {
    'demo': cmd_demo,
    'solve': cmd_solve,
    'compare': cmd_compare,
    'generate': cmd_generate,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    run_config = RunConfig.from_base_dir(args.base_dir)
    run_config.enable_logging = args.log
    try:
        return COMMANDS[args.command](args, run_config)
    except (FileNotFoundError, ValueError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
