"""Logging system for the pallet loading solvers.

This module provides structured logging for tracking solver performance,
including runtime metrics, search-tree statistics, bound values and
incumbent improvements. Solvers default to NoOpLogger, so nothing is
written unless a caller passes a SolverLogger.
"""

import logging
import json
import time
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional


class SolverLogger:
    """Logger for a single solver run with performance metrics.

    Tracks:
    - Standard log messages (debug, info, warning, error)
    - Search metrics (nodes explored, pruned, leaves evaluated)
    - Bound computations and incumbent improvements
    - DP table size and local search sweeps
    """

    def __init__(self, log_dir: str = "logs", instance_name: str = "default",
                 console_level: int = logging.INFO):
        """Initialize the logger.

        Args:
            log_dir: Directory for log files
            instance_name: Name of the instance being solved
            console_level: Level of messages echoed to the console
        """
        self.instance_name = instance_name
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_id = f"{instance_name}_{self.timestamp}"

        self.metrics = {}
        self._reset_metrics()

        self._setup_file_logger(console_level)
        self.metrics_file = self.log_dir / f"{self.run_id}_metrics.json"

        self.logger.info(f"Initialized logger for instance: {instance_name}")
        self.logger.info(f"Run ID: {self.run_id}")

    def _reset_metrics(self):
        self.metrics = {
            "instance_name": self.instance_name,
            "timestamp": self.timestamp,
            "algorithm": None,
            "start_time": None,
            "end_time": None,
            "total_runtime": None,
            "nodes_explored": 0,
            "nodes_pruned": 0,
            "nodes_evaluated": 0,  # leaves compared against the incumbent
            "incumbent_updates": [],
            "bound_computations": 0,
            "pruning_reasons": {},
            "dp_cells": None,
            "local_search_sweeps": 0,
        }

    def _setup_file_logger(self, console_level):
        """Setup file and console handlers."""
        log_file = self.log_dir / f"{self.run_id}.log"

        self.logger = logging.getLogger(f"pallet_loading.{self.run_id}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
        self.logger.addHandler(console_handler)

    def start_run(self, algorithm: str, problem_data: Optional[Dict[str, Any]] = None):
        """Mark the start of a solver run.

        Args:
            algorithm: Name of the solver being run
            problem_data: Dictionary with instance characteristics
                          (n_pallets, max_weight, max_pallets)
        """
        self._reset_metrics()
        self.metrics["algorithm"] = algorithm
        self.metrics["start_time"] = time.time()
        if problem_data:
            self.metrics["problem_data"] = problem_data
        self.logger.info("=" * 60)
        self.logger.info(f"Starting solver: {algorithm}")
        if problem_data:
            self.logger.info(f"Problem: {problem_data}")
        self.logger.info("=" * 60)

    def end_run(self, final_result: Optional[Dict[str, Any]] = None):
        """Mark the end of a solver run and save metrics.

        Args:
            final_result: Dictionary with final selection info
        """
        self.metrics["end_time"] = time.time()
        self.metrics["total_runtime"] = self.metrics["end_time"] - self.metrics["start_time"]
        if final_result:
            self.metrics["final_result"] = final_result

        self._save_metrics()

        self.logger.info("=" * 60)
        self.logger.info(f"{self.metrics['algorithm']} completed")
        self.logger.info(f"Total runtime: {self.metrics['total_runtime']:.3f} seconds")
        if self.metrics['nodes_explored'] > 0:
            self.logger.info(f"Nodes explored: {self.metrics['nodes_explored']}")
            self.logger.info(f"Nodes pruned: {self.metrics['nodes_pruned']}")
            self.logger.info(f"Leaves evaluated: {self.metrics['nodes_evaluated']}")
            prune_rate = 100 * self.metrics['nodes_pruned'] / self.metrics['nodes_explored']
            self.logger.info(f"Pruning rate: {prune_rate:.2f}%")
        if final_result:
            self.logger.info(f"Profit: {final_result.get('profit')}")
        self.logger.info("=" * 60)

    def log_node_visit(self, depth: int, profit: int, weight: int):
        """Log visiting a node in the search tree."""
        self.metrics["nodes_explored"] += 1
        self.logger.debug(f"Node {self.metrics['nodes_explored']}: "
                          f"depth={depth} profit={profit} weight={weight}")

    def log_node_pruned(self, reason: str, depth: Optional[int] = None):
        """Log pruning a node.

        Args:
            reason: Why the node was pruned (e.g. "bound_dominated")
            depth: Optional depth of the pruned node
        """
        self.metrics["nodes_pruned"] += 1
        reasons = self.metrics["pruning_reasons"]
        reasons[reason] = reasons.get(reason, 0) + 1
        if depth is not None:
            self.logger.debug(f"Pruned ({reason}) at depth {depth}")
        else:
            self.logger.debug(f"Node pruned: {reason}")

    def log_node_evaluated(self, profit: int):
        """Log evaluating a leaf against the incumbent."""
        self.metrics["nodes_evaluated"] += 1
        self.logger.debug(f"Evaluated leaf: profit={profit}")

    def log_incumbent_update(self, profit: int, selection: list):
        """Log finding a new best selection.

        Args:
            profit: Profit of the new incumbent
            selection: Pallet ids of the new incumbent
        """
        self.metrics["incumbent_updates"].append({
            "profit": profit,
            "selection": list(selection),
            "node_count": self.metrics["nodes_explored"],
            "timestamp": time.time() - (self.metrics["start_time"] or time.time()),
        })
        self.logger.info(f"NEW INCUMBENT: profit={profit} selection={list(selection)}")

    def log_bound_computation(self, bound_value: float, depth: int):
        """Log computing an upper bound."""
        self.metrics["bound_computations"] += 1
        self.logger.debug(f"Bound computed: {bound_value:.2f} at depth {depth}")

    def log_dp_table(self, rows: int, cols: int):
        """Log the size of an allocated DP table."""
        self.metrics["dp_cells"] = rows * cols
        self.logger.info(f"DP table: {rows} x {cols} = {rows * cols} cells")

    def log_sweep(self, sweep: int, profit: int, flips: int):
        """Log the end of one local search sweep."""
        self.metrics["local_search_sweeps"] = sweep
        self.logger.debug(f"Sweep {sweep}: profit={profit} flips={flips}")

    def _save_metrics(self):
        """Save metrics dictionary to JSON file."""
        with open(self.metrics_file, 'w') as f:
            json.dump(self.metrics, f, indent=2)
        self.logger.info(f"Metrics saved to: {self.metrics_file}")

    def get_metrics(self) -> Dict[str, Any]:
        """Get a copy of the current metrics dictionary."""
        return self.metrics.copy()

    def debug(self, msg: str):
        self.logger.debug(msg)

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str):
        self.logger.error(msg)

    def close(self):
        """Detach and close the file and console handlers."""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()


class NoOpLogger:
    """Drop-in replacement for SolverLogger that records nothing."""

    def start_run(self, algorithm, problem_data=None):
        pass

    def end_run(self, final_result=None):
        pass

    def log_node_visit(self, depth, profit, weight):
        pass

    def log_node_pruned(self, reason, depth=None):
        pass

    def log_node_evaluated(self, profit):
        pass

    def log_incumbent_update(self, profit, selection):
        pass

    def log_bound_computation(self, bound_value, depth):
        pass

    def log_dp_table(self, rows, cols):
        pass

    def log_sweep(self, sweep, profit, flips):
        pass

    def get_metrics(self):
        return {}

    def debug(self, msg):
        pass

    def info(self, msg):
        pass

    def warning(self, msg):
        pass

    def error(self, msg):
        pass

    def close(self):
        pass


def create_logger(instance_name: str = "default", log_dir: str = "logs") -> SolverLogger:
    """Factory function to create a SolverLogger.

    Args:
        instance_name: Name of the problem instance
        log_dir: Directory for log files

    Returns:
        Configured SolverLogger instance
    """
    return SolverLogger(log_dir=log_dir, instance_name=instance_name)
