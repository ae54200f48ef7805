"""Tests for the results table and the command line."""
import json

import pandas as pd
import pytest

from pallet_loading import main as cli
from pallet_loading.main import main, create_sample_instance
from pallet_loading.results import ResultsTable, RunResult, timed_run
from pallet_loading.solvers import Algorithm


def _result(dataset, algorithm, profit):
    return RunResult(dataset=dataset, algorithm=algorithm, profit=profit, weight=1,
                     count=1, item_ids=(1,), runtime=0.01)


def test_timed_run_records_selection():
    truck, pallets = create_sample_instance()
    result = timed_run("sample", truck, pallets, "dp")
    assert result.algorithm == "dp"
    assert result.count == len(result.item_ids)
    assert result.runtime >= 0.0


def test_summary_gaps():
    table = ResultsTable()
    table.add(_result("a", "dp", 50))
    table.add(_result("a", "approximate", 40))
    table.add(_result("b", "dp", 0))
    summary = table.summary()
    row = summary[(summary.dataset == "a") & (summary.algorithm == "approximate")].iloc[0]
    assert row.best_profit == 50
    assert row.gap == 10
    assert row.gap_pct == pytest.approx(20.0)
    assert summary[summary.dataset == "b"].iloc[0].gap_pct == 0.0


def test_empty_summary():
    summary = ResultsTable().summary()
    assert summary.empty
    assert "gap" in summary.columns


def test_to_csv(tmp_path):
    table = ResultsTable()
    table.add(RunResult("a", "dp", 44, 10, 2, (1, 2), 0.1))
    path = table.to_csv(tmp_path / "out" / "results.csv")
    df = pd.read_csv(path)
    assert len(table) == 1
    assert df.loc[0, "item_ids"] == "1 2"
    assert df.loc[0, "profit"] == 44


def test_cli_demo(capsys):
    assert main(["demo"]) == 0
    out = capsys.readouterr().out
    for algorithm in Algorithm:
        assert algorithm.value in out


def test_cli_generate_solve_compare(tmp_path, capsys):
    base = ["--base-dir", str(tmp_path)]
    assert main(base + ["generate", "--dataset", "07", "--pallets", "12", "--seed", "3"]) == 0
    assert (tmp_path / "datasets" / "Pallets_07.csv").exists()

    assert main(base + ["solve", "--dataset", "07", "--algorithm", "bounded"]) == 0
    assert "bounded: profit=" in capsys.readouterr().out

    output = tmp_path / "compare.csv"
    assert main(base + ["compare", "--dataset", "07", "--output", str(output)]) == 0
    df = pd.read_csv(output)
    assert sorted(df["algorithm"]) == sorted(a.value for a in Algorithm)
    exact_profit = df.loc[df.algorithm == "exact", "profit"].iloc[0]
    assert (df.loc[df.algorithm.isin(["bounded", "dp", "hybrid"]), "profit"] == exact_profit).all()


def test_cli_compare_skip_and_save(tmp_path):
    base = ["--base-dir", str(tmp_path)]
    main(base + ["generate", "--dataset", "x", "--pallets", "40", "--seed", "1"])
    assert main(base + ["compare", "--dataset", "x", "--skip", "exact", "bounded", "--save"]) == 0
    saved = list((tmp_path / "results").glob("compare_x_*.csv"))
    assert len(saved) == 1
    assert set(pd.read_csv(saved[0])["algorithm"]) == {"dp", "approximate", "hybrid"}


def test_cli_json_with_logging(tmp_path):
    path = tmp_path / "inst.json"
    path.write_text(json.dumps({
        "truck": {"max_weight": 10, "max_pallets": 2},
        "pallets": [{"id": 1, "weight": 6, "profit": 30},
                    {"id": 2, "weight": 4, "profit": 14},
                    {"id": 3, "weight": 5, "profit": 16}],
    }))
    assert main(["--base-dir", str(tmp_path), "--log", "solve", "--json", str(path),
                 "--algorithm", "exact"]) == 0
    metrics_files = list((tmp_path / "logs").glob("inst_exact_*_metrics.json"))
    assert len(metrics_files) == 1
    metrics = json.loads(metrics_files[0].read_text())
    assert metrics["final_result"]["profit"] == 44
    assert metrics["nodes_explored"] > 0


def test_cli_missing_dataset(tmp_path, capsys):
    assert main(["--base-dir", str(tmp_path), "solve", "--dataset", "nope"]) == 1
    assert "Error" in capsys.readouterr().err


def test_cli_compare_keeps_table_without_gurobi(tmp_path, monkeypatch, capsys):
    def unavailable(*args, **kwargs):
        raise RuntimeError("gurobipy is not available")

    monkeypatch.setattr(cli, "solve_ip", unavailable)
    base = ["--base-dir", str(tmp_path)]
    assert main(base + ["generate", "--dataset", "g", "--pallets", "8", "--seed", "1"]) == 0
    output = tmp_path / "with_ip.csv"
    assert main(base + ["compare", "--dataset", "g", "--with-ip", "--output", str(output)]) == 0
    assert "Gurobi reference skipped" in capsys.readouterr().out
    assert len(pd.read_csv(output)) == len(Algorithm)


def test_cli_compare_closes_log_files(tmp_path, monkeypatch):
    created = []
    create_logger = cli.create_logger

    def tracking_logger(**kwargs):
        logger = create_logger(**kwargs)
        created.append(logger)
        return logger

    monkeypatch.setattr(cli, "create_logger", tracking_logger)
    base = ["--base-dir", str(tmp_path)]
    assert main(base + ["generate", "--dataset", "l", "--pallets", "8", "--seed", "2"]) == 0
    assert main(base + ["--log", "compare", "--dataset", "l"]) == 0
    assert len(created) == len(Algorithm)
    assert all(logger.logger.handlers == [] for logger in created)
