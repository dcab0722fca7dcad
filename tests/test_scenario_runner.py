import json
from pathlib import Path

import pandas as pd
import pytest

from bess_cashflow.scenario_runner import cashflow_filename, run_dir, run_inputs
from bess_cashflow.types import EXPORT_HEADER, ProjectInputs

SCENARIOS = Path(__file__).resolve().parents[1] / "bess_cashflow" / "inputs" / "scenarios"


def test_run_inputs_report_summary():
    s = run_inputs(ProjectInputs(250, 350))
    assert s["total_capex"] == pytest.approx(87500.0)
    assert s["project_life_years"] == 12
    assert s["debt_schedule"] == []
    assert "sensitivity" not in s
    assert s["market_context"]["dr_periods"] == 163


def test_run_inputs_sensitivity_mode():
    s = run_inputs(ProjectInputs(250, 350), mode="sensitivity", capex_axis=[300, 400])
    assert [p["capital_cost_per_kwh"] for p in s["sensitivity"]] == [300.0, 400.0]


def test_run_inputs_unknown_mode():
    with pytest.raises(SystemExit):
        run_inputs(ProjectInputs(250, 350), mode="montecarlo")


def test_run_file_writes_cashflow_csv_with_export_header(tmp_path):
    res = run_dir(SCENARIOS / "base_case.yaml", tmp_path, save_annual=True)
    assert res.summary_path.exists()
    assert res.results_path.name == "BESS_CashFlow_250kWh_350perKwh.csv"
    first = res.results_path.read_text(encoding="utf-8").splitlines()[0]
    assert first == ",".join(EXPORT_HEADER)
    df = pd.read_csv(res.results_path)
    assert df.loc[0, "Net Cash Flow"] == -87500
    assert len(df) == 13


def test_run_file_jsonl_and_sensitivity(tmp_path):
    res = run_dir(SCENARIOS / "levered_upside.yaml", tmp_path, mode="sensitivity", fmt="jsonl", save_annual=True)
    lines = res.results_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 13
    assert set(json.loads(lines[0])) == set(EXPORT_HEADER)
    pts = [json.loads(x) for x in res.sensitivity_path.read_text(encoding="utf-8").splitlines()]
    assert [p["capital_cost_per_kwh"] for p in pts] == [300.0, 325.0, 350.0, 375.0, 400.0]
    assert res.summary["aggregator_fee_enabled"] is True
    assert len(res.summary["debt_schedule"]) == 7


def test_run_without_config_uses_defaults(tmp_path):
    res = run_dir(None, tmp_path)
    assert res.summary["name"] == "default"
    assert res.summary["storage_capacity_kwh"] == 250.0


def test_run_directory_writes_combined_table(tmp_path):
    res = run_dir(SCENARIOS, tmp_path / "out", fmt="csv")
    assert res.summary["scenarios"] == 2
    combined = pd.read_csv(res.results_path)
    assert sorted(combined["name"]) == ["base_case", "levered_upside"]
    assert (tmp_path / "out" / "base_case" / "summary.json").exists()


def test_run_empty_directory_raises(tmp_path):
    with pytest.raises(ValueError):
        run_dir(tmp_path, tmp_path / "out")


def test_out_of_range_config_raises(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("debt_ratio: 0.99\n", encoding="utf-8")
    with pytest.raises(ValueError, match="outside allowed range"):
        run_dir(cfg, tmp_path / "out")


def test_cashflow_filename():
    assert cashflow_filename(ProjectInputs(500, 375.5)) == "BESS_CashFlow_500kWh_375.5perKwh.csv"


@pytest.mark.parametrize(
    "capacity,cost,expected",
    [
        (1234567.0, 350.0, "BESS_CashFlow_1234567kWh_350perKwh.csv"),
        (10_000_000.0, 99999.0, "BESS_CashFlow_10000000kWh_99999perKwh.csv"),
        (250.0, 333.1234567, "BESS_CashFlow_250kWh_333.1234567perKwh.csv"),
    ],
)
def test_cashflow_filename_keeps_every_digit(capacity, cost, expected):
    assert cashflow_filename(ProjectInputs(capacity, cost)) == expected
