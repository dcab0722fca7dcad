from pathlib import Path

import pytest

from bess_cashflow import cli

SCENARIOS = Path(__file__).resolve().parents[1] / "bess_cashflow" / "inputs" / "scenarios"


def test_cli_defaults_report(tmp_path, capsys):
    assert cli.main(["--outputs-dir", str(tmp_path)]) == 0
    assert (tmp_path / "summary.json").exists()
    out = capsys.readouterr().out
    assert "IRR" in out and "payback" in out


def test_cli_valid_sensitivity(tmp_path):
    rc = cli.main([
        "--mode", "sensitivity",
        "--config", str(SCENARIOS / "base_case.yaml"),
        "--outputs-dir", str(tmp_path),
        "--format", "csv",
        "--save-annual",
    ])
    assert rc == 0
    assert (tmp_path / "sensitivity.csv").exists()
    assert (tmp_path / "BESS_CashFlow_250kWh_350perKwh.csv").exists()


def test_cli_valid_scenarios(tmp_path):
    in_dir = tmp_path / "sc"
    out_dir = tmp_path / "out"
    in_dir.mkdir()
    # minimal YAML
    (in_dir / "s1.yaml").write_text("storage_capacity_kwh: 500\n", encoding="utf-8")
    rc = cli.main(["--config", str(in_dir), "--outputs-dir", str(out_dir), "--format", "jsonl"])
    assert rc == 0
    assert (out_dir / "scenarios.jsonl").exists()


def test_cli_out_of_range_returns_1(tmp_path, capsys):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("debt_ratio: 0.99\n", encoding="utf-8")
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(tmp_path / "o")]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_cli_strict_unknown_key_returns_2(tmp_path, monkeypatch):
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")
    cfg = tmp_path / "odd.yaml"
    cfg.write_text(
        "storage_capacity_kwh: 250\ncapital_cost_per_kwh: 350\nrevenue_scenario: base\ncolour: red\n",
        encoding="utf-8",
    )
    assert cli.main(["--strict", "--config", str(cfg), "--outputs-dir", str(tmp_path / "o")]) == 2
    assert cli.main(["--relaxed", "--config", str(cfg), "--outputs-dir", str(tmp_path / "o")]) == 0


def test_cli_invalid_mode_exits_2():
    # argparse enforces choices; simulate by calling parse directly and catching SystemExit
    with pytest.raises(SystemExit) as ei:
        cli.parse_args(["--mode", "nope"])
    assert ei.value.code == 2
    assert cli.main(["--mode", "nope"]) == 2
