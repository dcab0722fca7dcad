from __future__ import annotations
import json, os, subprocess, sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
SCENARIO = ROOT / "bess_cashflow" / "inputs" / "scenarios" / "base_case.yaml"

# 250 kWh at 350/kWh, base case, no debt, no aggregator fee
GOLDEN = {
    "total_capex": 87500.0,
    "equity": 87500.0,
    "debt": 0.0,
    "power_kw": 125.0,
    "gross_annual_revenue": 125 * 359.77 * 0.96,
    "annual_om": 1312.5,
    "annual_debt_payment": 0.0,
}


def test_base_case_is_stable(tmp_path):
    assert SCENARIO.exists(), f"Missing scenario {SCENARIO}"

    # Run via CLI to exercise the public surface and artifact writing
    outdir = tmp_path / "_out_golden_test"
    env = os.environ.copy()
    env["VALIDATION_MODE"] = "relaxed"  # Force non-strict for reproducibility
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    cmd = [
        sys.executable, "-m", "bess_cashflow",
        "--mode", "sensitivity",
        "--config", str(SCENARIO),
        "--outputs-dir", str(outdir),
        "--format", "csv",
        "--save-annual",
    ]
    subprocess.run(cmd, check=True, env=env, cwd=ROOT)

    # Artifacts must exist
    sj = outdir / "summary.json"
    assert sj.exists() and sj.stat().st_size > 0
    table = outdir / "BESS_CashFlow_250kWh_350perKwh.csv"
    assert table.exists()

    got = json.loads(sj.read_text(encoding="utf-8"))
    for k, want in GOLDEN.items():
        assert got[k] == pytest.approx(want, abs=1e-6), f"{k} drifted: got={got[k]} want={want}"

    y1 = 43172.4 - 1312.5
    y2 = 43172.4 * 0.98 - 1312.5
    y3 = 43172.4 * 0.98 ** 2 - 1312.5
    assert got["payback_years"] == pytest.approx(2 + (87500.0 - y1 - y2) / y3, abs=1e-6)
    assert got["irr_plausible"] is True
    assert len(got["sensitivity"]) == 5

    lines = table.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Year,Revenue,Aggregator Fee,OPEX,EBITDA,Debt Service,Net Cash Flow,Cumulative"
    assert lines[1].split(",")[:2] == ["0", "0"]
    assert lines[1].split(",")[6] == "-87500"
    assert lines[2].split(",")[1] == "43172"
