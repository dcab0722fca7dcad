import os
import subprocess
import sys
from pathlib import Path
import pytest

from bess_cashflow.scenario_runner import run_dir

ROOT = Path(__file__).resolve().parents[2]

MIN_CFG = """\
financing:
  discount_rate: 0.08
  debt_ratio: 0.0
"""


def _write(p: Path, name: str, text: str) -> Path:
    f = p / name
    f.write_text(text, encoding="utf-8")
    return f


def test_strict_requires_core_inputs_in_runner(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "partial.yaml", MIN_CFG)
    out = tmp_path / "out"
    monkeypatch.setenv("VALIDATION_MODE", "strict")
    with pytest.raises(SystemExit):
        run_dir(cfg, out, mode="report", fmt="csv", save_annual=False)


def test_relaxed_fills_defaults_in_runner(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "partial.yaml", MIN_CFG)
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")
    res = run_dir(cfg, tmp_path / "out")
    assert res.summary["storage_capacity_kwh"] == 250.0


def test_cli_flag_requires_core_inputs(tmp_path: Path):
    cfg = _write(tmp_path, "partial.yaml", MIN_CFG)
    out = tmp_path / "out"
    out.mkdir(parents=True, exist_ok=True)
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    with pytest.raises(subprocess.CalledProcessError):
        subprocess.check_call(
            [sys.executable, "-m", "bess_cashflow", "--mode", "report", "--config", str(cfg),
             "--outputs-dir", str(out), "--strict"],
            env=env,
            cwd=ROOT,
        )
