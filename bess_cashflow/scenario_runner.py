# bess_cashflow/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence, Tuple
import json
import logging
import os

import pandas as pd

from .config import (
    DEFAULTS,
    capex_axis_from_config,
    constants_from_config,
    inputs_from_config,
)
from .constants import DEFAULT_CAPEX_AXIS, FINANCIAL_CONSTANTS, FinancialConstants
from .finance.cashflow import project
from .finance.debt import amortization_schedule
from .finance.sensitivity import sweep, to_frame as sensitivity_frame
from .types import EXPORT_HEADER, ProjectInputs, ProjectionResult, SensitivityPoint
from .validate import (
    load_params_from_file,
    validate_params_dict,
    validate_sensitivity_dict,
)

logger = logging.getLogger(__name__)

MODES = ("report", "sensitivity")
FORMATS = ("csv", "jsonl")

# Keys that must be spelled out in a scenario file under strict validation.
STRICT_REQUIRED = ("storage_capacity_kwh", "capital_cost_per_kwh", "revenue_scenario")


def _env_strict() -> bool:
    return os.getenv("VALIDATION_MODE", "relaxed").lower() == "strict"


def _require_core_keys_if_strict(params: Dict[str, Any], where: str = "") -> None:
    if not _env_strict():
        return
    missing = [k for k in STRICT_REQUIRED if k not in params]
    if missing:
        msg = f"strict mode requires {missing} in config"
        if where:
            msg = f"{msg} ({where})"
        raise SystemExit(msg)


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None
    sensitivity_path: Optional[Path] = None
    projection: Optional[ProjectionResult] = None


def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row) + "\n")


def _plain_number(x: float) -> str:
    # whole numbers drop the ".0"; no exponent notation, no truncation
    x = float(x)
    return str(int(x)) if x.is_integer() else repr(x)


def cashflow_filename(inputs: ProjectInputs, fmt: str = "csv") -> str:
    cap = _plain_number(inputs.storage_capacity_kwh)
    cost = _plain_number(inputs.capital_cost_per_kwh)
    return f"BESS_CashFlow_{cap}kWh_{cost}perKwh.{fmt}"


def write_cashflow_table(result: ProjectionResult, path: Path, fmt: str = "csv") -> Path:
    """Rounded cash-flow table; CSV columns follow EXPORT_HEADER exactly."""
    if fmt == "csv":
        result.to_frame().to_csv(path, index=False)
    elif fmt == "jsonl":
        _write_jsonl(path, [dict(zip(EXPORT_HEADER, y.as_row())) for y in result.display_years])
    else:
        raise SystemExit(f"unknown fmt: {fmt}")
    return path


def _run(
    inputs: ProjectInputs,
    mode: str,
    constants: FinancialConstants,
    capex_axis: Optional[Sequence[float]],
) -> Tuple[Dict[str, Any], ProjectionResult]:
    if mode not in MODES:
        raise SystemExit(f"unknown mode: {mode}")

    result = project(inputs, constants)
    if not result.irr_plausible:
        logger.warning("IRR %.1f%% is outside the plausible range; treat with care", result.irr_percent)

    summary = result.summary()
    summary["debt_schedule"] = amortization_schedule(
        result.debt, inputs.interest_rate, inputs.loan_tenor_years
    )
    if mode == "sensitivity":
        axis = list(capex_axis) if capex_axis is not None else list(DEFAULT_CAPEX_AXIS)
        summary["sensitivity"] = [p.to_dict() for p in sweep(inputs, axis, constants)]
    return summary, result


def run_inputs(
    inputs: ProjectInputs,
    *,
    mode: str = "report",
    constants: FinancialConstants = FINANCIAL_CONSTANTS,
    capex_axis: Optional[Sequence[float]] = None,
) -> Dict[str, Any]:
    """Pure part of a run: project (and sweep) and return a JSON-friendly summary."""
    return _run(inputs, mode, constants, capex_axis)[0]


def validate_and_run(
    mode: str,
    params: Dict[str, Any],
    sens: Dict[str, Any],
    *,
    where: str = "<mem>",
) -> Tuple[Dict[str, Any], ProjectionResult]:
    validate_params_dict(params, mode="strict" if _env_strict() else "relaxed", where=where)
    validate_sensitivity_dict(sens, where=where)
    inputs = inputs_from_config(params)
    constants = constants_from_config(params)
    summary, result = _run(inputs, mode, constants, capex_axis_from_config(sens))
    summary["name"] = str(params.get("name") or Path(where).stem)
    return summary, result


def run_file(
    config: str | Path | None,
    out_dir: str | Path,
    *,
    mode: str = "report",
    fmt: str = "csv",
    save_annual: bool = False,
) -> RunResult:
    """Run one scenario file (or the built-in defaults when `config` is empty)."""
    if fmt not in FORMATS:
        raise SystemExit(f"unknown fmt: {fmt}")
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    if config:
        cfg_path = Path(config)
        params, sens = load_params_from_file(cfg_path)
        where = str(cfg_path)
        _require_core_keys_if_strict(params, where)
    else:
        params, sens, where = dict(DEFAULTS), {}, "default"

    summary, result = validate_and_run(mode, params, sens, where=where)
    logger.info("%s: npv=%.2f irr=%.4f payback=%.2f", where, result.npv, result.irr, result.payback_years)

    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    results_path: Optional[Path] = None
    if save_annual:
        results_path = write_cashflow_table(result, out / cashflow_filename(result.inputs, fmt), fmt)

    sensitivity_path: Optional[Path] = None
    if mode == "sensitivity":
        sensitivity_path = out / f"sensitivity.{fmt}"
        if fmt == "csv":
            points = [SensitivityPoint(**p) for p in summary["sensitivity"]]
            sensitivity_frame(points).to_csv(sensitivity_path, index=False)
        else:
            _write_jsonl(sensitivity_path, summary["sensitivity"])

    return RunResult(
        summary=summary,
        summary_path=summary_path,
        results_path=results_path,
        sensitivity_path=sensitivity_path,
        projection=result,
    )


def run_dir(
    config: str | Path | None,
    out_dir: str | Path,
    *,
    mode: str = "report",
    fmt: str = "csv",
    save_annual: bool = False,
) -> RunResult:
    """
    Accepts a single YAML file or a directory of them. Directory mode runs every
    scenario into its own sub-folder and writes a combined scenarios.{fmt}.
    """
    cfg_path = Path(config) if config else None
    if cfg_path is None or not cfg_path.is_dir():
        return run_file(cfg_path, out_dir, mode=mode, fmt=fmt, save_annual=save_annual)

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    files = sorted(f for f in cfg_path.glob("*.y*ml") if f.is_file())
    if not files:
        raise ValueError(f"{cfg_path}: no scenario files found")

    rows: List[Dict[str, Any]] = []
    for f in files:
        res = run_file(f, out / f.stem, mode=mode, fmt=fmt, save_annual=save_annual)
        rows.append({k: v for k, v in res.summary.items() if not isinstance(v, (list, dict))})

    combined = out / f"scenarios.{fmt}"
    if fmt == "jsonl":
        _write_jsonl(combined, rows)
    else:
        pd.DataFrame(rows).to_csv(combined, index=False)

    summary = {"scenarios": len(rows), "results": rows}
    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    return RunResult(summary=summary, summary_path=summary_path, results_path=combined)


__all__ = [
    "RunResult",
    "run_inputs",
    "run_file",
    "run_dir",
    "write_cashflow_table",
    "cashflow_filename",
    "validate_and_run",
]
