# bess_cashflow/validate.py
from __future__ import annotations
import os, sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from .config import load_model_config
from .schema import COMPOSITE_CONSTRAINTS, KNOWN_KEYS, REVENUE_SCENARIOS, SCHEMA


def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def _within(x: float, lo: float, hi: float) -> bool:
    return (x >= lo) and (x <= hi)


def validate_params_dict(data: Dict[str, Any], *, mode: str = "relaxed", where: str = "<mem>") -> Dict[str, Any]:
    """
    Guardrails for a flat scenario config (see config.load_model_config):
      - both modes: numeric bounds from SCHEMA, scenario name, composite constraints
      - strict    : unknown keys are rejected
    Range problems raise ValueError; structural problems raise SystemExit.
    Returns the validated subset of keys.
    """
    if mode == "strict":
        allowed = KNOWN_KEYS | {"constants"}
        unknown = sorted(k for k in data.keys() if k not in allowed)
        if unknown:
            raise SystemExit(f"{where}: unknown keys (strict mode): {unknown}")

    validated: Dict[str, Any] = {}
    for k, bounds in SCHEMA.items():
        if k not in data or data[k] is None:
            continue
        try:
            v = float(data[k])
        except (TypeError, ValueError):
            raise ValueError(f"{where}: {k} must be numeric, got {data[k]!r}")
        lo = float(bounds.get("min", float("-inf")))
        hi = float(bounds.get("max", float("inf")))
        if not _within(v, lo, hi):
            raise ValueError(f"{where}: {k} outside allowed range [{lo}, {hi}]: {v}")
        validated[k] = data[k]

    if "revenue_scenario" in data:
        sc = str(data["revenue_scenario"]).strip().lower()
        if sc not in REVENUE_SCENARIOS:
            raise ValueError(f"{where}: revenue_scenario must be one of {list(REVENUE_SCENARIOS)}, got {sc!r}")
        validated["revenue_scenario"] = sc

    for rule in COMPOSITE_CONSTRAINTS:
        if not rule["check"](data):
            raise ValueError(f"{where}: {rule['message']}")

    return validated


def validate_sensitivity_dict(data: Dict[str, Any], *, where: str = "<mem>") -> None:
    values = (data or {}).get("capex_values")
    if values is not None and not isinstance(values, list):
        raise SystemExit(f"{where}: sensitivity.capex_values must be a list")
    for rule in COMPOSITE_CONSTRAINTS:
        if rule["name"].startswith("sensitivity") and not rule["check"](data or {}):
            raise ValueError(f"{where}: {rule['message']}")
    if data and ("min" in data) != ("max" in data):
        raise SystemExit(f"{where}: sensitivity needs both min and max")


def load_params_from_file(path: Path) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles directories; keep this function file-only
        raise SystemExit(f"{p} is a directory (expected a file)")
    # YAML is a superset of JSON, so one loader covers both
    return load_model_config(p)


def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="bess_cashflow.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = _mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            if not f.is_file():
                continue
            any_seen = True
            try:
                data, sens = load_params_from_file(f)
                validate_params_dict(data, mode=mode, where=str(f))
                validate_sensitivity_dict(sens, where=str(f))
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except (ValueError, OSError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
