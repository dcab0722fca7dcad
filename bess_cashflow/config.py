from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List, Tuple
import io
import logging
import os

import yaml

from .constants import DEFAULT_CAPEX_AXIS, FINANCIAL_CONSTANTS, FinancialConstants
from .finance.sensitivity import generate_axis
from .types import ProjectInputs

logger = logging.getLogger(__name__)

# Sections kept as nested mappings instead of being flattened.
_NESTED_SECTIONS = ("sensitivity", "constants")

# Defaults of the interactive model: 250 kWh at 350/kWh, base case, unlevered.
DEFAULTS: Dict[str, Any] = {
    "storage_capacity_kwh": 250.0,
    "capital_cost_per_kwh": 350.0,
    "revenue_scenario": "base",
    "discount_rate": 0.08,
    "debt_ratio": 0.0,
    "interest_rate": 0.08,
    "loan_tenor_years": 7,
    "aggregator_fee_enabled": False,
    "aggregator_fee_percent": 22.0,
}


def _parse_yaml_fallback(text: str) -> Dict[str, Any]:
    """
    Super-tolerant parser for key: value lines (only for emergencies).
    Booleans and numbers are coerced when obvious.
    """
    data: Dict[str, Any] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if ":" not in line:
            continue
        k, v = line.split(":", 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if not v:
            continue
        try:
            if v.lower() in ("true", "false"):
                data[k] = v.lower() == "true"
            else:
                data[k] = float(v) if "." in v else int(v)
        except ValueError:
            data[k] = v
    return data


def _flatten_grouped(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'financing': {...}, 'project': {...}} into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = dict(cfg)
    for k, v in list(cfg.items()):
        if isinstance(v, dict) and k not in _NESTED_SECTIONS:
            flat.pop(k)
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def _split_sensitivity(d: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    sens = d.pop("sensitivity", {}) if isinstance(d, dict) else {}
    return d, (sens or {})


def load_model_config(
    source: str | os.PathLike | io.StringIO,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Load YAML from a path or text stream. If YAML fails, use a tolerant fallback.
    Returns (flat_config, sensitivity_section).
    """
    text: str
    if hasattr(source, "read"):
        text = str(source.read())
    else:
        p = os.fspath(source)
        with open(p, "r", encoding="utf-8") as f:
            text = f.read()

    try:
        cfg = yaml.safe_load(text) or {}
        if not isinstance(cfg, dict):
            cfg = {}
    except yaml.YAMLError as e:
        logger.warning("YAML parse failed (%s); using key: value fallback", e)
        cfg = _parse_yaml_fallback(text)

    flat = _flatten_grouped(cfg)
    return _split_sensitivity(flat)


def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)


def inputs_from_config(cfg: Dict[str, Any]) -> ProjectInputs:
    """Build ProjectInputs from a flat config, filling gaps from DEFAULTS."""
    merged = {**DEFAULTS, **{k: v for k, v in cfg.items() if v is not None}}
    return ProjectInputs(
        storage_capacity_kwh=float(merged["storage_capacity_kwh"]),
        capital_cost_per_kwh=float(merged["capital_cost_per_kwh"]),
        revenue_scenario=str(merged["revenue_scenario"]).strip().lower(),
        discount_rate=float(merged["discount_rate"]),
        debt_ratio=float(merged["debt_ratio"]),
        interest_rate=float(merged["interest_rate"]),
        loan_tenor_years=int(merged["loan_tenor_years"]),
        aggregator_fee_enabled=_as_bool(merged["aggregator_fee_enabled"]),
        aggregator_fee_percent=float(merged["aggregator_fee_percent"]),
    )


def constants_from_config(cfg: Dict[str, Any]) -> FinancialConstants:
    """Apply a `constants:` section over the built-in FinancialConstants."""
    overrides = cfg.get("constants") or {}
    if not overrides:
        return FINANCIAL_CONSTANTS
    allowed = {f.name: f.type for f in fields(FinancialConstants)}
    unknown = sorted(k for k in overrides if k not in allowed)
    if unknown:
        raise ValueError(f"unknown constants: {unknown}")
    values = {
        k: (int(v) if k == "project_life_years" else float(v))
        for k, v in overrides.items()
    }
    return FinancialConstants(**{**FINANCIAL_CONSTANTS.__dict__, **values})


def capex_axis_from_config(sens: Dict[str, Any]) -> List[float]:
    """
    Capital-cost axis from a `sensitivity:` section:
      capex_values: [..]            explicit list (order kept)
      min / max / steps             evenly spaced, inclusive
    Falls back to DEFAULT_CAPEX_AXIS.
    """
    explicit = (sens or {}).get("capex_values")
    if isinstance(explicit, list) and explicit:
        return [float(x) for x in explicit]
    if sens and "min" in sens and "max" in sens:
        return generate_axis(float(sens["min"]), float(sens["max"]), int(sens.get("steps", 5)))
    return list(DEFAULT_CAPEX_AXIS)


__all__ = [
    "DEFAULTS",
    "load_model_config",
    "inputs_from_config",
    "constants_from_config",
    "capex_axis_from_config",
]
