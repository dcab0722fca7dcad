from __future__ import annotations
from typing import Dict, Any

# Parameter schema: units, type, min/max ranges, and description.
# Bounds follow the input ranges offered to users; the engine itself never checks them.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "storage_capacity_kwh":  {"unit": "kWh",      "type": "float", "min": 1e-9, "max": 1e7,   "desc": "Usable storage capacity"},
    "capital_cost_per_kwh":  {"unit": "cur/kWh",  "type": "float", "min": 0.0,  "max": 1e5,   "desc": "Installed capital cost per kWh"},
    "discount_rate":         {"unit": "fraction", "type": "float", "min": 0.0,  "max": 0.20,  "desc": "NPV discount rate"},
    "debt_ratio":            {"unit": "fraction", "type": "float", "min": 0.0,  "max": 0.90,  "desc": "Debt as % of CAPEX"},
    "interest_rate":         {"unit": "rate/yr",  "type": "float", "min": 0.0,  "max": 0.15,  "desc": "Loan interest rate"},
    "loan_tenor_years":      {"unit": "years",    "type": "int",   "min": 0,    "max": 30,    "desc": "Loan tenor"},
    "aggregator_fee_percent":{"unit": "percent",  "type": "float", "min": 0.0,  "max": 100.0, "desc": "Aggregator revenue share"},
}

REVENUE_SCENARIOS = ("downside", "base", "upside")

# Composite constraints evaluated after scalar checks.
COMPOSITE_CONSTRAINTS = [
    {
        "name": "debt_ratio_below_one",
        "check": lambda p: float(p.get("debt_ratio", 0.0)) < 1.0,
        "message": "debt_ratio must be below 1.0 (some equity is required)",
    },
    {
        "name": "sensitivity_axis_non_negative",
        "check": lambda p: all(float(v) >= 0.0 for v in (p.get("capex_values") or [])),
        "message": "sensitivity capex_values must all be >= 0",
    },
]

# Keys accepted in a scenario file (after section flattening).
KNOWN_KEYS = set(SCHEMA) | {"revenue_scenario", "aggregator_fee_enabled", "name"}
