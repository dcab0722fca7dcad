"""
Finance metrics façade.

Design:
- IRR/NPV implementations live only in bess_cashflow.finance.irr (singleton).
- This module must not *define* irr/npv (no 'def irr' / 'def npv' here).
- It re-exports the metric solvers and formats a headline for the CLI.
"""
from __future__ import annotations

from bess_cashflow.types import ProjectionResult

from .irr import npv as npv, irr as irr, solve_irr as solve_irr  # re-exports only
from .payback import solve_payback as solve_payback


def headline(result: ProjectionResult) -> str:
    """One-line summary of a projection, as printed by the CLI."""
    flag = "" if result.irr_plausible else " (implausible)"
    hurdle = "above" if result.above_hurdle else "below"
    return (
        f"{result.inputs.revenue_scenario} | capex {result.total_capex:,.0f} | "
        f"NPV {result.npv:,.0f} | IRR {result.irr_percent:.1f}%{flag} ({hurdle} hurdle) | "
        f"payback {result.payback_years:.2f} yrs"
    )


__all__ = ["npv", "irr", "solve_irr", "solve_payback", "headline"]
