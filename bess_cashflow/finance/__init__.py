"""Calculation engine: debt service, cash-flow projection, IRR, payback, sensitivity."""
from .cashflow import project
from .debt import amortization_schedule, compute_annual_payment
from .irr import irr, npv, solve_irr
from .payback import solve_payback
from .sensitivity import generate_axis, sweep

__all__ = [
    "project",
    "compute_annual_payment",
    "amortization_schedule",
    "irr",
    "npv",
    "solve_irr",
    "solve_payback",
    "generate_axis",
    "sweep",
]
