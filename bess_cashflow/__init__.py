"""Battery energy-storage investment economics: cash flows, NPV, IRR, payback, sensitivity."""
from .constants import FINANCIAL_CONSTANTS, FinancialConstants
from .finance import (
    amortization_schedule,
    compute_annual_payment,
    generate_axis,
    irr,
    npv,
    project,
    solve_irr,
    solve_payback,
    sweep,
)
from .types import (
    EXPORT_HEADER,
    CashFlowYear,
    MarketContext,
    ProjectInputs,
    ProjectionResult,
    RevenueScenario,
    SensitivityPoint,
)

__version__ = "0.1.0"

__all__ = [
    "FINANCIAL_CONSTANTS",
    "FinancialConstants",
    "EXPORT_HEADER",
    "CashFlowYear",
    "MarketContext",
    "ProjectInputs",
    "ProjectionResult",
    "RevenueScenario",
    "SensitivityPoint",
    "amortization_schedule",
    "compute_annual_payment",
    "generate_axis",
    "irr",
    "npv",
    "project",
    "solve_irr",
    "solve_payback",
    "sweep",
]
