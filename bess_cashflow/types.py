# bess_cashflow/types.py
"""
Value types shared by the finance engine, the runner and the CLI.

All records are frozen: a ProjectInputs is supplied fresh per run and the
results are recomputed in full whenever any input changes.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# Column order of the exported cash-flow table; CashFlowYear.as_row() follows it.
EXPORT_HEADER: Tuple[str, ...] = (
    "Year",
    "Revenue",
    "Aggregator Fee",
    "OPEX",
    "EBITDA",
    "Debt Service",
    "Net Cash Flow",
    "Cumulative",
)


class RevenueScenario(str, Enum):
    DOWNSIDE = "downside"
    BASE = "base"
    UPSIDE = "upside"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MarketContext:
    """Reference market figures shown next to a scenario (display only)."""

    dr_incentive: float
    eligible_periods: int
    participation_rate: float
    reference_price: float
    dr_periods: int
    il_periods: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProjectInputs:
    """
    One full input set for a projection run.

    Ranges are not enforced here (see validate.py); the engine computes with
    whatever it is given. `aggregator_fee_percent` is only read when
    `aggregator_fee_enabled` is set.
    """

    storage_capacity_kwh: float
    capital_cost_per_kwh: float
    revenue_scenario: RevenueScenario = RevenueScenario.BASE
    discount_rate: float = 0.08
    debt_ratio: float = 0.0
    interest_rate: float = 0.08
    loan_tenor_years: int = 7
    aggregator_fee_enabled: bool = False
    aggregator_fee_percent: Optional[float] = None

    def __post_init__(self) -> None:
        # accept plain strings ("base") from YAML / callers
        object.__setattr__(self, "revenue_scenario", RevenueScenario(self.revenue_scenario))
        object.__setattr__(self, "loan_tenor_years", int(self.loan_tenor_years))

    @property
    def fee_rate(self) -> float:
        if not self.aggregator_fee_enabled or self.aggregator_fee_percent is None:
            return 0.0
        return float(self.aggregator_fee_percent) / 100.0

    def replace(self, **changes: Any) -> "ProjectInputs":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["revenue_scenario"] = self.revenue_scenario.value
        return d


@dataclass(frozen=True)
class CashFlowYear:
    year: int
    revenue: float
    aggregator_fee: float
    opex: float
    ebitda: float
    debt_service: float
    net_cash_flow: float
    cumulative_cash_flow: float

    def rounded(self) -> "CashFlowYear":
        """Copy with every monetary field rounded to the nearest whole unit."""
        return CashFlowYear(
            year=self.year,
            revenue=_round_half_up(self.revenue),
            aggregator_fee=_round_half_up(self.aggregator_fee),
            opex=_round_half_up(self.opex),
            ebitda=_round_half_up(self.ebitda),
            debt_service=_round_half_up(self.debt_service),
            net_cash_flow=_round_half_up(self.net_cash_flow),
            cumulative_cash_flow=_round_half_up(self.cumulative_cash_flow),
        )

    def as_row(self) -> Tuple[float, ...]:
        return (
            self.year,
            self.revenue,
            self.aggregator_fee,
            self.opex,
            self.ebitda,
            self.debt_service,
            self.net_cash_flow,
            self.cumulative_cash_flow,
        )


@dataclass(frozen=True)
class ProjectionResult:
    inputs: ProjectInputs
    years: Tuple[CashFlowYear, ...]
    total_capex: float
    equity: float
    debt: float
    power_kw: float
    annual_om: float
    annual_debt_payment: float
    gross_annual_revenue: float
    aggregator_fee_year1: float
    net_revenue_year1: float
    npv: float
    irr: float
    payback_years: float
    ebitda_margin_year1: float
    market_context: Optional[MarketContext] = field(default=None, compare=False)

    @property
    def net_cash_flows(self) -> List[float]:
        return [y.net_cash_flow for y in self.years]

    @property
    def cumulative_cash_flows(self) -> List[float]:
        return [y.cumulative_cash_flow for y in self.years]

    @property
    def display_years(self) -> List[CashFlowYear]:
        """The public cash-flow table: whole currency units."""
        return [y.rounded() for y in self.years]

    @property
    def irr_percent(self) -> float:
        return self.irr * 100.0

    @property
    def above_hurdle(self) -> bool:
        return self.irr > self.inputs.discount_rate

    @property
    def irr_plausible(self) -> bool:
        from .constants import IRR_PLAUSIBILITY_LIMIT

        return abs(self.irr) <= IRR_PLAUSIBILITY_LIMIT

    def to_frame(self):
        """Rounded cash-flow table as a DataFrame, columns in export order."""
        import pandas as pd

        return pd.DataFrame(
            [y.as_row() for y in self.display_years],
            columns=list(EXPORT_HEADER),
        )

    def summary(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            **self.inputs.to_dict(),
            "project_life_years": len(self.years) - 1,
            "power_kw": self.power_kw,
            "total_capex": self.total_capex,
            "equity": self.equity,
            "debt": self.debt,
            "annual_om": self.annual_om,
            "annual_debt_payment": self.annual_debt_payment,
            "gross_annual_revenue": self.gross_annual_revenue,
            "aggregator_fee_year1": self.aggregator_fee_year1,
            "net_revenue_year1": self.net_revenue_year1,
            "ebitda_margin_year1": self.ebitda_margin_year1,
            "npv": self.npv,
            "irr": self.irr,
            "irr_pct": self.irr_percent,
            "irr_plausible": self.irr_plausible,
            "above_hurdle": self.above_hurdle,
            "payback_years": self.payback_years,
        }
        if self.market_context is not None:
            out["market_context"] = self.market_context.to_dict()
        return out


@dataclass(frozen=True)
class SensitivityPoint:
    capital_cost_per_kwh: float
    payback_years: float
    irr_percent: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _round_half_up(x: float) -> int:
    # 0.5 rounds up, not to even
    return int(math.floor(x + 0.5))


__all__ = [
    "EXPORT_HEADER",
    "RevenueScenario",
    "MarketContext",
    "ProjectInputs",
    "CashFlowYear",
    "ProjectionResult",
    "SensitivityPoint",
]
