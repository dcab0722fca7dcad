# bess_cashflow/constants.py
"""
Static tunables for the BESS cash-flow model.

Numbers are annual unless stated otherwise. Nothing in here is mutated at
runtime; the projector reads FINANCIAL_CONSTANTS unless a caller passes its
own FinancialConstants.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .types import MarketContext, RevenueScenario


@dataclass(frozen=True)
class FinancialConstants:
    project_life_years: int = 12
    om_cost_rate: float = 0.015          # fraction of capex per year
    degradation_rate: float = 0.02       # compounding, per year
    discharge_efficiency: float = 0.96
    power_to_energy_ratio: float = 0.5   # kW per kWh (2-hour battery)


FINANCIAL_CONSTANTS = FinancialConstants()

# Revenue per kW of discharge power per year, by scenario
REVENUE_PER_KW: Mapping[RevenueScenario, float] = MappingProxyType({
    RevenueScenario.DOWNSIDE: 245.57,
    RevenueScenario.BASE: 359.77,
    RevenueScenario.UPSIDE: 615.47,
})

# Descriptive market figures; surfaced verbatim, never used in arithmetic.
MARKET_CONTEXT: Mapping[RevenueScenario, MarketContext] = MappingProxyType({
    RevenueScenario.BASE: MarketContext(
        dr_incentive=2316.59,
        eligible_periods=382,
        participation_rate=0.426,
        reference_price=19.7,
        dr_periods=163,
        il_periods=17357,
    ),
    RevenueScenario.DOWNSIDE: MarketContext(
        dr_incentive=2297.1,
        eligible_periods=229,
        participation_rate=0.426,
        reference_price=15.27,
        dr_periods=98,
        il_periods=17422,
    ),
    RevenueScenario.UPSIDE: MarketContext(
        dr_incentive=2770.0,
        eligible_periods=801,
        participation_rate=0.426,
        reference_price=16.51,
        dr_periods=342,
        il_periods=17178,
    ),
})

DEFAULT_CAPEX_AXIS: Tuple[float, ...] = (300.0, 325.0, 350.0, 375.0, 400.0)

# Above this absolute IRR (500 %) a result is reported as implausible.
IRR_PLAUSIBILITY_LIMIT = 5.0


def revenue_per_kw(scenario: RevenueScenario | str) -> float:
    return REVENUE_PER_KW[RevenueScenario(scenario)]


def market_context_for(scenario: RevenueScenario | str) -> MarketContext:
    return MARKET_CONTEXT[RevenueScenario(scenario)]


__all__ = [
    "FinancialConstants",
    "FINANCIAL_CONSTANTS",
    "REVENUE_PER_KW",
    "MARKET_CONTEXT",
    "DEFAULT_CAPEX_AXIS",
    "IRR_PLAUSIBILITY_LIMIT",
    "revenue_per_kw",
    "market_context_for",
]
