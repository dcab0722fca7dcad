# bess_cashflow/finance/cashflow.py
from __future__ import annotations

import logging

from bess_cashflow.constants import (
    FINANCIAL_CONSTANTS,
    FinancialConstants,
    market_context_for,
    revenue_per_kw,
)
from bess_cashflow.finance.debt import compute_annual_payment
from bess_cashflow.finance.irr import clamp_rate, irr
from bess_cashflow.finance.payback import solve_payback
from bess_cashflow.types import CashFlowYear, ProjectInputs, ProjectionResult

logger = logging.getLogger(__name__)


def project(
    inputs: ProjectInputs, constants: FinancialConstants = FINANCIAL_CONSTANTS
) -> ProjectionResult:
    """
    Year-by-year cash flows for years 0..project_life plus NPV, IRR and payback.

    Year 0 carries only the equity outlay. Rows keep full precision; the
    rounded display table comes from ProjectionResult.display_years.
    """
    c = constants
    power_kw = inputs.storage_capacity_kwh * c.power_to_energy_ratio
    total_capex = inputs.storage_capacity_kwh * inputs.capital_cost_per_kwh
    annual_om = total_capex * c.om_cost_rate
    gross_revenue_y1 = _gross_revenue_year1(inputs, power_kw, c)
    fee_rate = inputs.fee_rate

    debt = total_capex * inputs.debt_ratio
    equity = total_capex - debt
    annual_debt_payment = compute_annual_payment(
        debt, inputs.interest_rate, inputs.loan_tenor_years
    )

    rows: list[CashFlowYear] = [
        CashFlowYear(
            year=0,
            revenue=0.0,
            aggregator_fee=0.0,
            opex=0.0,
            ebitda=0.0,
            debt_service=0.0,
            net_cash_flow=-equity,
            cumulative_cash_flow=-equity,
        )
    ]
    cumulative = -equity
    discount = 1.0 + clamp_rate(inputs.discount_rate)
    # seeded with the outlay; every year's discounted flow is then added, year 0 included
    npv = -equity
    npv += rows[0].net_cash_flow

    for yr in range(1, c.project_life_years + 1):
        gross = gross_revenue_y1 * _degradation_factor(c, yr)
        fee = gross * fee_rate
        revenue = gross - fee
        opex = annual_om
        debt_service = annual_debt_payment if yr <= inputs.loan_tenor_years else 0.0
        ebitda = revenue - opex
        net = ebitda - debt_service

        cumulative += net
        npv += net * discount ** (-yr)

        rows.append(
            CashFlowYear(
                year=yr,
                revenue=revenue,
                aggregator_fee=fee,
                opex=opex,
                ebitda=ebitda,
                debt_service=debt_service,
                net_cash_flow=net,
                cumulative_cash_flow=cumulative,
            )
        )

    net_flows = [r.net_cash_flow for r in rows]
    project_irr = irr(net_flows)
    payback = solve_payback(
        [r.cumulative_cash_flow for r in rows], c.project_life_years, net_flows
    )

    fee_y1 = gross_revenue_y1 * fee_rate
    net_revenue_y1 = gross_revenue_y1 - fee_y1
    margin = ((net_revenue_y1 - annual_om) / net_revenue_y1 * 100.0) if net_revenue_y1 else 0.0

    logger.debug(
        "project: capex=%.2f equity=%.2f debt=%.2f npv=%.2f irr=%.6f payback=%.3f",
        total_capex, equity, debt, npv, project_irr, payback,
    )

    return ProjectionResult(
        inputs=inputs,
        years=tuple(rows),
        total_capex=total_capex,
        equity=equity,
        debt=debt,
        power_kw=power_kw,
        annual_om=annual_om,
        annual_debt_payment=annual_debt_payment,
        gross_annual_revenue=gross_revenue_y1,
        aggregator_fee_year1=fee_y1,
        net_revenue_year1=net_revenue_y1,
        npv=npv,
        irr=project_irr,
        payback_years=payback,
        ebitda_margin_year1=margin,
        market_context=market_context_for(inputs.revenue_scenario),
    )


def _gross_revenue_year1(p: ProjectInputs, power_kw: float, c: FinancialConstants) -> float:
    return power_kw * revenue_per_kw(p.revenue_scenario) * c.discharge_efficiency


def _degradation_factor(c: FinancialConstants, year: int) -> float:
    # year 1 is undegraded
    return (1.0 - c.degradation_rate) ** (year - 1)


__all__ = ["project"]
