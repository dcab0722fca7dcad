# bess_cashflow/finance/debt.py
"""
Debt helpers for the cash-flow projector:
 - compute_annual_payment(principal, annual_rate, tenor_years)
 - amortization_schedule(principal, annual_rate, tenor_years)

Numbers are annual. Keep this module self-contained.
"""

from __future__ import annotations

from typing import Dict, List


def compute_annual_payment(principal: float, annual_rate: float, tenor_years: int) -> float:
    """
    Level annual payment on an amortizing loan.

    Zero principal or zero tenor means no debt service; a zero rate falls back
    to straight-line repayment. Inputs are assumed non-negative.
    """
    P = float(principal)
    r = float(annual_rate)
    n = int(tenor_years)
    if P == 0 or n == 0:
        return 0.0
    if r == 0:
        return P / n
    growth = (1.0 + r) ** n
    return P * r * growth / (growth - 1.0)


def amortization_schedule(
    principal: float,
    annual_rate: float,
    tenor_years: int,
) -> List[Dict[str, float]]:
    """
    Annual schedule with: year, interest, principal, debt_service, balance.
    Debt service is the level payment every year; the last year clears the balance.
    """
    P = float(principal)
    r = float(annual_rate)
    n = int(tenor_years)
    out: List[Dict[str, float]] = []
    if P == 0 or n <= 0:
        return out

    A = compute_annual_payment(P, r, n)
    bal = P
    for y in range(1, n + 1):
        interest = bal * r
        principal_paid = A - interest if y < n else bal
        bal = max(0.0, bal - principal_paid)
        out.append({"year": float(y), "interest": interest, "principal": principal_paid,
                    "debt_service": interest + principal_paid, "balance": bal})
    return out


__all__ = ["compute_annual_payment", "amortization_schedule"]
