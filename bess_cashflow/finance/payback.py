# bess_cashflow/finance/payback.py
from __future__ import annotations

from typing import Optional, Sequence


def solve_payback(
    cumulative_cash_flows: Sequence[float],
    project_life_years: int,
    net_cash_flows: Optional[Sequence[float]] = None,
) -> float:
    """
    Fractional year at which cumulative cash flow first turns positive.

    The crossing year is interpolated linearly using that year's net cash
    flow; when `net_cash_flows` is not given it is taken as the difference of
    consecutive cumulative values. A project that never pays back reports
    exactly `project_life_years`.
    """
    cum = [float(c) for c in cumulative_cash_flows]
    for i in range(1, len(cum)):
        prev, cur = cum[i - 1], cum[i]
        if cur > 0 and prev <= 0:
            net = float(net_cash_flows[i]) if net_cash_flows is not None else cur - prev
            if net == 0:
                return float(i - 1)
            return (i - 1) + (-prev / net)
    return float(project_life_years)


__all__ = ["solve_payback"]
