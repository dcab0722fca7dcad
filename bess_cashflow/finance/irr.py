# bess_cashflow/finance/irr.py
from __future__ import annotations

import logging
from typing import Iterable, List

import numpy_financial as npf

logger = logging.getLogger(__name__)

# Rates at or below -100% make the discount factor blow up.
RATE_FLOOR = -0.999999


def clamp_rate(rate: float) -> float:
    r = float(rate)
    return RATE_FLOOR if r <= -1.0 else r


# ---------- NPV ----------
def npv(rate: float, cashflows: Iterable[float]) -> float:
    """
    Classic discounted cash flow:
        NPV(r) = sum_{t=0..N} CF[t] / (1+r)^t
    """
    cfs = [float(cf) for cf in cashflows]
    if not cfs:
        return 0.0
    return float(npf.npv(clamp_rate(rate), cfs))


# ---------- IRR (periodic) ----------
def irr(
    cashflows: Iterable[float],
    *,
    guess: float = 0.10,
    step: float = 0.10,
    tolerance: float = 0.01,
    max_iter: int = 100,
) -> float:
    """
    Periodic IRR by step-halving search. Returns a decimal rate (0.12 = 12%).

    Positive NPV means the trial rate is too low, so it moves up by `step`;
    negative NPV moves it down and halves the step. Stops once |NPV| falls
    below `tolerance` (currency units). When `max_iter` runs out the last trial
    rate is returned as a best estimate; callers flag implausible values.
    The step never re-expands, so flows with several sign changes may not settle.
    """
    cfs: List[float] = [float(x) for x in cashflows]
    if not cfs:
        return 0.0

    rate = float(guess)
    step = float(step)
    for _ in range(max_iter):
        value = npv(rate, cfs)
        if abs(value) < tolerance:
            return rate
        if value > 0:
            rate += step
        else:
            rate -= step
            step /= 2.0

    logger.debug("irr: no convergence after %d iterations, returning %.6f", max_iter, rate)
    return rate


solve_irr = irr


__all__ = ["npv", "irr", "solve_irr", "clamp_rate"]
