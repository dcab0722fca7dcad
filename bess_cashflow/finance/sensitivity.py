# bess_cashflow/finance/sensitivity.py
"""Capital-cost sensitivity sweep.

Each axis value gets a full, independent projection: equity and debt service
both move with capital cost, so nothing is reused between points.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np
import pandas as pd

from bess_cashflow.constants import DEFAULT_CAPEX_AXIS, FINANCIAL_CONSTANTS, FinancialConstants
from bess_cashflow.finance.cashflow import project
from bess_cashflow.types import ProjectInputs, SensitivityPoint

logger = logging.getLogger(__name__)

SENSITIVITY_COLUMNS = ["capital_cost_per_kwh", "payback_years", "irr_percent"]


def generate_axis(min_value: float, max_value: float, steps: int) -> List[float]:
    """Return an inclusive list of evenly spaced values.

    When ``steps`` is ``1``, the midpoint is returned to keep the sweep centered.
    """

    steps = max(1, int(steps))
    if steps == 1:
        return [float((min_value + max_value) / 2.0)]
    if max_value <= min_value:
        return [float(min_value)]
    return [float(v) for v in np.linspace(min_value, max_value, steps)]


def sweep(
    inputs: ProjectInputs,
    capital_cost_axis: Sequence[float] = DEFAULT_CAPEX_AXIS,
    constants: FinancialConstants = FINANCIAL_CONSTANTS,
) -> List[SensitivityPoint]:
    """Payback and IRR at each capital cost, all other inputs held fixed."""

    points: List[SensitivityPoint] = []
    for cost in capital_cost_axis:
        result = project(inputs.replace(capital_cost_per_kwh=float(cost)), constants)
        points.append(
            SensitivityPoint(
                capital_cost_per_kwh=float(cost),
                payback_years=result.payback_years,
                irr_percent=result.irr * 100.0,
            )
        )
    logger.debug("sweep: %d points over capital cost", len(points))
    return points


def to_frame(points: Sequence[SensitivityPoint]) -> pd.DataFrame:
    """Tabulate sweep points, one row per axis value in sweep order."""

    return pd.DataFrame([p.to_dict() for p in points], columns=SENSITIVITY_COLUMNS)


__all__ = ["SENSITIVITY_COLUMNS", "generate_axis", "sweep", "to_frame"]
