"""
Loan amount x interest rate sensitivity grid
"""
from __future__ import annotations

import math
from typing import Dict, List, Mapping, Union

import pandas as pd

from villaplan.calculators import monthly_payment, round2
from villaplan.models import ColorTier, SensitivityCell, SensitivityConfig
from villaplan.presets import (
    COLOR_TIER_HIGH,
    COLOR_TIER_LOW,
    DEFAULT_SENSITIVITY_VALUES,
    DTI_COMFORTABLE_PCT,
)

SensitivityGrid = List[List[SensitivityCell]]

# Tolerance when counting steps so that e.g. (0.3 - 0.0) / 0.1 still reaches 0.3
_STEP_EPS = 1e-9


class SensitivityConfigError(ValueError):
    """Raised for sweep bounds that would give an empty or endless grid."""


def check_config(config: SensitivityConfig) -> None:
    """Validate sweep bounds before any cell is generated."""

    for name in ("min_amount", "max_amount", "min_rate", "max_rate"):
        value = getattr(config, name)
        if not math.isfinite(value) or value <= 0:
            raise SensitivityConfigError(f"{name} must be a positive number, got {value!r}")
    for name in ("step_amount", "step_rate"):
        value = getattr(config, name)
        if not math.isfinite(value) or value <= 0:
            raise SensitivityConfigError(f"{name} must be greater than 0, got {value!r}")
    if config.min_amount > config.max_amount:
        raise SensitivityConfigError(
            f"min_amount ({config.min_amount}) exceeds max_amount ({config.max_amount})"
        )
    if config.min_rate > config.max_rate:
        raise SensitivityConfigError(
            f"min_rate ({config.min_rate}) exceeds max_rate ({config.max_rate})"
        )


def step_count(low: float, high: float, step: float) -> int:
    """Number of points from ``low`` to ``high`` inclusive at ``step`` spacing."""

    return int(math.floor((high - low) / step + _STEP_EPS)) + 1


def _axis(low: float, high: float, step: float) -> List[float]:
    # index-based so float drift can neither skip nor repeat the upper bound
    return [round(low + i * step, 10) for i in range(step_count(low, high, step))]


def generate_grid(
    config: Union[SensitivityConfig, Mapping[str, float]],
    bank_term_years: int,
    family_monthly: float,
    net_income_monthly: float,
) -> SensitivityGrid:
    """
    Sweep loan amount x interest rate into a grid of monthly payments.

    Args:
        config: Sweep bounds; rates in percent
        bank_term_years: Term applied to every cell
        family_monthly: Unchanged family loan payment added for the DTI check
        net_income_monthly: Net household income

    Returns:
        Rows of cells, one row per amount (ascending), rates ascending within
        each row
    """
    if not isinstance(config, SensitivityConfig):
        config = SensitivityConfig.model_validate(dict(config))
    check_config(config)

    rates = _axis(config.min_rate, config.max_rate, config.step_rate)
    grid: SensitivityGrid = []
    for amount in _axis(config.min_amount, config.max_amount, config.step_amount):
        row = []
        for rate in rates:
            monthly = round2(monthly_payment(rate / 100, bank_term_years, amount))
            if net_income_monthly > 0:
                dti = (monthly + family_monthly) / net_income_monthly * 100
                comfortable = dti <= DTI_COMFORTABLE_PCT
            else:
                comfortable = False
            row.append(
                SensitivityCell(
                    amount=round2(amount),
                    rate=round2(rate),
                    monthly=monthly,
                    is_comfortable=comfortable,
                )
            )
        grid.append(row)
    return grid


def grid_amounts(grid: SensitivityGrid) -> List[float]:
    """Row keys (loan amounts) for axis labels."""
    return [row[0].amount for row in grid if row]


def grid_rates(grid: SensitivityGrid) -> List[float]:
    """Column keys (rates) for axis labels."""
    if not grid:
        return []
    return [cell.rate for cell in grid[0]]


def monthly_range(grid: SensitivityGrid) -> Dict[str, float]:
    """Smallest and largest monthly payment, for color scaling."""
    values = [cell.monthly for row in grid for cell in row]
    if not values:
        return {"min": 0.0, "max": 0.0}
    return {"min": min(values), "max": max(values)}


def color_tier(monthly: float, low: float, high: float, is_comfortable: bool) -> ColorTier:
    """Heatmap tier: red above the comfortable DTI, else by relative payment."""
    if not is_comfortable:
        return ColorTier.RED
    span = high - low
    normalized = (monthly - low) / span if span > 0 else 0.0
    if normalized < COLOR_TIER_LOW:
        return ColorTier.GREEN
    if normalized < COLOR_TIER_HIGH:
        return ColorTier.YELLOW
    return ColorTier.ORANGE


def grid_frame(grid: SensitivityGrid) -> pd.DataFrame:
    """Monthly payments pivoted with amounts as index and rates as columns."""
    return pd.DataFrame(
        [[cell.monthly for cell in row] for row in grid],
        index=pd.Index(grid_amounts(grid), name="Amount"),
        columns=grid_rates(grid),
    )


def tier_frame(grid: SensitivityGrid) -> pd.DataFrame:
    """Color tier per cell, same shape as ``grid_frame``."""
    bounds = monthly_range(grid)
    return pd.DataFrame(
        [
            [color_tier(c.monthly, bounds["min"], bounds["max"], c.is_comfortable).value for c in row]
            for row in grid
        ],
        index=pd.Index(grid_amounts(grid), name="Amount"),
        columns=grid_rates(grid),
    )


DEFAULT_SENSITIVITY_CONFIG = SensitivityConfig(**DEFAULT_SENSITIVITY_VALUES)
