import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from villaplan.calculators import monthly_payment, round2
from villaplan.models import ColorTier, SensitivityConfig
from villaplan.sensitivity import (
    DEFAULT_SENSITIVITY_CONFIG,
    SensitivityConfigError,
    color_tier,
    generate_grid,
    grid_amounts,
    grid_frame,
    grid_rates,
    monthly_range,
    step_count,
    tier_frame,
)

SMALL = {
    "min_amount": 600000,
    "max_amount": 700000,
    "step_amount": 50000,
    "min_rate": 3.0,
    "max_rate": 4.0,
    "step_rate": 0.5,
}


def test_grid_dimensions_and_axes():
    grid = generate_grid(SMALL, 25, 0, 10000)
    assert len(grid) == 3
    assert all(len(row) == 3 for row in grid)
    assert grid_amounts(grid) == [600000, 650000, 700000]
    assert grid_rates(grid) == [3.0, 3.5, 4.0]


def test_cell_payment_matches_monthly_payment():
    grid = generate_grid(SMALL, 25, 0, 10000)
    cell = grid[2][2]
    assert cell.amount == 700000 and cell.rate == 4.0
    assert cell.monthly == round2(monthly_payment(0.04, 25, 700000))


def test_payments_increase_along_both_axes():
    grid = generate_grid(DEFAULT_SENSITIVITY_CONFIG, 25, 0, 10000)
    for row in grid:
        monthlies = [c.monthly for c in row]
        assert monthlies == sorted(monthlies)
    for col in range(len(grid[0])):
        column = [row[col].monthly for row in grid]
        assert column == sorted(column)


def test_comfort_includes_family_payment():
    grid = generate_grid(SMALL, 25, 0, 8000)
    assert grid[0][0].is_comfortable
    assert not grid[2][2].is_comfortable
    loaded = generate_grid(SMALL, 25, 1500, 8000)
    assert not loaded[0][0].is_comfortable


def test_zero_income_is_never_comfortable():
    grid = generate_grid(SMALL, 25, 0, 0)
    assert not any(c.is_comfortable for row in grid for c in row)


def test_rate_steps_do_not_drift():
    cfg = dict(SMALL, min_rate=0.1, max_rate=0.3, step_rate=0.1)
    grid = generate_grid(cfg, 25, 0, 10000)
    assert grid_rates(grid) == [0.1, 0.2, 0.3]
    assert step_count(0.1, 0.3, 0.1) == 3


def test_single_point_grid():
    cfg = dict(SMALL, max_amount=600000, max_rate=3.0)
    grid = generate_grid(cfg, 25, 0, 10000)
    assert len(grid) == 1 and len(grid[0]) == 1


@pytest.mark.parametrize(
    "changes",
    [
        {"step_amount": 0},
        {"step_rate": -0.25},
        {"min_amount": 800000},
        {"min_rate": 5.0},
        {"min_amount": 0},
        {"max_rate": float("inf")},
    ],
)
def test_invalid_config_is_rejected(changes):
    with pytest.raises(ValueError):
        generate_grid(dict(SMALL, **changes), 25, 0, 10000)


def test_config_error_is_a_value_error():
    assert issubclass(SensitivityConfigError, ValueError)
    with pytest.raises(ValueError):
        SensitivityConfig(**dict(SMALL, step_amount=0))


def test_monthly_range():
    grid = generate_grid(SMALL, 25, 0, 10000)
    bounds = monthly_range(grid)
    assert bounds["min"] == grid[0][0].monthly
    assert bounds["max"] == grid[2][2].monthly
    assert monthly_range([]) == {"min": 0.0, "max": 0.0}


@pytest.mark.parametrize(
    "monthly, comfortable, expected",
    [
        (2100, True, ColorTier.GREEN),
        (3000, True, ColorTier.YELLOW),
        (3800, True, ColorTier.ORANGE),
        (2100, False, ColorTier.RED),
    ],
)
def test_color_tier(monthly, comfortable, expected):
    assert color_tier(monthly, 2000, 4000, comfortable) is expected


def test_color_tier_flat_grid_is_green():
    assert color_tier(2500, 2500, 2500, True) is ColorTier.GREEN


def test_frames_share_shape():
    grid = generate_grid(SMALL, 25, 0, 8000)
    payments = grid_frame(grid)
    tiers = tier_frame(grid)
    assert payments.shape == tiers.shape == (3, 3)
    assert list(payments.index) == [600000, 650000, 700000]
    assert tiers.loc[700000, 4.0] == "red"
