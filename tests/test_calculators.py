import os
import sys

import pandas as pd
import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from villaplan.calculators import (
    DEFAULT_INPUTS,
    SCHEDULE_COLUMNS,
    affordability_status,
    auto_bank_loan,
    build_schedule,
    inputs_from_raw,
    monthly_payment,
    principal_from_payment,
    round2,
    schedule_frame,
    schedule_totals,
    summarize,
    to_number,
    total_project_cost,
    with_auto_bank_loan,
)
from villaplan.models import AffordabilityStatus, FinancialInputs, Summary


def baseline(**changes):
    """Baseline plan with the bank loan fixed at 850k."""
    return DEFAULT_INPUTS.model_copy(update={"bank_loan_amount": 850000.0, **changes})


def test_round2_half_up():
    assert round2(123.456) == 123.46
    assert round2(123.454) == 123.45
    assert round2(2.5) == 2.5


def test_to_number_strips_formatting():
    assert to_number("€1,234.56") == 1234.56
    assert to_number(" 42 ") == 42.0
    assert to_number("abc", 7.0) == 7.0
    assert to_number(None) == 0.0
    assert to_number(float("nan"), 3.0) == 3.0


def test_monthly_payment_known_values():
    assert monthly_payment(0.04, 20, 100000) == pytest.approx(605.98, abs=0.1)
    assert monthly_payment(0.04, 25, 850000) == pytest.approx(4486.62, abs=0.1)


def test_monthly_payment_zero_rate_is_straight_line():
    assert monthly_payment(0, 10, 120000) == 1000


def test_monthly_payment_no_loan():
    assert monthly_payment(0.04, 20, 0) == 0
    assert monthly_payment(0.04, 0, 100000) == 0


def test_principal_from_payment_inverts_monthly_payment():
    pmt = monthly_payment(0.04, 25, 400000)
    assert principal_from_payment(pmt, 0.04, 25) == pytest.approx(400000, abs=0.01)
    assert principal_from_payment(1000, 0, 10) == 120000
    assert principal_from_payment(-5, 0.04, 25) == 0.0


def test_build_schedule_properties():
    rows = build_schedule(100000, 0.04, 10)
    assert len(rows) == 120
    assert rows[0].month == 1 and rows[-1].month == 120
    assert rows[0].interest == pytest.approx(333.33, abs=0.01)
    assert rows[-1].balance == 0
    assert sum(r.principal for r in rows) == pytest.approx(100000, abs=1)
    for r in rows:
        assert r.payment == pytest.approx(r.interest + r.principal, abs=0.02)
    balances = [r.balance for r in rows]
    assert balances == sorted(balances, reverse=True)


def test_build_schedule_zero_rate():
    rows = build_schedule(12000, 0, 1)
    assert len(rows) == 12
    assert all(r.payment == 1000 and r.interest == 0 for r in rows)
    assert rows[-1].balance == 0


def test_build_schedule_empty_for_no_loan():
    assert build_schedule(0, 0.04, 10) == []
    assert build_schedule(100000, 0.04, 0) == []


def test_schedule_totals_and_frame():
    rows = build_schedule(12000, 0, 1)
    totals = schedule_totals(rows)
    assert totals == {"total_interest": 0.0, "total_principal": 12000.0}
    frame = schedule_frame(rows)
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == SCHEDULE_COLUMNS
    assert len(frame) == 12
    assert schedule_frame([]).empty


def test_summarize_baseline_plan():
    s = summarize(baseline())
    assert s.reg_tax == 14000
    assert s.reno_with_cont == 504000
    assert s.total_project == 1223000
    assert s.total_sources == 1080000
    assert s.funding_gap == 143000
    assert s.bank_monthly == pytest.approx(4486.62, abs=0.1)
    assert s.total_debt == pytest.approx(s.bank_monthly + s.family_monthly, abs=0.01)


def test_total_project_cost_matches_summary():
    inputs = baseline()
    assert total_project_cost(inputs) == summarize(inputs).total_project


def test_airbnb_toggle_changes_only_net_after():
    on = summarize(baseline(use_airbnb_income=True))
    off = summarize(baseline(use_airbnb_income=False))
    assert on.net_after - off.net_after == pytest.approx(800)
    assert on.dti_pct == off.dti_pct


def test_zero_income_reports_zero_dti():
    s = summarize(baseline(net_income_monthly=0))
    assert s.dti_pct == 0
    assert s.net_after < 0


def test_auto_bank_loan_closes_gap():
    assert DEFAULT_INPUTS.bank_loan_amount == 993000
    assert summarize(DEFAULT_INPUTS).funding_gap == 0


def test_auto_bank_loan_never_negative():
    rich = baseline(own_cash=2000000)
    assert auto_bank_loan(rich) == 0
    assert with_auto_bank_loan(rich).bank_loan_amount == 0
    assert rich.bank_loan_amount == 850000


def _summary(**values):
    base = dict(
        reg_tax=0, reno_with_cont=0, total_project=0, total_sources=0, funding_gap=0,
        bank_monthly=0, family_monthly=0, total_debt=0, dti_pct=30, net_after=500,
    )
    base.update(values)
    return Summary(**base)


@pytest.mark.parametrize(
    "values, expected",
    [
        ({}, AffordabilityStatus.GOOD),
        ({"dti_pct": 50}, AffordabilityStatus.WARN),
        ({"net_after": 0}, AffordabilityStatus.WARN),
        ({"funding_gap": 1}, AffordabilityStatus.BAD),
        ({"dti_pct": 56}, AffordabilityStatus.BAD),
        ({"net_after": -1}, AffordabilityStatus.BAD),
    ],
)
def test_affordability_status(values, expected):
    assert affordability_status(_summary(**values)) is expected


def test_inputs_from_raw_clamps_and_coerces():
    inputs = inputs_from_raw(
        {
            "purchasePrice": "€750,000",
            "bank_term_years": "20.6",
            "own_cash": -5,
            "use_airbnb_income": "false",
            "notary_fees": "abc",
        }
    )
    assert inputs.purchase_price == 750000
    assert inputs.bank_term_years == 21
    assert inputs.own_cash == 0
    assert inputs.use_airbnb_income is False
    assert inputs.notary_fees == DEFAULT_INPUTS.notary_fees
    assert inputs.renovation_budget == DEFAULT_INPUTS.renovation_budget


def test_inputs_from_raw_uses_given_defaults():
    inputs = inputs_from_raw({"net_income_monthly": "5000"}, defaults=FinancialInputs())
    assert inputs.net_income_monthly == 5000
    assert inputs.purchase_price == 0


def test_inputs_are_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_INPUTS.purchase_price = 1


@pytest.mark.parametrize(
    "principal, rate, term",
    [
        (100000, 0.04, 10),
        (850000, 0.04, 25),
        (200000, 0.015, 15),
        (1234567.89, 0.0725, 30),
    ],
)
def test_schedule_interest_falls_and_principal_rises(principal, rate, term):
    rows = build_schedule(principal, rate, term)
    interest = [r.interest for r in rows]
    principal_paid = [r.principal for r in rows[:-1]]
    assert all(a >= b for a, b in zip(interest, interest[1:]))
    assert all(a <= b for a, b in zip(principal_paid, principal_paid[1:]))


def test_monthly_payment_strictly_increases():
    by_principal = [monthly_payment(0.04, 25, p) for p in (100000, 100001, 500000, 850000)]
    assert all(a < b for a, b in zip(by_principal, by_principal[1:]))
    by_rate = [monthly_payment(r, 25, 850000) for r in (0, 0.001, 0.04, 0.0401, 0.08)]
    assert all(a < b for a, b in zip(by_rate, by_rate[1:]))


@pytest.mark.parametrize(
    "changes",
    [{}, {"registration_rate_pct": 12.5, "contingency_pct": 0}, {"renovation_budget": 0, "notary_fees": 3250.5}],
)
def test_summary_cost_parts_add_up(changes):
    inputs = baseline(**changes)
    s = summarize(inputs)
    parts = inputs.purchase_price + s.reg_tax + inputs.notary_fees + s.reno_with_cont
    assert s.total_project == pytest.approx(parts, abs=0.01)
    assert s.total_project == round2(total_project_cost(inputs))
