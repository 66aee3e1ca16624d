import os
import sys
from datetime import datetime

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from villaplan.advisor import (
    SCENARIO_NAMES,
    analyze,
    build_scenarios,
    overall_risk,
    recommendations,
    scenario_risk,
    summary_text,
)
from villaplan.calculators import DEFAULT_INPUTS, summarize, with_auto_bank_loan
from villaplan.models import FinancialInputs, RiskColor, RiskTier
from villaplan.presets import MAX_RECOMMENDATIONS

NOW = datetime(2024, 1, 2, 3, 4)


def comfortable_plan():
    return with_auto_bank_loan(
        FinancialInputs(
            purchase_price=300000,
            registration_rate_pct=2,
            notary_fees=5000,
            contingency_pct=15,
            own_cash=100000,
            bank_rate_pct=4,
            bank_term_years=25,
            net_income_monthly=8000,
            other_fixed_costs_monthly=1000,
            project_name="Starter",
        )
    )


def test_scenarios_in_fixed_order():
    scenarios = build_scenarios(DEFAULT_INPUTS, summarize(DEFAULT_INPUTS))
    assert [s.name for s in scenarios] == list(SCENARIO_NAMES)
    assert [s.income_delta for s in scenarios] == [10, 0, -10]
    assert [s.rate for s in scenarios] == [3.5, 4.0, 4.5]


def test_realistic_scenario_matches_summary():
    summary = summarize(DEFAULT_INPUTS)
    realistic = build_scenarios(DEFAULT_INPUTS, summary)[1]
    assert realistic.total_debt == pytest.approx(summary.total_debt, abs=0.01)
    assert realistic.dti_pct == pytest.approx(summary.dti_pct, abs=0.01)
    assert realistic.monthly_net == pytest.approx(summary.net_after, abs=0.01)


def test_family_payment_is_not_shocked():
    summary = summarize(DEFAULT_INPUTS)
    scenarios = build_scenarios(DEFAULT_INPUTS, summary)
    assert {s.family_monthly for s in scenarios} == {summary.family_monthly}
    assert scenarios[0].bank_monthly < scenarios[1].bank_monthly < scenarios[2].bank_monthly


def test_optimistic_rate_has_a_floor():
    inputs = DEFAULT_INPUTS.model_copy(update={"bank_rate_pct": 0.7})
    scenarios = build_scenarios(inputs, summarize(inputs))
    assert scenarios[0].rate == 0.5


def test_zero_income_scenarios_are_high_risk():
    inputs = DEFAULT_INPUTS.model_copy(update={"net_income_monthly": 0})
    scenarios = build_scenarios(inputs, summarize(inputs))
    assert all(s.dti_pct == 100 and s.risk is RiskTier.HIGH for s in scenarios)


@pytest.mark.parametrize(
    "dti, net, expected",
    [
        (40, 1500, RiskTier.LOW),
        (40, 1000, RiskTier.MEDIUM),
        (50, 200, RiskTier.MEDIUM),
        (50, 0, RiskTier.HIGH),
        (60, 5000, RiskTier.HIGH),
    ],
)
def test_scenario_risk_bands(dti, net, expected):
    assert scenario_risk(dti, net) is expected


def test_funding_gap_forces_high_risk():
    inputs = comfortable_plan().model_copy(update={"bank_loan_amount": 100000})
    summary = summarize(inputs)
    scenarios = build_scenarios(inputs, summary)
    assert scenarios[1].risk is RiskTier.LOW
    tier, color, label = overall_risk(summary, scenarios)
    assert tier is RiskTier.HIGH and color is RiskColor.RED
    assert "€111.000" in label


def test_comfortable_plan_is_low_risk_with_positive_advice():
    inputs = comfortable_plan()
    analysis = analyze(inputs, summarize(inputs), now=NOW)
    assert analysis.overall_risk is RiskTier.LOW
    assert analysis.risk_color is RiskColor.GREEN
    assert len(analysis.recommendations) == 1
    assert analysis.recommendations[0].startswith("The plan looks financially solid")


def test_default_plan_recommendations():
    summary = summarize(DEFAULT_INPUTS)
    recs = recommendations(DEFAULT_INPUTS, summary, build_scenarios(DEFAULT_INPUTS, summary))
    assert recs[0].startswith("DTI is too high")
    assert any("Airbnb" in r for r in recs)
    assert not any(r.startswith("The plan looks financially solid") for r in recs)


def test_recommendations_are_capped():
    inputs = DEFAULT_INPUTS.model_copy(
        update={
            "bank_loan_amount": 850000,
            "contingency_pct": 5,
            "other_fixed_costs_monthly": 5000,
            "net_income_monthly": 10000,
        }
    )
    summary = summarize(inputs)
    recs = recommendations(inputs, summary, build_scenarios(inputs, summary))
    assert len(recs) == MAX_RECOMMENDATIONS
    assert recs[0].startswith("Cover the shortfall")
    assert "Airbnb" in recs[-1]
    assert not any(r.startswith("Raise the contingency") for r in recs)


def test_summary_text_mentions_totals():
    text = summary_text(summarize(DEFAULT_INPUTS))
    assert text.startswith("The project costs €1.223.000 in total")
    assert "very high" in text


def test_full_text_is_deterministic():
    summary = summarize(DEFAULT_INPUTS)
    first = analyze(DEFAULT_INPUTS, summary, now=NOW)
    second = analyze(DEFAULT_INPUTS, summary, now=NOW)
    assert first == second
    assert "Generated: 2024-01-02 03:04" in first.full_text
    assert first.generated_at == NOW
    for heading in ("**Project overview**", "**Scenario comparison**", "**Recommendations**"):
        assert heading in first.full_text
