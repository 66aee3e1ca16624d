"""Scenario risk analysis and the advisory report built from it.

Three macro variants are derived from the current plan (rate and income
shocked in opposite directions), each is tiered Low/Medium/High, and the
realistic variant drives the overall verdict unless the plan is not fully
funded.  Recommendations and the narrative are plain template text, so the
same inputs always produce the same report apart from the timestamp line.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from villaplan.calculators import monthly_payment, principal_from_payment, round2
from villaplan.formatting import format_eur, format_pct
from villaplan.models import (
    AdvisorAnalysis,
    FinancialInputs,
    RiskColor,
    RiskTier,
    ScenarioAnalysis,
    Summary,
)
from villaplan.presets import (
    AIRBNB_DEPENDENCY,
    BUFFER_HEALTHY,
    BUFFER_LOW_RISK,
    BUFFER_TIGHT,
    DISCLAIMER,
    DTI_COMFORTABLE_PCT,
    DTI_MAX_PCT,
    DTI_STRESS_PCT,
    INCOME_SHOCK_PCT,
    MAX_RECOMMENDATIONS,
    MIN_CONTINGENCY_PCT,
    RATE_FLOOR_PCT,
    RATE_SHOCK_PCT,
    SURPLUS_NOTABLE,
)

SCENARIO_NAMES = ("Optimistic", "Realistic", "Conservative")

_RISK_COLORS = {
    RiskTier.LOW: RiskColor.GREEN,
    RiskTier.MEDIUM: RiskColor.YELLOW,
    RiskTier.HIGH: RiskColor.RED,
}


def scenario_risk(dti_pct: float, monthly_net: float) -> RiskTier:
    """Tier a single scenario; the first matching band wins."""
    if dti_pct <= DTI_COMFORTABLE_PCT and monthly_net > BUFFER_LOW_RISK:
        return RiskTier.LOW
    if dti_pct <= DTI_MAX_PCT and monthly_net > 0:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def _scenario(
    name: str,
    bank_rate_pct: float,
    income_delta: int,
    net_income: float,
    inputs: FinancialInputs,
    family_monthly: float,
) -> ScenarioAnalysis:
    bank_monthly = monthly_payment(
        bank_rate_pct / 100, inputs.bank_term_years, inputs.bank_loan_amount
    )
    total_debt = bank_monthly + family_monthly
    dti_pct = total_debt / net_income * 100 if net_income > 0 else 100.0
    airbnb = inputs.airbnb_income if inputs.use_airbnb_income else 0.0
    monthly_net = net_income - inputs.other_fixed_costs_monthly + airbnb - total_debt
    return ScenarioAnalysis(
        name=name,
        rate=round2(bank_rate_pct),
        income_delta=income_delta,
        bank_monthly=round2(bank_monthly),
        family_monthly=round2(family_monthly),
        total_debt=round2(total_debt),
        dti_pct=round2(dti_pct),
        monthly_net=round2(monthly_net),
        risk=scenario_risk(dti_pct, monthly_net),
    )


def build_scenarios(inputs: FinancialInputs, summary: Summary) -> List[ScenarioAnalysis]:
    """Optimistic, realistic and conservative variants, in that order.

    Only the bank rate and the net income are shocked; the family loan keeps
    its terms in every variant.
    """
    income = inputs.net_income_monthly
    factor = INCOME_SHOCK_PCT / 100
    return [
        _scenario(
            SCENARIO_NAMES[0],
            max(RATE_FLOOR_PCT, inputs.bank_rate_pct - RATE_SHOCK_PCT),
            INCOME_SHOCK_PCT,
            income * (1 + factor),
            inputs,
            summary.family_monthly,
        ),
        _scenario(SCENARIO_NAMES[1], inputs.bank_rate_pct, 0, income, inputs, summary.family_monthly),
        _scenario(
            SCENARIO_NAMES[2],
            inputs.bank_rate_pct + RATE_SHOCK_PCT,
            -INCOME_SHOCK_PCT,
            income * (1 - factor),
            inputs,
            summary.family_monthly,
        ),
    ]


def overall_risk(summary: Summary, scenarios: List[ScenarioAnalysis]) -> Tuple[RiskTier, RiskColor, str]:
    """Overall verdict: a funding shortfall is always high risk, otherwise the
    realistic scenario decides."""
    if summary.funding_gap > 0:
        label = f"High risk: shortfall of {format_eur(summary.funding_gap)} in the financing"
        return RiskTier.HIGH, RiskColor.RED, label
    tier = scenarios[1].risk
    labels = {
        RiskTier.HIGH: "High risk: DTI too high and/or insufficient buffer",
        RiskTier.MEDIUM: "Medium risk: feasible with a stable income and buffer",
        RiskTier.LOW: "Low risk: financially sound and feasible",
    }
    return tier, _RISK_COLORS[tier], labels[tier]


def summary_text(summary: Summary) -> str:
    parts = [
        f"The project costs {format_eur(summary.total_project)} in total, of which "
        f"{format_eur(summary.total_sources)} is financed through loans and own funds."
    ]

    if summary.funding_gap > 0:
        parts.append(f"There is a shortfall of {format_eur(summary.funding_gap)} that still has to be covered.")
    elif summary.funding_gap < -SURPLUS_NOTABLE:
        parts.append(f"The financing has a surplus of {format_eur(abs(summary.funding_gap))}.")

    dti = f"{summary.dti_pct:.0f}%"
    if summary.dti_pct > DTI_MAX_PCT:
        parts.append(f"The monthly burden is very high (DTI {dti}), which banks consider risky.")
    elif summary.dti_pct > DTI_COMFORTABLE_PCT:
        parts.append(f"The monthly burden is firm (DTI {dti}) but still acceptable to most banks.")
    else:
        parts.append(f"The monthly burden is healthy (DTI {dti}), well within bank norms.")

    net = summary.net_after
    if net < 0:
        parts.append(f"Note: every month leaves a deficit of {format_eur(abs(net))}.")
    elif net < BUFFER_TIGHT:
        parts.append(f"The monthly buffer is tight ({format_eur(net)}).")
    elif net < BUFFER_HEALTHY:
        parts.append(f"{format_eur(net)} remains each month for unexpected costs.")
    else:
        parts.append(f"A healthy buffer of {format_eur(net)} remains each month.")
    return " ".join(parts)


def _loan_reduction(inputs: FinancialInputs, summary: Summary) -> float:
    # principal that would remove the payment above the comfortable DTI
    excess = summary.total_debt - inputs.net_income_monthly * DTI_COMFORTABLE_PCT / 100
    return round(
        principal_from_payment(excess, inputs.bank_rate_pct / 100, inputs.bank_term_years)
    )


def recommendations(
    inputs: FinancialInputs, summary: Summary, scenarios: List[ScenarioAnalysis]
) -> List[str]:
    """Advice in fixed priority order, at most ``MAX_RECOMMENDATIONS`` entries."""
    recs: List[str] = []

    if summary.funding_gap > 0:
        recs.append(
            f"Cover the shortfall of {format_eur(summary.funding_gap)} with an additional family "
            "loan, own savings, or a smaller renovation budget."
        )

    if summary.dti_pct > DTI_COMFORTABLE_PCT:
        reduction = format_eur(_loan_reduction(inputs, summary))
        if summary.dti_pct > DTI_MAX_PCT:
            recs.append(
                f"DTI is too high ({summary.dti_pct:.0f}%). Reduce the bank loan by about "
                f"{reduction} or increase the family loan to bring DTI below 45%."
            )
        else:
            recs.append(
                f"A DTI of {summary.dti_pct:.0f}% is acceptable but on the high side. "
                f"Consider about {reduction} of extra family support for more comfort."
            )

    if summary.net_after < BUFFER_LOW_RISK:
        recs.append(
            "Keep a reserve of at least €30.000-50.000 (on top of the contingency) for "
            "surprises during the renovation."
        )

    conservative = scenarios[2]
    if conservative.dti_pct > DTI_STRESS_PCT:
        recs.append(
            f"If the rate rises to {format_pct(conservative.rate)}% DTI climbs to "
            f"{conservative.dti_pct:.0f}%. Consider a longer fixed-rate period or a shorter term."
        )

    if inputs.use_airbnb_income and inputs.airbnb_income > AIRBNB_DEPENDENCY:
        recs.append(
            f"The plan counts on {format_eur(inputs.airbnb_income)}/month of Airbnb income. "
            "Make sure it also works without that income."
        )

    if inputs.contingency_pct < MIN_CONTINGENCY_PCT:
        recs.append(
            "Raise the contingency to at least 12-15%; unexpected costs are almost certain "
            "when renovating an older house."
        )

    if not recs:
        recs.append(
            "The plan looks financially solid. Keep your income stable and build an extra "
            "buffer for peace of mind."
        )

    return recs[:MAX_RECOMMENDATIONS]


def _gap_line(summary: Summary) -> str:
    if summary.funding_gap > 0:
        return f"Shortfall: {format_eur(summary.funding_gap)}"
    if summary.funding_gap < -SURPLUS_NOTABLE:
        return f"Surplus: {format_eur(abs(summary.funding_gap))}"
    return "Sources and costs are in balance"


def _dti_line(dti_pct: float) -> str:
    if dti_pct <= DTI_COMFORTABLE_PCT:
        return "Healthy (<=45%)"
    if dti_pct <= DTI_MAX_PCT:
        return "Acceptable (45-55%)"
    return "Too high (>55%)"


def _buffer_line(net_after: float) -> str:
    if net_after >= BUFFER_HEALTHY:
        return "Healthy buffer"
    if net_after >= BUFFER_TIGHT:
        return "Tight buffer"
    return "Insufficient buffer"


def full_text(
    inputs: FinancialInputs,
    summary: Summary,
    scenarios: List[ScenarioAnalysis],
    recs: List[str],
    now: datetime,
) -> str:
    """Multi-section markdown report."""
    sections = [
        f"**Affordability report: {inputs.project_name or 'Untitled plan'}**\n\n"
        f"Generated: {now:%Y-%m-%d %H:%M}"
    ]

    sections.append(
        "**Project overview**\n\n"
        f"The purchase price is {format_eur(inputs.purchase_price)}, plus "
        f"{format_eur(summary.reg_tax)} registration tax ({format_pct(inputs.registration_rate_pct)}%) and "
        f"{format_eur(inputs.notary_fees)} notary fees. The renovation costs "
        f"{format_eur(inputs.renovation_budget)}; with {format_pct(inputs.contingency_pct)}% contingency that "
        f"becomes {format_eur(summary.reno_with_cont)}. Total: {format_eur(summary.total_project)}."
    )

    crypto = f" + {format_eur(inputs.crypto_net)} crypto" if inputs.crypto_net > 0 else ""
    sections.append(
        "**Financing structure**\n\n"
        f"Own contribution: {format_eur(inputs.own_cash)} cash{crypto}. The family loan is "
        f"{format_eur(inputs.family_loan_amount)} at {format_pct(inputs.family_loan_rate_pct)}% over "
        f"{inputs.family_loan_term_years} years ({format_eur(summary.family_monthly)}/month). The bank loan is "
        f"{format_eur(inputs.bank_loan_amount)} at {format_pct(inputs.bank_rate_pct)}% over "
        f"{inputs.bank_term_years} years ({format_eur(summary.bank_monthly)}/month).\n\n"
        f"Total financing: {format_eur(summary.total_sources)}.\n"
        f"{_gap_line(summary)}"
    )

    airbnb = (
        f"Airbnb income: +{format_eur(inputs.airbnb_income)}/month"
        if inputs.use_airbnb_income
        else "Airbnb income: not included"
    )
    sections.append(
        "**Monthly affordability**\n\n"
        f"Net household income: {format_eur(inputs.net_income_monthly)}/month\n"
        f"Debt service: {format_eur(summary.total_debt)}/month ({format_eur(summary.bank_monthly)} bank + "
        f"{format_eur(summary.family_monthly)} family)\n"
        f"Other fixed costs: {format_eur(inputs.other_fixed_costs_monthly)}/month\n"
        f"{airbnb}\n\n"
        f"**DTI (debt-to-income): {summary.dti_pct:.1f}%**\n"
        f"{_dti_line(summary.dti_pct)}\n\n"
        f"**Monthly net surplus: {format_eur(summary.net_after)}**\n"
        f"{_buffer_line(summary.net_after)}"
    )

    blocks = []
    for s in scenarios:
        sign = "+" if s.income_delta > 0 else ""
        blocks.append(
            f"**{s.name}** ({sign}{s.income_delta}% income, {format_pct(s.rate)}% rate):\n"
            f"- Monthly debt: {format_eur(s.total_debt)}\n"
            f"- DTI: {s.dti_pct:.1f}%\n"
            f"- Net remaining: {format_eur(s.monthly_net)}\n"
            f"- Risk: {s.risk.value}"
        )
    sections.append("**Scenario comparison**\n\n" + "\n\n".join(blocks))

    numbered = "\n\n".join(f"{i}. {r}" for i, r in enumerate(recs, start=1))
    sections.append("**Recommendations**\n\n" + numbered)

    sections.append(
        "**Important notes**\n\n"
        f"- {DISCLAIMER}\n"
        "- Plan an extra buffer for unforeseen expenses during the renovation.\n"
        "- Make sure your income stays stable for the full term of the loans."
    )
    return "\n\n".join(sections)


def analyze(inputs: FinancialInputs, summary: Summary, now: Optional[datetime] = None) -> AdvisorAnalysis:
    """Run the scenario analysis and compose the advisory report."""
    now = now or datetime.now()
    scenarios = build_scenarios(inputs, summary)
    tier, color, label = overall_risk(summary, scenarios)
    recs = recommendations(inputs, summary, scenarios)
    return AdvisorAnalysis(
        summary_text=summary_text(summary),
        risk_level=label,
        risk_color=color,
        overall_risk=tier,
        scenarios=scenarios,
        recommendations=recs,
        full_text=full_text(inputs, summary, scenarios, recs, now),
        generated_at=now,
    )
