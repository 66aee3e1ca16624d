from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from villaplan.models import AffordabilityStatus, AmortizationRow, FinancialInputs, Summary
from villaplan.presets import DEFAULT_INPUT_VALUES, DTI_COMFORTABLE_PCT, DTI_MAX_PCT


SCHEDULE_COLUMNS = ["Month", "Payment", "Interest", "Principal", "Balance"]


def round2(x: float) -> float:
    """Round half up to two decimals.

    Every monetary figure leaves the engine through this helper so the CSV,
    spreadsheet and PDF exports show the same cents.
    """

    return math.floor(x * 100 + 0.5) / 100


def to_number(value, default=0.0):
    """Return a float for ``value`` or a fallback value.

    Form fields arrive as text such as ``"€1,234.56"``; anything that is not a
    digit, dot or minus sign is stripped before parsing.  Unparseable or
    non-finite values fall back to ``default``.
    """

    if isinstance(value, str):
        value = re.sub(r"[^0-9.\-]", "", value)
    try:
        n = float(value)
    except (TypeError, ValueError):
        return default
    return n if math.isfinite(n) else default


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def inputs_from_raw(raw: Mapping[str, Any], defaults: Optional[FinancialInputs] = None) -> FinancialInputs:
    """Build a clamped ``FinancialInputs`` snapshot from loosely typed form data.

    Keys may use either the Python field names or the camelCase names of the
    stored format.  Missing keys take their value from ``defaults`` (the
    baseline plan unless given), numbers are clamped to be non-negative and
    loan terms become whole years.
    """

    base = defaults if defaults is not None else DEFAULT_INPUTS
    values: Dict[str, Any] = {}
    for name, field in FinancialInputs.model_fields.items():
        fallback = getattr(base, name)
        if name in raw:
            value = raw[name]
        elif field.alias in raw:
            value = raw[field.alias]
        else:
            values[name] = fallback
            continue
        if isinstance(fallback, bool):
            values[name] = _to_bool(value)
        elif isinstance(fallback, int):
            values[name] = max(0, int(round(to_number(value, fallback))))
        elif isinstance(fallback, float):
            values[name] = max(0.0, to_number(value, fallback))
        else:
            values[name] = "" if value is None else str(value)
    return FinancialInputs(**values)


def monthly_payment(annual_rate, term_years, principal):
    """Calculate the fully amortizing monthly payment for a loan.

    ``annual_rate`` is the nominal yearly rate as a fraction (``0.04`` for
    4%), ``term_years`` the amortization period and ``principal`` the
    starting loan amount.  No loan (zero principal or term) costs nothing and
    a zero rate amortizes straight-line.
    """

    n = term_years * 12
    if principal <= 0 or term_years <= 0:
        return 0.0
    if annual_rate <= 0:
        return principal / n
    r = annual_rate / 12
    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def principal_from_payment(payment, annual_rate, term_years):
    """Reverse amortization to find the loan amount for a given payment.

    Used to translate a monthly overshoot into the loan reduction that
    removes it, at the same rate and term.
    """

    n = term_years * 12
    if payment <= 0 or term_years <= 0:
        return 0.0
    if annual_rate <= 0:
        return payment * n
    r = annual_rate / 12
    return payment * (1 - (1 + r) ** (-n)) / r


def build_schedule(principal, annual_rate, term_years) -> List[AmortizationRow]:
    """Month-by-month breakdown of a fixed payment into interest and principal.

    The principal portion is clamped to the outstanding balance so the last
    month never overpays and the balance ends at exactly zero.
    """

    if principal <= 0 or term_years <= 0:
        return []
    months = int(term_years * 12)
    pay = monthly_payment(annual_rate, term_years, principal)
    r = max(annual_rate, 0.0) / 12
    bal = float(principal)
    rows: List[AmortizationRow] = []
    for month in range(1, months + 1):
        interest = bal * r
        princ = min(pay - interest, bal)
        bal = max(0.0, bal - princ)
        rows.append(
            AmortizationRow(
                month=month,
                payment=round2(pay),
                interest=round2(interest),
                principal=round2(princ),
                balance=round2(bal),
            )
        )
    return rows


def schedule_totals(rows: List[AmortizationRow]) -> Dict[str, float]:
    """Total interest and principal paid over a schedule."""

    return {
        "total_interest": round2(sum(r.interest for r in rows)),
        "total_principal": round2(sum(r.principal for r in rows)),
    }


def schedule_frame(rows: List[AmortizationRow]) -> pd.DataFrame:
    """Tabular view of a schedule for display and spreadsheet export."""

    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    return pd.DataFrame(
        [[r.month, r.payment, r.interest, r.principal, r.balance] for r in rows],
        columns=SCHEDULE_COLUMNS,
    )


def _cost_parts(inputs: FinancialInputs) -> Tuple[float, float, float]:
    # registration tax, renovation incl. contingency, total
    reg_tax = inputs.purchase_price * inputs.registration_rate_pct / 100
    reno_with_cont = inputs.renovation_budget * (1 + inputs.contingency_pct / 100)
    total = inputs.purchase_price + reg_tax + inputs.notary_fees + reno_with_cont
    return reg_tax, reno_with_cont, total


def total_project_cost(inputs: FinancialInputs) -> float:
    """Purchase price plus registration tax, notary fees and padded renovation."""

    return _cost_parts(inputs)[2]


def summarize(inputs: FinancialInputs) -> Summary:
    """Combine costs, sources and loan payments into one consolidated summary."""

    reg_tax, reno_with_cont, total_project = _cost_parts(inputs)
    total_sources = (
        inputs.own_cash
        + inputs.crypto_net
        + inputs.family_loan_amount
        + inputs.bank_loan_amount
    )
    bank_monthly = monthly_payment(
        inputs.bank_rate_pct / 100, inputs.bank_term_years, inputs.bank_loan_amount
    )
    family_monthly = monthly_payment(
        inputs.family_loan_rate_pct / 100,
        inputs.family_loan_term_years,
        inputs.family_loan_amount,
    )
    total_debt = bank_monthly + family_monthly
    airbnb = inputs.airbnb_income if inputs.use_airbnb_income else 0.0
    net_after = (
        inputs.net_income_monthly - inputs.other_fixed_costs_monthly + airbnb - total_debt
    )
    # zero income reports 0% rather than an infinite ratio
    dti_pct = (
        total_debt / inputs.net_income_monthly * 100 if inputs.net_income_monthly > 0 else 0.0
    )
    return Summary(
        reg_tax=round2(reg_tax),
        reno_with_cont=round2(reno_with_cont),
        total_project=round2(total_project),
        total_sources=round2(total_sources),
        funding_gap=round2(total_project - total_sources),
        bank_monthly=round2(bank_monthly),
        family_monthly=round2(family_monthly),
        total_debt=round2(total_debt),
        dti_pct=round2(dti_pct),
        net_after=round2(net_after),
    )


def affordability_status(summary: Summary) -> AffordabilityStatus:
    """Classify a summary for display: failures dominate warnings."""

    if summary.funding_gap > 0 or summary.dti_pct > DTI_MAX_PCT or summary.net_after < 0:
        return AffordabilityStatus.BAD
    if summary.dti_pct <= DTI_COMFORTABLE_PCT and summary.net_after > 0:
        return AffordabilityStatus.GOOD
    return AffordabilityStatus.WARN


def auto_bank_loan(inputs: FinancialInputs) -> float:
    """Bank loan needed to close the gap left by the other sources.

    Surplus sources never produce a negative loan; the result is floored at 0.
    """

    other_sources = inputs.own_cash + inputs.crypto_net + inputs.family_loan_amount
    return max(0.0, round2(total_project_cost(inputs) - other_sources))


def with_auto_bank_loan(inputs: FinancialInputs) -> FinancialInputs:
    """Return a new snapshot whose bank loan is recomputed from the costs."""

    return inputs.model_copy(update={"bank_loan_amount": auto_bank_loan(inputs)})


DEFAULT_INPUTS = with_auto_bank_loan(FinancialInputs(**DEFAULT_INPUT_VALUES))
