"""Label/value tables shared by every export format.

CSV, spreadsheet and PDF all read the same rows, so their figures and labels
reconcile.  A row with a ``None`` value is a section heading; an empty tuple
is a spacer.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from villaplan.models import FinancialInputs, Summary

Row = Tuple[str, Optional[float]]


def cost_rows(inputs: FinancialInputs, summary: Summary) -> List[Row]:
    return [
        ("PROJECT COSTS", None),
        ("Purchase Price", inputs.purchase_price),
        ("Registration Tax", summary.reg_tax),
        ("Notary & Admin Fees", inputs.notary_fees),
        ("Renovation (incl. contingency)", summary.reno_with_cont),
        ("TOTAL Project Cost", summary.total_project),
    ]


def source_rows(inputs: FinancialInputs, summary: Summary) -> List[Row]:
    return [
        ("SOURCES", None),
        ("Own Cash", inputs.own_cash),
        ("Crypto (net)", inputs.crypto_net),
        ("Family Loan", inputs.family_loan_amount),
        ("Bank Loan", inputs.bank_loan_amount),
        ("TOTAL Sources", summary.total_sources),
        ("Funding Gap", summary.funding_gap),
    ]


def affordability_rows(inputs: FinancialInputs, summary: Summary) -> List[Row]:
    return [
        ("AFFORDABILITY", None),
        ("Bank Monthly Payment", summary.bank_monthly),
        ("Family Monthly Payment", summary.family_monthly),
        ("TOTAL Monthly Debt", summary.total_debt),
        ("Debt-to-Income %", summary.dti_pct),
        ("Net Income Monthly", inputs.net_income_monthly),
        ("Other Fixed Costs", inputs.other_fixed_costs_monthly),
        ("Airbnb Income", inputs.airbnb_income if inputs.use_airbnb_income else 0.0),
        ("Monthly Net After", summary.net_after),
    ]


def summary_rows(inputs: FinancialInputs, summary: Summary) -> List[tuple]:
    return (
        cost_rows(inputs, summary)
        + [()]
        + source_rows(inputs, summary)
        + [()]
        + affordability_rows(inputs, summary)
    )


def is_percent(label: str) -> bool:
    return label.endswith("%")
