from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _Snapshot(BaseModel):
    """Immutable record serialized with the camelCase keys of stored plans."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FinancialInputs(_Snapshot):
    # Project costs
    purchase_price: float = Field(0.0, ge=0)
    registration_rate_pct: float = Field(0.0, ge=0)
    notary_fees: float = Field(0.0, ge=0)
    renovation_budget: float = Field(0.0, ge=0)
    contingency_pct: float = Field(0.0, ge=0)

    # Sources
    own_cash: float = Field(0.0, ge=0)
    crypto_net: float = Field(0.0, ge=0)
    family_loan_amount: float = Field(0.0, ge=0)
    family_loan_rate_pct: float = Field(0.0, ge=0)
    family_loan_term_years: int = Field(0, ge=0)
    bank_loan_amount: float = Field(0.0, ge=0)
    bank_rate_pct: float = Field(0.0, ge=0)
    bank_term_years: int = Field(0, ge=0)

    # Income & costs
    net_income_monthly: float = Field(0.0, ge=0)
    other_fixed_costs_monthly: float = Field(0.0, ge=0)
    airbnb_income: float = Field(0.0, ge=0)
    use_airbnb_income: bool = False

    # Carried through to reports only
    business_use_pct: float = Field(0.0, ge=0)
    project_name: str = ""
    report_notes: str = ""


class AmortizationRow(_Snapshot):
    month: int
    payment: float
    interest: float
    principal: float
    balance: float


class Summary(_Snapshot):
    reg_tax: float
    reno_with_cont: float
    total_project: float
    total_sources: float
    funding_gap: float
    bank_monthly: float
    family_monthly: float
    total_debt: float
    dti_pct: float
    net_after: float


class AffordabilityStatus(str, Enum):
    GOOD = "GOOD"
    WARN = "WARN"
    BAD = "BAD"


class SensitivityConfig(_Snapshot):
    """Bounds of the loan amount x interest rate sweep (rates in percent)."""

    min_amount: float
    max_amount: float
    step_amount: float
    min_rate: float
    max_rate: float
    step_rate: float

    @model_validator(mode="after")
    def _check_bounds(self):
        from villaplan.sensitivity import check_config

        check_config(self)
        return self


class SensitivityCell(_Snapshot):
    amount: float
    rate: float
    monthly: float
    is_comfortable: bool


class ColorTier(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class RiskTier(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class ScenarioAnalysis(_Snapshot):
    name: str
    rate: float
    income_delta: int
    bank_monthly: float
    family_monthly: float
    total_debt: float
    dti_pct: float
    monthly_net: float
    risk: RiskTier


class AdvisorAnalysis(_Snapshot):
    summary_text: str
    risk_level: str
    risk_color: RiskColor
    overall_risk: RiskTier
    scenarios: List[ScenarioAnalysis]
    recommendations: List[str]
    full_text: str
    generated_at: datetime
