
DISCLAIMER = (
    "This analysis is based solely on the figures entered and is not a substitute for "
    "professional financial, tax or legal advice. Confirm current rates and conditions "
    "with your bank and have any family loan recorded by a notary."
)

# Debt-to-income bands (percent of net monthly income)
DTI_COMFORTABLE_PCT = 45.0
DTI_MAX_PCT = 55.0
DTI_STRESS_PCT = 60.0

# Monthly buffer left after all costs and debt service
BUFFER_LOW_RISK = 1000.0
BUFFER_TIGHT = 500.0
BUFFER_HEALTHY = 1500.0

SURPLUS_NOTABLE = 10000.0
AIRBNB_DEPENDENCY = 500.0
MIN_CONTINGENCY_PCT = 12.0

# Rate shock (percentage points) and income shock (percent) for the
# optimistic/conservative variants; the optimistic rate never drops below
# RATE_FLOOR_PCT.
RATE_SHOCK_PCT = 0.5
INCOME_SHOCK_PCT = 10
RATE_FLOOR_PCT = 0.5

MAX_RECOMMENDATIONS = 5

# Heatmap tiers over the normalized monthly payment
COLOR_TIER_LOW = 0.33
COLOR_TIER_HIGH = 0.67

# Baseline plan; the bank loan is derived from costs and other sources.
DEFAULT_INPUT_VALUES = {
    "purchase_price": 700000.0,
    "registration_rate_pct": 2.0,
    "notary_fees": 5000.0,
    "renovation_budget": 450000.0,
    "contingency_pct": 12.0,
    "own_cash": 30000.0,
    "crypto_net": 0.0,
    "family_loan_amount": 200000.0,
    "family_loan_rate_pct": 1.5,
    "family_loan_term_years": 15,
    "bank_loan_amount": 0.0,
    "bank_rate_pct": 4.0,
    "bank_term_years": 25,
    "net_income_monthly": 10500.0,
    "other_fixed_costs_monthly": 1500.0,
    "airbnb_income": 800.0,
    "use_airbnb_income": True,
    "business_use_pct": 15.0,
    "project_name": "Brasschaat Villa Plan",
    "report_notes": "",
}

DEFAULT_SENSITIVITY_VALUES = {
    "min_amount": 600000.0,
    "max_amount": 1000000.0,
    "step_amount": 25000.0,
    "min_rate": 3.0,
    "max_rate": 5.5,
    "step_rate": 0.25,
}
