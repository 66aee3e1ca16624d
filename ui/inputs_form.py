import streamlit as st

from core.i18n import t
from core.utils import format_eur
from villaplan.calculators import DEFAULT_INPUTS, auto_bank_loan, inputs_from_raw, with_auto_bank_loan
from villaplan.models import FinancialInputs

WIDGET_PREFIX = "in_"

# (field, label, kind, step, help)
COST_FIELDS = [
    ("purchase_price", "Purchase price", "money", 5000.0, None),
    ("registration_rate_pct", "Registration tax %", "pct", 0.5, "Flemish rate for a sole own home is 2%"),
    ("notary_fees", "Notary & admin fees", "money", 500.0, None),
    ("renovation_budget", "Renovation budget", "money", 5000.0, None),
    ("contingency_pct", "Contingency %", "pct", 1.0, "Buffer on the renovation budget for overruns"),
]
SOURCE_FIELDS = [
    ("own_cash", "Own cash", "money", 1000.0, None),
    ("crypto_net", "Crypto (net)", "money", 1000.0, "Value after tax and exit costs"),
    ("family_loan_amount", "Family loan", "money", 5000.0, None),
    ("family_loan_rate_pct", "Family loan rate %", "pct", 0.1, None),
    ("family_loan_term_years", "Family loan term (years)", "years", 1, None),
    ("bank_rate_pct", "Bank rate %", "pct", 0.05, None),
    ("bank_term_years", "Bank term (years)", "years", 1, None),
]
INCOME_FIELDS = [
    ("net_income_monthly", "Net household income / month", "money", 100.0, None),
    ("other_fixed_costs_monthly", "Other fixed costs / month", "money", 50.0, None),
    ("airbnb_income", "Airbnb income / month", "money", 50.0, None),
    ("business_use_pct", "Business use %", "pct", 1.0, "Reported only"),
]


def current_inputs() -> FinancialInputs:
    """Inputs held in the session, clamped; the baseline plan when empty."""
    raw = st.session_state.get("inputs")
    if not raw:
        return DEFAULT_INPUTS
    return inputs_from_raw(raw)


def load_into_form(inputs: FinancialInputs, auto_bank: bool = False) -> None:
    """Replace the form contents, e.g. when a saved scenario is opened.

    Widget keys are dropped so the widgets pick up the new values on the next
    run instead of keeping what the user last typed.
    """
    for key in [k for k in st.session_state.keys() if str(k).startswith(WIDGET_PREFIX)]:
        del st.session_state[key]
    st.session_state["inputs"] = inputs.model_dump()
    st.session_state["auto_bank_loan"] = auto_bank


def _field(name, label, kind, step, help_text, values, lang):
    key = WIDGET_PREFIX + name
    if kind == "years":
        return st.number_input(
            t(label, lang), value=int(values[name]), min_value=0, step=step, key=key, help=help_text
        )
    return st.number_input(
        t(label, lang),
        value=float(values[name]),
        min_value=0.0,
        step=step,
        format="%.2f" if kind == "pct" else "%.0f",
        key=key,
        help=help_text,
    )


def render_inputs_form(lang: str = "en") -> FinancialInputs:
    """Render the plan inputs and return the clamped snapshot."""
    base = current_inputs()
    values = base.model_dump()
    raw = dict(values)

    raw["project_name"] = st.text_input(t("Project name", lang), value=values["project_name"], key="in_project_name")

    c1, c2, c3 = st.columns(3)
    with c1:
        st.subheader(t("Project costs", lang))
        for name, label, kind, step, help_text in COST_FIELDS:
            raw[name] = _field(name, label, kind, step, help_text, values, lang)
    with c2:
        st.subheader(t("Sources", lang))
        for name, label, kind, step, help_text in SOURCE_FIELDS:
            raw[name] = _field(name, label, kind, step, help_text, values, lang)
        auto = st.checkbox(
            t("Calculate bank loan automatically", lang),
            value=bool(st.session_state.get("auto_bank_loan", True)),
            key="in_auto_bank_loan",
        )
        st.session_state["auto_bank_loan"] = auto
        if auto:
            preview = inputs_from_raw(raw, defaults=base)
            st.caption(f"{t('Bank loan', lang)}: {format_eur(auto_bank_loan(preview))}")
        else:
            raw["bank_loan_amount"] = st.number_input(
                t("Bank loan", lang),
                value=float(values["bank_loan_amount"]),
                min_value=0.0,
                step=5000.0,
                format="%.0f",
                key="in_bank_loan_amount",
            )
    with c3:
        st.subheader(t("Income & costs", lang))
        for name, label, kind, step, help_text in INCOME_FIELDS:
            raw[name] = _field(name, label, kind, step, help_text, values, lang)
        raw["use_airbnb_income"] = st.checkbox(
            t("Count Airbnb income", lang), value=bool(values["use_airbnb_income"]), key="in_use_airbnb_income"
        )

    raw["report_notes"] = st.text_area(t("Report notes", lang), value=values["report_notes"], key="in_report_notes")

    inputs = inputs_from_raw(raw, defaults=base)
    if auto:
        inputs = with_auto_bank_loan(inputs)
    st.session_state["inputs"] = inputs.model_dump()
    return inputs
