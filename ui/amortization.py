import streamlit as st

from core.i18n import t
from core.utils import format_eur
from villaplan.calculators import build_schedule, schedule_frame, schedule_totals
from villaplan.models import FinancialInputs


def loan_schedules(inputs: FinancialInputs):
    """Bank and family schedules for the given inputs."""
    bank = build_schedule(inputs.bank_loan_amount, inputs.bank_rate_pct / 100, inputs.bank_term_years)
    family = build_schedule(
        inputs.family_loan_amount, inputs.family_loan_rate_pct / 100, inputs.family_loan_term_years
    )
    return bank, family


def _render_schedule(title, rows, lang):
    st.subheader(t(title, lang))
    if not rows:
        st.info(t("No loan entered.", lang))
        return
    totals = schedule_totals(rows)
    c1, c2 = st.columns(2)
    c1.metric(t("Total interest", lang), format_eur(totals["total_interest"], 2))
    c2.metric(t("Total principal", lang), format_eur(totals["total_principal"], 2))
    st.dataframe(schedule_frame(rows), hide_index=True, use_container_width=True)


def render_amortization_view(inputs: FinancialInputs, lang: str = "en"):
    bank, family = loan_schedules(inputs)
    tabs = st.tabs([t("Bank loan", lang), t("Family loan", lang)])
    with tabs[0]:
        _render_schedule("Bank amortization", bank, lang)
    with tabs[1]:
        _render_schedule("Family amortization", family, lang)
