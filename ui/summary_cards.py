import streamlit as st

from core.i18n import t
from core.utils import format_eur, format_number
from villaplan.calculators import affordability_status
from villaplan.models import AffordabilityStatus, Summary

STATUS_MESSAGES = {
    AffordabilityStatus.GOOD: "Plan is fully funded and affordable.",
    AffordabilityStatus.WARN: "Plan is feasible but tight.",
    AffordabilityStatus.BAD: "Plan is not affordable as entered.",
}


def render_summary_cards(summary: Summary, lang: str = "en"):
    """Render headline metrics and the affordability verdict."""
    status = affordability_status(summary)
    message = t(STATUS_MESSAGES[status], lang)
    if status is AffordabilityStatus.GOOD:
        st.success(message)
    elif status is AffordabilityStatus.WARN:
        st.warning(message)
    else:
        st.error(message)

    cols = st.columns(4)
    cols[0].metric(t("Total project", lang), format_eur(summary.total_project))
    cols[1].metric(t("Total sources", lang), format_eur(summary.total_sources))
    cols[2].metric(t("Funding gap", lang), format_eur(summary.funding_gap))
    cols[3].metric(t("Registration tax", lang), format_eur(summary.reg_tax))

    cols = st.columns(4)
    cols[0].metric(t("Bank monthly", lang), format_eur(summary.bank_monthly, 2))
    cols[1].metric(t("Family monthly", lang), format_eur(summary.family_monthly, 2))
    cols[2].metric("DTI", f"{format_number(summary.dti_pct)}%")
    cols[3].metric(t("Net after debt", lang), format_eur(summary.net_after, 2))
    return status
