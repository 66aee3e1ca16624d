import pandas as pd
import streamlit as st

from core.i18n import t
from villaplan.advisor import analyze
from villaplan.models import FinancialInputs, RiskColor, Summary


def render_advisor_panel(inputs: FinancialInputs, summary: Summary, lang: str = "en"):
    """Risk verdict, scenario table, recommendations and the full report."""
    analysis = analyze(inputs, summary)
    if analysis.risk_color is RiskColor.GREEN:
        st.success(analysis.risk_level)
    elif analysis.risk_color is RiskColor.YELLOW:
        st.warning(analysis.risk_level)
    else:
        st.error(analysis.risk_level)
    st.write(analysis.summary_text)

    table = pd.DataFrame(
        [
            {
                t("Scenario", lang): s.name,
                t("Rate %", lang): s.rate,
                t("Income change %", lang): s.income_delta,
                t("Monthly debt", lang): s.total_debt,
                "DTI %": s.dti_pct,
                t("Net remaining", lang): s.monthly_net,
                t("Risk", lang): s.risk.value,
            }
            for s in analysis.scenarios
        ]
    )
    st.dataframe(table, hide_index=True, use_container_width=True)

    st.subheader(t("Recommendations", lang))
    for i, rec in enumerate(analysis.recommendations, start=1):
        st.markdown(f"{i}. {rec}")

    with st.expander(t("Full report", lang)):
        st.markdown(analysis.full_text)
        st.download_button(
            t("Download report", lang),
            data=analysis.full_text.encode("utf-8"),
            file_name="advisor_report.md",
            mime="text/markdown",
            key="dl_advisor",
        )
    return analysis
