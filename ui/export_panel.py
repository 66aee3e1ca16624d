import logging

import streamlit as st

from core.i18n import t
from core.utils import file_stem
from export.csv_export import amortization_csv, sensitivity_csv, summary_csv
from export.json_export import plan_json
from export.pdf_export import build_plan_pdf
from export.xlsx_export import create_excel_workbook
from villaplan.models import FinancialInputs, Summary

logger = logging.getLogger(__name__)


def render_export_panel(inputs: FinancialInputs, summary: Summary, bank, family, grid, lang: str = "en"):
    """Download buttons for every export format."""
    stem = file_stem(inputs.project_name)
    c1, c2, c3 = st.columns(3)
    c1.download_button(
        t("Summary (CSV)", lang), summary_csv(inputs, summary), f"{stem}_Summary.csv", "text/csv", key="dl_summary_csv"
    )
    c2.download_button(
        t("Bank schedule (CSV)", lang), amortization_csv(bank), f"{stem}_Bank_Amortization.csv", "text/csv", key="dl_bank_csv"
    )
    c3.download_button(
        t("Family schedule (CSV)", lang), amortization_csv(family), f"{stem}_Family_Amortization.csv", "text/csv", key="dl_family_csv"
    )

    c1, c2, c3 = st.columns(3)
    if grid:
        c1.download_button(
            t("Sensitivity (CSV)", lang), sensitivity_csv(grid), f"{stem}_Sensitivity.csv", "text/csv", key="dl_sens_csv"
        )
        c2.download_button(
            t("Workbook (XLSX)", lang),
            create_excel_workbook(inputs, summary, bank, family, grid).getvalue(),
            f"{stem}.xlsx",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="dl_xlsx",
        )
    else:
        c1.caption(t("Fix the sensitivity settings to export the grid.", lang))
    c3.download_button(t("Plan (JSON)", lang), plan_json(inputs, summary), f"{stem}.json", "application/json", key="dl_json")

    st.download_button(
        t("Report (PDF)", lang), build_plan_pdf(inputs, summary, bank), f"{stem}.pdf", "application/pdf", key="dl_pdf"
    )
    logger.debug("Prepared exports for %s", stem)
