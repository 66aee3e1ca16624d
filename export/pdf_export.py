"""PDF report of the plan summary and the first two years of the bank loan."""
from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.utils import format_eur, format_number, format_pct
from villaplan.calculators import SCHEDULE_COLUMNS
from villaplan.models import AmortizationRow, FinancialInputs, Summary
from villaplan.presets import DISCLAIMER, DTI_COMFORTABLE_PCT

logger = logging.getLogger(__name__)

PREVIEW_MONTHS = 24
APP_TITLE = "Renovation Affordability Planner"

_GRID_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("BOX", (0, 0), (-1, -1), 1, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def _flag(condition: bool) -> str:
    return " (!)" if condition else ""


def build_plan_pdf(
    inputs: FinancialInputs,
    summary: Summary,
    bank_schedule: List[AmortizationRow],
    now: Optional[datetime] = None,
) -> bytes:
    """Render the plan report and return the PDF bytes."""
    now = now or datetime.now()
    styles = getSampleStyleSheet()
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=42, rightMargin=42, topMargin=42, bottomMargin=42)
    story = [
        Paragraph(f"<b>{APP_TITLE}</b>", styles["Title"]),
        Paragraph(escape(inputs.project_name), styles["Heading2"]),
        Paragraph(now.strftime("%d/%m/%Y %H:%M"), styles["Normal"]),
        Spacer(1, 12),
    ]

    airbnb = inputs.airbnb_income if inputs.use_airbnb_income else 0.0
    fin_rows = [
        ["Financial Summary", ""],
        ["Total Project Cost", format_eur(summary.total_project)],
        ["Total Sources", format_eur(summary.total_sources)],
        ["Funding Gap", format_eur(summary.funding_gap) + _flag(summary.funding_gap > 0)],
        ["Bank Monthly", format_eur(summary.bank_monthly, 2)],
        ["Family Monthly", format_eur(summary.family_monthly, 2)],
        ["Total Debt Service", format_eur(summary.total_debt, 2)],
        ["Debt-to-Income", f"{format_number(summary.dti_pct)}%" + _flag(summary.dti_pct > DTI_COMFORTABLE_PCT)],
        ["Net Income Monthly", format_eur(inputs.net_income_monthly, 2)],
        ["Other Fixed Costs", format_eur(inputs.other_fixed_costs_monthly, 2)],
        ["Airbnb Income", format_eur(airbnb, 2)],
        ["Monthly Net After", format_eur(summary.net_after, 2) + _flag(summary.net_after < 0)],
    ]
    t = Table(fin_rows, hAlign="LEFT", colWidths=[200, 200])
    t.setStyle(_GRID_STYLE)
    story += [t, Spacer(1, 12)]

    cost_rows = [
        ["Project Costs", ""],
        ["Purchase Price", format_eur(inputs.purchase_price)],
        [f"Registration Tax ({format_pct(inputs.registration_rate_pct)}%)", format_eur(summary.reg_tax)],
        ["Notary & Admin", format_eur(inputs.notary_fees)],
        [f"Renovation (incl. {format_pct(inputs.contingency_pct)}% contingency)", format_eur(summary.reno_with_cont)],
    ]
    t = Table(cost_rows, hAlign="LEFT", colWidths=[200, 200])
    t.setStyle(_GRID_STYLE)
    story += [t, Spacer(1, 12)]

    preview = bank_schedule[:PREVIEW_MONTHS]
    if preview:
        rows = [SCHEDULE_COLUMNS] + [
            [str(r.month), format_eur(r.payment), format_eur(r.interest), format_eur(r.principal), format_eur(r.balance)]
            for r in preview
        ]
        t = Table(rows, hAlign="LEFT", repeatRows=1)
        t.setStyle(_GRID_STYLE)
        story += [
            Paragraph(f"<b>Bank Amortization (First {PREVIEW_MONTHS} months)</b>", styles["Heading3"]),
            Spacer(1, 6),
            t,
            Spacer(1, 12),
        ]

    if inputs.report_notes:
        story += [Paragraph("<b>Notes</b>", styles["Heading3"]), Spacer(1, 6)]
        for line in inputs.report_notes.splitlines():
            story.append(Paragraph(escape(line) or "&nbsp;", styles["Normal"]))
        story.append(Spacer(1, 12))

    story += [
        Spacer(1, 12),
        Paragraph(f"<font size=8>Generated with {APP_TITLE} | {now:%d/%m/%Y}</font>", styles["Normal"]),
        Paragraph(f"<font size=8>{escape(DISCLAIMER)}</font>", styles["Normal"]),
    ]
    doc.build(story)
    logger.debug("Built PDF report for %r (%d schedule rows)", inputs.project_name, len(preview))
    return buf.getvalue()
