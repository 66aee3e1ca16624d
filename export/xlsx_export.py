"""
Excel export: summary, both amortization schedules and the sensitivity grid
"""
from io import BytesIO
from typing import List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from export.tables import is_percent, summary_rows
from villaplan.calculators import SCHEDULE_COLUMNS
from villaplan.models import AmortizationRow, FinancialInputs, Summary
from villaplan.sensitivity import SensitivityGrid, grid_amounts, grid_rates

HEADER_FILL = "4CC9F0"
HEADER_FONT = "FFFFFF"


def _apply_header_style(cell):
    """Apply header styling to cell"""
    cell.font = Font(bold=True, color=HEADER_FONT)
    cell.fill = PatternFill(start_color=HEADER_FILL, end_color=HEADER_FILL, fill_type="solid")
    cell.alignment = Alignment(horizontal="center", vertical="center")


def _apply_number_format(cell, format_type: str = "currency"):
    """Apply number formatting"""
    formats = {
        "currency": "€#,##0.00",
        "percent": "0.00",
        "integer": "0",
    }
    cell.number_format = formats.get(format_type, "#,##0.00")


def _create_summary_sheet(wb: Workbook, inputs: FinancialInputs, summary: Summary):
    ws = wb.active
    ws.title = "Summary"
    ws["A1"] = "Renovation Affordability Planner - Summary"
    ws["A1"].font = Font(bold=True, size=14)
    ws["A2"] = "Project Name:"
    ws["B2"] = inputs.project_name

    row_idx = 4
    for row in summary_rows(inputs, summary):
        if row:
            label, value = row
            ws.cell(row=row_idx, column=1, value=label)
            if value is None:
                ws.cell(row=row_idx, column=1).font = Font(bold=True)
            else:
                cell = ws.cell(row=row_idx, column=2, value=value)
                _apply_number_format(cell, "percent" if is_percent(label) else "currency")
        row_idx += 1

    ws.column_dimensions["A"].width = 34
    ws.column_dimensions["B"].width = 18


def _create_schedule_sheet(wb: Workbook, title: str, schedule: List[AmortizationRow]):
    ws = wb.create_sheet(title)
    for col, header in enumerate(SCHEDULE_COLUMNS, start=1):
        _apply_header_style(ws.cell(row=1, column=col, value=header))
    for row_idx, r in enumerate(schedule, start=2):
        ws.cell(row=row_idx, column=1, value=r.month)
        for col, value in enumerate([r.payment, r.interest, r.principal, r.balance], start=2):
            _apply_number_format(ws.cell(row=row_idx, column=col, value=value))
    for letter in "BCDE":
        ws.column_dimensions[letter].width = 14


def _create_sensitivity_sheet(wb: Workbook, grid: SensitivityGrid):
    ws = wb.create_sheet("Sensitivity")
    headers = ["Amount"] + [f"{rate:.2f}%" for rate in grid_rates(grid)]
    for col, header in enumerate(headers, start=1):
        _apply_header_style(ws.cell(row=1, column=col, value=header))
    for row_idx, (amount, row) in enumerate(zip(grid_amounts(grid), grid), start=2):
        _apply_number_format(ws.cell(row=row_idx, column=1, value=amount))
        for col, cell in enumerate(row, start=2):
            _apply_number_format(ws.cell(row=row_idx, column=col, value=cell.monthly))
    ws.column_dimensions["A"].width = 16


def create_excel_workbook(
    inputs: FinancialInputs,
    summary: Summary,
    bank_schedule: List[AmortizationRow],
    family_schedule: List[AmortizationRow],
    grid: SensitivityGrid,
) -> BytesIO:
    """
    Build the plan workbook

    Args:
        inputs: Plan inputs
        summary: Summary computed from ``inputs``
        bank_schedule: Bank loan amortization rows
        family_schedule: Family loan amortization rows
        grid: Sensitivity grid

    Returns:
        BytesIO buffer positioned at the start of the .xlsx file
    """
    wb = Workbook()
    _create_summary_sheet(wb, inputs, summary)
    _create_schedule_sheet(wb, "Bank Amortization", bank_schedule)
    _create_schedule_sheet(wb, "Family Amortization", family_schedule)
    _create_sensitivity_sheet(wb, grid)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer
