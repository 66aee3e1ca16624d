"""CSV exports; every cell is quoted and amounts use Belgian formatting."""
from __future__ import annotations

import csv
import io
from typing import List

import pandas as pd

from core.utils import format_number
from export.tables import is_percent, summary_rows
from villaplan.calculators import SCHEDULE_COLUMNS, schedule_frame, schedule_totals
from villaplan.models import AmortizationRow, FinancialInputs, Summary
from villaplan.sensitivity import SensitivityGrid, grid_frame


def frame_to_csv(frame: pd.DataFrame) -> str:
    buf = io.StringIO()
    frame.to_csv(buf, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return buf.getvalue()


def summary_csv(inputs: FinancialInputs, summary: Summary) -> str:
    rows: List[dict] = [{"Metric": "Project Name", "Value": inputs.project_name}, {"Metric": "", "Value": ""}]
    for row in summary_rows(inputs, summary):
        if not row:
            rows.append({"Metric": "", "Value": ""})
            continue
        label, value = row
        if value is None:
            text = ""
        elif is_percent(label):
            text = f"{format_number(value)}%"
        elif label == "Airbnb Income" and not inputs.use_airbnb_income:
            text = "€0 (disabled)"
        else:
            text = f"€{format_number(value)}"
        rows.append({"Metric": label, "Value": text})
    return frame_to_csv(pd.DataFrame(rows, columns=["Metric", "Value"]))


def amortization_csv(schedule: List[AmortizationRow]) -> str:
    frame = schedule_frame(schedule).astype(object)
    for col in SCHEDULE_COLUMNS[1:]:
        frame[col] = frame[col].map(format_number)
    totals = schedule_totals(schedule)
    footer = pd.DataFrame(
        [
            ["", "", "", "", ""],
            ["TOTALS", "", format_number(totals["total_interest"]), format_number(totals["total_principal"]), ""],
        ],
        columns=SCHEDULE_COLUMNS,
    )
    return frame_to_csv(pd.concat([frame, footer], ignore_index=True))


def sensitivity_csv(grid: SensitivityGrid) -> str:
    frame = grid_frame(grid).apply(lambda col: col.map(format_number))
    frame.columns = [f"{rate:.2f}%" for rate in frame.columns]
    frame.insert(0, "Amount", [f"€{format_number(amount, 0)}" for amount in frame.index])
    return frame_to_csv(frame)
