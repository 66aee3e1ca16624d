"""JSON export of the current plan and its summary."""
from __future__ import annotations

import json

from villaplan.models import FinancialInputs, Summary


def plan_json(inputs: FinancialInputs, summary: Summary) -> str:
    """``{"inputs": ..., "summary": ...}`` with the stored camelCase keys."""
    data = {
        "inputs": inputs.model_dump(mode="json", by_alias=True),
        "summary": summary.model_dump(mode="json", by_alias=True),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
