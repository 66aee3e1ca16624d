"""Assorted helpers for the UI and exports."""
import re

from villaplan.formatting import format_eur, format_number, format_pct

__all__ = ["file_stem", "format_eur", "format_number", "format_pct"]


def file_stem(project_name: str, fallback: str = "plan") -> str:
    """File name stem for exports; whitespace runs become underscores."""
    stem = re.sub(r"\s+", "_", project_name.strip())
    return stem or fallback
