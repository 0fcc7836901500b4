"""
Display label helpers for divisions and months.
"""
import re
from typing import Any, Optional

DIVISION_PREFIX_PATTERN = re.compile(r"^[A-Z]{2}_")
DIVISION_WORD_PATTERN = re.compile(r"^Division\s+")


def strip_division_prefix(division_id: str) -> str:
    """
    Remove a two-letter scheme prefix such as ``EE_`` from a division code.

    Falls back to the original code when stripping leaves nothing or
    changes nothing, e.g. ``EE_Adava`` -> ``Adava`` and ``Adava`` -> ``Adava``.
    """
    if not division_id:
        return division_id
    clean_name = DIVISION_PREFIX_PATTERN.sub("", division_id, count=1)
    if not clean_name or clean_name == division_id:
        return division_id
    return clean_name


def division_chart_label(division_id: Any, label: Optional[str] = None) -> str:
    """Chart axis label for a division row, e.g. ``Division EE_Adava`` -> ``Adava``."""
    text = label or f"Division {division_id}"
    text = DIVISION_WORD_PATTERN.sub("", text, count=1)
    return DIVISION_PREFIX_PATTERN.sub("", text, count=1)


def month_label(month_id: Any, monthname: Optional[str] = None) -> str:
    """Month display name, falling back to ``Month {id}``."""
    return monthname or f"Month {month_id}"
