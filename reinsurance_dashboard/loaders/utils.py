"""
Shared utilities for data ingestion: header detection, numeric cleaning,
column renaming.
"""

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

_NUMERIC_JUNK_RE = re.compile(r"[\"',]")


def to_snake_case(name: str) -> str:
    """Convert a raw export header to snake_case.

    Handles spaces, parentheses, slashes, dots, and percent signs:
    "GRS_PREM (KD)" -> "grs_prem_kd", "SignShare%" -> "sign_share_pct",
    "Org.Insured/Trty Name" -> "org_insured_trty_name".
    """
    s = str(name).strip()
    # Replace common symbols
    s = s.replace("%", "_pct").replace("/", "_").replace("(", "").replace(")", "")
    s = s.replace("-", "_").replace(".", "_")
    # Collapse whitespace and special chars to underscores
    s = re.sub(r"[^a-zA-Z0-9]+", "_", s)
    # CamelCase to snake_case
    s = re.sub(r"([a-z])([A-Z])", r"\1_\2", s)
    s = s.lower().strip("_")
    # Collapse multiple underscores
    s = re.sub(r"_+", "_", s)
    return s


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the row containing signature headers.

    Cell values are compared after to_snake_case. Returns the 1-based row
    index where at least two cells match, or None if not found within
    `max_rows`.
    """
    for row_idx, row in enumerate(
        sheet.iter_rows(min_row=1, max_row=max_rows, values_only=True), start=1
    ):
        matches = sum(
            1 for value in row
            if value is not None and to_snake_case(value) in signature
        )
        if matches >= 2:
            return row_idx
    return None


def clean_numeric(val: Any) -> float:
    """Coerce a money/share value to float, returning 0.0 for anything unusable.

    Quotes and thousands separators are stripped first ('"1,234.50"' -> 1234.5).
    """
    number = safe_float(val)
    return 0.0 if number is None else number


def safe_float(val: Any) -> float | None:
    """Coerce a value to float, returning None for non-numeric values."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, str):
        val = _NUMERIC_JUNK_RE.sub("", val).strip()
        # Skip formula strings and text labels
        if val.startswith("=") or not val:
            return None
        # Handle percentage strings like "78%"
        if val.endswith("%"):
            val = val[:-1]
        try:
            number = float(val)
        except ValueError:
            return None
    else:
        try:
            number = float(val)
        except (ValueError, TypeError):
            return None
    if not math.isfinite(number):
        return None
    return number
