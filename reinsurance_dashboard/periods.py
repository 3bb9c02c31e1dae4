"""
Period resolution: turn heterogeneous year/month/quarter/date inputs into a
canonical (year, quarter, month) view of a policy.

Every resolver is best-effort. Unparseable input resolves to None, never to
zero, the epoch, or "now", so that records without a usable period drop out
of period-bucketed views instead of landing in a wrong bucket.
"""

import logging
import numbers
import re
from dataclasses import dataclass
from typing import Any, Mapping

import pandas as pd

from .config import (
    EXCEL_EPOCH,
    EXCEL_LEAP_BUG_SERIAL,
    MAX_YEAR,
    MIN_YEAR,
    MONTH_LOOKUP,
    MONTH_NAMES,
    QUARTER_LABELS,
)

logger = logging.getLogger(__name__)

_DMY_RE = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$")
_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_SERIAL_RE = re.compile(r"^\d+(\.\d+)?$")
_YEAR_IN_TEXT_RE = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)")
_INT_RE = re.compile(r"^[+-]?\d+(\.0*)?$")
_QUARTER_RE = re.compile(r"^q?\s*(\d+)$", re.IGNORECASE)
_DIGIT_RE = re.compile(r"\d")


@dataclass(frozen=True)
class ResolvedPeriod:
    """Best-effort period of a record. Any part may be None."""

    year: int | None = None
    quarter: str | None = None
    month: int | None = None
    day: int | None = None


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_int(value: Any) -> int | None:
    """Coerce an integral int/float/string to int, else None."""
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if _INT_RE.match(text):
        return int(float(text))
    return None


def _in_year_bounds(year: int | None) -> bool:
    return year is not None and MIN_YEAR <= year <= MAX_YEAR


def quarter_from_month(month: int | None) -> str | None:
    """Map month 1-12 to its calendar quarter label."""
    if month is None or not 1 <= month <= 12:
        return None
    return QUARTER_LABELS[(month - 1) // 3]


def month_name(month: int | None) -> str:
    """Return the three-letter upper-case month label, or '' if invalid."""
    if month is None or not 1 <= month <= 12:
        return ""
    return MONTH_NAMES[month - 1]


# ---------------------------------------------------------------------------
# Year / quarter / month
# ---------------------------------------------------------------------------

def parse_year(value: Any) -> int | None:
    """Integer year within [MIN_YEAR, MAX_YEAR], else None."""
    year = _as_int(value)
    return year if _in_year_bounds(year) else None


def resolve_year(
    uy: Any,
    text: Any = None,
    inception_year: Any = None,
) -> int | None:
    """Resolve the underwriting year of a record.

    Precedence
    ----------
    1. ``uy`` parsed as an integer, accepted within [MIN_YEAR, MAX_YEAR].
    2. A ``19xx``/``20xx`` token found in ``uy`` or in ``text``.
    3. ``inception_year``, same bounds check.
    4. None.
    """
    year = parse_year(uy)
    if year is not None:
        return year

    for candidate in (uy, text):
        if _is_missing(candidate):
            continue
        match = _YEAR_IN_TEXT_RE.search(str(candidate))
        if match:
            return int(match.group(1))

    return parse_year(inception_year)


def resolve_month(value: Any) -> int | None:
    """Accept a numeric month 1-12 or an English month name (short or full)."""
    number = _as_int(value)
    if number is not None:
        return number if 1 <= number <= 12 else None
    if _is_missing(value):
        return None
    return MONTH_LOOKUP.get(str(value).strip().lower())


def resolve_quarter(quarter: Any = None, month: Any = None) -> str | None:
    """Return 'Q1'..'Q4' from an explicit quarter token, else from the month."""
    number = _as_int(quarter)
    if number is None and not _is_missing(quarter):
        match = _QUARTER_RE.match(str(quarter).strip())
        if match:
            number = int(match.group(1))
    if number is not None and 1 <= number <= 4:
        return f"Q{number}"
    return quarter_from_month(resolve_month(month))


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def excel_serial_to_date(serial: float) -> pd.Timestamp | None:
    """Convert a spreadsheet serial day number to a midnight Timestamp.

    Serials from EXCEL_LEAP_BUG_SERIAL on are shifted back one day for the
    1900 leap-year bug. Non-positive serials have no date.
    """
    if serial <= 0:
        return None
    days = int(serial)
    fraction = serial - days
    if days >= EXCEL_LEAP_BUG_SERIAL:
        days -= 1
    try:
        ts = pd.Timestamp(EXCEL_EPOCH) + pd.Timedelta(days=days + fraction)
    except (ValueError, OverflowError):
        logger.warning("Could not convert serial number %s to date", serial)
        return None
    return ts.normalize()


def _build_date(year: str, month: str, day: str) -> pd.Timestamp | None:
    try:
        return pd.Timestamp(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_date(value: Any) -> pd.Timestamp | None:
    """Parse a single date value into a midnight Timestamp.

    Rules are tried in order and the first success wins: D/M/Y with '/' or
    '-', ISO Y-M-D, spreadsheet serial, then a generic date-literal parse
    (text without any digit is not tried). Native timestamps pass straight
    through. Returns None when nothing fits.
    """
    if _is_missing(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.normalize()
    if hasattr(value, "year") and hasattr(value, "month") and hasattr(value, "day"):
        return pd.Timestamp(value.year, value.month, value.day)
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return excel_serial_to_date(float(value))

    text = str(value).strip()

    match = _DMY_RE.match(text)
    if match:
        day, month, year = match.groups()
        parsed = _build_date(year, month, day)
        if parsed is not None:
            return parsed

    match = _ISO_RE.match(text)
    if match:
        year, month, day = match.groups()
        parsed = _build_date(year, month, day)
        if parsed is not None:
            return parsed

    if _SERIAL_RE.match(text):
        return excel_serial_to_date(float(text))

    # Relative words ("now", "today") would otherwise parse as the current date
    if not _DIGIT_RE.search(text):
        logger.debug("Could not parse date value: %s", text)
        return None

    try:
        parsed = pd.Timestamp(text)
    except (ValueError, TypeError, OverflowError):
        logger.debug("Could not parse date value: %s", text)
        return None
    if pd.isna(parsed):
        return None
    return parsed.normalize()


def parse_date_parts(value: Any) -> ResolvedPeriod:
    """Year, quarter, month and day of a single date value."""
    parsed = parse_date(value)
    if parsed is None:
        return ResolvedPeriod()
    return ResolvedPeriod(
        year=parsed.year,
        quarter=quarter_from_month(parsed.month),
        month=parsed.month,
        day=parsed.day,
    )


def format_date(day: Any, month: Any, year: Any) -> str:
    """ISO date string from separate day/month/year fields, or ''."""
    d, m, y = _as_int(day), resolve_month(month), _as_int(year)
    if not (d and m and y):
        return ""
    built = _build_date(str(y), str(m), str(d))
    return built.strftime("%Y-%m-%d") if built is not None else ""


# ---------------------------------------------------------------------------
# Record-level resolution
# ---------------------------------------------------------------------------

def resolve_period(record: Mapping[str, Any]) -> ResolvedPeriod:
    """Resolve the inception period of one policy record.

    Parameters
    ----------
    record : Row mapping (dict or pd.Series) with any of ``uy``, ``com_date``,
        ``inception_year``, ``inception_quarter``, ``inception_month``,
        ``inception_day``.
    """
    com_date = record.get("com_date")
    from_date = parse_date_parts(com_date)

    year = resolve_year(record.get("uy"), com_date, record.get("inception_year"))

    month = resolve_month(record.get("inception_month"))
    if month is None:
        month = from_date.month

    quarter = resolve_quarter(record.get("inception_quarter"), month)

    day = _as_int(record.get("inception_day"))
    if day is None or not 1 <= day <= 31:
        day = from_date.day

    return ResolvedPeriod(year=year, quarter=quarter, month=month, day=day)
