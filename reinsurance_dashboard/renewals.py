"""
Renewal reporting: reshape policies into renewal records, classify their
renewal status, and summarise them.

Two signals are exposed per record and deliberately not reconciled:
- status_flag: from the free-text policy status (workflow source of truth)
- is_upcoming: renewal date strictly after today (presentation hint)
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any

import pandas as pd

from .config import (
    FRONTING_KEYWORD,
    RENEWAL_STATUSES,
    STATUS_NOT_RENEWED,
    STATUS_RENEWED,
    STATUS_UPCOMING,
)
from .filters import FilterSpec, apply_filters, get_filter_options
from .kpis import safe_divide
from .periods import format_date, month_name, parse_date, parse_year, resolve_month, resolve_quarter

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"[_\-\s]+")

RENEWAL_COLUMNS = [
    "status_flag", "is_upcoming", "normalized_year", "normalized_quarter",
    "renewal_month_name", "renewal_loss_ratio", "com_date_iso", "exp_date_iso",
]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def normalize_status(text: Any) -> str:
    """Lower-case and collapse '_', '-' and whitespace runs to single spaces."""
    if text is None or (not isinstance(text, str) and pd.isna(text)):
        return ""
    return _SEPARATOR_RE.sub(" ", str(text).lower()).strip()


def classify_status(text: Any) -> str:
    """Map a free-text policy status to a renewal status flag.

    Rules, first match wins:
    1. contains "upcoming" (or "up coming")         -> upcoming-renewal
    2. contains "not" and "renewed"                  -> not-renewed
    3. contains "renewed" without "not"              -> renewed
    4. starts with "not", or is expired / cancelled -> not-renewed
    5. anything else, including blank               -> not-renewed
    """
    status = normalize_status(text)

    if "upcoming" in status or "up coming" in status:
        return STATUS_UPCOMING
    if "not" in status and "renewed" in status:
        return STATUS_NOT_RENEWED
    if "renewed" in status:
        return STATUS_RENEWED
    if status.startswith("not") or status in ("expired", "cancelled"):
        return STATUS_NOT_RENEWED
    return STATUS_NOT_RENEWED


def is_upcoming(renewal_date: Any, today: Any = None) -> bool:
    """True iff the renewal date (at midnight) is strictly after today."""
    parsed = parse_date(renewal_date)
    if parsed is None:
        return False
    today = pd.Timestamp.today() if today is None else pd.Timestamp(today)
    return parsed > today.normalize()


def is_fronting(policy_name: Any) -> bool:
    if policy_name is None or (not isinstance(policy_name, str) and pd.isna(policy_name)):
        return False
    return FRONTING_KEYWORD in str(policy_name).lower()


def resolve_renewal_year(record: dict) -> int | None:
    """Renewal year, else inception year, else the year of the renewal date."""
    year = parse_year(record.get("renewal_year"))
    if year is None:
        year = parse_year(record.get("inception_year"))
    if year is None:
        parsed = parse_date(record.get("renewal_date"))
        year = parsed.year if parsed is not None else None
    return year


# ---------------------------------------------------------------------------
# Renewal records
# ---------------------------------------------------------------------------

def build_renewal_records(policies: pd.DataFrame, today: Any = None) -> pd.DataFrame:
    """Reshape the policy frame into renewal records.

    Parameters
    ----------
    policies : Canonical policy frame from build_policy_frame().
    today : Reference date for is_upcoming. Defaults to the current date.

    Returns
    -------
    New DataFrame with the policy columns plus:
        status_flag, is_upcoming, normalized_year, normalized_quarter,
        renewal_month_name, renewal_loss_ratio, com_date_iso, exp_date_iso

    Fronting policies and policies with no resolvable renewal year are left out.
    """
    if policies.empty:
        return pd.DataFrame(columns=list(policies.columns) + RENEWAL_COLUMNS)

    today = pd.Timestamp.today().normalize() if today is None else pd.Timestamp(today).normalize()

    fronting = policies["policy_name"].map(is_fronting).astype(bool)
    if fronting.any():
        logger.info("Excluded %d fronting policies from renewals", int(fronting.sum()))
    eligible = policies[~fronting]

    rows = []
    unresolved = 0
    for record in eligible.to_dict("records"):
        year = resolve_renewal_year(record)
        if year is None:
            unresolved += 1
            continue

        renewal_date = parse_date(record.get("renewal_date"))
        renewal_month = resolve_month(record.get("renewal_month"))
        if renewal_month is None and renewal_date is not None:
            renewal_month = renewal_date.month

        premium = record.get("gross_premium") or 0.0
        incurred = (record.get("paid_claims") or 0.0) + (record.get("outstanding_claims") or 0.0)

        record.update({
            "status_flag": classify_status(record.get("policy_status")),
            "is_upcoming": is_upcoming(renewal_date, today),
            "normalized_year": year,
            "normalized_quarter": resolve_quarter(
                record.get("renewal_quarter"),
                renewal_date.month if renewal_date is not None else None,
            ) or "",
            "renewal_month_name": month_name(renewal_month),
            "renewal_loss_ratio": safe_divide(incurred, premium) * 100,
            "com_date_iso": format_date(
                record.get("inception_day"), record.get("inception_month"), record.get("inception_year"),
            ),
            "exp_date_iso": format_date(
                record.get("expiry_day"), record.get("expiry_month"), record.get("expiry_year"),
            ),
        })
        rows.append(record)

    if unresolved:
        logger.warning("Excluded %d policies with no resolvable renewal year", unresolved)

    result = pd.DataFrame(rows, columns=list(policies.columns) + RENEWAL_COLUMNS)
    logger.info("Built %d renewal records", len(result))
    return result


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RenewalSummary:
    total_count: int = 0
    total_premium: float = 0.0
    total_paid_claims: float = 0.0
    total_outstanding_claims: float = 0.0
    total_incurred: float = 0.0
    total_loss_ratio: float = 0.0
    renewed_count: int = 0
    renewed_premium: float = 0.0
    not_renewed_count: int = 0
    not_renewed_premium: float = 0.0
    upcoming_renewal_count: int = 0
    upcoming_renewal_premium: float = 0.0
    renewed_percentage: float = 0.0
    not_renewed_percentage: float = 0.0
    upcoming_renewal_percentage: float = 0.0
    records: pd.DataFrame = field(default_factory=pd.DataFrame, repr=False, compare=False)

    def to_dict(self, include_records: bool = False) -> dict:
        summary = {k: v for k, v in self.__dict__.items() if k != "records"}
        if include_records:
            summary["records"] = self.records.to_dict("records")
        return summary


def summarise_renewals(records: pd.DataFrame) -> RenewalSummary:
    """Totals and per-status counts, premiums, and percentages."""
    if records.empty:
        return RenewalSummary(records=records.copy())

    premium = records["gross_premium"].astype(float)
    total_count = len(records)
    total_premium = float(premium.sum())
    total_paid = float(records["paid_claims"].astype(float).sum())
    total_outstanding = float(records["outstanding_claims"].astype(float).sum())
    total_incurred = total_paid + total_outstanding

    by_status = {}
    for status in RENEWAL_STATUSES:
        selected = records["status_flag"] == status
        count = int(selected.sum())
        by_status[status] = (
            count,
            float(premium[selected].sum()),
            safe_divide(count, total_count) * 100,
        )

    return RenewalSummary(
        total_count=total_count,
        total_premium=total_premium,
        total_paid_claims=total_paid,
        total_outstanding_claims=total_outstanding,
        total_incurred=total_incurred,
        total_loss_ratio=safe_divide(total_incurred, total_premium) * 100,
        renewed_count=by_status[STATUS_RENEWED][0],
        renewed_premium=by_status[STATUS_RENEWED][1],
        renewed_percentage=by_status[STATUS_RENEWED][2],
        not_renewed_count=by_status[STATUS_NOT_RENEWED][0],
        not_renewed_premium=by_status[STATUS_NOT_RENEWED][1],
        not_renewed_percentage=by_status[STATUS_NOT_RENEWED][2],
        upcoming_renewal_count=by_status[STATUS_UPCOMING][0],
        upcoming_renewal_premium=by_status[STATUS_UPCOMING][1],
        upcoming_renewal_percentage=by_status[STATUS_UPCOMING][2],
        records=records.copy(),
    )


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def filter_renewals(
    records: pd.DataFrame,
    year: int | None = None,
    quarter: str | None = None,
    status: str | None = None,
    month: Any = None,
    spec: FilterSpec | None = None,
    srl_search: str | None = None,
) -> pd.DataFrame:
    """Filter renewal records.

    ``year``, ``quarter`` and ``month`` apply to the renewal period; the
    remaining dimensions come from ``spec`` (its own year/month/quarter,
    which describe the inception period, are ignored here). ``srl_search``
    is a case-insensitive substring match on the serial number.
    """
    if records.empty:
        return records.copy()

    mask = pd.Series(True, index=records.index)
    if year is not None and str(year).strip():
        wanted = parse_year(year)
        mask &= records["normalized_year"] == wanted if wanted else False
    if quarter:
        mask &= records["normalized_quarter"] == resolve_quarter(quarter)
    if status:
        mask &= records["status_flag"] == status
    if month is not None and str(month).strip():
        mask &= records["renewal_month_name"] == month_name(resolve_month(month))
    if srl_search:
        needle = srl_search.strip().lower()
        mask &= records["srl"].astype(str).str.lower().str.contains(needle, regex=False)

    filtered = records[mask]
    if spec is not None:
        filtered = apply_filters(filtered, replace(spec, year=None, month=None, quarter=None))
    return filtered.copy()


def renewal_filter_options(
    records: pd.DataFrame,
    classes: list[str] | None = None,
) -> dict[str, list]:
    """Dropdown options for the renewals view, sub-classes narrowed to ``classes``."""
    options = get_filter_options(records, classes)
    options["statuses"] = list(RENEWAL_STATUSES)
    options["renewal_years"] = (
        sorted(int(y) for y in records["normalized_year"].dropna().unique())
        if not records.empty else []
    )
    return options
