"""
Data transforms: rename, clean, and enrich raw policy rows into the
canonical policy frame consumed by filters, KPIs, and renewals.
"""

import logging

import pandas as pd

from .config import (
    COLUMN_LABEL_MAP,
    MONEY_COLUMNS,
    NULLABLE_MONEY_COLUMNS,
    POLICY_COLUMNS,
    SUB_CLASS_DEFAULT,
    SUB_CLASS_PLACEHOLDERS,
    TEXT_COLUMNS,
    UNKNOWN_REGION,
)
from .loaders.utils import clean_numeric, safe_float, to_snake_case
from .normalization import derive_region_and_hub, normalize_country_name
from .periods import month_name, resolve_period

logger = logging.getLogger(__name__)

# Columns added by enrichment on top of POLICY_COLUMNS
DERIVED_COLUMNS = ["year", "quarter", "month", "month_name", "is_direct"]


def canonicalise_columns(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Rename raw export headers to canonical column names.

    Headers are snake_cased, then looked up in COLUMN_LABEL_MAP. Unknown
    headers are kept under their snake_case name. When two raw headers map
    to the same canonical column the first one wins.
    """
    renamed: dict[str, str] = {}
    taken: set[str] = set()
    for col in raw_df.columns:
        snake = to_snake_case(col)
        canonical = COLUMN_LABEL_MAP.get(snake, snake)
        if canonical in taken:
            logger.warning("Duplicate source column %r for %r, dropping it", col, canonical)
            continue
        renamed[col] = canonical
        taken.add(canonical)

    df = raw_df[list(renamed)].rename(columns=renamed).copy()
    for col in POLICY_COLUMNS:
        if col not in df.columns:
            df[col] = None
    return df


def _clean_text(series: pd.Series) -> pd.Series:
    return series.map(lambda v: "" if v is None or pd.isna(v) else str(v).strip())


def _clean_sub_class(value: str) -> str:
    return SUB_CLASS_DEFAULT if value in SUB_CLASS_PLACEHOLDERS else value


def build_policy_frame(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Build the canonical, enriched policy frame from raw rows.

    Parameters
    ----------
    raw_df : Raw policy rows as loaded from the export (any header spelling
        known to COLUMN_LABEL_MAP, or canonical names).

    Returns
    -------
    New DataFrame with every POLICY_COLUMNS column plus:
        year (Int64), quarter, month (Int64), month_name, is_direct

    Notes
    -----
    - incurred_claims is always recomputed as paid + outstanding.
    - Country names are normalised; blank region/hub are derived from the
      business-partner scope or the country.
    - The input frame is not modified.
    """
    if raw_df.empty:
        logger.warning("Empty raw policy frame — returning empty policy frame")
        return pd.DataFrame(columns=POLICY_COLUMNS + DERIVED_COLUMNS)

    df = canonicalise_columns(raw_df)

    for col in TEXT_COLUMNS:
        df[col] = _clean_text(df[col])
    df["sub_class"] = df["sub_class"].map(_clean_sub_class)

    for col in MONEY_COLUMNS:
        df[col] = df[col].map(clean_numeric).astype(float)
    for col in NULLABLE_MONEY_COLUMNS:
        df[col] = df[col].map(safe_float).astype(float)

    df["incurred_claims"] = df["paid_claims"] + df["outstanding_claims"]

    df["country"] = df["country"].map(normalize_country_name)

    regions = [
        derive_region_and_hub(scope, country)
        for scope, country in zip(df["bp_scope"], df["country"])
    ]
    df["region"] = [
        derived if current in ("", UNKNOWN_REGION) else current
        for current, (derived, _) in zip(df["region"], regions)
    ]
    df["hub"] = [
        derived if current in ("", UNKNOWN_REGION) else current
        for current, (_, derived) in zip(df["hub"], regions)
    ]

    periods = [resolve_period(row) for row in df.to_dict("records")]
    df["year"] = pd.array([p.year for p in periods], dtype="Int64")
    df["quarter"] = [p.quarter or "" for p in periods]
    df["month"] = pd.array([p.month for p in periods], dtype="Int64")
    df["month_name"] = [month_name(p.month) for p in periods]

    df["is_direct"] = [
        bool(b) and b.lower() == c.lower()
        for b, c in zip(df["broker"], df["cedant"])
    ]

    unresolved = int(df["year"].isna().sum())
    if unresolved:
        logger.warning("%d policies have no resolvable underwriting year", unresolved)

    logger.info("Built policy frame with %d rows", len(df))
    return df.reset_index(drop=True)
