"""
Dashboard-ready output functions.

These are the primary entry points for a front end. Each takes the policy
frame (or the RecordCache in front of it) plus the caller's roles and filter
choices, applies the role gate before anything else, and returns plain dicts
or DataFrames suitable for rendering cards, charts, and tables.
"""

import logging
from typing import Any, Iterable

import pandas as pd

from .config import KPI_REGISTRY
from .filters import DEFAULT_FILTERS, FilterSpec, OPTION_COLUMNS, apply_filters, get_filter_options
from .fuzzy import find_best_match
from .kpis import aggregate_kpis, classify_ratio, compare_kpis, group_kpis
from .loaders.cache import RecordCache
from .periods import parse_year
from .renewals import (
    RenewalSummary,
    build_renewal_records,
    filter_renewals,
    renewal_filter_options,
    summarise_renewals,
)
from .visibility import filter_by_role

logger = logging.getLogger(__name__)

Roles = Iterable[str] | None


def load_visible_policies(
    cache: RecordCache,
    roles: Roles,
    force_reload: bool = False,
) -> pd.DataFrame:
    """All policies the caller may see, read through the cache."""
    return filter_by_role(cache.get(force_reload=force_reload), roles)


def _visible(policies: pd.DataFrame, roles: Roles, spec: FilterSpec | None) -> pd.DataFrame:
    return apply_filters(filter_by_role(policies, roles), spec or DEFAULT_FILTERS)


def get_portfolio_kpis(
    policies: pd.DataFrame,
    roles: Roles,
    spec: FilterSpec | None = None,
    previous_spec: FilterSpec | None = None,
) -> dict:
    """KPI cards for the current selection.

    Returns
    -------
    Dict with structure:
    {
        "kpis": {"premium": ..., "loss_ratio": ..., ...},
        "rag": {"loss_ratio": "green", "expense_ratio": "amber", "combined_ratio": "red"},
        "technical_result": premium - incurred - expense,
        "comparison": {...} or None,
    }

    ``previous_spec`` (e.g. the same filters for the prior year) adds a
    per-KPI comparison block.
    """
    kpis = aggregate_kpis(_visible(policies, roles, spec))

    comparison = None
    if previous_spec is not None:
        previous = aggregate_kpis(_visible(policies, roles, previous_spec))
        comparison = compare_kpis(kpis, previous)

    return {
        "kpis": kpis.to_dict(),
        "rag": {
            name: classify_ratio(name, getattr(kpis, name), kpis.premium)
            for name in KPI_REGISTRY
        },
        "technical_result": kpis.premium - kpis.incurred_claims - kpis.expense,
        "comparison": comparison,
    }


def get_uw_year_performance(
    policies: pd.DataFrame,
    roles: Roles,
    spec: FilterSpec | None = None,
) -> pd.DataFrame:
    """Underwriting-year performance table: one KPI row per year plus a Total row.

    Policies without a resolvable year are not in any year row or the total.
    """
    return group_kpis(_visible(policies, roles, spec), "year", totals=True)


def get_period_breakdown(
    policies: pd.DataFrame,
    roles: Roles,
    year: int,
    granularity: str = "quarter",
    spec: FilterSpec | None = None,
) -> pd.DataFrame:
    """Quarterly or monthly KPI rows within one underwriting year."""
    if granularity not in ("quarter", "month"):
        raise ValueError(f"granularity must be 'quarter' or 'month', got {granularity!r}")
    df = _visible(policies, roles, spec)
    wanted = parse_year(year)
    if wanted is None:
        df = df.iloc[0:0]
    elif not df.empty:
        df = df[(df["year"] == wanted).fillna(False).astype(bool)]
    return group_kpis(df, granularity)


def get_country_breakdown(
    policies: pd.DataFrame,
    roles: Roles,
    spec: FilterSpec | None = None,
) -> pd.DataFrame:
    """KPI rows per normalised country (world-map view), largest premium first."""
    table = group_kpis(_visible(policies, roles, spec), "country")
    return table.sort_values("premium", ascending=False).reset_index(drop=True)


def get_top_entities(
    policies: pd.DataFrame,
    roles: Roles,
    by: str = "broker",
    n: int = 10,
    spec: FilterSpec | None = None,
) -> pd.DataFrame:
    """Top ``n`` brokers / cedants / policies by premium (client overview)."""
    if by not in ("broker", "cedant", "policy_name"):
        raise ValueError(f"Cannot rank by {by!r}")
    table = group_kpis(_visible(policies, roles, spec), by)
    return table.sort_values("premium", ascending=False).head(n).reset_index(drop=True)


def get_renewals_report(
    policies: pd.DataFrame,
    roles: Roles,
    year: int | None = None,
    quarter: str | None = None,
    status: str | None = None,
    month: Any = None,
    spec: FilterSpec | None = None,
    srl_search: str | None = None,
    today: Any = None,
) -> RenewalSummary:
    """Renewal summary and records for the caller's visible book."""
    records = build_renewal_records(policies, today=today)
    visible = filter_by_role(records, roles)
    filtered = filter_renewals(
        visible,
        year=year,
        quarter=quarter,
        status=status,
        month=month,
        spec=spec,
        srl_search=srl_search,
    )
    summary = summarise_renewals(filtered)
    logger.info(
        "Renewals report: %d records (%d renewed, %d not renewed, %d upcoming)",
        summary.total_count, summary.renewed_count,
        summary.not_renewed_count, summary.upcoming_renewal_count,
    )
    return summary


def get_dashboard_filter_options(
    policies: pd.DataFrame,
    roles: Roles,
    classes: list[str] | None = None,
) -> dict[str, list]:
    """Dropdown options drawn only from the policies the caller may see."""
    return get_filter_options(filter_by_role(policies, roles), classes)


def get_renewal_filter_options(
    policies: pd.DataFrame,
    roles: Roles,
    classes: list[str] | None = None,
    today: Any = None,
) -> dict[str, list]:
    records = filter_by_role(build_renewal_records(policies, today=today), roles)
    return renewal_filter_options(records, classes)


def lookup_dimension_value(
    policies: pd.DataFrame,
    roles: Roles,
    dimension: str,
    query: str,
) -> str | None:
    """Resolve a free-text mention ("saudi arabya", "gulf insurnce") to a known value.

    Only values visible to the caller are candidates.
    """
    if dimension not in OPTION_COLUMNS:
        raise ValueError(f"Unknown dimension {dimension!r}")
    options = get_dashboard_filter_options(policies, roles)[dimension]
    return find_best_match(query, options)


def get_available_years(policies: pd.DataFrame) -> list[int]:
    """Return sorted list of resolved underwriting years for UI dropdowns."""
    if policies.empty:
        return []
    return sorted(int(y) for y in policies["year"].dropna().unique())
