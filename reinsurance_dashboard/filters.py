"""
Filter utilities that apply user-chosen dashboard filters to the policy frame.

Every FilterSpec field is optional; a populated field adds one predicate and
all predicates are ANDed. Matching is plain field comparison, with no fuzzy
text matching at this layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Optional, Sequence, Tuple

import pandas as pd

from .periods import format_date, parse_date, parse_year, resolve_month, resolve_quarter

logger = logging.getLogger(__name__)

# FilterSpec field -> policy frame column
SINGLE_VALUE_FIELDS = {
    "office": "office",
    "hub": "hub",
    "region": "region",
    "broker": "broker",
    "cedant": "cedant",
    "policy_name": "policy_name",
}

MULTI_VALUE_FIELDS = {
    "ext_types": "ext_type",
    "arrangements": "arrangement",
    "classes": "class_name",
    "sub_classes": "sub_class",
    "countries": "country",
}

# Filter option key -> policy frame column, for UI dropdowns
OPTION_COLUMNS = {
    "offices": "office",
    "ext_types": "ext_type",
    "arrangements": "arrangement",
    "classes": "class_name",
    "hubs": "hub",
    "regions": "region",
    "countries": "country",
    "brokers": "broker",
    "cedants": "cedant",
    "policy_names": "policy_name",
}


@dataclass(frozen=True)
class FilterSpec:
    office: Optional[str] = None
    hub: Optional[str] = None
    region: Optional[str] = None
    broker: Optional[str] = None
    cedant: Optional[str] = None
    policy_name: Optional[str] = None
    year: Optional[int] = None
    month: Optional[Any] = None
    quarter: Optional[str] = None
    ext_types: Optional[Tuple[str, ...]] = None
    arrangements: Optional[Tuple[str, ...]] = None
    classes: Optional[Tuple[str, ...]] = None
    sub_classes: Optional[Tuple[str, ...]] = None
    countries: Optional[Tuple[str, ...]] = None
    premium_range: Optional[Tuple[Optional[float], Optional[float]]] = None
    inception_date_range: Optional[Tuple[Any, Any]] = None

    @classmethod
    def from_dict(cls, params: dict[str, Any]) -> FilterSpec:
        """Build a spec from a plain key -> value / value-list mapping.

        Unknown keys are ignored; empty strings and empty lists mean "no
        filter". Multi-value keys accept a single string as well.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in params.items():
            if key not in known or _is_blank(value):
                continue
            if key in MULTI_VALUE_FIELDS:
                value = (value,) if isinstance(value, str) else tuple(value)
            elif key in ("premium_range", "inception_date_range"):
                value = tuple(value)
            values[key] = value
        return cls(**values)

    def active_fields(self) -> list[str]:
        return [f.name for f in fields(self) if not _is_blank(getattr(self, f.name))]


DEFAULT_FILTERS = FilterSpec()


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def inception_dates(df: pd.DataFrame) -> pd.Series:
    """Inception date per row: parsed com_date, else the day/month/year fields."""
    dates = []
    for row in df.to_dict("records"):
        parsed = parse_date(row.get("com_date"))
        if parsed is None:
            parsed = parse_date(format_date(
                row.get("inception_day"), row.get("inception_month"), row.get("inception_year"),
            ))
        dates.append(parsed)
    return pd.Series(pd.to_datetime(dates), index=df.index, dtype="datetime64[ns]")


def apply_filters(df: pd.DataFrame, spec: FilterSpec) -> pd.DataFrame:
    """Return the rows of the policy frame matching every populated field of ``spec``."""
    if df.empty:
        return df.copy()

    mask = pd.Series(True, index=df.index)

    for field_name, column in SINGLE_VALUE_FIELDS.items():
        value = getattr(spec, field_name)
        if not _is_blank(value):
            mask &= df[column] == value

    if not _is_blank(spec.year):
        year = parse_year(spec.year)
        mask &= (df["year"] == year).fillna(False).astype(bool) if year else False

    if not _is_blank(spec.month):
        month = resolve_month(spec.month)
        mask &= (df["month"] == month).fillna(False).astype(bool) if month else False

    if not _is_blank(spec.quarter):
        quarter = resolve_quarter(spec.quarter)
        mask &= df["quarter"] == quarter if quarter else False

    for field_name, column in MULTI_VALUE_FIELDS.items():
        values = getattr(spec, field_name)
        if not _is_blank(values):
            mask &= df[column].isin(set(values))

    if spec.premium_range is not None:
        low, high = spec.premium_range
        if low is not None:
            mask &= df["gross_premium"] >= low
        if high is not None:
            mask &= df["gross_premium"] <= high

    if spec.inception_date_range is not None:
        start, end = spec.inception_date_range
        dates = inception_dates(df)
        if start is not None:
            mask &= (dates >= pd.Timestamp(start)).fillna(False)
        if end is not None:
            mask &= (dates <= pd.Timestamp(end)).fillna(False)

    result = df[mask].copy()
    logger.info(
        "Filters %s kept %d of %d rows", spec.active_fields(), len(result), len(df),
    )
    return result


# ---------------------------------------------------------------------------
# Dependent class -> sub-class options
# ---------------------------------------------------------------------------

def _distinct(series: pd.Series) -> list:
    values = [v for v in series.dropna().unique().tolist() if v != ""]
    return sorted(values)


def subclass_options(df: pd.DataFrame, classes: Sequence[str] | None = None) -> list[str]:
    """Sub-classes observed among rows of the selected classes (all if none selected)."""
    if df.empty:
        return []
    if classes:
        df = df[df["class_name"].isin(set(classes))]
    return _distinct(df["sub_class"])


def with_classes(
    spec: FilterSpec,
    classes: Sequence[str] | None,
    df: pd.DataFrame | None = None,
) -> FilterSpec:
    """Return a new spec with the class selection changed.

    Clearing the classes clears the sub-class selection. Given the policy
    frame, sub-classes that fall outside the new classes' sub-class domain
    are dropped too.
    """
    if not classes:
        return replace(spec, classes=None, sub_classes=None)

    classes = tuple(classes)
    sub_classes = spec.sub_classes
    if sub_classes and df is not None:
        domain = set(subclass_options(df, classes))
        sub_classes = tuple(s for s in sub_classes if s in domain) or None
    return replace(spec, classes=classes, sub_classes=sub_classes)


def get_filter_options(
    df: pd.DataFrame,
    classes: Sequence[str] | None = None,
) -> dict[str, list]:
    """Distinct, sorted, non-empty values per filterable dimension for UI dropdowns.

    ``sub_classes`` is narrowed to the selected ``classes``.
    """
    options: dict[str, list] = {key: [] for key in OPTION_COLUMNS}
    options.update({"sub_classes": [], "years": [], "quarters": [], "months": []})
    if df.empty:
        return options

    for key, column in OPTION_COLUMNS.items():
        options[key] = _distinct(df[column])
    options["sub_classes"] = subclass_options(df, classes)
    options["years"] = sorted(int(y) for y in df["year"].dropna().unique())
    options["quarters"] = _distinct(df["quarter"])
    options["months"] = sorted(int(m) for m in df["month"].dropna().unique())
    return options
