"""
KPI computation functions — pure functions with no side effects.

Provides the underwriting KPI reduction, grouped KPI tables, variance
calculation, and RAG classification of ratio KPIs.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Sequence

import pandas as pd

from .config import KPI_FIELDS, KPI_REGISTRY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KPISet:
    premium: float = 0.0
    paid_claims: float = 0.0
    outstanding_claims: float = 0.0
    incurred_claims: float = 0.0
    expense: float = 0.0
    loss_ratio: float = 0.0
    expense_ratio: float = 0.0
    combined_ratio: float = 0.0
    number_of_accounts: int = 0
    avg_max_liability: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def safe_divide(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 if either side is unusable."""
    if not denominator or math.isnan(denominator) or math.isnan(numerator):
        return 0.0
    return numerator / denominator


def _column_sum(df: pd.DataFrame, column: str) -> float:
    if column not in df.columns:
        return 0.0
    values = pd.to_numeric(df[column], errors="coerce").dropna()
    # fsum is exactly rounded, so the total does not depend on row order
    return math.fsum(values.tolist())


def aggregate_kpis(df: pd.DataFrame) -> KPISet:
    """Reduce a (filtered) policy frame to its KPI set.

    Formulas
    --------
    - premium, paid_claims, outstanding_claims, expense: column sums
    - incurred_claims = paid_claims + outstanding_claims
    - loss_ratio = incurred / premium * 100, 0 when premium is 0
    - expense_ratio = expense / premium * 100, 0 when premium is 0
    - combined_ratio = loss_ratio + expense_ratio
    - number_of_accounts = row count (input assumed de-duplicated)
    - avg_max_liability = mean over rows with a numeric max_liability
    """
    premium = _column_sum(df, "gross_premium")
    paid = _column_sum(df, "paid_claims")
    outstanding = _column_sum(df, "outstanding_claims")
    expense = _column_sum(df, "acquisition_cost")
    incurred = paid + outstanding

    loss_ratio = safe_divide(incurred, premium) * 100
    expense_ratio = safe_divide(expense, premium) * 100

    avg_max_liability = 0.0
    if "max_liability" in df.columns:
        liabilities = pd.to_numeric(df["max_liability"], errors="coerce").dropna()
        if not liabilities.empty:
            avg_max_liability = math.fsum(liabilities.tolist()) / len(liabilities)

    return KPISet(
        premium=premium,
        paid_claims=paid,
        outstanding_claims=outstanding,
        incurred_claims=incurred,
        expense=expense,
        loss_ratio=loss_ratio,
        expense_ratio=expense_ratio,
        combined_ratio=loss_ratio + expense_ratio,
        number_of_accounts=int(len(df)),
        avg_max_liability=avg_max_liability,
    )


def group_kpis(
    df: pd.DataFrame,
    by: str | Sequence[str],
    totals: bool = False,
) -> pd.DataFrame:
    """One KPI row per group, e.g. the underwriting-year performance table.

    Parameters
    ----------
    df : Policy frame.
    by : Grouping column(s). Rows with a missing or blank key are left out.
    totals : Append a "Total" row computed over all grouped rows.

    Returns
    -------
    DataFrame with the grouping columns followed by KPI_FIELDS, sorted by key.
    """
    keys = [by] if isinstance(by, str) else list(by)
    columns = keys + KPI_FIELDS

    if df.empty:
        return pd.DataFrame(columns=columns)

    grouped = df.dropna(subset=keys)
    for key in keys:
        grouped = grouped[grouped[key].astype(str) != ""]

    rows = []
    for group_key, group in grouped.groupby(keys, sort=True):
        if not isinstance(group_key, tuple):
            group_key = (group_key,)
        row = dict(zip(keys, group_key))
        row.update(aggregate_kpis(group).to_dict())
        rows.append(row)

    if totals:
        row = {key: "Total" for key in keys}
        row.update(aggregate_kpis(grouped).to_dict())
        rows.append(row)

    result = pd.DataFrame(rows, columns=columns)
    logger.info("Grouped KPIs by %s into %d rows", keys, len(result))
    return result


def calc_variance(actual: float, budget: float) -> tuple[float, float | None]:
    """Return (absolute_variance, pct_variance).

    pct_variance is None if budget == 0.
    """
    absolute = actual - budget
    if budget == 0:
        return absolute, None
    pct = (absolute / budget) * 100
    return absolute, pct


def compare_kpis(current: KPISet, previous: KPISet) -> dict[str, dict]:
    """Per-field change from a previous period's KPI set (for KPI cards)."""
    comparison = {}
    for name in KPI_FIELDS:
        now, before = getattr(current, name), getattr(previous, name)
        absolute, pct = calc_variance(now, before)
        comparison[name] = {
            "current": now,
            "previous": before,
            "change": absolute,
            "change_pct": pct,
        }
    return comparison


def classify_performance(
    actual: float,
    budget: float,
    direction: str,
    amber_band_pct: float = 5.0,
) -> str:
    """Return 'green', 'amber', or 'red' RAG classification.

    Logic
    -----
    - direction='higher_is_better':
        green  if actual >= budget
        amber  if actual >= budget * (1 - amber_band_pct/100)
        red    otherwise

    - direction='lower_is_better':
        green  if actual <= budget
        amber  if actual <= budget * (1 + amber_band_pct/100)
        red    otherwise
    """
    if pd.isna(actual) or pd.isna(budget):
        return "grey"

    if budget == 0:
        return "grey"

    if direction == "higher_is_better":
        if actual >= budget:
            return "green"
        threshold = budget * (1 - amber_band_pct / 100)
        if actual >= threshold:
            return "amber"
        return "red"
    else:  # lower_is_better
        if actual <= budget:
            return "green"
        threshold = budget * (1 + amber_band_pct / 100)
        if actual <= threshold:
            return "amber"
        return "red"


def classify_ratio(kpi_name: str, value: float, premium: float = 1.0) -> str:
    """RAG colour of a ratio KPI against its KPI_REGISTRY threshold.

    Ratios over zero premium carry no signal and are 'grey'.
    """
    registry = KPI_REGISTRY.get(kpi_name)
    if registry is None or not premium:
        return "grey"
    return classify_performance(
        value,
        registry["threshold"],
        registry["direction"],
        registry["amber_band"],
    )
