"""
Reinsurance Underwriting Dashboard — End-to-end analytics pipeline.

Loads the policy book (or a simulated one when no export is present), runs
every dashboard entry point, and prints smoke-test summaries.

Usage:
    python main.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from reinsurance_dashboard.config import POLICY_BOOK_FILE
from reinsurance_dashboard.dashboard import (
    get_available_years,
    get_country_breakdown,
    get_dashboard_filter_options,
    get_period_breakdown,
    get_portfolio_kpis,
    get_renewals_report,
    get_top_entities,
    get_uw_year_performance,
    load_visible_policies,
    lookup_dimension_value,
)
from reinsurance_dashboard.filters import FilterSpec
from reinsurance_dashboard.loaders import FilePolicySource, RecordCache
from reinsurance_dashboard.simulator import generate_policy_book
from reinsurance_dashboard.transforms import build_policy_frame

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the full analytics pipeline and print smoke-test outputs."""

    print("=" * 70)
    print("  REINSURANCE UNDERWRITING DASHBOARD")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING POLICY BOOK")
    print("-" * 40)

    if POLICY_BOOK_FILE.exists():
        cache = RecordCache(FilePolicySource(POLICY_BOOK_FILE))
    else:
        logger.warning("No policy book at %s, using simulated data", POLICY_BOOK_FILE)
        cache = RecordCache(lambda: build_policy_frame(generate_policy_book()))

    policies = load_visible_policies(cache, ["admin"])
    print(f"\nPolicy frame: {len(policies)} rows")
    print(policies[["srl", "class_name", "country", "year", "quarter", "gross_premium"]]
          .head(10).to_string(index=False))

    # ------------------------------------------------------------------
    # 2. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    years = get_available_years(policies)
    print(f"\nAvailable underwriting years: {years}")

    admin = ["admin"]
    overview = get_portfolio_kpis(policies, admin)
    print("\nPortfolio KPIs (admin):")
    for name, value in overview["kpis"].items():
        print(f"  {name:22s} | {value:,.2f}")
    print(f"  {'technical_result':22s} | {overview['technical_result']:,.2f}")
    print(f"  RAG: {overview['rag']}")

    print("\nUnderwriting Year Performance:")
    print(get_uw_year_performance(policies, admin)[
        ["year", "premium", "incurred_claims", "loss_ratio", "combined_ratio", "number_of_accounts"]
    ].to_string(index=False))

    if years:
        latest = years[-1]
        print(f"\nQuarterly breakdown — UY {latest}:")
        print(get_period_breakdown(policies, admin, latest)[
            ["quarter", "premium", "loss_ratio", "number_of_accounts"]
        ].to_string(index=False))

    print("\nCountry breakdown (top 5):")
    print(get_country_breakdown(policies, admin).head(5)[
        ["country", "premium", "loss_ratio", "number_of_accounts"]
    ].to_string(index=False))

    print("\nTop brokers:")
    print(get_top_entities(policies, admin, by="broker", n=5)[
        ["broker", "premium", "number_of_accounts"]
    ].to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Role-filtered views
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] ROLE-FILTERED VIEWS")
    print("-" * 40)

    for roles in (["fi"], ["marine"], ["li", "ac"], ["viewer"]):
        kpis = get_portfolio_kpis(policies, roles)["kpis"]
        options = get_dashboard_filter_options(policies, roles)
        print(f"  {str(roles):18s} | {kpis['number_of_accounts']:4d} policies | classes {options['classes']}")

    spec = FilterSpec.from_dict({"classes": ["FI Property"], "countries": "Saudi Arabia"})
    filtered = get_portfolio_kpis(policies, admin, spec)["kpis"]
    print(f"\n  FI Property in Saudi Arabia: {filtered['number_of_accounts']} policies, "
          f"LR {filtered['loss_ratio']:.1f}%")

    match = lookup_dimension_value(policies, admin, "cedants", "gulf insurnce")
    print(f"  Fuzzy lookup 'gulf insurnce' -> {match}")

    # ------------------------------------------------------------------
    # 4. Renewals
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] RENEWALS")
    print("-" * 40)

    summary = get_renewals_report(policies, admin)
    for key, value in summary.to_dict().items():
        print(f"  {key:28s} | {value:,.2f}" if isinstance(value, float) else f"  {key:28s} | {value}")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
