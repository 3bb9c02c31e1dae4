from __future__ import annotations

import pandas as pd

from reinsurance_dashboard.config import POLICY_COLUMNS
from reinsurance_dashboard.transforms import DERIVED_COLUMNS, build_policy_frame, canonicalise_columns


def test_canonicalise_columns_maps_export_headers() -> None:
    raw = pd.DataFrame({"GRS_PREM (KD)": ["1"], "UW Class": ["FI"], "Extra Col": ["x"]})
    df = canonicalise_columns(raw)
    assert df["gross_premium"].tolist() == ["1"]
    assert df["class_name"].tolist() == ["FI"]
    assert df["extra_col"].tolist() == ["x"]
    assert set(POLICY_COLUMNS) <= set(df.columns)


def test_canonicalise_columns_first_duplicate_wins() -> None:
    raw = pd.DataFrame({"GRS_PREM_KD": ["1"], "Gross UW Prem": ["2"]})
    assert canonicalise_columns(raw)["gross_premium"].tolist() == ["1"]


def test_policy_frame_schema(policies: pd.DataFrame) -> None:
    assert list(policies.columns[-len(DERIVED_COLUMNS):]) == DERIVED_COLUMNS
    assert set(POLICY_COLUMNS) <= set(policies.columns)
    assert len(policies) == 6


def test_money_cleaning(policies: pd.DataFrame) -> None:
    assert policies["gross_premium"].tolist() == [1000.0, 2000.0, 500.0, 300.0, 100.0, 400.0]
    assert policies["max_liability"].isna().tolist() == [False, True, False, True, True, True]


def test_incurred_is_paid_plus_outstanding(policies: pd.DataFrame) -> None:
    assert (policies["incurred_claims"] == policies["paid_claims"] + policies["outstanding_claims"]).all()


def test_sub_class_placeholders(policies: pd.DataFrame) -> None:
    assert policies["sub_class"].tolist() == ["Fire", "Other", "War", "Other", "Other", "Group Life"]


def test_country_and_region(policies: pd.DataFrame) -> None:
    assert policies["country"].tolist() == [
        "Saudi Arabia", "United Arab Emirates", "Egypt", "Kuwait", "Unknown", "Lebanon",
    ]
    assert policies["region"].tolist() == [
        "GCC", "GCC", "North Africa", "GCC", "Unknown", "Middle East",
    ]
    assert policies["hub"].tolist() == policies["region"].tolist()


def test_existing_region_is_kept() -> None:
    raw = pd.DataFrame({"REGION": ["Levant"], "HUB": [""], "BP_SCOPE": ["1-GCC"]})
    df = build_policy_frame(raw)
    assert df.loc[0, "region"] == "Levant"
    assert df.loc[0, "hub"] == "GCC"


def test_resolved_periods(policies: pd.DataFrame) -> None:
    assert policies["year"].tolist()[:5] == [2023, 2023, 2024, 2024, 2022]
    assert pd.isna(policies.loc[5, "year"])
    assert policies["quarter"].tolist() == ["Q1", "Q3", "Q1", "Q1", "Q2", ""]
    assert policies["month_name"].tolist() == ["MAR", "JUL", "MAR", "JAN", "JUN", ""]


def test_is_direct(policies: pd.DataFrame) -> None:
    assert policies["is_direct"].tolist() == [False, False, False, False, True, False]


def test_input_not_mutated(raw_policies: pd.DataFrame) -> None:
    before = raw_policies.copy()
    build_policy_frame(raw_policies)
    pd.testing.assert_frame_equal(raw_policies, before)


def test_empty_input() -> None:
    df = build_policy_frame(pd.DataFrame())
    assert df.empty
    assert "year" in df.columns
