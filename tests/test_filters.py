from __future__ import annotations

import pandas as pd

from reinsurance_dashboard.filters import (
    DEFAULT_FILTERS,
    FilterSpec,
    apply_filters,
    get_filter_options,
    subclass_options,
    with_classes,
)


def _srls(df: pd.DataFrame) -> list[str]:
    return df["srl"].tolist()


def test_default_filters_keep_everything(policies: pd.DataFrame) -> None:
    assert len(apply_filters(policies, DEFAULT_FILTERS)) == len(policies)
    assert DEFAULT_FILTERS.active_fields() == []


def test_from_dict_ignores_blanks_and_unknown_keys() -> None:
    spec = FilterSpec.from_dict({
        "office": "",
        "classes": [],
        "countries": "Kuwait",
        "sub_classes": ["Fire", "War"],
        "colour": "blue",
    })
    assert spec == FilterSpec(countries=("Kuwait",), sub_classes=("Fire", "War"))


def test_single_value_filter(policies: pd.DataFrame) -> None:
    assert _srls(apply_filters(policies, FilterSpec(office="Dubai"))) == ["P002", "P006"]
    assert _srls(apply_filters(policies, FilterSpec(broker="Aon Re"))) == ["P001", "P004"]


def test_multi_value_filters_are_and_combined(policies: pd.DataFrame) -> None:
    spec = FilterSpec(ext_types=("Treaty",), countries=("Saudi Arabia", "Egypt", "Lebanon"))
    assert _srls(apply_filters(policies, spec)) == ["P001", "P003", "P006"]
    spec = FilterSpec(ext_types=("Treaty",), classes=("HU Hull",), countries=("Saudi Arabia",))
    assert apply_filters(policies, spec).empty


def test_class_filter_is_exact(policies: pd.DataFrame) -> None:
    assert apply_filters(policies, FilterSpec(classes=("Property",))).empty
    assert _srls(apply_filters(policies, FilterSpec(classes=("FI Property",)))) == ["P001"]


def test_period_filters_use_resolved_columns(policies: pd.DataFrame) -> None:
    assert _srls(apply_filters(policies, FilterSpec(year=2023))) == ["P001", "P002"]
    assert _srls(apply_filters(policies, FilterSpec(quarter="Q1"))) == ["P001", "P003", "P004"]
    assert _srls(apply_filters(policies, FilterSpec(month="mar"))) == ["P001", "P003"]
    assert _srls(apply_filters(policies, FilterSpec(year=2024, month=1))) == ["P004"]
    assert apply_filters(policies, FilterSpec(month="Smarch")).empty


def test_year_filter_accepts_text_and_rejects_garbage(policies: pd.DataFrame) -> None:
    assert _srls(apply_filters(policies, FilterSpec(year="2023"))) == ["P001", "P002"]
    assert apply_filters(policies, FilterSpec.from_dict({"year": "all"})).empty


def test_premium_range_is_inclusive(policies: pd.DataFrame) -> None:
    spec = FilterSpec(premium_range=(300, 1000))
    assert _srls(apply_filters(policies, spec)) == ["P001", "P003", "P004", "P006"]
    assert _srls(apply_filters(policies, FilterSpec(premium_range=(None, 100)))) == ["P005"]


def test_inception_date_range(policies: pd.DataFrame) -> None:
    spec = FilterSpec(inception_date_range=("2023-03-15", "2023-12-31"))
    assert _srls(apply_filters(policies, spec)) == ["P001", "P002"]


def test_filters_do_not_mutate(policies: pd.DataFrame) -> None:
    before = policies.copy()
    apply_filters(policies, FilterSpec(office="Kuwait"))
    pd.testing.assert_frame_equal(policies, before)


def test_subclass_options_follow_class_selection(policies: pd.DataFrame) -> None:
    assert subclass_options(policies, ["FI Property"]) == ["Fire"]
    assert subclass_options(policies, ["FI Property", "HU Hull"]) == ["Fire", "War"]
    assert subclass_options(policies) == ["Fire", "Group Life", "Other", "War"]


def test_clearing_classes_resets_sub_classes() -> None:
    spec = FilterSpec(classes=("FI Property",), sub_classes=("Fire",))
    cleared = with_classes(spec, [])
    assert cleared.classes is None
    assert cleared.sub_classes is None


def test_changing_classes_drops_out_of_domain_sub_classes(policies: pd.DataFrame) -> None:
    spec = FilterSpec(classes=("FI Property", "HU Hull"), sub_classes=("Fire", "War"))
    narrowed = with_classes(spec, ["HU Hull"], policies)
    assert narrowed.classes == ("HU Hull",)
    assert narrowed.sub_classes == ("War",)
    assert with_classes(spec, ["LI Life"], policies).sub_classes is None


def test_filter_options(policies: pd.DataFrame) -> None:
    options = get_filter_options(policies, classes=["HU Hull"])
    assert options["classes"] == ["AC Casualty", "EG Energy", "FI Property", "HU Hull", "LI Life"]
    assert options["sub_classes"] == ["War"]
    assert options["offices"] == ["Cairo", "Dubai", "Kuwait"]
    assert options["years"] == [2022, 2023, 2024]
    assert options["quarters"] == ["Q1", "Q2", "Q3"]
    assert options["months"] == [1, 3, 6, 7]


def test_filter_options_empty_frame() -> None:
    options = get_filter_options(pd.DataFrame())
    assert options["classes"] == []
    assert options["years"] == []
