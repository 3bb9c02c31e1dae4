from __future__ import annotations

import pandas as pd

from reinsurance_dashboard.periods import (
    ResolvedPeriod,
    excel_serial_to_date,
    format_date,
    parse_date,
    parse_date_parts,
    resolve_month,
    resolve_period,
    resolve_quarter,
    resolve_year,
)


def test_parse_date_parts_dmy() -> None:
    assert parse_date_parts("15/03/2025") == ResolvedPeriod(year=2025, quarter="Q1", month=3, day=15)


def test_parse_date_dash_separated_dmy() -> None:
    assert parse_date("01-12-2024") == pd.Timestamp(2024, 12, 1)


def test_parse_date_iso() -> None:
    assert parse_date("2023-07-01") == pd.Timestamp(2023, 7, 1)
    assert parse_date("2023-07-01T10:30:00") == pd.Timestamp(2023, 7, 1)


def test_parse_date_native_values() -> None:
    assert parse_date(pd.Timestamp("2024-05-06 13:45")) == pd.Timestamp(2024, 5, 6)
    assert parse_date(pd.Timestamp(2024, 5, 6).date()) == pd.Timestamp(2024, 5, 6)


def test_parse_date_unparseable_is_none() -> None:
    assert parse_date("31/02/2023") is None
    assert parse_date("not a date") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date(float("nan")) is None


def test_parse_date_relative_words_are_none() -> None:
    for text in ("now", "today", " Today ", "tomorrow", "yesterday"):
        assert parse_date(text) is None
    assert parse_date_parts("now") == ResolvedPeriod()


def test_excel_serial_before_leap_bug() -> None:
    assert excel_serial_to_date(1) == pd.Timestamp(1899, 12, 31)
    assert excel_serial_to_date(59) == pd.Timestamp(1900, 2, 27)


def test_excel_serial_from_leap_bug_on_shifts_back_one_day() -> None:
    assert excel_serial_to_date(60) == pd.Timestamp(1900, 2, 27)
    assert excel_serial_to_date(61) == pd.Timestamp(1900, 2, 28)


def test_excel_serial_non_positive_is_none() -> None:
    assert excel_serial_to_date(0) is None
    assert excel_serial_to_date(-5) is None


def test_serial_string_and_number_agree() -> None:
    assert parse_date("45000") == parse_date(45000) == parse_date("45000.75")


def test_resolve_year_precedence() -> None:
    assert resolve_year("2023") == 2023
    assert resolve_year(2023.0) == 2023
    assert resolve_year("UY 2021/2022") == 2021
    assert resolve_year("", text="inception 15/03/2019") == 2019
    assert resolve_year("n/a", inception_year="2020") == 2020
    assert resolve_year("n/a", inception_year="") is None


def test_resolve_year_out_of_bounds_is_rejected() -> None:
    assert resolve_year("1850") is None
    assert resolve_year("3000", inception_year=2024) == 2024


def test_resolve_month_names_and_numbers() -> None:
    assert resolve_month("MAR") == 3
    assert resolve_month("september") == 9
    assert resolve_month("12") == 12
    assert resolve_month(13) is None
    assert resolve_month("Smarch") is None


def test_resolve_quarter() -> None:
    assert resolve_quarter("Q2") == "Q2"
    assert resolve_quarter("q4") == "Q4"
    assert resolve_quarter(3) == "Q3"
    assert resolve_quarter(None, month=11) == "Q4"
    assert resolve_quarter("Q9", month="feb") == "Q1"
    assert resolve_quarter(None, None) is None


def test_format_date() -> None:
    assert format_date(5, "JAN", 2024) == "2024-01-05"
    assert format_date("", 1, 2024) == ""
    assert format_date(30, 2, 2024) == ""


def test_resolve_period_falls_back_to_com_date() -> None:
    period = resolve_period({"uy": "2023", "com_date": "15/03/2023"})
    assert period == ResolvedPeriod(year=2023, quarter="Q1", month=3, day=15)


def test_resolve_period_prefers_structured_fields() -> None:
    period = resolve_period({
        "uy": "",
        "com_date": "2022-11-20",
        "inception_year": "2021",
        "inception_month": "JUN",
        "inception_quarter": "",
        "inception_day": "4",
    })
    # the com_date text carries a year token, which wins over inception_year
    assert period == ResolvedPeriod(year=2022, quarter="Q2", month=6, day=4)


def test_resolve_period_nothing_usable() -> None:
    assert resolve_period({"uy": "n/a", "com_date": ""}) == ResolvedPeriod()
