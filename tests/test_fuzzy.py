from __future__ import annotations

from reinsurance_dashboard.fuzzy import find_best_match, fuzzy_match, normalize, similarity


def test_normalize() -> None:
    assert normalize("  Gulf   Insurance, K.S.C. ") == "gulf insurance ksc"


def test_similarity() -> None:
    assert similarity("", "") == 1.0
    assert similarity("abcd", "abcf") == 0.75
    assert similarity("same", "same") == 1.0
    assert similarity("abc", "xyz") == 0.0


def test_fuzzy_match_tolerates_typos() -> None:
    assert fuzzy_match("saudia", ["Saudi Arabia"])
    assert fuzzy_match("gulf insurnce", ["Gulf Insurance"])
    assert fuzzy_match("show me kuwat premium", ["Kuwait"])
    assert not fuzzy_match("brazil", ["Kuwait", "Egypt"])


def test_empty_query_matches_nothing() -> None:
    assert not fuzzy_match("", ["Kuwait"])
    assert find_best_match("  ", ["Kuwait"]) is None


def test_find_best_match() -> None:
    options = ["Arab Orient", "Gulf Insurance", "Tawuniya"]
    assert find_best_match("gulf insurnce", options) == "Gulf Insurance"
    assert find_best_match("tawuniya", options) == "Tawuniya"
    assert find_best_match("zzzz", options) is None
