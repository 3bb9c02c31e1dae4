from __future__ import annotations

from reinsurance_dashboard.simulator import generate_policy_book
from reinsurance_dashboard.transforms import build_policy_frame


def test_generate_policy_book_is_reproducible() -> None:
    first = generate_policy_book(50, seed=7)
    second = generate_policy_book(50, seed=7)
    assert first.equals(second)
    assert len(first) == 50


def test_simulated_book_builds_cleanly() -> None:
    policies = build_policy_frame(generate_policy_book(200))
    assert len(policies) == 200
    assert policies["year"].notna().all()
    assert (policies["gross_premium"] > 0).all()
    assert set(policies["quarter"]) <= {"Q1", "Q2", "Q3", "Q4"}
