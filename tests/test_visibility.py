from __future__ import annotations

import pandas as pd

from reinsurance_dashboard.visibility import (
    AccessKind,
    Role,
    allowed_classes,
    filter_by_role,
    is_admin,
    is_super_user,
    primary_role,
    role_display_name,
)


def test_role_parse() -> None:
    assert Role.parse("Admin") is Role.ADMIN
    assert Role.parse("super_user") is Role.SUPER_USER
    assert Role.parse("Super-User") is Role.SUPER_USER
    assert Role.parse("FI") is Role.FI
    assert Role.parse("bogus-role") is None
    assert Role.parse("") is None


def test_admin_is_unrestricted_regardless_of_other_roles() -> None:
    assert allowed_classes(["admin"]).kind is AccessKind.UNRESTRICTED
    assert allowed_classes(["fi", "admin", "bogus"]).kind is AccessKind.UNRESTRICTED
    assert allowed_classes(["Super User"]).kind is AccessKind.UNRESTRICTED


def test_bogus_role_is_empty() -> None:
    assert allowed_classes(["bogus-role"]).kind is AccessKind.EMPTY
    assert allowed_classes([]).kind is AccessKind.EMPTY
    assert allowed_classes(None).kind is AccessKind.EMPTY


def test_fi_matches_fi_property_not_eg() -> None:
    allow = allowed_classes(["fi"])
    assert allow.kind is AccessKind.EXPLICIT
    assert allow.allows("FI Property")
    assert allow.allows("property")
    assert not allow.allows("EG")
    assert not allow.allows("")
    assert not allow.allows(None)


def test_roles_union() -> None:
    allow = allowed_classes(["li", "hu"])
    assert allow.allows("LI Life")
    assert allow.allows("HU Hull")
    assert not allow.allows("FI Property")


def test_filter_by_role(policies: pd.DataFrame) -> None:
    assert len(filter_by_role(policies, ["admin"])) == len(policies)
    assert filter_by_role(policies, ["bogus-role"]).empty
    assert filter_by_role(policies, ["fi"])["srl"].tolist() == ["P001"]
    assert filter_by_role(policies, ["li", "eg"])["srl"].tolist() == ["P002", "P006"]


def test_filter_by_role_does_not_mutate(policies: pd.DataFrame) -> None:
    before = policies.copy()
    visible = filter_by_role(policies, ["fi"])
    visible.loc[:, "gross_premium"] = 0.0
    pd.testing.assert_frame_equal(policies, before)


def test_blank_class_only_visible_without_restriction(policies: pd.DataFrame) -> None:
    assert "P005" in filter_by_role(policies, ["admin"])["srl"].tolist()
    for role in ("fi", "eg", "ca", "hu", "marine", "ac", "en", "li"):
        assert "P005" not in filter_by_role(policies, [role])["srl"].tolist()


def test_display_helpers() -> None:
    assert is_admin(["fi", "ADMIN"])
    assert not is_admin(["super user"])
    assert is_super_user(["super_user"])
    assert role_display_name("li") == "LIFE"
    assert role_display_name("fi") == "PROPERTY"
    assert role_display_name("viewer") == "VIEWER"
    assert primary_role(["admin", "fi"]) == "fi"
    assert primary_role(["viewer", "admin"]) == "admin"
    assert primary_role(["viewer"]) == "viewer"
    assert primary_role([]) is None
