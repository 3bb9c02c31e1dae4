"""
Role-based visibility: map user roles to the business classes they may see
and filter policy frames accordingly.

Access levels:
- admin / Super User: every class, no filtering
- business roles (fi, eg, ca, hu, marine, ac, en, li): union of their class tokens
- anything else, or no roles at all: no classes
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

import pandas as pd

from .config import ADMIN_ROLE, ROLE_CLASS_TOKENS, ROLE_DISPLAY_NAMES, SUPER_USER_ROLE

logger = logging.getLogger(__name__)


class Role(Enum):
    ADMIN = ADMIN_ROLE
    SUPER_USER = SUPER_USER_ROLE
    FI = "fi"
    EG = "eg"
    CA = "ca"
    HU = "hu"
    MARINE = "marine"
    AC = "ac"
    EN = "en"
    LI = "li"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        """Case-insensitive lookup; '-' and '_' count as spaces. None if unknown."""
        if not value:
            return None
        key = " ".join(str(value).lower().replace("-", " ").replace("_", " ").split())
        try:
            return cls(key)
        except ValueError:
            return None

    @property
    def is_full_access(self) -> bool:
        return self in (Role.ADMIN, Role.SUPER_USER)

    @property
    def class_tokens(self) -> tuple[str, ...]:
        return ROLE_CLASS_TOKENS.get(self.value, ())


class AccessKind(Enum):
    UNRESTRICTED = "unrestricted"
    EMPTY = "empty"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class AllowList:
    """Result of resolving a role set to visible classes.

    ``tokens`` holds lower-cased class tokens and is only meaningful for
    EXPLICIT access.
    """

    kind: AccessKind
    tokens: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_unrestricted(self) -> bool:
        return self.kind is AccessKind.UNRESTRICTED

    def allows(self, class_value) -> bool:
        """True if a record with this class is visible.

        Under EXPLICIT access a class matches a token when either string
        contains the other ("FI Property" matches "fi"). Blank classes are
        visible only without restriction.
        """
        if self.kind is AccessKind.UNRESTRICTED:
            return True
        if self.kind is AccessKind.EMPTY:
            return False
        if class_value is None or pd.isna(class_value):
            return False
        record_class = str(class_value).strip().lower()
        if not record_class:
            return False
        return any(
            record_class == token or token in record_class or record_class in token
            for token in self.tokens
        )


UNRESTRICTED = AllowList(AccessKind.UNRESTRICTED)
NO_ACCESS = AllowList(AccessKind.EMPTY)


def allowed_classes(roles: Iterable[str] | None) -> AllowList:
    """Resolve a user's roles to an AllowList.

    A full-access role wins over any other role present. Unrecognised roles
    contribute nothing; if nothing is recognised the result is NO_ACCESS.
    """
    parsed = [Role.parse(r) for r in (roles or [])]
    known = [r for r in parsed if r is not None]

    if any(r.is_full_access for r in known):
        return UNRESTRICTED

    tokens = frozenset(t.lower() for r in known for t in r.class_tokens)
    if not tokens:
        logger.debug("No recognised business role in %s", list(roles or []))
        return NO_ACCESS
    return AllowList(AccessKind.EXPLICIT, tokens)


def filter_by_role(
    df: pd.DataFrame,
    roles: Iterable[str] | None,
    column: str = "class_name",
) -> pd.DataFrame:
    """Return the rows of ``df`` visible to ``roles``. Never mutates ``df``."""
    allow_list = allowed_classes(roles)

    if allow_list.is_unrestricted:
        return df.copy()
    if allow_list.kind is AccessKind.EMPTY or column not in df.columns:
        return df.iloc[0:0].copy()

    mask = df[column].map(allow_list.allows).astype(bool)
    result = df[mask].copy()
    logger.info(
        "Role filter kept %d of %d rows (%d class tokens)",
        len(result), len(df), len(allow_list.tokens),
    )
    return result


# ---------------------------------------------------------------------------
# Role helpers for display
# ---------------------------------------------------------------------------

def is_admin(roles: Iterable[str] | None) -> bool:
    return any(Role.parse(r) is Role.ADMIN for r in (roles or []))


def is_super_user(roles: Iterable[str] | None) -> bool:
    return any(Role.parse(r) is Role.SUPER_USER for r in (roles or []))


def role_display_name(role: str) -> str:
    """'li' -> 'LIFE', 'fi' -> 'PROPERTY'; unknown roles are upper-cased."""
    parsed = Role.parse(role)
    if parsed is None:
        return role.upper()
    return ROLE_DISPLAY_NAMES.get(parsed.value, role.upper())


def primary_role(roles: Iterable[str] | None) -> str | None:
    """First business role, else first admin role, else the first role given."""
    roles = list(roles or [])
    if not roles:
        return None
    for role in roles:
        parsed = Role.parse(role)
        if parsed is not None and not parsed.is_full_access:
            return role
    for role in roles:
        if Role.parse(role) is Role.ADMIN:
            return role
    return roles[0]
