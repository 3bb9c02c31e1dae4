"""
Free-text name normalisation for grouping keys (country, region, hub).
"""

import re
from typing import Any

from .config import (
    BP_SCOPE_CODES,
    BP_SCOPE_KEYWORDS,
    COUNTRY_ALIASES,
    COUNTRY_REGIONS,
    UNKNOWN_COUNTRY,
    UNKNOWN_REGION,
)

_STRIP_CHARS_RE = re.compile(r"[().,']")
_WHITESPACE_RE = re.compile(r"\s+")
_SCOPE_CODE_RE = re.compile(r"^(\d+)")


def _clean_key(value: str) -> str:
    key = _STRIP_CHARS_RE.sub("", value.strip().lower())
    return _WHITESPACE_RE.sub(" ", key).strip()


def _title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in value.lower().split())


def normalize_country_name(value: Any) -> str:
    """Map a free-text country name to its canonical display form.

    Known aliases ("KSA", "U.A.E.", "Burma") resolve through COUNTRY_ALIASES;
    anything else is title-cased word by word. Empty input maps to "Unknown"
    so it never collapses into a blank group.
    """
    if value is None:
        return UNKNOWN_COUNTRY
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return UNKNOWN_COUNTRY

    alias = COUNTRY_ALIASES.get(_clean_key(text))
    if alias:
        return alias
    return _title_case(text)


def _scope_region(bp_scope: Any) -> str | None:
    if bp_scope is None or not str(bp_scope).strip():
        return None
    scope = str(bp_scope).strip().lower()

    match = _SCOPE_CODE_RE.match(scope)
    if match and match.group(1) in BP_SCOPE_CODES:
        return BP_SCOPE_CODES[match.group(1)]

    for needles, label in BP_SCOPE_KEYWORDS:
        if any(needle in scope for needle in needles):
            return label
    return None


def derive_region_and_hub(bp_scope: Any, country: Any) -> tuple[str, str]:
    """Return (region, hub) from the business-partner scope code, else the country.

    Scope codes look like "1-GCC", "11-World-Wide", "13", "14"; the leading
    number is matched exactly, so "11-..." never reads as "1-...".
    Region and hub share a label at this granularity.
    """
    region = _scope_region(bp_scope) or UNKNOWN_REGION

    if region == UNKNOWN_REGION and country is not None and str(country).strip():
        country_lower = str(country).lower()
        for needles, label in COUNTRY_REGIONS:
            if any(needle in country_lower for needle in needles):
                region = label
                break

    return region, region
