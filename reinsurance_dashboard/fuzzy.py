"""
Typo-tolerant text matching for free-text lookups (e.g. a chat question
naming a broker or country). Structured filtering never goes through here.
"""

import re
from difflib import SequenceMatcher
from typing import Iterable

DEFAULT_THRESHOLD = 0.7

_PUNCT_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lower-case, collapse whitespace, drop punctuation."""
    text = _WHITESPACE_RE.sub(" ", str(text).lower().strip())
    return _PUNCT_RE.sub("", text)


def similarity(a: str, b: str) -> float:
    """Ratio of matching characters, 0.0 to 1.0; 1.0 for two empty strings."""
    return SequenceMatcher(None, a, b).ratio()


def fuzzy_match(query: str, keywords: Iterable[str], threshold: float = DEFAULT_THRESHOLD) -> bool:
    """True if the query matches any keyword, allowing for typos.

    A normalised substring match in either direction counts first; then
    whole-string similarity, then word-by-word similarity for words of three
    or more characters.
    """
    q = normalize(query)
    if not q:
        return False
    normalized = [normalize(k) for k in keywords]

    if any(k and (k in q or q in k) for k in normalized):
        return True

    q_words = [w for w in q.split(" ") if len(w) >= 3]
    for k in normalized:
        if similarity(q, k) >= threshold:
            return True
        for kw in k.split(" "):
            if len(kw) < 3:
                continue
            if any(similarity(qw, kw) >= threshold for qw in q_words):
                return True
    return False


def find_best_match(
    query: str,
    keywords: Iterable[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> str | None:
    """Return the keyword that best matches the query, or None below threshold.

    The first keyword matching as a normalised substring wins outright.
    """
    q = normalize(query)
    if not q:
        return None
    best, best_score = None, 0.0
    for keyword in keywords:
        k = normalize(keyword)
        if k and (k in q or q in k):
            return keyword
        score = similarity(q, k)
        if score > best_score:
            best, best_score = keyword, score
    return best if best_score >= threshold else None
