"""Data ingestion loaders and the record cache for the policy book."""

from .cache import RecordCache, RecordSource
from .policy_book import FilePolicySource, load_policy_book
from .utils import clean_numeric, safe_float, to_snake_case

__all__ = [
    "RecordCache",
    "RecordSource",
    "FilePolicySource",
    "load_policy_book",
    "clean_numeric",
    "safe_float",
    "to_snake_case",
]
