"""
Read-through cache in front of a policy record source.

One RecordCache is constructed per source and passed to whoever needs
records; there is no module-level cache. The cache reloads when:
- the caller asks for force_reload,
- invalidate() was called,
- the source reports a different version() than at the last load.
"""

import logging
import threading
from typing import Any, Callable, Protocol

import pandas as pd

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    def load(self) -> pd.DataFrame: ...


class RecordCache:
    """Load-once cache over a record source.

    Parameters
    ----------
    source : Object with ``load() -> DataFrame`` and optionally
        ``version() -> Hashable``, or a zero-argument callable returning a
        DataFrame.

    Callers get a copy of the cached frame, so nothing they do can change
    what the next caller sees.
    """

    def __init__(self, source: RecordSource | Callable[[], pd.DataFrame]):
        self._source = source
        self._frame: pd.DataFrame | None = None
        self._version: Any = None
        self._lock = threading.Lock()

    def _load(self) -> pd.DataFrame:
        loader = getattr(self._source, "load", self._source)
        return loader()

    def _current_version(self) -> Any:
        version = getattr(self._source, "version", None)
        return version() if callable(version) else None

    def get(self, force_reload: bool = False) -> pd.DataFrame:
        """Return all policy records, loading from the source if needed."""
        with self._lock:
            version = self._current_version()
            stale = self._frame is None or version != self._version
            if force_reload or stale:
                reason = "forced" if force_reload else ("source changed" if self._frame is not None else "cold")
                logger.info("Loading policy records from %r (%s)", self._source, reason)
                self._frame = self._load()
                self._version = version
            return self._frame.copy()

    def get_fresh(self) -> pd.DataFrame:
        """Return all policy records, bypassing the cache."""
        return self.get(force_reload=True)

    def invalidate(self) -> None:
        with self._lock:
            self._frame = None
            self._version = None
        logger.info("Policy record cache invalidated")

    @property
    def is_loaded(self) -> bool:
        return self._frame is not None
