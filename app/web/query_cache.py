"""Keyed query cache with in-flight de-duplication and prefix invalidation.

Pages ask the cache for data by key (for example ``("search", "batman", 2)``
or ``("favorites",)``). A successful result is reused until a mutation
invalidates a key prefix or the caller asks for a ``refetch``, at which point
the next ``fetch`` re-runs the loader. Concurrent fetches for the same key
share a single loader call. Only the ``max_entries`` most recently used keys
are kept.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, TypeVar

logger = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]
T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 256


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class QueryState:
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Exception | None = None
    stale: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status is QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS


class QueryCache:
    def __init__(self, *, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self._states: OrderedDict[QueryKey, QueryState] = OrderedDict()
        self._in_flight: dict[QueryKey, Future[QueryState]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def get_state(self, key: QueryKey) -> QueryState:
        with self._lock:
            return self._states.get(key) or QueryState()

    def is_fetching(self, key: QueryKey) -> bool:
        with self._lock:
            return key in self._in_flight

    def fetch(
        self,
        key: QueryKey,
        loader: Callable[[], Any],
        *,
        enabled: bool = True,
        refetch: bool = False,
    ) -> QueryState:
        """Return the cached state for ``key``, loading it when missing or stale.

        Disabled queries never call ``loader`` and report ``IDLE``. With
        ``refetch`` a fresh entry is reloaded anyway; an in-flight load for
        the same key is still shared. Loader exceptions are recorded as an
        ``ERROR`` state rather than raised.
        """

        if not enabled:
            return QueryState()

        with self._lock:
            current = self._states.get(key)
            if current is not None:
                self._states.move_to_end(key)
            pending = self._in_flight.get(key)
            if pending is None:
                if current is not None and current.is_success and not current.stale and not refetch:
                    return current
                pending = Future()
                self._in_flight[key] = pending
                self._states[key] = QueryState(
                    status=QueryStatus.LOADING,
                    data=current.data if current else None,
                )
                self._evict()
                owner = True
            else:
                owner = False

        if not owner:
            return pending.result()

        # Anything escaping the loader (even a BaseException) must not leave
        # the key in flight, or later callers would wait forever.
        state = QueryState(status=QueryStatus.ERROR)
        try:
            state = QueryState(status=QueryStatus.SUCCESS, data=loader())
        except Exception as exc:
            logger.warning("Query %r failed: %s", key, exc)
            state = QueryState(status=QueryStatus.ERROR, error=exc)
        finally:
            with self._lock:
                self._states[key] = state
                del self._in_flight[key]
                self._evict()
            pending.set_result(state)
        return state

    def _evict(self) -> None:
        # Caller holds the lock. Oldest entries go first; in-flight keys stay.
        overflow = len(self._states) - self.max_entries
        if overflow <= 0:
            return
        for key in list(self._states):
            if overflow <= 0:
                break
            if key in self._in_flight:
                continue
            del self._states[key]
            overflow -= 1
            logger.debug("Evicted query %r", key)

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry whose key starts with ``prefix`` as stale."""

        count = 0
        with self._lock:
            for key, state in self._states.items():
                if key[: len(prefix)] == prefix:
                    state.stale = True
                    count += 1
        logger.debug("Invalidated %d queries under %r", count, prefix)
        return count

    def mutate(
        self,
        mutation: Callable[..., T],
        *args: Any,
        invalidates: Iterable[QueryKey] = (),
    ) -> T:
        """Run ``mutation`` and invalidate ``invalidates`` once it has succeeded."""

        result = mutation(*args)
        for prefix in invalidates:
            self.invalidate(prefix)
        return result
