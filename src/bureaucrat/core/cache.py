"""Single-flight cache for entity types.

Loading entity types may introspect and persist new metadata, so two loads
must never run at the same time: callers arriving while a load is in flight
wait for that load's result instead of starting their own.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from enum import StrEnum

from bureaucrat.core.types import EntityMeta

logger = logging.getLogger(__name__)


class CacheState(StrEnum):
    """Lifecycle of the entity type cache."""

    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class EntityTypeCache:
    """Memoizes the result of an entity type loader.

    States: EMPTY -> LOADING -> READY. A failed load goes back to EMPTY and
    the error reaches every waiting caller. READY lasts until ``invalidate()``
    or, when a TTL is set, until it expires.
    """

    def __init__(
        self,
        loader: Callable[[], list[EntityMeta]],
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            loader: Computes the full entity type list
            ttl_seconds: Lifetime of a loaded value; None means no expiry
            clock: Monotonic time source
        """
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CacheState.EMPTY
        self._value: list[EntityMeta] | None = None
        self._loaded_at = 0.0
        self._inflight: Future[list[EntityMeta]] | None = None
        self._generation = 0
        self._load_lock = threading.Lock()

    @property
    def state(self) -> CacheState:
        with self._lock:
            if self._state is CacheState.READY and self._expired():
                return CacheState.EMPTY
            return self._state

    def _expired(self) -> bool:
        return self._ttl is not None and self._clock() - self._loaded_at >= self._ttl

    def get(self) -> list[EntityMeta]:
        """Return the cached entity types, loading them if needed."""
        with self._lock:
            if self._state is CacheState.READY and not self._expired():
                return list(self._value or [])
            if self._state is CacheState.LOADING and self._inflight is not None:
                future = self._inflight
                owner = False
            else:
                future = Future()
                self._inflight = future
                self._state = CacheState.LOADING
                generation = self._generation
                owner = True

        if not owner:
            return list(future.result())
        return self._load(future, generation)

    def _load(self, future: Future[list[EntityMeta]], generation: int) -> list[EntityMeta]:
        # One loader call at a time, even across a detached load and its successor
        with self._load_lock:
            logger.debug("Loading entity types")
            try:
                value = self._loader()
            except BaseException as e:
                with self._lock:
                    if self._inflight is future:
                        self._state = CacheState.EMPTY
                        self._inflight = None
                future.set_exception(e)
                raise

        with self._lock:
            if self._inflight is future and generation == self._generation:
                self._inflight = None
                self._state = CacheState.READY
                self._value = value
                self._loaded_at = self._clock()
        future.set_result(value)
        logger.debug(f"Loaded {len(value)} entity types")
        return list(value)

    def invalidate(self) -> None:
        """Drop the cached value so the next ``get()`` reloads.

        A load still in flight keeps serving the callers already waiting on
        it, but it is detached: its result is not memoized and later callers
        start a new load that runs once it finishes.
        """
        with self._lock:
            self._generation += 1
            self._state = CacheState.EMPTY
            self._value = None
            self._inflight = None
        logger.info("Entity type cache invalidated")
