from __future__ import annotations
from concurrent.futures import Future
from typing import Callable, Dict, Optional
import logging
import threading

from ..models.cache_key import CacheKey
from ..models.raster import Raster

logger = logging.getLogger(__name__)


class ResultCacheRepository:
    """
    Memoises filter output for the active source image.

    • One entry per CacheKey, no eviction; invalidate_all() drops everything
      when a new image is picked.
    • Safe to share between threads. get_or_compute() runs at most one
      computation per key: concurrent callers wait for the first one.
    • A computation that belongs to an earlier generation never reads from
      or writes into the current session.
    Stored rasters are frozen (read-only) because every caller shares them.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, Raster] = {}
        self._in_flight: Dict[CacheKey, Future] = {}
        self._generation = 0
        self._lock = threading.Lock()

    # ---------- basic mapping ----------
    def lookup(self, key: CacheKey) -> Optional[Raster]:
        with self._lock:
            return self._entries.get(key)

    def store(self, key: CacheKey, raster: Raster) -> None:
        with self._lock:
            self._entries[key] = raster.freeze()

    def invalidate_all(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._in_flight.clear()
            self._generation += 1
        logger.debug(f"Result cache invalidated ({dropped} entries dropped)")

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries

    # ---------- memoised compute ----------
    def get_or_compute(self, key: CacheKey, compute: Callable[[], Raster],
                       generation: Optional[int] = None) -> Raster:
        """
        Return the cached raster for *key*, computing it on a miss.

        *generation* is the session the caller's input belongs to (defaults
        to the current one). When it is no longer current the result is
        computed and returned, but the cache is neither consulted nor filled.
        Errors from *compute* are re-raised to every waiter and nothing is stored.
        """
        with self._lock:
            if generation is None:
                generation = self._generation
            stale = generation != self._generation
            if not stale:
                cached = self._entries.get(key)
                if cached is not None:
                    logger.debug(f"Cache hit: {key}")
                    return cached
                pending = self._in_flight.get(key)
                owner = pending is None
                if owner:
                    pending = Future()
                    self._in_flight[key] = pending

        if stale:
            logger.debug(f"Generation {generation} is stale, computing {key} uncached")
            return compute()

        if not owner:
            logger.debug(f"Waiting on in-flight computation: {key}")
            return pending.result()

        logger.debug(f"Cache miss: {key}")
        try:
            result = compute()
        except BaseException as err:
            with self._lock:
                if self._in_flight.get(key) is pending:
                    del self._in_flight[key]
            pending.set_exception(err)
            raise

        with self._lock:
            if self._generation == generation:
                # first write wins
                result = self._entries.setdefault(key, result.freeze())
            if self._in_flight.get(key) is pending:
                del self._in_flight[key]
        pending.set_result(result)
        return result
