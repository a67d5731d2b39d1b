from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional
import logging
import os
import threading

from dotenv import load_dotenv

from ..models.cache_key import CacheKey, DEFAULT_PRECISION
from ..models.errors import DecodeFailureError, NoSourceImageError
from ..models.raster import Raster
from ..repositories.result_cache_repository import ResultCacheRepository
from .filter_dispatcher import FilterDispatcher
from .raster_service import RasterService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class FilterService:
    """
    Single entry point for a UI layer.

    *   process_image(bytes) once per picked image: decode, orient, scale
        down, and start a fresh cache session.
    *   apply_filter(kind, parameter) on every slider / kind change, served
        from the result cache whenever possible.
    *   apply_filter_async(...) does the same off the calling thread; only
        the most recent request updates `displayed`.
    A failing request never touches `displayed` or the cache.
    """

    def __init__(self,
                 raster_service: RasterService | None = None,
                 dispatcher: FilterDispatcher | None = None,
                 cache: ResultCacheRepository | None = None,
                 max_workers: int | None = None,
                 precision: int | None = None):
        """
        Args:
            raster_service: decoding / scaling helpers (defaults to env config)
            dispatcher: filter table (defaults to the full catalog)
            cache: result cache shared by sync and async requests
            max_workers: thread count for apply_filter_async (env FILTER_WORKERS)
            precision: decimals kept in cache keys (env CACHE_PARAM_PRECISION)
        """
        self.raster_service = raster_service or RasterService()
        self.dispatcher = dispatcher or FilterDispatcher()
        self.cache = cache if cache is not None else ResultCacheRepository()
        self.max_workers = max_workers or int(os.getenv("FILTER_WORKERS", "2"))
        if precision is None:
            precision = int(os.getenv("CACHE_PARAM_PRECISION", str(DEFAULT_PRECISION)))
        self.precision = precision

        self._source: Optional[Raster] = None
        self._displayed: Optional[Raster] = None
        self._request_seq = 0
        self._state_lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    # ─── Session state ─────────────────────────────────────────────
    @property
    def source(self) -> Optional[Raster]:
        return self._source

    @property
    def displayed(self) -> Optional[Raster]:
        return self._displayed

    def set_source(self, raster: Raster) -> None:
        """Make *raster* the session source; every cached result is dropped."""
        with self._state_lock:
            self._source = raster
            self._displayed = raster
            self._request_seq += 1  # results for the old image are never displayed
            self.cache.invalidate_all()
        logger.info(f"New source image {raster.width}x{raster.height}x{raster.channels}")

    # ─── Public API ────────────────────────────────────────────────
    def process_image(self, data: bytes) -> Optional[Raster]:
        """
        Prepare a freshly picked image and start a new session.
        Returns None ("no image available") when the bytes do not decode;
        the previous session is then left as it was.
        """
        try:
            prepared = self.raster_service.prepare(data)
        except DecodeFailureError as err:
            logger.error(f"No image available: {err}")
            return None
        self.set_source(prepared)
        return prepared

    def process(self, source: Raster, kind, parameter=None) -> Raster:
        """
        Filter *source* through the cache. Passing a raster other than the
        current session source starts a new session for it.
        """
        key = CacheKey.build(kind, parameter, self.precision)
        if source is not self._source:
            self.set_source(source)
        with self._state_lock:
            current = source is self._source
            generation = self.cache.generation
        if not current:
            # replaced by another pick in the meantime
            return self._dispatch(key, source)
        return self._render(key, source, generation)

    def apply_filter(self, kind, parameter=None) -> Raster:
        key = CacheKey.build(kind, parameter, self.precision)
        source, generation, seq = self._begin_request()
        result = self._render(key, source, generation)
        with self._state_lock:
            if seq == self._request_seq:
                self._displayed = result
        return result

    def apply_filter_async(self, kind, parameter=None,
                           on_result: Callable[[Raster], None] | None = None) -> Future:
        """
        Run apply_filter on a worker thread.

        Every request completes and fills the cache of the session it was
        made in, but only the latest request (sync or async) updates
        `displayed` and calls *on_result*. Invalid kinds or parameters raise
        right away; errors from the filter itself surface through the Future.
        """
        key = CacheKey.build(kind, parameter, self.precision)
        source, generation, seq = self._begin_request()

        def _run() -> Raster:
            result = self._render(key, source, generation)
            with self._state_lock:
                latest = seq == self._request_seq
                if latest:
                    self._displayed = result
            if latest and on_result is not None:
                on_result(result)
            elif not latest:
                logger.debug(f"Superseded request #{seq} for {key} finished")
            return result

        return self._get_executor().submit(_run)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.shutdown()

    # ─── Internal helpers ──────────────────────────────────────────
    def _begin_request(self):
        """Number a new request and pin the (source, cache generation) it runs against."""
        with self._state_lock:
            if self._source is None:
                raise NoSourceImageError("No image has been picked yet")
            self._request_seq += 1
            return self._source, self.cache.generation, self._request_seq

    def _dispatch(self, key: CacheKey, source: Raster) -> Raster:
        # the key's own value, so every parameter sharing the key filters alike
        return self.dispatcher.dispatch(key.kind, key.value, source)

    def _render(self, key: CacheKey, source: Raster, generation: int) -> Raster:
        return self.cache.get_or_compute(
            key, lambda: self._dispatch(key, source), generation=generation)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._state_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.max_workers,
                                                    thread_name_prefix="filter")
            return self._executor
