from __future__ import annotations
from types import MappingProxyType
from typing import Callable, Dict, List
import logging
import time

from ..models.errors import DimensionMismatchError, UnsupportedFilterKindError
from ..models.filter_kind import FilterKind
from ..models.raster import Raster
from ..pipeline import blur_filters, adjust_filters

logger = logging.getLogger(__name__)

FilterFn = Callable[[Raster, object], Raster]

# One canonical table, one entry per FilterKind.
DEFAULT_CATALOG: Dict[FilterKind, FilterFn] = {
    FilterKind.GAUSSIAN: blur_filters.gaussian_blur,
    FilterKind.MOTION: blur_filters.motion_blur,
    FilterKind.PIXELATE: blur_filters.pixelate,
    FilterKind.ZOOM: blur_filters.zoom_blur,
    FilterKind.BOX: blur_filters.box_blur,
    FilterKind.SEPIA: adjust_filters.sepia,
    FilterKind.HUE: adjust_filters.hue_shift,
    FilterKind.VIBRANCE: adjust_filters.vibrance,
    FilterKind.TRANSFER: adjust_filters.transfer,
}


class FilterDispatcher:
    """
    Maps a FilterKind to its catalog function and runs it.

    • Unknown kinds raise UnsupportedFilterKindError (no pass-through).
    • Parameters are checked against the kind's domain before running.
    • Output size is checked against input size after running.
    """

    def __init__(self, catalog: Dict[FilterKind, FilterFn] | None = None):
        self._catalog = dict(DEFAULT_CATALOG if catalog is None else catalog)

    @property
    def catalog(self):
        return MappingProxyType(self._catalog)

    def supported_kinds(self) -> List[FilterKind]:
        return [kind for kind in FilterKind if kind in self._catalog]

    def dispatch(self, kind, parameter, raster: Raster) -> Raster:
        kind = FilterKind.parse(kind)
        fn = self._catalog.get(kind)
        if fn is None:
            raise UnsupportedFilterKindError(f"No catalog entry for {kind.value}")

        value = kind.domain.validate(kind, parameter)

        started = time.perf_counter()
        result = fn(raster, value)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{kind.value}({value}) on {raster!r} took {elapsed_ms:.1f} ms")

        if result.shape[:2] != raster.shape[:2]:
            raise DimensionMismatchError(
                f"{kind.value} returned {result.width}x{result.height}, "
                f"expected {raster.width}x{raster.height}")
        return result
