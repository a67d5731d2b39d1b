"""
Cached image filter engine: blur variants and colour/tone adjustments
over decoded RGB(A) rasters, memoised per (filter kind, parameter).
"""

from .models.cache_key import CacheKey
from .models.errors import (
    ImageFilterError,
    InvalidArgumentError,
    OutOfRangeError,
    UnsupportedFilterKindError,
    DecodeFailureError,
    NoSourceImageError,
    DimensionMismatchError,
)
from .models.filter_kind import FilterKind
from .models.raster import Raster
from .repositories.result_cache_repository import ResultCacheRepository
from .services.filter_dispatcher import FilterDispatcher
from .services.filter_service import FilterService
from .services.raster_service import RasterService

__all__ = [
    "CacheKey",
    "FilterDispatcher",
    "FilterKind",
    "FilterService",
    "Raster",
    "RasterService",
    "ResultCacheRepository",
    "ImageFilterError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "UnsupportedFilterKindError",
    "DecodeFailureError",
    "NoSourceImageError",
    "DimensionMismatchError",
]
