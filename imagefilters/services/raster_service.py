from __future__ import annotations
import logging
import os

import cv2
import numpy as np
from dotenv import load_dotenv

from ..models.raster import Raster
from ..repositories.raster_repository import RasterRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class RasterService:
    """
    Business-level raster helpers: create, decode + orient, scale down.
    Filters live in imagefilters.pipeline, not here.
    """

    def __init__(self, max_dimension: int | None = None):
        self.max_dimension = max_dimension or int(os.getenv("MAX_IMAGE_DIMENSION", "1024"))
        self.raster_repository = RasterRepository()

    def create_raster(self, pixels: np.ndarray) -> Raster:
        return self.raster_repository.create_raster(pixels)

    def get_dimensions(self, raster: Raster):
        return self.raster_repository.retrieve_dimensions(raster)

    def decode(self, data: bytes) -> Raster:
        """Decode bytes and apply the EXIF rotation, if any."""
        raster = self.raster_repository.decode(data)
        orientation = self.raster_repository.read_orientation(data)
        return self.raster_repository.orient(raster, orientation)

    def scale_down(self, raster: Raster, max_dimension: int | None = None) -> Raster:
        """
        Shrink so the larger side is at most *max_dimension*, keeping the
        aspect ratio (area interpolation). Smaller images are returned as
        an untouched copy.
        """
        limit = max_dimension or self.max_dimension
        height, width = self.get_dimensions(raster)
        larger = max(width, height)
        if larger <= limit:
            return raster.copy()

        new_w = max(1, width * limit // larger)
        new_h = max(1, height * limit // larger)
        resized = cv2.resize(raster.pixels, (new_w, new_h), interpolation=cv2.INTER_AREA)
        logger.info(f"Scaled {width}x{height} down to {new_w}x{new_h}")
        return self.create_raster(resized)

    def prepare(self, data: bytes) -> Raster:
        """decode + orient + scale down: the one-shot step for a picked image."""
        return self.scale_down(self.decode(data))
