from io import BytesIO
import logging

import cv2
import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError

from ..models.errors import DecodeFailureError
from ..models.raster import Raster

logger = logging.getLogger(__name__)

EXIF_ORIENTATION_TAG = 0x0112

# EXIF orientation -> cv2.rotate code. Mirrored orientations are ignored.
_ROTATIONS = {
    3: cv2.ROTATE_180,
    6: cv2.ROTATE_90_CLOCKWISE,
    8: cv2.ROTATE_90_COUNTERCLOCKWISE,  # 270 clockwise
}


class RasterRepository:
    """
    Decoding and orientation for Raster entities.
    No filter logic here.
    """

    @staticmethod
    def create_raster(pixels: np.ndarray) -> Raster:
        return Raster(pixels=pixels)

    @staticmethod
    def retrieve_dimensions(raster: Raster):
        """(height, width), same order as numpy shapes."""
        return raster.pixels.shape[:2]

    @staticmethod
    def decode(data: bytes) -> Raster:
        """
        Decode PNG/JPEG/... bytes into an RGB raster, or RGBA when the
        source carries transparency. EXIF orientation is NOT applied here.
        """
        if not data:
            raise DecodeFailureError("No image data")
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                has_alpha = pil_img.mode in ("RGBA", "LA", "PA") or (
                    pil_img.mode == "P" and "transparency" in pil_img.info)
                arr = np.array(pil_img.convert("RGBA" if has_alpha else "RGB"), dtype=np.uint8)
        except (UnidentifiedImageError, PILImage.DecompressionBombError,
                OSError, ValueError, SyntaxError) as err:
            raise DecodeFailureError(f"Image bytes could not be decoded: {err}") from err

        return Raster(pixels=arr)

    @staticmethod
    def read_orientation(data: bytes) -> int:
        """EXIF orientation value (1..8); 1 when absent or unreadable."""
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                return int(pil_img.getexif().get(EXIF_ORIENTATION_TAG, 1))
        except (UnidentifiedImageError, PILImage.DecompressionBombError,
                OSError, ValueError, TypeError, SyntaxError):
            return 1

    @staticmethod
    def orient(raster: Raster, orientation: int) -> Raster:
        """
        Rotate by 0/90/180/270 degrees according to an EXIF orientation.
        Always returns a new Raster.
        """
        code = _ROTATIONS.get(orientation)
        if code is None:
            return raster.copy()
        logger.debug(f"Applying EXIF orientation {orientation}")
        return Raster(pixels=np.ascontiguousarray(cv2.rotate(raster.pixels, code)))
