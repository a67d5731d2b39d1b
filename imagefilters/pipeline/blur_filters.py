"""
Blur filters: gaussian, motion, pixelate, zoom and box.

Every function takes a Raster and an already validated parameter and
returns a brand-new Raster of the same width and height. Convolutions use
OpenCV's default reflect-101 border, so a uniform image stays uniform.
"""

from __future__ import annotations
import cv2

from ..models.errors import InvalidArgumentError
from ..models.raster import Raster
from .kernels import gaussian_kernel_1d, default_sigma, box_kernel, motion_kernel


def _require_size(size: int, name: str) -> int:
    if int(size) != size or size < 1:
        raise InvalidArgumentError(f"{name} size must be an integer >= 1, got {size!r}")
    return int(size)


def _require_unit(value: float, name: str) -> float:
    if not 0.0 <= value <= 1.0:
        raise InvalidArgumentError(f"{name} strength must be in [0, 1], got {value!r}")
    return float(value)


def gaussian_blur(raster: Raster, level: float) -> Raster:
    """
    Separable Gaussian blur with kernel size 2*floor(level)+1.
    Sigma follows OpenCV's ksize rule (see kernels.default_sigma);
    level 0 is a 1-tap kernel, i.e. identity.
    """
    if level < 0:
        raise InvalidArgumentError(f"gaussian level must be >= 0, got {level!r}")
    ksize = 2 * int(level) + 1
    kernel = gaussian_kernel_1d(ksize, default_sigma(ksize))
    return Raster(cv2.sepFilter2D(raster.pixels, -1, kernel, kernel))


def motion_blur(raster: Raster, size: int) -> Raster:
    """Horizontal streak: N x N kernel with the middle row set to 1/N."""
    size = _require_size(size, "motion")
    return Raster(cv2.filter2D(raster.pixels, -1, motion_kernel(size)))


def pixelate(raster: Raster, block: int) -> Raster:
    """
    Shrink by 1/N with area averaging, then blow back up with
    nearest-neighbour so every block becomes one flat tile.
    """
    block = _require_size(block, "pixelate")
    w, h = raster.width, raster.height
    small = cv2.resize(raster.pixels, (max(1, w // block), max(1, h // block)),
                       interpolation=cv2.INTER_AREA)
    return Raster(cv2.resize(small, (w, h), interpolation=cv2.INTER_NEAREST))


def zoom_blur(raster: Raster, strength: float) -> Raster:
    """
    Soft zoom approximation (no radial sampling).

    • downscale to (1 - S) of the size, upscale back (loses detail)
    • blend: original * (1 - S) + resampled * S
    S = 0 returns the original, S = 1 is the most washed-out result.
    """
    strength = _require_unit(strength, "zoom")
    w, h = raster.width, raster.height
    dw = max(1, round(w * (1.0 - strength)))
    dh = max(1, round(h * (1.0 - strength)))

    small = cv2.resize(raster.pixels, (dw, dh), interpolation=cv2.INTER_AREA)
    resampled = cv2.resize(small, (w, h), interpolation=cv2.INTER_LINEAR)
    blended = cv2.addWeighted(raster.pixels, 1.0 - strength, resampled, strength, 0.0)
    return Raster(blended)


def box_blur(raster: Raster, size: int) -> Raster:
    """N x N uniform averaging window."""
    size = _require_size(size, "box")
    return Raster(cv2.filter2D(raster.pixels, -1, box_kernel(size)))
