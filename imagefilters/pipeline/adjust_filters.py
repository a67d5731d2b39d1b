"""
Color / tone adjustments: sepia, hue, vibrance and transfer.
"""

from __future__ import annotations
import cv2
import numpy as np

from ..models.errors import InvalidArgumentError
from ..models.raster import Raster
from .color_space import to_hsv, from_hsv, HUE_UNITS, DEGREES_PER_HUE_UNIT

# Rows produce R, G, B from (R, G, B) inputs.
SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
], dtype=np.float32)

VIBRANCE_EXPONENT = 2.5
TRANSFER_SATURATION = 0.85
TRANSFER_CONTRAST = 1.3


def _sepia_matrix(channels: int) -> np.ndarray:
    if channels == 3:
        return SEPIA_MATRIX
    # RGBA: same colour rows, alpha copied through
    matrix = np.eye(4, dtype=np.float32)
    matrix[:3, :3] = SEPIA_MATRIX
    return matrix


def sepia(raster: Raster, strength: float) -> Raster:
    """
    Sepia tone blended with the original: sepia * S + original * (1 - S).
    S = 0 gives back the input, S = 1 the fully toned image.
    """
    if not 0.0 <= strength <= 1.0:
        raise InvalidArgumentError(f"sepia strength must be in [0, 1], got {strength!r}")
    toned = cv2.transform(raster.pixels, _sepia_matrix(raster.channels))
    blended = cv2.addWeighted(raster.pixels, 1.0 - strength, toned, strength, 0.0)
    return Raster(blended)


def hue_shift(raster: Raster, degrees: float) -> Raster:
    """Rotate the hue by *degrees*; any real value, wraps every 360."""
    units = int(np.rint(degrees / DEGREES_PER_HUE_UNIT))
    hsv, alpha = to_hsv(raster)
    hue = hsv[:, :, 0].astype(np.int32)
    hsv[:, :, 0] = np.mod(hue + units, HUE_UNITS).astype(np.uint8)
    return from_hsv(hsv, alpha)


def boost_saturation(saturation: np.ndarray, factor: float) -> np.ndarray:
    """
    Vibrance curve on a uint8 saturation plane:
        s' = clamp(s + floor((1 - (s/255)^2.5) * V * 255), 0, 255)
    Weakly saturated pixels gain the most, saturated ones barely move.
    """
    s = saturation.astype(np.float64)
    increase = np.floor((1.0 - (s / 255.0) ** VIBRANCE_EXPONENT) * factor * 255.0)
    return np.clip(s + increase, 0, 255).astype(np.uint8)


def vibrance(raster: Raster, factor: float) -> Raster:
    if not 0.0 <= factor <= 1.0:
        raise InvalidArgumentError(f"vibrance factor must be in [0, 1], got {factor!r}")
    hsv, alpha = to_hsv(raster)
    hsv[:, :, 1] = boost_saturation(hsv[:, :, 1], factor)
    return from_hsv(hsv, alpha)


def transfer(raster: Raster, _parameter=None) -> Raster:
    """
    Fixed "film transfer" look: saturation down to 85 %,
    value channel stretched by 1.3 (no bias, saturating).
    """
    hsv, alpha = to_hsv(raster)
    hsv[:, :, 1] = cv2.convertScaleAbs(np.ascontiguousarray(hsv[:, :, 1]), alpha=TRANSFER_SATURATION)
    hsv[:, :, 2] = cv2.convertScaleAbs(np.ascontiguousarray(hsv[:, :, 2]), alpha=TRANSFER_CONTRAST)
    return from_hsv(hsv, alpha)
