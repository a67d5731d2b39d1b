"""
The one RGB <-> HSV mapping shared by every HSV-based filter.

OpenCV's 8-bit conversion is the reference: H in [0, 180) (2 degrees per
unit), S and V in [0, 255]. Alpha never goes through HSV, it is split off
and re-attached untouched.
"""

from __future__ import annotations
from typing import Optional, Tuple
import cv2
import numpy as np

from ..models.raster import Raster

HUE_UNITS = 180          # full turn in OpenCV 8-bit hue units
DEGREES_PER_HUE_UNIT = 2.0


def to_hsv(raster: Raster) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Return (hsv uint8 (H,W,3), alpha plane or None)."""
    rgb = raster.pixels[:, :, :3]
    alpha = raster.pixels[:, :, 3].copy() if raster.has_alpha else None
    hsv = cv2.cvtColor(np.ascontiguousarray(rgb), cv2.COLOR_RGB2HSV)
    return hsv, alpha


def from_hsv(hsv: np.ndarray, alpha: Optional[np.ndarray] = None) -> Raster:
    """Convert an HSV array back to a fresh Raster, re-attaching alpha."""
    rgb = cv2.cvtColor(hsv, cv2.COLOR_HSV2RGB)
    if alpha is not None:
        rgb = np.dstack([rgb, alpha])
    return Raster(np.ascontiguousarray(rgb))
