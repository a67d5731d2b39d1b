import sys
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

ROOT = Path(__file__).resolve().parents[1]

# Make the package importable without installing it.
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from imagefilters.models.raster import Raster  # noqa: E402


@pytest.fixture
def gray_raster() -> Raster:
    """4x4 mid-gray RGB raster."""
    return Raster.blank(4, 4, channels=3, fill=128)


@pytest.fixture
def noise_raster() -> Raster:
    """Deterministic 32x24 RGB noise."""
    rng = np.random.default_rng(42)
    return Raster(rng.integers(0, 256, size=(24, 32, 3), dtype=np.uint8))


@pytest.fixture
def noise_rgba_raster() -> Raster:
    rng = np.random.default_rng(7)
    return Raster(rng.integers(0, 256, size=(17, 13, 4), dtype=np.uint8))


def encode(pixels: np.ndarray, fmt: str = "PNG", **save_kwargs) -> bytes:
    """Encode an (H, W, C) uint8 array with Pillow."""
    buffer = BytesIO()
    PILImage.fromarray(pixels).save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def png_bytes(noise_raster) -> bytes:
    return encode(noise_raster.pixels)
