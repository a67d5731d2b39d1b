from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .errors import InvalidArgumentError, OutOfRangeError

SUPPORTED_CHANNELS = (3, 4)  # RGB, RGBA


@dataclass(eq=False)
class Raster:
    """
    Owned pixel grid: shape (H, W, C), dtype uint8, R,G,B[,A] order.
    The array is C-contiguous, so it is also the flat row-major buffer
    of length W*H*C. It is wrapped, not copied.

    freeze() makes the raster read-only; copy() always returns a
    writable raster.
    """
    pixels: np.ndarray

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise InvalidArgumentError(f"Raster pixels must be a numpy array, got {type(self.pixels).__name__}")
        if self.pixels.dtype != np.uint8:
            raise InvalidArgumentError(f"Raster pixels must be uint8, got {self.pixels.dtype}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] not in SUPPORTED_CHANNELS:
            raise InvalidArgumentError(f"Raster pixels must be shaped (H, W, 3|4), got {self.pixels.shape}")
        if self.pixels.shape[0] < 1 or self.pixels.shape[1] < 1:
            raise InvalidArgumentError(f"Raster must be at least 1x1, got {self.pixels.shape[1]}x{self.pixels.shape[0]}")
        if not self.pixels.flags['C_CONTIGUOUS']:
            self.pixels = np.ascontiguousarray(self.pixels)

    # ── Construction helpers ─────────────────────────────────────────
    @classmethod
    def blank(cls, width: int, height: int, channels: int = 3, fill: int = 0) -> Raster:
        if width < 1 or height < 1:
            raise InvalidArgumentError(f"Raster must be at least 1x1, got {width}x{height}")
        if channels not in SUPPORTED_CHANNELS:
            raise InvalidArgumentError(f"Unsupported channel count: {channels}")
        return cls(np.full((height, width, channels), fill, dtype=np.uint8))

    @classmethod
    def from_buffer(cls, buffer, width: int, height: int, channels: int = 3) -> Raster:
        """
        Build a raster from a flat row-major sequence of 8-bit samples.
        The data is copied, the caller keeps its buffer.
        """
        flat = np.array(buffer, dtype=np.uint8).reshape(-1)
        expected = width * height * channels
        if flat.size != expected:
            raise InvalidArgumentError(
                f"Buffer holds {flat.size} samples, {width}x{height}x{channels} needs {expected}")
        return cls(flat.reshape(height, width, channels))

    # ── Dimensions ──────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def channels(self) -> int:
        return self.pixels.shape[2]

    @property
    def shape(self):
        return self.pixels.shape

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    # ── Pixel access ────────────────────────────────────────────────
    def _check_index(self, x: int, y: int, channel: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= channel < self.channels):
            raise OutOfRangeError(
                f"({x}, {y}, channel {channel}) outside {self.width}x{self.height}x{self.channels} raster")

    def _check_channel(self, channel: int) -> None:
        if not 0 <= channel < self.channels:
            raise OutOfRangeError(f"Channel {channel} outside 0..{self.channels - 1}")

    def _check_writable(self) -> None:
        if self.read_only:
            raise InvalidArgumentError(f"{self!r} is read-only, copy() it before editing")

    def get_pixel(self, x: int, y: int, channel: int) -> int:
        self._check_index(x, y, channel)
        return int(self.pixels[y, x, channel])

    def set_pixel(self, x: int, y: int, channel: int, value: int) -> None:
        self._check_writable()
        self._check_index(x, y, channel)
        if not 0 <= value <= 255:
            raise InvalidArgumentError(f"Sample value {value} outside 0..255")
        self.pixels[y, x, channel] = value

    def get_channel(self, channel: int) -> np.ndarray:
        """Return a copy of one channel plane, shape (H, W)."""
        self._check_channel(channel)
        return self.pixels[:, :, channel].copy()

    def set_channel(self, channel: int, plane: np.ndarray) -> None:
        self._check_writable()
        self._check_channel(channel)
        plane = np.asarray(plane)
        if plane.shape != (self.height, self.width):
            raise InvalidArgumentError(
                f"Channel plane must be shaped {(self.height, self.width)}, got {plane.shape}")
        self.pixels[:, :, channel] = np.clip(plane, 0, 255).astype(np.uint8)

    def get_buffer(self) -> np.ndarray:
        """Flat row-major copy of every sample, length W*H*C."""
        return self.pixels.reshape(-1).copy()

    def set_buffer(self, buffer) -> None:
        self._check_writable()
        flat = np.asarray(buffer).reshape(-1)
        if flat.size != self.pixels.size:
            raise InvalidArgumentError(
                f"Buffer holds {flat.size} samples, raster needs {self.pixels.size}")
        self.pixels[...] = np.clip(flat, 0, 255).astype(np.uint8).reshape(self.pixels.shape)

    # ── Misc ────────────────────────────────────────────────────────
    @property
    def read_only(self) -> bool:
        return not self.pixels.flags.writeable

    def freeze(self) -> Raster:
        self.pixels.flags.writeable = False
        return self

    def copy(self) -> Raster:
        return Raster(self.pixels.copy())

    def __eq__(self, other):
        if not isinstance(other, Raster):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"Raster({self.width}x{self.height}x{self.channels})"
