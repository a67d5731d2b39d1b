"""
Convolution kernels used by the blur filters.
All kernels are float32 so they can be handed straight to cv2.filter2D /
cv2.sepFilter2D.
"""

from __future__ import annotations
import numpy as np

from ..models.errors import InvalidArgumentError


def _check_size(size: int, name: str = "size") -> None:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
        raise InvalidArgumentError(f"Kernel {name} must be an integer >= 1, got {size!r}")


def gaussian_kernel_1d(length: int, sigma: float) -> np.ndarray:
    """
    Sample the Gaussian density at integer offsets from ``length // 2``
    and normalise so the weights sum to 1.

    Args:
        length: number of taps (>= 1)
        sigma:  standard deviation in pixels (> 0)
    """
    _check_size(length, "length")
    if not sigma > 0:
        raise InvalidArgumentError(f"Gaussian sigma must be > 0, got {sigma!r}")

    offsets = np.arange(length, dtype=np.float64) - length // 2
    two_sigma_sq = 2.0 * sigma * sigma
    kernel = np.exp(-(offsets ** 2) / two_sigma_sq) / (two_sigma_sq * np.pi)
    return (kernel / kernel.sum()).astype(np.float32)


def default_sigma(ksize: int) -> float:
    """
    Sigma OpenCV derives from a kernel size when none is given.
    Grows with ksize, so bigger kernels always blur more.
    """
    _check_size(ksize, "ksize")
    return 0.3 * ((ksize - 1) * 0.5 - 1) + 0.8


def box_kernel(size: int) -> np.ndarray:
    """size x size averaging window."""
    _check_size(size)
    return np.full((size, size), 1.0 / (size * size), dtype=np.float32)


def motion_kernel(size: int) -> np.ndarray:
    """
    size x size kernel with a single horizontal streak of 1/size weights
    on the middle row, every other entry zero.
    """
    _check_size(size)
    kernel = np.zeros((size, size), dtype=np.float32)
    kernel[size // 2, :] = 1.0 / size
    return kernel
