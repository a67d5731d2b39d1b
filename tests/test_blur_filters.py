import cv2
import numpy as np
import pytest

from imagefilters.models.errors import InvalidArgumentError
from imagefilters.models.raster import Raster
from imagefilters.pipeline.blur_filters import (
    box_blur,
    gaussian_blur,
    motion_blur,
    pixelate,
    zoom_blur,
)
from imagefilters.pipeline.kernels import default_sigma, gaussian_kernel_1d


def _max_abs_diff(a: Raster, b: Raster) -> int:
    return int(np.abs(a.pixels.astype(np.int16) - b.pixels.astype(np.int16)).max())


class TestGaussian:
    def test_level_zero_is_identity(self, noise_raster):
        assert gaussian_blur(noise_raster, 0) == noise_raster

    def test_fractional_level_uses_floor(self, noise_raster):
        assert gaussian_blur(noise_raster, 2.7) == gaussian_blur(noise_raster, 2)

    def test_matches_direct_2d_convolution(self, noise_raster):
        ksize = 2 * 3 + 1
        k1 = gaussian_kernel_1d(ksize, default_sigma(ksize))
        direct = cv2.filter2D(noise_raster.pixels, -1, np.outer(k1, k1))
        assert _max_abs_diff(gaussian_blur(noise_raster, 3), Raster(direct)) <= 1

    def test_smoother_as_level_increases(self, noise_raster):
        spreads = [gaussian_blur(noise_raster, level).pixels.astype(np.float64).std()
                   for level in (0, 1, 3, 6)]
        assert spreads == sorted(spreads, reverse=True)
        assert spreads[-1] < spreads[0]

    def test_does_not_touch_input(self, noise_raster):
        before = noise_raster.copy()
        result = gaussian_blur(noise_raster, 2)
        assert noise_raster == before
        assert not np.shares_memory(result.pixels, noise_raster.pixels)

    def test_negative_level_rejected(self, noise_raster):
        with pytest.raises(InvalidArgumentError):
            gaussian_blur(noise_raster, -1)


class TestBox:
    def test_size_one_is_identity(self, noise_raster):
        assert box_blur(noise_raster, 1) == noise_raster

    def test_uniform_gray_stays_gray(self, gray_raster):
        result = box_blur(gray_raster, 3)
        assert result.shape == (4, 4, 3)
        assert np.all(result.pixels == 128)

    def test_interior_pixel_is_window_mean(self, noise_raster):
        result = box_blur(noise_raster, 3)
        window = noise_raster.pixels[4:7, 9:12].astype(np.float64)
        expected = window.mean(axis=(0, 1))
        assert np.allclose(result.pixels[5, 10], expected, atol=1)

    def test_bad_size_rejected(self, noise_raster):
        with pytest.raises(InvalidArgumentError):
            box_blur(noise_raster, 0)


class TestMotion:
    def test_streak_is_horizontal(self):
        raster = Raster.blank(9, 9)
        raster.set_pixel(4, 4, 0, 255)
        result = motion_blur(raster, 3)
        row = result.get_channel(0)[4]
        assert list(row[3:6]) == [85, 85, 85]
        assert row[2] == 0 and row[6] == 0
        # nothing leaks vertically
        assert result.get_pixel(4, 3, 0) == 0
        assert result.get_pixel(4, 5, 0) == 0

    def test_size_one_is_identity(self, noise_raster):
        assert motion_blur(noise_raster, 1) == noise_raster


class TestPixelate:
    def test_blocks_are_flat(self):
        rng = np.random.default_rng(3)
        raster = Raster(rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8))
        result = pixelate(raster, 4)
        for by in (0, 4):
            for bx in (0, 4):
                block = result.pixels[by:by + 4, bx:bx + 4].reshape(-1, 3)
                assert np.all(block == block[0])
                mean = raster.pixels[by:by + 4, bx:bx + 4].reshape(-1, 3).mean(axis=0)
                assert np.allclose(block[0], mean, atol=1)

    def test_block_larger_than_image(self):
        raster = Raster(np.arange(75, dtype=np.uint8).reshape(5, 5, 3))
        result = pixelate(raster, 10)
        assert result.shape == (5, 5, 3)
        flat = result.pixels.reshape(-1, 3)
        assert np.all(flat == flat[0])


class TestZoom:
    def test_zero_strength_is_identity(self, noise_raster):
        assert zoom_blur(noise_raster, 0.0) == noise_raster

    def test_full_strength_collapses_to_average(self, noise_raster):
        result = zoom_blur(noise_raster, 1.0)
        flat = result.pixels.reshape(-1, 3)
        assert np.all(flat == flat[0])

    def test_partial_strength_softens(self, noise_raster):
        result = zoom_blur(noise_raster, 0.5)
        assert result.shape == noise_raster.shape
        assert result.pixels.std() < noise_raster.pixels.std()

    def test_out_of_domain(self, noise_raster):
        with pytest.raises(InvalidArgumentError):
            zoom_blur(noise_raster, 1.5)


@pytest.mark.parametrize("fn, parameter", [
    (gaussian_blur, 4),
    (motion_blur, 7),
    (pixelate, 3),
    (zoom_blur, 0.3),
    (box_blur, 5),
])
def test_rgba_keeps_shape(noise_rgba_raster, fn, parameter):
    result = fn(noise_rgba_raster, parameter)
    assert result.shape == noise_rgba_raster.shape
