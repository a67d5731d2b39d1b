import math

import numpy as np
import pytest

from imagefilters.models.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    UnsupportedFilterKindError,
)
from imagefilters.models.filter_kind import FilterKind
from imagefilters.models.raster import Raster
from imagefilters.services.filter_dispatcher import DEFAULT_CATALOG, FilterDispatcher

IN_DOMAIN = {
    FilterKind.GAUSSIAN: 2.5,
    FilterKind.MOTION: 5,
    FilterKind.PIXELATE: 4,
    FilterKind.ZOOM: 0.5,
    FilterKind.BOX: 3,
    FilterKind.SEPIA: 0.7,
    FilterKind.HUE: 45.0,
    FilterKind.VIBRANCE: 0.3,
    FilterKind.TRANSFER: None,
}


@pytest.fixture
def dispatcher() -> FilterDispatcher:
    return FilterDispatcher()


def test_catalog_covers_every_kind(dispatcher):
    assert set(dispatcher.supported_kinds()) == set(FilterKind)
    assert set(IN_DOMAIN) == set(FilterKind)


@pytest.mark.parametrize("kind", list(FilterKind))
def test_output_dimensions_match_input(dispatcher, noise_raster, noise_rgba_raster, kind):
    for source in (noise_raster, noise_rgba_raster):
        result = dispatcher.dispatch(kind, IN_DOMAIN[kind], source)
        assert result.shape == source.shape
        assert not np.shares_memory(result.pixels, source.pixels)


def test_accepts_kind_names(dispatcher, gray_raster):
    result = dispatcher.dispatch("Box", 3, gray_raster)
    assert np.all(result.pixels == 128)


def test_integral_float_accepted_for_integer_kinds(dispatcher, noise_raster):
    assert dispatcher.dispatch(FilterKind.BOX, 3.0, noise_raster) == \
        dispatcher.dispatch(FilterKind.BOX, 3, noise_raster)


@pytest.mark.parametrize("kind", ["emboss", "", 42, None, "gaussian-blur"])
def test_unknown_kind_is_an_error_not_a_passthrough(dispatcher, gray_raster, kind):
    with pytest.raises(UnsupportedFilterKindError):
        dispatcher.dispatch(kind, 1, gray_raster)


@pytest.mark.parametrize("kind, parameter", [
    (FilterKind.BOX, 0),
    (FilterKind.BOX, 2.5),
    (FilterKind.MOTION, 100),
    (FilterKind.MOTION, True),
    (FilterKind.PIXELATE, "4"),
    (FilterKind.GAUSSIAN, -1),
    (FilterKind.GAUSSIAN, 51),
    (FilterKind.ZOOM, 1.01),
    (FilterKind.SEPIA, -0.5),
    (FilterKind.VIBRANCE, None),
    (FilterKind.HUE, math.nan),
    (FilterKind.HUE, math.inf),
    (FilterKind.TRANSFER, 1.0),
])
def test_out_of_domain_parameters(dispatcher, gray_raster, kind, parameter):
    with pytest.raises(InvalidArgumentError):
        dispatcher.dispatch(kind, parameter, gray_raster)


def test_kind_missing_from_custom_catalog(gray_raster):
    dispatcher = FilterDispatcher({FilterKind.BOX: DEFAULT_CATALOG[FilterKind.BOX]})
    assert dispatcher.supported_kinds() == [FilterKind.BOX]
    with pytest.raises(UnsupportedFilterKindError):
        dispatcher.dispatch(FilterKind.SEPIA, 0.5, gray_raster)


def test_size_changing_filter_is_fatal(gray_raster):
    def shrinking(raster, _):
        return Raster.blank(1, 1)

    dispatcher = FilterDispatcher({FilterKind.BOX: shrinking})
    with pytest.raises(DimensionMismatchError):
        dispatcher.dispatch(FilterKind.BOX, 3, gray_raster)


def test_catalog_is_read_only(dispatcher):
    with pytest.raises(TypeError):
        dispatcher.catalog[FilterKind.BOX] = None


def test_end_to_end_gray_box(dispatcher, gray_raster):
    result = dispatcher.dispatch(FilterKind.BOX, 3, gray_raster)
    assert result.shape == (4, 4, 3)
    for y in range(4):
        for x in range(4):
            assert tuple(result.pixels[y, x]) == (128, 128, 128)
