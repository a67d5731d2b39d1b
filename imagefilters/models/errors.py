class ImageFilterError(Exception):
    """
    Base class for every error raised by the filter engine.
    """


class InvalidArgumentError(ImageFilterError, ValueError):
    """A filter parameter or raster argument is outside its domain."""


class OutOfRangeError(ImageFilterError, IndexError):
    """A pixel coordinate or channel index is outside the raster."""


class UnsupportedFilterKindError(ImageFilterError, ValueError):
    """The requested filter kind is not part of the catalog."""


class DecodeFailureError(ImageFilterError, ValueError):
    """Encoded image bytes could not be turned into a raster."""


class NoSourceImageError(ImageFilterError, RuntimeError):
    """A filter was requested before any source image was picked."""


class DimensionMismatchError(ImageFilterError, AssertionError):
    """
    A filter produced a raster whose size differs from its input.
    Never expected at runtime: it means a catalog function is broken.
    """
