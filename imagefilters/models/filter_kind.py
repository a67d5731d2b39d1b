from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math
import numbers

from .errors import InvalidArgumentError, UnsupportedFilterKindError


class FilterKind(Enum):
    """Closed set of filters the catalog knows how to apply."""
    GAUSSIAN = "gaussian"
    MOTION = "motion"
    PIXELATE = "pixelate"
    ZOOM = "zoom"
    BOX = "box"
    SEPIA = "sepia"
    HUE = "hue"
    VIBRANCE = "vibrance"
    TRANSFER = "transfer"

    @classmethod
    def parse(cls, value) -> FilterKind:
        """
        Accept a FilterKind or its (case-insensitive) name.
        Anything else is an unsupported kind, never a silent no-op.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedFilterKindError(f"Unsupported filter kind: {value!r}")

    @property
    def domain(self) -> ParameterDomain:
        return PARAMETER_DOMAINS[self]


@dataclass(frozen=True)
class ParameterDomain:
    """
    Valid values for one filter kind's scalar parameter.

    minimum / maximum: inclusive bounds, None means unbounded.
    integer:  only integral values are accepted (3 and 3.0 are fine, 3.5 is not).
    wraps:    value is an angle in degrees, folded into [0, 360).
    takes_parameter: False for fixed filters that accept only None.
    """
    minimum: float | None = None
    maximum: float | None = None
    integer: bool = False
    wraps: bool = False
    takes_parameter: bool = True

    def validate(self, kind: FilterKind, value):
        """
        Check *value* and return it coerced to int / float (or None).
        Raises InvalidArgumentError when it falls outside the domain.
        """
        if not self.takes_parameter:
            if value is not None:
                raise InvalidArgumentError(f"{kind.value} takes no parameter, got {value!r}")
            return None

        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidArgumentError(f"{kind.value} parameter must be a number, got {value!r}")
        value = float(value)
        if not math.isfinite(value):
            raise InvalidArgumentError(f"{kind.value} parameter must be finite, got {value}")

        if self.integer:
            if not value.is_integer():
                raise InvalidArgumentError(f"{kind.value} parameter must be an integer, got {value}")
            value = int(value)
        if self.minimum is not None and value < self.minimum:
            raise InvalidArgumentError(f"{kind.value} parameter {value} below minimum {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            raise InvalidArgumentError(f"{kind.value} parameter {value} above maximum {self.maximum}")
        if self.wraps:
            value = value % 360.0
        return value


PARAMETER_DOMAINS = {
    FilterKind.GAUSSIAN: ParameterDomain(minimum=0, maximum=50),
    FilterKind.MOTION: ParameterDomain(minimum=1, maximum=99, integer=True),
    FilterKind.PIXELATE: ParameterDomain(minimum=1, maximum=256, integer=True),
    FilterKind.ZOOM: ParameterDomain(minimum=0, maximum=1),
    FilterKind.BOX: ParameterDomain(minimum=1, maximum=99, integer=True),
    FilterKind.SEPIA: ParameterDomain(minimum=0, maximum=1),
    FilterKind.HUE: ParameterDomain(wraps=True),
    FilterKind.VIBRANCE: ParameterDomain(minimum=0, maximum=1),
    FilterKind.TRANSFER: ParameterDomain(takes_parameter=False),
}
