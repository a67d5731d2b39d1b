from __future__ import annotations
from dataclasses import dataclass

from .filter_kind import FilterKind

DEFAULT_PRECISION = 4


@dataclass(frozen=True)
class CacheKey:
    """
    (filter kind, parameter) identity of a memoised result.

    The parameter is stored as canonical text so that 0.1 + 0.2 and 0.3
    land on the same entry instead of drifting apart in a float key.
    """
    kind: FilterKind
    parameter: str

    @classmethod
    def build(cls, kind, parameter, precision: int = DEFAULT_PRECISION) -> CacheKey:
        """Validate *parameter* for *kind* and return the canonical key."""
        kind = FilterKind.parse(kind)
        value = kind.domain.validate(kind, parameter)
        return cls(kind, canonical_parameter(value, precision))

    @property
    def value(self):
        """
        The parameter this key stands for, parsed back from its text.
        Filtering with it gives the same raster for every input that
        shares the key.
        """
        if self.parameter == "none":
            return None
        if self.kind.domain.integer:
            return int(self.parameter)
        return float(self.parameter)

    def __str__(self):
        return f"{self.kind.value}:{self.parameter}"


def canonical_parameter(value, precision: int = DEFAULT_PRECISION) -> str:
    if value is None:
        return "none"
    if isinstance(value, int):
        return str(value)
    text = f"{value:.{precision}f}"
    # -0.0000 and 0.0000 are the same parameter
    if float(text) == 0.0:
        text = f"{0.0:.{precision}f}"
    return text
