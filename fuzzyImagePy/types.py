from __future__ import annotations
import math
from typing import Protocol, TypeVar, Any, Tuple, Sequence, runtime_checkable
from .config import configure_parameters
from .errors import InvalidDegreeError

D = TypeVar("D")

Point = Tuple[float, ...]


# ==============================================================================
# 1. THE PROTOCOL BLUEPRINTS
# ==============================================================================

@runtime_checkable
class MembershipFunction(Protocol):
    """
    A protocol for any membership function used by function-based fuzzy sets.

    A membership function maps a domain value to a degree in [0, 1]. It may
    describe its alpha-cuts (an Interval, a radius interval, a volume, ...)
    or raise UnsupportedAlphaCutError when it cannot.
    """

    def __call__(self, x: Any) -> float: ...
    def alpha_cut(self, alpha: float) -> Any: ...


@runtime_checkable
class FuzzySet(Protocol):
    """
    The capability shared by every fuzzy set: a label, a membership degree
    for any domain value, and alpha-cuts (with kernel and support as the
    cuts at 1.0 and just above 0.0).
    """

    label: str

    def membership_degree(self, element: Any) -> float: ...
    def alpha_cut(self, alpha: float) -> Any: ...
    def kernel(self) -> Any: ...
    def support(self) -> Any: ...


@runtime_checkable
class Volume(Protocol):
    """
    Geometry provider consumed by polyhedral membership functions.

    `contains` is a point-in-volume test; `distance_along` returns the
    distance from `origin` (an interior point) to the volume boundary along
    the ray that goes through `point`, or None if the ray misses it.
    """

    def contains(self, point: Sequence[float]) -> bool: ...
    def distance_along(self, origin: Sequence[float], point: Sequence[float]) -> float | None: ...


# ==============================================================================
# 2. SMALL VALUE TYPES
# ==============================================================================

class Interval:
    """
    Closed interval of numbers [a, b]. An interval with a > b is empty.
    """

    def __init__(self, a: float, b: float):
        self.a = float(a)
        self.b = float(b)

    def __repr__(self) -> str:
        return f"Interval({self.a:.4f}, {self.b:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval): return False
        return self.a == other.a and self.b == other.b

    def __hash__(self) -> int:
        return hash((self.a, self.b))

    def __contains__(self, number: float) -> bool:
        return self.contains(number)

    def contains(self, number: float) -> bool:
        return self.a <= float(number) <= self.b

    def center(self) -> float:
        return (self.a + self.b) / 2.0

    def length(self) -> float:
        return abs(self.b - self.a)

    def is_empty(self) -> bool:
        return self.a > self.b


# ==============================================================================
# 3. DEGREE HELPERS
# ==============================================================================

def validate_degree(degree: Any, tolerance: float | None = None) -> float:
    """
    Returns `degree` as a float if it lies in [0, 1].

    Values within `tolerance` of the bounds (floating point noise from
    membership formulas) are snapped to the bound; anything else raises
    InvalidDegreeError.
    """
    try:
        value = float(degree)
    except (TypeError, ValueError):
        raise InvalidDegreeError(f"The degree must be a number, got {degree!r}.")

    tol = tolerance if tolerance is not None else configure_parameters.FLOAT_TOLERANCE
    if math.isnan(value) or value < -tol or value > 1.0 + tol:
        raise InvalidDegreeError(f"The degree must be between 0 and 1, got {value}.")
    return min(1.0, max(0.0, value))


def clamp_degree(degree: float) -> float:
    """Clamps a degree into [0, 1]; NaN is treated as 0."""
    value = float(degree)
    if math.isnan(value): return 0.0
    return min(1.0, max(0.0, value))
