"""
Exception types raised by fuzzyImagePy.

Every class also derives from the builtin exception a caller would
naturally catch (ValueError, NotImplementedError, RuntimeError).
"""


class FuzzyImageError(Exception):
    """Base class for all library specific errors."""


class InvalidDegreeError(FuzzyImageError, ValueError):
    """A membership degree outside [0, 1] was supplied or produced."""


class PreconditionError(FuzzyImageError, ValueError):
    """A required argument is missing or an operand list is empty."""


class UnsupportedAlphaCutError(FuzzyImageError, NotImplementedError):
    """The fuzzy set has no computable description of its alpha-cuts."""


class MappingError(FuzzyImageError, RuntimeError):
    """The membership evaluation failed while mapping an image."""


class MappingCancelled(MappingError):
    """The mapping was cancelled between two location evaluations."""
