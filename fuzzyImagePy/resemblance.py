"""
Fuzzy resemblance operators: binary functions giving the degree in [0, 1] in
which two objects (pixels, regions, colours...) resemble each other.

Any callable `(t, u) -> degree` is a resemblance operator. This module
offers the pieces used to build them from fuzzy sets: implications,
inclusion, double inclusion, and collections of operators combined through
an aggregation.
"""
from __future__ import annotations
from typing import Any, Callable, Iterable, List, Optional
from .config import configure_parameters
from .errors import PreconditionError
from .operators import Aggregation, TNorm, get_implication

ResemblanceOp = Callable[[Any, Any], float]


def fuzzy_set_resemblance(fs1: Any, fs2: Any) -> float:
    """Crisp resemblance between fuzzy sets: 1.0 for the same set, 0.0 otherwise."""
    return 1.0 if fs1 is fs2 or fs1 == fs2 else 0.0


def _implication(implication: str | Callable[[float, float], float] | None) -> Callable[[float, float], float]:
    if implication is None:
        implication = configure_parameters.DEFAULT_IMPLICATION
    return get_implication(implication) if isinstance(implication, str) else implication


def inclusion(
    a: float,
    fsa: Any,
    b: float,
    fsb: Any,
    tnorm: TNorm = TNorm.MIN,
    implication: str | Callable[[float, float], float] | None = None
) -> float:
    """
    Degree in which `a` (a degree in `fsa`) is included in `b` (a degree in `fsb`).

    Args:
        a, fsa: The first degree and the fuzzy set it was measured in.
        b, fsb: The second degree and its fuzzy set.
        tnorm: Combines the implication with the resemblance of the two sets.
        implication: A registered implication name or a callable; the
            configured DEFAULT_IMPLICATION if omitted.

    Returns:
        tnorm(implication(a, b), resemblance(fsa, fsb))
    """
    return tnorm(_implication(implication)(a, b), fuzzy_set_resemblance(fsa, fsb))


def double_inclusion(
    a: float,
    b: float,
    tnorm: TNorm = TNorm.MIN,
    implication: str | Callable[[float, float], float] | None = None
) -> float:
    """Resemblance of two degrees of the same fuzzy set: tnorm(a -> b, b -> a)."""
    func = _implication(implication)
    return tnorm(func(a, b), func(b, a))


class FuzzySetResemblance:
    """
    Resemblance between two objects seen through a family of fuzzy sets:
    for every set the two membership degrees are compared by double
    inclusion, and the per-set results are aggregated (minimum by default).

    A typical use compares two image regions through their fuzzy textures.
    """

    def __init__(
        self,
        fuzzy_sets: Iterable[Any],
        tnorm: TNorm = TNorm.MIN,
        implication: str | Callable[[float, float], float] | None = None,
        aggregator: Aggregation = TNorm.MIN
    ):
        self.fuzzy_sets = list(fuzzy_sets)
        if not self.fuzzy_sets:
            raise PreconditionError("A fuzzy set resemblance needs at least one fuzzy set.")
        self.tnorm = tnorm
        self.implication = _implication(implication)
        self.aggregator = aggregator

    def __call__(self, t: Any, u: Any) -> float:
        values = [
            double_inclusion(fs.membership_degree(t), fs.membership_degree(u), self.tnorm, self.implication)
            for fs in self.fuzzy_sets
        ]
        return self.aggregator.reduce(values)


class ResemblanceCollection:
    """
    A list of resemblance operators that behaves as a single operator: the
    results of its members are combined with `aggregator` (TNorm.MIN by
    default). An empty collection returns 0.0.
    """

    def __init__(self, operators: Iterable[ResemblanceOp] | None = None, aggregator: Optional[Aggregation] = None):
        self.operators: List[ResemblanceOp] = list(operators or [])
        self.aggregator = aggregator if aggregator is not None else TNorm.MIN

    def __repr__(self) -> str:
        return f"ResemblanceCollection(size={len(self.operators)}, aggregator={self.aggregator!r})"

    def __len__(self) -> int:
        return len(self.operators)

    def __iter__(self):
        return iter(self.operators)

    def add(self, operator: ResemblanceOp):
        if operator is None:
            raise PreconditionError("Cannot add a missing resemblance operator.")
        self.operators.append(operator)

    def set_aggregator(self, aggregator: Aggregation):
        if aggregator is None:
            raise PreconditionError("The aggregator cannot be None.")
        self.aggregator = aggregator

    def __call__(self, t: Any, u: Any) -> float:
        if not self.operators:
            return 0.0
        return self.aggregator.reduce(op(t, u) for op in self.operators)
