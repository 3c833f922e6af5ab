"""
Fuzzy logic operators over membership degrees.

Every operator is an immutable callable object. Binary operators fold
left-to-right when given more than two operands, and lift pointwise to
discrete fuzzy sets when their operands are DiscreteFuzzySet instances:

>>> TNorm.MIN(0.3, 0.8, 0.5)
0.3
>>> union = TConorm.MAX(set_a, set_b)
"""
from __future__ import annotations
import math
from typing import Callable, Dict, Iterable, TYPE_CHECKING
import numpy as np
from .errors import PreconditionError

if TYPE_CHECKING:
    from .fuzzy_set import DiscreteFuzzySet


class Registry(dict):
    """
    A custom dictionary that validates insertions to ensure only
    callable objects (operators, functions) are registered.
    """
    def __setitem__(self, key: str, value: Callable):
        if not callable(value):
            raise TypeError(
                f"Attempted to register a non-callable object of type '{type(value).__name__}' "
                f"for the key '{key}'. Only operators or functions can be registered."
            )
        if key in self:
            print(f"Warning: Overwriting operator '{key}'")
        super().__setitem__(key, value)


OPERATOR_REGISTRY = Registry()


# ==============================================================================
# 1. OPERATOR CLASSES
# ==============================================================================

class Aggregation:
    """
    A generic combinator of membership degrees.

    With `nary=False` (the default) `func` is a binary operator and the
    n-ary form is its strict left fold. With `nary=True` `func` receives the
    full list of operands at once (e.g. an arithmetic mean, which is not a
    fold of a binary operator).
    """

    def __init__(self, func: Callable, name: str = "", nary: bool = False):
        self._func = func
        self.name = name or getattr(func, "__name__", "aggregation")
        self.nary = nary

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"

    def __call__(self, *operands):
        return self.apply(*operands)

    def apply(self, *operands):
        """
        Applies the operator to degrees or, if the first operand is a
        DiscreteFuzzySet, pointwise to fuzzy sets.
        """
        if not operands:
            raise PreconditionError(f"Operator '{self.name}' needs at least one operand.")

        from .fuzzy_set import DiscreteFuzzySet
        if isinstance(operands[0], DiscreteFuzzySet):
            return self._apply_to_sets(operands)

        if self.nary:
            return float(self._func([float(v) for v in operands]))

        output = float(operands[0])
        for degree in operands[1:]:
            output = float(self._func(output, float(degree)))
        return output

    def reduce(self, degrees: Iterable[float]) -> float:
        """N-ary form over an iterable; an empty iterable is rejected."""
        values = list(degrees)
        if not values:
            raise PreconditionError(f"Operator '{self.name}' cannot reduce an empty list of degrees.")
        return self.apply(*values)

    def _apply_to_sets(self, fuzzy_sets) -> DiscreteFuzzySet:
        from .fuzzy_set import DiscreteFuzzySet

        for fs in fuzzy_sets:
            if not isinstance(fs, DiscreteFuzzySet):
                raise TypeError(f"Cannot mix fuzzy sets and {type(fs).__name__} operands.")

        # Ordered union of every reference set; dict keys keep the first occurrence
        universe = {}
        for fs in fuzzy_sets:
            for element in fs.get_reference_set():
                universe.setdefault(element, None)

        output = DiscreteFuzzySet()
        for element in universe:
            degree = self.apply(*[fs.membership_degree(element) for fs in fuzzy_sets])
            output.add(element, degree)
        return output


class TNorm(Aggregation):
    """
    Triangular norm (fuzzy conjunction).

    Built-in instances: TNorm.MIN, TNorm.PRODUCT, TNorm.DIFFERENCE (bounded
    difference, also known as Lukasiewicz t-norm).
    """
    MIN: TNorm
    PRODUCT: TNorm
    DIFFERENCE: TNorm


class TConorm(Aggregation):
    """
    Triangular conorm (fuzzy disjunction).

    Built-in instances: TConorm.MAX, TConorm.SUM (algebraic sum),
    TConorm.BOUNDED_SUM.
    """
    MAX: TConorm
    SUM: TConorm
    BOUNDED_SUM: TConorm


class WeberTNorm(TNorm):
    """Weber t-norm: max(0, (a + b - 1 + lambda*a*b) / (1 + lambda)), lambda > -1."""

    def __init__(self, lam: float = 0.0):
        if lam <= -1.0:
            raise ValueError("The lambda parameter must be greater than -1.0")
        self.lam = float(lam)
        super().__init__(self._weber, name=f"weber({self.lam})")

    def _weber(self, a: float, b: float) -> float:
        return max(0.0, (a + b - 1.0 + self.lam * a * b) / (1.0 + self.lam))


class DuboisPradeTNorm(TNorm):
    """Dubois-Prade t-norm: a*b / max(a, b, alpha), with alpha in [0, 1]."""

    def __init__(self, alpha: float = 0.0):
        if alpha < 0.0 or alpha > 1.0:
            raise ValueError("The alpha parameter must be between 0 and 1")
        self.alpha = float(alpha)
        super().__init__(self._dubois_prade, name=f"dubois_prade({self.alpha})")

    def _dubois_prade(self, a: float, b: float) -> float:
        denominator = max(a, b, self.alpha)
        return 0.0 if denominator == 0.0 else a * b / denominator


# ==============================================================================
# 2. REGISTRY OF NAMED OPERATORS
# ==============================================================================

_OPERATOR_KINDS = {"aggregation": Aggregation, "tnorm": TNorm, "tconorm": TConorm}

def register_operator(name: str, kind: str = "aggregation", nary: bool = False):
    """
    A decorator to register a degree function as a named operator.

    The decorated function is wrapped into an Aggregation, TNorm or TConorm
    (according to `kind`) and the wrapper is returned.
    """
    if kind not in _OPERATOR_KINDS:
        raise ValueError(f"Unknown operator kind: '{kind}'. Available kinds: {list(_OPERATOR_KINDS)}")

    def decorator(func: Callable):
        operator = _OPERATOR_KINDS[kind](func, name=name, nary=nary)
        OPERATOR_REGISTRY[name] = operator
        return operator
    return decorator

def get_operator(name: str) -> Aggregation:
    """Looks up a registered operator by name."""
    operator = OPERATOR_REGISTRY.get(name)
    if operator is None:
        raise ValueError(f"Unknown operator: '{name}'. Available operators: {list(OPERATOR_REGISTRY.keys())}")
    return operator


@register_operator("min", kind="tnorm")
def _min(a: float, b: float) -> float:
    return min(a, b)

@register_operator("product", kind="tnorm")
def _product(a: float, b: float) -> float:
    return a * b

@register_operator("difference", kind="tnorm")
def _bounded_difference(a: float, b: float) -> float:
    return max(0.0, a + b - 1.0)

@register_operator("max", kind="tconorm")
def _max(a: float, b: float) -> float:
    return max(a, b)

@register_operator("sum", kind="tconorm")
def _algebraic_sum(a: float, b: float) -> float:
    return a + b - a * b

@register_operator("bounded_sum", kind="tconorm")
def _bounded_sum(a: float, b: float) -> float:
    return min(1.0, a + b)

@register_operator("mean", nary=True)
def _mean(degrees) -> float:
    return float(np.mean(degrees))


TNorm.MIN = OPERATOR_REGISTRY["min"]
TNorm.PRODUCT = OPERATOR_REGISTRY["product"]
TNorm.DIFFERENCE = OPERATOR_REGISTRY["difference"]
TConorm.MAX = OPERATOR_REGISTRY["max"]
TConorm.SUM = OPERATOR_REGISTRY["sum"]
TConorm.BOUNDED_SUM = OPERATOR_REGISTRY["bounded_sum"]
Aggregation.MEAN = OPERATOR_REGISTRY["mean"]


# ==============================================================================
# 3. HEDGES
# ==============================================================================

class Hedge:
    """
    Linguistic hedge: a unary modifier of membership degrees (degree ** exponent).
    Exponents above 1 concentrate ("very"), below 1 dilate ("slightly").
    """
    VERY: Hedge
    VERY_VERY: Hedge
    PLUS: Hedge
    SLIGHTLY: Hedge
    MINUS: Hedge

    def __init__(self, exponent: float, name: str = ""):
        if exponent <= 0.0:
            raise ValueError("The hedge exponent must be positive")
        self.exponent = float(exponent)
        self.name = name or f"hedge({self.exponent})"

    def __repr__(self) -> str:
        return f"Hedge({self.name})"

    def __call__(self, degree: float) -> float:
        return math.pow(float(degree), self.exponent)

    def apply_to_set(self, fuzzy_set: DiscreteFuzzySet) -> DiscreteFuzzySet:
        """Returns a new discrete fuzzy set with every degree modified."""
        from .fuzzy_set import DiscreteFuzzySet
        label = f"{self.name} {fuzzy_set.label}".strip()
        output = DiscreteFuzzySet(label=label)
        for element, degree in fuzzy_set:
            output.add(element, self(degree))
        return output

    @staticmethod
    def concentration(degree: float, exponent: float) -> float:
        if exponent < 1.0:
            raise ValueError("The exponent must be greater than 1.0")
        return math.pow(degree, exponent)

    @staticmethod
    def dilation(degree: float, exponent: float) -> float:
        if exponent > 1.0:
            raise ValueError("The exponent must be lower than 1.0")
        return math.pow(degree, exponent)


Hedge.VERY = Hedge(2.0, "very")
Hedge.VERY_VERY = Hedge(4.0, "very very")
Hedge.PLUS = Hedge(1.25, "plus")
Hedge.SLIGHTLY = Hedge(0.5, "slightly")
Hedge.MINUS = Hedge(0.75, "minus")


# ==============================================================================
# 4. FUZZY IMPLICATIONS
# ==============================================================================

def goguen_implication(a: float, b: float) -> float:
    """Goguen implication: 1 if a <= b, else b / a."""
    return 1.0 if a <= b else b / a

def lukasiewicz_implication(a: float, b: float) -> float:
    """Lukasiewicz implication: min(1, 1 - a + b)."""
    return min(1.0, 1.0 - a + b)

IMPLICATIONS: Dict[str, Callable[[float, float], float]] = {
    "goguen": goguen_implication,
    "lukasiewicz": lukasiewicz_implication,
}

def get_implication(name: str) -> Callable[[float, float], float]:
    func = IMPLICATIONS.get(name)
    if func is None:
        raise ValueError(f"Unknown implication: '{name}'. Available implications: {list(IMPLICATIONS.keys())}")
    return func
