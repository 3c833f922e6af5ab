from __future__ import annotations
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar
import numpy as np
from .config import configure_parameters
from .errors import UnsupportedAlphaCutError, PreconditionError
from .types import MembershipFunction, validate_degree
from .operators import TConorm

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

def _check_pandas_availability():
    """Helper function to raise an error if pandas is not installed."""
    if not _PANDAS_AVAILABLE:
        raise ImportError("DataFrame export requires the 'pandas' library. Please install it using: pip install pandas")

D = TypeVar("D")


# ==============================================================================
# 1. DISCRETE FUZZY SETS
# ==============================================================================

class DiscreteFuzzySet(Generic[D]):
    """
    A fuzzy set with an explicit, finite reference set.

    Elements are kept in insertion order together with their membership
    degree. Elements that were never added (or were removed) have degree 0.0.
    Elements must be hashable; use tuples for points or colours.
    """

    def __init__(self, label: str = "", elements: Dict[D, float] | Iterable[Tuple[D, float]] | None = None):
        self.label = label
        self._data: Dict[D, float] = {}
        if elements is not None:
            items = elements.items() if isinstance(elements, dict) else elements
            for element, degree in items:
                self.add(element, degree)

    @classmethod
    def from_dict(cls, mapping: Dict[D, float], label: str = "") -> DiscreteFuzzySet[D]:
        """Creates a fuzzy set from an element -> degree mapping."""
        return cls(label=label, elements=mapping)

    def __repr__(self) -> str:
        items = ", ".join(f"{e!r}: {d:.4f}" for e, d in self._data.items())
        return f"DiscreteFuzzySet(label='{self.label}', {{{items}}})"

    def __iter__(self) -> Iterator[Tuple[D, float]]:
        return iter(list(self._data.items()))

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, element: object) -> bool:
        return element in self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscreteFuzzySet): return False
        return self._data == other._data

    __hash__ = None

    def add(self, element: D, degree: float) -> bool:
        """
        Inserts `element` with the given degree, or overwrites the degree of an
        existing element (keeping its position).

        Returns:
            True if the element was not in the set before.

        Raises:
            InvalidDegreeError: If the degree is outside [0, 1]. The set is not modified.
        """
        value = validate_degree(degree)
        is_new = element not in self._data
        self._data[element] = value
        return is_new

    def remove(self, element: D) -> bool:
        """Removes `element` if present. Returns whether something was removed."""
        if element in self._data:
            del self._data[element]
            return True
        return False

    def set_membership_degree(self, element: D, degree: float) -> bool:
        """Updates the degree of an existing element; unknown elements are left out."""
        value = validate_degree(degree)
        if element not in self._data:
            return False
        self._data[element] = value
        return True

    def membership_degree(self, element: D) -> float:
        return self._data.get(element, 0.0)

    def is_empty(self) -> bool:
        return not self._data

    def get_reference_set(self) -> List[D]:
        """The elements carrying a stored degree, in insertion order."""
        return list(self._data.keys())

    def items(self) -> List[Tuple[D, float]]:
        return list(self._data.items())

    def degrees(self) -> np.ndarray:
        """The stored degrees in insertion order."""
        return np.fromiter(self._data.values(), dtype=float, count=len(self._data))

    def alpha_cut(self, alpha: float) -> List[D]:
        """Elements whose degree is >= alpha, in insertion order."""
        return [element for element, degree in self._data.items() if degree >= alpha]

    def kernel(self) -> List[D]:
        return self.alpha_cut(1.0)

    def support(self) -> List[D]:
        return [element for element, degree in self._data.items() if degree > 0.0]

    def height(self) -> float:
        """The largest degree in the set (0.0 for an empty set)."""
        return max(self._data.values(), default=0.0)

    def copy(self) -> DiscreteFuzzySet[D]:
        return DiscreteFuzzySet(label=self.label, elements=self._data)

    def to_dataframe(self) -> 'pd.DataFrame':
        """Exports the set as a DataFrame with 'element' and 'degree' columns."""
        _check_pandas_availability()
        return pd.DataFrame({"element": list(self._data.keys()), "degree": list(self._data.values())})


# ==============================================================================
# 2. FUNCTION BASED FUZZY SETS
# ==============================================================================

class FunctionBasedFuzzySet(Generic[D]):
    """
    A fuzzy set whose degrees are computed on demand by a membership function.

    There is no enumerable reference set. Alpha-cuts are only available when a
    geometric description exists: either an explicit `alpha_cuts` callable
    given here, or the membership function's own `alpha_cut`.
    """

    def __init__(
        self,
        label: str,
        mfunction: MembershipFunction,
        alpha_cuts: Optional[Callable[[float], Any]] = None
    ):
        if mfunction is None:
            raise PreconditionError("A function-based fuzzy set needs a membership function.")
        self.label = label
        self.mfunction = mfunction
        self.alpha_cuts = alpha_cuts

    def __repr__(self) -> str:
        return f"{type(self).__name__}(label='{self.label}', mfunction={self.mfunction!r})"

    def membership_degree(self, element: D) -> float:
        """
        Evaluates the membership function.

        Raises:
            InvalidDegreeError: If the function breaks its [0, 1] contract.
        """
        return validate_degree(self.mfunction(element))

    def alpha_cut(self, alpha: float) -> Any:
        if self.alpha_cuts is not None:
            return self.alpha_cuts(alpha)
        cut = getattr(self.mfunction, "alpha_cut", None)
        if cut is None:
            raise UnsupportedAlphaCutError(
                f"Fuzzy set '{self.label}' has no geometric description of its alpha-cuts."
            )
        return cut(alpha)

    def kernel(self) -> Any:
        return self.alpha_cut(1.0)

    def support(self) -> Any:
        return self.alpha_cut(configure_parameters.SUPPORT_EPSILON)


class MeasureBasedFuzzySet(FunctionBasedFuzzySet):
    """
    A function-based fuzzy set over images (or any other object) whose
    observation is first reduced to a scalar, or a tuple of scalars, by a
    measure (e.g. a coarseness estimator) and then fed to the membership
    function.
    """

    def __init__(
        self,
        label: str,
        mfunction: MembershipFunction,
        measure: Callable[[Any], Any],
        alpha_cuts: Optional[Callable[[float], Any]] = None
    ):
        if measure is None:
            raise PreconditionError("A measure-based fuzzy set needs a measure.")
        super().__init__(label, mfunction, alpha_cuts)
        self.measure = measure

    def membership_degree(self, element: Any) -> float:
        return validate_degree(self.mfunction(self.measure(element)))


# ==============================================================================
# 3. COLLECTIONS OF FUZZY SETS
# ==============================================================================

class PossibilityItem:
    """A (degree, fuzzy set) pair of a possibility distribution."""

    def __init__(self, degree: float, fuzzy_set: Any):
        self.degree = degree
        self.fuzzy_set = fuzzy_set

    def __repr__(self) -> str:
        return f"PossibilityItem({self.fuzzy_set.label!r}, {self.degree:.4f})"


class FuzzySetCollection:
    """
    An ordered collection of fuzzy sets over a common domain, e.g. the fuzzy
    colours of a fuzzy colour space. Sets may overlap arbitrarily.
    """

    def __init__(self, fuzzy_sets: Iterable[Any] | None = None):
        self.fuzzy_sets: List[Any] = []
        for fs in fuzzy_sets or []:
            self.add(fs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.labels})"

    def __iter__(self) -> Iterator[Any]:
        return iter(self.fuzzy_sets)

    def __len__(self) -> int:
        return len(self.fuzzy_sets)

    def __getitem__(self, index: int) -> Any:
        return self.fuzzy_sets[index]

    def add(self, fuzzy_set: Any):
        if fuzzy_set is None:
            raise PreconditionError("Cannot add a missing fuzzy set to a collection.")
        self.fuzzy_sets.append(fuzzy_set)

    def remove(self, fuzzy_set: Any) -> bool:
        if fuzzy_set in self.fuzzy_sets:
            self.fuzzy_sets.remove(fuzzy_set)
            return True
        return False

    @property
    def labels(self) -> List[str]:
        return [fs.label for fs in self.fuzzy_sets]

    def find(self, label: str) -> Any | None:
        """Returns the first member set with the given label, or None."""
        for fs in self.fuzzy_sets:
            if fs.label == label:
                return fs
        return None

    def membership_degrees(self, element: Any) -> np.ndarray:
        """Degrees of `element` in every member set, in collection order."""
        return np.array([fs.membership_degree(element) for fs in self.fuzzy_sets], dtype=float)

    def possibility_distribution(self, element: Any) -> List[PossibilityItem]:
        """The member sets in which `element` has a non-zero degree."""
        output = []
        for fs in self.fuzzy_sets:
            degree = fs.membership_degree(element)
            if degree > 0.0:
                output.append(PossibilityItem(degree, fs))
        return output

    def best_match(self, element: Any) -> PossibilityItem | None:
        """The member set with the highest degree (first one on ties), or None if all are zero."""
        best = None
        for item in self.possibility_distribution(element):
            if best is None or item.degree > best.degree:
                best = item
        return best


class GranularFuzzySet(FuzzySetCollection):
    """
    A fuzzy set defined as the union of its member sets under a t-conorm.

    The t-conorm is fixed at construction (TConorm.MAX by default).
    """

    def __init__(self, label: str = "", tconorm: TConorm = TConorm.MAX, fuzzy_sets: Iterable[Any] | None = None):
        if tconorm is None:
            raise PreconditionError("A granular fuzzy set needs a t-conorm.")
        super().__init__(fuzzy_sets)
        self.label = label
        self.tconorm = tconorm

    def membership_degree(self, element: Any) -> float:
        output = 0.0
        for fs in self.fuzzy_sets:
            output = self.tconorm(output, fs.membership_degree(element))
        return output

    def to_discrete(self) -> DiscreteFuzzySet:
        """Union of the members as a discrete set; every member must be discrete."""
        if not self.fuzzy_sets:
            return DiscreteFuzzySet(label=self.label)
        for fs in self.fuzzy_sets:
            if not isinstance(fs, DiscreteFuzzySet):
                raise UnsupportedAlphaCutError(
                    f"Granular set '{self.label}' contains a non-discrete member ('{fs.label}')."
                )
        union = self.tconorm(*self.fuzzy_sets)
        union.label = self.label
        return union

    def alpha_cut(self, alpha: float) -> List[Any]:
        return self.to_discrete().alpha_cut(alpha)

    def kernel(self) -> List[Any]:
        return self.alpha_cut(1.0)

    def support(self) -> List[Any]:
        return self.to_discrete().support()
