"""
Fuzzy cardinality measures of discrete fuzzy sets.

Both measures are snapshots: they are computed once from the source set and
must be recomputed explicitly (`recompute()`) if the set changes.
"""
from __future__ import annotations
from decimal import Decimal
from typing import Dict, List, Tuple
from .fuzzy_set import DiscreteFuzzySet

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

def _check_pandas_availability():
    """Helper function to raise an error if pandas is not installed."""
    if not _PANDAS_AVAILABLE:
        raise ImportError("DataFrame export requires the 'pandas' library. Please install it using: pip install pandas")


class SigmaCount:
    """
    Sigma-count of a discrete fuzzy set: the sum of all its membership degrees.
    """

    def __init__(self, fuzzy_set: DiscreteFuzzySet):
        self.fuzzy_set = fuzzy_set
        self.recompute()

    def recompute(self):
        self.value = 0.0
        for _, degree in self.fuzzy_set:
            self.value += degree

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"SigmaCount({self.value})"


class EDCardinal:
    """
    ED (evaluation of the degree) cardinality of a discrete fuzzy set.

    With the degrees sorted in descending order a_1 >= ... >= a_m (ties keep
    insertion order) and a_{m+1} = 0, the crisp cardinality i (the cut that
    holds the top i elements) gets the mass a_i - a_{i+1}; the cardinality 0
    gets 1 - a_1 when the set is not normalized. Only positive masses are
    stored, and the masses of a non-empty set add up to 1.

    Differences are computed on the decimal representation of the degrees, so
    0.3 - 0.2 yields exactly 0.1.

    Example:
    >>> EDCardinal(DiscreteFuzzySet(elements={"a": 0.2, "b": 0.5, "c": 0.3})).items()
    [(0, 0.5), (1, 0.2), (2, 0.1), (3, 0.2)]
    """

    def __init__(self, fuzzy_set: DiscreteFuzzySet):
        self.fuzzy_set = fuzzy_set
        self.recompute()

    def recompute(self):
        self._distribution: Dict[int, float] = {}
        # sorted() is stable, so equal degrees keep their insertion order
        entries = sorted(self.fuzzy_set, key=lambda item: item[1], reverse=True)
        if not entries:
            return

        degrees = [Decimal(repr(degree)) for _, degree in entries] + [Decimal(0)]
        one = Decimal(1)
        if degrees[0] < one:
            self._distribution[0] = float(one - degrees[0])
        for i in range(len(entries)):
            mass = degrees[i] - degrees[i + 1]
            if mass > 0:
                self._distribution[i + 1] = float(mass)

    def __repr__(self) -> str:
        return "EDCardinal(" + " ".join(f"[{p}/{n}]" for n, p in self._distribution.items()) + ")"

    def __len__(self) -> int:
        return len(self._distribution)

    def probability(self, number: int) -> float:
        """The mass assigned to the crisp cardinality `number` (0.0 if none)."""
        return self._distribution.get(number, 0.0)

    def most_likely(self) -> List[int]:
        """All cardinalities with the maximal mass, in ascending order."""
        if not self._distribution:
            return []
        top = max(self._distribution.values())
        return [n for n, p in self._distribution.items() if p == top]

    def items(self) -> List[Tuple[int, float]]:
        """(cardinality, mass) pairs in ascending cardinality order."""
        return list(self._distribution.items())

    def total(self) -> float:
        return sum(self._distribution.values())

    def to_dataframe(self) -> 'pd.DataFrame':
        """Exports the distribution as a DataFrame with 'cardinality' and 'probability' columns."""
        _check_pandas_availability()
        return pd.DataFrame(self.items(), columns=["cardinality", "probability"])
