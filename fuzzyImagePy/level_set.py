from __future__ import annotations
from typing import Any, Dict, Iterator, List, Tuple
from .fuzzy_set import DiscreteFuzzySet


class LevelSet:
    """
    Decomposition of a discrete fuzzy set into its distinct alpha levels.

    Level 0 corresponds to the lowest distinct degree of the set and level
    `levels() - 1` to the highest one. Each element is ranked once, at
    construction, by the position of its own degree in that sorted sequence,
    so sweeping all levels costs O(n) per level with no re-sorting.

    .. note::
        The decomposition is a snapshot of the source set at construction
        time. Later changes to the source are not observed; call
        `recompute()` to refresh it.
    """

    def __init__(self, fuzzy_set: DiscreteFuzzySet):
        self.fuzzy_set = fuzzy_set
        self.recompute()

    def recompute(self):
        """Rebuilds the levels from the current contents of the source set."""
        self._elements: List[Any] = self.fuzzy_set.get_reference_set()
        self._degrees: List[float] = sorted({degree for _, degree in self.fuzzy_set})
        rank_of: Dict[float, int] = {degree: rank for rank, degree in enumerate(self._degrees)}
        self._ranks: List[int] = [rank_of[self.fuzzy_set.membership_degree(e)] for e in self._elements]

    def __repr__(self) -> str:
        lines = [f"LevelSet(label='{self.fuzzy_set.label}', levels={self.levels()})"]
        for i in range(self.levels()):
            lines.append(f"  Level {i} (d>={self._degrees[i]}): {self.level(i)}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return self.levels()

    def __iter__(self) -> Iterator[Tuple[float, List[Any]]]:
        for i in range(self.levels()):
            yield self._degrees[i], self.level(i)

    @property
    def num_levels(self) -> int:
        return len(self._degrees)

    def levels(self) -> int:
        """The number of distinct degrees (levels) in the snapshot."""
        return len(self._degrees)

    def _check_index(self, level: int):
        if not 0 <= level < len(self._degrees):
            raise IndexError(f"Level {level} out of range [0, {len(self._degrees) - 1}].")

    def degree(self, level: int) -> float:
        """The threshold degree of the given level."""
        self._check_index(level)
        return self._degrees[level]

    def rank(self, element: Any) -> int:
        """The level recorded for `element` (the rank of its own degree)."""
        try:
            return self._ranks[self._elements.index(element)]
        except ValueError:
            raise KeyError(f"Element {element!r} is not in the level set.")

    def level(self, level: int) -> List[Any]:
        """Elements whose recorded rank is >= `level`, in insertion order."""
        self._check_index(level)
        return [e for e, r in zip(self._elements, self._ranks) if r >= level]

    def get_level(self, level: int) -> List[Any]:
        """
        The exact alpha-cut of the source set at the degree of `level`.
        Agrees with `level(level)` as long as the source is unchanged.
        """
        self._check_index(level)
        return self.fuzzy_set.alpha_cut(self._degrees[level])
