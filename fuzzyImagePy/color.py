"""
Fuzzy colour spaces: collections of fuzzy colours built from a set of crisp
colour prototypes (points of some colour space, e.g. RGB).

Example:
>>> from fuzzyImagePy.color import FuzzyColorSpace
>>> fcs = FuzzyColorSpace.create_sphere_based({"red": (255, 0, 0), "green": (0, 255, 0), "blue": (0, 0, 255)}, 0.5)
>>> fcs.best_match((250, 10, 10)).fuzzy_set.label
'red'
"""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union
import numpy as np
from .config import configure_parameters
from .errors import UnsupportedAlphaCutError
from .fuzzy_set import FunctionBasedFuzzySet, FuzzySetCollection
from .membership import SphericalFunction

Prototypes = Union[Mapping[str, Sequence[float]], Sequence[Sequence[float]]]


def _named_prototypes(prototypes: Prototypes) -> Dict[str, np.ndarray]:
    """Normalizes prototypes to an ordered {label: point}; unnamed ones are labelled 'Color i'."""
    if isinstance(prototypes, Mapping):
        named = {label: np.asarray(p, dtype=float) for label, p in prototypes.items()}
    else:
        named = {f"Color {i}": np.asarray(p, dtype=float) for i, p in enumerate(prototypes)}
    if len(named) < 2:
        raise ValueError("A fuzzy colour space needs at least two prototypes.")
    return named


class SphericalFuzzyColor(FunctionBasedFuzzySet):
    """A fuzzy colour given by a spherical membership function around a centre colour."""

    def __init__(self, label: str, center: Sequence[float], kernel_radius: float, support_radius: float):
        super().__init__(label, SphericalFunction(center, kernel_radius, support_radius))

    @property
    def center(self) -> np.ndarray:
        return self.mfunction.center

    @property
    def kernel_radius(self) -> float:
        return self.mfunction.a

    @property
    def support_radius(self) -> float:
        return self.mfunction.b


class FuzzyCMeansColor:
    """
    A fuzzy colour with the fuzzy c-means membership of a point to one
    prototype among all the prototypes of the space:

        u_j(p) = 1 / sum_k (d(p, c_j) / d(p, c_k)) ** (2 / (m - 1))

    The degree is 1.0 at the prototype itself and 0.0 at any other prototype.
    """

    def __init__(self, label: str, prototype: Sequence[float], all_prototypes: Sequence[Sequence[float]],
                 m: float | None = None):
        m = configure_parameters.DEFAULT_FCM_M if m is None else m
        if m <= 1.0:
            raise ValueError(f"The fuzzy c-means exponent must be greater than 1, got {m}.")
        self.label = label
        self.prototype = np.asarray(prototype, dtype=float)
        self.all_prototypes = np.asarray(all_prototypes, dtype=float)
        self.m = float(m)

    def __repr__(self) -> str:
        return f"FuzzyCMeansColor(label='{self.label}', prototype={tuple(self.prototype)}, m={self.m})"

    def membership_degree(self, point: Sequence[float]) -> float:
        point = np.asarray(point, dtype=float)
        d_j = float(np.linalg.norm(point - self.prototype))
        if d_j == 0.0:
            return 1.0
        distances = np.linalg.norm(self.all_prototypes - point, axis=1)
        if np.any(distances == 0.0):
            return 0.0
        total = float(np.sum((d_j / distances) ** (2.0 / (self.m - 1.0))))
        return min(1.0, 1.0 / total)

    def alpha_cut(self, alpha: float) -> Any:
        raise UnsupportedAlphaCutError("Alpha-cuts of fuzzy c-means colours are not supported.")

    def kernel(self) -> List[np.ndarray]:
        return [self.prototype]

    def support(self) -> Any:
        return self.alpha_cut(configure_parameters.SUPPORT_EPSILON)


class FuzzyColorSpace(FuzzySetCollection):
    """An ordered collection of fuzzy colours."""

    def prototypes(self) -> List[Tuple[str, np.ndarray]]:
        """(label, centre) of every member that has one."""
        output = []
        for fc in self.fuzzy_sets:
            center = getattr(fc, "center", getattr(fc, "prototype", None))
            if center is not None:
                output.append((fc.label, center))
        return output

    @classmethod
    def create_sphere_based(cls, prototypes: Prototypes, kernel_factor: float | None = None) -> FuzzyColorSpace:
        """
        Builds a space of spherical fuzzy colours around the prototypes.

        The kernel radius of a prototype is `kernel_factor / 2` times the
        distance to its nearest prototype (so a factor of 1 makes the kernel
        reach half way). The support radius is the distance to the nearest
        kernel of the other prototypes.

        Args:
            prototypes: {label: point} or a sequence of points.
            kernel_factor: In [0, 1]; DEFAULT_KERNEL_FACTOR if omitted.

        Raises:
            ValueError: If the factor is out of range or fewer than two prototypes are given.
        """
        if kernel_factor is None:
            kernel_factor = configure_parameters.DEFAULT_KERNEL_FACTOR
        if kernel_factor < 0.0 or kernel_factor > 1.0:
            raise ValueError("The kernel factor must be between 0 and 1")
        named = _named_prototypes(prototypes)
        labels = list(named.keys())
        points = np.stack(list(named.values()))

        distances = np.linalg.norm(points[:, np.newaxis, :] - points[np.newaxis, :, :], axis=2)
        np.fill_diagonal(distances, np.inf)
        kernel_radius = distances.min(axis=1) * kernel_factor / 2.0
        support_radius = (distances - kernel_radius[np.newaxis, :]).min(axis=1)
        # Rounding must not push the support inside the kernel
        support_radius = np.maximum(support_radius, kernel_radius)

        fcs = cls()
        for i, label in enumerate(labels):
            fcs.add(SphericalFuzzyColor(label, points[i], kernel_radius[i], support_radius[i]))
        return fcs

    @classmethod
    def create_fuzzy_cmeans(cls, prototypes: Prototypes, m: float | None = None) -> FuzzyColorSpace:
        """Builds a space of fuzzy c-means colours, one per prototype."""
        named = _named_prototypes(prototypes)
        all_prototypes = list(named.values())
        return cls(FuzzyCMeansColor(label, p, all_prototypes, m) for label, p in named.items())
