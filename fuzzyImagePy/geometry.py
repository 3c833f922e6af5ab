from __future__ import annotations
from typing import Sequence
import numpy as np
from scipy.spatial import ConvexHull
from .config import configure_parameters


class ConvexVolume:
    """
    Convex volume (polygon in 2-D, polyhedron in 3-D) given by the convex hull
    of a set of vertices.

    Implements the Volume protocol used by PolyhedralFunction: point-in-volume
    tests and the distance from an interior point to the boundary along a ray.
    """

    def __init__(self, vertices: Sequence[Sequence[float]]):
        self.vertices = np.asarray(vertices, dtype=float)
        if self.vertices.ndim != 2 or self.vertices.shape[0] <= self.vertices.shape[1]:
            raise ValueError("A convex volume needs at least dim + 1 vertices of the same dimension.")
        hull = ConvexHull(self.vertices)
        # Each row (n, offset) describes a facet: n . x + offset <= 0 inside the volume
        self._normals = hull.equations[:, :-1]
        self._offsets = hull.equations[:, -1]
        self.dimension = self.vertices.shape[1]

    def __repr__(self) -> str:
        return f"ConvexVolume(dimension={self.dimension}, facets={len(self._offsets)})"

    def _signed_distances(self, point: Sequence[float]) -> np.ndarray:
        return self._normals @ np.asarray(point, dtype=float) + self._offsets

    def contains(self, point: Sequence[float]) -> bool:
        """True if `point` is inside the volume or on its boundary."""
        return bool(np.all(self._signed_distances(point) <= configure_parameters.FLOAT_TOLERANCE))

    def is_on_boundary(self, point: Sequence[float]) -> bool:
        """True if `point` lies on one of the facets."""
        distances = self._signed_distances(point)
        tol = configure_parameters.FLOAT_TOLERANCE
        return bool(np.all(distances <= tol) and np.any(np.abs(distances) <= tol))

    def distance_along(self, origin: Sequence[float], point: Sequence[float]) -> float | None:
        """
        Distance from `origin` to the boundary along the ray origin -> point.

        Returns None when the direction is undefined (point == origin) or the
        ray does not leave the volume through any facet.
        """
        origin = np.asarray(origin, dtype=float)
        direction = np.asarray(point, dtype=float) - origin
        norm = np.linalg.norm(direction)
        if norm == 0.0:
            return None
        direction /= norm

        # Only facets the ray moves towards can be crossed
        speeds = self._normals @ direction
        mask = speeds > configure_parameters.FLOAT_TOLERANCE
        if not np.any(mask):
            return None
        steps = -(self._normals[mask] @ origin + self._offsets[mask]) / speeds[mask]
        steps = steps[steps >= -configure_parameters.FLOAT_TOLERANCE]
        if steps.size == 0:
            return None
        return float(max(0.0, steps.min()))
