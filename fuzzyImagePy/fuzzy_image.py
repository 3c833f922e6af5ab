from __future__ import annotations
from typing import Tuple
import numpy as np
from . import raster
from .errors import PreconditionError
from .types import validate_degree


class FuzzyImage:
    """
    Fuzzy set over the pixel coordinates (x, y) of a width x height image.

    Degrees are stored in a float array of shape (height, width), all set to
    1.0 on creation (the crisp full image).
    """

    def __init__(self, width: int, height: int, label: str = ""):
        if width <= 0 or height <= 0:
            raise PreconditionError(f"A fuzzy image needs a positive size, got {width}x{height}.")
        self.label = label
        self.degrees = np.ones((int(height), int(width)), dtype=float)

    @classmethod
    def from_grey(cls, grey: np.ndarray, label: str = "") -> FuzzyImage:
        """Builds a fuzzy image from a single band raster of levels in [0, MAX_LEVEL]."""
        grey = raster.as_raster(grey)
        if grey.ndim != 2:
            raise PreconditionError(f"Expected a single band raster, got shape {grey.shape}.")
        image = cls(grey.shape[1], grey.shape[0], label)
        image.degrees = np.clip(grey.astype(float) / raster.max_level(), 0.0, 1.0)
        return image

    def __repr__(self) -> str:
        return f"FuzzyImage(label='{self.label}', size={self.width}x{self.height})"

    @property
    def width(self) -> int:
        return self.degrees.shape[1]

    @property
    def height(self) -> int:
        return self.degrees.shape[0]

    def membership_degree(self, location: Tuple[int, int]) -> float:
        """The degree of pixel (x, y); 0.0 outside the image."""
        x, y = location
        if not raster.in_bounds(self.degrees, x, y):
            return 0.0
        return float(self.degrees[y, x])

    def set_membership_degree(self, location: Tuple[int, int], degree: float):
        x, y = location
        if not raster.in_bounds(self.degrees, x, y):
            raise IndexError(f"Location ({x}, {y}) is outside a {self.width}x{self.height} image.")
        self.degrees[y, x] = validate_degree(degree)

    def fill(self, degree: float):
        self.degrees.fill(validate_degree(degree))

    def alpha_cut(self, alpha: float) -> np.ndarray:
        """Boolean mask of the pixels whose degree is >= alpha."""
        return self.degrees >= alpha

    def kernel(self) -> np.ndarray:
        return self.alpha_cut(1.0)

    def support(self) -> np.ndarray:
        return self.degrees > 0.0

    def alpha_cut_image(self, alpha: float, source: np.ndarray) -> np.ndarray:
        """
        A copy of `source` where the pixels outside the alpha-cut are set to 0,
        so only the original colours inside the cut remain.
        """
        source = raster.as_raster(source)
        if source.shape[:2] != self.degrees.shape:
            raise PreconditionError(f"Source shape {source.shape[:2]} does not match the fuzzy image {self.degrees.shape}.")
        result = source.copy()
        result[~self.alpha_cut(alpha)] = 0
        return result

    def to_grey(self) -> np.ndarray:
        """The degrees quantized to a uint8 grey band, halves rounding up."""
        levels = np.floor(np.clip(self.degrees, 0.0, 1.0) * raster.max_level() + 0.5)
        return levels.astype(np.uint8)
