"""
The mapping engine: evaluates a fuzzy set at every location of an image and
writes the resulting degrees into an output raster.

The location strategy is pluggable (see `iterators`): per pixel colours,
sliding tiles, centred windows... The output channel is either a grey band
(`uint8`, 0 where nothing was written) or, with `original_colors=True`, an
RGBA copy of the source whose alpha band holds the degree. The copy keeps the
source sample type; its alpha runs up to 1.0 for float images and to the type
maximum for integer images.

Example:
>>> from fuzzyImagePy.mapping import PixelFuzzyMappingOp
>>> op = PixelFuzzyMappingOp(reddish)
>>> grey = op.filter(image)
"""
from __future__ import annotations
import math
import threading
import warnings
from enum import Enum
from typing import Any, Optional
import numpy as np
from . import raster
from .config import configure_parameters
from .errors import MappingCancelled, MappingError, PreconditionError
from .iterators import CenteredTileIterator, LocationIterator, PixelIterator, TileIterator, create_iterator
from .types import clamp_degree


class MappingState(Enum):
    IDLE = "idle"
    ITERATING = "iterating"
    DONE = "done"


def quantize(degree: float, max_level: int | None = None) -> int:
    """
    Clamps a degree into [0, 1] and scales it to an integer level in
    [0, max_level] (MAX_LEVEL by default). Halves round up, so 0.5 maps to
    128 on the 0..255 scale.
    """
    if max_level is None:
        max_level = raster.max_level()
    return int(math.floor(clamp_degree(degree) * max_level + 0.5))


class FuzzyMappingOp:
    """
    Maps an image through a fuzzy set using a location iterator strategy.

    Each run goes IDLE -> ITERATING -> DONE. The result is computed in a
    scratch buffer and only committed to a supplied destination when the
    whole image has been processed, so a failing or cancelled run never
    leaves a half written destination behind.
    """

    def __init__(self, fuzzy_set: Any = None, iterator: LocationIterator | None = None):
        self.fuzzy_set = fuzzy_set
        self.iterator = iterator
        self.state = MappingState.IDLE
        self.evaluated = 0
        self.skipped = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fuzzy_set={self.fuzzy_set!r}, iterator={type(self.iterator).__name__}, state={self.state.name})"

    def set_fuzzy_set(self, fuzzy_set: Any):
        if fuzzy_set is None:
            raise PreconditionError("The fuzzy set cannot be None.")
        self.fuzzy_set = fuzzy_set

    def set_iterator(self, iterator: LocationIterator):
        if iterator is None:
            raise PreconditionError("The location iterator cannot be None.")
        self.iterator = iterator

    def create_compatible_dest(self, src: np.ndarray, original_colors: bool = False) -> np.ndarray:
        """A blank output raster for `src`: a grey band, or an RGBA copy when `original_colors` is set."""
        src = raster.as_raster(src)
        return raster.new_rgba(src) if original_colors else raster.new_grey(src)

    def filter(
        self,
        src: np.ndarray,
        dest: Optional[np.ndarray] = None,
        original_colors: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> np.ndarray:
        """
        Evaluates the fuzzy set over `src` and returns the degree raster.

        Args:
            src: The source image, (H, W) or (H, W, C).
            dest: Optional output buffer. A buffer of the same shape is filled in
                place; a (H, W, C) buffer receiving a grey result gets the level on
                every band. Any other shape raises PreconditionError.
            original_colors: Write the degree into the alpha band of an RGBA copy
                of the source instead of a grey band.
            cancel_event: Checked between two location evaluations; when set the
                run stops with MappingCancelled.

        Returns:
            The destination buffer (`dest` if supplied, otherwise a new array).

        Raises:
            PreconditionError: Missing fuzzy set, iterator or source image, or an
                unusable destination buffer.
            MappingError: The fuzzy set failed to evaluate a location.
        """
        if self.fuzzy_set is None:
            raise PreconditionError("No fuzzy set has been given to the mapping operation.")
        if self.iterator is None:
            raise PreconditionError("No location iterator has been given to the mapping operation.")
        src = raster.as_raster(src)
        max_level = raster.max_level()

        self.state = MappingState.IDLE
        self.evaluated = 0
        self.skipped = 0
        self.iterator.bind(src)
        result = self.create_compatible_dest(src, original_colors)
        self._check_dest(dest, result)
        if original_colors:
            opaque = raster.alpha_max(result.dtype)
            alpha_scale = opaque / max_level
            float_alpha = np.issubdtype(result.dtype, np.floating)

        self.state = MappingState.ITERATING
        try:
            for value, (x, y) in self.iterator:
                if cancel_event is not None and cancel_event.is_set():
                    raise MappingCancelled(f"Mapping cancelled after {self.evaluated} evaluated locations.")
                if value is None or not raster.in_bounds(result, x, y):
                    self.skipped += 1
                    continue
                try:
                    degree = self.fuzzy_set.membership_degree(value)
                except Exception as e:
                    raise MappingError(f"Failed to evaluate the membership degree at location ({x}, {y}): {e}") from e
                level = quantize(degree, max_level)
                if original_colors:
                    alpha = level * alpha_scale
                    result[y, x, 3] = alpha if float_alpha else min(math.floor(alpha + 0.5), opaque)
                else:
                    result[y, x] = level
                self.evaluated += 1
            self.state = MappingState.DONE
        finally:
            if self.state is MappingState.ITERATING:
                self.state = MappingState.IDLE

        return self._commit(result, dest)

    def _check_dest(self, dest: Optional[np.ndarray], result: np.ndarray):
        if dest is None or dest.shape == result.shape:
            return
        if result.ndim == 2 and dest.ndim == 3 and dest.shape[:2] == result.shape:
            return
        raise PreconditionError(f"Destination shape {dest.shape} is not compatible with the result shape {result.shape}.")

    def _commit(self, result: np.ndarray, dest: Optional[np.ndarray]) -> np.ndarray:
        if dest is None:
            return result
        if dest.dtype != result.dtype:
            warnings.warn(f"Destination dtype {dest.dtype} differs from {result.dtype}; levels are cast on copy.", UserWarning)
        if dest.shape == result.shape:
            np.copyto(dest, result, casting="unsafe")
        else:
            warnings.warn("Grey mapping result written to every band of a multi-band destination.", UserWarning)
            np.copyto(dest, result[:, :, np.newaxis], casting="unsafe")
        return dest

    def to_fuzzy_image(self, src: np.ndarray, cancel_event: Optional[threading.Event] = None) -> 'FuzzyImage':
        """Runs the mapping and returns the degrees as a FuzzyImage over pixel coordinates."""
        from .fuzzy_image import FuzzyImage
        grey = self.filter(src, cancel_event=cancel_event)
        return FuzzyImage.from_grey(grey, label=getattr(self.fuzzy_set, "label", ""))


class PixelFuzzyMappingOp(FuzzyMappingOp):
    """Maps each pixel colour (a tuple of samples) through the fuzzy set."""

    def __init__(self, fuzzy_set: Any = None, keep_alpha: bool = False):
        super().__init__(fuzzy_set, PixelIterator(keep_alpha=keep_alpha))


class TiledFuzzyMappingOp(FuzzyMappingOp):
    """
    Maps each tile_width x tile_height window through the fuzzy set and writes
    the degree at the window centre. With `centered=True` a window is centred
    on every pixel instead, and windows crossing the image border are skipped.
    """

    def __init__(self, fuzzy_set: Any = None, tile_width: int | None = None, tile_height: int | None = None,
                 centered: bool = False):
        default = configure_parameters.DEFAULT_TILE_SIZE
        tile_width = default if tile_width is None else tile_width
        tile_height = tile_width if tile_height is None else tile_height
        iterator_cls = CenteredTileIterator if centered else TileIterator
        super().__init__(fuzzy_set, iterator_cls(tile_width, tile_height))

    @property
    def tile_width(self) -> int:
        return self.iterator.tile_width

    @property
    def tile_height(self) -> int:
        return self.iterator.tile_height

    def set_tile_size(self, tile_width: int, tile_height: int):
        """Sets the tile size; values below 1 are raised to 1."""
        if isinstance(self.iterator, TileIterator):
            self.iterator.set_tile_size(tile_width, tile_height)
        else:
            self.iterator.tile_width = max(1, int(tile_width))
            self.iterator.tile_height = max(1, int(tile_height))


def map_image(image: np.ndarray, fuzzy_set: Any, method: str = "pixel", original_colors: bool = False,
              **iterator_kwargs) -> np.ndarray:
    """
    One-call mapping of `image` through `fuzzy_set`.

    `method` names a registered location iterator ("pixel", "tile",
    "centered_tile"); extra keyword arguments are passed to its constructor.
    """
    op = FuzzyMappingOp(fuzzy_set, create_iterator(method, **iterator_kwargs))
    return op.filter(image, original_colors=original_colors)
