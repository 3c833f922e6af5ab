"""
Raster primitives used by the mapping engine.

Images are numpy arrays of shape (height, width) for single band rasters or
(height, width, bands) for colour rasters. Coordinates are (x, y) with x the
column and y the row, as in image libraries.
"""
from __future__ import annotations
from typing import Tuple, Union
import numpy as np
from .config import configure_parameters
from .errors import PreconditionError


def as_raster(image) -> np.ndarray:
    """Validates and returns `image` as a 2-D or 3-D numpy array."""
    if image is None:
        raise PreconditionError("Source image is None.")
    array = np.asarray(image)
    if array.ndim not in (2, 3) or array.shape[0] == 0 or array.shape[1] == 0:
        raise PreconditionError(f"Expected a non-empty (H, W) or (H, W, C) image, got shape {array.shape}.")
    return array

def width(image: np.ndarray) -> int:
    return image.shape[1]

def height(image: np.ndarray) -> int:
    return image.shape[0]

def num_bands(image: np.ndarray) -> int:
    return 1 if image.ndim == 2 else image.shape[2]

def pixel(image: np.ndarray, x: int, y: int) -> Tuple:
    """The samples of pixel (x, y) as a tuple (a 1-tuple for single band images)."""
    value = image[y, x]
    if image.ndim == 2:
        return (value.item(),)
    return tuple(v.item() for v in value)

def in_bounds(image: np.ndarray, x: int, y: int) -> bool:
    return 0 <= x < image.shape[1] and 0 <= y < image.shape[0]

def window(image: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray | None:
    """
    The sub-image of size w x h whose top-left corner is (x, y), as a view.
    Returns None if the window does not fit inside the image.
    """
    if x < 0 or y < 0 or x + w > image.shape[1] or y + h > image.shape[0]:
        return None
    return image[y:y + h, x:x + w]

def max_level() -> int:
    """The configured MAX_LEVEL, checked to fit the 8-bit grey band."""
    level = configure_parameters.MAX_LEVEL
    if isinstance(level, bool) or not isinstance(level, (int, np.integer)) or not 1 <= level <= 255:
        raise PreconditionError(f"MAX_LEVEL must be an integer between 1 and 255, got {level!r}.")
    return int(level)

def alpha_max(dtype) -> Union[int, float]:
    """Fully opaque alpha for samples of `dtype`: 1.0 for floats, the type maximum for integers."""
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.floating):
        return 1.0
    if np.issubdtype(dtype, np.integer):
        return np.iinfo(dtype).max
    raise PreconditionError(f"Cannot keep the colours of an image with samples of type {dtype}.")

def new_grey(image: np.ndarray) -> np.ndarray:
    """A zero-filled single band uint8 raster with the size of `image`."""
    return np.zeros(image.shape[:2], dtype=np.uint8)

def new_rgba(image: np.ndarray) -> np.ndarray:
    """
    An opaque RGBA copy of `image` with the same sample type, so colours are
    kept unchanged. Grey images are replicated on the three colour bands; an
    existing alpha band is replaced.
    """
    rgba = np.full(image.shape[:2] + (4,), alpha_max(image.dtype), dtype=image.dtype)
    colours = image if image.ndim == 3 else image[:, :, np.newaxis]
    if colours.shape[2] < 3:
        rgba[:, :, :3] = colours[:, :, :1]
    else:
        rgba[:, :, :3] = colours[:, :, :3]
    return rgba
