"""
Location iterators: strategies that walk over an image and produce, for
each location, the object a fuzzy set is evaluated on together with the
output coordinate where the resulting degree is written.

Every iterator follows the same protocol:

>>> it = TileIterator(3, 3)
>>> it.bind(image)
>>> for value, (x, y) in it:
...     ...

A value of None means "no data" for that location (e.g. a window that
falls outside the image); the mapping engine skips it. Iterators are
restartable by binding them again, to the same or another image.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, Iterator, Tuple
import numpy as np
from . import raster

Location = Tuple[Any, Tuple[int, int]]

ITERATOR_REGISTRY: Dict[str, Callable] = {}

def register_iterator(name: str):
    """A decorator to register a location iterator class under a name."""
    def decorator(cls):
        if name in ITERATOR_REGISTRY:
            print(f"Warning: Overwriting location iterator '{name}'")
        ITERATOR_REGISTRY[name] = cls
        return cls
    return decorator

def create_iterator(name: str, **kwargs) -> 'LocationIterator':
    """Instantiates a registered location iterator."""
    iterator_cls = ITERATOR_REGISTRY.get(name)
    if iterator_cls is None:
        raise ValueError(f"Unknown location iterator: '{name}'. Available iterators: {list(ITERATOR_REGISTRY.keys())}")
    return iterator_cls(**kwargs)


class LocationIterator:
    """Base class of the location iterator strategies."""

    def __init__(self):
        self.source: np.ndarray | None = None
        self._pos = 0
        self._length = 0

    def bind(self, image: np.ndarray):
        """Binds the iterator to `image` and rewinds it."""
        self.source = raster.as_raster(image)
        self._pos = 0
        self._length = self._count_locations(self.source)

    def rewind(self):
        self._pos = 0

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[Location]:
        return self

    def has_next(self) -> bool:
        return self._pos < self._length

    def __next__(self) -> Location:
        if not self.has_next():
            raise StopIteration
        location = self._location(self._pos)
        self._pos += 1
        return location

    def _count_locations(self, image: np.ndarray) -> int:
        raise NotImplementedError

    def _location(self, pos: int) -> Location:
        raise NotImplementedError


@register_iterator("pixel")
class PixelIterator(LocationIterator):
    """
    Visits every pixel in row-major order. The value is the pixel colour as a
    tuple of samples (e.g. (r, g, b)); an alpha band is dropped unless
    `keep_alpha` is set. The output coordinate is the pixel itself.
    """

    def __init__(self, keep_alpha: bool = False):
        super().__init__()
        self.keep_alpha = keep_alpha

    def _count_locations(self, image: np.ndarray) -> int:
        return image.shape[0] * image.shape[1]

    def _location(self, pos: int) -> Location:
        w = self.source.shape[1]
        x, y = pos % w, pos // w
        value = raster.pixel(self.source, x, y)
        if not self.keep_alpha and len(value) in (2, 4):
            value = value[:-1]
        return value, (x, y)


@register_iterator("tile")
class TileIterator(LocationIterator):
    """
    Visits every tile_width x tile_height window fully contained in the image,
    in row-major order of their top-left corners. The value is the window (a
    numpy view) and the output coordinate is the window centre.

    A tile larger than the image is clipped to it, so the whole image is then
    processed as a single window centred on the image.
    """

    def __init__(self, tile_width: int = 1, tile_height: int = 1):
        super().__init__()
        self.set_tile_size(tile_width, tile_height)

    def set_tile_size(self, tile_width: int, tile_height: int):
        self.tile_width = max(1, int(tile_width))
        self.tile_height = max(1, int(tile_height))
        if self.source is not None:
            self.bind(self.source)

    def _effective_size(self, image: np.ndarray) -> Tuple[int, int]:
        return min(self.tile_width, image.shape[1]), min(self.tile_height, image.shape[0])

    def _count_locations(self, image: np.ndarray) -> int:
        tw, th = self._effective_size(image)
        self._in_width = image.shape[1] - tw + 1
        in_height = image.shape[0] - th + 1
        return self._in_width * in_height

    def _location(self, pos: int) -> Location:
        tw, th = self._effective_size(self.source)
        x, y = pos % self._in_width, pos // self._in_width
        return raster.window(self.source, x, y, tw, th), (x + tw // 2, y + th // 2)


@register_iterator("centered_tile")
class CenteredTileIterator(LocationIterator):
    """
    Visits every pixel and produces the tile_width x tile_height window centred
    on it. Windows that do not fit inside the image produce no data, leaving
    an unwritten border of half the tile size around the output.
    """

    def __init__(self, tile_width: int = 1, tile_height: int = 1):
        super().__init__()
        self.tile_width = max(1, int(tile_width))
        self.tile_height = max(1, int(tile_height))

    def _count_locations(self, image: np.ndarray) -> int:
        return image.shape[0] * image.shape[1]

    def _location(self, pos: int) -> Location:
        w = self.source.shape[1]
        x, y = pos % w, pos // w
        tile = raster.window(self.source, x - self.tile_width // 2, y - self.tile_height // 2,
                             self.tile_width, self.tile_height)
        return tile, (x, y)
