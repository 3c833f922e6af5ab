"""
===================================================================
Tests for the Geometry Module
===================================================================
"""

import pytest

from fuzzyImagePy.geometry import ConvexVolume
from fuzzyImagePy.types import Volume


@pytest.fixture
def unit_cube() -> ConvexVolume:
    return ConvexVolume([(x, y, z) for x in (0, 1) for y in (0, 1) for z in (0, 1)])

def test_contains(unit_cube):
    assert unit_cube.contains((0.5, 0.5, 0.5))
    assert unit_cube.contains((1.0, 0.5, 0.5))
    assert not unit_cube.contains((1.5, 0.5, 0.5))

def test_boundary(unit_cube):
    assert unit_cube.is_on_boundary((1.0, 0.5, 0.5))
    assert not unit_cube.is_on_boundary((0.5, 0.5, 0.5))
    assert not unit_cube.is_on_boundary((2.0, 0.5, 0.5))

def test_distance_along_ray(unit_cube):
    centre = (0.5, 0.5, 0.5)
    assert unit_cube.distance_along(centre, (0.9, 0.5, 0.5)) == pytest.approx(0.5)
    # The ray exits through the corner
    assert unit_cube.distance_along(centre, (0.6, 0.6, 0.6)) == pytest.approx(3 ** 0.5 / 2)

def test_distance_along_undefined_direction(unit_cube):
    assert unit_cube.distance_along((0.5, 0.5, 0.5), (0.5, 0.5, 0.5)) is None

def test_volume_protocol(unit_cube):
    assert isinstance(unit_cube, Volume)

def test_too_few_vertices():
    with pytest.raises(ValueError, match="dim \\+ 1"):
        ConvexVolume([(0, 0), (1, 1)])
