"""
===================================================================
Tests for the Mapping Engine
===================================================================

End-to-end checks of FuzzyMappingOp with the pixel, tile and centred tile
strategies, the grey and alpha output channels, destination handling,
failure and cancellation.
"""

import threading
import pytest
import numpy as np

from fuzzyImagePy.config import ConfigurationContextManager
from fuzzyImagePy.errors import MappingCancelled, MappingError, PreconditionError
from fuzzyImagePy.fuzzy_image import FuzzyImage
from fuzzyImagePy.fuzzy_set import DiscreteFuzzySet, FunctionBasedFuzzySet
from fuzzyImagePy.iterators import PixelIterator
from fuzzyImagePy.mapping import (
    FuzzyMappingOp, MappingState, PixelFuzzyMappingOp, TiledFuzzyMappingOp, map_image, quantize,
)
from fuzzyImagePy.membership import SphericalFunction

# ==============================================================================
# Tests for the pixel mapping
# ==============================================================================

@pytest.mark.parametrize("degree, level", [(1.0, 255), (0.0, 0), (0.5, 128)])
def test_constant_degree_round_trip(rgb_image, constant_set, degree, level):
    op = PixelFuzzyMappingOp(constant_set(degree))
    grey = op.filter(rgb_image)
    assert grey.dtype == np.uint8
    assert grey.shape == (2, 2)
    assert np.all(grey == level)
    assert op.state is MappingState.DONE
    assert op.evaluated == 4

def test_pixel_mapping_with_discrete_colour_set(rgb_image):
    reddish = DiscreteFuzzySet("reddish", {(255, 0, 0): 1.0, (255, 255, 255): 0.2})
    grey = PixelFuzzyMappingOp(reddish).filter(rgb_image)
    np.testing.assert_array_equal(grey, [[255, 0], [0, 51]])

def test_pixel_mapping_with_spherical_colour():
    image = np.array([[[0, 0, 0], [0, 0, 30]]], dtype=np.uint8)
    dark = FunctionBasedFuzzySet("dark", SphericalFunction((0, 0, 0), 10, 50))
    grey = PixelFuzzyMappingOp(dark).filter(image)
    np.testing.assert_array_equal(grey, [[255, 128]])

def test_quantize_clamps_and_rounds():
    assert quantize(1.2) == 255
    assert quantize(-0.3) == 0
    assert quantize(0.2) == 51
    with ConfigurationContextManager(MAX_LEVEL=100):
        assert quantize(0.5) == 50

# ==============================================================================
# Tests for the tiled mapping
# ==============================================================================

def test_tile_larger_than_image_writes_single_centre_sample(grey_ramp, constant_set):
    op = TiledFuzzyMappingOp(constant_set(1.0), tile_width=50, tile_height=50)
    grey = op.filter(grey_ramp)
    assert op.evaluated == 1
    assert np.count_nonzero(grey) == 1
    assert grey[2, 2] == 255

def test_tiled_mapping_writes_window_centres(grey_ramp):
    mean_brightness = FunctionBasedFuzzySet("bright", lambda tile: float(tile.mean()) / 19.0)
    op = TiledFuzzyMappingOp(mean_brightness, 3, 3)
    grey = op.filter(grey_ramp)
    assert op.evaluated == 6
    # Border pixels are never written
    assert np.all(grey[0, :] == 0) and np.all(grey[:, 0] == 0) and np.all(grey[:, 4] == 0)
    assert grey[1, 1] == round(grey_ramp[0:3, 0:3].mean() / 19.0 * 255)

def test_centered_tiled_mapping_skips_border(grey_ramp, constant_set):
    op = TiledFuzzyMappingOp(constant_set(1.0), 3, 3, centered=True)
    grey = op.filter(grey_ramp)
    assert op.evaluated == 6
    assert op.skipped == 14
    assert np.count_nonzero(grey) == 6

def test_tile_size_setters_clamp(constant_set):
    op = TiledFuzzyMappingOp(constant_set(1.0))
    assert (op.tile_width, op.tile_height) == (1, 1)
    op.set_tile_size(0, 4)
    assert (op.tile_width, op.tile_height) == (1, 4)
    centered = TiledFuzzyMappingOp(constant_set(1.0), 3, centered=True)
    assert centered.tile_height == 3
    centered.set_tile_size(-2, 5)
    assert (centered.tile_width, centered.tile_height) == (1, 5)

# ==============================================================================
# Tests for the output channels and destinations
# ==============================================================================

def test_original_colors_mode_uses_alpha(rgb_image, constant_set):
    rgba = PixelFuzzyMappingOp(constant_set(0.2)).filter(rgb_image, original_colors=True)
    assert rgba.shape == (2, 2, 4)
    np.testing.assert_array_equal(rgba[:, :, :3], rgb_image)
    assert np.all(rgba[:, :, 3] == 51)

def test_original_colors_unwritten_pixels_stay_opaque(grey_ramp, constant_set):
    op = TiledFuzzyMappingOp(constant_set(0.0), 3, 3, centered=True)
    rgba = op.filter(grey_ramp, original_colors=True)
    assert rgba[0, 0, 3] == 255
    assert rgba[1, 1, 3] == 0
    assert rgba[1, 1, 0] == grey_ramp[1, 1]

def test_supplied_destination_is_filled_in_place(rgb_image, constant_set):
    dest = np.full((2, 2), 7, dtype=np.uint8)
    result = PixelFuzzyMappingOp(constant_set(1.0)).filter(rgb_image, dest)
    assert result is dest
    assert np.all(dest == 255)

def test_multiband_destination_receives_grey_on_every_band(rgb_image, constant_set):
    dest = np.zeros((2, 2, 3), dtype=np.uint8)
    with pytest.warns(UserWarning, match="every band"):
        PixelFuzzyMappingOp(constant_set(1.0)).filter(rgb_image, dest)
    assert np.all(dest == 255)

def test_destination_with_other_dtype_is_cast(rgb_image, constant_set):
    dest = np.zeros((2, 2), dtype=float)
    with pytest.warns(UserWarning, match="dtype"):
        PixelFuzzyMappingOp(constant_set(1.0)).filter(rgb_image, dest)
    assert np.all(dest == 255.0)

def test_incompatible_destination_is_rejected(rgb_image, constant_set):
    with pytest.raises(PreconditionError, match="not compatible"):
        PixelFuzzyMappingOp(constant_set(1.0)).filter(rgb_image, np.zeros((3, 3), dtype=np.uint8))

def test_create_compatible_dest(rgb_image):
    op = FuzzyMappingOp()
    assert op.create_compatible_dest(rgb_image).shape == (2, 2)
    assert op.create_compatible_dest(rgb_image, original_colors=True).shape == (2, 2, 4)

# ==============================================================================
# Tests for preconditions, failures and cancellation
# ==============================================================================

def test_missing_collaborators(rgb_image, constant_set):
    with pytest.raises(PreconditionError, match="fuzzy set"):
        FuzzyMappingOp(None, PixelIterator()).filter(rgb_image)
    with pytest.raises(PreconditionError, match="iterator"):
        FuzzyMappingOp(constant_set(1.0), None).filter(rgb_image)
    with pytest.raises(PreconditionError):
        PixelFuzzyMappingOp(constant_set(1.0)).filter(None)
    with pytest.raises(PreconditionError):
        FuzzyMappingOp().set_fuzzy_set(None)
    with pytest.raises(PreconditionError):
        FuzzyMappingOp().set_iterator(None)

def test_evaluation_failure_leaves_destination_untouched(rgb_image):
    def explode(colour):
        if colour == (0, 0, 255):
            raise ArithmeticError("bad colour")
        return 1.0

    op = PixelFuzzyMappingOp(FunctionBasedFuzzySet("fragile", explode))
    dest = np.full((2, 2), 9, dtype=np.uint8)
    with pytest.raises(MappingError, match=r"\(0, 1\)") as excinfo:
        op.filter(rgb_image, dest)
    assert isinstance(excinfo.value.__cause__, ArithmeticError)
    assert np.all(dest == 9)
    assert op.state is MappingState.IDLE

def test_cancellation_between_locations(rgb_image):
    cancel = threading.Event()

    def cancel_after_first(colour):
        cancel.set()
        return 1.0

    op = PixelFuzzyMappingOp(FunctionBasedFuzzySet("one shot", cancel_after_first))
    dest = np.zeros((2, 2), dtype=np.uint8)
    with pytest.raises(MappingCancelled):
        op.filter(rgb_image, dest, cancel_event=cancel)
    assert op.evaluated == 1
    assert np.all(dest == 0)
    assert op.state is MappingState.IDLE

def test_operation_is_reusable_after_failure(rgb_image, constant_set):
    op = PixelFuzzyMappingOp(FunctionBasedFuzzySet("broken", lambda c: 2.0))
    with pytest.raises(MappingError):
        op.filter(rgb_image)
    op.set_fuzzy_set(constant_set(1.0))
    assert np.all(op.filter(rgb_image) == 255)

# ==============================================================================
# Tests for the helpers
# ==============================================================================

def test_map_image_by_method_name(grey_ramp, constant_set):
    grey = map_image(grey_ramp, constant_set(1.0), method="tile", tile_width=3, tile_height=3)
    assert np.count_nonzero(grey) == 6
    grey = map_image(grey_ramp, constant_set(1.0))
    assert np.all(grey == 255)
    with pytest.raises(ValueError, match="Unknown location iterator"):
        map_image(grey_ramp, constant_set(1.0), method="spiral")

def test_to_fuzzy_image(rgb_image, constant_set):
    fimg = PixelFuzzyMappingOp(constant_set(0.2, label="dim")).to_fuzzy_image(rgb_image)
    assert isinstance(fimg, FuzzyImage)
    assert fimg.label == "dim"
    assert fimg.membership_degree((1, 1)) == pytest.approx(0.2)

# ==============================================================================
# Tests for sample types and the level range
# ==============================================================================

def test_original_colors_keeps_float_samples(constant_set):
    image = np.full((2, 2, 3), 0.5)
    rgba = PixelFuzzyMappingOp(constant_set(0.2)).filter(image, original_colors=True)
    assert rgba.dtype == image.dtype
    np.testing.assert_array_equal(rgba[:, :, :3], image)
    np.testing.assert_allclose(rgba[:, :, 3], 0.2)

def test_original_colors_keeps_uint16_samples(constant_set):
    image = np.full((2, 2, 3), 1000, dtype=np.uint16)
    rgba = PixelFuzzyMappingOp(constant_set(0.2)).filter(image, original_colors=True)
    assert rgba.dtype == np.uint16
    np.testing.assert_array_equal(rgba[:, :, :3], image)
    assert np.all(rgba[:, :, 3] == 51 * 257)
    opaque = PixelFuzzyMappingOp(constant_set(1.0)).filter(image, original_colors=True)
    assert np.all(opaque[:, :, 3] == 65535)

def test_original_colors_float_unwritten_pixels_stay_opaque(constant_set):
    image = np.linspace(0.0, 1.0, 20).reshape(4, 5)
    rgba = TiledFuzzyMappingOp(constant_set(0.0), 3, 3, centered=True).filter(image, original_colors=True)
    assert rgba[0, 0, 3] == 1.0
    assert rgba[1, 1, 3] == 0.0
    assert rgba[1, 1, 0] == image[1, 1]

def test_original_colors_rejects_boolean_samples(constant_set):
    with pytest.raises(PreconditionError, match="type bool"):
        PixelFuzzyMappingOp(constant_set(1.0)).filter(np.ones((2, 2), dtype=bool), original_colors=True)

@pytest.mark.parametrize("max_level", [0, 256, 1000, 2.5])
def test_max_level_outside_grey_band_is_rejected(rgb_image, constant_set, max_level):
    op = PixelFuzzyMappingOp(constant_set(1.0))
    dest = np.full((2, 2), 9, dtype=np.uint8)
    with ConfigurationContextManager(MAX_LEVEL=max_level):
        with pytest.raises(PreconditionError, match="MAX_LEVEL"):
            op.filter(rgb_image, dest)
    assert op.state is MappingState.IDLE
    assert np.all(dest == 9)

def test_any_failure_while_iterating_resets_state(rgb_image, constant_set):
    class BrokenEvent:
        def is_set(self):
            raise RuntimeError("event lost")

    op = PixelFuzzyMappingOp(constant_set(1.0))
    with pytest.raises(RuntimeError, match="event lost"):
        op.filter(rgb_image, cancel_event=BrokenEvent())
    assert op.state is MappingState.IDLE

def test_quantize_rounds_halves_up():
    assert quantize(0.25, 10) == 3
    assert quantize(0.5, 1) == 1
    assert quantize(0.5) == 128
