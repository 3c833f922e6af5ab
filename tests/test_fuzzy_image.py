"""
===================================================================
Tests for the Fuzzy Image Module
===================================================================
"""

import pytest
import numpy as np

from fuzzyImagePy.config import ConfigurationContextManager
from fuzzyImagePy.errors import InvalidDegreeError, PreconditionError
from fuzzyImagePy.fuzzy_image import FuzzyImage


@pytest.fixture
def fimg() -> FuzzyImage:
    image = FuzzyImage(3, 2, label="region")
    image.set_membership_degree((0, 0), 0.2)
    image.set_membership_degree((2, 1), 0.0)
    return image

def test_new_image_is_fully_included():
    image = FuzzyImage(4, 3)
    assert (image.width, image.height) == (4, 3)
    assert np.all(image.degrees == 1.0)

def test_membership_degree_by_coordinates(fimg):
    assert fimg.membership_degree((0, 0)) == pytest.approx(0.2)
    assert fimg.membership_degree((1, 0)) == 1.0
    assert fimg.membership_degree((10, 10)) == 0.0

def test_set_membership_degree_validation(fimg):
    with pytest.raises(InvalidDegreeError):
        fimg.set_membership_degree((1, 1), 1.5)
    with pytest.raises(IndexError):
        fimg.set_membership_degree((3, 0), 0.5)

def test_fill(fimg):
    fimg.fill(0.4)
    assert np.all(fimg.degrees == 0.4)
    with pytest.raises(InvalidDegreeError):
        fimg.fill(-1)

def test_alpha_cut_mask(fimg):
    mask = fimg.alpha_cut(0.5)
    assert mask.dtype == bool
    np.testing.assert_array_equal(mask, [[False, True, True], [True, True, False]])
    assert fimg.support().sum() == 5
    assert fimg.kernel().sum() == 4

def test_alpha_cut_image_keeps_original_colours(fimg):
    source = np.full((2, 3, 3), 200, dtype=np.uint8)
    cut = fimg.alpha_cut_image(0.5, source)
    assert np.all(cut[0, 0] == 0)
    assert np.all(cut[0, 1] == 200)
    assert np.all(source == 200)
    with pytest.raises(PreconditionError):
        fimg.alpha_cut_image(0.5, np.zeros((5, 5, 3)))

def test_grey_conversions(fimg):
    grey = fimg.to_grey()
    assert grey.dtype == np.uint8
    assert grey[0, 0] == 51
    assert grey[1, 2] == 0
    back = FuzzyImage.from_grey(grey, label="back")
    assert back.membership_degree((0, 0)) == pytest.approx(0.2)
    assert back.label == "back"

def test_invalid_sizes():
    with pytest.raises(PreconditionError):
        FuzzyImage(0, 3)
    with pytest.raises(PreconditionError):
        FuzzyImage.from_grey(np.zeros((2, 2, 3)))

def test_grey_conversions_reject_unusable_max_level(fimg):
    with ConfigurationContextManager(MAX_LEVEL=1000):
        with pytest.raises(PreconditionError, match="MAX_LEVEL"):
            fimg.to_grey()
        with pytest.raises(PreconditionError, match="MAX_LEVEL"):
            FuzzyImage.from_grey(np.zeros((2, 2), dtype=np.uint8))

def test_to_grey_rounds_halves_up():
    image = FuzzyImage(2, 1)
    image.degrees[0, 0] = 0.25
    with ConfigurationContextManager(MAX_LEVEL=10):
        assert image.to_grey()[0, 0] == 3
