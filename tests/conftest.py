import pytest
import numpy as np
from fuzzyImagePy.config import configure_parameters
from fuzzyImagePy.fuzzy_set import DiscreteFuzzySet, FunctionBasedFuzzySet


class ConstantFunction:
    """Membership function returning the same degree for every input."""

    def __init__(self, degree: float):
        self.degree = degree

    def __call__(self, x) -> float:
        return self.degree

    def alpha_cut(self, alpha: float):
        return "everything" if alpha <= self.degree else "nothing"


@pytest.fixture(autouse=True)
def default_configuration():
    """Every test starts (and ends) with the default configuration."""
    configure_parameters.reset_to_defaults()
    yield configure_parameters
    configure_parameters.reset_to_defaults()

@pytest.fixture
def abc_set() -> DiscreteFuzzySet:
    """{a: 0.2, b: 0.5, c: 0.3}, in that insertion order."""
    return DiscreteFuzzySet(label="abc", elements={"a": 0.2, "b": 0.5, "c": 0.3})

@pytest.fixture
def stepped_set() -> DiscreteFuzzySet:
    """A set with repeated degrees and a full member."""
    return DiscreteFuzzySet(label="stepped", elements=[("w", 0.5), ("x", 1.0), ("y", 0.25), ("z", 0.5)])

@pytest.fixture
def rgb_image() -> np.ndarray:
    """A 2x2 RGB image: red, green / blue, white."""
    return np.array([
        [[255, 0, 0], [0, 255, 0]],
        [[0, 0, 255], [255, 255, 255]],
    ], dtype=np.uint8)

@pytest.fixture
def grey_ramp() -> np.ndarray:
    """A 4x5 single band image with values 0..19 in row-major order."""
    return np.arange(20, dtype=np.uint8).reshape(4, 5)

@pytest.fixture
def constant_set():
    """Factory of function-based fuzzy sets with a constant degree."""
    def make(degree: float, label: str = "constant") -> FunctionBasedFuzzySet:
        return FunctionBasedFuzzySet(label, ConstantFunction(degree))
    return make
