"""
===================================================================
Tests for the Resemblance Module
===================================================================
"""

import pytest

from fuzzyImagePy.config import ConfigurationContextManager
from fuzzyImagePy.errors import PreconditionError
from fuzzyImagePy.fuzzy_set import FunctionBasedFuzzySet
from fuzzyImagePy.membership import TriangularFunction
from fuzzyImagePy.operators import Aggregation, TNorm
from fuzzyImagePy.resemblance import (
    FuzzySetResemblance, ResemblanceCollection, double_inclusion,
    fuzzy_set_resemblance, inclusion,
)


def same_parity(t, u):
    return 1.0 if t % 2 == u % 2 else 0.0

def closeness(t, u):
    return max(0.0, 1.0 - abs(t - u) / 10.0)

# ==============================================================================
# Tests for ResemblanceCollection
# ==============================================================================

def test_empty_collection_returns_zero():
    assert ResemblanceCollection()(1, 2) == 0.0

def test_collection_uses_min_by_default():
    collection = ResemblanceCollection([same_parity, closeness])
    assert collection.aggregator is TNorm.MIN
    assert collection(2, 4) == pytest.approx(0.8)
    assert collection(2, 3) == 0.0

def test_collection_with_custom_aggregator():
    collection = ResemblanceCollection([same_parity, closeness], aggregator=Aggregation.MEAN)
    assert collection(2, 3) == pytest.approx(0.45)
    collection.set_aggregator(TNorm.PRODUCT)
    assert collection(2, 4) == pytest.approx(0.8)
    with pytest.raises(PreconditionError):
        collection.set_aggregator(None)

def test_collection_add():
    collection = ResemblanceCollection()
    collection.add(closeness)
    assert len(collection) == 1
    assert collection(0, 5) == pytest.approx(0.5)
    with pytest.raises(PreconditionError):
        collection.add(None)

# ==============================================================================
# Tests for inclusion based resemblance
# ==============================================================================

def test_fuzzy_set_resemblance_is_crisp():
    fs = FunctionBasedFuzzySet("a", TriangularFunction(0, 1, 2))
    other = FunctionBasedFuzzySet("b", TriangularFunction(0, 1, 2))
    assert fuzzy_set_resemblance(fs, fs) == 1.0
    assert fuzzy_set_resemblance(fs, other) == 0.0

def test_inclusion_goguen_by_default():
    fs = FunctionBasedFuzzySet("a", TriangularFunction(0, 1, 2))
    assert inclusion(0.8, fs, 0.4, fs) == pytest.approx(0.5)
    assert inclusion(0.2, fs, 0.4, fs) == 1.0
    other = FunctionBasedFuzzySet("b", TriangularFunction(0, 1, 2))
    assert inclusion(0.2, fs, 0.4, other) == 0.0

def test_inclusion_with_configured_implication():
    fs = FunctionBasedFuzzySet("a", TriangularFunction(0, 1, 2))
    with ConfigurationContextManager(DEFAULT_IMPLICATION="lukasiewicz"):
        assert inclusion(0.8, fs, 0.4, fs) == pytest.approx(0.6)
    assert inclusion(0.8, fs, 0.4, fs, implication="lukasiewicz") == pytest.approx(0.6)

def test_double_inclusion_is_symmetric():
    assert double_inclusion(0.8, 0.4) == pytest.approx(0.5)
    assert double_inclusion(0.4, 0.8) == pytest.approx(0.5)
    assert double_inclusion(0.0, 0.0) == 1.0

def test_fuzzy_set_resemblance_over_family():
    low = FunctionBasedFuzzySet("low", TriangularFunction(0, 0, 10))
    high = FunctionBasedFuzzySet("high", TriangularFunction(0, 10, 10))
    resemblance = FuzzySetResemblance([low, high])
    assert resemblance(5, 5) == 1.0
    # low: 0.8 vs 0.6 -> 0.75 ; high: 0.2 vs 0.4 -> 0.5
    assert resemblance(2, 4) == pytest.approx(0.5)
    with pytest.raises(PreconditionError):
        FuzzySetResemblance([])

def test_resemblance_operators_compose():
    low = FunctionBasedFuzzySet("low", TriangularFunction(0, 0, 10))
    collection = ResemblanceCollection([FuzzySetResemblance([low]), closeness])
    assert collection(2, 4) == pytest.approx(0.75)
