__version__ = "0.1.0"

from .config import configure_parameters, ConfigurationContextManager
from .errors import (
    FuzzyImageError, InvalidDegreeError, PreconditionError,
    UnsupportedAlphaCutError, MappingError, MappingCancelled,
)
from .types import Interval
from .fuzzy_set import (
    DiscreteFuzzySet, FunctionBasedFuzzySet, MeasureBasedFuzzySet,
    FuzzySetCollection, GranularFuzzySet,
)
from .level_set import LevelSet
from .operators import Aggregation, TNorm, TConorm, Hedge, register_operator, get_operator
from .cardinality import SigmaCount, EDCardinal
from .membership import (
    TriangularFunction, TrapezoidalFunction, PolynomialFunction1D, PolynomialFunction2D,
    SphericalFunction, CircularFunction, PiecewiseFunction, PolyhedralFunction,
    polynomial_from_preset,
)
from .geometry import ConvexVolume
from .iterators import PixelIterator, TileIterator, CenteredTileIterator, register_iterator
from .mapping import FuzzyMappingOp, PixelFuzzyMappingOp, TiledFuzzyMappingOp, MappingState, map_image
from .fuzzy_image import FuzzyImage
from .color import FuzzyColorSpace
from .resemblance import ResemblanceCollection, FuzzySetResemblance, inclusion
