from typing import Dict, Tuple, Any


# Coarseness presets fitted offline on the Amadasun and correlation measures.
# Each entry holds (coefficients, alpha, beta) for a PolynomialFunction1D.
AMADASUN_COARSENESS = ((1.8707, -6.4835, 9.4901, -6.6128), 0.1727, 0.5858)
CORRELATION_COARSENESS = ((1.0486, -1.7013, 2.9961, -3.3110), 0.0301, 0.7711)


class Configuration:
    """
    A singleton-like class to hold all configurable parameters for the fuzzyImagePy library.

    Users can modify these attributes directly to customize quantization,
    numerical tolerances and the defaults used by the factories.

    Example:
    >>> from fuzzyImagePy.config import configure_parameters
    >>> configure_parameters.SUPPORT_EPSILON = 1e-6
    >>> configure_parameters.register_polynomial_preset("my_measure", (0.1, 0.9), 0.0, 1.0)
    """

    def __init__(self):
        self.reset_to_defaults()

    def reset_to_defaults(self):
        """Resets all configuration parameters to their original default values."""

        # --- Mapping engine ---

        # Highest grey level a degree of 1.0 is quantized to (1..255)
        self.MAX_LEVEL: int = 255

        # Tile size used by the tiled mapping when none is given
        self.DEFAULT_TILE_SIZE: int = 1

        # --- Fuzzy sets ---

        # Smallest alpha treated as "strictly above zero" when computing supports
        self.SUPPORT_EPSILON: float = 1e-9

        # Small tolerance value for float comparisons
        self.FLOAT_TOLERANCE: float = 1e-9

        # --- Fuzzy colour spaces ---

        # Kernel factor of sphere-based fuzzy colours (0 = point kernels)
        self.DEFAULT_KERNEL_FACTOR: float = 0.0

        # Fuzziness exponent of fuzzy c-means colours
        self.DEFAULT_FCM_M: float = 2.0

        # --- Resemblance ---

        self.DEFAULT_IMPLICATION: str = "goguen"

        # --- Membership function presets ---

        self.POLYNOMIAL_PRESETS: Dict[str, Tuple[Tuple[float, ...], float, float]] = {
            "coarseness_amadasun": AMADASUN_COARSENESS,
            "coarseness_correlation": CORRELATION_COARSENESS,
        }

    def register_polynomial_preset(self, name: str, coefficients, alpha: float, beta: float):
        """Registers a new set of 1-D polynomial membership coefficients."""
        if name in self.POLYNOMIAL_PRESETS:
            print(f"Warning: Overwriting polynomial preset '{name}'")
        self.POLYNOMIAL_PRESETS[name] = (tuple(float(c) for c in coefficients), float(alpha), float(beta))

configure_parameters = Configuration()



class ConfigurationContextManager:
    """
    A context manager to temporarily change configuration parameters.

    Usage:
    >>> with ConfigurationContextManager(MAX_LEVEL=100):
    >>>     # Mapping operations quantize degrees to [0, 100]
    >>>     ...
    >>> # MAX_LEVEL reverts to its original value outside the block
    """
    def __init__(self, **kwargs: Any):
        self.changes = kwargs
        self.original_values = {}

    def __enter__(self):
        for key, value in self.changes.items():
            if not hasattr(configure_parameters, key):
                raise AttributeError(f"Configuration object has no attribute '{key}'")
            self.original_values[key] = getattr(configure_parameters, key)
            setattr(configure_parameters, key, value)
        return configure_parameters

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, value in self.original_values.items():
            setattr(configure_parameters, key, value)
