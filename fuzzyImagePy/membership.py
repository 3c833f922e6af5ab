from __future__ import annotations
import math
from typing import Any, List, Sequence
import numpy as np
from numpy.polynomial import Polynomial
from .config import configure_parameters
from .errors import UnsupportedAlphaCutError
from .types import Interval, Volume, clamp_degree


# ==============================================================================
# 1. SCALAR (1-D) MEMBERSHIP FUNCTIONS
# ==============================================================================

class TriangularFunction:
    """
    Triangular membership function with support [a, c] and kernel {b}.
    When a == b (or b == c) the corresponding side is a step.
    """

    def __init__(self, a: float, b: float, c: float):
        self.set_parameters(a, b, c)

    def set_parameters(self, a: float, b: float, c: float):
        if a > b or b > c:
            raise ValueError("The parameters must satisfy the following condition: a<=b<=c")
        self.a, self.b, self.c = float(a), float(b), float(c)

    def get_parameters(self) -> tuple:
        return (self.a, self.b, self.c)

    def __repr__(self) -> str:
        return f"TriangularFunction({self.a}, {self.b}, {self.c})"

    def __call__(self, x: float) -> float:
        x = float(x)
        f1 = (x - self.a) / (self.b - self.a) if self.a != self.b else (1.0 if x >= self.a else 0.0)
        f2 = (self.c - x) / (self.c - self.b) if self.b != self.c else (1.0 if x <= self.c else 0.0)
        return max(min(f1, f2, 1.0), 0.0)

    def alpha_cut(self, alpha: float) -> Interval:
        return Interval(self.a + alpha * (self.b - self.a), self.c - alpha * (self.c - self.b))


class TrapezoidalFunction:
    """Trapezoidal membership function with support [a, d] and kernel [b, c]."""

    def __init__(self, a: float, b: float, c: float, d: float):
        self.set_parameters(a, b, c, d)

    def set_parameters(self, a: float, b: float, c: float, d: float):
        if a > b or b > c or c > d:
            raise ValueError("The parameters must satisfy the following condition: a<=b<=c<=d")
        self.a, self.b, self.c, self.d = float(a), float(b), float(c), float(d)

    def get_parameters(self) -> tuple:
        return (self.a, self.b, self.c, self.d)

    def __repr__(self) -> str:
        return f"TrapezoidalFunction({self.a}, {self.b}, {self.c}, {self.d})"

    def __call__(self, x: float) -> float:
        x = float(x)
        f1 = (x - self.a) / (self.b - self.a) if self.b != self.a else (1.0 if x >= self.a else 0.0)
        f2 = (self.d - x) / (self.d - self.c) if self.d != self.c else (1.0 if x <= self.c else 0.0)
        return max(min(f1, 1.0, f2), 0.0)

    def alpha_cut(self, alpha: float) -> Interval:
        return Interval(self.a + alpha * (self.b - self.a), self.d - alpha * (self.d - self.c))


class PolynomialFunction1D:
    """
    Polynomial membership function fitted on [alpha, beta].

    Inside the interval the degree is the polynomial (clipped to [0, 1]);
    outside it the function saturates to 1 or 0 depending on whether the
    polynomial decreases or increases over the interval. Coefficients are
    given in ascending order of power.
    """

    def __init__(self, coefficients: Sequence[float], alpha: float, beta: float):
        if alpha >= beta:
            raise ValueError("Invalid values of alpha and beta (they must satisfy the condition alpha<beta).")
        self.set_coefficients(coefficients)
        self.alpha = float(alpha)
        self.beta = float(beta)

    def set_coefficients(self, coefficients: Sequence[float]):
        if coefficients is None or len(coefficients) == 0:
            raise ValueError("Empty coefficient set.")
        self.polynomial = Polynomial([float(c) for c in coefficients])

    @property
    def coefficients(self) -> np.ndarray:
        return self.polynomial.coef

    @property
    def polynomial_degree(self) -> int:
        return len(self.polynomial.coef) - 1

    def __repr__(self) -> str:
        return f"PolynomialFunction1D({list(self.coefficients)}, alpha={self.alpha}, beta={self.beta})"

    def is_decreasing(self) -> bool:
        return self.polynomial(self.alpha) > self.polynomial(self.beta)

    def __call__(self, x: float) -> float:
        x = float(x)
        if x < self.alpha:
            return 1.0 if self.is_decreasing() else 0.0
        if x > self.beta:
            return 0.0 if self.is_decreasing() else 1.0
        return clamp_degree(self.polynomial(x))

    def alpha_cut(self, alpha: float) -> Interval:
        """
        The half-line where the degree is >= alpha, assuming the polynomial is
        monotone on [self.alpha, self.beta].
        """
        decreasing = self.is_decreasing()
        crossings = [
            r.real for r in (self.polynomial - alpha).roots()
            if abs(r.imag) <= configure_parameters.FLOAT_TOLERANCE and self.alpha <= r.real <= self.beta
        ]
        if crossings:
            edge = min(crossings) if decreasing else max(crossings)
        elif (self(self.alpha) >= alpha) == decreasing:
            # The whole fitted interval is above (decreasing) or below (increasing) alpha
            edge = self.beta
        else:
            edge = self.alpha
        return Interval(-math.inf, edge) if decreasing else Interval(edge, math.inf)


# ==============================================================================
# 2. MULTIDIMENSIONAL MEMBERSHIP FUNCTIONS
# ==============================================================================

class SphericalFunction:
    """
    Radial membership function around a centre point: degree 1 up to radius
    `a` (kernel), decreasing linearly to 0 at radius `b` (support). With
    a == b the function is a step at radius b.
    """

    def __init__(self, center: Sequence[float], a: float, b: float):
        self.set_parameters(center, a, b)

    def set_parameters(self, center: Sequence[float], a: float, b: float):
        if a > b:
            raise ValueError("The parameter 'a' must be smaller or equal than 'b'")
        self.center = np.asarray(center, dtype=float)
        self.a = float(a)
        self.b = float(b)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(center={tuple(self.center)}, a={self.a}, b={self.b})"

    def __call__(self, point: Sequence[float]) -> float:
        d = float(np.linalg.norm(np.asarray(point, dtype=float) - self.center))
        f = (self.b - d) / (self.b - self.a) if self.a != self.b else (1.0 if d <= self.b else 0.0)
        return max(min(1.0, f), 0.0)

    def alpha_cut(self, alpha: float) -> Interval:
        """The interval of distances to the centre whose degree is >= alpha."""
        if self.a == self.b:
            return Interval(0.0, self.b)
        return Interval(0.0, self.b - alpha * (self.b - self.a))


class CircularFunction(SphericalFunction):
    """Spherical membership function restricted to 2-D points."""

    def set_parameters(self, center: Sequence[float], a: float, b: float):
        if len(center) != 2:
            raise ValueError("A circular function needs a 2-D centre.")
        super().set_parameters(center, a, b)


class PolynomialFunction2D:
    """
    Bivariate polynomial membership function clipped to [0, 1].

    For a polynomial of degree n the coefficients are ordered by total power
    i = 0..n and, within each power, by j = 0..i for the term x^j * y^(i-j);
    hence (n+1)(n+2)/2 coefficients are needed.
    """

    def __init__(self, coefficients: Sequence[float]):
        self.set_coefficients(coefficients)

    def set_coefficients(self, coefficients: Sequence[float]):
        if coefficients is None or len(coefficients) == 0:
            raise ValueError("Empty coefficient set.")
        n = 0
        while (n + 1) * (n + 2) // 2 < len(coefficients):
            n += 1
        if (n + 1) * (n + 2) // 2 != len(coefficients):
            raise ValueError("Invalid number of coefficients. A polynomial of degree n needs (n+1)(n+2)/2 coefficients.")
        self.polynomial_degree = n
        self.coefficients = np.asarray(coefficients, dtype=float)

    def __repr__(self) -> str:
        return f"PolynomialFunction2D(degree={self.polynomial_degree})"

    def __call__(self, point: Sequence[float]) -> float:
        x, y = float(point[0]), float(point[1])
        result = 0.0
        k = 0
        for i in range(self.polynomial_degree + 1):
            for j in range(i + 1):
                result += self.coefficients[k] * x ** j * y ** (i - j)
                k += 1
        return clamp_degree(result)

    def alpha_cut(self, alpha: float) -> Any:
        raise UnsupportedAlphaCutError("Alpha-cuts of bivariate polynomial functions are not supported.")


class PiecewiseFunction:
    """Membership function defined as the maximum of several functions."""

    def __init__(self, functions: Sequence[Any]):
        if not functions:
            raise ValueError("A piecewise function needs at least one part.")
        self.functions: List[Any] = list(functions)

    def __repr__(self) -> str:
        return f"PiecewiseFunction[{', '.join(repr(f) for f in self.functions)}]"

    def __call__(self, x: Any) -> float:
        return max(f(x) for f in self.functions)

    def alpha_cut(self, alpha: float) -> List[Any]:
        """The alpha-cut of every part; their union is the cut of the whole."""
        return [f.alpha_cut(alpha) for f in self.functions]


class PolyhedralFunction:
    """
    Membership function described by three nested convex volumes around a
    centroid: the kernel (degree 1), the 0.5-cut and the support (degree > 0).

    A point is located on the ray that goes from the centroid through it; with
    a, b and c the distances from the centroid to the kernel, 0.5-cut and
    support boundaries along that ray and d the distance to the point, the
    degree decreases linearly from 1 at a to 0.5 at b and from 0.5 at b to 0
    at c. The kernel may be None, meaning the kernel is the centroid itself.
    """

    def __init__(self, centroid: Sequence[float], kernel: Volume | None, alpha_cut_05: Volume, support: Volume):
        if alpha_cut_05 is None or support is None:
            raise ValueError("A polyhedral function needs a 0.5-cut and a support volume.")
        self.centroid = np.asarray(centroid, dtype=float)
        self.kernel_volume = kernel
        self.alpha_cut_05 = alpha_cut_05
        self.support_volume = support

    @property
    def volumes(self) -> List[Volume | None]:
        return [self.kernel_volume, self.alpha_cut_05, self.support_volume]

    def __repr__(self) -> str:
        return f"PolyhedralFunction(centroid={tuple(self.centroid)})"

    def __call__(self, point: Sequence[float]) -> float:
        point = np.asarray(point, dtype=float)
        support = self.support_volume
        on_face = getattr(support, "is_on_boundary", lambda p: False)
        if not support.contains(point) or on_face(point):
            return 0.0
        if self.kernel_volume is not None and self.kernel_volume.contains(point):
            return 1.0

        d = float(np.linalg.norm(point - self.centroid))
        if d == 0.0:
            return 1.0
        a = self.kernel_volume.distance_along(self.centroid, point) if self.kernel_volume is not None else 0.0
        b = self.alpha_cut_05.distance_along(self.centroid, point)
        c = support.distance_along(self.centroid, point)
        a = a or 0.0
        if b is None or c is None:
            return 0.0

        if d <= a:
            return 1.0
        if d <= b:
            return 1.0 if b == a else clamp_degree(0.5 + 0.5 * (b - d) / (b - a))
        if d <= c:
            return 0.5 if c == b else clamp_degree(0.5 * (c - d) / (c - b))
        return 0.0

    def alpha_cut(self, alpha: float) -> Volume:
        """The stored volume for alpha 1.0, 0.5 or the support; other levels are not described."""
        if alpha >= 1.0 and self.kernel_volume is not None:
            return self.kernel_volume
        if alpha == 0.5:
            return self.alpha_cut_05
        if 0.0 < alpha <= configure_parameters.SUPPORT_EPSILON:
            return self.support_volume
        raise UnsupportedAlphaCutError(f"Polyhedral function has no volume for alpha={alpha}.")


# ==============================================================================
# 3. PRESETS
# ==============================================================================

def polynomial_from_preset(name: str) -> PolynomialFunction1D:
    """Builds a PolynomialFunction1D from a preset registered in the configuration."""
    preset = configure_parameters.POLYNOMIAL_PRESETS.get(name)
    if preset is None:
        raise ValueError(f"Unknown polynomial preset: '{name}'. Available presets: {list(configure_parameters.POLYNOMIAL_PRESETS.keys())}")
    coefficients, alpha, beta = preset
    return PolynomialFunction1D(coefficients, alpha, beta)
