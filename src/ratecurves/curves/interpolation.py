"""
Interpolation methods for curve knots.

Provides:
- LinearInterpolator: Piecewise linear (zero rates or log discount factors)
- CubicSplineInterpolator: Natural cubic spline (zero rates or log discount factors)

Interpolators only know x/y knots. Which domain the y values live in
(zero rate, log DF) and how the curve extrapolates are decided by the
curve methods that own them, so outside the knot range an interpolator
simply returns the boundary value.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> "Interpolator":
        """
        Fit the interpolator to data points.

        Args:
            times: Array of year fractions
            values: Array of knot values

        Returns:
            self, for chaining
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)

        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 2:
            raise ValueError("Need at least 2 points for interpolation")
        if not (np.all(np.isfinite(times)) and np.all(np.isfinite(values))):
            raise ValueError("Knots must be finite")

        idx = np.argsort(times, kind="stable")
        self.times = times[idx]
        self.values = values[idx]
        if np.any(np.diff(self.times) <= 0):
            raise ValueError("Knot times must be distinct")

        self._build()
        return self

    def _build(self) -> None:
        """Hook for precomputing coefficients after knots are set."""

    @abstractmethod
    def _evaluate(self, t: float, idx: int) -> float:
        """Evaluate inside knot interval ``idx``."""

    def interpolate(self, t: float) -> float:
        """
        Interpolate at a single point.

        Args:
            t: Year fraction

        Returns:
            Interpolated value, boundary value outside the knot range
        """
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

        if t <= self.times[0]:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])

        idx = np.searchsorted(self.times, t, side='right') - 1
        idx = int(max(0, min(idx, len(self.times) - 2)))
        return self._evaluate(t, idx)

    def __call__(self, t: float) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(t)


class LinearInterpolator(Interpolator):
    """Linear interpolation between knot points."""

    def _evaluate(self, t: float, idx: int) -> float:
        t0, t1 = self.times[idx], self.times[idx + 1]
        v0, v1 = self.values[idx], self.values[idx + 1]

        w = (t - t0) / (t1 - t0)
        return float(v0 + w * (v1 - v0))


class CubicSplineInterpolator(Interpolator):
    """
    Natural cubic spline interpolation.

    Second derivative is zero at both boundaries. With two knots the
    spline degenerates to a straight line.
    """

    def __init__(self):
        super().__init__()
        self.coefficients: Optional[np.ndarray] = None  # Shape: (n-1, 4) for [a, b, c, d]

    def _build(self) -> None:
        """
        Solve the tridiagonal system for second derivatives,
        then compute polynomial coefficients for each interval.
        """
        n = len(self.times)
        h = np.diff(self.times)

        # Natural spline: M[0] = M[n-1] = 0
        A = np.zeros((n, n))
        b = np.zeros(n)
        A[0, 0] = 1.0
        A[n-1, n-1] = 1.0

        for i in range(1, n-1):
            A[i, i-1] = h[i-1]
            A[i, i] = 2 * (h[i-1] + h[i])
            A[i, i+1] = h[i]
            b[i] = 6 * ((self.values[i+1] - self.values[i]) / h[i] -
                       (self.values[i] - self.values[i-1]) / h[i-1])

        M = np.linalg.solve(A, b)

        # S_i(x) = a_i + b_i*(x-x_i) + c_i*(x-x_i)^2 + d_i*(x-x_i)^3
        self.coefficients = np.zeros((n-1, 4))
        for i in range(n-1):
            self.coefficients[i, 0] = self.values[i]
            self.coefficients[i, 1] = (self.values[i+1] - self.values[i]) / h[i] - h[i] * (M[i+1] + 2*M[i]) / 6
            self.coefficients[i, 2] = M[i] / 2
            self.coefficients[i, 3] = (M[i+1] - M[i]) / (6 * h[i])

    def _evaluate(self, t: float, idx: int) -> float:
        dx = t - self.times[idx]
        a, b, c, d = self.coefficients[idx]
        return float(a + b*dx + c*dx**2 + d*dx**3)

    def second_derivative(self, t: float) -> float:
        """Second derivative of the spline (0 outside the knots)."""
        if self.times is None or self.coefficients is None:
            raise RuntimeError("Interpolator not fitted")

        if t <= self.times[0] or t >= self.times[-1]:
            return 0.0

        idx = np.searchsorted(self.times, t, side='right') - 1
        idx = int(max(0, min(idx, len(self.coefficients) - 1)))

        dx = t - self.times[idx]
        _, _, c, d = self.coefficients[idx]
        return float(2*c + 6*d*dx)


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "cubic_spline"

    Returns:
        Interpolator instance
    """
    method = method.lower().replace("-", "_").replace(" ", "_")

    if method in ("linear", "lin"):
        return LinearInterpolator()
    elif method in ("cubic_spline", "cubic", "spline"):
        return CubicSplineInterpolator()
    else:
        raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
]
