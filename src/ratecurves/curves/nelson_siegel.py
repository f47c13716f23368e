"""
Nelson-Siegel (NS) parametric zero-rate model.

The NS model describes the zero curve with four parameters:

    r(t) = β₀ + β₁ * [(1-e^(-t/τ))/(t/τ)]
              + β₂ * [(1-e^(-t/τ))/(t/τ) - e^(-t/τ)]

Parameters:
    β₀: Long-term level (asymptotic rate)
    β₁: Short-term component (slope); r(0) = β₀ + β₁
    β₂: Medium-term hump (curvature)
    τ:  Decay, constrained positive

Fitting is bounded nonlinear least squares on observed zero rates.
This is the only curve method that iterates, so a non-converged or
non-finite fit is reported as FitDivergenceError instead of returning
a curve with NaNs.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import least_squares

from ..exceptions import FitDivergenceError

logger = logging.getLogger(__name__)


TAU_BOUNDS = (0.05, 30.0)
DEFAULT_MAX_ITERATIONS = 2000
BETA_BOUNDS = (-1.0, 1.0)


@dataclass(frozen=True)
class NSParameters:
    """Nelson-Siegel parameters."""
    beta0: float  # Long-term level
    beta1: float  # Short-term component
    beta2: float  # Medium-term hump
    tau: float    # Decay

    @classmethod
    def initial_guess(cls, maturities: np.ndarray, rates: np.ndarray) -> "NSParameters":
        """
        Starting point from the observed curve.

        β₀ = longest rate, β₁ = shortest - longest, β₂ = 0,
        τ = median observed maturity.
        """
        order = np.argsort(maturities)
        short, long_ = rates[order[0]], rates[order[-1]]
        tau = float(np.clip(np.median(maturities), TAU_BOUNDS[0] * 2, TAU_BOUNDS[1] / 2))
        return cls(beta0=float(long_), beta1=float(short - long_), beta2=0.0, tau=tau)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array for optimization."""
        return np.array([self.beta0, self.beta1, self.beta2, self.tau])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "NSParameters":
        """Create from numpy array."""
        return cls(beta0=float(arr[0]), beta1=float(arr[1]), beta2=float(arr[2]), tau=float(arr[3]))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.to_array())))


def ns_zero_rate(t, params: NSParameters):
    """
    Evaluate the NS zero rate at maturity t (scalar or array).

    The t -> 0 limit β₀ + β₁ is used for non-positive maturities.
    """
    t_arr = np.asarray(t, dtype=np.float64)
    safe_t = np.where(t_arr > 0, t_arr, 1.0)

    x = safe_t / params.tau
    exp_x = np.exp(-x)
    factor1 = (1 - exp_x) / x
    factor2 = factor1 - exp_x

    rates = params.beta0 + params.beta1 * factor1 + params.beta2 * factor2
    rates = np.where(t_arr > 0, rates, params.beta0 + params.beta1)

    if np.ndim(t) == 0:
        return float(rates)
    return rates


class NelsonSiegel:
    """
    Nelson-Siegel zero-rate model.

    Attributes:
        params: Fitted parameters (None until fit)
        max_iterations: Function-evaluation budget of the optimizer
    """

    def __init__(self, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        self.max_iterations = max_iterations
        self.params: Optional[NSParameters] = None
        self.residuals: Optional[np.ndarray] = None

    @property
    def is_fitted(self) -> bool:
        return self.params is not None

    def fit(
        self,
        maturities: Sequence[float],
        rates: Sequence[float],
        initial_guess: Optional[NSParameters] = None
    ) -> Tuple[float, np.ndarray]:
        """
        Fit the model to observed zero rates.

        Args:
            maturities: Maturities in years
            rates: Observed zero rates (decimal)
            initial_guess: Starting parameters (default from the data)

        Returns:
            Tuple of (sum of squared residuals, residuals)

        Raises:
            FitDivergenceError: If the optimizer exhausts its budget or
                produces non-finite parameters or rates
        """
        tau = np.asarray(maturities, dtype=np.float64)
        y_obs = np.asarray(rates, dtype=np.float64)

        if len(tau) != len(y_obs):
            raise ValueError("Maturities and rates must have same length")
        if len(tau) < 2:
            raise ValueError("Need at least 2 points to fit Nelson-Siegel model")

        if initial_guess is None:
            initial_guess = NSParameters.initial_guess(tau, y_obs)

        lower = np.array([BETA_BOUNDS[0], BETA_BOUNDS[0], BETA_BOUNDS[0], TAU_BOUNDS[0]])
        upper = np.array([BETA_BOUNDS[1], BETA_BOUNDS[1], BETA_BOUNDS[1], TAU_BOUNDS[1]])
        # least_squares needs a strictly feasible start
        x0 = np.clip(initial_guess.to_array(), lower + 1e-9, upper - 1e-9)

        def residuals(x):
            return ns_zero_rate(tau, NSParameters.from_array(x)) - y_obs

        try:
            result = least_squares(
                residuals,
                x0,
                bounds=(lower, upper),
                method="trf",
                max_nfev=self.max_iterations,
                xtol=1e-12,
                ftol=1e-12,
                gtol=1e-12,
            )
        except (ValueError, np.linalg.LinAlgError) as e:
            raise FitDivergenceError(f"Nelson-Siegel optimizer failed: {e}") from e

        if result.status <= 0:
            raise FitDivergenceError(
                f"Nelson-Siegel fit did not converge within {self.max_iterations} evaluations: {result.message}"
            )

        params = NSParameters.from_array(result.x)
        fitted = ns_zero_rate(tau, params)
        if not params.is_finite() or not np.all(np.isfinite(fitted)):
            raise FitDivergenceError("Nelson-Siegel fit produced non-finite parameters")

        self.params = params
        self.residuals = fitted - y_obs
        sse = float(np.sum(self.residuals ** 2))

        logger.debug(
            "Nelson-Siegel fit: b0=%.6f b1=%.6f b2=%.6f tau=%.4f sse=%.3e nfev=%d",
            params.beta0, params.beta1, params.beta2, params.tau, sse, result.nfev
        )
        return sse, self.residuals

    def zero_rate(self, t: float) -> float:
        """Model zero rate at maturity t."""
        if not self.is_fitted:
            raise RuntimeError("Model not fitted - call fit() first")
        return ns_zero_rate(t, self.params)

    def __repr__(self) -> str:
        if not self.is_fitted:
            return "NelsonSiegel(fitted=False)"
        p = self.params
        return (f"NelsonSiegel(β₀={p.beta0:.4f}, β₁={p.beta1:.4f}, "
                f"β₂={p.beta2:.4f}, τ={p.tau:.2f})")


__all__ = [
    "NelsonSiegel",
    "NSParameters",
    "ns_zero_rate",
    "TAU_BOUNDS",
    "DEFAULT_MAX_ITERATIONS",
]
