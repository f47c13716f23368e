"""
Curve methods.

Six interchangeable curve-shape algorithms share one contract:

    strategy.fit(curve_input, convention) -> ShapeFunction

Rate-domain methods (work on zero rates):
- LINEAR: linear zero rates
- CUBIC_SPLINE: natural cubic spline through zero rates
- NELSON_SIEGEL: four-parameter parametric fit

Discount-factor methods (work on log discount factors):
- BLOOMBERG: DFs seeded with annual compounding, log-linear
- QUANTLIB_LOG_LINEAR: DFs seeded with the currency convention, log-linear
- QUANTLIB_LOG_CUBIC: same seeding, natural cubic spline on log DF

All methods return DF(0) = 1 and extrapolate with a flat zero rate
outside [first knot, last knot].
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Union

import numpy as np
from scipy.optimize import brentq

from ..conventions import BasisConvention, CompoundingConvention, discount_factor_from_rate
from ..dates import coupon_times
from ..exceptions import InvalidObservationError, UnknownMethodError
from .assembler import CurveInput
from .interpolation import CubicSplineInterpolator, Interpolator, LinearInterpolator
from .nelson_siegel import DEFAULT_MAX_ITERATIONS, NelsonSiegel
from .observations import InstrumentSource

logger = logging.getLogger(__name__)


class CurveMethod(Enum):
    """Closed set of supported curve methods."""
    LINEAR = "linear"
    CUBIC_SPLINE = "cubic_spline"
    NELSON_SIEGEL = "nelson_siegel"
    BLOOMBERG = "bloomberg"
    QUANTLIB_LOG_LINEAR = "quantlib_log_linear"
    QUANTLIB_LOG_CUBIC = "quantlib_log_cubic"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_string(cls, s: Union[str, "CurveMethod"]) -> "CurveMethod":
        """
        Parse a method identifier.

        Accepts the enum values, member names and display names,
        ignoring case, spaces, hyphens and slashes.

        Raises:
            UnknownMethodError: If the identifier is not supported
        """
        if isinstance(s, cls):
            return s
        if not isinstance(s, str):
            raise UnknownMethodError(f"Unknown curve method: {s!r}")

        key = s.strip().lower().replace("-", "_").replace(" ", "_").replace("/", "_")
        for method in cls:
            if key in (method.value, method.name.lower()):
                return method
        aliases = {
            "simple": cls.LINEAR,
            "cubic": cls.CUBIC_SPLINE,
            "spline": cls.CUBIC_SPLINE,
            "ns": cls.NELSON_SIEGEL,
            "ql_log_linear": cls.QUANTLIB_LOG_LINEAR,
            "ql_log_cubic": cls.QUANTLIB_LOG_CUBIC,
        }
        if key in aliases:
            return aliases[key]
        raise UnknownMethodError(f"Unknown curve method: {s}")


_DISPLAY_NAMES = {
    CurveMethod.LINEAR: "Simple/Linear",
    CurveMethod.CUBIC_SPLINE: "Cubic Spline",
    CurveMethod.NELSON_SIEGEL: "Nelson-Siegel",
    CurveMethod.BLOOMBERG: "Bloomberg",
    CurveMethod.QUANTLIB_LOG_LINEAR: "QL Log-Linear",
    CurveMethod.QUANTLIB_LOG_CUBIC: "QL Log-Cubic",
}


@dataclass(frozen=True)
class CurveKnots:
    """Knots implied by a curve input: times with their discount factors."""
    times: np.ndarray
    discount_factors: np.ndarray

    def zero_rates(self, convention: BasisConvention) -> np.ndarray:
        return np.array([
            convention.zero_rate(df, t) for t, df in zip(self.times, self.discount_factors)
        ])


def _log_linear_df(t: float, known: List[Tuple[float, float]]) -> float:
    """
    Log-linear discount factor between solved knots.

    ``known`` starts at (0, 1) and is ascending; t must not exceed the last knot.
    """
    for (t0, df0), (t1, df1) in zip(known, known[1:]):
        if t0 <= t <= t1:
            w = (t - t0) / (t1 - t0)
            return float(np.exp((1 - w) * np.log(df0) + w * np.log(df1)))
    return known[-1][1]


def _strip_par_swap(
    maturity: float,
    par_rate: float,
    frequency: int,
    known: List[Tuple[float, float]]
) -> float:
    """
    Solve DF(T) so a par swap prices at par.

    Par condition: c * sum(tau_i * DF(t_i)) + DF(T) = 1. Coupons before
    the last solved knot use the known curve; coupons between the last
    knot and T are log-linear towards the unknown DF(T).
    """
    times = coupon_times(maturity, frequency)
    accruals = np.diff([0.0] + times)

    if len(times) == 1:
        return 1.0 / (1.0 + par_rate * maturity)

    last_t, last_df = known[-1]

    def par_error(df_t: float) -> float:
        pv = 0.0
        for t, tau in zip(times, accruals):
            if t >= maturity:
                df = df_t
            elif t <= last_t:
                df = _log_linear_df(t, known)
            else:
                w = (t - last_t) / (maturity - last_t)
                df = float(np.exp((1 - w) * np.log(last_df) + w * np.log(df_t)))
            pv += par_rate * tau * df
        return pv + df_t - 1.0

    lo, hi = 1e-8, 2.0
    if par_error(lo) * par_error(hi) > 0:
        raise InvalidObservationError(
            f"Par swap at {maturity}Y with rate {par_rate:.6f} has no discount factor solution"
        )
    return float(brentq(par_error, lo, hi, xtol=1e-15, rtol=1e-14, maxiter=200))


def derive_knots(
    curve_input: CurveInput,
    convention: BasisConvention,
    seed_compounding: CompoundingConvention,
    strip_swap_rates: bool = True
) -> CurveKnots:
    """
    Turn observations into discount-factor knots.

    Futures and bond rates are read as zero rates under
    ``seed_compounding``. Swap par rates are stripped sequentially with
    coupons at the convention's frequency, unless ``strip_swap_rates``
    is False, in which case they are read like the others.

    Raises:
        InvalidObservationError: If a swap cannot be stripped
    """
    known: List[Tuple[float, float]] = [(0.0, 1.0)]

    for obs in curve_input:
        if strip_swap_rates and obs.source is InstrumentSource.SWAP:
            df = _strip_par_swap(obs.tenor, obs.rate, convention.periods_per_year, known)
            logger.debug("Stripped %sY par swap at %.6f to DF %.10f", obs.tenor, obs.rate, df)
        else:
            df = discount_factor_from_rate(obs.rate, obs.tenor, seed_compounding)

        if not np.isfinite(df) or df <= 0:
            raise InvalidObservationError(
                f"Non-positive discount factor {df} implied at {obs.tenor}Y"
            )
        known.append((obs.tenor, df))

    times = np.array([t for t, _ in known[1:]], dtype=np.float64)
    dfs = np.array([df for _, df in known[1:]], dtype=np.float64)
    return CurveKnots(times=times, discount_factors=dfs)


class ShapeFunction(ABC):
    """
    Continuous discount curve produced by a curve method.

    Subclasses define the zero rate inside [t_min, t_max]; outside that
    range the zero rate is held flat at the nearest boundary.
    """

    def __init__(self, t_min: float, t_max: float, convention: BasisConvention):
        self.t_min = t_min
        self.t_max = t_max
        self.convention = convention

    @abstractmethod
    def _inside_discount_factor(self, t: float) -> float:
        """Discount factor for t in [t_min, t_max]."""

    def discount_factor(self, t: float) -> float:
        """Discount factor P(0,t); exactly 1 at t <= 0."""
        if t <= 0:
            return 1.0
        if t < self.t_min or t > self.t_max:
            edge = self.t_min if t < self.t_min else self.t_max
            flat = self.convention.zero_rate(self._inside_discount_factor(edge), edge)
            return self.convention.discount_factor(flat, t)
        return self._inside_discount_factor(t)

    def __call__(self, t: float) -> float:
        return self.discount_factor(t)

    def zero_rate(self, t: float) -> float:
        """Decimal zero rate under the convention; the first-knot rate at t <= 0."""
        if t <= 0:
            t = self.t_min
        return self.convention.zero_rate(self.discount_factor(t), t)

    def forward_rate(self, t1: float, t2: float) -> float:
        """Simple forward rate between t1 and t2."""
        if t2 <= t1:
            raise ValueError("t2 must be greater than t1")
        return (self.discount_factor(t1) / self.discount_factor(t2) - 1.0) / (t2 - t1)


class ZeroRateShape(ShapeFunction):
    """Shape driven by an interpolator over zero rates."""

    def __init__(self, interpolator: Interpolator, convention: BasisConvention):
        super().__init__(float(interpolator.times[0]), float(interpolator.times[-1]), convention)
        self.interpolator = interpolator

    def _inside_discount_factor(self, t: float) -> float:
        return self.convention.discount_factor(self.interpolator(t), t)


class LogDiscountShape(ShapeFunction):
    """Shape driven by an interpolator over log discount factors."""

    def __init__(self, interpolator: Interpolator, convention: BasisConvention):
        super().__init__(float(interpolator.times[0]), float(interpolator.times[-1]), convention)
        self.interpolator = interpolator

    def _inside_discount_factor(self, t: float) -> float:
        return float(np.exp(self.interpolator(t)))


class NelsonSiegelShape(ShapeFunction):
    """Shape given by a fitted Nelson-Siegel model, clamped to the knot range."""

    def __init__(self, model: NelsonSiegel, t_min: float, t_max: float, convention: BasisConvention):
        super().__init__(t_min, t_max, convention)
        self.model = model

    def _inside_discount_factor(self, t: float) -> float:
        return self.convention.discount_factor(self.model.zero_rate(t), t)


class CurveStrategy(ABC):
    """A curve method: fit knots into a ShapeFunction."""

    method: CurveMethod

    def __init__(self, strip_swap_rates: bool = True, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        self.strip_swap_rates = strip_swap_rates
        self.max_iterations = max_iterations

    def seed_compounding(self, convention: BasisConvention) -> CompoundingConvention:
        """Compounding used to read non-swap observation rates."""
        return convention.compounding

    def knots(self, curve_input: CurveInput, convention: BasisConvention) -> CurveKnots:
        return derive_knots(
            curve_input, convention, self.seed_compounding(convention), self.strip_swap_rates
        )

    @abstractmethod
    def fit(self, curve_input: CurveInput, convention: BasisConvention) -> ShapeFunction:
        """Build the continuous curve for an input."""


class LinearStrategy(CurveStrategy):
    method = CurveMethod.LINEAR

    def fit(self, curve_input, convention):
        knots = self.knots(curve_input, convention)
        interp = LinearInterpolator().fit(knots.times, knots.zero_rates(convention))
        return ZeroRateShape(interp, convention)


class CubicSplineStrategy(CurveStrategy):
    method = CurveMethod.CUBIC_SPLINE

    def fit(self, curve_input, convention):
        knots = self.knots(curve_input, convention)
        interp = CubicSplineInterpolator().fit(knots.times, knots.zero_rates(convention))
        return ZeroRateShape(interp, convention)


class NelsonSiegelStrategy(CurveStrategy):
    method = CurveMethod.NELSON_SIEGEL

    def fit(self, curve_input, convention):
        knots = self.knots(curve_input, convention)
        model = NelsonSiegel(max_iterations=self.max_iterations)
        model.fit(knots.times, knots.zero_rates(convention))
        return NelsonSiegelShape(model, float(knots.times[0]), float(knots.times[-1]), convention)


class BloombergStrategy(CurveStrategy):
    """Log-linear on discount factors seeded as 1 / (1 + r)^t."""
    method = CurveMethod.BLOOMBERG

    def seed_compounding(self, convention):
        return CompoundingConvention.ANNUAL

    def fit(self, curve_input, convention):
        knots = self.knots(curve_input, convention)
        interp = LinearInterpolator().fit(knots.times, np.log(knots.discount_factors))
        return LogDiscountShape(interp, convention)


class QuantLibLogLinearStrategy(CurveStrategy):
    method = CurveMethod.QUANTLIB_LOG_LINEAR

    def fit(self, curve_input, convention):
        knots = self.knots(curve_input, convention)
        interp = LinearInterpolator().fit(knots.times, np.log(knots.discount_factors))
        return LogDiscountShape(interp, convention)


class QuantLibLogCubicStrategy(CurveStrategy):
    """Natural cubic spline on log DF; discount factors may overshoot locally."""
    method = CurveMethod.QUANTLIB_LOG_CUBIC

    def fit(self, curve_input, convention):
        knots = self.knots(curve_input, convention)
        interp = CubicSplineInterpolator().fit(knots.times, np.log(knots.discount_factors))
        return LogDiscountShape(interp, convention)


_STRATEGY_TYPES = {
    CurveMethod.LINEAR: LinearStrategy,
    CurveMethod.CUBIC_SPLINE: CubicSplineStrategy,
    CurveMethod.NELSON_SIEGEL: NelsonSiegelStrategy,
    CurveMethod.BLOOMBERG: BloombergStrategy,
    CurveMethod.QUANTLIB_LOG_LINEAR: QuantLibLogLinearStrategy,
    CurveMethod.QUANTLIB_LOG_CUBIC: QuantLibLogCubicStrategy,
}

STRATEGIES: Dict[CurveMethod, CurveStrategy] = {
    method: cls() for method, cls in _STRATEGY_TYPES.items()
}


def get_strategy(
    method: Union[str, CurveMethod],
    strip_swap_rates: bool = True,
    max_iterations: int = DEFAULT_MAX_ITERATIONS
) -> CurveStrategy:
    """
    Look up the strategy for a method.

    Default settings return the shared stateless instance.

    Raises:
        UnknownMethodError: If the method is not supported
    """
    method = CurveMethod.from_string(method)
    if strip_swap_rates and max_iterations == DEFAULT_MAX_ITERATIONS:
        return STRATEGIES[method]
    return _STRATEGY_TYPES[method](strip_swap_rates=strip_swap_rates, max_iterations=max_iterations)


__all__ = [
    "CurveMethod",
    "CurveKnots",
    "derive_knots",
    "ShapeFunction",
    "CurveStrategy",
    "LinearStrategy",
    "CubicSplineStrategy",
    "NelsonSiegelStrategy",
    "BloombergStrategy",
    "QuantLibLogLinearStrategy",
    "QuantLibLogCubicStrategy",
    "STRATEGIES",
    "get_strategy",
]
