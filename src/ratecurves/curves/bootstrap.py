"""
Curve bootstrapping engine.

Builds a discrete zero-coupon term structure for one currency:
1. Validate the assembled input (at least 2 knots)
2. Resolve the currency's basis convention
3. Fit the selected curve method into a continuous discount function
4. Sample it on the reporting grid (input tenors + whole years)
5. Return an immutable CurveResult

The engine is a pure, synchronous computation. Failures are data or
configuration problems and are raised immediately, never retried.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..conventions import BasisConvention, get_basis_convention
from ..exceptions import InsufficientDataError
from .assembler import DEFAULT_TENOR_TOLERANCE, CurveInput, assemble
from .methods import CurveMethod, ShapeFunction, get_strategy
from .nelson_siegel import DEFAULT_MAX_ITERATIONS
from .observations import RateObservation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootstrapConfig:
    """
    Configuration for curve construction.

    Attributes:
        tenor_tolerance: Window (years) within which tenors collide
        strip_swap_rates: Strip swap par rates into zero rates
        include_whole_years: Add whole-year tenors to the reporting grid
        max_iterations: Nelson-Siegel optimizer budget
        grid_decimals: Rounding applied to grid tenors before deduplication
    """
    tenor_tolerance: float = DEFAULT_TENOR_TOLERANCE
    strip_swap_rates: bool = True
    include_whole_years: bool = True
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    grid_decimals: int = 6


@dataclass(frozen=True)
class DiscountPoint:
    """
    A sampled point of the discount curve.

    Attributes:
        tenor: Years from today
        discount_factor: P(0, tenor)
        zero_rate: Zero rate in percent under the currency convention
    """
    tenor: float
    discount_factor: float
    zero_rate: float


@dataclass(frozen=True)
class CurveResult:
    """Immutable output of one bootstrap call."""
    currency: str
    method: CurveMethod
    discount_factors: Tuple[DiscountPoint, ...]
    convention: BasisConvention = field(default_factory=BasisConvention)
    input_count: int = 0

    @property
    def tenors(self) -> List[float]:
        return [p.tenor for p in self.discount_factors]

    @property
    def max_tenor(self) -> float:
        return self.discount_factors[-1].tenor if self.discount_factors else 0.0

    def point_at(self, tenor: float, tol: float = 1e-9) -> Optional[DiscountPoint]:
        """Grid point at a tenor, if sampled."""
        for p in self.discount_factors:
            if abs(p.tenor - tenor) <= tol:
                return p
        return None

    def zero_rate_at(self, tenor: float) -> Optional[float]:
        """
        Zero rate (percent) at a grid tenor.

        Falls back to the middle grid point when the tenor was not
        sampled, as the summary tiles do for the 10Y rate.
        """
        point = self.point_at(tenor)
        if point is None and self.discount_factors:
            point = self.discount_factors[len(self.discount_factors) // 2]
        return point.zero_rate if point else None

    def to_frame(self) -> pd.DataFrame:
        """Discount points as a DataFrame (tenor, discountFactor, zeroRate)."""
        return pd.DataFrame(
            [(p.tenor, p.discount_factor, p.zero_rate) for p in self.discount_factors],
            columns=["tenor", "discountFactor", "zeroRate"],
        )

    def __repr__(self) -> str:
        return (f"CurveResult(currency={self.currency}, method={self.method.value}, "
                f"points={len(self.discount_factors)}, max_tenor={self.max_tenor})")


def reporting_grid(
    curve_input: CurveInput,
    include_whole_years: bool = True,
    decimals: int = 6
) -> List[float]:
    """
    Tenors at which a curve is reported.

    Every input tenor plus whole years 1..floor(max tenor), rounded to
    ``decimals`` places, deduplicated and sorted ascending.
    """
    tenors = {round(t, decimals) for t in curve_input.tenors.tolist()}
    if include_whole_years:
        last_year = int(math.floor(round(curve_input.max_tenor, decimals)))
        tenors.update(float(y) for y in range(1, last_year + 1))
    return sorted(t for t in tenors if t > 0)


class CurveBootstrapper:
    """
    Bootstrap discount curves from assembled inputs.

    Holds only configuration; safe to share across threads and to call
    repeatedly for different currencies and methods.
    """

    def __init__(self, config: Optional[BootstrapConfig] = None):
        self.config = config or BootstrapConfig()

    def fit(
        self,
        curve_input: CurveInput,
        method: Union[str, CurveMethod],
        currency: str
    ) -> ShapeFunction:
        """
        Fit the continuous discount function for an input.

        Raises:
            InsufficientDataError: If the input has fewer than 2 points
            UnknownMethodError: If the method is not supported
            FitDivergenceError: If Nelson-Siegel does not converge
        """
        if len(curve_input) < 2:
            raise InsufficientDataError(
                f"Need at least 2 observations to build a curve, got {len(curve_input)}"
            )

        convention = get_basis_convention(currency)
        strategy = get_strategy(
            method,
            strip_swap_rates=self.config.strip_swap_rates,
            max_iterations=self.config.max_iterations,
        )
        return strategy.fit(curve_input, convention)

    def bootstrap(
        self,
        curve_input: CurveInput,
        method: Union[str, CurveMethod],
        currency: str
    ) -> CurveResult:
        """
        Build and sample the curve.

        Args:
            curve_input: Assembled, ascending observations
            method: Curve method (enum or identifier)
            currency: ISO currency code

        Returns:
            CurveResult sampled on the reporting grid
        """
        method = CurveMethod.from_string(method)
        shape = self.fit(curve_input, method, currency)
        convention = shape.convention

        points = []
        for tenor in reporting_grid(
            curve_input, self.config.include_whole_years, self.config.grid_decimals
        ):
            df = shape.discount_factor(tenor)
            points.append(DiscountPoint(
                tenor=tenor,
                discount_factor=df,
                zero_rate=convention.zero_rate(df, tenor) * 100.0,
            ))

        logger.info(
            "Built %s curve with %s: %d inputs, %d points, max tenor %.2fY",
            currency, method.value, len(curve_input), len(points), curve_input.max_tenor
        )

        return CurveResult(
            currency=currency,
            method=method,
            discount_factors=tuple(points),
            convention=convention,
            input_count=len(curve_input),
        )

    def bootstrap_points(
        self,
        point_sets: Sequence[Sequence[RateObservation]],
        method: Union[str, CurveMethod],
        currency: str
    ) -> Optional[CurveResult]:
        """
        Assemble observation lists and bootstrap them.

        Returns None when fewer than two usable observations exist; other
        errors propagate.
        """
        try:
            curve_input = assemble(point_sets, self.config.tenor_tolerance)
        except InsufficientDataError as e:
            logger.info("No %s curve: %s", currency, e)
            return None
        return self.bootstrap(curve_input, method, currency)


def bootstrap(
    swap_points: Sequence[RateObservation],
    futures_points: Sequence[RateObservation],
    method: Union[str, CurveMethod],
    currency: str,
    config: Optional[BootstrapConfig] = None
) -> Optional[CurveResult]:
    """
    Build an IRS + futures curve for a currency.

    Args:
        swap_points: Swap observations (priority 1)
        futures_points: Futures observations (priority 2)
        method: Curve method
        currency: ISO currency code
        config: Optional bootstrap configuration

    Returns:
        CurveResult, or None if fewer than two usable observations
    """
    return CurveBootstrapper(config).bootstrap_points(
        [swap_points, futures_points], method, currency
    )


def bootstrap_bonds(
    bond_points: Sequence[RateObservation],
    method: Union[str, CurveMethod],
    currency: str,
    config: Optional[BootstrapConfig] = None
) -> Optional[CurveResult]:
    """Build a government-bond curve for a currency; None if insufficient data."""
    return CurveBootstrapper(config).bootstrap_points([bond_points], method, currency)


__all__ = [
    "BootstrapConfig",
    "DiscountPoint",
    "CurveResult",
    "CurveBootstrapper",
    "reporting_grid",
    "bootstrap",
    "bootstrap_bonds",
]
