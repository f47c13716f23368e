"""
Curves package - discount curve construction from market observations.

Provides:
- RateObservation and the instrument normalizer
- CurveInput assembly with tenor-collision resolution
- Six curve methods (linear, cubic spline, Nelson-Siegel, log-DF variants)
- CurveBootstrapper producing immutable CurveResult term structures
"""

from .observations import (
    InstrumentSource,
    RateObservation,
    is_valid_rate,
    is_valid_tenor,
    parse_price,
    price_to_rate,
    normalize_futures,
    normalize_swap,
    normalize_bond,
)
from .assembler import CurveInput, DEFAULT_TENOR_TOLERANCE, assemble
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    CubicSplineInterpolator,
    create_interpolator,
)
from .nelson_siegel import NelsonSiegel, NSParameters, ns_zero_rate
from .methods import (
    CurveMethod,
    CurveKnots,
    ShapeFunction,
    CurveStrategy,
    derive_knots,
    get_strategy,
)
from .bootstrap import (
    BootstrapConfig,
    DiscountPoint,
    CurveResult,
    CurveBootstrapper,
    reporting_grid,
    bootstrap,
    bootstrap_bonds,
)

__all__ = [
    "InstrumentSource",
    "RateObservation",
    "is_valid_rate",
    "is_valid_tenor",
    "parse_price",
    "price_to_rate",
    "normalize_futures",
    "normalize_swap",
    "normalize_bond",
    "CurveInput",
    "DEFAULT_TENOR_TOLERANCE",
    "assemble",
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
    "NelsonSiegel",
    "NSParameters",
    "ns_zero_rate",
    "CurveMethod",
    "CurveKnots",
    "ShapeFunction",
    "CurveStrategy",
    "derive_knots",
    "get_strategy",
    "BootstrapConfig",
    "DiscountPoint",
    "CurveResult",
    "CurveBootstrapper",
    "reporting_grid",
    "bootstrap",
    "bootstrap_bonds",
]
