"""
RateCurves: Zero-Coupon Discount Curve Construction

A modular library for:
- Normalizing futures, swap and government bond quotes into rate observations
- Merging instrument classes into one ordered curve input per currency
- Bootstrapping discount curves with six curve methods
  (linear, cubic spline, Nelson-Siegel, Bloomberg, QL log-linear, QL log-cubic)
- Exporting discount factors and zero rates to CSV

Scope: a single discount curve per currency; no data retrieval, caching
or presentation.
"""

__version__ = "0.1.0"

# Core modules
from .exceptions import (
    CurveError,
    InsufficientDataError,
    UnknownMethodError,
    FitDivergenceError,
    InvalidObservationError,
)
from .conventions import (
    DayCount,
    Frequency,
    CompoundingConvention,
    BasisConvention,
    get_basis_convention,
    year_fraction,
)
from .dates import DateUtils, maturity_to_years

# Curves
from .curves import (
    InstrumentSource,
    RateObservation,
    CurveInput,
    CurveMethod,
    ShapeFunction,
    BootstrapConfig,
    DiscountPoint,
    CurveResult,
    CurveBootstrapper,
    assemble,
    bootstrap,
    bootstrap_bonds,
    price_to_rate,
    normalize_futures,
    normalize_swap,
    normalize_bond,
)

# Reporting
from .reporting import export_to_csv, write_csv

# Market-data seam
from .market import (
    SourceResponse,
    FuturesQuote,
    SwapQuote,
    BondYield,
    CurrencyCurve,
    CurveRequest,
    build_currency_curve,
    build_all_curves,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "CurveError",
    "InsufficientDataError",
    "UnknownMethodError",
    "FitDivergenceError",
    "InvalidObservationError",
    # Conventions
    "DayCount",
    "Frequency",
    "CompoundingConvention",
    "BasisConvention",
    "get_basis_convention",
    "year_fraction",
    # Dates
    "DateUtils",
    "maturity_to_years",
    # Curves
    "InstrumentSource",
    "RateObservation",
    "CurveInput",
    "CurveMethod",
    "ShapeFunction",
    "BootstrapConfig",
    "DiscountPoint",
    "CurveResult",
    "CurveBootstrapper",
    "assemble",
    "bootstrap",
    "bootstrap_bonds",
    "price_to_rate",
    "normalize_futures",
    "normalize_swap",
    "normalize_bond",
    # Reporting
    "export_to_csv",
    "write_csv",
    # Market-data seam
    "SourceResponse",
    "FuturesQuote",
    "SwapQuote",
    "BondYield",
    "CurrencyCurve",
    "CurveRequest",
    "build_currency_curve",
    "build_all_curves",
]
