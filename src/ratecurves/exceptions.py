"""
Error taxonomy for curve construction.

Data-quality problems (bad ticks, unparsable maturities) are filtered by
the normalizer and never raised. Structural problems are raised to the
caller and never retried, since none of them are transient.
"""


class CurveError(Exception):
    """Base class for all curve construction errors."""


class InsufficientDataError(CurveError, ValueError):
    """Fewer than two usable observations remain for a curve."""


class UnknownMethodError(CurveError, ValueError):
    """An unsupported curve method identifier was requested."""


class FitDivergenceError(CurveError, RuntimeError):
    """The Nelson-Siegel optimizer did not converge to finite parameters."""


class InvalidObservationError(CurveError, ValueError):
    """A rate observation is malformed or cannot be turned into a knot."""


__all__ = [
    "CurveError",
    "InsufficientDataError",
    "UnknownMethodError",
    "FitDivergenceError",
    "InvalidObservationError",
]
