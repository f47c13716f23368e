"""
Rate observations and the instrument normalizer.

Turns source-specific quotes into canonical RateObservation objects:
- Futures: display price string + maturity label, IMM quoted (100 - rate)
- Swaps: tenor in years + par rate in percent
- Bonds: maturity in years + yield in percent (may be missing)

Bad ticks and unparsable maturities are filtered here and never reach
the curve engine. Filters are plain predicates so they can be tested
in isolation.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

import numpy as np

from ..dates import maturity_to_years
from ..exceptions import InvalidObservationError

logger = logging.getLogger(__name__)


# Sanity bounds for decimal rates (exclusive)
MIN_VALID_RATE = 0.0
MAX_VALID_RATE = 0.5


class InstrumentSource(Enum):
    """Instrument class an observation was derived from."""
    FUTURES = "futures"
    SWAP = "swap"
    BOND = "bond"

    @property
    def default_priority(self) -> int:
        """Trust ranking; lower wins a tenor collision."""
        return 2 if self is InstrumentSource.FUTURES else 1


@dataclass(frozen=True)
class RateObservation:
    """
    A single normalized rate point.

    Attributes:
        tenor: Time to maturity in years (> 0)
        rate: Rate in decimal
        source: Instrument class
        priority: Collision ranking, lower wins (source default if omitted)
    """
    tenor: float
    rate: float
    source: InstrumentSource
    priority: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.source, InstrumentSource):
            raise InvalidObservationError(f"Unknown observation source: {self.source!r}")
        if not is_valid_tenor(self.tenor):
            raise InvalidObservationError(f"Tenor must be finite and positive, got {self.tenor!r}")
        if not is_valid_rate(self.rate):
            raise InvalidObservationError(
                f"Rate must lie in ({MIN_VALID_RATE}, {MAX_VALID_RATE}), got {self.rate!r}"
            )
        if self.priority is None:
            object.__setattr__(self, "priority", self.source.default_priority)

    @classmethod
    def create(cls, tenor: float, rate: float, source: InstrumentSource) -> "RateObservation":
        """Create an observation with the source's default priority."""
        return cls(float(tenor), float(rate), source, source.default_priority)


def is_valid_rate(rate: Optional[float]) -> bool:
    """True if a decimal rate lies strictly inside (0, 0.5)."""
    if rate is None:
        return False
    try:
        rate = float(rate)
    except (TypeError, ValueError):
        return False
    return bool(np.isfinite(rate)) and MIN_VALID_RATE < rate < MAX_VALID_RATE


def is_valid_tenor(tenor: Optional[float]) -> bool:
    """True if a tenor is finite and strictly positive."""
    if tenor is None or isinstance(tenor, bool):
        return False
    try:
        tenor = float(tenor)
    except (TypeError, ValueError):
        return False
    return bool(np.isfinite(tenor)) and tenor > 0


_PRICE_JUNK = re.compile(r'[^0-9.\-]')


def parse_price(raw: Union[str, float, None]) -> Optional[float]:
    """
    Parse a display price such as "94.700s" or "+94.70".

    Everything except digits, '.' and '-' is stripped.

    Returns:
        The price, or None if nothing numeric is left
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if np.isfinite(raw) else None

    cleaned = _PRICE_JUNK.sub("", str(raw))
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if np.isfinite(value) else None


def price_to_rate(price: float) -> float:
    """Convert an IMM futures price to a decimal rate: (100 - price) / 100."""
    # Rounded to strip binary noise, e.g. 100 - 94.70 = 5.299999...
    return round((100.0 - price) / 100.0, 12)


def normalize_futures(
    raw_price: Union[str, float, None],
    maturity_label: str,
    as_of: Optional[date] = None
) -> Optional[RateObservation]:
    """
    Normalize a futures quote.

    Args:
        raw_price: Display price (string or number), IMM quoted
        maturity_label: Tenor ("3M") or contract month ("Mar 2026")
        as_of: Observation date, needed for contract-month labels

    Returns:
        RateObservation with priority 2, or None if filtered
    """
    price = parse_price(raw_price)
    if price is None:
        logger.debug("Dropping futures quote with unparsable price %r", raw_price)
        return None

    tenor = maturity_to_years(maturity_label, as_of)
    if tenor is None:
        logger.debug("Dropping futures quote with unusable maturity %r", maturity_label)
        return None

    rate = price_to_rate(price)
    if not is_valid_rate(rate):
        logger.debug("Dropping futures tick %.4f (rate %.6f out of bounds)", price, rate)
        return None

    return RateObservation.create(tenor, rate, InstrumentSource.FUTURES)


def _normalize_percent(
    tenor: Optional[float],
    percent: Optional[float],
    source: InstrumentSource
) -> Optional[RateObservation]:
    if not is_valid_tenor(tenor):
        logger.debug("Dropping %s quote with tenor %r", source.value, tenor)
        return None
    if percent is None:
        logger.debug("Dropping %s quote at %s without a rate", source.value, tenor)
        return None

    try:
        rate = float(percent) / 100.0
    except (TypeError, ValueError):
        logger.debug("Dropping %s quote with non-numeric rate %r", source.value, percent)
        return None

    if not is_valid_rate(rate):
        logger.debug("Dropping %s quote at %s: rate %r out of bounds", source.value, tenor, percent)
        return None

    return RateObservation.create(tenor, rate, source)


def normalize_swap(tenor_years: float, par_rate_percent: float) -> Optional[RateObservation]:
    """Normalize an IRS quote (percent par rate) into a priority-1 observation."""
    return _normalize_percent(tenor_years, par_rate_percent, InstrumentSource.SWAP)


def normalize_bond(maturity_years: float, yield_percent: Optional[float]) -> Optional[RateObservation]:
    """Normalize a government bond yield (percent, may be None) into a priority-1 observation."""
    return _normalize_percent(maturity_years, yield_percent, InstrumentSource.BOND)


__all__ = [
    "InstrumentSource",
    "RateObservation",
    "MIN_VALID_RATE",
    "MAX_VALID_RATE",
    "is_valid_rate",
    "is_valid_tenor",
    "parse_price",
    "price_to_rate",
    "normalize_futures",
    "normalize_swap",
    "normalize_bond",
]
