"""
Date and tenor utilities for curve inputs.

Provides:
- Tenor label parsing ("3M", "10Y", "6 Months") into year fractions
- Futures contract-month labels ("Mar 2026", "DEC25") resolved to IMM dates
- Coupon time schedules in year-fraction space for par-rate stripping
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple
import re

import numpy as np

from .conventions import DayCount, year_fraction

logger = logging.getLogger(__name__)


_UNIT_ALIASES = {
    "D": "D", "DAY": "D", "DAYS": "D",
    "W": "W", "WK": "W", "WKS": "W", "WEEK": "W", "WEEKS": "W",
    "M": "M", "MO": "M", "MOS": "M", "MTH": "M", "MONTH": "M", "MONTHS": "M",
    "Y": "Y", "YR": "Y", "YRS": "Y", "YEAR": "Y", "YEARS": "Y",
}

_MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}


class DateUtils:
    """Utility class for tenor and maturity-label handling."""

    # Tenor pattern: amount + unit word, e.g. "3M", "10Y", "6 Months", "1.5Y"
    TENOR_PATTERN = re.compile(r'^(\d+(?:\.\d+)?)\s*([A-Z]+)$')

    # Contract month pattern: month name + 2 or 4 digit year, e.g. "Mar 2026", "DEC25", "Jun-27"
    CONTRACT_PATTERN = re.compile(r'^([A-Z]{3})[A-Z]*\.?\s*[-/\']?\s*(\d{2}|\d{4})$')

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[float, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "1D", "3M", "2Y", "6 Months"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

        unit = _UNIT_ALIASES.get(match.group(2))
        if unit is None:
            raise ValueError(f"Unknown tenor unit in: {tenor}")

        amount = float(match.group(1))
        return (int(amount) if amount.is_integer() else amount), unit

    @staticmethod
    def tenor_to_years(tenor: str) -> float:
        """
        Convert tenor to approximate year fraction.

        Days and weeks use a 365-day year, months are twelfths.
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return amount / 365.0
        elif unit == 'W':
            return amount * 7 / 365.0
        elif unit == 'M':
            return amount / 12.0
        return float(amount)

    @staticmethod
    def parse_contract_month(label: str) -> Tuple[int, int]:
        """
        Parse a futures contract-month label into (year, month).

        Two-digit years are taken in the 2000s.

        Raises:
            ValueError: If the label is not a contract month
        """
        match = DateUtils.CONTRACT_PATTERN.match(label.upper().strip())
        if not match or match.group(1) not in _MONTHS:
            raise ValueError(f"Invalid contract month: {label}")

        year = int(match.group(2))
        if year < 100:
            year += 2000
        return year, _MONTHS[match.group(1)]

    @staticmethod
    def imm_date(year: int, month: int) -> date:
        """Third Wednesday of the month."""
        first = date(year, month, 1)
        offset = (2 - first.weekday()) % 7
        return first + timedelta(days=offset + 14)


def maturity_to_years(label: str, as_of: Optional[date] = None) -> Optional[float]:
    """
    Convert a maturity label to a tenor in years.

    Tenor labels ("3M" -> 0.25, "10Y" -> 10.0) need no reference date.
    Contract-month labels ("Mar 2026") are measured ACT/365 from ``as_of``
    to the contract's IMM date and are only resolved when ``as_of`` is given.

    Args:
        label: Maturity label from a rate source
        as_of: Observation date for contract-month labels

    Returns:
        Positive year fraction, or None if the label cannot be used
    """
    if label is None:
        return None
    text = str(label).strip()
    if not text:
        return None

    try:
        years = DateUtils.tenor_to_years(text)
    except ValueError:
        years = None

    if years is None and as_of is not None:
        try:
            year, month = DateUtils.parse_contract_month(text)
            years = year_fraction(as_of, DateUtils.imm_date(year, month), DayCount.ACT_365)
        except ValueError:
            years = None

    if years is None or not np.isfinite(years) or years <= 0:
        logger.debug("Unusable maturity label %r", label)
        return None
    return years


def coupon_times(maturity: float, frequency: int) -> List[float]:
    """
    Generate coupon times backward from maturity.

    Periods are 1/frequency years; a short front stub is left when the
    maturity is not a whole number of periods.

    Args:
        maturity: Final payment time in years
        frequency: Payments per year

    Returns:
        Ascending payment times ending at maturity
    """
    if frequency <= 0:
        raise ValueError("Frequency must be positive")
    if maturity <= 0:
        return []

    period = 1.0 / frequency
    times = [maturity]
    current = maturity
    while True:
        prev = current - period
        # Stubs shorter than a day are folded into the first period
        if prev <= 1.0 / 365.0:
            break
        times.insert(0, prev)
        current = prev
    return times


__all__ = [
    "DateUtils",
    "maturity_to_years",
    "coupon_times",
]
