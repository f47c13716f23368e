"""
Day count, compounding and per-currency basis conventions.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets, most IRS fixed legs)
- ACT/365: Actual days / 365
- ACT/ACT: Actual days / actual days in year (government bonds)
- 30/360: 30 days per month / 360

A BasisConvention is a pure function of currency. It governs how zero
rates are annualized for display and the coupon frequency assumed when
swap par rates are stripped into discount factors. It never changes a
bootstrapped discount factor itself.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict
import calendar

import numpy as np


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "ACT/365F": cls.ACT_365,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class Frequency(Enum):
    """Coupon / compounding periods per year."""
    ANNUAL = 1
    SEMI_ANNUAL = 2

    @property
    def label(self) -> str:
        return "Annual" if self is Frequency.ANNUAL else "Semi-Annual"


class CompoundingConvention(Enum):
    """Interest rate compounding convention."""
    CONTINUOUS = "Continuous"
    ANNUAL = "Annual"
    SEMI_ANNUAL = "SemiAnnual"
    QUARTERLY = "Quarterly"
    SIMPLE = "Simple"

    @classmethod
    def from_frequency(cls, frequency: Frequency) -> "CompoundingConvention":
        if frequency is Frequency.SEMI_ANNUAL:
            return cls.SEMI_ANNUAL
        return cls.ANNUAL


_PERIODS_PER_YEAR = {
    CompoundingConvention.ANNUAL: 1,
    CompoundingConvention.SEMI_ANNUAL: 2,
    CompoundingConvention.QUARTERLY: 4,
}


def discount_factor_from_rate(
    rate: float,
    t: float,
    compounding: CompoundingConvention = CompoundingConvention.CONTINUOUS
) -> float:
    """
    Convert a zero rate to a discount factor.

    Args:
        rate: Zero rate (decimal)
        t: Year fraction
        compounding: Compounding convention of ``rate``

    Returns:
        Discount factor P(0,t); 1.0 for t <= 0
    """
    if t <= 0:
        return 1.0

    if compounding == CompoundingConvention.CONTINUOUS:
        return float(np.exp(-rate * t))
    elif compounding == CompoundingConvention.SIMPLE:
        return 1.0 / (1.0 + rate * t)
    else:
        n = _PERIODS_PER_YEAR[compounding]
        return float((1.0 + rate / n) ** (-n * t))


def zero_rate_from_discount_factor(
    df: float,
    t: float,
    compounding: CompoundingConvention = CompoundingConvention.CONTINUOUS
) -> float:
    """
    Convert a discount factor to a zero rate.

    Inverse of discount_factor_from_rate. Returns 0.0 for t <= 0.
    """
    if t <= 0:
        return 0.0
    if df <= 0:
        raise ValueError(f"Discount factor must be positive, got {df}")

    if compounding == CompoundingConvention.CONTINUOUS:
        return float(-np.log(df) / t)
    elif compounding == CompoundingConvention.SIMPLE:
        return (1.0 / df - 1.0) / t
    else:
        n = _PERIODS_PER_YEAR[compounding]
        return float(n * (df ** (-1.0 / (n * t)) - 1.0))


@dataclass(frozen=True)
class BasisConvention:
    """
    Day count and compounding basis for one currency.

    Attributes:
        day_count: Day count used for accrual and display
        frequency: Compounding / fixed-leg coupon frequency
    """
    day_count: DayCount = DayCount.ACT_360
    frequency: Frequency = Frequency.ANNUAL

    @property
    def compounding(self) -> CompoundingConvention:
        return CompoundingConvention.from_frequency(self.frequency)

    @property
    def periods_per_year(self) -> int:
        return self.frequency.value

    def discount_factor(self, zero_rate: float, t: float) -> float:
        """Discount factor (1 + r/f)^(-f*t) for a decimal zero rate."""
        return discount_factor_from_rate(zero_rate, t, self.compounding)

    def zero_rate(self, discount_factor: float, t: float) -> float:
        """Decimal zero rate f * (DF^(-1/(f*t)) - 1) implied by a discount factor."""
        return zero_rate_from_discount_factor(discount_factor, t, self.compounding)

    def describe(self) -> str:
        return f"{self.day_count.value}, {self.frequency.label}"


DEFAULT_BASIS_CONVENTION = BasisConvention(DayCount.ACT_360, Frequency.ANNUAL)

CURRENCY_CONVENTIONS: Dict[str, BasisConvention] = {
    "EUR": BasisConvention(DayCount.ACT_360, Frequency.ANNUAL),
    "USD": BasisConvention(DayCount.ACT_360, Frequency.SEMI_ANNUAL),
    "GBP": BasisConvention(DayCount.ACT_365, Frequency.SEMI_ANNUAL),
    "CHF": BasisConvention(DayCount.ACT_360, Frequency.ANNUAL),
    "JPY": BasisConvention(DayCount.ACT_365, Frequency.SEMI_ANNUAL),
    "CAD": BasisConvention(DayCount.ACT_365, Frequency.SEMI_ANNUAL),
    "SGD": BasisConvention(DayCount.ACT_365, Frequency.SEMI_ANNUAL),
}


def get_basis_convention(currency: str) -> BasisConvention:
    """
    Resolve the basis convention of a currency.

    Unknown currencies fall back to ACT/360 Annual so that zero-rate
    conversion always produces a value.

    Args:
        currency: ISO currency code (case-insensitive)

    Returns:
        BasisConvention for the currency
    """
    key = (currency or "").strip().upper()
    return CURRENCY_CONVENTIONS.get(key, DEFAULT_BASIS_CONVENTION)


resolve = get_basis_convention


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float; 0.0 if end is not after start
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365:
        return actual_days / 365.0

    elif day_count == DayCount.ACT_ACT:
        # ISDA ACT/ACT: split by year boundaries
        if start.year == end.year:
            days_in_year = 366 if calendar.isleap(start.year) else 365
            return actual_days / days_in_year
        total = 0.0
        for year in range(start.year, end.year + 1):
            period_start = start if year == start.year else date(year, 1, 1)
            period_end = end if year == end.year else date(year + 1, 1, 1)
            days_in_year = 366 if calendar.isleap(year) else 365
            total += (period_end - period_start).days / days_in_year
        return total

    elif day_count == DayCount.THIRTY_360:
        # 30/360 US convention
        d1 = min(start.day, 30)
        d2 = end.day
        if end.day == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    else:
        raise ValueError(f"Unknown day count: {day_count}")


__all__ = [
    "DayCount",
    "Frequency",
    "CompoundingConvention",
    "BasisConvention",
    "DEFAULT_BASIS_CONVENTION",
    "CURRENCY_CONVENTIONS",
    "get_basis_convention",
    "resolve",
    "discount_factor_from_rate",
    "zero_rate_from_discount_factor",
    "year_fraction",
]
