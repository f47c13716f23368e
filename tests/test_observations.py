"""
Unit tests for observation normalization.
"""

from dataclasses import FrozenInstanceError
import pytest

from ratecurves.curves.observations import (
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
from ratecurves.exceptions import InvalidObservationError


class TestFuturesConvention:
    """IMM price to rate conversion."""

    def test_price_to_rate(self):
        assert price_to_rate(94.70) == pytest.approx(0.0530, abs=1e-12)

    def test_par_price(self):
        assert price_to_rate(100.0) == 0.0

    def test_parse_display_price(self):
        assert parse_price("94.700s") == 94.7
        assert parse_price("+94.70") == 94.7
        assert parse_price(95.5) == 95.5

    def test_parse_garbage(self):
        assert parse_price("n/a") is None
        assert parse_price("") is None
        assert parse_price(None) is None
        assert parse_price(float("nan")) is None


class TestFilters:
    """Rate and tenor filters."""

    @pytest.mark.parametrize("rate,expected", [
        (0.053, True),
        (0.0001, True),
        (0.0, False),
        (-0.005, False),
        (0.5, False),
        (0.75, False),
        (float("nan"), False),
        (None, False),
    ])
    def test_rate_bounds(self, rate, expected):
        assert is_valid_rate(rate) is expected

    @pytest.mark.parametrize("tenor,expected", [
        (0.25, True),
        (30, True),
        (0, False),
        (-1.0, False),
        (float("inf"), False),
        (None, False),
    ])
    def test_tenor_bounds(self, tenor, expected):
        assert is_valid_tenor(tenor) is expected


class TestNormalizeFutures:
    """Futures quote normalization."""

    def test_valid_quote(self):
        obs = normalize_futures("94.70", "3M")
        assert obs is not None
        assert obs.tenor == 0.25
        assert obs.rate == pytest.approx(0.053, abs=1e-12)
        assert obs.source == InstrumentSource.FUTURES
        assert obs.priority == 2

    def test_price_above_par_dropped(self):
        """A price above 100 implies a negative rate and is a bad tick."""
        assert normalize_futures("100.50", "3M") is None

    def test_price_near_zero_dropped(self):
        assert normalize_futures("40.0", "3M") is None

    def test_unparsable_maturity_dropped(self):
        assert normalize_futures("94.70", "??") is None

    def test_unparsable_price_dropped(self):
        assert normalize_futures("-", "3M") is None


class TestNormalizeSwapAndBond:
    """Percent-quoted instruments."""

    def test_swap(self):
        obs = normalize_swap(5, 4.25)
        assert obs.tenor == 5.0
        assert obs.rate == pytest.approx(0.0425)
        assert obs.source == InstrumentSource.SWAP
        assert obs.priority == 1

    def test_swap_out_of_bounds(self):
        assert normalize_swap(5, 55.0) is None
        assert normalize_swap(5, -0.1) is None

    def test_swap_bad_tenor(self):
        assert normalize_swap(0, 4.0) is None

    def test_bond(self):
        obs = normalize_bond(10, 3.5)
        assert obs.rate == pytest.approx(0.035)
        assert obs.source == InstrumentSource.BOND
        assert obs.priority == 1

    def test_bond_missing_yield(self):
        assert normalize_bond(10, None) is None


class TestRateObservation:
    """RateObservation invariants."""

    def test_default_priority(self):
        assert InstrumentSource.FUTURES.default_priority == 2
        assert InstrumentSource.SWAP.default_priority == 1
        assert InstrumentSource.BOND.default_priority == 1

    def test_non_positive_tenor_rejected(self):
        with pytest.raises(InvalidObservationError):
            RateObservation(-1.0, 0.04, InstrumentSource.SWAP)

    def test_unknown_source_rejected(self):
        with pytest.raises(InvalidObservationError):
            RateObservation(1.0, 0.04, "swap")

    def test_non_finite_rate_rejected(self):
        with pytest.raises(InvalidObservationError):
            RateObservation(1.0, float("nan"), InstrumentSource.BOND)

    def test_frozen(self):
        obs = RateObservation.create(1.0, 0.04, InstrumentSource.SWAP)
        with pytest.raises(FrozenInstanceError):
            obs.rate = 0.05

    def test_error_is_value_error(self):
        """Invalid observations can be caught as ValueError."""
        with pytest.raises(ValueError):
            RateObservation(0.0, 0.04, InstrumentSource.SWAP)

    @pytest.mark.parametrize("rate", [-0.02, 0.0, 0.5, 0.9])
    def test_rate_outside_bounds_rejected(self, rate):
        with pytest.raises(InvalidObservationError):
            RateObservation(1.0, rate, InstrumentSource.BOND)

    def test_priority_follows_source(self):
        assert RateObservation(5.0, 0.05, InstrumentSource.FUTURES).priority == 2
        assert RateObservation(5.0, 0.05, InstrumentSource.BOND).priority == 1
