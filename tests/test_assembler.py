"""
Unit tests for curve input assembly.
"""

import pytest

from ratecurves.curves.assembler import CurveInput, assemble
from ratecurves.curves.observations import InstrumentSource, RateObservation
from ratecurves.exceptions import InsufficientDataError


def swap(tenor, rate):
    return RateObservation.create(tenor, rate, InstrumentSource.SWAP)


def future(tenor, rate):
    return RateObservation.create(tenor, rate, InstrumentSource.FUTURES)


class TestAssemble:
    """Tests for merging instrument classes."""

    @pytest.fixture
    def swaps(self):
        return [swap(2.0, 0.041), swap(5.0, 0.0415), swap(10.0, 0.0425)]

    @pytest.fixture
    def futures(self):
        return [future(0.25, 0.053), future(0.5, 0.051), future(5.0, 0.039)]

    def test_sorted_ascending(self, swaps, futures):
        curve_input = assemble([swaps, futures])
        tenors = list(curve_input.tenors)
        assert tenors == sorted(tenors)
        assert tenors == [0.25, 0.5, 2.0, 5.0, 10.0]

    def test_swap_wins_collision(self, swaps, futures):
        """Swap at 5Y beats the futures point at 5Y."""
        curve_input = assemble([swaps, futures])
        at_five = [obs for obs in curve_input if obs.tenor == 5.0]
        assert len(at_five) == 1
        assert at_five[0].source == InstrumentSource.SWAP
        assert at_five[0].rate == 0.0415

    def test_swap_wins_regardless_of_order(self, swaps, futures):
        curve_input = assemble([futures, swaps])
        assert curve_input[3].source == InstrumentSource.SWAP

    def test_near_collision(self):
        """Tenors less than a day apart collide."""
        curve_input = assemble([
            [future(5.0 + 0.5 / 365, 0.039), future(1.0, 0.05)],
            [swap(5.0, 0.0415)],
        ])
        assert len(curve_input) == 2
        assert curve_input[1].tenor == 5.0
        assert curve_input[1].source == InstrumentSource.SWAP

    def test_exact_tolerance(self):
        curve_input = assemble([[swap(5.0, 0.04), future(5.001, 0.05)]], tenor_tolerance=0.0)
        assert len(curve_input) == 2

    def test_tie_keeps_first_seen(self):
        curve_input = assemble([[swap(1.0, 0.04), swap(5.0, 0.041)], [swap(5.0, 0.045)]])
        assert curve_input[1].rate == 0.041

    def test_empty_sets_ignored(self, swaps):
        curve_input = assemble([swaps, []])
        assert len(curve_input) == 3

    def test_insufficient_data(self):
        with pytest.raises(InsufficientDataError):
            assemble([[swap(5.0, 0.04)], []])

    def test_insufficient_after_collision(self):
        with pytest.raises(InsufficientDataError):
            assemble([[swap(5.0, 0.04)], [future(5.0, 0.05)]])

    def test_negative_tolerance(self, swaps):
        with pytest.raises(ValueError):
            assemble([swaps], tenor_tolerance=-1.0)


class TestCurveInput:
    """Tests for the CurveInput container."""

    def test_rejects_unsorted(self):
        with pytest.raises(ValueError):
            CurveInput((swap(5.0, 0.04), swap(2.0, 0.04)))

    def test_rejects_duplicates(self):
        with pytest.raises(ValueError):
            CurveInput((swap(2.0, 0.04), swap(2.0, 0.05)))

    def test_from_observations_sorts(self):
        curve_input = CurveInput.from_observations([swap(10.0, 0.04), swap(1.0, 0.03)])
        assert list(curve_input.tenors) == [1.0, 10.0]
        assert list(curve_input.rates) == [0.03, 0.04]
        assert curve_input.max_tenor == 10.0


class TestCollisionPriority:
    """Priorities of directly constructed observations."""

    def test_constructor_defaults_to_source_priority(self):
        assert RateObservation(5.0, 0.05, InstrumentSource.FUTURES).priority == 2
        assert RateObservation(5.0, 0.04, InstrumentSource.SWAP).priority == 1

    def test_swap_beats_futures_listed_first(self):
        curve_input = assemble([
            [RateObservation(5.0, 0.05, InstrumentSource.FUTURES), swap(1.0, 0.04)],
            [RateObservation(5.0, 0.04, InstrumentSource.SWAP)],
        ])
        assert curve_input[1].tenor == 5.0
        assert curve_input[1].source == InstrumentSource.SWAP

    def test_explicit_priority_kept(self):
        obs = RateObservation(5.0, 0.05, InstrumentSource.FUTURES, priority=0)
        curve_input = assemble([[swap(5.0, 0.04), swap(1.0, 0.04)], [obs]])
        assert curve_input[1] is obs

    def test_adjacent_cluster_winners(self):
        """Clusters are anchored at their first tenor."""
        day = 1.0 / 365
        curve_input = assemble([
            [future(5.0, 0.05), swap(5.0 + 0.9 * day, 0.04), future(5.0 + 1.05 * day, 0.05)],
            [swap(1.0, 0.04)],
        ])
        assert len(curve_input) == 3
        assert curve_input[1].source == InstrumentSource.SWAP
        assert curve_input[2].tenor - curve_input[1].tenor < day
