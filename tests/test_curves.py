"""
Unit tests for interpolation, Nelson-Siegel and curve methods.
"""

import numpy as np
import pytest

from ratecurves.conventions import get_basis_convention
from ratecurves.curves import (
    CurveInput,
    CurveMethod,
    InstrumentSource,
    RateObservation,
    LinearInterpolator,
    CubicSplineInterpolator,
    NelsonSiegel,
    NSParameters,
    ns_zero_rate,
    get_strategy,
)
from ratecurves.curves.interpolation import create_interpolator
from ratecurves.curves.methods import derive_knots
from ratecurves.conventions import CompoundingConvention
from ratecurves.exceptions import FitDivergenceError, UnknownMethodError


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        """Sample interpolation data."""
        x = np.array([0.25, 0.5, 1.0, 2.0, 5.0, 10.0])
        y = np.array([0.051, 0.052, 0.053, 0.050, 0.048, 0.045])
        return x, y

    def test_linear_interpolator(self, sample_data):
        x, y = sample_data
        interp = LinearInterpolator().fit(x, y)

        assert abs(interp(0.25) - 0.051) < 1e-10
        assert abs(interp(1.0) - 0.053) < 1e-10
        assert abs(interp(7.5) - 0.0465) < 1e-10

    def test_boundary_values_outside_range(self, sample_data):
        x, y = sample_data
        interp = LinearInterpolator().fit(x, y)
        assert interp(0.1) == 0.051
        assert interp(30.0) == 0.045

    def test_cubic_spline_hits_knots(self, sample_data):
        x, y = sample_data
        interp = CubicSplineInterpolator().fit(x, y)

        for xi, yi in zip(x, y):
            assert abs(interp(xi) - yi) < 1e-12

    def test_cubic_spline_natural_boundaries(self, sample_data):
        x, y = sample_data
        interp = CubicSplineInterpolator().fit(x, y)
        assert abs(interp.second_derivative(x[0] + 1e-9)) < 1e-6
        assert abs(interp.second_derivative(x[-1] - 1e-9)) < 1e-6

    def test_two_point_spline_is_linear(self):
        interp = CubicSplineInterpolator().fit([1.0, 3.0], [0.02, 0.04])
        assert abs(interp(2.0) - 0.03) < 1e-12
        assert abs(interp(1.5) - 0.025) < 1e-12

    def test_unsorted_input(self):
        interp = LinearInterpolator().fit([2.0, 1.0], [0.04, 0.02])
        assert abs(interp(1.5) - 0.03) < 1e-12

    def test_invalid_knots(self):
        with pytest.raises(ValueError):
            LinearInterpolator().fit([1.0, 2.0], [0.01])
        with pytest.raises(ValueError):
            LinearInterpolator().fit([1.0], [0.01])
        with pytest.raises(ValueError):
            LinearInterpolator().fit([1.0, 1.0], [0.01, 0.02])
        with pytest.raises(ValueError):
            LinearInterpolator().fit([1.0, 2.0], [0.01, np.nan])

    def test_not_fitted(self):
        with pytest.raises(RuntimeError):
            LinearInterpolator()(1.0)

    def test_factory(self):
        assert isinstance(create_interpolator("linear"), LinearInterpolator)
        assert isinstance(create_interpolator("Cubic Spline"), CubicSplineInterpolator)
        with pytest.raises(ValueError):
            create_interpolator("akima")


class TestNelsonSiegel:
    """Tests for the Nelson-Siegel model."""

    @pytest.fixture
    def true_params(self):
        return NSParameters(beta0=0.045, beta1=-0.01, beta2=0.01, tau=2.0)

    @pytest.fixture
    def maturities(self):
        return np.array([0.25, 0.5, 1, 2, 3, 5, 7, 10, 20, 30], dtype=float)

    def test_short_end_limit(self, true_params):
        assert abs(ns_zero_rate(0.0, true_params) - 0.035) < 1e-15
        assert abs(ns_zero_rate(1e-8, true_params) - 0.035) < 1e-8

    def test_long_end_limit(self, true_params):
        assert abs(ns_zero_rate(1e6, true_params) - 0.045) < 1e-5

    def test_array_input(self, true_params, maturities):
        rates = ns_zero_rate(maturities, true_params)
        assert rates.shape == maturities.shape

    def test_fit_recovers_curve(self, true_params, maturities):
        rates = ns_zero_rate(maturities, true_params)
        model = NelsonSiegel()
        sse, residuals = model.fit(maturities, rates)

        assert model.is_fitted
        assert sse < 1e-12
        assert np.max(np.abs(residuals)) < 1e-6
        assert 0.05 <= model.params.tau <= 30.0
        for t in (0.75, 4.0, 15.0):
            assert abs(model.zero_rate(t) - ns_zero_rate(t, true_params)) < 1e-5

    def test_initial_guess(self, maturities):
        rates = np.linspace(0.05, 0.04, len(maturities))
        guess = NSParameters.initial_guess(maturities, rates)
        assert guess.beta0 == pytest.approx(0.04)
        assert guess.beta1 == pytest.approx(0.01)
        assert guess.beta2 == 0.0
        assert guess.tau == pytest.approx(4.0)

    def test_budget_exhausted(self, true_params, maturities):
        """A fit that runs out of evaluations is reported, not returned."""
        rates = ns_zero_rate(maturities, true_params)
        with pytest.raises(FitDivergenceError):
            NelsonSiegel(max_iterations=1).fit(maturities, rates)

    def test_not_fitted(self):
        model = NelsonSiegel()
        assert "fitted=False" in repr(model)
        with pytest.raises(RuntimeError):
            model.zero_rate(1.0)

    def test_too_few_points(self):
        with pytest.raises(ValueError):
            NelsonSiegel().fit([1.0], [0.04])


class TestCurveMethods:
    """Tests for the curve method registry and knot derivation."""

    @pytest.fixture
    def curve_input(self):
        return CurveInput.from_observations([
            RateObservation.create(0.25, 0.053, InstrumentSource.FUTURES),
            RateObservation.create(1.0, 0.048, InstrumentSource.BOND),
            RateObservation.create(5.0, 0.042, InstrumentSource.BOND),
            RateObservation.create(10.0, 0.040, InstrumentSource.BOND),
        ])

    @pytest.mark.parametrize("name,expected", [
        ("linear", CurveMethod.LINEAR),
        ("Simple", CurveMethod.LINEAR),
        ("cubic_spline", CurveMethod.CUBIC_SPLINE),
        ("Cubic Spline", CurveMethod.CUBIC_SPLINE),
        ("nelson-siegel", CurveMethod.NELSON_SIEGEL),
        ("bloomberg", CurveMethod.BLOOMBERG),
        ("QL Log-Linear", CurveMethod.QUANTLIB_LOG_LINEAR),
        ("quantlib_log_cubic", CurveMethod.QUANTLIB_LOG_CUBIC),
    ])
    def test_from_string(self, name, expected):
        assert CurveMethod.from_string(name) == expected

    def test_unknown_method(self):
        with pytest.raises(UnknownMethodError):
            CurveMethod.from_string("svensson")
        with pytest.raises(UnknownMethodError):
            get_strategy("hermite")

    def test_display_names(self):
        assert CurveMethod.QUANTLIB_LOG_CUBIC.display_name == "QL Log-Cubic"
        assert CurveMethod.LINEAR.display_name == "Simple/Linear"

    def test_shared_strategy(self):
        assert get_strategy("linear") is get_strategy(CurveMethod.LINEAR)
        assert get_strategy("linear", max_iterations=10) is not get_strategy("linear")

    def test_knots_use_seed_compounding(self, curve_input):
        conv = get_basis_convention("USD")
        knots = derive_knots(curve_input, conv, CompoundingConvention.ANNUAL)
        assert abs(knots.discount_factors[2] - 1.042 ** -5) < 1e-14

    def test_bloomberg_seeds_annually(self, curve_input):
        conv = get_basis_convention("USD")
        bloomberg = get_strategy("bloomberg").fit(curve_input, conv)
        quantlib = get_strategy("quantlib_log_linear").fit(curve_input, conv)

        assert abs(bloomberg(5.0) - 1.042 ** -5) < 1e-12
        assert abs(quantlib(5.0) - 1.021 ** -10) < 1e-12

    @pytest.mark.parametrize("method", list(CurveMethod))
    def test_shape_contract(self, method, curve_input):
        conv = get_basis_convention("EUR")
        shape = get_strategy(method).fit(curve_input, conv)

        assert shape(0.0) == 1.0
        assert shape(-1.0) == 1.0
        for t in (0.1, 0.25, 0.5, 1.0, 3.0, 5.0, 10.0):
            df = shape(t)
            assert np.isfinite(df)
            assert 0 < df <= 1

    @pytest.mark.parametrize("method", list(CurveMethod))
    def test_flat_extrapolation(self, method, curve_input):
        conv = get_basis_convention("EUR")
        shape = get_strategy(method).fit(curve_input, conv)

        assert abs(shape.zero_rate(0.1) - shape.zero_rate(0.25)) < 1e-12
        assert abs(shape.zero_rate(30.0) - shape.zero_rate(10.0)) < 1e-12
        assert abs(shape.zero_rate(0.0) - shape.zero_rate(0.25)) < 1e-12

    def test_forward_rate(self, curve_input):
        shape = get_strategy("linear").fit(curve_input, get_basis_convention("EUR"))
        fwd = shape.forward_rate(1.0, 2.0)
        assert abs(fwd - (shape(1.0) / shape(2.0) - 1.0)) < 1e-15
        with pytest.raises(ValueError):
            shape.forward_rate(2.0, 1.0)
