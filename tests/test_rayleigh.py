"""
Tests for the Rayleigh distribution.
"""

import math

import numpy as np
import pytest

from hydrodist import EstimationMethod, Rayleigh
from hydrodist.statistics import plotting_positions


def test_reference_values():
    r = Rayleigh(0.42)
    assert r.mean == pytest.approx(0.52639193767251, abs=1e-10)
    assert r.median == pytest.approx(0.49451220943852386, abs=1e-10)
    assert r.standard_deviation == pytest.approx(math.sqrt(0.075711527953380237), abs=1e-10)
    assert r.pdf(1.4) == pytest.approx(0.030681905868831811, abs=1e-10)
    assert r.cdf(1.4) == pytest.approx(0.99613407986052716, abs=1e-10)
    assert r.inverse_cdf(0.99613407986052716) == pytest.approx(1.4, abs=1e-8)


def test_default_moments():
    r = Rayleigh()
    assert r.mean == pytest.approx(12.53314, abs=1e-4)
    assert r.median == pytest.approx(11.7741, abs=1e-4)
    assert r.mode == 10.0
    assert r.standard_deviation == pytest.approx(6.55136, abs=1e-5)
    assert r.skewness == pytest.approx(0.63111, abs=1e-4)
    assert r.kurtosis == pytest.approx(3.24508, abs=1e-5)
    assert r.minimum == 0.0
    assert r.maximum == np.inf
    assert r.pdf(-1.0) == 0.0
    assert r.pdf(1.0) == pytest.approx(9.9501e-03, abs=1e-6)
    assert r.cdf(1.0) == pytest.approx(4.9875e-03, abs=1e-6)
    assert r.inverse_cdf(0.0) == 0.0


@pytest.mark.parametrize("scale", [np.nan, np.inf, 0.0])
def test_invalid(scale):
    assert not Rayleigh(scale).parameters_valid


@pytest.mark.parametrize("method", [
    EstimationMethod.METHOD_OF_MOMENTS,
    EstimationMethod.MAXIMUM_LIKELIHOOD,
])
def test_estimation(method):
    sample = Rayleigh(3.0).inverse_cdf(plotting_positions(200))
    r = Rayleigh()
    r.estimate(sample, method)
    assert r.scale == pytest.approx(3.0, rel=0.02)


def test_quantile_variance():
    r = Rayleigh(10.0)
    np.testing.assert_allclose(r.partial_derivatives(0.99), [math.sqrt(-2.0 * math.log(0.01))])
    variance = r.quantile_variance(0.99, 100, 'mle')
    assert variance == pytest.approx(-2.0 * math.log(0.01) * 100.0 / 400.0, rel=1e-12)


def test_analytic_derivative_matches_numerical():
    r = Rayleigh(10.0)
    numerical = super(Rayleigh, r).partial_derivatives(0.9)
    np.testing.assert_allclose(r.partial_derivatives(0.9), numerical, rtol=1e-6)


def test_covariance_needs_likelihood_fit():
    with pytest.raises(NotImplementedError):
        Rayleigh(10.0).parameter_covariance(100, 'moments')
