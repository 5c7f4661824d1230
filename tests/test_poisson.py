"""
Tests for the Poisson distribution.
"""

import math

import numpy as np
import pytest

from hydrodist import EstimationMethod, Poisson


def test_reference_values():
    p = Poisson(4.2)
    assert p.mean == pytest.approx(4.2)
    assert p.median == 4.0
    assert p.mode == 4.0
    assert p.standard_deviation == pytest.approx(math.sqrt(4.2))
    assert p.skewness == pytest.approx(0.488, abs=1e-4)
    assert p.kurtosis == pytest.approx(3.2381, abs=1e-4)
    assert p.pdf(4.0) == pytest.approx(0.19442365170822165, abs=1e-10)
    assert p.cdf(4.0) == pytest.approx(0.58982702131057763, abs=1e-10)
    assert p.inverse_cdf(0.05) == 1.0
    assert p.inverse_cdf(0.95) == 8.0


@pytest.mark.parametrize("rate", [0.3, 4.2, 150.0])
def test_quantile_is_smallest_k_with_cdf_at_least_p(rate):
    dist = Poisson(rate)
    for p in [0.01, 0.25, 0.5, 0.75, 0.99]:
        k = dist.inverse_cdf(p)
        assert dist.cdf(k) >= p
        if k > 0:
            assert dist.cdf(k - 1.0) < p


@pytest.mark.parametrize("rate", [0.0, -1.0, np.nan, np.inf])
def test_invalid(rate):
    assert not Poisson(rate).parameters_valid


def test_fit_and_covariance():
    dist = Poisson()
    sample = [2.0, 5.0, 3.0, 4.0, 6.0]
    dist.estimate(sample, EstimationMethod.MAXIMUM_LIKELIHOOD)
    assert dist.rate == pytest.approx(4.0)
    np.testing.assert_allclose(dist.parameter_covariance(5, 'mle'), [[0.8]])


def test_covariance_for_unsupported_method():
    with pytest.raises(NotImplementedError):
        Poisson(4.0).parameter_covariance(10, EstimationMethod.METHOD_OF_LINEAR_MOMENTS)
