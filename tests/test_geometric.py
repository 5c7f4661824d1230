"""
Tests for the geometric distribution.
"""

import math

import numpy as np
import pytest

from hydrodist import Geometric


def test_reference_values():
    g = Geometric(0.42)
    assert g.mean == pytest.approx(1.3809523809523812, abs=1e-10)
    assert g.median == 1.0
    assert g.mode == 0.0
    assert g.standard_deviation == pytest.approx(math.sqrt(3.2879818594104315), abs=1e-10)
    assert g.skewness == pytest.approx(2.0746, abs=1e-4)
    assert g.kurtosis == pytest.approx(9.3041, abs=1e-4)
    assert g.pdf(2.0) == pytest.approx(0.141288, abs=1e-10)
    assert g.cdf(2.0) == pytest.approx(0.804888, abs=1e-10)
    assert g.inverse_cdf(0.05) == 0.0
    assert g.inverse_cdf(0.95) == 5.0


def test_mass_is_zero_off_the_integers():
    g = Geometric(0.42)
    assert g.pdf(1.5) == 0.0
    assert g.pdf(-1.0) == 0.0
    assert g.cdf(1.5) == g.cdf(1.0)


def test_quantile_is_smallest_k_with_cdf_at_least_p():
    g = Geometric(0.3)
    for p in [0.01, 0.31, 0.51, 0.9, 0.999]:
        k = g.inverse_cdf(p)
        assert g.cdf(k) >= p - 1e-12
        if k > 0:
            assert g.cdf(k - 1.0) < p


def test_certain_success():
    g = Geometric(1.0)
    assert g.parameters_valid
    assert g.mean == 0.0
    assert g.inverse_cdf(0.7) == 0.0
    assert g.median == 0.0
    assert np.isnan(g.skewness)


@pytest.mark.parametrize("p", [0.0, -0.1, 1.1, np.nan])
def test_invalid(p):
    assert not Geometric(p).parameters_valid


@pytest.mark.parametrize("method", ["moments", "mle"])
def test_fit(method):
    g = Geometric()
    g.estimate([0.0, 1.0, 2.0, 3.0], method)
    assert g.probability == pytest.approx(0.4)


def test_central_moments_match_closed_form():
    g = Geometric(0.42)
    moments = g.central_moments()
    assert moments[0] == pytest.approx(g.mean, rel=1e-6)
    assert moments[1] == pytest.approx(g.standard_deviation, rel=1e-6)
