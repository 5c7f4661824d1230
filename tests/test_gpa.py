"""
Tests for the Generalized Pareto distribution.

Threshold-exceedance references follow Rao, A.R., Hamed, K.H. (2000).
Flood Frequency Analysis, section 8.3.
"""

import math

import numpy as np
import pytest

from hydrodist import EstimationMethod, GeneralizedPareto
from hydrodist.distributions.gpa import skew_from_shape


class TestGPAEstimation:

    def test_method_of_moments(self, threshold_exceedances):
        gpa = GeneralizedPareto()
        gpa.estimate(threshold_exceedances, EstimationMethod.METHOD_OF_MOMENTS)
        x, a, k = gpa.get_parameters()
        assert x == pytest.approx(50169.23, rel=1e-3)
        assert a == pytest.approx(55443.0, rel=1e-3)
        assert k == pytest.approx(0.0956, rel=1e-3)

    def test_modified_method_of_moments(self, threshold_exceedances):
        x, a, k = GeneralizedPareto.modified_method_of_moments(threshold_exceedances)
        assert x == pytest.approx(50203.04, rel=1e-3)
        assert a == pytest.approx(55365.72, rel=1e-3)
        assert k == pytest.approx(0.0948, rel=1e-2)

    def test_linear_moments(self, annual_maxima_31):
        gpa = GeneralizedPareto()
        gpa.estimate(annual_maxima_31, EstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        x, a, k = gpa.get_parameters()
        assert x == pytest.approx(1285.909, abs=1e-3)
        assert a == pytest.approx(589.7772, abs=1e-3)
        assert k == pytest.approx(0.6251903, abs=1e-3)

        lmom = gpa.linear_moments_from_parameters(gpa.get_parameters())
        assert lmom[0] == pytest.approx(1648.806, abs=1e-3)
        assert lmom[1] == pytest.approx(138.2366, abs=1e-3)
        assert lmom[2] == pytest.approx(0.1033903, abs=1e-3)
        assert lmom[3] == pytest.approx(0.03073215, abs=1e-3)

    def test_maximum_likelihood(self, threshold_exceedances):
        gpa = GeneralizedPareto()
        gpa.estimate(threshold_exceedances, EstimationMethod.MAXIMUM_LIKELIHOOD)
        x, a, k = gpa.get_parameters()
        assert x == pytest.approx(50400.0)
        assert a == pytest.approx(55142.29, rel=1e-2)
        assert k == pytest.approx(0.0945, rel=1e-2)

    def test_moment_fit_needs_attainable_skew(self):
        gpa = GeneralizedPareto(100.0, 10.0, 0.0)
        with pytest.raises(ValueError):
            gpa.estimate(np.arange(1.0, 11.0), EstimationMethod.METHOD_OF_MOMENTS)
        np.testing.assert_array_equal(gpa.get_parameters(), [100.0, 10.0, 0.0])


class TestGPAValues:

    def test_quantile(self):
        gpa = GeneralizedPareto(50203.04, 55365.72, 0.0948)
        q100 = gpa.inverse_cdf(0.99)
        assert q100 == pytest.approx(256803.0, rel=1e-4)
        assert gpa.cdf(q100) == pytest.approx(0.99, abs=1e-12)

    def test_exponential_limit(self):
        gpa = GeneralizedPareto(0.0, 1.0, 0.0)
        assert gpa.mean == pytest.approx(1.0)
        assert gpa.standard_deviation == pytest.approx(1.0)
        assert gpa.skewness == pytest.approx(2.0)
        assert gpa.kurtosis == pytest.approx(9.0)
        assert gpa.mode == 0.0
        assert gpa.cdf(1.0) == pytest.approx(1.0 - math.exp(-1.0))
        assert skew_from_shape(0.0) == pytest.approx(2.0)

    def test_upper_bound(self):
        gpa = GeneralizedPareto(0.0, 1.0, 0.5)
        assert gpa.maximum == pytest.approx(2.0)
        assert gpa.cdf(3.0) == 1.0
        assert gpa.pdf(3.0) == 0.0
        assert gpa.cdf(-1.0) == 0.0
        assert gpa.pdf(-1.0) == 0.0
        assert GeneralizedPareto(0.0, 1.0, 2.0).mode == pytest.approx(0.5)

    def test_moment_existence(self):
        assert GeneralizedPareto(0.0, 1.0, -1.0).mean == np.inf
        assert np.isnan(GeneralizedPareto(0.0, 1.0, -0.5).standard_deviation)
        assert np.isnan(GeneralizedPareto(0.0, 1.0, 0.4).skewness)
        assert np.isnan(GeneralizedPareto(0.0, 1.0, -0.3).kurtosis)

    @pytest.mark.parametrize("parameters", [
        (np.nan, 1.0, 0.0),
        (0.0, 0.0, 0.0),
        (0.0, -1.0, 0.1),
    ])
    def test_invalid(self, parameters):
        assert not GeneralizedPareto(*parameters).parameters_valid

    def test_linear_moments_round_trip(self):
        params = [10.0, 3.0, -0.2]
        lmom = GeneralizedPareto.linear_moments_from_parameters(params)
        np.testing.assert_allclose(GeneralizedPareto.parameters_from_linear_moments(lmom), params)


class TestGPAUncertainty:

    def test_partial_derivatives(self):
        gpa = GeneralizedPareto(50203.04, 55365.72, 0.0948)
        partials = gpa.partial_derivatives(0.99)
        assert partials[0] == 1.0
        assert partials[1] == pytest.approx(3.7315488, rel=1e-6)
        assert partials[2] == pytest.approx(-441209.53, rel=1e-6)

    def test_analytic_derivatives_match_numerical(self):
        gpa = GeneralizedPareto(50203.04, 55365.72, 0.0948)
        numerical = super(GeneralizedPareto, gpa).partial_derivatives(0.9)
        np.testing.assert_allclose(gpa.partial_derivatives(0.9), numerical, rtol=1e-5)

    def test_standard_error_method_of_moments(self):
        gpa = GeneralizedPareto(50203.04, 55365.72, 0.0948)
        variance = gpa.quantile_variance(0.99, 281, EstimationMethod.METHOD_OF_MOMENTS)
        assert math.sqrt(variance) == pytest.approx(16657.0, rel=1e-3)

    def test_standard_error_maximum_likelihood(self):
        gpa = GeneralizedPareto(50400.0, 55142.29, 0.0945)
        variance = gpa.quantile_variance(0.99, 281, EstimationMethod.MAXIMUM_LIKELIHOOD)
        assert math.sqrt(variance) == pytest.approx(15938.0, rel=1e-3)

    def test_covariance_structure(self):
        gpa = GeneralizedPareto(50400.0, 55142.29, 0.0945)
        cov = gpa.parameter_covariance(281, 'mle')
        assert cov[0, 1] == 0.0 and cov[0, 2] == 0.0
        assert cov[1, 2] == cov[2, 1]
        assert cov[2, 2] == pytest.approx((1.0 - 0.0945) ** 2 / 281.0)

    def test_covariance_for_linear_moments_is_not_available(self):
        with pytest.raises(NotImplementedError):
            GeneralizedPareto().parameter_covariance(100, 'lmoments')
