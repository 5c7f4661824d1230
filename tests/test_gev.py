"""
Tests for the Generalized Extreme Value distribution.

Fitting and standard-error references follow Rao, A.R., Hamed, K.H.
(2000). Flood Frequency Analysis, examples 7.1.1 to 7.1.3.
"""

import math

import numpy as np
import pytest

from hydrodist import EstimationMethod, GeneralizedExtremeValue
from hydrodist.config import EULER
from hydrodist.distributions.gev import GUMBEL_SKEW, shape_from_skew, skew_from_shape
from hydrodist.statistics import linear_moments


class TestGEVEstimation:

    def test_method_of_moments(self, white_river):
        gev = GeneralizedExtremeValue()
        gev.estimate(white_river, EstimationMethod.METHOD_OF_MOMENTS)
        x, a, k = gev.get_parameters()
        assert x == pytest.approx(11012.0, rel=1e-3)
        assert a == pytest.approx(6209.4, rel=1e-3)
        assert k == pytest.approx(0.0736, rel=1e-2)

    def test_linear_moments(self, annual_maxima_31):
        gev = GeneralizedExtremeValue()
        gev.estimate(annual_maxima_31, EstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        x, a, k = gev.get_parameters()
        assert x == pytest.approx(1543.933, abs=1e-3)
        assert a == pytest.approx(218.1148, abs=1e-3)
        assert k == pytest.approx(0.1068473, abs=1e-3)

        lmom = gev.linear_moments_from_parameters(gev.get_parameters())
        assert lmom[0] == pytest.approx(1648.806, abs=1e-3)
        assert lmom[1] == pytest.approx(138.2366, abs=1e-3)
        assert lmom[2] == pytest.approx(0.1030703, abs=1e-3)
        assert lmom[3] == pytest.approx(0.1277244, abs=1e-3)

    def test_linear_moments_reproduce_the_sample(self, annual_maxima_31):
        gev = GeneralizedExtremeValue()
        gev.estimate(annual_maxima_31, 'lmoments')
        fitted = gev.linear_moments_from_parameters(gev.get_parameters())
        np.testing.assert_allclose(fitted[:3], linear_moments(annual_maxima_31)[:3], atol=1e-3)

    def test_maximum_likelihood(self, white_river):
        gev = GeneralizedExtremeValue()
        gev.estimate(white_river, EstimationMethod.MAXIMUM_LIKELIHOOD)
        x, a, k = gev.get_parameters()
        assert x == pytest.approx(10849.0, rel=1e-2)
        assert a == pytest.approx(5745.6, rel=1e-2)
        assert k == pytest.approx(0.005, abs=5e-4)

        seed = GeneralizedExtremeValue()
        seed.estimate(white_river, 'lmoments')
        assert gev.log_likelihood(white_river) >= seed.log_likelihood(white_river)

    def test_failed_estimate_keeps_parameters(self):
        gev = GeneralizedExtremeValue(100.0, 10.0, 0.0)
        sample = np.zeros(200)
        sample[0] = 1.0
        with pytest.raises(ValueError):
            gev.estimate(sample, EstimationMethod.METHOD_OF_MOMENTS)
        np.testing.assert_array_equal(gev.get_parameters(), [100.0, 10.0, 0.0])


class TestGEVShapeRelations:

    def test_gumbel_skew(self):
        assert skew_from_shape(0.0) == GUMBEL_SKEW
        assert shape_from_skew(GUMBEL_SKEW) == 0.0

    @pytest.mark.parametrize("kappa", [-0.2, -0.1, 0.0736, 0.2, 0.3])
    def test_shape_from_skew_inverts_skew(self, kappa):
        assert shape_from_skew(skew_from_shape(kappa)) == pytest.approx(kappa, abs=2e-3)

    @pytest.mark.parametrize("skew", [-1.5, -0.5])
    def test_negative_skews_are_solved_exactly(self, skew):
        assert skew_from_shape(shape_from_skew(skew)) == pytest.approx(skew, abs=1e-6)

    @pytest.mark.parametrize("skew", [10.0, np.nan])
    def test_unattainable_skew(self, skew):
        with pytest.raises(ValueError):
            shape_from_skew(skew)

    def test_gumbel_linear_moments(self):
        lmom = GeneralizedExtremeValue.linear_moments_from_parameters([100.0, 10.0, 0.0])
        assert lmom[0] == pytest.approx(100.0 + 10.0 * EULER)
        assert lmom[1] == pytest.approx(10.0 * math.log(2.0))
        assert lmom[2] == pytest.approx(0.169925, abs=1e-6)
        assert lmom[3] == pytest.approx(0.150375, abs=1e-6)

    def test_linear_moments_need_shape_above_minus_one(self):
        with pytest.raises(ValueError):
            GeneralizedExtremeValue.linear_moments_from_parameters([0.0, 1.0, -1.0])

    def test_moments_round_trip(self):
        gev = GeneralizedExtremeValue()
        moments = gev.moments_from_parameters([11011.5, 6209.28, 0.073614])
        np.testing.assert_allclose(
            gev.parameters_from_moments(moments), [11011.5, 6209.28, 0.073614], rtol=1e-2
        )


class TestGEVValues:

    def test_quantile(self):
        gev = GeneralizedExtremeValue(10849.0, 5745.6, 0.005)
        q100 = gev.inverse_cdf(0.99)
        assert q100 == pytest.approx(36977.0, rel=1e-3)
        assert gev.cdf(q100) == pytest.approx(0.99, abs=1e-12)

    def test_gumbel_limit(self):
        gev = GeneralizedExtremeValue()
        assert gev.mean == pytest.approx(100.0 + 10.0 * EULER)
        assert gev.median == pytest.approx(103.66512, abs=1e-5)
        assert gev.mode == 100.0
        assert gev.standard_deviation == pytest.approx(12.825498, abs=1e-5)
        assert gev.skewness == GUMBEL_SKEW
        assert gev.kurtosis == pytest.approx(5.4)
        assert gev.minimum == -np.inf
        assert gev.maximum == np.inf
        assert gev.pdf(0.0) == 0.0
        assert gev.cdf(100.0) == pytest.approx(0.367879, abs=1e-6)
        assert gev.cdf(200.0) == pytest.approx(0.9999546, abs=1e-7)
        assert gev.inverse_cdf(0.0) == -np.inf
        assert gev.inverse_cdf(0.5) == pytest.approx(103.66512, abs=1e-5)
        assert gev.inverse_cdf(1.0) == np.inf

    def test_bounded_shapes(self):
        gev = GeneralizedExtremeValue(100, 10, 1)
        assert gev.mode == pytest.approx(95.0)
        assert gev.maximum == pytest.approx(110.0)
        assert gev.pdf(0.0) == pytest.approx(1.67017007902456e-06, abs=1e-12)
        assert gev.cdf(100.0) == pytest.approx(0.367879, abs=1e-6)
        assert gev.cdf(200.0) == 1.0
        assert np.isnan(gev.standard_deviation)
        assert np.isnan(gev.skewness)
        assert np.isnan(gev.kurtosis)
        assert GeneralizedExtremeValue(100, 10, -5).minimum == pytest.approx(98.0)

    def test_moment_existence(self):
        assert GeneralizedExtremeValue(100, 10, 0.9).mean == pytest.approx(100.42482, abs=1e-5)
        assert GeneralizedExtremeValue(100, 10, 0.9).median == pytest.approx(104.3419519, abs=1e-6)
        assert np.isnan(GeneralizedExtremeValue(100, 10, 10).mean)
        assert GeneralizedExtremeValue(100, 10, 0.49).standard_deviation == pytest.approx(
            9.280883, abs=1e-5
        )
        assert GeneralizedExtremeValue(100, 10, 0.3).skewness == pytest.approx(-0.068742, abs=1e-5)
        assert GeneralizedExtremeValue(100, 10, 0.24).kurtosis == pytest.approx(2.765961, abs=1e-5)

    @pytest.mark.parametrize("parameters", [
        (np.nan, np.nan, np.nan),
        (np.inf, np.inf, np.inf),
        (100.0, 0.0, 1.0),
    ])
    def test_invalid(self, parameters):
        gev = GeneralizedExtremeValue(*parameters)
        assert not gev.parameters_valid
        assert np.isnan(gev.inverse_cdf(0.5))

    def test_parameters_to_string(self):
        assert GeneralizedExtremeValue().parameters_to_string() == [
            ("Location (ξ)", "100"),
            ("Scale (α)", "10"),
            ("Shape (κ)", "0"),
        ]


class TestGEVUncertainty:
    """Rao and Hamed, example 7.1.3."""

    @pytest.fixture
    def gev(self):
        return GeneralizedExtremeValue(10849.0, 5745.6, 0.005)

    def test_partial_derivatives(self, gev):
        partials = gev.partial_derivatives(0.99)
        assert partials[0] == pytest.approx(1.0)
        assert partials[1] == pytest.approx(4.547649, rel=1e-4)
        assert partials[2] == pytest.approx(-59868.2, rel=1e-4)

    def test_analytic_derivatives_match_numerical(self, gev):
        numerical = super(GeneralizedExtremeValue, gev).partial_derivatives(0.9)
        np.testing.assert_allclose(gev.partial_derivatives(0.9), numerical, rtol=1e-5)

    def test_gumbel_derivatives(self):
        gumbel = GeneralizedExtremeValue(100.0, 10.0, 0.0)
        ln_y = math.log(-math.log(0.99))
        np.testing.assert_allclose(
            gumbel.partial_derivatives(0.99), [1.0, -ln_y, -5.0 * ln_y ** 2]
        )

    def test_parameter_covariance(self, gev):
        cov = gev.parameter_covariance(62, EstimationMethod.MAXIMUM_LIKELIHOOD)
        assert cov[0, 0] == pytest.approx(664669.0, rel=1e-2)
        assert cov[1, 1] == pytest.approx(346400.0, rel=1e-2)
        assert cov[2, 2] == pytest.approx(0.007655, rel=1e-2)
        assert cov[0, 1] == pytest.approx(176180.0, rel=1e-2)
        assert cov[0, 2] == pytest.approx(23.977, rel=1e-2)
        assert cov[1, 2] == pytest.approx(13.8574, rel=1e-2)
        np.testing.assert_allclose(cov, cov.T)

    def test_quantile_variance(self, gev):
        variance = gev.quantile_variance(0.99, 62, 'mle')
        assert variance == pytest.approx(26445364.0, rel=1e-2)
        assert math.sqrt(variance) == pytest.approx(5142.0, rel=1e-2)

    def test_covariance_requires_likelihood(self, gev):
        with pytest.raises(NotImplementedError):
            gev.parameter_covariance(62, EstimationMethod.METHOD_OF_MOMENTS)

    def test_covariance_undefined_for_large_shape(self):
        cov = GeneralizedExtremeValue(100.0, 10.0, 0.6).parameter_covariance(50, 'mle')
        assert np.all(np.isnan(cov))

    def test_probability_domain(self, gev):
        with pytest.raises(ValueError):
            gev.partial_derivatives(1.0)

    def test_quantile_jacobian(self):
        gev = GeneralizedExtremeValue(22299.7822, 11080.8716, -0.0378)
        matrix, det = gev.quantile_jacobian([0.9, 0.99, 0.999])
        assert matrix.shape == (3, 3)
        np.testing.assert_allclose(matrix[:, 0], 1.0)
        np.testing.assert_allclose(matrix[1], gev.partial_derivatives(0.99))
        assert det == pytest.approx(np.linalg.det(matrix))
        assert det != 0.0

    def test_quantile_jacobian_size(self, gev):
        with pytest.raises(ValueError):
            gev.quantile_jacobian([0.9, 0.99])
