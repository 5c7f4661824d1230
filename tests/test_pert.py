"""
Tests for the PERT family.

The percentile solvers are underdetermined (four beta parameters, three
targets), so their fits are checked for reproduction of the targets and
ordering rather than exact parameter values.
"""

import math

import numpy as np
import pytest

from hydrodist import EstimationMethod, Pert, PertPercentile, PertPercentileZ
from hydrodist.statistics import percentile


class TestPert:

    def test_three_point_estimate(self):
        pert = Pert(0.0, 0.25, 1.0)
        assert pert.mean == pytest.approx(1.0 / 3.0)
        assert pert.median == pytest.approx(0.3125)
        assert pert.mode == 0.25
        assert pert.standard_deviation == pytest.approx(math.sqrt(2.0 / 63.0))
        assert pert.minimum == 0.0
        assert pert.maximum == 1.0
        assert pert.cdf(pert.inverse_cdf(0.7)) == pytest.approx(0.7, abs=1e-9)

    def test_point_mass(self):
        pert = Pert(5.0, 5.0, 5.0)
        assert pert.parameters_valid
        assert pert.is_point_mass
        assert pert.cdf(4.9) == 0.0
        assert pert.cdf(5.0) == 1.0
        assert pert.inverse_cdf(0.3) == 5.0
        assert pert.pdf(5.0) == 0.0
        assert pert.mean == 5.0
        assert pert.standard_deviation == 0.0
        assert np.isnan(pert.skewness)

    @pytest.mark.parametrize("parameters", [(1.0, 0.5, 0.0), (0.0, 2.0, 1.0), (0.0, np.nan, 1.0)])
    def test_invalid(self, parameters):
        assert not Pert(*parameters).parameters_valid

    def test_fit_by_percentiles(self):
        sample = Pert(0.0, 3.0, 10.0).generate_random_values(2000, seed=2024)
        pert = Pert()
        pert.estimate(sample, EstimationMethod.METHOD_OF_PERCENTILES)
        assert pert.parameters_valid
        assert pert.minimum <= percentile(sample, 0.05) + 0.5
        assert pert.maximum >= percentile(sample, 0.95) - 0.5
        assert pert.minimum <= pert.mode <= pert.maximum

    def test_moment_fit_unsupported(self):
        with pytest.raises(NotImplementedError):
            Pert().estimate([1.0, 2.0, 3.0], EstimationMethod.METHOD_OF_MOMENTS)


class TestPertPercentile:

    def test_reproduces_percentiles(self):
        dist = PertPercentile(2.0, 5.0, 9.0)
        assert dist.inverse_cdf(0.05) == pytest.approx(2.0, abs=0.25)
        assert dist.median == pytest.approx(5.0, abs=0.25)
        assert dist.inverse_cdf(0.95) == pytest.approx(9.0, abs=0.25)
        assert dist.minimum < dist.inverse_cdf(0.05) < dist.median
        assert dist.median < dist.inverse_cdf(0.95) < dist.maximum
        assert dist.cdf(dist.inverse_cdf(0.3)) == pytest.approx(0.3, abs=1e-8)

    def test_allowable_range(self):
        dist = PertPercentile(2.0, 5.0, 9.0, min_allowable_value=1.5, max_allowable_value=9.5)
        assert dist.minimum >= 1.5
        assert dist.maximum <= 9.5
        assert dist.inverse_cdf(0.0) >= 1.5

    def test_point_mass(self):
        dist = PertPercentile(3.0, 3.0, 3.0)
        assert dist.solved_beta is None
        assert dist.inverse_cdf(0.8) == 3.0
        assert dist.cdf(2.9) == 0.0
        assert dist.cdf(3.0) == 1.0
        assert dist.standard_deviation == 0.0
        np.testing.assert_array_equal(dist.to_pert().get_parameters(), [3.0, 3.0, 3.0])

    def test_resolves_after_parameter_change(self):
        dist = PertPercentile(2.0, 5.0, 9.0)
        first = dist.median
        dist.set_parameters(20.0, 50.0, 90.0)
        assert dist.median == pytest.approx(50.0, abs=2.5)
        assert dist.median != first

    def test_invalid(self):
        assert not PertPercentile(5.0, 1.0, 9.0).parameters_valid
        assert not PertPercentile(9.0, 5.0, 1.0).parameters_valid

    def test_options_round_trip(self):
        dist = PertPercentile(2.0, 5.0, 9.0, min_allowable_value=0.0)
        data = dist.to_dict()
        assert data['options']['min_allowable_value'] == 0.0
        rebuilt = PertPercentile.from_dict(data)
        assert rebuilt.min_allowable_value == 0.0
        assert rebuilt.max_allowable_value == np.inf
        np.testing.assert_array_equal(rebuilt.get_parameters(), dist.get_parameters())


class TestPertPercentileZ:

    def test_reproduces_probabilities(self):
        dist = PertPercentileZ(0.1, 0.3, 0.6)
        assert dist.median == pytest.approx(0.3, abs=0.03)
        assert 0.0 < dist.inverse_cdf(0.05) < dist.median < dist.inverse_cdf(0.95) < 1.0
        assert dist.cdf(0.0) == 0.0
        assert dist.cdf(1.0) == 1.0

    def test_density_includes_change_of_variables(self):
        dist = PertPercentileZ(0.1, 0.3, 0.6)
        x, h = dist.median, 1e-5
        slope = (dist.cdf(x + h) - dist.cdf(x - h)) / (2.0 * h)
        assert dist.pdf(x) == pytest.approx(slope, rel=1e-3)

    def test_mean_is_a_probability(self):
        dist = PertPercentileZ(0.1, 0.3, 0.6)
        assert 0.1 < dist.mean < 0.6

    def test_invalid(self):
        assert not PertPercentileZ(0.1, 0.3, 1.2).parameters_valid
        assert not PertPercentileZ(-0.1, 0.3, 0.6).parameters_valid
