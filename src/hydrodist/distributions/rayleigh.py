"""
Rayleigh distribution.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Union

import numpy as np

from ..config import DistributionType, EstimationMethod
from ..special import log_gamma
from .base import Estimator, UnivariateDistribution, as_estimation_method


class Rayleigh(UnivariateDistribution):
    """Rayleigh distribution with scale σ."""

    distribution_type = DistributionType.RAYLEIGH
    display_name = "Rayleigh"
    short_display_name = "R"
    parameter_labels = ("Scale (σ)",)
    parameter_names_short = ("σ",)

    def __init__(self, scale: float = 10.0):
        super().__init__(scale)

    @property
    def scale(self) -> float:
        return self._parameters[0]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        if not np.isfinite(values[0]) or values[0] <= 0:
            return "scale must be positive"
        return None

    def _pdf(self, x: float) -> float:
        if x < 0:
            return 0.0
        s2 = self.scale ** 2
        return x / s2 * math.exp(-x * x / (2.0 * s2))

    def _cdf(self, x: float) -> float:
        if x <= 0:
            return 0.0
        return 1.0 - math.exp(-x * x / (2.0 * self.scale ** 2))

    def _inverse_cdf(self, p: float) -> float:
        return self.scale * math.sqrt(-2.0 * math.log(1.0 - p))

    def _mean(self) -> float:
        return self.scale * math.sqrt(math.pi / 2.0)

    def _median(self) -> float:
        return self.scale * math.sqrt(math.log(4.0))

    def _mode(self) -> float:
        return self.scale

    def _standard_deviation(self) -> float:
        return self.scale * math.sqrt((4.0 - math.pi) / 2.0)

    def _skewness(self) -> float:
        return 2.0 * math.sqrt(math.pi) * (math.pi - 3.0) / (4.0 - math.pi) ** 1.5

    def _kurtosis(self) -> float:
        pi = math.pi
        return 3.0 + (-6.0 * pi ** 2 + 24.0 * pi - 16.0) / (4.0 - pi) ** 2

    def _minimum(self) -> float:
        return 0.0

    def _maximum(self) -> float:
        return np.inf

    # -------------------------------------------------------------------------
    # Estimation and uncertainty
    # -------------------------------------------------------------------------

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {
            EstimationMethod.METHOD_OF_MOMENTS: self._fit_moments,
            EstimationMethod.MAXIMUM_LIKELIHOOD: self._fit_likelihood,
        }

    @staticmethod
    def _fit_moments(sample: np.ndarray):
        return (float(np.mean(sample)) / math.sqrt(math.pi / 2.0),)

    @staticmethod
    def _fit_likelihood(sample: np.ndarray):
        """Bias-corrected maximum likelihood estimate of σ."""
        n = sample.size
        biased = math.sqrt(float(np.sum(sample ** 2)) / (2.0 * n))
        correction = math.exp(log_gamma(n) - log_gamma(n + 0.5)) * math.sqrt(n)
        return (biased * correction,)

    def partial_derivatives(self, probability: float) -> np.ndarray:
        self._check_probability(probability)
        if not self._parameters_valid:
            return np.full(1, np.nan)
        return np.array([math.sqrt(-2.0 * math.log(1.0 - probability))])

    def parameter_covariance(
        self,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> np.ndarray:
        """Asymptotic variance σ²/(4n) of the maximum likelihood estimate."""
        method = as_estimation_method(method)
        if method != EstimationMethod.MAXIMUM_LIKELIHOOD:
            return super().parameter_covariance(sample_size, method)
        return np.array([[self.scale ** 2 / (4.0 * sample_size)]])
