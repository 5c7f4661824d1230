"""
Poisson distribution.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Union

import numpy as np

from ..config import DistributionType, EstimationMethod
from ..special import incomplete_gamma_upper, log_gamma, standard_normal_z
from .base import Estimator, UnivariateDistribution, as_estimation_method


class Poisson(UnivariateDistribution):
    """Poisson distribution with rate λ."""

    distribution_type = DistributionType.POISSON
    display_name = "Poisson"
    short_display_name = "Pois"
    parameter_labels = ("Rate (λ)",)
    parameter_names_short = ("λ",)
    is_discrete = True

    def __init__(self, rate: float = 1.0):
        super().__init__(rate)

    @property
    def rate(self) -> float:
        return self._parameters[0]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        if not np.isfinite(values[0]) or values[0] <= 0:
            return "rate must be positive"
        return None

    def _pdf(self, x: float) -> float:
        if x < 0 or x != math.floor(x):
            return 0.0
        lam = self.rate
        return math.exp(-lam + x * math.log(lam) - log_gamma(x + 1.0))

    def _cdf(self, x: float) -> float:
        if x < 0:
            return 0.0
        return incomplete_gamma_upper(math.floor(x) + 1.0, self.rate)

    def _inverse_cdf(self, p: float) -> float:
        """Smallest k with cdf(k) >= p, searched from the normal approximation."""
        lam = self.rate
        k = max(0.0, math.floor(lam + standard_normal_z(p) * math.sqrt(lam)))
        if self._cdf(k) >= p:
            while k > 0 and self._cdf(k - 1.0) >= p:
                k -= 1.0
        else:
            while self._cdf(k) < p:
                k += 1.0
        return k

    def _mean(self) -> float:
        return self.rate

    def _median(self) -> float:
        lam = self.rate
        return math.floor(lam + 1.0 / 3.0 - 0.02 / lam)

    def _mode(self) -> float:
        return math.floor(self.rate)

    def _standard_deviation(self) -> float:
        return math.sqrt(self.rate)

    def _skewness(self) -> float:
        return 1.0 / math.sqrt(self.rate)

    def _kurtosis(self) -> float:
        return 3.0 + 1.0 / self.rate

    def _minimum(self) -> float:
        return 0.0

    def _maximum(self) -> float:
        return np.inf

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {
            EstimationMethod.METHOD_OF_MOMENTS: self._fit_mean,
            EstimationMethod.MAXIMUM_LIKELIHOOD: self._fit_mean,
        }

    @staticmethod
    def _fit_mean(sample: np.ndarray):
        return (float(np.mean(sample)),)

    def parameter_covariance(
        self,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> np.ndarray:
        """Variance of the sample-mean rate estimate, λ/n."""
        method = as_estimation_method(method)
        if method not in self._estimators():
            return super().parameter_covariance(sample_size, method)
        return np.array([[self.rate / sample_size]])
