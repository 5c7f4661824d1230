"""
Chi-squared distribution with integer degrees of freedom.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

import numpy as np

from ..config import DistributionType, EstimationMethod
from ..special import gamma_quantile_guess, incomplete_gamma_lower, log_gamma
from .base import Estimator, UnivariateDistribution


class ChiSquared(UnivariateDistribution):
    """
    Chi-squared distribution with ν degrees of freedom.

    Non-integer input is truncated toward zero when stored.
    """

    distribution_type = DistributionType.CHI_SQUARED
    display_name = "Chi-Squared"
    short_display_name = "χ²"
    parameter_labels = ("Degrees of Freedom (ν)",)
    parameter_names_short = ("ν",)
    integer_parameters = (0,)

    def __init__(self, degrees_of_freedom: float = 10):
        super().__init__(degrees_of_freedom)

    @property
    def degrees_of_freedom(self) -> float:
        return self._parameters[0]

    def _normalize_parameters(self, values: np.ndarray) -> np.ndarray:
        return np.where(np.isfinite(values), np.trunc(values), values)

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        if not np.isfinite(values[0]) or values[0] < 1:
            return "degrees of freedom must be an integer >= 1"
        return None

    def _pdf(self, x: float) -> float:
        if x < 0:
            return 0.0
        k = 0.5 * self.degrees_of_freedom
        if x == 0:
            if k < 1:
                return np.inf
            return 0.5 if k == 1 else 0.0
        return math.exp(
            (k - 1.0) * math.log(x) - 0.5 * x - k * math.log(2.0) - log_gamma(k)
        )

    def _cdf(self, x: float) -> float:
        if x <= 0:
            return 0.0
        return incomplete_gamma_lower(0.5 * self.degrees_of_freedom, 0.5 * x)

    def _quantile_start(self, p: float) -> Tuple[float, float]:
        start = 2.0 * gamma_quantile_guess(0.5 * self.degrees_of_freedom, p)
        return start, self._standard_deviation()

    def _mean(self) -> float:
        return self.degrees_of_freedom

    def _mode(self) -> float:
        return max(self.degrees_of_freedom - 2.0, 0.0)

    def _standard_deviation(self) -> float:
        return math.sqrt(2.0 * self.degrees_of_freedom)

    def _skewness(self) -> float:
        return math.sqrt(8.0 / self.degrees_of_freedom)

    def _kurtosis(self) -> float:
        return 3.0 + 12.0 / self.degrees_of_freedom

    def _minimum(self) -> float:
        return 0.0

    def _maximum(self) -> float:
        return np.inf

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {EstimationMethod.METHOD_OF_MOMENTS: self._fit_moments}

    @staticmethod
    def _fit_moments(sample: np.ndarray):
        return (max(1.0, round(float(np.mean(sample)))),)
