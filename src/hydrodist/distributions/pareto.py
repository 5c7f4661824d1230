"""
Pareto (type I) distribution.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from ..config import DistributionType, EstimationMethod
from ..statistics import product_moments
from .base import Estimator, UnivariateDistribution


class Pareto(UnivariateDistribution):
    """
    Pareto distribution with scale Xm (the lower bound) and shape α.

    Moments of order r exist only for α > r; the mean and standard
    deviation are +inf below their thresholds, skew and kurtosis NaN.
    """

    distribution_type = DistributionType.PARETO
    display_name = "Pareto"
    short_display_name = "PA"
    parameter_labels = ("Scale (Xm)", "Shape (α)")
    parameter_names_short = ("Xm", "α")

    def __init__(self, scale: float = 1.0, shape: float = 10.0):
        super().__init__(scale, shape)

    @property
    def scale(self) -> float:
        return self._parameters[0]

    @property
    def shape(self) -> float:
        return self._parameters[1]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        scale, shape = values
        if not np.isfinite(scale) or scale <= 0:
            return "scale must be positive"
        if not np.isfinite(shape) or shape <= 0:
            return "shape must be positive"
        return None

    def _pdf(self, x: float) -> float:
        if x < self.scale:
            return 0.0
        a = self.shape
        return a * self.scale ** a / x ** (a + 1.0)

    def _cdf(self, x: float) -> float:
        if x <= self.scale:
            return 0.0
        return 1.0 - (self.scale / x) ** self.shape

    def _inverse_cdf(self, p: float) -> float:
        return self.scale * (1.0 - p) ** (-1.0 / self.shape)

    def _mean(self) -> float:
        a = self.shape
        if a <= 1:
            return np.inf
        return a * self.scale / (a - 1.0)

    def _median(self) -> float:
        return self.scale * 2.0 ** (1.0 / self.shape)

    def _mode(self) -> float:
        return self.scale

    def _standard_deviation(self) -> float:
        a = self.shape
        if a <= 2:
            return np.inf
        return math.sqrt(self.scale ** 2 * a / ((a - 1.0) ** 2 * (a - 2.0)))

    def _skewness(self) -> float:
        a = self.shape
        if a <= 3:
            return np.nan
        return 2.0 * (1.0 + a) / (a - 3.0) * math.sqrt((a - 2.0) / a)

    def _kurtosis(self) -> float:
        a = self.shape
        if a <= 4:
            return np.nan
        return 3.0 + 6.0 * (a ** 3 + a ** 2 - 6.0 * a - 2.0) / (a * (a - 3.0) * (a - 4.0))

    def _minimum(self) -> float:
        return self.scale

    def _maximum(self) -> float:
        return np.inf

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {
            EstimationMethod.METHOD_OF_MOMENTS: self._fit_moments,
            EstimationMethod.MAXIMUM_LIKELIHOOD: self._fit_likelihood,
        }

    @staticmethod
    def _fit_moments(sample: np.ndarray):
        # Coefficient of variation gives α(α - 2) = (mean / sd)²
        mean, sd, _, _ = product_moments(sample)
        shape = 1.0 + math.sqrt(1.0 + (mean / sd) ** 2)
        return mean * (shape - 1.0) / shape, shape

    @staticmethod
    def _fit_likelihood(sample: np.ndarray):
        scale = float(np.min(sample))
        if scale <= 0:
            return scale, np.nan
        total = float(np.sum(np.log(sample / scale)))
        shape = sample.size / total if total > 0 else np.inf
        return scale, shape
