"""
Geometric distribution counting failures before the first success.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from ..config import DistributionType, EstimationMethod
from .base import Estimator, UnivariateDistribution


class Geometric(UnivariateDistribution):
    """Geometric distribution on k = 0, 1, 2, ... with success probability p."""

    distribution_type = DistributionType.GEOMETRIC
    display_name = "Geometric"
    short_display_name = "Geo"
    parameter_labels = ("Probability (p)",)
    parameter_names_short = ("p",)
    is_discrete = True

    def __init__(self, probability: float = 0.5):
        super().__init__(probability)

    @property
    def probability(self) -> float:
        return self._parameters[0]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        if not np.isfinite(values[0]) or not 0.0 < values[0] <= 1.0:
            return "probability must be in (0, 1]"
        return None

    def _pdf(self, x: float) -> float:
        if x < 0 or x != math.floor(x):
            return 0.0
        p = self.probability
        return p * (1.0 - p) ** x

    def _cdf(self, x: float) -> float:
        if x < 0:
            return 0.0
        return 1.0 - (1.0 - self.probability) ** (math.floor(x) + 1.0)

    def _inverse_cdf(self, p: float) -> float:
        if self.probability == 1.0:
            return 0.0
        k = math.ceil(math.log(1.0 - p) / math.log(1.0 - self.probability)) - 1.0
        return max(k, 0.0)

    def _mean(self) -> float:
        p = self.probability
        return (1.0 - p) / p

    def _median(self) -> float:
        p = self.probability
        if p == 1.0:
            return 0.0
        return max(math.ceil(-1.0 / math.log2(1.0 - p)) - 1.0, 0.0)

    def _mode(self) -> float:
        return 0.0

    def _standard_deviation(self) -> float:
        p = self.probability
        return math.sqrt(1.0 - p) / p

    def _skewness(self) -> float:
        p = self.probability
        if p == 1.0:
            return np.nan
        return (2.0 - p) / math.sqrt(1.0 - p)

    def _kurtosis(self) -> float:
        p = self.probability
        if p == 1.0:
            return np.nan
        return 9.0 + p * p / (1.0 - p)

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
        # Moment and likelihood estimates coincide
        return (1.0 / (1.0 + float(np.mean(sample))),)
