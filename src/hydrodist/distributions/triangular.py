"""
Triangular distribution on [a, b] with mode c.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from ..config import DistributionType, EstimationMethod
from ..solvers import nelder_mead
from .base import Estimator, UnivariateDistribution


class Triangular(UnivariateDistribution):
    """Triangular distribution with minimum a, most likely value c and maximum b."""

    distribution_type = DistributionType.TRIANGULAR
    display_name = "Triangular"
    short_display_name = "TRI"
    parameter_labels = ("Min (a)", "Most Likely (c)", "Max (b)")
    parameter_names_short = ("a", "c", "b")

    def __init__(self, minimum: float = 0.0, most_likely: float = 0.5, maximum: float = 1.0):
        super().__init__(minimum, most_likely, maximum)

    @property
    def most_likely(self) -> float:
        return self._parameters[1]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        a, c, b = values
        if not np.all(np.isfinite(values)):
            return "parameters must be finite numbers"
        if a >= b:
            return "min must be less than max"
        if not a <= c <= b:
            return "most likely value must lie between min and max"
        return None

    def _pdf(self, x: float) -> float:
        a, c, b = self._parameters
        if x < a or x > b:
            return 0.0
        if x < c:
            return 2.0 * (x - a) / ((b - a) * (c - a))
        if x == c:
            return 2.0 / (b - a)
        return 2.0 * (b - x) / ((b - a) * (b - c))

    def _cdf(self, x: float) -> float:
        a, c, b = self._parameters
        if x <= a:
            return 0.0
        if x <= c:
            return (x - a) ** 2 / ((b - a) * (c - a))
        if x < b:
            return 1.0 - (b - x) ** 2 / ((b - a) * (b - c))
        return 1.0

    def _inverse_cdf(self, p: float) -> float:
        a, c, b = self._parameters
        if p < (c - a) / (b - a):
            return a + math.sqrt(p * (b - a) * (c - a))
        return b - math.sqrt((1.0 - p) * (b - a) * (b - c))

    def _spread(self) -> float:
        a, c, b = self._parameters
        return a * a + b * b + c * c - a * b - a * c - b * c

    def _mean(self) -> float:
        return float(np.sum(self._parameters)) / 3.0

    def _mode(self) -> float:
        return self.most_likely

    def _standard_deviation(self) -> float:
        return math.sqrt(self._spread() / 18.0)

    def _skewness(self) -> float:
        a, c, b = self._parameters
        return (
            math.sqrt(2.0) * (a + b - 2.0 * c) * (2.0 * a - b - c) * (a - 2.0 * b + c)
            / (5.0 * self._spread() ** 1.5)
        )

    def _kurtosis(self) -> float:
        return 2.4

    def _minimum(self) -> float:
        return self._parameters[0]

    def _maximum(self) -> float:
        return self._parameters[2]

    # -------------------------------------------------------------------------
    # Estimation
    # -------------------------------------------------------------------------

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {
            EstimationMethod.METHOD_OF_MOMENTS: self._fit_moments,
            EstimationMethod.MAXIMUM_LIKELIHOOD: self._fit_likelihood,
        }

    @staticmethod
    def _fit_moments(sample: np.ndarray):
        low, high = float(np.min(sample)), float(np.max(sample))
        mode = 3.0 * float(np.mean(sample)) - low - high
        return low, min(max(mode, low), high), high

    def _fit_likelihood(self, sample: np.ndarray):
        """
        Likelihood over the mode with the end points fixed just outside the
        sample extremes, so every observation has positive density.
        """
        low, high = float(np.min(sample)), float(np.max(sample))
        widen = (high - low) / (sample.size - 1.0)
        a, b = low - widen, high + widen
        _, seed, _ = self._fit_moments(sample)
        trial = Triangular(a, seed, b)

        def log_likelihood(theta: np.ndarray) -> float:
            trial.set_parameters(a, theta[0], b)
            return trial.log_likelihood(sample)

        best = nelder_mead(log_likelihood, [seed], lower=[a], upper=[b], maximize=True)
        return a, float(best[0]), b
