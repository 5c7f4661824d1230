"""
Cauchy distribution.

Heavy-tailed location-scale family with no finite moments; median and
mode equal the location.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from ..config import DistributionType, EPSILON, EstimationMethod
from ..solvers import nelder_mead
from ..statistics import percentile
from .base import MOMENT_TAIL_PROBABILITY, Estimator, UnivariateDistribution


class Cauchy(UnivariateDistribution):
    """Cauchy distribution with location X0 and scale γ."""

    distribution_type = DistributionType.CAUCHY
    display_name = "Cauchy"
    short_display_name = "C"
    parameter_labels = ("Location (X0)", "Scale (γ)")
    parameter_names_short = ("X0", "γ")

    def __init__(self, location: float = 0.0, scale: float = 1.0):
        super().__init__(location, scale)

    @property
    def location(self) -> float:
        return self._parameters[0]

    @property
    def scale(self) -> float:
        return self._parameters[1]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        location, scale = values
        if not np.isfinite(location):
            return "location must be a finite number"
        if not np.isfinite(scale) or scale <= 0:
            return "scale must be positive"
        return None

    def _pdf(self, x: float) -> float:
        z = (x - self.location) / self.scale
        return 1.0 / (math.pi * self.scale * (1.0 + z * z))

    def _cdf(self, x: float) -> float:
        return math.atan2(x - self.location, self.scale) / math.pi + 0.5

    def _inverse_cdf(self, p: float) -> float:
        return self.location + self.scale * math.tan(math.pi * (p - 0.5))

    def _mean(self) -> float:
        return np.nan

    def _median(self) -> float:
        return self.location

    def _mode(self) -> float:
        return self.location

    def _standard_deviation(self) -> float:
        return np.nan

    def _skewness(self) -> float:
        return np.nan

    def _kurtosis(self) -> float:
        return np.nan

    def _minimum(self) -> float:
        return -np.inf

    def _maximum(self) -> float:
        return np.inf

    def central_moments(self, tail: float = MOMENT_TAIL_PROBABILITY) -> np.ndarray:
        return np.full(4, np.nan)

    # -------------------------------------------------------------------------
    # Estimation
    # -------------------------------------------------------------------------

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {
            EstimationMethod.METHOD_OF_MOMENTS: self._fit_quartiles,
            EstimationMethod.MAXIMUM_LIKELIHOOD: self._fit_likelihood,
        }

    @staticmethod
    def _fit_quartiles(sample: np.ndarray):
        """Median and semi-interquartile range, the robust analogue of moments."""
        median = percentile(sample, 0.5)
        spread = 0.5 * (percentile(sample, 0.75) - percentile(sample, 0.25))
        return median, max(spread, EPSILON)

    def _fit_likelihood(self, sample: np.ndarray):
        seed = np.array(self._fit_quartiles(sample))
        span = max(sample.max() - sample.min(), EPSILON)
        trial = Cauchy()

        def log_likelihood(theta: np.ndarray) -> float:
            trial.set_parameters(theta)
            return trial.log_likelihood(sample)

        return nelder_mead(
            log_likelihood,
            seed,
            lower=[sample.min(), EPSILON],
            upper=[sample.max(), span],
            maximize=True,
        )
