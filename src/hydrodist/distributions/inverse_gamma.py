"""
Inverse gamma distribution.

If X ~ Gamma(α, rate β) then 1/X follows the inverse gamma with scale β
and shape α. The quantile has no elementary form and is found with the
generic quantile solver started from the Wilson-Hilferty approximation.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

import numpy as np

from ..config import DistributionType, EPSILON, EstimationMethod
from ..solvers import magnitude_bound, nelder_mead
from ..special import gamma_quantile_guess, incomplete_gamma_upper, log_gamma
from ..statistics import product_moments
from .base import Estimator, UnivariateDistribution


class InverseGamma(UnivariateDistribution):
    """Inverse gamma distribution with scale β and shape α."""

    distribution_type = DistributionType.INVERSE_GAMMA
    display_name = "Inverse Gamma"
    short_display_name = "Inv-G"
    parameter_labels = ("Scale (β)", "Shape (α)")
    parameter_names_short = ("β", "α")

    def __init__(self, scale: float = 0.5, shape: float = 2.0):
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
        if x <= 0:
            return 0.0
        b, a = self.scale, self.shape
        return math.exp(a * math.log(b) - log_gamma(a) - (a + 1.0) * math.log(x) - b / x)

    def _cdf(self, x: float) -> float:
        if x <= 0:
            return 0.0
        return incomplete_gamma_upper(self.shape, self.scale / x)

    def _quantile_start(self, p: float) -> Tuple[float, float]:
        # Q(α, β/x) = p  <=>  β/x is the (1 - p) quantile of Gamma(α, 1)
        gamma_quantile = gamma_quantile_guess(self.shape, 1.0 - p)
        start = self.scale / gamma_quantile
        return start, 0.5 * start

    def _mean(self) -> float:
        if self.shape <= 1:
            return np.inf
        return self.scale / (self.shape - 1.0)

    def _mode(self) -> float:
        return self.scale / (self.shape + 1.0)

    def _standard_deviation(self) -> float:
        a = self.shape
        if a <= 2:
            return np.nan
        return self.scale / ((a - 1.0) * math.sqrt(a - 2.0))

    def _skewness(self) -> float:
        a = self.shape
        if a <= 3:
            return np.nan
        return 4.0 * math.sqrt(a - 2.0) / (a - 3.0)

    def _kurtosis(self) -> float:
        a = self.shape
        if a <= 4:
            return np.nan
        return 3.0 + 6.0 * (5.0 * a - 11.0) / ((a - 3.0) * (a - 4.0))

    def _minimum(self) -> float:
        return 0.0

    def _maximum(self) -> float:
        return np.inf

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
        mean, sd, _, _ = product_moments(sample)
        shape = mean * mean / (sd * sd) + 2.0
        return mean * (shape - 1.0), shape

    def _fit_likelihood(self, sample: np.ndarray):
        seed = np.array(self._fit_moments(sample))
        if not np.all(np.isfinite(seed)) or np.any(seed <= 0):
            seed = np.array([max(float(np.mean(sample)), EPSILON), 2.0])
        trial = InverseGamma()

        def log_likelihood(theta: np.ndarray) -> float:
            trial.set_parameters(theta)
            return trial.log_likelihood(sample)

        return nelder_mead(
            log_likelihood,
            seed,
            lower=[EPSILON, EPSILON],
            upper=[magnitude_bound(seed[0]), magnitude_bound(seed[1])],
            maximize=True,
        )
