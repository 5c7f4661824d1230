"""
Generalized Pareto distribution (GPA).

Hosking's parameterization: shape κ > 0 bounds the support above at
ξ + α/κ, κ = 0 is the two-parameter exponential and κ < 0 is heavy tailed.
Commonly fitted to peaks over a threshold, where the location is the
threshold (the maximum likelihood fit fixes it at the sample minimum).

References:
    - Hosking, J.R.M., Wallis, J.R. (1987). Parameter and quantile
      estimation for the generalized Pareto distribution. Technometrics
      29(3), 339-349.
    - Hosking, J.R.M., Wallis, J.R. (1997). Regional Frequency Analysis:
      An Approach Based on L-Moments, appendix A.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence, Union

import numpy as np

from ..config import DistributionType, EPSILON, EstimationMethod, NEAR_ZERO
from ..solvers import brent, magnitude_bound, nelder_mead
from ..statistics import linear_moments, product_moments, validate_sample
from .base import Estimator, UnivariateDistribution, as_estimation_method


def skew_from_shape(kappa: float) -> float:
    """Product-moment skew of the GPA for shape κ > -1/3."""
    return 2.0 * (1.0 - kappa) * math.sqrt(1.0 + 2.0 * kappa) / (1.0 + 3.0 * kappa)


class GeneralizedPareto(UnivariateDistribution):
    """GPA distribution with location ξ, scale α and shape κ."""

    distribution_type = DistributionType.GENERALIZED_PARETO
    display_name = "Generalized Pareto"
    short_display_name = "GPA"
    parameter_labels = ("Location (ξ)", "Scale (α)", "Shape (κ)")
    parameter_names_short = ("ξ", "α", "κ")

    def __init__(self, location: float = 100.0, scale: float = 10.0, shape: float = 0.0):
        super().__init__(location, scale, shape)

    @property
    def location(self) -> float:
        return self._parameters[0]

    @property
    def scale(self) -> float:
        return self._parameters[1]

    @property
    def shape(self) -> float:
        return self._parameters[2]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        if not np.all(np.isfinite(values)):
            return "parameters must be finite numbers"
        if values[1] <= 0:
            return "scale must be positive"
        return None

    # -------------------------------------------------------------------------
    # Density, distribution and quantile functions
    # -------------------------------------------------------------------------

    def _reduced_variate(self, x: float) -> Optional[float]:
        """y such that cdf = 1 - exp(-y); None above the upper bound."""
        y = (x - self.location) / self.scale
        k = self.shape
        if abs(k) <= NEAR_ZERO:
            return y
        arg = 1.0 - k * y
        if arg <= 0.0:
            return None
        return -math.log(arg) / k

    def _pdf(self, x: float) -> float:
        if x < self.location:
            return 0.0
        y = self._reduced_variate(x)
        if y is None:
            return 0.0
        return math.exp(-(1.0 - self.shape) * y) / self.scale

    def _cdf(self, x: float) -> float:
        if x <= self.location:
            return 0.0
        y = self._reduced_variate(x)
        if y is None:
            return 1.0
        return 1.0 - math.exp(-y)

    def _inverse_cdf(self, p: float) -> float:
        x, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            return x - a * math.log(1.0 - p)
        return x + a / k * (1.0 - (1.0 - p) ** k)

    # -------------------------------------------------------------------------
    # Moments and support
    # -------------------------------------------------------------------------

    def _mean(self) -> float:
        x, a, k = self._parameters
        if k <= -1.0:
            return np.inf
        return x + a / (1.0 + k)

    def _mode(self) -> float:
        if self.shape > 1.0:
            return self._maximum()
        return self.location

    def _standard_deviation(self) -> float:
        _, a, k = self._parameters
        if k <= -0.5:
            return np.nan
        return a / ((1.0 + k) * math.sqrt(1.0 + 2.0 * k))

    def _skewness(self) -> float:
        k = self.shape
        if abs(k) >= 1.0 / 3.0:
            return np.nan
        return skew_from_shape(k)

    def _kurtosis(self) -> float:
        k = self.shape
        if abs(k) >= 0.25:
            return np.nan
        return (3.0 * (1.0 + 2.0 * k) * (3.0 - k + 2.0 * k * k)
                / ((1.0 + 3.0 * k) * (1.0 + 4.0 * k)))

    def _minimum(self) -> float:
        return self.location

    def _maximum(self) -> float:
        x, a, k = self._parameters
        if k > NEAR_ZERO:
            return x + a / k
        return np.inf

    # -------------------------------------------------------------------------
    # Moment and L-moment relations
    # -------------------------------------------------------------------------

    def moments_from_parameters(self, parameters: Sequence[float]) -> np.ndarray:
        """(mean, standard deviation, skew, kurtosis) of a parameter vector."""
        trial = GeneralizedPareto(*parameters)
        return np.array([
            trial.mean, trial.standard_deviation, trial.skewness, trial.kurtosis
        ])

    @staticmethod
    def parameters_from_moments(moments: Sequence[float]) -> np.ndarray:
        """
        Parameters matching a mean, standard deviation and skew.

        The shape comes from Brent's method on the skew relation over
        (-1/3, 1/3), so the skew must exceed that of κ = 1/3 (about 0.861).

        :raises ValueError: if the skew is outside the attainable range
        """
        mean, sd, skew = moments[0], moments[1], moments[2]
        k = brent(lambda s: skew_from_shape(s) - skew, -1.0 / 3.0 + 1e-8, 1.0 / 3.0)
        a = math.sqrt(sd * sd * (1.0 + k) ** 2 * (1.0 + 2.0 * k))
        return np.array([mean - a / (1.0 + k), a, k])

    @staticmethod
    def linear_moments_from_parameters(parameters: Sequence[float]) -> np.ndarray:
        """Exact (λ1, λ2, τ3, τ4) of a parameter vector (κ > -1)."""
        x, a, k = parameters
        if k <= -1.0:
            raise ValueError(f"GPA L-moments require shape > -1, got {k}.")
        return np.array([
            x + a / (1.0 + k),
            a / ((1.0 + k) * (2.0 + k)),
            (1.0 - k) / (3.0 + k),
            (1.0 - k) * (2.0 - k) / ((3.0 + k) * (4.0 + k)),
        ])

    @staticmethod
    def parameters_from_linear_moments(lmoments: Sequence[float]) -> np.ndarray:
        """Parameters matching (λ1, λ2, τ3), in closed form."""
        l1, l2, t3 = lmoments[0], lmoments[1], lmoments[2]
        k = (1.0 - 3.0 * t3) / (1.0 + t3)
        a = (1.0 + k) * (2.0 + k) * l2
        return np.array([l1 - (2.0 + k) * l2, a, k])

    @staticmethod
    def modified_method_of_moments(sample: Sequence[float]) -> np.ndarray:
        """
        Moment fit that ties the location to the sample minimum.

        The smallest observation stands in for the first plotting position,
        which removes the lower-bound bias of the ordinary moment fit for
        threshold-exceedance data.

        :param sample: observations (not modified)
        :return: (ξ, α, κ)
        """
        values = validate_sample(sample)
        n = values.size
        m1, sd, _, _ = product_moments(values)
        m2 = sd * sd
        low = float(np.min(values))
        b = (n - 1.0) * m2 / (m1 - low) - m1
        c = m1 * m1 - m2 + 2.0 * m2 * (m1 - n * low) / (m1 - low)
        x = -b + math.sqrt(b * b - c)
        ratio = (m1 - x) ** 2 / m2
        return np.array([x, 0.5 * (m1 - x) * (ratio + 1.0), 0.5 * (ratio - 1.0)])

    # -------------------------------------------------------------------------
    # Estimation
    # -------------------------------------------------------------------------

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {
            EstimationMethod.METHOD_OF_MOMENTS:
                lambda sample: self.parameters_from_moments(product_moments(sample)),
            EstimationMethod.METHOD_OF_LINEAR_MOMENTS:
                lambda sample: self.parameters_from_linear_moments(linear_moments(sample)),
            EstimationMethod.MAXIMUM_LIKELIHOOD: self._fit_likelihood,
        }

    def _fit_likelihood(self, sample: np.ndarray) -> np.ndarray:
        """Likelihood over (α, κ) with the location fixed at the sample minimum."""
        location = float(np.min(sample))
        seed = self.parameters_from_linear_moments(linear_moments(sample))[1:]
        trial = GeneralizedPareto(location, *seed)

        def log_likelihood(theta: np.ndarray) -> float:
            trial.set_parameters(location, theta[0], theta[1])
            return trial.log_likelihood(sample)

        scale, shape = nelder_mead(
            log_likelihood,
            seed,
            lower=[EPSILON, -10.0],
            upper=[magnitude_bound(seed[0]), 10.0],
            maximize=True,
        )
        return np.array([location, scale, shape])

    # -------------------------------------------------------------------------
    # Uncertainty
    # -------------------------------------------------------------------------

    def partial_derivatives(self, probability: float) -> np.ndarray:
        """Analytic ∂Q/∂(ξ, α, κ) at non-exceedance probability p."""
        self._check_probability(probability)
        if not self._parameters_valid:
            return np.full(3, np.nan)
        _, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            y = -math.log(1.0 - probability)
            return np.array([1.0, y, -0.5 * a * y * y])
        qk = (1.0 - probability) ** k
        return np.array([
            1.0,
            (1.0 - qk) / k,
            -a / k ** 2 * (1.0 - qk) - a / k * math.log(1.0 - probability) * qk,
        ])

    def parameter_covariance(
        self,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> np.ndarray:
        """
        Asymptotic covariance of (ξ, α, κ) for moment or maximum likelihood
        fits. Cross terms with the location are zero.

        :raises NotImplementedError: for other methods
        """
        method = as_estimation_method(method)
        if method not in (EstimationMethod.METHOD_OF_MOMENTS,
                          EstimationMethod.MAXIMUM_LIKELIHOOD):
            return super().parameter_covariance(sample_size, method)
        n = float(sample_size)
        _, a, k = self._parameters
        covariance = np.zeros((3, 3))
        covariance[0, 0] = n * a * a / ((n + 2.0 * k) * (n + k) ** 2)

        if method == EstimationMethod.METHOD_OF_MOMENTS:
            den = (1.0 + 2.0 * k) * (1.0 + 3.0 * k) * (1.0 + 4.0 * k)
            var_a = 2.0 * a * a / n * (1.0 + k) ** 2 * (1.0 + 6.0 * k + 12.0 * k * k) / den
            var_k = (1.0 + k) ** 2 * (1.0 + 2.0 * k) ** 2 * (1.0 + k + 6.0 * k * k) / (n * den)
            cov_ak = a / n * (1.0 + k) ** 2 * (1.0 + 2.0 * k) * (1.0 + 4.0 * k + 12.0 * k * k) / den
        else:
            var_a = 2.0 * a * a * (1.0 - k) / n
            var_k = (1.0 - k) ** 2 / n
            cov_ak = a * (1.0 - k) / n

        covariance[1, 1] = var_a
        covariance[2, 2] = var_k
        covariance[1, 2] = covariance[2, 1] = cov_ak
        return covariance

    def quantile_variance(
        self,
        probability: float,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> float:
        """
        Delta-method quantile variance from the scale and shape terms.

        The location terms are of order n⁻² and are dropped.
        """
        covariance = self.parameter_covariance(sample_size, method)
        gradient = self.partial_derivatives(probability)
        return float(gradient[1:] @ covariance[1:, 1:] @ gradient[1:])
