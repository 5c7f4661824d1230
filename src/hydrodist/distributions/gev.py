"""
Generalized Extreme Value (GEV) distribution.

Uses Hosking's sign convention for the shape κ: κ > 0 gives an upper
bound ξ + α/κ (reverse Weibull), κ < 0 a lower bound ξ + α/κ (Fréchet),
and κ = 0 the Gumbel distribution. Shapes with |κ| <= NEAR_ZERO are
treated as Gumbel.

Fitting by product moments, L-moments and maximum likelihood; the
maximum likelihood covariance is the inverse of the expected Fisher
information.

References:
    - Hosking, J.R.M., Wallis, J.R., Wood, E.F. (1985). Estimation of the
      generalized extreme-value distribution by the method of probability
      weighted moments. Technometrics 27(3), 251-261.
    - Hosking, J.R.M., Wallis, J.R. (1997). Regional Frequency Analysis:
      An Approach Based on L-Moments, appendix A.
    - Prescott, P., Walden, A.T. (1980). Maximum likelihood estimation of
      the parameters of the generalized extreme-value distribution.
      Biometrika 67(3), 723-724.
    - Stedinger, J.R., Vogel, R.M., Foufoula-Georgiou, E. (1993). Frequency
      analysis of extreme events. Handbook of Hydrology, chapter 18.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from ..config import (
    DistributionType,
    EPSILON,
    EULER,
    EstimationMethod,
    NEAR_ZERO,
    get_logger,
)
from ..solvers import brent, magnitude_bound, nelder_mead
from ..special import digamma, gamma_function
from ..statistics import linear_moments, product_moments
from .base import Estimator, UnivariateDistribution, as_estimation_method

_logger = get_logger(__name__)

# Skew of the Gumbel distribution (κ = 0)
GUMBEL_SKEW = 1.1396

# Below this |κ| the Fisher information is evaluated at ±FISHER_SHAPE_FLOOR,
# where its 1/κ² terms stay well conditioned
FISHER_SHAPE_FLOOR = 1e-3


def _gamma_ratios(kappa: float) -> Tuple[float, float, float, float]:
    """Γ(1 + iκ) for i = 1..4."""
    return tuple(gamma_function(1.0 + i * kappa) for i in range(1, 5))


def skew_from_shape(kappa: float) -> float:
    """Exact product-moment skew of the GEV for shape κ > -1/3."""
    if abs(kappa) <= NEAR_ZERO:
        return GUMBEL_SKEW
    g1, g2, g3, _ = _gamma_ratios(kappa)
    return math.copysign(1.0, kappa) * (-g3 + 3.0 * g1 * g2 - 2.0 * g1 ** 3) / (g2 - g1 ** 2) ** 1.5


def shape_from_skew(skew: float) -> float:
    """
    Solve the GEV shape κ from a product-moment skew.

    Regression polynomials cover skews in [0, 10) and below -2; the range
    [-2, 0) is solved exactly with Brent's method.

    :raises ValueError: if skew is not finite or is 10 or larger
    """
    s = skew
    if not np.isfinite(s) or s >= 10.0:
        raise ValueError(f"No GEV shape available for skew {skew}.")
    if s > GUMBEL_SKEW:
        return (0.2858221 - 0.357983 * s + 0.116659 * s ** 2 - 0.022725 * s ** 3
                + 0.002604 * s ** 4 - 0.000161 * s ** 5 + 0.000004 * s ** 6)
    if s == GUMBEL_SKEW:
        return 0.0
    if s >= 0.0:
        return (0.277648 - 0.322016 * s + 0.060278 * s ** 2 + 0.016759 * s ** 3
                - 0.005873 * s ** 4 - 0.00244 * s ** 5 - 0.00005 * s ** 6)
    if s >= -2.0:
        return brent(lambda k: skew_from_shape(k) - s, -1.0 / 3.0 + 1e-6, 1.0)
    return (-0.50405 - 0.00861 * s + 0.015497 * s ** 2 + 0.005613 * s ** 3
            + 0.00087 * s ** 4 + 0.000065 * s ** 5)


def _lmoment_skew(kappa: float) -> float:
    return 2.0 * (1.0 - 3.0 ** -kappa) / (1.0 - 2.0 ** -kappa) - 3.0


class GeneralizedExtremeValue(UnivariateDistribution):
    """GEV distribution with location ξ, scale α and shape κ."""

    distribution_type = DistributionType.GENERALIZED_EXTREME_VALUE
    display_name = "Generalized Extreme Value"
    short_display_name = "GEV"
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
        """y such that cdf = exp(-exp(-y)); None outside the support."""
        y = (x - self.location) / self.scale
        k = self.shape
        if abs(k) <= NEAR_ZERO:
            return y
        arg = 1.0 - k * y
        if arg <= 0.0:
            return None
        return -math.log(arg) / k

    def _pdf(self, x: float) -> float:
        y = self._reduced_variate(x)
        if y is None:
            return 0.0
        return math.exp(-(1.0 - self.shape) * y - math.exp(-y)) / self.scale

    def _cdf(self, x: float) -> float:
        y = self._reduced_variate(x)
        if y is None:
            return 1.0 if self.shape > 0 else 0.0
        return math.exp(-math.exp(-y))

    def _inverse_cdf(self, p: float) -> float:
        x, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            return x - a * math.log(-math.log(p))
        return x + a / k * (1.0 - (-math.log(p)) ** k)

    # -------------------------------------------------------------------------
    # Moments and support
    # -------------------------------------------------------------------------

    def _mean(self) -> float:
        x, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            return x + a * EULER
        if abs(k) < 1.0:
            return x + a / k * (1.0 - gamma_function(1.0 + k))
        return np.nan

    def _median(self) -> float:
        x, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            return x - a * math.log(math.log(2.0))
        return x + a * (math.log(2.0) ** -k - 1.0) / k

    def _mode(self) -> float:
        x, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            return x
        return x + a * ((1.0 + k) ** -k - 1.0) / k

    def _standard_deviation(self) -> float:
        _, a, k = self._parameters
        if abs(k) <= NEAR_ZERO:
            return a * math.pi / math.sqrt(6.0)
        if abs(k) < 0.5:
            g1, g2, _, _ = _gamma_ratios(k)
            return math.sqrt(a * a * (g2 - g1 * g1) / (k * k))
        return np.nan

    def _skewness(self) -> float:
        k = self.shape
        if abs(k) < 1.0 / 3.0:
            return skew_from_shape(k)
        return np.nan

    def _kurtosis(self) -> float:
        k = self.shape
        if abs(k) <= NEAR_ZERO:
            return 5.4
        if abs(k) < 0.25:
            g1, g2, g3, g4 = _gamma_ratios(k)
            return ((g4 - 4.0 * g3 * g1 + 6.0 * g2 * g1 ** 2 - 3.0 * g1 ** 4)
                    / (g2 - g1 ** 2) ** 2)
        return np.nan

    def _minimum(self) -> float:
        x, a, k = self._parameters
        if k < -NEAR_ZERO:
            return x + a / k
        return -np.inf

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
        trial = GeneralizedExtremeValue(*parameters)
        return np.array([
            trial.mean, trial.standard_deviation, trial.skewness, trial.kurtosis
        ])

    @staticmethod
    def parameters_from_moments(moments: Sequence[float]) -> np.ndarray:
        """
        Parameters matching a mean, standard deviation and skew.

        :param moments: (mean, standard deviation, skew, ...)
        :return: (ξ, α, κ)
        """
        mean, sd, skew = moments[0], moments[1], moments[2]
        k = shape_from_skew(skew)
        if abs(k) <= NEAR_ZERO:
            a = math.sqrt(6.0) / math.pi * sd
            return np.array([mean - a * EULER, a, k])
        g1, g2, _, _ = _gamma_ratios(k)
        a = math.sqrt(sd * sd * k * k / (g2 - g1 * g1))
        return np.array([mean - a / k * (1.0 - g1), a, k])

    @staticmethod
    def linear_moments_from_parameters(parameters: Sequence[float]) -> np.ndarray:
        """
        Exact (λ1, λ2, τ3, τ4) of a parameter vector.

        :raises ValueError: if κ <= -1 (L-moments do not exist)
        """
        x, a, k = parameters
        if k <= -1.0:
            raise ValueError(f"GEV L-moments require shape > -1, got {k}.")
        if abs(k) <= NEAR_ZERO:
            return np.array([
                x + a * EULER,
                a * math.log(2.0),
                math.log(9.0 / 8.0) / math.log(2.0),
                (16.0 * math.log(2.0) - 10.0 * math.log(3.0)) / math.log(2.0),
            ])
        g = gamma_function(1.0 + k)
        d = 1.0 - 2.0 ** -k
        return np.array([
            x + a * (1.0 - g) / k,
            a * d * g / k,
            _lmoment_skew(k),
            (5.0 * (1.0 - 4.0 ** -k) - 10.0 * (1.0 - 3.0 ** -k) + 6.0 * d) / d,
        ])

    @staticmethod
    def parameters_from_linear_moments(lmoments: Sequence[float]) -> np.ndarray:
        """
        Parameters matching (λ1, λ2, τ3).

        Hosking's rational approximation for |τ3| <= 0.5, Brent's method on
        the exact τ3 relation otherwise.
        """
        l1, l2, t3 = lmoments[0], lmoments[1], lmoments[2]
        if abs(t3) <= 0.5:
            c = 2.0 / (3.0 + t3) - math.log(2.0) / math.log(3.0)
            k = 7.859 * c + 2.9554 * c * c
        else:
            k = brent(lambda s: t3 - _lmoment_skew(s), -1.0 + 1e-6, 10.0)
        if abs(k) <= NEAR_ZERO:
            a = l2 / math.log(2.0)
            return np.array([l1 - a * EULER, a, k])
        g = gamma_function(1.0 + k)
        a = l2 * k / ((1.0 - 2.0 ** -k) * g)
        return np.array([l1 - a * (1.0 - g) / k, a, k])

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
        seed = self.parameters_from_linear_moments(linear_moments(sample))
        location_bound = magnitude_bound(seed[0])
        trial = GeneralizedExtremeValue(*seed)

        def log_likelihood(theta: np.ndarray) -> float:
            trial.set_parameters(theta)
            return trial.log_likelihood(sample)

        return nelder_mead(
            log_likelihood,
            seed,
            lower=[-location_bound, EPSILON, -10.0],
            upper=[location_bound, magnitude_bound(seed[1]), 10.0],
            maximize=True,
        )

    # -------------------------------------------------------------------------
    # Uncertainty
    # -------------------------------------------------------------------------

    def partial_derivatives(self, probability: float) -> np.ndarray:
        """Analytic ∂Q/∂(ξ, α, κ) at non-exceedance probability p."""
        self._check_probability(probability)
        if not self._parameters_valid:
            return np.full(3, np.nan)
        _, a, k = self._parameters
        y = -math.log(probability)
        ln_y = math.log(y)
        if abs(k) <= NEAR_ZERO:
            return np.array([1.0, -ln_y, -0.5 * a * ln_y ** 2])
        yk = y ** k
        return np.array([
            1.0,
            (1.0 - yk) / k,
            -a / k ** 2 * (1.0 - yk) - a / k * yk * ln_y,
        ])

    def fisher_information(self, sample_size: int) -> np.ndarray:
        """
        Expected Fisher information of (ξ, α, κ) for n observations.

        Valid for κ < 1/2.
        """
        n = float(sample_size)
        a, k = self.scale, self.shape
        if abs(k) < FISHER_SHAPE_FLOOR:
            k = math.copysign(FISHER_SHAPE_FLOOR, k) if k != 0 else FISHER_SHAPE_FLOOR
        g2k = gamma_function(2.0 - k)
        p = (1.0 - k) ** 2 * gamma_function(1.0 - 2.0 * k)
        q = g2k * (digamma(1.0 - k) - (1.0 - k) / k)

        i_uu = n / a ** 2 * p
        i_aa = n / (a ** 2 * k ** 2) * (1.0 - 2.0 * g2k + p)
        i_kk = n / k ** 2 * (
            math.pi ** 2 / 6.0 + (1.0 - EULER - 1.0 / k) ** 2 + 2.0 * q / k + p / k ** 2
        )
        i_ua = n / (a ** 2 * k) * (p - g2k)
        i_uk = -n / (a * k) * (p / k + q)
        i_ak = n / (a * k ** 2) * (1.0 - EULER - (1.0 - g2k) / k - p / k - q)
        return np.array([
            [i_uu, i_ua, i_uk],
            [i_ua, i_aa, i_ak],
            [i_uk, i_ak, i_kk],
        ])

    def parameter_covariance(
        self,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> np.ndarray:
        """
        Covariance of maximum likelihood estimates, the inverse Fisher
        information.

        :raises NotImplementedError: for methods other than maximum likelihood
        """
        method = as_estimation_method(method)
        if method != EstimationMethod.MAXIMUM_LIKELIHOOD:
            return super().parameter_covariance(sample_size, method)
        if not self._parameters_valid:
            return np.full((3, 3), np.nan)
        if self.shape >= 0.5:
            _logger.warning(
                f"Fisher information is undefined for shape {self.shape} >= 0.5"
            )
            return np.full((3, 3), np.nan)
        return np.linalg.inv(self.fisher_information(sample_size))
