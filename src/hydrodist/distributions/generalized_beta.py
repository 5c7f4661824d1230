"""
Four-parameter (generalized) beta distribution on [min, max].
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..config import DistributionType
from ..special import beta_function, incomplete_beta, incomplete_beta_inverse
from .base import UnivariateDistribution

# Default PERT shape weight on the most likely value
PERT_SCALE = 4.0


class GeneralizedBeta(UnivariateDistribution):
    """Beta distribution with shapes α, β rescaled to [min, max]."""

    distribution_type = DistributionType.GENERALIZED_BETA
    display_name = "Generalized Beta"
    short_display_name = "Beta"
    parameter_labels = ("Shape (α)", "Shape (β)", "Min", "Max")
    parameter_names_short = ("α", "β", "Min", "Max")

    def __init__(
        self,
        alpha: float = 2.0,
        beta: float = 2.0,
        minimum: float = 0.0,
        maximum: float = 1.0
    ):
        super().__init__(alpha, beta, minimum, maximum)

    @classmethod
    def pert(
        cls,
        minimum: float,
        mode: float,
        maximum: float,
        scale: float = PERT_SCALE
    ) -> 'GeneralizedBeta':
        """
        Beta distribution with the PERT shapes for a three-point estimate.

        α = 1 + λ(c - a)/(b - a), β = 1 + λ(b - c)/(b - a).

        :raises ValueError: if the three points are not ordered
        """
        if minimum > maximum:
            raise ValueError("The maximum value must be greater than the minimum value.")
        if not minimum <= mode <= maximum:
            raise ValueError("The mode must be between the minimum and maximum values.")
        span = maximum - minimum
        if span == 0:
            return cls(1.0 + scale / 2.0, 1.0 + scale / 2.0, minimum, maximum)
        return cls(
            1.0 + scale * (mode - minimum) / span,
            1.0 + scale * (maximum - mode) / span,
            minimum,
            maximum,
        )

    @property
    def alpha(self) -> float:
        return self._parameters[0]

    @property
    def beta(self) -> float:
        return self._parameters[1]

    @property
    def span(self) -> float:
        return self._parameters[3] - self._parameters[2]

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        alpha, beta, low, high = values
        if not np.isfinite(alpha) or alpha <= 0:
            return "alpha must be positive"
        if not np.isfinite(beta) or beta <= 0:
            return "beta must be positive"
        if not np.isfinite(low) or not np.isfinite(high):
            return "min and max must be finite numbers"
        if low >= high:
            return "min must be less than max"
        return None

    def _pdf(self, x: float) -> float:
        alpha, beta, low, high = self._parameters
        if x < low or x > high:
            return 0.0
        z = (x - low) / (high - low)
        if (z == 0.0 and alpha < 1.0) or (z == 1.0 and beta < 1.0):
            return np.inf
        density = z ** (alpha - 1.0) * (1.0 - z) ** (beta - 1.0)
        return density / (beta_function(alpha, beta) * (high - low))

    def _cdf(self, x: float) -> float:
        alpha, beta, low, high = self._parameters
        return incomplete_beta(alpha, beta, (x - low) / (high - low))

    def _inverse_cdf(self, p: float) -> float:
        alpha, beta, low, high = self._parameters
        return low + (high - low) * incomplete_beta_inverse(alpha, beta, p)

    def _mean(self) -> float:
        alpha, beta, low, _ = self._parameters
        return alpha / (alpha + beta) * self.span + low

    def _mode(self) -> float:
        alpha, beta, low, high = self._parameters
        if alpha > 1.0 and beta > 1.0:
            return (alpha - 1.0) / (alpha + beta - 2.0) * self.span + low
        if alpha == 1.0 and beta == 1.0:
            return self._mean()
        if alpha <= 1.0 <= beta:
            return low
        if beta <= 1.0 <= alpha:
            return high
        # U-shaped: two modes
        return np.nan

    def _standard_deviation(self) -> float:
        alpha, beta, _, _ = self._parameters
        total = alpha + beta
        return math.sqrt(alpha * beta / (total ** 2 * (total + 1.0))) * self.span

    def _skewness(self) -> float:
        alpha, beta, _, _ = self._parameters
        total = alpha + beta
        return 2.0 * (beta - alpha) * math.sqrt(total + 1.0) / ((total + 2.0) * math.sqrt(alpha * beta))

    def _kurtosis(self) -> float:
        alpha, beta, _, _ = self._parameters
        total = alpha + beta
        excess = 6.0 * ((alpha - beta) ** 2 * (total + 1.0) - alpha * beta * (total + 2.0)) / (
            alpha * beta * (total + 2.0) * (total + 3.0)
        )
        return 3.0 + excess

    def _minimum(self) -> float:
        return self._parameters[2]

    def _maximum(self) -> float:
        return self._parameters[3]
