"""
Delta-method uncertainty for quantile estimates.

Given the asymptotic covariance C of the fitted parameters and the gradient
g of a quantile with respect to those parameters, the variance of the
quantile estimate is gᵀ C g. This module holds the pieces that do not
depend on a particular family; the families supply C and, where available,
analytic gradients.

References:
    - Kite, G.W. (1977). Frequency and Risk Analyses in Hydrology, chapter 3.
    - Hosking, J.R.M., Wallis, J.R. (1987). Parameter and quantile
      estimation for the generalized Pareto distribution. Technometrics
      29(3), 339-349.
"""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from .config import EstimationMethod, NUMERICAL_DERIVATIVE_STEP
from .solvers import numerical_gradient
from .special import standard_normal_z


def delta_method_variance(gradient: np.ndarray, covariance: np.ndarray) -> float:
    """
    Quadratic form gᵀ C g.

    :param gradient: quantile gradient, length k
    :param covariance: k x k parameter covariance matrix
    :return: quantile variance
    :raises ValueError: if the shapes do not agree
    """
    g = np.asarray(gradient, dtype=float)
    c = np.asarray(covariance, dtype=float)
    if c.shape != (g.size, g.size):
        raise ValueError(
            f"Covariance shape {c.shape} does not match gradient length {g.size}."
        )
    return float(g @ c @ g)


def numerical_quantile_gradient(
    distribution,
    probability: float,
    step: float = NUMERICAL_DERIVATIVE_STEP
) -> np.ndarray:
    """
    Central finite-difference derivatives of Q(p) with respect to each
    parameter.

    The distribution is copied for each perturbation so its own parameters
    are left untouched. Integer parameters (``integer_parameters``) are
    stepped by one unit, one-sided at the edge of their domain.

    :param distribution: fitted distribution
    :param probability: non-exceedance probability in (0, 1)
    :param step: relative perturbation, h = step * max(1, |θ|)
    :return: gradient array in parameter order
    """
    params = distribution.get_parameters()
    trial = distribution.clone()
    steps = step * np.maximum(1.0, np.abs(params))
    for i in distribution.integer_parameters:
        steps[i] = 1.0

    def quantile(theta: np.ndarray) -> float:
        trial.set_parameters(theta)
        return trial.inverse_cdf(probability)

    return numerical_gradient(quantile, params, steps=steps)


def quantile_confidence_interval(
    distribution,
    probability: float,
    sample_size: int,
    method: Union[EstimationMethod, str],
    alpha: float = 0.1
) -> Tuple[float, float]:
    """
    Normal-theory confidence interval for a quantile estimate.

    :param distribution: fitted distribution
    :param probability: non-exceedance probability in (0, 1)
    :param sample_size: number of observations behind the fit
    :param method: estimation method used for the fit
    :param alpha: two-sided significance level (0.1 gives a 90% interval)
    :return: (lower, upper) bounds
    :raises ValueError: if alpha is not in (0, 1)
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}.")
    quantile = distribution.inverse_cdf(probability)
    variance = distribution.quantile_variance(probability, sample_size, method)
    half_width = standard_normal_z(1.0 - alpha / 2.0) * np.sqrt(variance)
    return quantile - half_width, quantile + half_width
