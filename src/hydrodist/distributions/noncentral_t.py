"""
Noncentral Student's t distribution.

The distribution function is evaluated by ``scipy.special.nctdtr``; the
density follows from the recurrence between neighbouring degrees of
freedom, and the quantile from a Jennett-Welch start, overshooting secant
steps to bracket the root, then Brent's method.

References:
    - Jennett, W.J., Welch, B.L. (1939). The control of proportion defective
      as judged by a single quality characteristic varying on a continuous
      scale. Supplement to the JRSS 6(1), 80-88.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
from scipy import special as sc

from ..config import DistributionType, get_logger
from ..solvers import brent, maximize_scalar
from ..special import log_gamma, standard_normal_z
from .base import UnivariateDistribution

_logger = get_logger(__name__)

# Secant steps allowed while bracketing a quantile
_BRACKET_STEPS = 50


def noncentral_t_cdf(t: float, df: float, delta: float) -> float:
    """
    CDF of the noncentral t.

    :param t: evaluation point
    :param df: degrees of freedom (> 0)
    :param delta: noncentrality
    :return: P(T <= t), NaN outside the domain
    """
    return float(sc.nctdtr(df, delta, t))


class NoncentralT(UnivariateDistribution):
    """Noncentral t distribution with ν degrees of freedom and noncentrality μ."""

    distribution_type = DistributionType.NONCENTRAL_T
    display_name = "Noncentral T"
    short_display_name = "NCT"
    parameter_labels = ("Degrees of Freedom (ν)", "Noncentrality (μ)")
    parameter_names_short = ("ν", "μ")
    integer_parameters = (0,)

    def __init__(self, degrees_of_freedom: float = 10, noncentrality: float = 0.0):
        super().__init__(degrees_of_freedom, noncentrality)

    @property
    def degrees_of_freedom(self) -> float:
        return self._parameters[0]

    @property
    def noncentrality(self) -> float:
        return self._parameters[1]

    def _normalize_parameters(self, values: np.ndarray) -> np.ndarray:
        if np.isfinite(values[0]):
            values[0] = math.trunc(values[0])
        return values

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        df, delta = values
        if not np.isfinite(df) or df < 1:
            return "degrees of freedom must be an integer >= 1"
        if not np.isfinite(delta):
            return "noncentrality must be a finite number"
        return None

    def _pdf(self, x: float) -> float:
        df, delta = self._parameters
        if x == 0.0:
            return math.exp(
                log_gamma(0.5 * (df + 1.0)) - log_gamma(0.5 * df)
                - 0.5 * delta * delta
            ) / math.sqrt(math.pi * df)
        upper = noncentral_t_cdf(x * math.sqrt(1.0 + 2.0 / df), df + 2.0, delta)
        return max(df / x * (upper - noncentral_t_cdf(x, df, delta)), 0.0)

    def _cdf(self, x: float) -> float:
        return noncentral_t_cdf(x, *self._parameters)

    def _quantile_guess(self, p: float) -> float:
        """Jennett-Welch approximation to the quantile."""
        df, delta = self._parameters
        b = math.exp(log_gamma(0.5 * (df + 1.0)) - log_gamma(0.5 * df)) * math.sqrt(2.0 / df)
        z = standard_normal_z(p)
        spread = b * b + (1.0 - b * b) * (delta * delta - z * z)
        if spread <= 0:
            return 0.0
        guess = (delta * b + z * math.sqrt(spread)) / (b * b - z * z * (1.0 - b * b))
        return guess if np.isfinite(guess) else delta

    def _inverse_cdf(self, p: float) -> float:
        def f(t: float) -> float:
            return self._cdf(t) - p

        t0 = self._quantile_guess(p)
        f0 = f(t0)
        if f0 == 0.0:
            return t0
        t1 = t0 + (1.0 if f0 < 0 else -1.0)
        f1 = f(t1)
        for _ in range(_BRACKET_STEPS):
            if f0 * f1 <= 0.0:
                return brent(f, min(t0, t1), max(t0, t1))
            slope = (f1 - f0) / (t1 - t0)
            if slope > 0 and np.isfinite(slope):
                # Twice the secant step lands past the root
                t2 = t1 - 2.0 * f1 / slope
            else:
                t2 = t1 + 2.0 * (t1 - t0)
            t0, f0 = t1, f1
            t1, f1 = t2, f(t2)
        _logger.warning(f"Secant bracketing failed for p={p}; using generic quantile solver")
        return self._solve_inverse_cdf(p, x0=t0)

    # -------------------------------------------------------------------------
    # Moments and support
    # -------------------------------------------------------------------------

    def _raw_moment(self, order: int) -> float:
        """E[T^k] for k < ν."""
        df, mu = self._parameters
        normal = {
            1: mu,
            2: mu ** 2 + 1.0,
            3: mu ** 3 + 3.0 * mu,
            4: mu ** 4 + 6.0 * mu ** 2 + 3.0,
        }[order]
        ratio = math.exp(log_gamma(0.5 * (df - order)) - log_gamma(0.5 * df))
        return (0.5 * df) ** (0.5 * order) * ratio * normal

    def _mean(self) -> float:
        if self.degrees_of_freedom <= 1:
            return np.nan
        return self._raw_moment(1)

    def _mode(self) -> float:
        df, mu = self._parameters
        if mu == 0.0:
            return 0.0
        return maximize_scalar(
            self._pdf,
            math.sqrt(df / (df + 2.5)) * mu,
            math.sqrt(df / (df + 1.0)) * mu,
        )

    def _variance(self) -> float:
        return self._raw_moment(2) - self._raw_moment(1) ** 2

    def _standard_deviation(self) -> float:
        if self.degrees_of_freedom <= 2:
            return np.nan
        return math.sqrt(self._variance())

    def _skewness(self) -> float:
        if self.degrees_of_freedom <= 3:
            return np.nan
        r1, r2, r3 = (self._raw_moment(k) for k in (1, 2, 3))
        m3 = r3 - 3.0 * r1 * r2 + 2.0 * r1 ** 3
        return m3 / self._variance() ** 1.5

    def _kurtosis(self) -> float:
        if self.degrees_of_freedom <= 4:
            return np.nan
        r1, r2, r3, r4 = (self._raw_moment(k) for k in (1, 2, 3, 4))
        m4 = r4 - 4.0 * r1 * r3 + 6.0 * r1 ** 2 * r2 - 3.0 * r1 ** 4
        return m4 / self._variance() ** 2

    def _minimum(self) -> float:
        return -np.inf

    def _maximum(self) -> float:
        return np.inf
