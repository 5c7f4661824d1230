"""
Empirical distribution defined by (x, p) knots.

The CDF is piecewise linear in a transformed space: by default x is left
as is and p is mapped to its standard normal quantile, which makes
normal-like tails nearly linear. Queries outside the knots extrapolate the
end segments and are clamped to [0, 1] (CDF) or to the knot range
(quantile). Moments come from numerical integration of the quantile
function and are cached until the knots change.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import integrate

from ..config import DistributionType, EMPIRICAL_P_LIMIT, EstimationMethod
from ..exceptions import ParameterError
from ..solvers import numerical_derivative
from ..special import standard_normal_cdf, standard_normal_z
from ..statistics import PlottingPosition, plotting_positions, validate_sample
from .base import MOMENT_TAIL_PROBABILITY, UnivariateDistribution, format_parameter


class Transform(Enum):
    """Axis transform applied before interpolating."""
    NONE = "none"
    LOGARITHMIC = "log"
    NORMAL_Z = "normal_z"

    def __str__(self):
        return self.value


def _forward(values: np.ndarray, transform: Transform) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    if transform == Transform.LOGARITHMIC:
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log10(values)
    if transform == Transform.NORMAL_Z:
        return np.array([standard_normal_z(v) for v in np.ravel(values)]).reshape(values.shape)
    return values


def _backward(value: float, transform: Transform) -> float:
    if transform == Transform.LOGARITHMIC:
        return 10.0 ** value
    if transform == Transform.NORMAL_Z:
        return standard_normal_cdf(value)
    return value


def _interpolate(x: float, xs: np.ndarray, ys: np.ndarray) -> float:
    """Piecewise linear interpolation with linear extrapolation of the end segments."""
    n = xs.size
    j = int(np.searchsorted(xs, x, side="right")) - 1
    j = min(max(j, 0), n - 2)
    x0, x1 = xs[j], xs[j + 1]
    if x1 == x0:
        return ys[j + 1]
    return ys[j] + (x - x0) * (ys[j + 1] - ys[j]) / (x1 - x0)


class EmpiricalDistribution(UnivariateDistribution):
    """
    Distribution interpolated from ordered (x, p) knots.

    :param x_values: ascending x values
    :param p_values: ascending non-exceedance probabilities, one per x
    :param x_transform: transform of the x axis
    :param probability_transform: transform of the probability axis
    """

    distribution_type = DistributionType.EMPIRICAL
    display_name = "Univariate Empirical"
    short_display_name = "Uni. Emp"
    parameter_labels = ("X Values", "P Values")
    parameter_names_short = ("X()", "P()")
    min_sample_size = 2

    def __init__(
        self,
        x_values: Sequence[float] = (-0.5, 0.0, 0.5),
        p_values: Sequence[float] = (0.1, 0.5, 0.9),
        x_transform: Transform = Transform.NONE,
        probability_transform: Transform = Transform.NORMAL_Z
    ):
        self.x_transform = Transform(x_transform)
        self.probability_transform = Transform(probability_transform)
        self._moments: Optional[np.ndarray] = None
        self.set_parameters(x_values, p_values)

    @classmethod
    def from_sample(
        cls,
        sample: Sequence[float],
        plotting_position: PlottingPosition = PlottingPosition.WEIBULL,
        **kwargs
    ) -> 'EmpiricalDistribution':
        """
        Empirical distribution of a sample, with plotting positions as the
        knot probabilities.

        :raises ValueError: for unusable samples
        """
        values = np.sort(validate_sample(sample, cls.min_sample_size))
        return cls(values, plotting_positions(values.size, plotting_position), **kwargs)

    # -------------------------------------------------------------------------
    # Parameters
    # -------------------------------------------------------------------------

    @property
    def x_values(self) -> np.ndarray:
        return self._x.copy()

    @property
    def p_values(self) -> np.ndarray:
        return self._p.copy()

    def get_parameters(self) -> np.ndarray:
        """Knots as a 2 x n array: x values, then probabilities."""
        return np.vstack([self._x, self._p])

    def set_parameters(self, *parameters) -> None:
        """Replace the knots; accepts (x_values, p_values) or a 2 x n array."""
        if len(parameters) == 1:
            parameters = tuple(parameters[0])
        if len(parameters) != 2:
            raise ValueError("Empirical distribution expects x values and p values.")
        self._x = np.array(parameters[0], dtype=float)
        self._p = np.array(parameters[1], dtype=float)
        self._parameters = np.array([self._x.size, self._p.size], dtype=float)
        self._parameters_valid = self._check_knots(self._x, self._p) is None
        self._moments = None
        if self._parameters_valid:
            self._tx = _forward(self._x, self.x_transform)
            self._tp = _forward(self._p, self.probability_transform)

    def validate_parameters(
        self,
        parameters: Sequence[Sequence[float]],
        raise_error: bool = False
    ) -> Optional[str]:
        x_values, p_values = parameters
        reason = self._check_knots(
            np.asarray(x_values, dtype=float), np.asarray(p_values, dtype=float)
        )
        if reason is not None and raise_error:
            raise ParameterError(f"{self.display_name}: {reason}")
        return reason

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        return self._check_knots(self._x, self._p)

    def _check_knots(self, x: np.ndarray, p: np.ndarray) -> Optional[str]:
        if x.ndim != 1 or p.ndim != 1 or x.size != p.size:
            return "x and p values must be 1-D and of equal length"
        if x.size < 2:
            return "at least two knots are required"
        if not np.all(np.isfinite(x)) or not np.all(np.isfinite(p)):
            return "knots must be finite numbers"
        if np.any(np.diff(x) < 0):
            return "x values must be in ascending order"
        if np.any(np.diff(p) < 0):
            return "p values must be in ascending order"
        if np.any(p < 0) or np.any(p > 1):
            return "p values must be between 0 and 1"
        if self.probability_transform == Transform.NORMAL_Z and (np.any(p <= 0) or np.any(p >= 1)):
            return "p values must be strictly between 0 and 1 for the normal Z transform"
        if self.x_transform == Transform.LOGARITHMIC and np.any(x <= 0):
            return "x values must be positive for the logarithmic transform"
        return None

    def parameters_to_string(self) -> List[Tuple[str, str]]:
        def join(values: np.ndarray) -> str:
            return "{" + ",".join(format_parameter(v) for v in values) + "}"
        return [("X Values", join(self._x)), ("P Values", join(self._p))]

    # -------------------------------------------------------------------------
    # Density, distribution and quantile functions
    # -------------------------------------------------------------------------

    def _pdf(self, x: float) -> float:
        if x < self._x[0] or x > self._x[-1]:
            return 0.0
        return max(numerical_derivative(self._cdf, x), 0.0)

    def _cdf(self, x: float) -> float:
        if self.x_transform == Transform.LOGARITHMIC and x <= 0:
            return 0.0
        tx = float(_forward(np.array(x), self.x_transform))
        p = _backward(_interpolate(tx, self._tx, self._tp), self.probability_transform)
        return min(max(p, 0.0), 1.0)

    def _inverse_cdf(self, p: float) -> float:
        low, high = self._x[0], self._x[-1]
        if p <= EMPIRICAL_P_LIMIT:
            return low
        if p >= 1.0 - EMPIRICAL_P_LIMIT:
            return high
        tp = float(_forward(np.array(p), self.probability_transform))
        x = _backward(_interpolate(tp, self._tp, self._tx), self.x_transform)
        return min(max(x, low), high)

    # -------------------------------------------------------------------------
    # Moments and support
    # -------------------------------------------------------------------------

    def central_moments(self, tail: float = MOMENT_TAIL_PROBABILITY) -> np.ndarray:
        """
        (mean, standard deviation, skew, kurtosis) from E[g(X)] = ∫ g(Q(p)) dp.
        """
        if not self._parameters_valid:
            return np.full(4, np.nan)
        if self._moments is not None:
            return self._moments.copy()

        def expect(g) -> float:
            value, _ = integrate.quad(
                lambda p: g(self._inverse_cdf(p)), tail, 1.0 - tail, limit=200
            )
            return value / (1.0 - 2.0 * tail)

        mean = expect(lambda x: x)
        variance = expect(lambda x: (x - mean) ** 2)
        sd = math.sqrt(variance)
        skew = expect(lambda x: (x - mean) ** 3) / sd ** 3 if sd > 0 else np.nan
        kurt = expect(lambda x: (x - mean) ** 4) / variance ** 2 if sd > 0 else np.nan
        self._moments = np.array([mean, sd, skew, kurt])
        return self._moments.copy()

    def _mean(self) -> float:
        return self.central_moments()[0]

    def _mode(self) -> float:
        return np.nan

    def _standard_deviation(self) -> float:
        return self.central_moments()[1]

    def _skewness(self) -> float:
        return self.central_moments()[2]

    def _kurtosis(self) -> float:
        return self.central_moments()[3]

    def _minimum(self) -> float:
        return self._x[0]

    def _maximum(self) -> float:
        return self._x[-1]

    def partial_derivatives(self, probability: float) -> np.ndarray:
        raise NotImplementedError("Quantile derivatives are not defined for empirical knots.")

    def parameter_covariance(
        self,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> np.ndarray:
        raise NotImplementedError("Empirical distributions have no parameter covariance.")

    # -------------------------------------------------------------------------
    # Copying and serialization
    # -------------------------------------------------------------------------

    def _options(self) -> Dict:
        return {
            'x_transform': self.x_transform.value,
            'probability_transform': self.probability_transform.value,
        }

    def clone(self) -> 'EmpiricalDistribution':
        return EmpiricalDistribution(self._x, self._p, self.x_transform, self.probability_transform)

    def to_dict(self) -> Dict:
        return {
            'distribution': self.distribution_type.value,
            'parameters': [self._x.tolist(), self._p.tolist()],
            'options': self._options(),
        }

    def __repr__(self) -> str:
        return f"EmpiricalDistribution(knots={self._x.size})"
