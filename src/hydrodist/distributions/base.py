"""
Common contract for every univariate distribution family.

Each family subclasses UnivariateDistribution and supplies its parameter
checks, density, distribution function and moments. The base class owns the
parts that are identical for every family:

- parameter storage with atomic replacement and a validity flag
- NaN propagation for invalid parameters and probability-domain checks
- the numerical quantile solver for families without a closed-form inverse
- the estimate() dispatch that never leaves a partially updated state
- default (numerical) quantile derivatives, delta-method quantile variance
  and the quantile Jacobian
- log-likelihood, numerical central moments, inversion sampling and
  dictionary serialization

References:
    - Stedinger, J.R., Vogel, R.M., Foufoula-Georgiou, E. (1993). Frequency
      analysis of extreme events. Handbook of Hydrology, chapter 18.
    - Kite, G.W. (1977). Frequency and Risk Analyses in Hydrology.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import integrate

from ..config import (
    DistributionType,
    EstimationMethod,
    MIN_SAMPLE_SIZE,
    SOLVER_P_TOLERANCE,
    get_logger,
)
from ..exceptions import DomainError, NonConvergenceError, ParameterError
from ..solvers import expand_bracket, newton_bisection
from ..special import standard_normal_z
from ..statistics import validate_sample
from ..uncertainty import delta_method_variance, numerical_quantile_gradient

_logger = get_logger(__name__)

# Probability mass left out of each tail when integrating numerical moments
MOMENT_TAIL_PROBABILITY = 1e-12

Estimator = Callable[[np.ndarray], Sequence[float]]


def as_estimation_method(method: Union[EstimationMethod, str]) -> EstimationMethod:
    """Accept an EstimationMethod or its string form."""
    if isinstance(method, EstimationMethod):
        return method
    return EstimationMethod.from_string(method)


def format_parameter(value: float) -> str:
    """Format a parameter value for display: integral values without '.0'."""
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


class UnivariateDistribution(ABC):
    """
    Abstract univariate distribution.

    Subclasses declare ``distribution_type``, ``display_name``,
    ``short_display_name``, ``parameter_labels`` and
    ``parameter_names_short`` and implement the underscore hooks.
    Parameters listed in ``integer_parameters`` only take whole values.
    """

    distribution_type: DistributionType
    display_name: str = ""
    short_display_name: str = ""
    parameter_labels: Tuple[str, ...] = ()
    parameter_names_short: Tuple[str, ...] = ()
    is_discrete: bool = False
    integer_parameters: Tuple[int, ...] = ()
    min_sample_size: int = MIN_SAMPLE_SIZE

    def __init__(self, *parameters: float):
        self._parameters = np.full(len(self.parameter_labels), np.nan)
        self._parameters_valid = False
        self.set_parameters(*parameters)

    # -------------------------------------------------------------------------
    # Parameters
    # -------------------------------------------------------------------------

    @property
    def number_of_parameters(self) -> int:
        return len(self.parameter_labels)

    @property
    def parameters_valid(self) -> bool:
        """True iff the current parameter vector is inside the family's domain."""
        return self._parameters_valid

    def get_parameters(self) -> np.ndarray:
        """Return a copy of the parameter vector in family order."""
        return self._parameters.copy()

    def set_parameters(self, *parameters: Union[float, Sequence[float]]) -> None:
        """
        Replace the whole parameter vector.

        Accepts either the individual parameters or a single sequence. The
        vector is stored even when invalid; validity is exposed through
        ``parameters_valid``.

        :raises ValueError: if the number of parameters is wrong
        """
        if len(parameters) == 1 and np.ndim(parameters[0]) == 1:
            parameters = tuple(parameters[0])
        if len(parameters) != self.number_of_parameters:
            raise ValueError(
                f"{self.display_name} expects {self.number_of_parameters} "
                f"parameters, got {len(parameters)}."
            )
        values = self._normalize_parameters(np.array(parameters, dtype=float))
        self._parameters = values
        self._parameters_valid = self._check_parameters(values) is None
        self._on_parameters_changed()

    def validate_parameters(
        self,
        parameters: Sequence[float],
        raise_error: bool = False
    ) -> Optional[str]:
        """
        Check a candidate parameter vector without storing it.

        :param parameters: candidate vector in family order
        :param raise_error: raise ParameterError instead of returning the reason
        :return: None if valid, otherwise the reason it is invalid
        :raises ParameterError: if invalid and raise_error is True
        """
        values = np.asarray(parameters, dtype=float)
        if values.size != self.number_of_parameters:
            reason = f"expected {self.number_of_parameters} parameters, got {values.size}"
        else:
            reason = self._check_parameters(self._normalize_parameters(values.copy()))
        if reason is not None and raise_error:
            raise ParameterError(f"{self.display_name}: {reason}")
        return reason

    def parameters_to_string(self) -> List[Tuple[str, str]]:
        """Ordered (label, value) pairs for display."""
        return [
            (label, format_parameter(value))
            for label, value in zip(self.parameter_labels, self._parameters)
        ]

    def _normalize_parameters(self, values: np.ndarray) -> np.ndarray:
        return values

    def _on_parameters_changed(self) -> None:
        pass

    @abstractmethod
    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        """Return None if valid, otherwise the reason the vector is invalid."""

    # -------------------------------------------------------------------------
    # Density, distribution and quantile functions
    # -------------------------------------------------------------------------

    def pdf(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Probability density (or mass) at x; 0 outside the support and NaN
        for invalid parameters.
        """
        if np.ndim(x) > 0:
            return np.array([self.pdf(v) for v in np.ravel(x)]).reshape(np.shape(x))
        if not self._parameters_valid or np.isnan(x):
            return np.nan
        return float(self._pdf(float(x)))

    def cdf(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Cumulative probability at x; NaN for invalid parameters."""
        if np.ndim(x) > 0:
            return np.array([self.cdf(v) for v in np.ravel(x)]).reshape(np.shape(x))
        if not self._parameters_valid or np.isnan(x):
            return np.nan
        return float(min(max(self._cdf(float(x)), 0.0), 1.0))

    def survival(self, x: float) -> float:
        """Exceedance probability 1 - cdf(x)."""
        return 1.0 - self.cdf(x)

    def inverse_cdf(self, probability: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Quantile function.

        p = 0 and p = 1 return the support limits (±inf when unbounded).

        :param probability: non-exceedance probability in [0, 1]
        :return: quantile; NaN for invalid parameters
        :raises DomainError: if probability is outside [0, 1]
        """
        if np.ndim(probability) > 0:
            return np.array(
                [self.inverse_cdf(p) for p in np.ravel(probability)]
            ).reshape(np.shape(probability))
        p = float(probability)
        if not 0.0 <= p <= 1.0:
            raise DomainError(f"Probability must be between 0 and 1, got {probability}.")
        if not self._parameters_valid:
            return np.nan
        if p == 0.0:
            return self.minimum
        if p == 1.0:
            return self.maximum
        return float(self._inverse_cdf(p))

    @abstractmethod
    def _pdf(self, x: float) -> float:
        ...

    @abstractmethod
    def _cdf(self, x: float) -> float:
        ...

    def _inverse_cdf(self, p: float) -> float:
        return self._solve_inverse_cdf(p)

    def _quantile_start(self, p: float) -> Tuple[float, float]:
        """Starting point and spread for the quantile solver (normal approximation)."""
        mean, sd = self._mean(), self._standard_deviation()
        if np.isfinite(mean) and np.isfinite(sd) and sd > 0:
            z = float(np.clip(standard_normal_z(p), -8.0, 8.0))
            return mean + z * sd, sd
        return 0.0, 1.0

    def _solve_inverse_cdf(self, p: float, x0: Optional[float] = None) -> float:
        """
        Numerically invert the distribution function.

        Brackets the root from the support and the moments, then runs the
        bisection-safeguarded Newton iteration on cdf(x) - p. The stop on
        |cdf(x) - p| is relative to min(p, 1 - p) so tail quantiles are
        resolved as finely as central ones. At the iteration cap the best
        bracket midpoint is returned and a warning is logged; if no bracket
        is found the quantile is NaN.
        """
        lower, upper = self._minimum(), self._maximum()
        start, spread = self._quantile_start(p)
        if x0 is not None:
            start = x0
        start = min(max(start, lower), upper)

        def f(x: float) -> float:
            return self._cdf(x) - p

        try:
            lo, hi = expand_bracket(f, start - spread, start + spread, lower, upper)
        except NonConvergenceError:
            _logger.warning(
                f"{self.display_name} quantile solver could not bracket p={p}; returning NaN"
            )
            return np.nan
        try:
            return newton_bisection(
                f, self._pdf, lo, hi, x0=start,
                f_tol=SOLVER_P_TOLERANCE * min(p, 1.0 - p),
            )
        except NonConvergenceError as e:
            _logger.warning(
                f"{self.display_name} quantile solver did not converge for p={p}; "
                f"returning best estimate {e.best}"
            )
            return float(e.best)

    # -------------------------------------------------------------------------
    # Moments and support
    # -------------------------------------------------------------------------

    def _guarded(self, hook: Callable[[], float]) -> float:
        if not self._parameters_valid:
            return np.nan
        return float(hook())

    @property
    def mean(self) -> float:
        return self._guarded(self._mean)

    @property
    def median(self) -> float:
        return self._guarded(self._median)

    @property
    def mode(self) -> float:
        return self._guarded(self._mode)

    @property
    def standard_deviation(self) -> float:
        return self._guarded(self._standard_deviation)

    @property
    def skewness(self) -> float:
        return self._guarded(self._skewness)

    @property
    def kurtosis(self) -> float:
        """Pearson (non-excess) kurtosis."""
        return self._guarded(self._kurtosis)

    @property
    def minimum(self) -> float:
        return self._guarded(self._minimum)

    @property
    def maximum(self) -> float:
        return self._guarded(self._maximum)

    @abstractmethod
    def _mean(self) -> float:
        ...

    def _median(self) -> float:
        return self._inverse_cdf(0.5)

    @abstractmethod
    def _mode(self) -> float:
        ...

    @abstractmethod
    def _standard_deviation(self) -> float:
        ...

    @abstractmethod
    def _skewness(self) -> float:
        ...

    @abstractmethod
    def _kurtosis(self) -> float:
        ...

    @abstractmethod
    def _minimum(self) -> float:
        ...

    @abstractmethod
    def _maximum(self) -> float:
        ...

    def central_moments(self, tail: float = MOMENT_TAIL_PROBABILITY) -> np.ndarray:
        """
        Numerically integrated (mean, standard deviation, skew, kurtosis).

        Continuous families integrate the density between the ``tail`` and
        ``1 - tail`` quantiles; discrete families sum the mass function.

        :param tail: probability mass ignored in each tail
        :return: array of four moments, NaN for invalid parameters or when
            the tail quantiles are not finite
        """
        if not self._parameters_valid:
            return np.full(4, np.nan)
        lo = self.inverse_cdf(tail)
        hi = self.inverse_cdf(1.0 - tail)
        if not (np.isfinite(lo) and np.isfinite(hi)) or hi < lo:
            _logger.warning(
                f"{self.display_name} moment limits [{lo}, {hi}] are unusable; returning NaN"
            )
            return np.full(4, np.nan)

        if self.is_discrete:
            k = np.arange(np.floor(lo), np.ceil(hi) + 1.0)
            w = np.array([self._pdf(v) for v in k])

            def expect(g: Callable[[np.ndarray], np.ndarray]) -> float:
                return float(np.sum(g(k) * w))
        else:
            def expect(g: Callable[[np.ndarray], np.ndarray]) -> float:
                value, _ = integrate.quad(lambda x: g(x) * self._pdf(x), lo, hi, limit=200)
                return value

        mass = expect(lambda x: np.ones_like(x))
        if not mass > 0.0:
            return np.full(4, np.nan)
        mean = expect(lambda x: x) / mass
        variance = expect(lambda x: (x - mean) ** 2) / mass
        sd = np.sqrt(variance)
        skew = expect(lambda x: (x - mean) ** 3) / mass / sd ** 3
        kurt = expect(lambda x: (x - mean) ** 4) / mass / variance ** 2
        return np.array([mean, sd, skew, kurt])

    # -------------------------------------------------------------------------
    # Estimation
    # -------------------------------------------------------------------------

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        """Map of supported estimation methods to estimator functions."""
        return {}

    @property
    def supported_estimation_methods(self) -> List[EstimationMethod]:
        return list(self._estimators())

    def estimate(
        self,
        sample: Sequence[float],
        method: Union[EstimationMethod, str] = EstimationMethod.METHOD_OF_MOMENTS
    ) -> None:
        """
        Fit the parameters to a sample.

        The parameter vector is replaced only after the estimator succeeds
        and produces a valid vector; on any failure the previous parameters
        are kept.

        :param sample: observations (not modified)
        :param method: estimation method
        :raises ValueError: for unusable samples
        :raises NotImplementedError: if the family does not support the method
        :raises ConvergenceError: if an iterative estimator fails
        :raises ParameterError: if the estimator yields an invalid vector
        """
        method = as_estimation_method(method)
        estimator = self._estimators().get(method)
        if estimator is None:
            raise NotImplementedError(
                f"{self.display_name} does not support {method.name} estimation."
            )
        values = validate_sample(sample, self.min_sample_size)
        params = np.asarray(estimator(values), dtype=float)
        reason = self.validate_parameters(params)
        if reason is not None:
            raise ParameterError(
                f"{self.display_name} {method.name} estimate is invalid: {reason}"
            )
        self.set_parameters(params)
        _logger.debug(
            f"{self.short_display_name} fitted by {method.value} "
            f"(n={values.size}): {self.parameters_to_string()}"
        )

    def log_likelihood(self, sample: Sequence[float]) -> float:
        """
        Log-likelihood of a sample under the current parameters.

        :return: Σ log f(x); -inf if any observation has zero density or the
            parameters are invalid
        """
        if not self._parameters_valid:
            return -np.inf
        total = 0.0
        for x in np.asarray(sample, dtype=float):
            density = self._pdf(x)
            if not density > 0.0:
                return -np.inf
            total += math.log(density)
        return total

    # -------------------------------------------------------------------------
    # Uncertainty
    # -------------------------------------------------------------------------

    def _check_probability(self, probability: float) -> None:
        if not 0.0 < probability < 1.0:
            raise DomainError(
                f"Probability must be strictly between 0 and 1, got {probability}."
            )

    def partial_derivatives(self, probability: float) -> np.ndarray:
        """
        Derivatives of the quantile with respect to each parameter.

        Central finite differences unless the family has analytic forms;
        integer parameters are stepped by one unit.
        """
        self._check_probability(probability)
        if not self._parameters_valid:
            return np.full(self.number_of_parameters, np.nan)
        return numerical_quantile_gradient(self, probability)

    def parameter_covariance(
        self,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> np.ndarray:
        """
        Asymptotic covariance matrix of the parameter estimates.

        :raises NotImplementedError: if the family has no closed form for
            the estimation method
        """
        method = as_estimation_method(method)
        raise NotImplementedError(
            f"{self.display_name} has no parameter covariance for {method.name}."
        )

    def quantile_variance(
        self,
        probability: float,
        sample_size: int,
        method: Union[EstimationMethod, str]
    ) -> float:
        """
        Delta-method variance of the quantile estimate, gᵀ C g.

        :param probability: non-exceedance probability in (0, 1)
        :param sample_size: number of observations behind the estimate
        :param method: estimation method used for the parameters
        """
        covariance = self.parameter_covariance(sample_size, method)
        gradient = self.partial_derivatives(probability)
        return delta_method_variance(gradient, covariance)

    def quantile_jacobian(self, probabilities: Sequence[float]) -> Tuple[np.ndarray, float]:
        """
        Jacobian of the quantiles at several probabilities with respect to
        the parameters, and its determinant.

        :param probabilities: one probability per parameter
        :return: (matrix with rows ∂Q(p_i)/∂θ, determinant)
        :raises ValueError: if the number of probabilities is wrong
        """
        if len(probabilities) != self.number_of_parameters:
            raise ValueError(
                f"Expected {self.number_of_parameters} probabilities, "
                f"got {len(probabilities)}."
            )
        matrix = np.array([self.partial_derivatives(p) for p in probabilities])
        return matrix, float(np.linalg.det(matrix))

    # -------------------------------------------------------------------------
    # Sampling, copying and serialization
    # -------------------------------------------------------------------------

    def generate_random_values(self, size: int, seed: Optional[int] = None) -> np.ndarray:
        """Random sample by inversion of uniform variates."""
        rng = np.random.default_rng(seed)
        return np.array([self.inverse_cdf(u) for u in rng.random(size)])

    def clone(self) -> 'UnivariateDistribution':
        return type(self)(*self._parameters)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            'distribution': self.distribution_type.value,
            'parameters': [float(v) for v in self._parameters],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'UnivariateDistribution':
        """Rebuild a distribution written by to_dict()."""
        return cls(*data['parameters'], **data.get('options', {}))

    def __repr__(self) -> str:
        args = ", ".join(format_parameter(v) for v in self._parameters)
        return f"{type(self).__name__}({args})"
