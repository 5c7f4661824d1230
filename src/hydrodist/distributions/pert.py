"""
PERT distributions for three-point expert estimates.

Pert takes (min, most likely, max) directly. PertPercentile takes the
5th, 50th and 95th percentiles and solves, on first use, for the
generalized beta whose quantiles best match them. PertPercentileZ does the
same for probabilities, solving in standard normal space.
"""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from ..config import (
    DistributionType,
    EMPIRICAL_P_LIMIT,
    EPSILON,
    EstimationMethod,
    get_logger,
)
from ..exceptions import ConvergenceError
from ..solvers import nelder_mead
from ..special import standard_normal_cdf, standard_normal_pdf, standard_normal_z
from ..statistics import percentile
from .base import Estimator, UnivariateDistribution
from .generalized_beta import GeneralizedBeta

_logger = get_logger(__name__)

# Probabilities matched by the percentile solvers
PERCENTILE_PROBABILITIES = (0.05, 0.5, 0.95)


class Pert(UnivariateDistribution):
    """
    PERT distribution: a generalized beta with shape weight 4 on the most
    likely value. A zero-width range (a = c = b) is a point mass.
    """

    distribution_type = DistributionType.PERT
    display_name = "PERT"
    short_display_name = "PERT"
    parameter_labels = ("Min (a)", "Most Likely (c)", "Max (b)")
    parameter_names_short = ("a", "c", "b")

    def __init__(self, minimum: float = 0.0, most_likely: float = 0.5, maximum: float = 1.0):
        self._beta: Optional[GeneralizedBeta] = None
        super().__init__(minimum, most_likely, maximum)

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        a, c, b = values
        if not np.all(np.isfinite(values)):
            return "parameters must be finite numbers"
        if a > b:
            return "min cannot be greater than max"
        if not a <= c <= b:
            return "most likely value must lie between min and max"
        return None

    def _on_parameters_changed(self) -> None:
        a, c, b = self._parameters
        if self._parameters_valid and a < b:
            self._beta = GeneralizedBeta.pert(a, c, b)
        else:
            self._beta = None

    @property
    def is_point_mass(self) -> bool:
        return self._beta is None

    def _pdf(self, x: float) -> float:
        if self.is_point_mass:
            return 0.0
        return self._beta._pdf(x)

    def _cdf(self, x: float) -> float:
        if self.is_point_mass:
            return 0.0 if x < self._parameters[0] else 1.0
        return self._beta._cdf(x)

    def _inverse_cdf(self, p: float) -> float:
        if self.is_point_mass:
            return self._parameters[0]
        return self._beta._inverse_cdf(p)

    def _mean(self) -> float:
        a, c, b = self._parameters
        return (a + 4.0 * c + b) / 6.0

    def _median(self) -> float:
        a, c, b = self._parameters
        return (a + 6.0 * c + b) / 8.0

    def _mode(self) -> float:
        return self._parameters[1]

    def _standard_deviation(self) -> float:
        a, _, b = self._parameters
        mean = self._mean()
        return np.sqrt((mean - a) * (b - mean) / 7.0)

    def _skewness(self) -> float:
        return np.nan if self.is_point_mass else self._beta._skewness()

    def _kurtosis(self) -> float:
        return np.nan if self.is_point_mass else self._beta._kurtosis()

    def _minimum(self) -> float:
        return self._parameters[0]

    def _maximum(self) -> float:
        return self._parameters[2]

    def _estimators(self) -> Dict[EstimationMethod, Estimator]:
        return {EstimationMethod.METHOD_OF_PERCENTILES: self._fit_percentiles}

    @staticmethod
    def _fit_percentiles(sample: np.ndarray):
        targets = [percentile(sample, p) for p in PERCENTILE_PROBABILITIES]
        return PertPercentile(*targets).to_pert().get_parameters()


class PertPercentile(UnivariateDistribution):
    """
    PERT-like generalized beta defined by its 5th, 50th and 95th percentiles.

    The beta is solved lazily by a bounded Nelder-Mead search on the sum of
    squared quantile errors, seeded from the PERT through the three points.
    Results are clamped to [min_allowable_value, max_allowable_value].
    """

    distribution_type = DistributionType.PERT_PERCENTILE
    display_name = "PERT Percentile"
    short_display_name = "PERT %"
    parameter_labels = ("5%", "50%", "95%")
    parameter_names_short = ("5%", "50%", "95%")

    def __init__(
        self,
        fifth: float = 0.05,
        fiftieth: float = 0.5,
        ninety_fifth: float = 0.95,
        min_allowable_value: float = -np.inf,
        max_allowable_value: float = np.inf
    ):
        self.min_allowable_value = min_allowable_value
        self.max_allowable_value = max_allowable_value
        self._beta: Optional[GeneralizedBeta] = None
        self._solved = False
        super().__init__(fifth, fiftieth, ninety_fifth)

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        fifth, fiftieth, ninety_fifth = values
        if not np.all(np.isfinite(values)):
            return "percentiles must be finite numbers"
        if fifth > ninety_fifth:
            return "the 5% cannot be greater than the 95%"
        if not fifth <= fiftieth <= ninety_fifth:
            return "the 50% must be between the 5% and 95%"
        return None

    def _on_parameters_changed(self) -> None:
        self._beta = None
        self._solved = False

    # -------------------------------------------------------------------------
    # Solver space
    # -------------------------------------------------------------------------

    def _to_solver_space(self, x: float) -> float:
        return x

    def _from_solver_space(self, z: float) -> float:
        return z

    def _solver_bounds(self, fifth: float, ninety_fifth: float):
        span = ninety_fifth - fifth
        return fifth - 2.0 * span, ninety_fifth + 2.0 * span

    def _clamp(self, x: float) -> float:
        return min(max(x, self.min_allowable_value), self.max_allowable_value)

    @property
    def solved_beta(self) -> Optional[GeneralizedBeta]:
        """The fitted beta in solver space; None when all percentiles coincide."""
        if not self._solved:
            self._solve()
        return self._beta

    def _solve(self) -> None:
        targets = [self._to_solver_space(v) for v in self._parameters]
        self._solved = True
        if targets[0] == targets[2]:
            self._beta = None
            return

        seed = GeneralizedBeta.pert(*targets)
        low, high = self._solver_bounds(targets[0], targets[2])
        trial = GeneralizedBeta()

        def sum_of_squares(theta: np.ndarray) -> float:
            trial.set_parameters(theta)
            if not trial.parameters_valid:
                return np.inf
            return sum(
                (target - trial._inverse_cdf(p)) ** 2
                for p, target in zip(PERCENTILE_PROBABILITIES, targets)
            )

        initial = seed.get_parameters()
        try:
            best = nelder_mead(
                sum_of_squares,
                initial,
                lower=[EPSILON, EPSILON, low, low],
                upper=[initial[0] * 100.0, initial[1] * 100.0, high, high],
            )
        except ConvergenceError as e:
            _logger.warning(f"{self.display_name} solve did not converge; using best point")
            best = e.best
        self._beta = GeneralizedBeta(*best)

    def to_pert(self) -> Pert:
        """PERT with the solved beta's minimum, mode and maximum."""
        beta = self.solved_beta
        if beta is None:
            point = self._parameters[1]
            return Pert(point, point, point)
        return Pert(beta.minimum, beta.mode, beta.maximum)

    # -------------------------------------------------------------------------
    # Density, distribution and quantile functions
    # -------------------------------------------------------------------------

    def _point(self) -> float:
        return self._clamp(self._parameters[1])

    def _pdf(self, x: float) -> float:
        beta = self.solved_beta
        if beta is None or np.isnan(beta.mode):
            return 0.0
        return beta._pdf(self._clamp(x))

    def _cdf(self, x: float) -> float:
        beta = self.solved_beta
        if beta is None:
            return 0.0 if x < self._point() else 1.0
        return beta._cdf(self._to_solver_space(self._clamp(x)))

    def _inverse_cdf(self, p: float) -> float:
        beta = self.solved_beta
        if beta is None:
            return self._point()
        return self._clamp(self._from_solver_space(beta._inverse_cdf(p)))

    def _mean(self) -> float:
        beta = self.solved_beta
        return self._point() if beta is None else self._clamp(beta._mean())

    def _median(self) -> float:
        beta = self.solved_beta
        if beta is None:
            return self._point()
        return self._clamp(self._from_solver_space(beta._inverse_cdf(0.5)))

    def _mode(self) -> float:
        beta = self.solved_beta
        if beta is None:
            return self._point()
        return self._clamp(self._from_solver_space(beta._mode()))

    def _standard_deviation(self) -> float:
        beta = self.solved_beta
        return 0.0 if beta is None else beta._standard_deviation()

    def _skewness(self) -> float:
        beta = self.solved_beta
        return np.nan if beta is None else beta._skewness()

    def _kurtosis(self) -> float:
        beta = self.solved_beta
        return np.nan if beta is None else beta._kurtosis()

    def _minimum(self) -> float:
        beta = self.solved_beta
        if beta is None:
            return self._point()
        return self._clamp(self._from_solver_space(beta._minimum()))

    def _maximum(self) -> float:
        beta = self.solved_beta
        if beta is None:
            return self._point()
        return self._clamp(self._from_solver_space(beta._maximum()))

    # -------------------------------------------------------------------------
    # Copying and serialization
    # -------------------------------------------------------------------------

    def _options(self) -> Dict:
        return {
            'min_allowable_value': float(self.min_allowable_value),
            'max_allowable_value': float(self.max_allowable_value),
        }

    def clone(self) -> 'PertPercentile':
        return type(self)(*self._parameters, **self._options())

    def to_dict(self) -> Dict:
        result = super().to_dict()
        result['options'] = self._options()
        return result


class PertPercentileZ(PertPercentile):
    """
    PERT percentile distribution for probabilities.

    The percentiles are probabilities in [0, 1]; the beta is fitted to their
    standard normal quantiles, and results are mapped back through Φ.
    """

    distribution_type = DistributionType.PERT_PERCENTILE_Z
    display_name = "PERT Percentile Z"
    short_display_name = "PERT Z"

    def _check_parameters(self, values: np.ndarray) -> Optional[str]:
        reason = super()._check_parameters(values)
        if reason is None and (np.any(values < 0.0) or np.any(values > 1.0)):
            return "the percentiles must be between 0 and 1"
        return reason

    def _to_solver_space(self, x: float) -> float:
        return standard_normal_z(x)

    def _from_solver_space(self, z: float) -> float:
        return standard_normal_cdf(z)

    def _solver_bounds(self, fifth: float, ninety_fifth: float):
        return (standard_normal_z(EMPIRICAL_P_LIMIT),
                standard_normal_z(1.0 - EMPIRICAL_P_LIMIT))

    def _pdf(self, x: float) -> float:
        beta = self.solved_beta
        if beta is None or not 0.0 < x < 1.0:
            return 0.0
        # Change of variables z = Φ⁻¹(x)
        z = standard_normal_z(self._clamp(x))
        return beta._pdf(z) / standard_normal_pdf(z)

    def _cdf(self, x: float) -> float:
        if self.solved_beta is not None and x <= 0.0:
            return 0.0
        if self.solved_beta is not None and x >= 1.0:
            return 1.0
        return super()._cdf(x)

    def _mean(self) -> float:
        if self.solved_beta is None:
            return self._point()
        return self.central_moments()[0]

    def _standard_deviation(self) -> float:
        if self.solved_beta is None:
            return 0.0
        return self.central_moments()[1]

    def _skewness(self) -> float:
        if self.solved_beta is None:
            return np.nan
        return self.central_moments()[2]

    def _kurtosis(self) -> float:
        if self.solved_beta is None:
            return np.nan
        return self.central_moments()[3]
