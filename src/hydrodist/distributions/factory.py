"""
Construction of distributions by type tag, unified fitting and
dictionary round-trips.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Type, Union

from ..config import DistributionType, EstimationMethod
from .base import UnivariateDistribution, as_estimation_method
from .cauchy import Cauchy
from .chi_squared import ChiSquared
from .empirical import EmpiricalDistribution
from .generalized_beta import GeneralizedBeta
from .geometric import Geometric
from .gev import GeneralizedExtremeValue
from .gpa import GeneralizedPareto
from .inverse_gamma import InverseGamma
from .noncentral_t import NoncentralT
from .pareto import Pareto
from .pert import Pert, PertPercentile, PertPercentileZ
from .poisson import Poisson
from .rayleigh import Rayleigh
from .triangular import Triangular


# Mapping of distribution types to classes
_DISTRIBUTION_CLASSES: Dict[DistributionType, Type[UnivariateDistribution]] = {
    DistributionType.CAUCHY: Cauchy,
    DistributionType.CHI_SQUARED: ChiSquared,
    DistributionType.GEOMETRIC: Geometric,
    DistributionType.INVERSE_GAMMA: InverseGamma,
    DistributionType.GENERALIZED_EXTREME_VALUE: GeneralizedExtremeValue,
    DistributionType.GENERALIZED_PARETO: GeneralizedPareto,
    DistributionType.PARETO: Pareto,
    DistributionType.POISSON: Poisson,
    DistributionType.RAYLEIGH: Rayleigh,
    DistributionType.TRIANGULAR: Triangular,
    DistributionType.NONCENTRAL_T: NoncentralT,
    DistributionType.GENERALIZED_BETA: GeneralizedBeta,
    DistributionType.PERT: Pert,
    DistributionType.PERT_PERCENTILE: PertPercentile,
    DistributionType.PERT_PERCENTILE_Z: PertPercentileZ,
    DistributionType.EMPIRICAL: EmpiricalDistribution,
}

# Default estimation method per family when fit_distribution() is not told one
RECOMMENDED_METHODS = {
    DistributionType.GENERALIZED_EXTREME_VALUE: EstimationMethod.METHOD_OF_LINEAR_MOMENTS,
    DistributionType.GENERALIZED_PARETO: EstimationMethod.MAXIMUM_LIKELIHOOD,
    DistributionType.CAUCHY: EstimationMethod.MAXIMUM_LIKELIHOOD,
    DistributionType.INVERSE_GAMMA: EstimationMethod.MAXIMUM_LIKELIHOOD,
    DistributionType.PARETO: EstimationMethod.MAXIMUM_LIKELIHOOD,
    DistributionType.RAYLEIGH: EstimationMethod.MAXIMUM_LIKELIHOOD,
    DistributionType.TRIANGULAR: EstimationMethod.MAXIMUM_LIKELIHOOD,
    DistributionType.PERT: EstimationMethod.METHOD_OF_PERCENTILES,
}


def _as_distribution_type(distribution: Union[str, DistributionType]) -> DistributionType:
    if isinstance(distribution, DistributionType):
        return distribution
    return DistributionType.from_string(distribution.replace('-', '_'))


def create_distribution(
    distribution: Union[str, DistributionType],
    parameters: Optional[Sequence] = None,
    **options
) -> UnivariateDistribution:
    """
    Build a distribution by type.

    :param distribution: distribution type (string or DistributionType)
    :param parameters: parameter vector in family order; defaults if None
    :param options: extra constructor keywords (allowable-value clamps,
        empirical transforms)
    :return: distribution instance

    Example:
        >>> gev = create_distribution('gev', [10849, 5745.6, 0.005])
        >>> gev.inverse_cdf(0.99)
    """
    cls = _DISTRIBUTION_CLASSES[_as_distribution_type(distribution)]
    if parameters is None:
        return cls(**options)
    return cls(*parameters, **options)


def fit_distribution(
    sample: Sequence[float],
    distribution: Union[str, DistributionType],
    method: Union[str, EstimationMethod, None] = None
) -> UnivariateDistribution:
    """
    Unified interface for distribution fitting.

    :param sample: observations
    :param distribution: distribution type (string or DistributionType)
    :param method: estimation method. If None, uses the recommended default
        for the family (method of moments where none is listed).
    :return: fitted distribution

    Example:
        >>> gpa = fit_distribution(peaks, 'gpa', 'mle')
        >>> gpa.quantile_variance(0.99, len(peaks), 'mle')
    """
    dist_type = _as_distribution_type(distribution)
    if method is None:
        method = RECOMMENDED_METHODS.get(dist_type, EstimationMethod.METHOD_OF_MOMENTS)
    dist = create_distribution(dist_type)
    dist.estimate(sample, as_estimation_method(method))
    return dist


def distribution_from_dict(data: Dict) -> UnivariateDistribution:
    """Rebuild a distribution from the output of ``to_dict()``."""
    cls = _DISTRIBUTION_CLASSES[_as_distribution_type(data['distribution'])]
    return cls.from_dict(data)
