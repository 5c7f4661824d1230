"""Univariate distribution families."""

from .base import UnivariateDistribution
from .cauchy import Cauchy
from .chi_squared import ChiSquared
from .empirical import EmpiricalDistribution, Transform
from .factory import (
    RECOMMENDED_METHODS,
    create_distribution,
    distribution_from_dict,
    fit_distribution,
)
from .generalized_beta import GeneralizedBeta
from .geometric import Geometric
from .gev import GeneralizedExtremeValue
from .gpa import GeneralizedPareto
from .inverse_gamma import InverseGamma
from .noncentral_t import NoncentralT, noncentral_t_cdf
from .pareto import Pareto
from .pert import Pert, PertPercentile, PertPercentileZ
from .poisson import Poisson
from .rayleigh import Rayleigh
from .triangular import Triangular

__all__ = [
    "UnivariateDistribution",
    "Cauchy",
    "ChiSquared",
    "EmpiricalDistribution",
    "Transform",
    "GeneralizedBeta",
    "Geometric",
    "GeneralizedExtremeValue",
    "GeneralizedPareto",
    "InverseGamma",
    "NoncentralT",
    "noncentral_t_cdf",
    "Pareto",
    "Pert",
    "PertPercentile",
    "PertPercentileZ",
    "Poisson",
    "Rayleigh",
    "Triangular",
    "RECOMMENDED_METHODS",
    "create_distribution",
    "distribution_from_dict",
    "fit_distribution",
]
