"""
hydrodist - Univariate Probability Distributions for Hydrologic Frequency Analysis

Evaluate, fit and quantify the uncertainty of univariate distributions used
in flood and low-flow frequency analysis, risk assessment and expert
elicitation.

Every family shares one contract:
- pdf, cdf and inverse_cdf (NaN for invalid parameters, never an exception)
- closed-form or numerical moments and support limits
- estimate() by product moments, L-moments, maximum likelihood or
  percentiles, replacing the parameters only when the fit succeeds
- delta-method quantile variance and quantile Jacobians

References:
    Hosking, J.R.M., Wallis, J.R. (1997). Regional Frequency Analysis: An
    Approach Based on L-Moments. Cambridge University Press.

    Stedinger, J.R., Vogel, R.M., Foufoula-Georgiou, E. (1993). Frequency
    analysis of extreme events. Handbook of Hydrology, chapter 18.

Example:
    >>> from hydrodist import GeneralizedExtremeValue, EstimationMethod
    >>>
    >>> # Fit annual peak flows by L-moments
    >>> gev = GeneralizedExtremeValue()
    >>> gev.estimate(annual_peaks, EstimationMethod.METHOD_OF_LINEAR_MOMENTS)
    >>>
    >>> # 100-year flood and its delta-method variance
    >>> q100 = gev.inverse_cdf(0.99)
    >>> gev.estimate(annual_peaks, 'mle')
    >>> var = gev.quantile_variance(0.99, len(annual_peaks), 'mle')
"""

__version__ = "2026.1"

# Distribution families
from .distributions import (
    UnivariateDistribution,
    Cauchy,
    ChiSquared,
    EmpiricalDistribution,
    Transform,
    GeneralizedBeta,
    Geometric,
    GeneralizedExtremeValue,
    GeneralizedPareto,
    InverseGamma,
    NoncentralT,
    Pareto,
    Pert,
    PertPercentile,
    PertPercentileZ,
    Poisson,
    Rayleigh,
    Triangular,
)

# Construction and fitting by type
from .distributions import (
    RECOMMENDED_METHODS,
    create_distribution,
    distribution_from_dict,
    fit_distribution,
)

# Configuration
from .config import (
    DistributionType,
    EstimationMethod,
    get_logger,
)

# Errors
from .exceptions import (
    HydrodistError,
    ParameterError,
    DomainError,
    ConvergenceError,
    NonConvergenceError,
)

# Sample statistics
from .statistics import (
    PlottingPosition,
    linear_moments,
    percentile,
    plotting_positions,
    product_moments,
)

# Uncertainty
from .uncertainty import (
    delta_method_variance,
    numerical_quantile_gradient,
    quantile_confidence_interval,
)

__all__ = [
    # Version
    "__version__",
    # Distributions
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
    "Pareto",
    "Pert",
    "PertPercentile",
    "PertPercentileZ",
    "Poisson",
    "Rayleigh",
    "Triangular",
    # Construction and fitting
    "RECOMMENDED_METHODS",
    "create_distribution",
    "distribution_from_dict",
    "fit_distribution",
    # Configuration
    "DistributionType",
    "EstimationMethod",
    "get_logger",
    # Errors
    "HydrodistError",
    "ParameterError",
    "DomainError",
    "ConvergenceError",
    "NonConvergenceError",
    # Sample statistics
    "PlottingPosition",
    "linear_moments",
    "percentile",
    "plotting_positions",
    "product_moments",
    # Uncertainty
    "delta_method_variance",
    "numerical_quantile_gradient",
    "quantile_confidence_interval",
]
