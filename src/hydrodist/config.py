"""
Configuration module for the hydrodist distribution engine.

Contains enums, numerical constants, and logging setup shared by every
distribution family, the solvers and the sample statistics.
"""

import logging
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class EstimationMethod(Enum):
    """
    Parameter estimation methods.

    'moments': match sample product moments (mean, standard deviation, skew)
    'lmoments': match sample L-moments (robust for small samples)
    'mle': maximize the log-likelihood of the sample
    'percentiles': match the 5th, 50th and 95th sample percentiles (PERT)
    """

    METHOD_OF_MOMENTS = "moments"
    METHOD_OF_LINEAR_MOMENTS = "lmoments"
    MAXIMUM_LIKELIHOOD = "mle"
    METHOD_OF_PERCENTILES = "percentiles"

    def __str__(self):
        return self.value

    @staticmethod
    def from_string(s: str) -> 'EstimationMethod':
        """
        Convert string to EstimationMethod enum.

        Accepts either the short value ('mle') or the member name
        ('MAXIMUM_LIKELIHOOD'), case-insensitive.

        :param s: string value
        :return: EstimationMethod enum value
        :raises ValueError: if string doesn't match any method
        """
        key = s.strip().lower()
        for method in EstimationMethod:
            if key in (method.value, method.name.lower()):
                return method
        raise ValueError(
            f"Invalid estimation method: '{s}'. "
            f"Must be one of: {[m.value for m in EstimationMethod]}"
        )


class DistributionType(Enum):
    """Supported univariate distribution families."""

    CAUCHY = "cauchy"
    CHI_SQUARED = "chi_squared"
    GEOMETRIC = "geometric"
    INVERSE_GAMMA = "inverse_gamma"
    GENERALIZED_EXTREME_VALUE = "gev"
    GENERALIZED_PARETO = "gpa"
    PARETO = "pareto"
    POISSON = "poisson"
    RAYLEIGH = "rayleigh"
    TRIANGULAR = "triangular"
    NONCENTRAL_T = "noncentral_t"
    GENERALIZED_BETA = "generalized_beta"
    PERT = "pert"
    PERT_PERCENTILE = "pert_percentile"
    PERT_PERCENTILE_Z = "pert_percentile_z"
    EMPIRICAL = "empirical"

    def __str__(self):
        return self.value

    @staticmethod
    def from_string(s: str) -> 'DistributionType':
        """
        Convert string to DistributionType enum.

        :param s: string value (e.g., 'gev' or 'GENERALIZED_EXTREME_VALUE')
        :return: DistributionType enum value
        :raises ValueError: if string doesn't match any distribution
        """
        key = s.strip().lower()
        for dist_type in DistributionType:
            if key in (dist_type.value, dist_type.name.lower()):
                return dist_type
        raise ValueError(
            f"Invalid distribution type: '{s}'. "
            f"Must be one of: {[d.value for d in DistributionType]}"
        )


# =============================================================================
# CONSTANTS
# =============================================================================

# Shape parameters with |kappa| below this are treated as the Gumbel /
# exponential limit in GEV and GPA formulas
NEAR_ZERO = 1e-4

# Small value to avoid division by zero
EPSILON = 1e-10

# Euler-Mascheroni constant
EULER = 0.5772156649015329

# Quantile solver tolerances (on x, relative to max(1, |x|), and on probability)
SOLVER_X_TOLERANCE = 1e-8
SOLVER_P_TOLERANCE = 1e-10
SOLVER_MAX_ITERATIONS = 100

# Bracket expansion attempts before the quantile solver gives up
BRACKET_MAX_EXPANSIONS = 200

# Relative step for central finite differences
NUMERICAL_DERIVATIVE_STEP = 1e-6

# Probabilities closer than this to 0 or 1 map to the empirical support limits
EMPIRICAL_P_LIMIT = 1e-16

# Minimum number of observations accepted by estimate()
MIN_SAMPLE_SIZE = 3

# Nelder-Mead tolerances for the likelihood and percentile systems
OPTIMIZER_X_TOLERANCE = 1e-8
OPTIMIZER_F_TOLERANCE = 1e-8
OPTIMIZER_MAX_ITERATIONS = 10000


# =============================================================================
# LOGGING
# =============================================================================

def get_logger(
    name: str,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Set up and return a logger with consistent formatting.

    :param name: logger name (typically __name__ of calling module)
    :param level: logging level (default: logging.INFO)
    :return: configured logger instance
    """
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
