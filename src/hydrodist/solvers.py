"""
Root finding, differentiation and optimization helpers.

The quantile solver of every family without a closed-form inverse is built
from these pieces: a geometric bracket expansion, a Newton iteration
safeguarded by bisection, Brent's method, and central finite differences.
The likelihood systems use a bounded, scaled Nelder-Mead simplex.

References:
    - Press, W.H., et al. (2007). Numerical Recipes, 3rd ed., sections 9.3
      (Brent), 9.4 (Newton with bracketing) and 10.5 (downhill simplex).
    - Brent, R.P. (1973). Algorithms for Minimization without Derivatives.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from scipy import optimize

from .config import (
    BRACKET_MAX_EXPANSIONS,
    NUMERICAL_DERIVATIVE_STEP,
    OPTIMIZER_F_TOLERANCE,
    OPTIMIZER_MAX_ITERATIONS,
    OPTIMIZER_X_TOLERANCE,
    SOLVER_MAX_ITERATIONS,
    SOLVER_P_TOLERANCE,
    SOLVER_X_TOLERANCE,
    get_logger,
)
from .exceptions import ConvergenceError, NonConvergenceError

_logger = get_logger(__name__)


# =============================================================================
# BRACKETING
# =============================================================================

def expand_bracket(
    f: Callable[[float], float],
    lo: float,
    hi: float,
    lower_limit: float = -np.inf,
    upper_limit: float = np.inf,
    max_expansions: int = BRACKET_MAX_EXPANSIONS
) -> Tuple[float, float]:
    """
    Widen [lo, hi] until an increasing function changes sign across it.

    The interval grows geometrically away from its midpoint, never past
    ``lower_limit`` / ``upper_limit``.

    :param f: increasing function (e.g. cdf(x) - p)
    :param lo: initial lower end
    :param hi: initial upper end
    :param lower_limit: smallest admissible x
    :param upper_limit: largest admissible x
    :param max_expansions: expansion attempts before giving up
    :return: (lo, hi) with f(lo) <= 0 <= f(hi)
    :raises NonConvergenceError: if no sign change is found
    """
    lo = max(lo, lower_limit)
    hi = min(hi, upper_limit)
    if hi <= lo:
        hi = lo + 1.0
    width = hi - lo
    for _ in range(max_expansions):
        f_lo = f(lo)
        f_hi = f(hi)
        if f_lo <= 0.0 <= f_hi:
            return lo, hi
        width *= 2.0
        if f_lo > 0.0:
            lo = max(lo - width, lower_limit)
        if f_hi < 0.0:
            hi = min(hi + width, upper_limit)
    raise NonConvergenceError(
        f"Could not bracket root after {max_expansions} expansions",
        best=0.5 * (lo + hi),
        iterations=max_expansions,
    )


# =============================================================================
# ROOT FINDING
# =============================================================================

def newton_bisection(
    f: Callable[[float], float],
    df: Optional[Callable[[float], float]],
    lo: float,
    hi: float,
    x0: Optional[float] = None,
    x_tol: float = SOLVER_X_TOLERANCE,
    f_tol: float = SOLVER_P_TOLERANCE,
    max_iterations: int = SOLVER_MAX_ITERATIONS
) -> float:
    """
    Find the root of an increasing function inside a bracket.

    Newton steps use ``df`` as the derivative; a step that leaves the
    bracket, or a zero/non-finite derivative, is replaced by bisection. The
    bracket shrinks every iteration so the method cannot diverge.

    :param f: increasing function with f(lo) <= 0 <= f(hi)
    :param df: derivative of f, or None for pure bisection
    :param lo: lower end of bracket
    :param hi: upper end of bracket
    :param x0: starting point (default: bracket midpoint)
    :param x_tol: relative tolerance on the step, and on the bracket width
        relative to max(1, |x|)
    :param f_tol: tolerance on |f(x)|
    :param max_iterations: iteration cap
    :return: x with |f(x)| < f_tol or a bracket narrower than x_tol
    :raises NonConvergenceError: at the iteration cap; ``best`` is the
        bracket midpoint
    """
    x = 0.5 * (lo + hi) if x0 is None or not lo < x0 < hi else x0

    for _ in range(max_iterations):
        fx = f(x)
        if abs(fx) < f_tol:
            return x
        if fx < 0.0:
            lo = x
        else:
            hi = x

        x_new = np.nan
        if df is not None:
            slope = df(x)
            if slope > 0.0 and np.isfinite(slope):
                x_new = x - fx / slope
        if not np.isfinite(x_new) or x_new <= lo or x_new >= hi:
            x_new = 0.5 * (lo + hi)

        if abs(x_new - x) <= x_tol * abs(x_new) or (hi - lo) <= x_tol * max(1.0, abs(x_new)):
            return x_new
        x = x_new

    raise NonConvergenceError(
        f"Root finder did not converge in {max_iterations} iterations",
        best=0.5 * (lo + hi),
        iterations=max_iterations,
    )


def brent(
    f: Callable[[float], float],
    a: float,
    b: float,
    x_tol: float = SOLVER_X_TOLERANCE,
    max_iterations: int = SOLVER_MAX_ITERATIONS
) -> float:
    """
    Brent's method for a root of f on [a, b].

    :param f: continuous function with a sign change on [a, b]
    :param a: lower end
    :param b: upper end
    :param x_tol: absolute tolerance on the root
    :param max_iterations: iteration cap
    :return: root of f
    :raises ValueError: if f(a) and f(b) have the same sign
    :raises NonConvergenceError: if the iteration cap is reached
    """
    try:
        root, result = optimize.brentq(
            f, a, b, xtol=x_tol, maxiter=max_iterations, full_output=True, disp=False
        )
    except ValueError as e:
        raise ValueError(f"Root is not bracketed by [{a}, {b}]: {e}") from e
    if not result.converged:
        raise NonConvergenceError(
            f"Brent's method did not converge: {result.flag}",
            best=root,
            iterations=result.iterations,
        )
    return float(root)


# =============================================================================
# DIFFERENTIATION
# =============================================================================

def numerical_derivative(
    f: Callable[[float], float],
    x: float,
    step: float = NUMERICAL_DERIVATIVE_STEP
) -> float:
    """
    Central finite-difference derivative of f at x.

    The step is relative: h = step * max(1, |x|).
    """
    h = step * max(1.0, abs(x))
    return (f(x + h) - f(x - h)) / (2.0 * h)


def numerical_gradient(
    f: Callable[[np.ndarray], float],
    point: Sequence[float],
    step: float = NUMERICAL_DERIVATIVE_STEP,
    steps: Optional[Sequence[float]] = None
) -> np.ndarray:
    """
    Central finite-difference gradient of a scalar function of a vector.

    Where f is not finite at the lower neighbour (e.g. it leaves the
    domain) the forward difference is used for that coordinate.

    :param f: function of a parameter vector
    :param point: evaluation point
    :param step: relative step per coordinate, h = step * max(1, |x|)
    :param steps: absolute step per coordinate; overrides ``step``
    :return: gradient array, same length as point
    """
    point = np.asarray(point, dtype=float)
    if steps is None:
        steps = step * np.maximum(1.0, np.abs(point))
    gradient = np.zeros(point.size)
    center = None
    for i in range(point.size):
        h = steps[i]
        up = point.copy()
        down = point.copy()
        up[i] += h
        down[i] -= h
        f_down = f(down)
        if np.isfinite(f_down):
            gradient[i] = (f(up) - f_down) / (2.0 * h)
        else:
            if center is None:
                center = f(point)
            gradient[i] = (f(up) - center) / h
    return gradient


# =============================================================================
# OPTIMIZATION
# =============================================================================

def maximize_scalar(
    f: Callable[[float], float],
    lo: float,
    hi: float,
    x_tol: float = SOLVER_X_TOLERANCE
) -> float:
    """
    Locate the maximum of a unimodal function on [lo, hi].

    :return: arg max of f
    """
    if lo > hi:
        lo, hi = hi, lo
    if lo == hi:
        return lo
    result = optimize.minimize_scalar(
        lambda x: -f(x), bounds=(lo, hi), method="bounded",
        options={"xatol": x_tol * max(1.0, abs(lo), abs(hi))}
    )
    return float(result.x)


def nelder_mead(
    f: Callable[[np.ndarray], float],
    initial: Sequence[float],
    lower: Sequence[float],
    upper: Sequence[float],
    maximize: bool = False,
    x_tol: float = OPTIMIZER_X_TOLERANCE,
    f_tol: float = OPTIMIZER_F_TOLERANCE,
    max_iterations: int = OPTIMIZER_MAX_ITERATIONS
) -> np.ndarray:
    """
    Bounded downhill-simplex optimization.

    Coordinates are rescaled by max(1, |initial|) so the x tolerance acts
    relative to each parameter's magnitude. Non-finite objective values are
    treated as the worst possible value.

    :param f: objective function of a parameter vector
    :param initial: starting point (clipped into the bounds)
    :param lower: lower bounds
    :param upper: upper bounds
    :param maximize: maximize instead of minimize
    :return: best parameter vector
    :raises ConvergenceError: if the simplex has not converged at the
        iteration cap; ``best`` holds the best vertex
    """
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    x0 = np.clip(np.asarray(initial, dtype=float), lower, upper)
    scale = np.maximum(1.0, np.abs(x0))
    sign = -1.0 if maximize else 1.0

    def objective(u: np.ndarray) -> float:
        value = f(x0 + scale * u)
        if not np.isfinite(value):
            return np.inf
        return sign * value

    n = x0.size
    u_lower = (lower - x0) / scale
    u_upper = (upper - x0) / scale
    simplex = np.zeros((n + 1, n))
    for i in range(n):
        vertex = np.zeros(n)
        vertex[i] = 0.05
        if vertex[i] > u_upper[i]:
            vertex[i] = -vertex[i]
        simplex[i + 1] = np.clip(vertex, u_lower, u_upper)

    result = optimize.minimize(
        objective,
        np.zeros(n),
        method="Nelder-Mead",
        bounds=list(zip(u_lower, u_upper)),
        options={
            "xatol": x_tol,
            "fatol": f_tol,
            "maxiter": max_iterations,
            "maxfev": 4 * max_iterations,
            "initial_simplex": simplex,
        },
    )
    best = x0 + scale * result.x
    if not result.success or not np.isfinite(result.fun):
        _logger.warning(f"Nelder-Mead failed after {result.nit} iterations: {result.message}")
        raise ConvergenceError(
            f"Nelder-Mead did not converge: {result.message}",
            best=best,
            iterations=int(result.nit),
        )
    return best


def magnitude_bound(value: float) -> float:
    """
    Order-of-magnitude search bound 10^ceil(log10|value| + 1).

    Used to box likelihood searches around a moment or L-moment seed.
    """
    magnitude = abs(value)
    if not np.isfinite(magnitude) or magnitude < 1.0:
        magnitude = 1.0
    return 10.0 ** math.ceil(math.log10(magnitude) + 1.0)
