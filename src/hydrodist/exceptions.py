"""Exception types raised by the distribution engine."""

from typing import Optional


class HydrodistError(Exception):
    """Base exception for all hydrodist errors."""


class ParameterError(HydrodistError, ValueError):
    """Raised when strict validation of a parameter vector fails."""


class DomainError(HydrodistError, ValueError):
    """Raised when an argument lies outside the function's domain."""


class ConvergenceError(HydrodistError, RuntimeError):
    """
    Raised when an iterative estimator fails to converge.

    ``best`` holds the best point found before giving up (a parameter vector
    for estimators, a scalar for root finders).
    """

    def __init__(self, message: str, best: Optional[object] = None, iterations: int = 0):
        super().__init__(message)
        self.best = best
        self.iterations = iterations


class NonConvergenceError(ConvergenceError):
    """Raised when a root finder reaches its iteration cap."""
