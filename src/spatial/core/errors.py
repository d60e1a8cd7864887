"""
Exceptions raised by the distance and interpolation engine.
"""

from __future__ import annotations


class SpatialError(Exception):
    """Base class for errors raised by the spatial package."""


class InvalidArgumentError(SpatialError, ValueError):
    """Unknown function/transform name, or mismatched input lengths."""


class NumericDegenerateError(SpatialError, ArithmeticError):
    """A computation has no well-defined numeric result."""


class ConvergenceError(NumericDegenerateError):
    """Vincenty iteration did not converge within the iteration cap."""

    def __init__(self, message: str, n_failed: int = 0):
        super().__init__(message)
        self.n_failed = n_failed


class OperationCancelled(SpatialError):
    """A long-running aggregation was cancelled before completion."""


class VincentyConvergenceWarning(RuntimeWarning):
    """Vincenty returned a best-effort value for non-converging pairs."""
