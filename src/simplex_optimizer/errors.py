"""Exceptions raised by the simplex solver.

Infeasible and unbounded problems are not errors: they come back as the
``status`` of a :class:`~simplex_optimizer.schemas.SimplexResult`.
"""


class SimplexError(Exception):
    """Base class for solver failures."""


class InvalidInputError(SimplexError, ValueError):
    """The problem was rejected before any pivoting took place."""


class FailedToConvergeError(SimplexError, RuntimeError):
    """The iteration budget ran out before optimality or unboundedness was proven."""

    def __init__(self, message: str, iterations: int = 0) -> None:
        super().__init__(message)
        self.iterations = iterations


class SolveCancelledError(SimplexError):
    """A progress consumer abandoned the solve; raised inside the worker thread."""
