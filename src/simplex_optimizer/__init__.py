"""Simplex Optimizer: two-phase tableau simplex for linear programs."""

from .errors import FailedToConvergeError, InvalidInputError, SimplexError, SolveCancelledError
from .lp import (
    analyze_infeasibility,
    maximize,
    maximize_async,
    minimize,
    minimize_async,
    simplex_solve,
    solve,
    solve_with_progress,
)
from .schemas import LPProblem, SimplexConstraint, SimplexProgress, SimplexResult, SolveOptions

__all__ = [
    "SimplexConstraint",
    "SimplexResult",
    "SimplexProgress",
    "SolveOptions",
    "LPProblem",
    "SimplexError",
    "InvalidInputError",
    "FailedToConvergeError",
    "SolveCancelledError",
    "maximize",
    "minimize",
    "solve",
    "simplex_solve",
    "maximize_async",
    "minimize_async",
    "solve_with_progress",
    "analyze_infeasibility",
]
