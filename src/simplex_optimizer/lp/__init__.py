"""Linear programming: two-phase tableau simplex."""

from .async_solver import maximize_async, minimize_async, solve_with_progress
from .diagnostics import analyze_infeasibility
from .simplex import PivotEvent, maximize, minimize, simplex_solve, solve
from .utils import Tableau, build_standard_form, flip_relation

__all__ = [
    "maximize",
    "minimize",
    "solve",
    "simplex_solve",
    "PivotEvent",
    "maximize_async",
    "minimize_async",
    "solve_with_progress",
    "analyze_infeasibility",
    "Tableau",
    "build_standard_form",
    "flip_relation",
]
