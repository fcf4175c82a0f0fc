import logging
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..schemas import LPProblem, SimplexConstraint, SimplexResult, SolveOptions
from .pivot import PivotCallback, pivot, run_simplex
from .utils import Tableau, build_standard_form, validate_problem

logger = logging.getLogger(__name__)

PHASE_ONE = "Phase I"
PHASE_TWO = "Phase II"


class PivotEvent(NamedTuple):
    """Reported after every pivot.

    In Phase I ``objective_value`` is the current sum of artificial variables;
    in Phase II it is the current objective in the caller's sense.
    """

    phase: str
    iteration: int
    objective_value: float


PivotListener = Callable[[PivotEvent], None]


def maximize(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    options: Optional[SolveOptions] = None,
    on_pivot: Optional[PivotListener] = None,
) -> SimplexResult:
    return solve(objective, constraints, maximize=True, options=options, on_pivot=on_pivot)


def minimize(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    options: Optional[SolveOptions] = None,
    on_pivot: Optional[PivotListener] = None,
) -> SimplexResult:
    return solve(objective, constraints, maximize=False, options=options, on_pivot=on_pivot)


def simplex_solve(problem: LPProblem, options: Optional[SolveOptions] = None) -> SimplexResult:
    """Solve an :class:`LPProblem`, honouring its ``sense``."""
    return solve(
        problem.objective,
        problem.constraints,
        maximize=problem.sense == "max",
        options=options,
    )


def solve(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    maximize: bool = True,
    options: Optional[SolveOptions] = None,
    on_pivot: Optional[PivotListener] = None,
) -> SimplexResult:
    """
    Two-phase tableau simplex for ``max/min c^T x  s.t.  A x {<=,==,>=} b, x >= 0``.

    Minimization solves ``max -c^T x`` and negates the objective value back.
    Raises :class:`InvalidInputError` for malformed input and
    :class:`FailedToConvergeError` when either phase needs more than
    ``options.max_iters`` pivots; infeasible and unbounded problems are
    reported through ``status``.
    """

    opts = options or SolveOptions()
    c = validate_problem(objective, constraints)
    sign = 1.0 if maximize else -1.0

    result = _solve_maximize(sign * c, constraints, opts, sign, on_pivot)
    logger.debug(
        "Solve finished: status=%s iterations=%d objective=%g",
        result.status,
        result.iterations,
        sign * result.objective_value,
    )
    if maximize:
        return result
    return result.model_copy(update={"objective_value": _clean(-result.objective_value, opts.tol)})


def _solve_maximize(
    c: np.ndarray,
    constraints: Sequence[SimplexConstraint],
    opts: SolveOptions,
    sign: float,
    on_pivot: Optional[PivotListener],
) -> SimplexResult:
    tableau = build_standard_form(c, constraints, maximize=True)
    n = tableau.num_original_vars
    iterations = 0

    if tableau.artificial_indices:
        feasible, phase1_iters = _phase_I(tableau, opts, _listener(PHASE_ONE, -1.0, on_pivot))
        iterations += phase1_iters
        if not feasible:
            return SimplexResult(
                solution=[0.0] * n,
                objective_value=0.0,
                status="infeasible",
                iterations=iterations,
                message="Infeasible.",
            )

    status, phase2_iters = _phase_II(tableau, opts, iterations, _listener(PHASE_TWO, sign, on_pivot))
    iterations += phase2_iters

    return SimplexResult(
        solution=_extract_solution(tableau, opts.tol),
        objective_value=_clean(float(tableau.table[-1, -1]), opts.tol),
        status=status,
        iterations=iterations,
        message="Unbounded." if status == "unbounded" else "",
    )


def _listener(phase: str, sign: float, on_pivot: Optional[PivotListener]) -> Optional[PivotCallback]:
    if on_pivot is None:
        return None

    def notify(iteration: int, tableau: Tableau) -> None:
        on_pivot(PivotEvent(phase, iteration, sign * float(tableau.table[-1, -1])))

    return notify


def _phase_I(
    tableau: Tableau,
    opts: SolveOptions,
    on_pivot: Optional[PivotCallback],
) -> Tuple[bool, int]:
    """Minimise the sum of artificial variables; feasible iff it reaches zero."""

    table = tableau.table
    objective = table[-1]
    objective[:] = 0.0
    objective[list(tableau.artificial_indices)] = 1.0
    for row, basic in enumerate(tableau.basis):
        if tableau.is_artificial(basic):
            objective -= table[row]

    logger.debug("Phase I: %d artificial variables", len(tableau.artificial_indices))
    _, iterations = run_simplex(tableau, opts.tol, opts.max_iters, 0, on_pivot)

    infeasibility = abs(float(table[-1, -1]))
    if infeasibility > opts.tol:
        logger.debug("Phase I ended with artificial sum %g: infeasible", infeasibility)
        return False, iterations
    return True, iterations


def _phase_II(
    tableau: Tableau,
    opts: SolveOptions,
    start: int,
    on_pivot: Optional[PivotCallback],
) -> Tuple[str, int]:
    table = tableau.table
    artificial = list(tableau.artificial_indices)

    # A basic artificial is at zero here; its column cannot be dropped while basic.
    for art in artificial:
        if art not in tableau.basis:
            continue
        row = tableau.basis.index(art)
        col = _replacement_column(tableau, row, opts.tol)
        if col is None:
            logger.info("Artificial column %d stays basic at zero in redundant row %d", art, row)
            continue
        pivot(tableau, row, col)

    if artificial:
        table[:, artificial] = 0.0

    keep = np.ones(table.shape[1], dtype=bool)
    keep[artificial] = False
    objective = table[-1]
    objective[keep] = tableau.original_objective[keep]

    for row, basic in enumerate(tableau.basis):
        if tableau.is_artificial(basic):
            continue
        coef = objective[basic]
        if coef != 0.0:
            objective -= coef * table[row]

    logger.debug("Phase II: starting after %d iterations", start)
    return run_simplex(tableau, opts.tol, opts.max_iters, start, on_pivot)


def _replacement_column(tableau: Tableau, row: int, tol: float) -> Optional[int]:
    values = tableau.table[row]
    for col in range(tableau.rhs_col):
        if tableau.is_artificial(col) or col in tableau.basis:
            continue
        if abs(values[col]) > tol:
            return col
    return None


def _extract_solution(tableau: Tableau, tol: float) -> List[float]:
    """
    Read the original variables off the final tableau.

    A non-basic variable is zero in tableau terms. For a slack single-variable
    ``x_j >= k`` row that would under-report ``x_j``, so such a variable is
    lifted to its bound ``k``.
    """

    n = tableau.num_original_vars
    rhs = tableau.table[:-1, -1]
    solution = np.zeros(n)
    for row, basic in enumerate(tableau.basis):
        if basic < n:
            solution[basic] = rhs[row]

    for info in tableau.surplus_info:
        coeffs = np.asarray(info.coefficients)
        touched = np.flatnonzero(np.abs(coeffs) > tol)
        if touched.size != 1:
            continue
        var = int(touched[0])
        coef = coeffs[var]
        if coef <= 0.0 or var in tableau.basis or abs(solution[var]) > tol:
            continue
        if info.surplus_col not in tableau.basis:
            continue
        solution[var] = max(0.0, info.rhs / abs(coef))

    solution[np.abs(solution) < tol] = 0.0
    return [float(v) for v in solution]


def _clean(value: float, tol: float) -> float:
    return 0.0 if abs(value) < tol else value
