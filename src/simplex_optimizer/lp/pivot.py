import logging
from typing import Callable, Optional, Tuple

import numpy as np

from ..errors import FailedToConvergeError
from .utils import Tableau

logger = logging.getLogger(__name__)

PivotCallback = Callable[[int, Tableau], None]


def select_entering(tableau: Tableau, tol: float) -> Optional[int]:
    """Bland's rule: the first column whose reduced cost is below ``-tol``."""
    costs = tableau.objective_row[: tableau.rhs_col]
    candidates = np.flatnonzero(costs < -tol)
    if candidates.size == 0:
        return None
    return int(candidates[0])


def select_leaving(tableau: Tableau, entering: int, tol: float) -> Optional[int]:
    """
    Minimum-ratio test over rows with a positive entry in ``entering``.

    Ratios within ``tol`` of each other are ties, resolved in favour of the row
    whose basic variable has the smaller column index.
    """
    table = tableau.table
    rhs_col = tableau.rhs_col
    min_ratio = np.inf
    leaving: Optional[int] = None

    for row in range(tableau.num_rows):
        coef = table[row, entering]
        if coef <= tol:
            continue
        ratio = table[row, rhs_col] / coef
        if leaving is None or ratio < min_ratio - tol:
            min_ratio = ratio
            leaving = row
        elif abs(ratio - min_ratio) <= tol and tableau.basis[row] < tableau.basis[leaving]:
            leaving = row
    return leaving


def pivot(tableau: Tableau, row: int, col: int) -> None:
    """Make ``col`` basic in ``row`` by elementary row operations, in place."""
    table = tableau.table
    table[row] /= table[row, col]
    factors = table[:, col].copy()
    factors[row] = 0.0
    table -= np.outer(factors, table[row])
    table[:, col] = 0.0
    table[row, col] = 1.0
    tableau.basis[row] = col


def run_simplex(
    tableau: Tableau,
    tol: float,
    max_iterations: int,
    start: int = 0,
    on_pivot: Optional[PivotCallback] = None,
) -> Tuple[str, int]:
    """
    Pivot until no column improves the objective row or a column is unbounded.

    ``max_iterations`` bounds the pivots made by this call alone. ``start`` is
    the number of pivots already made by an earlier phase and only offsets the
    iteration numbers passed to ``on_pivot``. Returns ``("optimal" | "unbounded",
    pivots made here)``. Raises :class:`FailedToConvergeError` once
    ``max_iterations`` pivots are spent and an improving column still exists.
    """

    iterations = 0
    while True:
        entering = select_entering(tableau, tol)
        if entering is None:
            return "optimal", iterations

        if iterations >= max_iterations:
            raise FailedToConvergeError(
                f"Simplex method did not converge within {max_iterations} iterations",
                iterations=start + iterations,
            )

        leaving = select_leaving(tableau, entering, tol)
        if leaving is None:
            logger.debug("Column %d has no positive entry: unbounded", entering)
            return "unbounded", iterations

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Pivot %d: column %d enters, column %d leaves (row %d)",
                start + iterations + 1,
                entering,
                tableau.basis[leaving],
                leaving,
            )
        pivot(tableau, leaving, entering)
        iterations += 1
        if on_pivot is not None:
            on_pivot(start + iterations, tableau)
