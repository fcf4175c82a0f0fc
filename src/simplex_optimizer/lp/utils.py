import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

from ..errors import InvalidInputError
from ..schemas import Relation, SimplexConstraint

logger = logging.getLogger(__name__)


class SurplusVarInfo(NamedTuple):
    """A ``>=`` row as stored in the tableau, after negative-RHS normalisation."""

    row: int
    surplus_col: int
    coefficients: Tuple[float, ...]
    rhs: float


@dataclass
class Tableau:
    """Dense simplex tableau.

    ``table`` has one row per constraint plus the objective row (last), and one
    column per variable plus the right-hand side (last). ``basis[i]`` is the
    column currently basic in constraint row ``i``.
    """

    table: np.ndarray
    basis: List[int]
    num_original_vars: int
    artificial_indices: Tuple[int, ...] = ()
    original_objective: np.ndarray = field(default_factory=lambda: np.zeros(0))
    surplus_info: Tuple[SurplusVarInfo, ...] = ()

    @property
    def num_rows(self) -> int:
        return self.table.shape[0] - 1

    @property
    def rhs_col(self) -> int:
        return self.table.shape[1] - 1

    @property
    def objective_row(self) -> np.ndarray:
        return self.table[-1]

    def is_artificial(self, col: int) -> bool:
        return col in self.artificial_indices


def flip_relation(relation: Relation) -> Relation:
    """Relation obtained by multiplying both sides of a constraint by -1."""
    if relation == "<=":
        return ">="
    if relation == ">=":
        return "<="
    return relation


def validate_problem(objective: Sequence[float], constraints: Sequence[SimplexConstraint]) -> np.ndarray:
    """Check dimensions and finiteness; return the objective as a float array."""
    c = np.asarray(objective, dtype=float).reshape(-1)
    if c.size == 0:
        raise InvalidInputError("Objective function is empty")
    if not constraints:
        raise InvalidInputError("No constraints provided")
    if not np.all(np.isfinite(c)):
        raise InvalidInputError("Objective contains non-finite coefficients")

    n = c.size
    for i, cons in enumerate(constraints):
        if len(cons.coefficients) != n:
            raise InvalidInputError(
                f"Constraint {i} has {len(cons.coefficients)} coefficients, expected {n}"
            )
        if not (np.all(np.isfinite(cons.coefficients)) and np.isfinite(cons.rhs)):
            raise InvalidInputError(f"Constraint {i} contains non-finite values")
    return c


def build_standard_form(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    maximize: bool = True,
) -> Tableau:
    """
    Convert ``objective`` and ``constraints`` into an initial simplex tableau.

    Rows with a negative right-hand side are negated and their relation flipped
    so every stored RHS is non-negative. Columns are laid out as original
    variables, then slacks (``<=``), surpluses (``>=``), artificials (``>=``
    and ``==``). The starting basis is the slack or artificial of each row.
    The objective row holds ``-c`` when maximizing and ``c`` otherwise.
    """

    c = validate_problem(objective, constraints)
    n = c.size
    m = len(constraints)

    relations: List[Relation] = [
        flip_relation(cons.relation) if cons.rhs < 0 else cons.relation for cons in constraints
    ]
    slack_count = sum(1 for rel in relations if rel == "<=")
    surplus_count = sum(1 for rel in relations if rel == ">=")
    artificial_count = surplus_count + sum(1 for rel in relations if rel == "==")
    total_vars = n + slack_count + surplus_count + artificial_count

    table = np.zeros((m + 1, total_vars + 1), dtype=float)

    slack_idx = n
    surplus_idx = n + slack_count
    artificial_idx = n + slack_count + surplus_count

    basis: List[int] = []
    artificial_indices: List[int] = []
    surplus_info: List[SurplusVarInfo] = []

    for row, (cons, relation) in enumerate(zip(constraints, relations)):
        table[row, :n] = cons.coefficients
        table[row, total_vars] = cons.rhs
        if cons.rhs < 0:
            table[row, :] = -table[row, :]

        if relation == "<=":
            table[row, slack_idx] = 1.0
            basis.append(slack_idx)
            slack_idx += 1
        elif relation == ">=":
            table[row, surplus_idx] = -1.0
            table[row, artificial_idx] = 1.0
            basis.append(artificial_idx)
            artificial_indices.append(artificial_idx)
            surplus_info.append(
                SurplusVarInfo(
                    row=row,
                    surplus_col=surplus_idx,
                    coefficients=tuple(float(v) for v in table[row, :n]),
                    rhs=float(table[row, total_vars]),
                )
            )
            surplus_idx += 1
            artificial_idx += 1
        else:  # equality
            table[row, artificial_idx] = 1.0
            basis.append(artificial_idx)
            artificial_indices.append(artificial_idx)
            artificial_idx += 1

    table[m, :n] = -c if maximize else c

    logger.debug(
        "Standard form: %d rows, %d original, %d slack, %d surplus, %d artificial columns",
        m,
        n,
        slack_count,
        surplus_count,
        artificial_count,
    )

    return Tableau(
        table=table,
        basis=basis,
        num_original_vars=n,
        artificial_indices=tuple(artificial_indices),
        original_objective=table[m].copy(),
        surplus_info=tuple(surplus_info),
    )
