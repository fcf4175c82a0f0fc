from typing import Any, Dict, List, Optional, Sequence

from ..schemas import SimplexConstraint, SolveOptions
from .simplex import maximize


def analyze_infeasibility(
    constraints: Sequence[SimplexConstraint],
    options: Optional[SolveOptions] = None,
) -> Dict[str, Any]:
    """Very small IIS-style heuristic: drop each constraint and re-check feasibility."""

    opts = options or SolveOptions()
    constraints = list(constraints)
    num_vars = len(constraints[0].coefficients) if constraints else 0
    zero_objective = [0.0] * num_vars

    base = maximize(zero_objective, constraints, opts)
    if base.status != "infeasible":
        return {
            "status": base.status,
            "message": "Model is not infeasible.",
            "conflicting_constraints": [],
            "suggestions": [],
        }

    conflicts: List[int] = []
    for idx in range(len(constraints)):
        remaining = constraints[:idx] + constraints[idx + 1 :]
        if not remaining:
            conflicts.append(idx)
            continue
        if maximize(zero_objective, remaining, opts).status != "infeasible":
            conflicts.append(idx)

    suggestions = []
    if conflicts:
        suggestions.append("Relax or inspect the conflicting constraints above.")
    else:
        suggestions.append("Consider relaxing bounds or checking for contradictory requirements.")

    return {
        "status": "infeasible",
        "message": "Detected infeasibility; listed constraints critical to infeasibility.",
        "conflicting_constraints": conflicts,
        "suggestions": suggestions,
    }
