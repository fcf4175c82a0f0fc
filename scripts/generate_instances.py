#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional

from simplex_optimizer.schemas import LPProblem, SimplexConstraint


def generate_random_lp(
    num_vars: int,
    num_constraints: int,
    seed: Optional[int] = None,
    mixed: bool = False,
) -> LPProblem:
    """
    Random LP that is feasible by construction.

    A hidden point ``x0 >= 0`` satisfies every row. With ``mixed`` the rows cycle
    through ``<=``, ``>=`` and ``==`` and coefficients may be negative; a final
    ``sum(x) <= bound`` row keeps the feasible region bounded.
    """
    rng = random.Random(seed)
    x0 = [rng.uniform(0.5, 3.0) for _ in range(num_vars)]
    relations = ["<=", ">=", "=="] if mixed else ["<="]
    constraints: List[SimplexConstraint] = []
    for j in range(num_constraints):
        low = -2.0 if mixed else 0.5
        coefficients = [rng.uniform(low, 5.0) for _ in range(num_vars)]
        activity = sum(a * x for a, x in zip(coefficients, x0))
        relation = relations[j % len(relations)]
        if relation == "<=":
            rhs = activity + rng.uniform(0.5, 4.0)
        elif relation == ">=":
            rhs = activity - rng.uniform(0.5, 4.0)
        else:
            rhs = activity
        constraints.append(SimplexConstraint(coefficients=coefficients, relation=relation, rhs=rhs))

    if mixed:
        constraints.append(
            SimplexConstraint(coefficients=[1.0] * num_vars, relation="<=", rhs=sum(x0) * 4.0)
        )

    return LPProblem(
        name="random-lp",
        sense="max" if mixed else "min",
        objective=[rng.uniform(1.0, 4.0) for _ in range(num_vars)],
        constraints=constraints,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible LP instances.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--mixed", action="store_true", help="Mix <=, >= and == rows")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    instances = [
        generate_random_lp(args.vars, args.constraints, (args.seed or 0) + idx, mixed=args.mixed)
        for idx in range(args.count)
    ]
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
