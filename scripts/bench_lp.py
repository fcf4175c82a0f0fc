#!/usr/bin/env python3
"""Time the solver and split its pivots between Phase I and Phase II.

Mixed-relation instances carry one artificial column per ``>=`` and ``==``
row, so they show how much of a solve goes into finding a feasible basis.
"""

import argparse
import json
import time
from collections import Counter
from pathlib import Path
from typing import Iterator, Tuple

from simplex_optimizer.lp.simplex import PHASE_ONE, PHASE_TWO, solve
from simplex_optimizer.schemas import LPProblem, SolveOptions
from scripts.generate_instances import generate_random_lp

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


def example_cases() -> Iterator[Tuple[str, LPProblem]]:
    for path in sorted(EXAMPLES_DIR.glob("*.json")):
        yield path.name, LPProblem.model_validate(json.loads(path.read_text()))


def random_cases(sizes, seeds: int) -> Iterator[Tuple[str, LPProblem]]:
    for size in sizes:
        for seed in range(seeds):
            yield f"mixed-{size}x{size}-{seed}", generate_random_lp(size, size, seed, mixed=True)


def run_case(problem: LPProblem, opts: SolveOptions) -> Tuple[str, float, Counter, float]:
    pivots: Counter = Counter()
    start = time.perf_counter()
    result = solve(
        problem.objective,
        problem.constraints,
        maximize=problem.sense == "max",
        options=opts,
        on_pivot=lambda event: pivots.update([event.phase]),
    )
    elapsed_ms = (time.perf_counter() - start) * 1000
    return result.status, result.objective_value, pivots, elapsed_ms


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the two-phase simplex solver.")
    parser.add_argument("--sizes", type=int, nargs="+", default=[10, 40, 80], help="Square instance sizes")
    parser.add_argument("--seeds", type=int, default=3, help="Instances per size")
    parser.add_argument("--max-iters", type=int, default=SolveOptions().max_iters, help="Pivot limit per phase")
    args = parser.parse_args()

    opts = SolveOptions(max_iters=args.max_iters)
    cases = list(example_cases()) + list(random_cases(args.sizes, args.seeds))

    print("name,status,objective,phase1_pivots,phase2_pivots,phase1_share,time_ms")
    for name, problem in cases:
        status, objective, pivots, elapsed_ms = run_case(problem, opts)
        total = pivots[PHASE_ONE] + pivots[PHASE_TWO]
        share = pivots[PHASE_ONE] / total if total else 0.0
        print(
            f"{name},{status},{objective:.6g},{pivots[PHASE_ONE]},{pivots[PHASE_TWO]},"
            f"{share:.2f},{elapsed_ms:.2f}"
        )


if __name__ == "__main__":
    main()
