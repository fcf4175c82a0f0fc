import pytest

from scripts.bench_lp import example_cases, random_cases, run_case
from simplex_optimizer.lp.simplex import PHASE_ONE, PHASE_TWO
from simplex_optimizer.schemas import SolveOptions


def test_example_cases_cover_the_examples_directory():
    names = [name for name, _ in example_cases()]

    assert names == ["diet.json", "production_mix.json"]


def test_run_case_splits_pivots_by_phase():
    cases = dict(example_cases())

    status, objective, pivots, elapsed_ms = run_case(cases["diet.json"], SolveOptions())
    assert status == "optimal"
    assert objective == pytest.approx(9.6)
    assert pivots[PHASE_ONE] > 0
    assert elapsed_ms >= 0.0

    status, objective, pivots, _ = run_case(cases["production_mix.json"], SolveOptions())
    assert status == "optimal"
    assert objective == pytest.approx(9.0)
    assert pivots[PHASE_ONE] == 0
    assert pivots[PHASE_TWO] == 2


def test_random_cases_are_mixed_and_named_by_size():
    cases = list(random_cases([4, 6], seeds=2))

    assert [name for name, _ in cases] == [
        "mixed-4x4-0",
        "mixed-4x4-1",
        "mixed-6x6-0",
        "mixed-6x6-1",
    ]
    relations = {cons.relation for _, problem in cases for cons in problem.constraints}
    assert relations == {"<=", ">=", "=="}
