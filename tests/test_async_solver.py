import asyncio
import contextlib
import threading
import time

import pytest

from scripts.generate_instances import generate_random_lp
from simplex_optimizer.errors import FailedToConvergeError, InvalidInputError, SolveCancelledError
from simplex_optimizer.lp import async_solver
from simplex_optimizer.lp.async_solver import maximize_async, minimize_async, solve_with_progress
from simplex_optimizer.lp.simplex import maximize, minimize, solve
from simplex_optimizer.schemas import SimplexConstraint, SolveOptions

PRODUCTION_MIX = [
    SimplexConstraint(coefficients=[1.0, 1.0], relation="<=", rhs=4.0),
    SimplexConstraint(coefficients=[2.0, 1.0], relation="<=", rhs=5.0),
]

COVERING = [
    SimplexConstraint(coefficients=[1.0, 1.0], relation=">=", rhs=4.0),
    SimplexConstraint(coefficients=[2.0, 1.0], relation=">=", rhs=5.0),
]


async def collect(agen):
    return [progress async for progress in agen]


def test_async_results_match_sync_solver():
    async def main():
        return (
            await maximize_async([3.0, 2.0], PRODUCTION_MIX),
            await minimize_async([2.0, 3.0], COVERING, SolveOptions(tol=1e-9)),
        )

    maximized, minimized = asyncio.run(main())

    assert maximized == maximize([3.0, 2.0], PRODUCTION_MIX)
    assert minimized == minimize([2.0, 3.0], COVERING, SolveOptions(tol=1e-9))
    assert maximized.objective_value == pytest.approx(9.0)
    assert minimized.objective_value == pytest.approx(8.0)


def test_async_errors_propagate():
    with pytest.raises(InvalidInputError):
        asyncio.run(maximize_async([], PRODUCTION_MIX))


def test_progress_stream_reports_every_pivot():
    updates = asyncio.run(collect(solve_with_progress([3.0, 2.0], PRODUCTION_MIX)))

    assert updates[0].phase == "initialization"
    assert updates[0].iteration == 0
    assert updates[-1].phase == "finalization"
    assert updates[-1].status == "optimal"
    assert updates[-1].objective_value == pytest.approx(9.0)

    pivots = [u for u in updates if u.phase == "optimization"]
    assert [u.iteration for u in pivots] == [1, 2]
    assert all(u.phase_label == "Phase II" for u in pivots)
    assert [u.objective_value for u in pivots] == pytest.approx([7.5, 9.0])
    assert updates[-1].iteration == 2


def test_progress_includes_phase_one_for_artificial_rows():
    updates = asyncio.run(collect(solve_with_progress([2.0, 3.0], COVERING, maximize=False)))

    labels = [u.phase_label for u in updates if u.phase == "optimization"]
    assert labels
    assert labels[0] == "Phase I"
    assert labels == sorted(labels)
    assert updates[-1].status == "optimal"
    assert updates[-1].objective_value == pytest.approx(8.0)


def test_progress_throttling():
    updates = asyncio.run(collect(solve_with_progress([3.0, 2.0], PRODUCTION_MIX, report_every=2)))

    assert [u.iteration for u in updates if u.phase == "optimization"] == [2]


def test_progress_reports_infeasible_status():
    constraints = [
        SimplexConstraint(coefficients=[1.0, 1.0], relation="<=", rhs=1.0),
        SimplexConstraint(coefficients=[1.0, 1.0], relation=">=", rhs=3.0),
    ]
    updates = asyncio.run(collect(solve_with_progress([1.0, 1.0], constraints)))

    assert updates[-1].status == "infeasible"
    assert updates[-1].phase_label == "Phase I"


def test_progress_validates_before_first_update():
    async def main():
        agen = solve_with_progress([1.0, 2.0], PRODUCTION_MIX[:1] + [SimplexConstraint(coefficients=[1.0], relation="<=", rhs=1.0)])
        await agen.__anext__()

    with pytest.raises(InvalidInputError, match="Constraint 1"):
        asyncio.run(main())


def test_progress_propagates_solver_failure():
    constraints = [
        SimplexConstraint(coefficients=[0.25, -8.0, -1.0, 9.0], relation="<=", rhs=0.0),
        SimplexConstraint(coefficients=[0.5, -12.0, -0.5, 3.0], relation="<=", rhs=0.0),
        SimplexConstraint(coefficients=[0.0, 0.0, 1.0, 0.0], relation="<=", rhs=1.0),
    ]

    with pytest.raises(FailedToConvergeError):
        asyncio.run(collect(solve_with_progress([0.75, -20.0, 0.5, -6.0], constraints, options=SolveOptions(max_iters=2))))


def test_consumer_can_stop_early():
    async def main():
        agen = solve_with_progress([3.0, 2.0], PRODUCTION_MIX)
        first = await agen.__anext__()
        await agen.aclose()
        return first, await maximize_async([3.0, 2.0], PRODUCTION_MIX)

    first, result = asyncio.run(main())

    assert first.phase == "initialization"
    assert result.status == "optimal"


def test_cancelling_the_consumer_task():
    async def consume():
        async for _ in solve_with_progress([3.0, 2.0], PRODUCTION_MIX):
            await asyncio.sleep(10)

    async def main():
        task = asyncio.create_task(consume())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())


@pytest.fixture
def recorded_worker(monkeypatch):
    """Run the worker through a slowed-down, outcome-recording ``solve``."""

    record = {"outcome": None, "pivots": 0}
    finished = threading.Event()

    def recording_solve(objective, constraints, maximize, options, on_pivot):
        def slow_on_pivot(event):
            record["pivots"] = event.iteration
            on_pivot(event)
            time.sleep(0.001)

        try:
            result = solve(objective, constraints, maximize, options, slow_on_pivot)
        except SolveCancelledError:
            record["outcome"] = "cancelled"
            raise
        else:
            record["outcome"] = "finished"
            return result
        finally:
            finished.set()

    monkeypatch.setattr(async_solver, "solve", recording_solve)
    return record, finished


def long_problem():
    # Takes a couple of thousand pivots.
    return generate_random_lp(120, 120, 1, mixed=True)


def test_cancelling_the_consumer_task_stops_the_worker(recorded_worker):
    record, finished = recorded_worker
    problem = long_problem()
    seen = []

    async def consume():
        agen = solve_with_progress(problem.objective, problem.constraints)
        async with contextlib.aclosing(agen):
            async for progress in agen:
                seen.append(progress)
                if progress.iteration >= 3:
                    await asyncio.sleep(10)

    async def main():
        task = asyncio.create_task(consume())
        while len(seen) < 4:
            await asyncio.sleep(0.001)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())

    assert finished.wait(timeout=30)
    assert record["outcome"] == "cancelled"
    assert 3 <= record["pivots"] < 500
    assert all(progress.phase != "finalization" for progress in seen)


def test_closing_the_generator_mid_solve_stops_the_worker(recorded_worker):
    record, finished = recorded_worker
    problem = long_problem()

    async def main():
        agen = solve_with_progress(problem.objective, problem.constraints)
        updates = []
        async for progress in agen:
            updates.append(progress)
            if progress.phase == "optimization" and progress.iteration >= 3:
                break
        await agen.aclose()
        return updates

    updates = asyncio.run(main())

    assert finished.wait(timeout=30)
    assert record["outcome"] == "cancelled"
    assert updates[-1].iteration == 3
