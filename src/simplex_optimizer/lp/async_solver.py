"""Asyncio front-end for the simplex solver.

The synchronous solver runs on the default executor thread. Pivot events are
handed back to the event loop through an :class:`asyncio.Queue`, so progress
reflects the pivots actually made.

Example:
    >>> async def main():
    ...     async for progress in solve_with_progress([3.0, 2.0], constraints):
    ...         print(progress.iteration, progress.phase_label, progress.objective_value)
"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from typing import AsyncIterator, Optional, Sequence

from ..errors import SolveCancelledError
from ..schemas import SimplexConstraint, SimplexProgress, SimplexResult, SolveOptions
from .simplex import PHASE_ONE, PHASE_TWO, PivotEvent, solve
from .utils import validate_problem

logger = logging.getLogger(__name__)


async def maximize_async(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    options: Optional[SolveOptions] = None,
) -> SimplexResult:
    return await asyncio.to_thread(solve, objective, constraints, True, options)


async def minimize_async(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    options: Optional[SolveOptions] = None,
) -> SimplexResult:
    return await asyncio.to_thread(solve, objective, constraints, False, options)


async def solve_with_progress(
    objective: Sequence[float],
    constraints: Sequence[SimplexConstraint],
    maximize: bool = True,
    options: Optional[SolveOptions] = None,
    report_every: int = 1,
) -> AsyncIterator[SimplexProgress]:
    """
    Solve on a worker thread and stream progress.

    Yields one ``initialization`` update, one ``optimization`` update per
    ``report_every`` pivots, and a final ``finalization`` update carrying the
    status. Solver errors propagate unchanged. Closing the generator or
    cancelling its task stops the worker at its next pivot.
    """

    validate_problem(objective, constraints)
    if report_every < 1:
        raise ValueError("report_every must be at least 1")

    yield SimplexProgress(
        iteration=0,
        objective_value=0.0,
        phase_label="Initialization",
        phase="initialization",
    )

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[PivotEvent] = asyncio.Queue()
    cancelled = threading.Event()

    def on_pivot(event: PivotEvent) -> None:
        if cancelled.is_set():
            raise SolveCancelledError("Progress consumer went away")
        if event.iteration % report_every == 0:
            loop.call_soon_threadsafe(queue.put_nowait, event)

    worker = loop.run_in_executor(
        None,
        functools.partial(solve, objective, constraints, maximize, options, on_pivot),
    )

    getter: Optional[asyncio.Future] = None
    try:
        while True:
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({getter, worker}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                yield _optimization_progress(getter.result())
                continue
            getter.cancel()
            break

        while not queue.empty():
            yield _optimization_progress(queue.get_nowait())

        result = await worker
    finally:
        if getter is not None and not getter.done():
            getter.cancel()
        if not worker.done():
            logger.debug("Progress consumer stopped early; cancelling worker")
            cancelled.set()
            worker.cancel()

    yield SimplexProgress(
        iteration=result.iterations,
        objective_value=result.objective_value,
        phase_label=PHASE_ONE if result.status == "infeasible" else PHASE_TWO,
        phase="finalization",
        status=result.status,
    )


def _optimization_progress(event: PivotEvent) -> SimplexProgress:
    return SimplexProgress(
        iteration=event.iteration,
        objective_value=event.objective_value,
        phase_label=event.phase,
        phase="optimization",
    )
