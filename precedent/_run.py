"""
Ordered executor — runs every task after its dependencies.

Ready-set scheduling: a task is launched the moment its last dependency
settles, so unrelated branches run concurrently and never wait on each
other.

Failure policy: the first handler error stops all new launches. Tasks
already in flight are awaited, their outcomes discarded, then the first
error is returned. Nothing keeps running after execute() returns, and
cancelling execute() cancels every task in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from kungfu import Result, Ok, Error

from precedent._errors import describe
from precedent._graph import Task, TaskRegistry
from precedent._types import TaskId, Outcome
from precedent.lift import from_call

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# run_task() — Execute single task
# ═══════════════════════════════════════════════════════════════════════════════


async def run_task(task: Task) -> Result[Any, Exception]:
    """Invoke the task's handler, awaiting it when it is async."""
    logger.debug(f"Starting task {task.id} ({describe(task.entity)})")
    return await from_call(task.invoke)


# ═══════════════════════════════════════════════════════════════════════════════
# execute() — Execute the whole registry
# ═══════════════════════════════════════════════════════════════════════════════


async def execute(registry: TaskRegistry) -> Outcome:
    """
    Run every task in dependency order.

    Returns Ok(None) once the root's handler has completed, or Error with
    the first handler exception observed.

    Example:
        registry = build(root, KeyAccessor("deps"), handler)

        match await execute(registry):
            case Ok(_):
                print("done")
            case Error(exc):
                print(f"failed: {exc!r}")
    """
    pending: dict[TaskId, set[TaskId]] = {
        task_id: set(task.dependencies) for task_id, task in registry.items()
    }
    in_flight: dict[asyncio.Task[Result[Any, Exception]], TaskId] = {}
    failure: Error[Exception] | None = None

    def launch(task_id: TaskId) -> None:
        del pending[task_id]
        future = asyncio.create_task(run_task(registry[task_id]))
        in_flight[future] = task_id

    for task_id in sorted(t for t, deps in pending.items() if not deps):
        launch(task_id)

    try:
        while in_flight:
            done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)

            settled = sorted((in_flight.pop(future), future.result()) for future in done)

            # A failure anywhere in the batch blocks every release from it
            for task_id, result in settled:
                match result:
                    case Error(exc) if failure is None:
                        logger.warning(
                            f"Task {task_id} ({describe(registry[task_id].entity)}) "
                            f"failed with {exc!r}; no further tasks will start"
                        )
                        failure = Error(exc)
                    case Error(exc):
                        logger.debug(f"Discarding later failure of task {task_id}: {exc!r}")

            for task_id, result in settled:
                match result:
                    case Ok(_) if failure is not None:
                        logger.debug(f"Discarding result of task {task_id}")
                    case Ok(_):
                        logger.debug(f"Completed task {task_id}")
                        for dependent_id in registry.dependents(task_id):
                            waiting = pending[dependent_id]
                            waiting.discard(task_id)
                            if not waiting:
                                launch(dependent_id)
    finally:
        # Non-empty only when execute() itself is interrupted
        for future in in_flight:
            future.cancel()
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)

    if failure is not None:
        return failure
    return Ok(None)


__all__ = ("run_task", "execute")
