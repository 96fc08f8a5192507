"""Sequential runner - Executes named tasks one at a time."""

import asyncio
import inspect
import logging
import time
from collections.abc import Sequence
from typing import Any

from ..workflow.registry import TaskRegistry
from ..workflow.tasks import Task, TaskStatus
from .base import RunnerCallbacks, RunnerResult, TaskOutcome

logger = logging.getLogger(__name__)


async def _await(awaitable):
    return await awaitable


def _run_awaitable(awaitable):
    """
    Run an awaitable unit of work to completion on a fresh event loop.

    Units of work are called synchronously, so an awaitable returned while
    this thread already runs an event loop cannot be driven here. That is
    reported as a failure of the task; run the runner from a worker thread
    (e.g. `loop.run_in_executor`) when calling it from async code.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_await(awaitable))

    if inspect.iscoroutine(awaitable):
        awaitable.close()
    raise RuntimeError("async task returned inside a running event loop; call the runner from a worker thread")


def interpret_outcome(value: Any) -> tuple[bool, str | None, RunnerResult | None]:
    """
    Decide whether a unit of work succeeded from its return value.

    Returns:
        Tuple of (success, error message, nested result of a sub-sequence)

    Rules:
        None / True / other values    -> success
        False                         -> failure
        RunnerResult                  -> its own success (sub-sequence)
        object with int `returncode`  -> success iff returncode == 0
        object with bool `success`    -> that flag (action results)

    Awaitables are run to completion before their value is interpreted,
    except inside an already running event loop, where they fail the task.
    """
    if value is None or value is True:
        return True, None, None
    if value is False:
        return False, "reported failure", None
    if isinstance(value, RunnerResult):
        if value.success:
            return True, None, value
        return False, f"'{value.target}' failed at '{value.failed_task}'", value

    returncode = getattr(value, "returncode", None)
    if isinstance(returncode, int) and not isinstance(returncode, bool):
        if returncode == 0:
            return True, None, None
        message = getattr(value, "error_message", None) or f"exited with status {returncode}"
        return False, message, None

    success = getattr(value, "success", None)
    if isinstance(success, bool):
        if success:
            return True, None, None
        return False, getattr(value, "error", None) or "reported failure", None

    return True, None, None


class SequenceRunner:
    """
    Sequential task runner.

    Executes tasks strictly one after another: task i+1 starts only after
    task i has succeeded. The first failure stops the sequence.
    Keeps no per-run state, so independent invocations may overlap.
    """

    def __init__(self, registry: TaskRegistry, callbacks: RunnerCallbacks | None = None):
        """
        Initialize the runner.

        Args:
            registry: Registry to resolve task names against
            callbacks: Optional callbacks for progress reporting
        """
        self.registry = registry
        self.callbacks = callbacks or RunnerCallbacks()

    def run(self, name: str) -> RunnerResult:
        """Top-level entry point: run one registered task (including "build")."""
        return self.run_single(name)

    def run_single(self, name: str) -> RunnerResult:
        """
        Run exactly one task, without consulting the build sequence.

        Raises:
            UnknownTask: If the name is not registered (nothing runs)
        """
        task = self.registry.get(name)
        return self._execute(name, [task], announce=False)

    def run_sequence(self, names: Sequence[str], label: str = "sequence") -> RunnerResult:
        """
        Run the named tasks in order, stopping at the first failure.

        Every name is resolved before anything runs.

        Args:
            names: Ordered task names
            label: Name reported for the sequence as a whole

        Raises:
            UnknownTask: If any name is not registered (nothing runs)
        """
        names = list(names)
        logger.debug("Resolving sequence '%s': %s", label, names)
        tasks = [self.registry.get(name) for name in names]
        return self._execute(label, tasks, announce=True)

    def _execute(self, label: str, tasks: list[Task], announce: bool) -> RunnerResult:
        cb = self.callbacks

        if announce and cb.on_sequence_start:
            cb.on_sequence_start(label, len(tasks))

        result = RunnerResult(success=True, target=label)

        for task in tasks:
            outcome = self._run_task(task, result)
            result.outcomes.append(outcome)
            if outcome.status == TaskStatus.FAILED:
                result.success = False
                break

        if announce and cb.on_sequence_complete:
            cb.on_sequence_complete(result)

        return result

    def _run_task(self, task: Task, result: RunnerResult) -> TaskOutcome:
        """Run one task to completion and record the failure on `result`."""
        cb = self.callbacks
        outcome = TaskOutcome(name=task.name, status=TaskStatus.RUNNING)

        if cb.on_task_start:
            cb.on_task_start(task.name, task.description)
        logger.info("Starting '%s'", task.name)

        started = time.perf_counter()
        nested = None
        try:
            value = task.work()
            if inspect.isawaitable(value):
                value = _run_awaitable(value)
            success, error, nested = interpret_outcome(value)
        except Exception as e:
            logger.debug("Task '%s' raised", task.name, exc_info=True)
            success, error = False, f"{type(e).__name__}: {e}"
        outcome.duration = time.perf_counter() - started

        if success:
            outcome.status = TaskStatus.SUCCEEDED
            logger.info("Finished '%s' after %.2fs", task.name, outcome.duration)
        else:
            outcome.status = TaskStatus.FAILED
            outcome.error = error
            if nested is not None and nested.failed_task:
                result.failed_task = nested.failed_task
                result.failure_path = [task.name, *nested.failure_path]
                result.errors.extend(nested.errors)
            else:
                result.failed_task = task.name
                result.failure_path = [task.name]
                result.errors.append(f"Task {task.name}: {error}")
            logger.error("'%s' failed after %.2fs: %s", task.name, outcome.duration, error)

        if cb.on_task_complete:
            cb.on_task_complete(task.name, success, outcome.duration)

        return outcome
