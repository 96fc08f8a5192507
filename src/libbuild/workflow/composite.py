"""Composite tasks - Tasks whose body runs a sub-sequence."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from .registry import TaskRegistry
from .tasks import Task

if TYPE_CHECKING:
    from ..runners import SequenceRunner


def define_composite(
    registry: TaskRegistry,
    runner: "SequenceRunner",
    name: str,
    subsequence: Sequence[str],
    enqueue: bool = False,
    description: str = "",
) -> Task:
    """
    Register a task that runs `subsequence` through the runner.

    Sub-task names are resolved when the composite runs, so they may refer
    to tasks registered later.
    """
    names = list(subsequence)
    return registry.register(
        name,
        enqueue,
        lambda: runner.run_sequence(names, label=name),
        description or f"Run {', '.join(names)}",
    )


def define_build(registry: TaskRegistry, runner: "SequenceRunner", name: str = "build", description: str = "") -> Task:
    """
    Register a task that replays the enqueued tasks in registration order.

    The enqueued list is read when the task runs, not when it is defined.
    """
    return registry.register(
        name,
        False,
        lambda: runner.run_sequence(registry.enqueued_names(), label=name),
        description or "Run every enqueued task in registration order",
    )
