"""Base runner classes and protocols."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from ..errors import TaskFailure
from ..workflow.tasks import TaskStatus


@dataclass
class TaskOutcome:
    """Record of one task invocation."""

    name: str
    status: TaskStatus = TaskStatus.PENDING
    duration: float = 0.0
    error: str | None = None


@dataclass
class RunnerResult:
    """Result of running a task or a sequence of tasks."""

    success: bool
    target: str
    outcomes: list[TaskOutcome] = field(default_factory=list)
    # Innermost primitive task that failed
    failed_task: str | None = None
    # Task names from the outermost task down to failed_task
    failure_path: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def tasks_completed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == TaskStatus.SUCCEEDED)

    @property
    def duration(self) -> float:
        return sum(o.duration for o in self.outcomes)

    def raise_for_failure(self) -> None:
        """Raise TaskFailure if the run failed."""
        if self.success:
            return
        cause = self.errors[-1] if self.errors else None
        raise TaskFailure(self.failed_task or self.target, self.failure_path, cause)


@dataclass
class RunnerCallbacks:
    """
    Callbacks for runner progress reporting.

    Allows CLI to display progress without coupling runner to Rich/UI.
    All callbacks are optional - if None, no callback is made.
    Composite tasks report their inner tasks through the same callbacks.
    """

    on_sequence_start: Callable[[str, int], None] | None = None  # label, total_tasks
    on_sequence_complete: Callable[[RunnerResult], None] | None = None

    on_task_start: Callable[[str, str], None] | None = None  # name, description
    on_task_complete: Callable[[str, bool, float], None] | None = None  # name, success, duration


class RunnerProtocol(Protocol):
    """Protocol for task runners."""

    def run_sequence(self, names: Sequence[str], label: str = "sequence") -> RunnerResult:
        """Run the named tasks in order, stopping at the first failure."""
        ...

    def run_single(self, name: str) -> RunnerResult:
        """Run exactly one task."""
        ...
