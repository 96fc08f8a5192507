"""Error types raised by the task registry, runner and watch binder."""

from collections.abc import Iterable
from typing import Any


class LibbuildError(Exception):
    """Base class for libbuild errors."""


class UnknownTask(LibbuildError, KeyError):
    """Raised when a task name is not registered."""

    def __init__(self, name: str, known: Iterable[str] = ()):
        self.name = name
        self.known = list(known)
        super().__init__(name)

    def __str__(self) -> str:
        message = f"Unknown task: {self.name!r}"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        return message


class DuplicateRegistration(LibbuildError, ValueError):
    """Raised when a task name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task already registered: {name!r}")


class TaskFailure(LibbuildError):
    """
    A unit of work reported failure.

    `task_name` is the innermost task that failed; `failure_path` lists the
    enclosing tasks from the outermost one down to it.
    """

    def __init__(self, task_name: str, failure_path: list[str] | None = None, cause: str | None = None):
        self.task_name = task_name
        self.failure_path = list(failure_path or [task_name])
        self.cause = cause
        message = f"Task '{task_name}' failed"
        if len(self.failure_path) > 1:
            message += f" (in {' > '.join(self.failure_path)})"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class WatchTriggerFailure(LibbuildError):
    """A watch-triggered run failed. Reported, never raised into the session."""

    def __init__(self, target: str, path: str | None = None, result: Any = None, cause: BaseException | None = None):
        self.target = target
        self.path = path
        self.result = result
        self.cause = cause
        trigger = f" after change to {path}" if path else ""
        if cause is not None:
            detail = f"{type(cause).__name__}: {cause}"
        elif result is not None and getattr(result, "failed_task", None):
            detail = f"failed at '{result.failed_task}'"
        else:
            detail = "failed"
        super().__init__(f"Watch run of '{target}'{trigger} {detail}")
