"""Task registry - Named tasks in registration order."""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from ..errors import DuplicateRegistration, UnknownTask
from .tasks import Task

logger = logging.getLogger(__name__)


class TaskRegistry:
    """
    Insertion-ordered mapping of task name to Task.

    Registration is append-only. The enqueued tasks, in the order they were
    registered, form the canonical build sequence.
    """

    def __init__(self):
        self._tasks: dict[str, Task] = {}

    def register(self, name: str, enqueue: bool, work: Callable[[], Any], description: str = "") -> Task:
        """
        Register a task.

        Args:
            name: Unique task name
            enqueue: Whether the task belongs to the build sequence
            work: Callable taking no arguments
            description: One-line summary for listings

        Raises:
            DuplicateRegistration: If the name is already registered
        """
        if not name:
            raise ValueError("Task name must not be empty")
        if not callable(work):
            raise TypeError(f"Work for task '{name}' is not callable: {work!r}")
        if name in self._tasks:
            raise DuplicateRegistration(name)

        task = Task(name=name, work=work, enqueue=enqueue, description=description)
        self._tasks[name] = task
        logger.debug("Registered task '%s'%s", name, " (enqueued)" if enqueue else "")
        return task

    def get(self, name: str) -> Task:
        """Get a task by name, raising UnknownTask if absent."""
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTask(name, self._tasks) from None

    def names(self) -> list[str]:
        """All task names in registration order."""
        return list(self._tasks)

    def enqueued_names(self) -> list[str]:
        """Names of enqueued tasks in registration order."""
        return [task.name for task in self._tasks.values() if task.enqueue]

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))
