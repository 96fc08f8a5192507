"""Task definitions for the registry."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class TaskStatus(Enum):
    """Status of one task invocation."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Task:
    """
    A named unit of work.

    Tasks are immutable once registered. Per-run state lives in the
    runner's TaskOutcome records, never on the task itself.
    """

    name: str
    work: Callable[[], Any]
    # Part of the default "build" sequence
    enqueue: bool = False
    description: str = ""
