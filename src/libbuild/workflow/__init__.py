"""
Workflow layer - Task definitions, the registry and composite tasks.

Tasks are DATA: a name, a unit of work and whether they belong to the
build sequence. Running them is the runner's job.
"""

from .composite import define_build, define_composite
from .registry import TaskRegistry
from .tasks import Task, TaskStatus

__all__ = [
    "Task",
    "TaskStatus",
    "TaskRegistry",
    "define_build",
    "define_composite",
]
