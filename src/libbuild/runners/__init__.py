"""
Runners layer - Execution engine for registered tasks.

Runners resolve task names against a registry and execute them,
handling ordering, failure propagation and progress reporting.
"""

from .base import RunnerCallbacks, RunnerProtocol, RunnerResult, TaskOutcome
from .sequential import SequenceRunner, interpret_outcome

__all__ = [
    "RunnerCallbacks",
    "RunnerProtocol",
    "RunnerResult",
    "TaskOutcome",
    "SequenceRunner",
    "interpret_outcome",
]
