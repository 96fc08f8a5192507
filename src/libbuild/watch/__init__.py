"""
Watch layer - Re-run tasks when watched files change.

The binder owns the pattern-to-task bindings and their serialization;
the session feeds it watchdog filesystem events.
"""

from .binder import WatchBinder, WatchBinding
from .observer import BindingEventHandler, WatchSession, pattern_base

__all__ = [
    "WatchBinder",
    "WatchBinding",
    "WatchSession",
    "BindingEventHandler",
    "pattern_base",
]
