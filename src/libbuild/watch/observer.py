"""Watch session - Feed watchdog filesystem events into a WatchBinder."""

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .binder import WatchBinder

logger = logging.getLogger(__name__)

DISPATCHED_EVENTS = {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}

_GLOB_CHARS = set("*?[")


def pattern_base(pattern: str) -> Path:
    """Longest leading directory of a glob pattern without wildcards."""
    parts = []
    for part in Path(pattern).parts[:-1]:
        if _GLOB_CHARS & set(part):
            break
        parts.append(part)
    return Path(*parts) if parts else Path(".")


class BindingEventHandler(FileSystemEventHandler):
    """Translates file events into binder dispatches."""

    def __init__(self, binder: WatchBinder):
        super().__init__()
        self.binder = binder

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in DISPATCHED_EVENTS:
            return

        paths = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED and getattr(event, "dest_path", None):
            paths.append(event.dest_path)

        for path in paths:
            self.binder.dispatch(os.fsdecode(path))


class WatchSession:
    """
    Observes the directories behind every binding's patterns.

    Runs until stopped or interrupted; triggered runs happen on the
    bindings' own worker threads, not on the observer thread.
    """

    def __init__(self, binder: WatchBinder, observer_factory: Callable[[], Observer] = Observer):
        self.binder = binder
        self._observer_factory = observer_factory
        self._observer = None

    def watch_dirs(self) -> list[Path]:
        """Existing directories to observe, without nested duplicates."""
        dirs = set()
        for binding in self.binder.bindings:
            for pattern in binding.patterns:
                directory = (self.binder.root / pattern_base(pattern)).resolve()
                if directory.is_dir():
                    dirs.add(directory)
                else:
                    logger.warning("Not watching %s: directory does not exist", directory)

        ordered = sorted(dirs, key=lambda d: (len(d.parts), str(d)))
        result: list[Path] = []
        for directory in ordered:
            if not any(directory.is_relative_to(parent) for parent in result):
                result.append(directory)
        return result

    @property
    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        handler = BindingEventHandler(self.binder)
        self._observer = self._observer_factory()
        for directory in self.watch_dirs():
            self._observer.schedule(handler, str(directory), recursive=True)
            logger.info("Watching %s", directory)
        self._observer.start()

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self.binder.close(wait=True)

    def run_forever(self, poll_interval: float = 1.0) -> None:
        """Watch until Ctrl-C."""
        self.start()
        try:
            while self.is_running:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            logger.info("Stopping watch")
        finally:
            self.stop()

    def __enter__(self) -> "WatchSession":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
