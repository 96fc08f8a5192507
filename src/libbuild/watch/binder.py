"""
Watch binder - Run tasks in response to file change notifications.

Each binding pairs a set of glob patterns with a target task. A binding
serializes its own runs on a single worker thread: while a run is queued,
further notifications are coalesced into it, so at most one run waits
behind the one in flight. Separate bindings run independently.
"""

import logging
import os
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path, PurePosixPath

from ..errors import WatchTriggerFailure
from ..runners import RunnerResult, SequenceRunner

logger = logging.getLogger(__name__)

FailureHandler = Callable[[WatchTriggerFailure], None]


def normalize_pattern(pattern: str) -> str:
    """POSIX form of a glob pattern, without a leading `./`."""
    return PurePosixPath(pattern.replace(os.sep, "/")).as_posix()


def match_path(path: str, pattern: str) -> bool:
    """
    Match a root-relative POSIX path against a glob pattern.

    Wildcards match within one path segment, so `test/*.js` does not
    match `test/node_modules/dep/index.js`.
    """
    rel = PurePosixPath(path)
    glob = PurePosixPath(pattern)
    return len(rel.parts) == len(glob.parts) and rel.match(pattern)


class WatchBinding:
    """Glob patterns bound to one target task."""

    def __init__(
        self,
        patterns: Sequence[str],
        target: str,
        runner: SequenceRunner,
        debounce: float = 0.0,
        on_failure: FailureHandler | None = None,
    ):
        self.patterns = tuple(normalize_pattern(p) for p in patterns)
        self.target = target
        self.debounce = debounce
        self.runs = 0
        self.last_result: RunnerResult | None = None
        self.failures: list[WatchTriggerFailure] = []

        self._runner = runner
        self._on_failure = on_failure
        self._lock = threading.Lock()
        self._pending = False
        self._last_future: Future | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"watch-{target}")

    def __repr__(self) -> str:
        return f"WatchBinding(patterns={self.patterns!r}, target={self.target!r})"

    def matches(self, path: str) -> bool:
        """Check whether a (root-relative, POSIX) path matches any pattern."""
        return any(match_path(path, pattern) for pattern in self.patterns)

    @property
    def pending(self) -> bool:
        """True while a run is queued but not yet started."""
        with self._lock:
            return self._pending

    def trigger(self, path: str | None = None) -> bool:
        """
        Request a run of the target.

        Returns:
            True if a new run was queued, False if the notification was
            coalesced into a run that is already queued
        """
        with self._lock:
            if self._pending:
                logger.debug("Coalesced change to %s into queued '%s' run", path, self.target)
                return False
            self._pending = True
            self._last_future = self._executor.submit(self._drain, path)
        return True

    def _drain(self, path: str | None) -> None:
        if self.debounce > 0:
            time.sleep(self.debounce)
        # From here on, new notifications queue a fresh run
        with self._lock:
            self._pending = False
        self._run_target(path)

    def _run_target(self, path: str | None) -> None:
        if path:
            logger.info("'%s' changed, running '%s'", path, self.target)
        try:
            result = self._runner.run_single(self.target)
        except Exception as e:
            self._report(WatchTriggerFailure(self.target, path, cause=e))
            return

        with self._lock:
            self.runs += 1
            self.last_result = result

        if not result.success:
            self._report(WatchTriggerFailure(self.target, path, result=result))

    def _report(self, failure: WatchTriggerFailure) -> None:
        with self._lock:
            self.failures.append(failure)
        logger.error("%s", failure)
        if self._on_failure is None:
            return
        try:
            self._on_failure(failure)
        except Exception:
            logger.exception("Watch failure handler raised for '%s'", self.target)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """
        Block until no run is queued or in flight.

        Returns:
            False if the timeout expired first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                future = self._last_future
            if future is None:
                return True
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                future.result(timeout=remaining)
            except FutureTimeoutError:
                return False
            with self._lock:
                if self._last_future is future and not self._pending:
                    return True

    def close(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for the run in flight."""
        self._executor.shutdown(wait=wait, cancel_futures=not wait)


class WatchBinder:
    """
    Dispatches change notifications to bindings.

    Paths are matched relative to `root` using POSIX separators.
    """

    def __init__(
        self,
        runner: SequenceRunner,
        root: Path | None = None,
        debounce: float = 0.0,
        on_trigger_failure: FailureHandler | None = None,
    ):
        self.runner = runner
        self.root = Path(root) if root is not None else Path.cwd()
        self.debounce = debounce
        self.on_trigger_failure = on_trigger_failure
        self._bindings: list[WatchBinding] = []

    @property
    def bindings(self) -> list[WatchBinding]:
        return list(self._bindings)

    def bind(self, patterns: str | Sequence[str], target: str, debounce: float | None = None) -> WatchBinding:
        """
        Bind glob patterns to a target task.

        Raises:
            UnknownTask: If the target is not registered
        """
        self.runner.registry.get(target)
        if isinstance(patterns, str):
            patterns = (patterns,)

        binding = WatchBinding(
            patterns,
            target,
            self.runner,
            debounce=self.debounce if debounce is None else debounce,
            on_failure=self.on_trigger_failure,
        )
        self._bindings.append(binding)
        logger.debug("Bound %s -> '%s'", ", ".join(binding.patterns), target)
        return binding

    def relative_path(self, path: str | Path) -> str:
        """Express a path relative to the root, with POSIX separators."""
        path = Path(path)
        if path.is_absolute():
            try:
                path = path.relative_to(self.root.resolve())
            except ValueError:
                try:
                    path = path.relative_to(self.root)
                except ValueError:
                    pass
        return path.as_posix()

    def dispatch(self, path: str | Path) -> list[WatchBinding]:
        """
        Deliver one change notification to every matching binding.

        Returns:
            The bindings whose patterns matched
        """
        rel = self.relative_path(os.fspath(path))
        matched = [b for b in self._bindings if b.matches(rel)]
        for binding in matched:
            binding.trigger(rel)
        return matched

    def wait_idle(self, timeout: float | None = None) -> bool:
        return all(binding.wait_idle(timeout) for binding in self._bindings)

    def close(self, wait: bool = True) -> None:
        for binding in self._bindings:
            binding.close(wait=wait)
