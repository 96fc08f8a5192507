"""Tests for the watchdog-backed watch session."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileOpenedEvent,
)

from libbuild.watch import BindingEventHandler, WatchBinder, WatchSession, pattern_base


class TestPatternBase:
    """Tests for pattern_base."""

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("src/*.src.js", Path("src")),
            ("test/*.js", Path("test")),
            ("*.js", Path(".")),
            ("examples/nested/*.js", Path("examples/nested")),
            ("lib/*/index.js", Path("lib")),
        ],
    )
    def test_base_directory(self, pattern, expected):
        assert pattern_base(pattern) == expected


class TestBindingEventHandler:
    """Tests for event filtering and translation."""

    @pytest.fixture
    def binder(self):
        return MagicMock()

    @pytest.fixture
    def handler(self, binder):
        return BindingEventHandler(binder)

    @pytest.mark.parametrize("event_cls", [FileModifiedEvent, FileCreatedEvent, FileDeletedEvent])
    def test_file_events_dispatched(self, handler, binder, event_cls):
        handler.on_any_event(event_cls("/project/src/lib.src.js"))

        binder.dispatch.assert_called_once_with("/project/src/lib.src.js")

    def test_directory_events_ignored(self, handler, binder):
        handler.on_any_event(DirModifiedEvent("/project/src"))

        binder.dispatch.assert_not_called()

    def test_open_events_ignored(self, handler, binder):
        handler.on_any_event(FileOpenedEvent("/project/src/lib.src.js"))

        binder.dispatch.assert_not_called()

    def test_move_dispatches_both_paths(self, handler, binder):
        handler.on_any_event(FileMovedEvent("/project/test/a.js~", "/project/test/a.js"))

        assert [c.args[0] for c in binder.dispatch.call_args_list] == [
            "/project/test/a.js~",
            "/project/test/a.js",
        ]


class TestWatchSession:
    """Tests for WatchSession."""

    @pytest.fixture
    def project(self, tmp_path):
        for name in ["src", "test", "examples"]:
            (tmp_path / name).mkdir()
        return tmp_path

    @pytest.fixture
    def binder(self, registry, runner, project):
        registry.register("build", False, lambda: None)
        registry.register("test", True, lambda: None)
        binder = WatchBinder(runner, root=project)
        binder.bind("src/*.src.js", "build")
        binder.bind("test/*.js", "test")
        yield binder
        binder.close()

    def test_watch_dirs(self, binder, project):
        session = WatchSession(binder)

        assert session.watch_dirs() == sorted([(project / "src").resolve(), (project / "test").resolve()])

    def test_missing_dirs_skipped(self, registry, binder, project):
        binder.bind("missing/*.js", "test")

        assert (project / "missing").resolve() not in WatchSession(binder).watch_dirs()

    def test_nested_dirs_collapsed(self, registry, binder, project):
        (project / "src" / "sub").mkdir()
        binder.bind("src/sub/*.js", "build")
        binder.bind("*.json", "build")

        assert WatchSession(binder).watch_dirs() == [project.resolve()]

    def test_start_schedules_and_stop_joins(self, binder, project):
        observer = MagicMock()
        session = WatchSession(binder, observer_factory=lambda: observer)

        with session:
            scheduled = [c.args[1] for c in observer.schedule.call_args_list]
            assert scheduled == [str((project / "src").resolve()), str((project / "test").resolve())]
            assert all(c.kwargs["recursive"] for c in observer.schedule.call_args_list)
            observer.start.assert_called_once()

        observer.stop.assert_called_once()
        observer.join.assert_called_once()

    def test_run_forever_stops_on_interrupt(self, binder):
        observer = MagicMock()
        observer.is_alive.side_effect = KeyboardInterrupt
        session = WatchSession(binder, observer_factory=lambda: observer)

        session.run_forever(poll_interval=0)

        observer.stop.assert_called_once()
        assert not session.is_running

    def test_events_reach_bindings(self, binder, project, registry):
        handler = BindingEventHandler(binder)

        handler.on_any_event(FileModifiedEvent(str(project.resolve() / "test" / "a.js")))
        assert binder.wait_idle(5.0)

        test_binding = binder.bindings[1]
        assert test_binding.runs == 1
        assert binder.bindings[0].runs == 0
