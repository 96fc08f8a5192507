"""
Library workflow factory - Registers the build tasks for a JS library.

Build order (the enqueued tasks, in registration order):
1. umd      - wrap src files in a Universal Module Definition
2. lint     - lint the debug build
3. min      - minify the debug build
4. comments - raise the license comment in the minified file
5. test     - run the tests last, against the built files

Plus the non-enqueued tasks: build, examples-lint, examples-catalog,
examples, watch and default, and any extra tools or sequences from the
config file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .actions import generate_catalog, run_command
from .config import BuildConfig, ToolConfig
from .constants import BUILD_TASKS, EXAMPLE_TASKS, TASK_DESCRIPTIONS
from .runners import RunnerCallbacks, RunnerResult, SequenceRunner
from .watch import WatchBinder, WatchSession
from .workflow import TaskRegistry, define_build, define_composite

logger = logging.getLogger(__name__)


@dataclass
class LibraryWorkflow:
    """Registry, runner and watch bindings for one library."""

    config: BuildConfig
    registry: TaskRegistry
    runner: SequenceRunner
    binder: WatchBinder

    def run(self, name: str) -> RunnerResult:
        """Run a registered task by name ("build", "test", "examples", ...)."""
        return self.runner.run(name)

    def watch_session(self) -> WatchSession:
        return WatchSession(self.binder)

    def watch(self) -> None:
        """Watch sources, tests and examples until interrupted."""
        self.watch_session().run_forever()


def create_library_workflow(
    config: BuildConfig,
    callbacks: RunnerCallbacks | None = None,
    dry_run: bool = False,
    cwd: Path | None = None,
) -> LibraryWorkflow:
    """
    Create the task registry for building a library.

    Args:
        config: Build configuration
        callbacks: Optional runner callbacks for progress reporting
        dry_run: If True, tools are logged instead of run
        cwd: Project directory (default: config.watch.root, then the cwd)

    Returns:
        LibraryWorkflow ready to run tasks

    Raises:
        DuplicateRegistration: If the config defines a sequence or tool
            whose name clashes with another task
    """
    root = cwd or config.watch.root or Path.cwd()
    placeholders = config.placeholders()

    registry = TaskRegistry()
    runner = SequenceRunner(registry, callbacks)
    binder = WatchBinder(runner, root=root, debounce=config.watch.debounce)
    workflow = LibraryWorkflow(config=config, registry=registry, runner=runner, binder=binder)

    def command_work(name: str):
        tool = config.tools.get(name) or ToolConfig()
        return lambda: run_command(name, tool, root, placeholders, dry_run=dry_run)

    def catalog_work():
        return generate_catalog(
            root / config.paths.examples_dir,
            config.library.export_var,
            pretty_name=config.library.pretty_name,
            package_file=root / "package.json",
            main=config.library.main,
            dry_run=dry_run,
        )

    # Build steps, in build order
    for name in BUILD_TASKS:
        registry.register(name, True, command_work(name), TASK_DESCRIPTIONS[name])

    define_build(registry, runner, "build", TASK_DESCRIPTIONS["build"])

    registry.register("examples-lint", False, command_work("examples-lint"), TASK_DESCRIPTIONS["examples-lint"])
    # A configured command replaces the built-in catalog
    catalog = command_work("examples-catalog") if "examples-catalog" in config.tools else catalog_work
    registry.register("examples-catalog", False, catalog, TASK_DESCRIPTIONS["examples-catalog"])

    define_composite(registry, runner, "examples", EXAMPLE_TASKS, description=TASK_DESCRIPTIONS["examples"])

    # Extra tools declared only in the config file; a clash with any other task fails
    for name, tool in config.tools.items():
        if name in BUILD_TASKS or name in EXAMPLE_TASKS:
            continue
        registry.register(name, False, command_work(name), f"Run: {tool.command}")

    for name, names in config.sequences.items():
        define_composite(registry, runner, name, names)

    registry.register("watch", False, workflow.watch, TASK_DESCRIPTIONS["watch"])
    registry.register("default", False, lambda: runner.run_single("build"), TASK_DESCRIPTIONS["default"])

    # On src changes rebuild everything; on test changes just re-test
    binder.bind(config.paths.src, "build")
    binder.bind(config.paths.test, "test")
    binder.bind(config.paths.examples, "examples")

    logger.debug("Build order: %s", ", ".join(registry.enqueued_names()))
    return workflow
