"""
CLI module - Command line interface for libbuild

Entry point for the `libbuild` command using Typer.
"""

import shlex
import shutil
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import BuildConfig, load_config, validate_config
from .errors import DuplicateRegistration, UnknownTask
from .library import LibraryWorkflow, create_library_workflow
from .logging_setup import setup_logging
from .runners import RunnerCallbacks, RunnerResult

console = Console()
app = typer.Typer(
    name="libbuild",
    help="libbuild - Build-task orchestrator for small JavaScript libraries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"libbuild version {__version__}")
        raise typer.Exit()


# Type aliases for common options
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to libbuild.yaml", exists=True, dir_okay=False),
]
DryRunOption = Annotated[bool, typer.Option("--dry-run", help="Show tool commands without running them")]
VerboseOption = Annotated[bool, typer.Option("--verbose", help="Log debug output, including tool stdout")]


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """libbuild - Build-task orchestrator for small JavaScript libraries."""
    pass


def _prepare(config_path: Path | None, verbose: bool = False) -> BuildConfig:
    """Load configuration and set up logging."""
    cfg = load_config(config_path)
    level = "DEBUG" if verbose else cfg.logging.level
    setup_logging(level, cfg.logging.file, cfg.logging.rich_tracebacks)
    return cfg


def _progress_callbacks() -> RunnerCallbacks:
    def on_task_start(name: str, description: str):
        console.print(f"[cyan]→[/cyan] {name}")

    def on_task_complete(name: str, success: bool, duration: float):
        if success:
            console.print(f"  [green]✓[/green] {name} [dim]({duration:.2f}s)[/dim]")
        else:
            console.print(f"  [red]✗[/red] {name} [dim]({duration:.2f}s)[/dim]")

    return RunnerCallbacks(on_task_start=on_task_start, on_task_complete=on_task_complete)


def _create_workflow(cfg: BuildConfig, dry_run: bool = False) -> LibraryWorkflow:
    try:
        return create_library_workflow(cfg, callbacks=_progress_callbacks(), dry_run=dry_run)
    except DuplicateRegistration as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(2) from e


def _report(result: RunnerResult) -> None:
    console.print()
    if result.success:
        console.print(f"[bold green]Finished[/bold green] '{result.target}' in {result.duration:.2f}s")
        return

    path = " > ".join(result.failure_path)
    console.print(f"[bold red]Failed:[/bold red] '{result.failed_task}' ({path})")
    for err in result.errors:
        console.print(f"  {err}", markup=False)


def _run_task(name: str, config: Path | None, dry_run: bool, verbose: bool) -> None:
    cfg = _prepare(config, verbose)
    workflow = _create_workflow(cfg, dry_run)

    try:
        result = workflow.run(name)
    except UnknownTask as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("\nRun [cyan]libbuild list[/cyan] to see all tasks")
        raise typer.Exit(2) from e

    _report(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def run(
    name: Annotated[str, typer.Argument(help="Task to run (see list)")],
    config: ConfigOption = None,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
):
    """
    Run a single task by name.

    [bold]Examples:[/bold]

        libbuild run lint

        libbuild run examples --config ./libbuild.yaml
    """
    _run_task(name, config, dry_run, verbose)


@app.command()
def build(
    config: ConfigOption = None,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
):
    """Run every build step in order (umd, lint, min, comments, test)."""
    _run_task("build", config, dry_run, verbose)


@app.command()
def watch(
    config: ConfigOption = None,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
):
    """Rebuild on src changes, re-test on test changes, refresh examples. Ctrl-C to stop."""
    _run_task("watch", config, dry_run, verbose)


@app.command("list")
def list_tasks(config: ConfigOption = None):
    """List registered tasks and the build order."""
    cfg = _prepare(config)
    workflow = _create_workflow(cfg)

    table = Table(title="Tasks")
    table.add_column("Task", style="cyan", no_wrap=True)
    table.add_column("In build", justify="center")
    table.add_column("Description")

    for task in workflow.registry:
        table.add_row(task.name, "[green]✓[/green]" if task.enqueue else "", task.description)

    console.print(table)
    console.print(f"\n[bold]Build order:[/bold] {' → '.join(workflow.registry.enqueued_names())}")

    if workflow.binder.bindings:
        console.print("\n[bold]Watch:[/bold]")
        for binding in workflow.binder.bindings:
            console.print(f"  {', '.join(binding.patterns)} → {binding.target}")


@app.command()
def check(config: ConfigOption = None):
    """Check configuration and that each tool's executable is on PATH."""
    cfg = _prepare(config)

    table = Table(title="Build Tools")
    table.add_column("Task", style="cyan", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Command", style="dim")

    missing = []
    invalid = []
    for name, tool in cfg.tools.items():
        try:
            args = shlex.split(tool.command)
        except ValueError as e:
            table.add_row(name, "[red]Invalid[/red]", f"{tool.command} ({e})")
            invalid.append(name)
            continue

        if not args:
            status_str = "[yellow]Not configured[/yellow]"
        elif shutil.which(args[0]):
            status_str = "[green]Available[/green]"
        else:
            status_str = "[red]Missing[/red]"
            missing.append(args[0])
        table.add_row(name, status_str, tool.command or "-")

    console.print(table)

    problems = validate_config(cfg)
    for problem in problems:
        console.print(f"[yellow]Warning:[/yellow] {problem}")

    if invalid:
        console.print(f"[yellow]Warning:[/yellow] Cannot parse the command of: {', '.join(invalid)}")

    if missing:
        console.print(f"\n[yellow]Warning:[/yellow] Missing executables: {', '.join(sorted(set(missing)))}")
        console.print("Install Node.js and run: npm install")


def main_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main_cli()
