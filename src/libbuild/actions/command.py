"""Command actions - Run an external build tool as a subprocess."""

import glob
import logging
import shlex
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..config import ToolConfig
from ..constants import TIMEOUT_RETURNCODE

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")


@dataclass
class CommandResult:
    """Result of running one external tool."""

    name: str
    command: list[str] = field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    error_message: str | None = None

    @property
    def success(self) -> bool:
        return self.returncode == 0


def format_command(template: str, placeholders: dict[str, str]) -> str:
    """Fill `{name}` placeholders in a command template."""
    return template.format(**placeholders)


def expand_args(args: list[str], cwd: Path) -> list[str]:
    """
    Expand glob arguments relative to `cwd`.

    Patterns with no match are passed through unchanged, like a shell
    without nullglob.
    """
    expanded = []
    for arg in args:
        if _GLOB_CHARS & set(arg):
            matches = sorted(glob.glob(arg, root_dir=cwd))
            if matches:
                expanded.extend(matches)
                continue
        expanded.append(arg)
    return expanded


def run_command(
    name: str,
    tool: ToolConfig,
    cwd: Path,
    placeholders: dict[str, str] | None = None,
    dry_run: bool = False,
) -> CommandResult:
    """
    Run the external command configured for a task.

    Args:
        name: Task name (for reporting)
        tool: Command template and timeout
        cwd: Working directory; globs are expanded against it
        placeholders: Values for `{name}` fields in the template
        dry_run: Log the command without running it

    Returns:
        CommandResult; a nonzero returncode means the task failed
    """
    if not tool.command.strip():
        return CommandResult(name=name, returncode=1, error_message="no command configured")

    try:
        formatted = format_command(tool.command, placeholders or {})
    except (KeyError, IndexError, ValueError) as e:
        return CommandResult(name=name, returncode=1, error_message=f"bad command template {tool.command!r}: {e}")

    cmd = expand_args(shlex.split(formatted), cwd)

    if dry_run:
        logger.info("[dry-run] %s: %s", name, shlex.join(cmd))
        return CommandResult(name=name, command=cmd)

    logger.debug("%s: running %s in %s", name, shlex.join(cmd), cwd)
    started = time.perf_counter()
    try:
        proc = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, timeout=tool.timeout)
    except FileNotFoundError:
        return CommandResult(
            name=name,
            command=cmd,
            returncode=127,
            duration=time.perf_counter() - started,
            error_message=f"executable not found: {cmd[0]}",
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            name=name,
            command=cmd,
            returncode=TIMEOUT_RETURNCODE,
            duration=time.perf_counter() - started,
            error_message=f"timed out after {tool.timeout:g}s",
        )

    result = CommandResult(
        name=name,
        command=cmd,
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        duration=time.perf_counter() - started,
    )

    if result.stdout:
        logger.debug("%s stdout:\n%s", name, result.stdout.rstrip())
    if not result.success:
        result.error_message = f"{cmd[0]} exited with status {proc.returncode}"
        if result.stderr:
            logger.error("%s stderr:\n%s", name, result.stderr.rstrip())
        # Linters such as jshint report on stdout
        elif result.stdout:
            logger.error("%s output:\n%s", name, result.stdout.rstrip())

    return result
