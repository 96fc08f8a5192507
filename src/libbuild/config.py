"""
Configuration management with YAML loading and environment variable support.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import BUILD_TASKS, CONFIG_FILENAME, DEFAULT_COMMANDS, DEFAULT_DIRS, DEFAULT_PATTERNS, DEFAULT_TIMEOUT


@dataclass
class LibraryConfig:
    """The library being built."""

    pretty_name: str = field(default_factory=lambda: os.environ.get("LIBBUILD_PRETTY_NAME", ""))
    export_var: str = field(default_factory=lambda: os.environ.get("LIBBUILD_EXPORT_VAR", ""))
    dependencies: list[str] = field(default_factory=list)
    main: str = "dist/index.min.js"


@dataclass
class PathsConfig:
    """Glob patterns for reading files and directories for writing them."""

    src: str = DEFAULT_PATTERNS["src"]
    test: str = DEFAULT_PATTERNS["test"]
    debug: str = DEFAULT_PATTERNS["debug"]
    min: str = DEFAULT_PATTERNS["min"]
    examples: str = DEFAULT_PATTERNS["examples"]
    dist: str = DEFAULT_DIRS["dist"]
    examples_dir: str = DEFAULT_DIRS["examples_dir"]


@dataclass
class ToolConfig:
    """External command backing a task."""

    command: str = ""
    timeout: float = DEFAULT_TIMEOUT


def _default_tools() -> dict[str, ToolConfig]:
    return {name: ToolConfig(command=command) for name, command in DEFAULT_COMMANDS.items()}


@dataclass
class WatchConfig:
    debounce: float = 0.2  # seconds
    root: Path | None = None


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: os.environ.get("LIBBUILD_LOG_LEVEL", "INFO"))
    file: Path | None = None
    rich_tracebacks: bool = True


@dataclass
class BuildConfig:
    library: LibraryConfig = field(default_factory=LibraryConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    tools: dict[str, ToolConfig] = field(default_factory=_default_tools)
    sequences: dict[str, list[str]] = field(default_factory=dict)
    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "BuildConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "BuildConfig":
        """Create config from dictionary."""
        config = cls()

        if "library" in data:
            for key, value in data["library"].items():
                if hasattr(config.library, key):
                    if key == "dependencies" and isinstance(value, str):
                        value = [value]
                    setattr(config.library, key, value)

        if "paths" in data:
            for key, value in data["paths"].items():
                if hasattr(config.paths, key):
                    setattr(config.paths, key, str(value))

        if "tools" in data:
            for name, value in data["tools"].items():
                tool = config.tools.setdefault(name, ToolConfig())
                # Shorthand: `lint: "npx jshint {debug}"`
                if isinstance(value, str):
                    tool.command = value
                    continue
                for key, item in (value or {}).items():
                    if hasattr(tool, key):
                        setattr(tool, key, float(item) if key == "timeout" else item)

        if "sequences" in data:
            for name, names in data["sequences"].items():
                config.sequences[name] = [str(n) for n in names]

        if "watch" in data:
            for key, value in data["watch"].items():
                if hasattr(config.watch, key):
                    setattr(config.watch, key, Path(value) if key == "root" and value else value)

        if "logging" in data:
            for key, value in data["logging"].items():
                if hasattr(config.logging, key):
                    setattr(config.logging, key, Path(value) if key == "file" and value else value)

        return config

    def placeholders(self) -> dict[str, str]:
        """Values substituted into tool command templates."""
        return {
            "pretty_name": self.library.pretty_name,
            "export_var": self.library.export_var,
            "dependencies": ",".join(self.library.dependencies),
            "main": self.library.main,
            **{key: str(value) for key, value in vars(self.paths).items()},
        }


def _get_config_dirs() -> list[Path]:
    """Config directories to search, in priority order."""
    dirs = []
    # Check environment variable first
    if config_dir := os.environ.get("LIBBUILD_CONFIG_DIR"):
        dirs.append(Path(config_dir))

    # Then XDG config home, which defaults to ~/.config
    xdg_config = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    dirs.append(Path(xdg_config) / "libbuild")
    return dirs


def load_config(config_path: Path | None = None, config_dir: Path | None = None) -> BuildConfig:
    """
    Load configuration from an explicit path or the standard locations.

    Search order: $LIBBUILD_CONFIG_DIR, $XDG_CONFIG_HOME/libbuild, then
    the working directory. The first libbuild.yaml found wins.

    Args:
        config_path: Path to config file (default: searches standard locations)
        config_dir: Config directory to search instead of the environment ones

    Returns:
        BuildConfig (defaults if no file is found)
    """
    if config_path is None:
        dirs = [config_dir] if config_dir is not None else _get_config_dirs()
        search_paths = [d / CONFIG_FILENAME for d in dirs] + [Path.cwd() / CONFIG_FILENAME]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return BuildConfig.from_yaml(config_path) if config_path else BuildConfig()



def validate_config(config: BuildConfig) -> list[str]:
    """
    Validate that the build can run.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    if not config.library.export_var:
        errors.append("library.export_var not configured (set LIBBUILD_EXPORT_VAR or in config file)")

    for name in BUILD_TASKS:
        tool = config.tools.get(name)
        if tool is None or not tool.command.strip():
            errors.append(f"tools.{name}.command not configured")

    for name, tool in config.tools.items():
        if tool.timeout <= 0:
            errors.append(f"tools.{name}.timeout must be positive (got {tool.timeout})")

    return errors
