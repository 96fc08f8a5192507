"""
Actions layer - Units of work backing the build tasks.

Most build steps are an external tool run as a subprocess; the examples
catalog is generated in-process. Functions here are CLI-agnostic and
return typed results.
"""

from .catalog import CatalogResult, generate_catalog
from .command import CommandResult, expand_args, format_command, run_command

__all__ = [
    "run_command",
    "CommandResult",
    "expand_args",
    "format_command",
    "generate_catalog",
    "CatalogResult",
]
