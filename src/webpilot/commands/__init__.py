"""
Browser commands.

Structure:
    - decorator: @command, argument models and parameter declarations
    - registry: discovery, schemas and dispatch
    - context: per-dispatch context injected into handlers
    - navigation / interaction / content / lifecycle: the handlers
"""

from .context import CommandContext
from .decorator import CommandArgs, CommandSpec, NoArgs, ParamSpec, command
from .registry import DEFAULT_COMMAND_MODULES, CommandRegistry, build_registry

__all__ = [
    "CommandArgs",
    "CommandContext",
    "CommandRegistry",
    "CommandSpec",
    "DEFAULT_COMMAND_MODULES",
    "NoArgs",
    "ParamSpec",
    "build_registry",
    "command",
]
