"""
Command Registry: discovery, lookup and dispatch of browser commands.

Usage:
    from webpilot.commands import CommandContext, build_registry
    from webpilot.session import BrowserSession

    registry = build_registry()
    ctx = CommandContext(session=BrowserSession(driver))

    # Schemas for the transport
    schemas = registry.get_schemas()

    # Run a command; errors come back inside the result
    result = await registry.dispatch(ctx, "navigate", {"url": "https://example.com"})
"""

from __future__ import annotations

import importlib
import logging
import time
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from ..errors import CommandError, CommandResult, DriverError, UnknownCommandError
from .context import CommandContext
from .decorator import CommandSpec

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_MODULES = (
    "webpilot.commands.navigation",
    "webpilot.commands.interaction",
    "webpilot.commands.content",
    "webpilot.commands.lifecycle",
)


class CommandRegistry:
    """
    Name -> command mapping consumed by transports.

    Commands are registered once at startup and never change afterwards.
    The registry holds no session state: every call receives its
    ``CommandContext``.
    """

    def __init__(self) -> None:
        self._commands: Dict[str, CommandSpec] = {}

    def register(self, target: Union[CommandSpec, Callable[..., Any]]) -> CommandSpec:
        spec = target if isinstance(target, CommandSpec) else getattr(target, "command", None)
        if not isinstance(spec, CommandSpec):
            raise ValueError(f"{target!r} is not decorated with @command")
        if spec.name in self._commands:
            raise ValueError(f"Duplicate command name: {spec.name}")
        self._commands[spec.name] = spec
        return spec

    def discover(self, modules: Optional[Iterable[Union[str, ModuleType]]] = None) -> None:
        """Register every ``@command`` handler defined in ``modules``, in definition order."""
        for entry in modules if modules is not None else DEFAULT_COMMAND_MODULES:
            module = importlib.import_module(entry) if isinstance(entry, str) else entry
            for attr in list(vars(module).values()):
                if getattr(attr, "__module__", None) != module.__name__:
                    continue
                if isinstance(getattr(attr, "command", None), CommandSpec):
                    self.register(attr)
                    logger.debug("Registered command: %s from %s", attr.command.name, module.__name__)
        logger.info("Registered %d commands: %s", len(self._commands), list(self._commands))

    def get(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(name)

    def get_schema(self, name: str) -> Optional[Dict[str, Any]]:
        spec = self._commands.get(name)
        return spec.to_json_schema() if spec else None

    def get_schemas(self, names: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        if names is None:
            return [spec.to_json_schema() for spec in self._commands.values()]
        return [self._commands[name].to_json_schema() for name in names if name in self._commands]

    async def call(
        self,
        ctx: CommandContext,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Run a command and return its text; failures raise ``CommandError``."""
        spec = self._commands.get(name)
        if spec is None:
            raise UnknownCommandError(name)
        return await spec.run(ctx, arguments)

    async def dispatch(
        self,
        ctx: CommandContext,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> CommandResult:
        """Run a command and fold the outcome into a ``CommandResult``."""
        started = time.perf_counter()
        try:
            text = await self.call(ctx, name, arguments)
        except CommandError as exc:
            _log_dispatch(logging.WARNING, name, started, error=exc)
            return CommandResult(command=name, error=exc)
        except Exception as exc:
            logger.exception("Unexpected failure in command %s", name)
            return CommandResult(command=name, error=DriverError(f"run {name}", cause=exc))

        _log_dispatch(logging.DEBUG, name, started)
        return CommandResult(command=name, text=text)

    @property
    def names(self) -> List[str]:
        return list(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _log_dispatch(
    level: int,
    name: str,
    started: float,
    error: Optional[CommandError] = None,
) -> None:
    """One line per dispatch: ``dispatch command=... outcome=... duration_ms=...``."""
    if error is None:
        logger.log(level, "dispatch command=%s outcome=ok duration_ms=%d", name, _elapsed_ms(started))
        return
    # DriverError text is already the first line of the driver message.
    logger.log(
        level,
        "dispatch command=%s outcome=failed duration_ms=%d error_code=%s error=%s",
        name,
        _elapsed_ms(started),
        error.code,
        error,
    )


def build_registry(modules: Optional[Iterable[Union[str, ModuleType]]] = None) -> CommandRegistry:
    registry = CommandRegistry()
    registry.discover(modules)
    return registry
