"""
WebPilot: a remote browser driven through named commands.

    from webpilot import BrowserSession, CommandContext, build_registry
    from webpilot.driver.playwright_driver import PlaywrightDriver

    registry = build_registry()
    ctx = CommandContext(session=BrowserSession(PlaywrightDriver()))
    result = await registry.dispatch(ctx, "navigate", {"url": "https://example.com"})
"""

from .commands import CommandContext, CommandRegistry, build_registry
from .config import Settings
from .errors import (
    ArgumentError,
    CommandError,
    CommandResult,
    DriverError,
    PartialSequenceError,
    SessionError,
    UnknownCommandError,
)
from .session import BrowserSession

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "BrowserSession",
    "CommandContext",
    "CommandError",
    "CommandRegistry",
    "CommandResult",
    "DriverError",
    "PartialSequenceError",
    "SessionError",
    "Settings",
    "UnknownCommandError",
    "build_registry",
]
