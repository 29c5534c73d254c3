"""Error taxonomy and dispatch result shared by all commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


class CommandError(Exception):
    """Base class for every failure a command can report."""

    code = "command_error"


class ArgumentError(CommandError):
    """Missing, mistyped or out-of-domain argument. Raised before any driver call."""

    code = "invalid_arguments"


class UnknownCommandError(ArgumentError):
    code = "unknown_command"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: {name}")
        self.name = name


class SessionError(CommandError):
    """Browser or page not available when required."""

    code = "session_error"


class DriverError(CommandError):
    """A browser driver step failed; carries the action and its target."""

    code = "driver_error"

    def __init__(
        self,
        action: str,
        target: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.action = action
        self.target = target
        self.cause = cause
        subject = f"{action} {target}" if target else action
        if cause is not None:
            message = f"Failed to {subject}: {_describe(cause)}"
        else:
            message = f"Failed to {subject}"
        super().__init__(message)


class PartialSequenceError(DriverError):
    """One step of a multi-step pointer sequence failed."""

    code = "partial_sequence"

    STEP_ACTIONS = {
        "move_to_source": "move mouse to source element",
        "press": "press mouse button",
        "move_to_target": "move mouse to target element",
        "release": "release mouse button",
    }

    def __init__(self, step: str, cause: Optional[BaseException] = None) -> None:
        if step not in self.STEP_ACTIONS:
            raise ValueError(f"unknown pointer step: {step}")
        self.step = step
        super().__init__(self.STEP_ACTIONS[step], cause=cause)


def _describe(exc: BaseException) -> str:
    text = str(exc).strip()
    # Playwright errors carry a multi-line call log after the first line.
    first_line = text.splitlines()[0] if text else ""
    return first_line or type(exc).__name__


@dataclass(frozen=True)
class CommandResult:
    command: str
    text: Optional[str] = None
    error: Optional[CommandError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        return None if self.error is None else self.error.code

    def to_dict(self) -> Dict[str, Any]:
        if self.error is None:
            return {"success": True, "text": self.text, "error": None, "error_code": None}
        return {
            "success": False,
            "text": None,
            "error": str(self.error),
            "error_code": self.error.code,
        }
