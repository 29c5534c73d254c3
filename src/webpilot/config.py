"""Runtime settings for the browser session, stability wait and commands.

Values come from ``WEBPILOT_*`` environment variables and can be overlaid
with a mapping loaded from a YAML/JSON config file (see ``Settings.from_dict``).
Malformed values never raise: they fall back to the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional


DEFAULT_ELEMENT_TIMEOUT_MS = 30_000
DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000
DEFAULT_STABLE_INTERVAL_SECS = 1.0
DEFAULT_STABLE_DIFF = 0.2
DEFAULT_STABLE_TIMEOUT_SECS = 10.0
DEFAULT_MAX_WAIT_SECS = 10.0
# Hard ceiling for the wait command; configuration can only lower it.
MAX_WAIT_CEILING_SECS = 10.0


def _parse_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(raw: Any, default: int, minimum: int) -> int:
    if raw is None or isinstance(raw, bool):
        return max(minimum, int(default))
    try:
        parsed = int(str(raw).strip())
    except Exception:
        return max(minimum, int(default))
    return max(minimum, parsed)


def _parse_float(raw: Any, default: float, minimum: float) -> float:
    if raw is None or isinstance(raw, bool):
        return max(minimum, float(default))
    try:
        parsed = float(str(raw).strip())
    except Exception:
        return max(minimum, float(default))
    if parsed != parsed:  # NaN guard
        return max(minimum, float(default))
    return max(minimum, parsed)


def _parse_str(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _parse_bool_env(name: str, default: bool) -> bool:
    return _parse_bool(os.getenv(name), default)


def _parse_int_env(name: str, default: int, minimum: int) -> int:
    return _parse_int(os.getenv(name), default, minimum)


def _parse_float_env(name: str, default: float, minimum: float) -> float:
    return _parse_float(os.getenv(name), default, minimum)


@dataclass(frozen=True)
class BrowserSettings:
    headless: bool = True
    channel: Optional[str] = None
    executable_path: Optional[str] = None
    element_timeout_ms: int = DEFAULT_ELEMENT_TIMEOUT_MS
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS

    @classmethod
    def from_env(cls) -> "BrowserSettings":
        return cls(
            headless=_parse_bool_env("WEBPILOT_HEADLESS", True),
            channel=_parse_str(os.getenv("WEBPILOT_BROWSER_CHANNEL")),
            executable_path=_parse_str(os.getenv("WEBPILOT_BROWSER_EXECUTABLE_PATH")),
            element_timeout_ms=_parse_int_env(
                "WEBPILOT_ELEMENT_TIMEOUT_MS", DEFAULT_ELEMENT_TIMEOUT_MS, 1
            ),
            navigation_timeout_ms=_parse_int_env(
                "WEBPILOT_NAVIGATION_TIMEOUT_MS", DEFAULT_NAVIGATION_TIMEOUT_MS, 1
            ),
        )

    def merged(self, data: Mapping[str, Any]) -> "BrowserSettings":
        return replace(
            self,
            headless=_parse_bool(data.get("headless"), self.headless),
            channel=_parse_str(data.get("channel")) or self.channel,
            executable_path=_parse_str(data.get("executable_path")) or self.executable_path,
            element_timeout_ms=_parse_int(
                data.get("element_timeout_ms"), self.element_timeout_ms, 1
            ),
            navigation_timeout_ms=_parse_int(
                data.get("navigation_timeout_ms"), self.navigation_timeout_ms, 1
            ),
        )


@dataclass(frozen=True)
class StabilitySettings:
    """Quiescence window, diff threshold and upper bound for the DOM stability wait."""

    interval_seconds: float = DEFAULT_STABLE_INTERVAL_SECS
    diff_threshold: float = DEFAULT_STABLE_DIFF
    timeout_seconds: float = DEFAULT_STABLE_TIMEOUT_SECS

    @classmethod
    def from_env(cls) -> "StabilitySettings":
        return cls(
            interval_seconds=_parse_float_env(
                "WEBPILOT_STABLE_INTERVAL_SECS", DEFAULT_STABLE_INTERVAL_SECS, 0.0
            ),
            diff_threshold=min(
                1.0, _parse_float_env("WEBPILOT_STABLE_DIFF", DEFAULT_STABLE_DIFF, 0.0)
            ),
            timeout_seconds=_parse_float_env(
                "WEBPILOT_STABLE_TIMEOUT_SECS", DEFAULT_STABLE_TIMEOUT_SECS, 0.0
            ),
        )

    def merged(self, data: Mapping[str, Any]) -> "StabilitySettings":
        return replace(
            self,
            interval_seconds=_parse_float(data.get("interval_seconds"), self.interval_seconds, 0.0),
            diff_threshold=min(
                1.0, _parse_float(data.get("diff_threshold"), self.diff_threshold, 0.0)
            ),
            timeout_seconds=_parse_float(data.get("timeout_seconds"), self.timeout_seconds, 0.0),
        )


@dataclass(frozen=True)
class InteractionSettings:
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECS
    release_on_failure: bool = False

    @classmethod
    def from_env(cls) -> "InteractionSettings":
        return cls(
            max_wait_seconds=min(
                MAX_WAIT_CEILING_SECS,
                _parse_float_env("WEBPILOT_MAX_WAIT_SECS", DEFAULT_MAX_WAIT_SECS, 0.0),
            ),
            release_on_failure=_parse_bool_env("WEBPILOT_DRAG_RELEASE_ON_FAILURE", False),
        )

    def merged(self, data: Mapping[str, Any]) -> "InteractionSettings":
        return replace(
            self,
            max_wait_seconds=min(
                MAX_WAIT_CEILING_SECS,
                _parse_float(data.get("max_wait_seconds"), self.max_wait_seconds, 0.0),
            ),
            release_on_failure=_parse_bool(data.get("release_on_failure"), self.release_on_failure),
        )


@dataclass(frozen=True)
class Settings:
    browser: BrowserSettings = field(default_factory=BrowserSettings)
    stability: StabilitySettings = field(default_factory=StabilitySettings)
    interaction: InteractionSettings = field(default_factory=InteractionSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            browser=BrowserSettings.from_env(),
            stability=StabilitySettings.from_env(),
            interaction=InteractionSettings.from_env(),
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], *, base: Optional["Settings"] = None) -> "Settings":
        """Overlay ``{"browser": {...}, "stability": {...}, "interaction": {...}}`` on ``base``."""
        current = base if base is not None else cls.from_env()
        if not data:
            return current
        updates = {}
        for item in fields(cls):
            section = data.get(item.name)
            if isinstance(section, Mapping):
                updates[item.name] = getattr(current, item.name).merged(section)
        return replace(current, **updates)
