"""Per-dispatch context handed to every command handler, plus handler helpers."""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from ..artifacts import ArtifactSink, NullArtifactSink
from ..config import Settings
from ..driver.base import ElementHandle, PageHandle
from ..errors import CommandError, DriverError, SessionError
from ..session import BrowserSession
from ..stability import StabilityWaiter


@dataclass
class CommandContext:
    session: BrowserSession
    settings: Settings = field(default_factory=Settings)
    stability: Optional[StabilityWaiter] = None
    artifacts: ArtifactSink = field(default_factory=NullArtifactSink)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if self.stability is None:
            self.stability = StabilityWaiter(self.settings.stability)

    async def page(self, failure: str) -> PageHandle:
        """Active page; session failures are prefixed with the command's ``failure`` text."""
        try:
            return await self.session.ensure_page()
        except SessionError as exc:
            raise SessionError(f"{failure}: {exc}") from exc


@asynccontextmanager
async def driver_step(action: str, target: Optional[str] = None) -> AsyncIterator[None]:
    """Turn any driver exception raised in the block into a ``DriverError``."""
    try:
        yield
    except CommandError:
        raise
    except Exception as exc:
        raise DriverError(action, target, exc) from exc


async def find_element(page: PageHandle, selector: str, *, label: str = "element") -> ElementHandle:
    async with driver_step(f"find {label}", selector):
        return await page.element(selector)


def render_value(value: Any) -> str:
    """Text form of a script result: strings verbatim, everything else as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)
