"""Capabilities the command core consumes from a browser driver.

Drivers are plugged in behind these protocols; the core never imports a
concrete automation library.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float


class ElementHandle(Protocol):
    async def bounding_box(self) -> Optional[Box]: ...

    async def click(self, *, button: str = "left", click_count: int = 1) -> None: ...

    async def input(self, value: str) -> None: ...

    async def screenshot(self) -> bytes: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...


class PageHandle(Protocol):
    async def navigate(self, url: str) -> None: ...

    async def go_back(self) -> None: ...

    async def go_forward(self) -> None: ...

    async def reload(self) -> None: ...

    async def element(self, selector: str) -> ElementHandle: ...

    async def mouse_move(self, point: Point) -> None: ...

    async def mouse_down(self, *, button: str = "left", click_count: int = 1) -> None: ...

    async def mouse_up(self, *, button: str = "left", click_count: int = 1) -> None: ...

    async def insert_text(self, text: str) -> None: ...

    async def press_key(self, key: str) -> None: ...

    async def set_viewport(self, width: int, height: int) -> None: ...

    async def screenshot(self) -> bytes: ...

    async def pdf(self) -> bytes: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def wait_dom_stable(
        self,
        *,
        interval_seconds: float,
        diff_threshold: float,
        timeout_seconds: float,
    ) -> bool: ...


class BrowserHandle(Protocol):
    async def pages(self) -> List[PageHandle]: ...

    async def new_page(self) -> PageHandle: ...

    async def close(self) -> None: ...


class BrowserDriver(Protocol):
    async def launch(self) -> BrowserHandle: ...
