"""
Browser driver backed by Playwright's async API (Chromium).

Launch follows a candidate list: an explicit executable path, then the
configured channel, then the bundled Chromium. The first candidate that
launches wins; if none do, the error lists every attempt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..config import BrowserSettings
from ..stability import poll_until_stable
from .base import Box, Point

logger = logging.getLogger(__name__)

_COMMON_ARGS = [
    "--disable-dev-shm-usage",
    "--no-first-run",
    "--no-default-browser-check",
]


class ElementNotFoundError(LookupError):
    pass


class PlaywrightElement:
    def __init__(self, handle: Any, *, timeout_ms: int) -> None:
        self._handle = handle
        self._timeout_ms = timeout_ms

    async def bounding_box(self) -> Optional[Box]:
        box = await self._handle.bounding_box()
        if box is None:
            return None
        return Box(x=box["x"], y=box["y"], width=box["width"], height=box["height"])

    async def click(self, *, button: str = "left", click_count: int = 1) -> None:
        await self._handle.click(button=button, click_count=click_count, timeout=self._timeout_ms)

    async def input(self, value: str) -> None:
        await self._handle.fill(value, timeout=self._timeout_ms)

    async def screenshot(self) -> bytes:
        return await self._handle.screenshot(type="png", timeout=self._timeout_ms)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self._handle.evaluate(script.strip(), arg)


class PlaywrightPage:
    def __init__(self, page: Any, settings: BrowserSettings) -> None:
        self._page = page
        self._settings = settings

    @property
    def raw(self) -> Any:
        return self._page

    async def navigate(self, url: str) -> None:
        await self._page.goto(url, timeout=self._settings.navigation_timeout_ms)

    async def go_back(self) -> None:
        await self._page.go_back(timeout=self._settings.navigation_timeout_ms)

    async def go_forward(self) -> None:
        await self._page.go_forward(timeout=self._settings.navigation_timeout_ms)

    async def reload(self) -> None:
        await self._page.reload(timeout=self._settings.navigation_timeout_ms)

    async def element(self, selector: str) -> PlaywrightElement:
        handle = await self._page.wait_for_selector(
            selector,
            state="attached",
            timeout=self._settings.element_timeout_ms,
        )
        if handle is None:
            raise ElementNotFoundError(f"no element matches {selector}")
        return PlaywrightElement(handle, timeout_ms=self._settings.element_timeout_ms)

    async def mouse_move(self, point: Point) -> None:
        await self._page.mouse.move(point.x, point.y)

    async def mouse_down(self, *, button: str = "left", click_count: int = 1) -> None:
        await self._page.mouse.down(button=button, click_count=click_count)

    async def mouse_up(self, *, button: str = "left", click_count: int = 1) -> None:
        await self._page.mouse.up(button=button, click_count=click_count)

    async def insert_text(self, text: str) -> None:
        await self._page.keyboard.insert_text(text)

    async def press_key(self, key: str) -> None:
        await self._page.keyboard.press(key)

    async def set_viewport(self, width: int, height: int) -> None:
        await self._page.set_viewport_size({"width": width, "height": height})

    async def screenshot(self) -> bytes:
        return await self._page.screenshot(type="png")

    async def pdf(self) -> bytes:
        await self._page.wait_for_load_state(
            "domcontentloaded", timeout=self._settings.navigation_timeout_ms
        )
        return await self._page.pdf(print_background=True)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if arg is None:
            return await self._page.evaluate(script.strip())
        return await self._page.evaluate(script.strip(), arg)

    async def html(self) -> str:
        return await self._page.content()

    async def wait_dom_stable(
        self,
        *,
        interval_seconds: float,
        diff_threshold: float,
        timeout_seconds: float,
    ) -> bool:
        outcome = await poll_until_stable(
            self.html,
            interval_seconds=interval_seconds,
            diff_threshold=diff_threshold,
            timeout_seconds=timeout_seconds,
        )
        return outcome.stable


class PlaywrightBrowser:
    def __init__(self, playwright: Any, browser: Any, settings: BrowserSettings, *, launch_strategy: str) -> None:
        self._playwright = playwright
        self._browser = browser
        self._settings = settings
        self.launch_strategy = launch_strategy

    async def pages(self) -> List[PlaywrightPage]:
        pages: List[PlaywrightPage] = []
        for context in self._browser.contexts:
            pages.extend(PlaywrightPage(page, self._settings) for page in context.pages)
        return pages

    async def new_page(self) -> PlaywrightPage:
        if self._browser.contexts:
            context = self._browser.contexts[0]
        else:
            context = await self._browser.new_context()
        page = await context.new_page()
        return PlaywrightPage(page, self._settings)

    async def close(self) -> None:
        # Playwright is stopped only once the browser closed; a failed close can be retried.
        await self._browser.close()
        await self._playwright.stop()


class PlaywrightDriver:
    """Launches Chromium through Playwright; one call to ``launch`` per browser."""

    def __init__(self, settings: Optional[BrowserSettings] = None) -> None:
        self.settings = settings or BrowserSettings.from_env()

    async def launch(self) -> PlaywrightBrowser:
        try:
            from playwright.async_api import async_playwright
        except ImportError as exc:
            raise RuntimeError(
                "playwright is not installed. Install it with: pip install playwright "
                "&& playwright install chromium"
            ) from exc

        playwright = await async_playwright().start()
        try:
            browser, strategy = await self._launch_with_fallback(playwright)
        except BaseException:
            await playwright.stop()
            raise
        logger.info(
            "Browser launched headless=%s launch_strategy=%s",
            self.settings.headless,
            strategy,
        )
        return PlaywrightBrowser(playwright, browser, self.settings, launch_strategy=strategy)

    async def _launch_with_fallback(self, playwright: Any) -> tuple[Any, str]:
        failures: List[str] = []
        for label, kwargs in self._launch_candidates():
            try:
                browser = await playwright.chromium.launch(**kwargs)
                return browser, label
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                failures.append(f"{label}: {_compact_exception_message(exc)}")
        raise RuntimeError("Failed to launch browser. Attempts: " + " | ".join(failures))

    def _launch_candidates(self) -> List[tuple[str, Dict[str, Any]]]:
        def candidate(**extra: Any) -> Dict[str, Any]:
            kwargs: Dict[str, Any] = {
                "headless": self.settings.headless,
                "args": list(_COMMON_ARGS),
            }
            kwargs.update(extra)
            return kwargs

        candidates: List[tuple[str, Dict[str, Any]]] = []
        if self.settings.executable_path:
            candidates.append(
                ("chromium-executable", candidate(executable_path=self.settings.executable_path))
            )
        if self.settings.channel:
            candidates.append(
                (f"chromium-channel:{self.settings.channel}", candidate(channel=self.settings.channel))
            )
        candidates.append(("chromium-bundled", candidate()))
        return candidates


def _compact_exception_message(exc: BaseException) -> str:
    text = str(exc).strip()
    first_line = text.splitlines()[0] if text else type(exc).__name__
    return first_line[:300]
