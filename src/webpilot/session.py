"""Lazy owner of one browser and one active page."""

from __future__ import annotations

import logging
from typing import Optional

from .driver.base import BrowserDriver, BrowserHandle, PageHandle
from .errors import DriverError, SessionError

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Holds at most one browser and one active page for a driver.

    The browser is launched on the first ``ensure_page`` call. The page is the
    browser's existing default page when the driver already opened one,
    otherwise a new page. ``close`` forgets both handles so a later
    ``ensure_page`` launches a fresh browser.

    Sessions are plain objects handed to every command; nothing here is
    process-global, so independent sessions can coexist.
    """

    def __init__(self, driver: BrowserDriver) -> None:
        self._driver = driver
        self._browser: Optional[BrowserHandle] = None
        self._page: Optional[PageHandle] = None

    @property
    def active(self) -> bool:
        return self._browser is not None

    def get_browser(self) -> Optional[BrowserHandle]:
        return self._browser

    async def ensure_page(self) -> PageHandle:
        if self._page is not None:
            return self._page

        if self._browser is None:
            try:
                self._browser = await self._driver.launch()
            except Exception as exc:
                raise SessionError(f"failed to launch browser: {exc}") from exc
            logger.info("Browser launched driver=%s", type(self._driver).__name__)

        try:
            pages = await self._browser.pages()
            page = pages[0] if pages else await self._browser.new_page()
        except Exception as exc:
            raise SessionError(f"failed to open page: {exc}") from exc

        self._page = page
        return page

    async def close(self) -> None:
        browser = self._browser
        if browser is None:
            raise SessionError("browser not launched")
        try:
            await browser.close()
        except Exception as exc:
            raise DriverError("close browser", cause=exc) from exc
        self._browser = None
        self._page = None
        logger.info("Browser closed")

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._browser is not None:
            await self.close()
