"""
Browser driver layer.

``base`` declares what the command core needs from a browser; the Playwright
implementation lives in ``playwright_driver`` and is imported lazily so the
core stays importable without a browser stack.
"""

from .base import BrowserDriver, BrowserHandle, Box, ElementHandle, PageHandle, Point

__all__ = [
    "Box",
    "BrowserDriver",
    "BrowserHandle",
    "ElementHandle",
    "PageHandle",
    "Point",
]
