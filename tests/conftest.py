from typing import Any, Dict, List, Optional, Tuple

import pytest

from webpilot.commands import CommandContext, build_registry
from webpilot.config import Settings, StabilitySettings
from webpilot.driver.base import Box
from webpilot.session import BrowserSession


class FakeDriver:
    """Records every driver call, in order, into ``self.log``.

    ``fail`` maps a call name (``launch``, ``navigate``, ``mouse_down``, ...) to
    the exception that call should raise. ``results`` maps ``evaluate`` /
    ``element_evaluate`` to the value the script returns.
    """

    def __init__(self, *, default_pages: int = 0) -> None:
        self.log: List[Tuple[Any, ...]] = []
        self.fail: Dict[str, BaseException] = {}
        self.results: Dict[str, Any] = {}
        self.boxes: Dict[str, Optional[Box]] = {}
        self.stable = True
        self.default_pages = default_pages
        self.browsers: List["FakeBrowser"] = []

    def record(self, name: str, *args: Any) -> None:
        self.log.append((name,) + args)
        exc = self.fail.get(name)
        if exc is not None:
            raise exc

    @property
    def names(self) -> List[str]:
        return [entry[0] for entry in self.log]

    async def launch(self) -> "FakeBrowser":
        self.record("launch")
        browser = FakeBrowser(self)
        self.browsers.append(browser)
        return browser


class FakeBrowser:
    def __init__(self, driver: FakeDriver) -> None:
        self.driver = driver
        self._pages = [FakePage(driver) for _ in range(driver.default_pages)]
        self.closed = False

    async def pages(self):
        self.driver.record("pages")
        return list(self._pages)

    async def new_page(self):
        self.driver.record("new_page")
        page = FakePage(self.driver)
        self._pages.append(page)
        return page

    async def close(self):
        self.driver.record("close_browser")
        self.closed = True


class FakeElement:
    def __init__(self, driver: FakeDriver, selector: str) -> None:
        self.driver = driver
        self.selector = selector

    async def bounding_box(self):
        self.driver.record("bounding_box", self.selector)
        return self.driver.boxes.get(self.selector, Box(0, 0, 10, 10))

    async def click(self, *, button="left", click_count=1):
        self.driver.record("click", self.selector, button, click_count)

    async def input(self, value):
        self.driver.record("input", self.selector, value)

    async def screenshot(self):
        self.driver.record("element_screenshot", self.selector)
        return b"element-png"

    async def evaluate(self, script, arg=None):
        self.driver.record("element_evaluate", self.selector, script, arg)
        return self.driver.results.get("element_evaluate", True)


class FakePage:
    def __init__(self, driver: FakeDriver) -> None:
        self.driver = driver

    async def navigate(self, url):
        self.driver.record("navigate", url)

    async def go_back(self):
        self.driver.record("go_back")

    async def go_forward(self):
        self.driver.record("go_forward")

    async def reload(self):
        self.driver.record("reload")

    async def element(self, selector):
        self.driver.record("element", selector)
        return FakeElement(self.driver, selector)

    async def mouse_move(self, point):
        self.driver.record("mouse_move", point)

    async def mouse_down(self, *, button="left", click_count=1):
        self.driver.record("mouse_down", button)

    async def mouse_up(self, *, button="left", click_count=1):
        self.driver.record("mouse_up", button)

    async def insert_text(self, text):
        self.driver.record("insert_text", text)

    async def press_key(self, key):
        self.driver.record("press_key", key)

    async def set_viewport(self, width, height):
        self.driver.record("set_viewport", width, height)

    async def screenshot(self):
        self.driver.record("screenshot")
        return b"page-png"

    async def pdf(self):
        self.driver.record("pdf")
        return b"%PDF-1.4"

    async def evaluate(self, script, arg=None):
        self.driver.record("evaluate", script, arg)
        return self.driver.results.get("evaluate")

    async def wait_dom_stable(self, *, interval_seconds, diff_threshold, timeout_seconds):
        self.driver.record("wait_dom_stable", interval_seconds, diff_threshold, timeout_seconds)
        return self.driver.stable


class RecordingSink:
    def __init__(self) -> None:
        self.stored: List[Tuple[str, str, bytes]] = []

    async def store(self, kind, name, data):
        self.stored.append((kind, name, data))


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def settings():
    return Settings(
        stability=StabilitySettings(interval_seconds=0.0, diff_threshold=0.2, timeout_seconds=0.0)
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def ctx(driver, settings, sleeps, sink):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    return CommandContext(
        session=BrowserSession(driver),
        settings=settings,
        artifacts=sink,
        sleep=fake_sleep,
    )


@pytest.fixture(scope="session")
def registry():
    return build_registry()
