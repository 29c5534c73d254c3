"""End-to-end checks against a real Chromium; skipped when none can be launched.

These are the only tests that execute the in-page scripts.
"""

import json

import pytest

pytest.importorskip("playwright.async_api")

from webpilot.commands import CommandContext, build_registry
from webpilot.config import BrowserSettings, Settings, StabilitySettings
from webpilot.driver.playwright_driver import PlaywrightDriver
from webpilot.session import BrowserSession

PAGE_HTML = """
<main>
  <p id="first">  Hello   </p>
  <p id="second" style="display: none">Secret</p>
  <select id="lang"><option value="en">English</option><option value="fr">French</option></select>
  <input id="q">
  <a id="docs" class="nav" href="/docs" data-kind="link">Docs</a>
  <div id="src" style="position: absolute; left: 10px; top: 300px; width: 40px; height: 40px"></div>
  <div id="dst" style="position: absolute; left: 200px; top: 300px; width: 60px; height: 60px"></div>
</main>
"""

NESTED_HTML = "<div>" * 15 + "deep" + "</div>" * 15

RECORD_POINTER_JS = """
window.pointerEvents = [];
for (const type of ["mousedown", "mouseup"]) {
  document.addEventListener(type, (e) => window.pointerEvents.push([type, e.target.id]));
}
'ok'
"""


async def open_context():
    settings = Settings(
        browser=BrowserSettings(element_timeout_ms=2000),
        stability=StabilitySettings(interval_seconds=0.1, timeout_seconds=1.0),
    )
    session = BrowserSession(PlaywrightDriver(settings.browser))
    try:
        await session.ensure_page()
    except Exception as exc:
        pytest.skip(f"Chromium not available: {exc}")
    return CommandContext(session=session, settings=settings)


async def load(registry, ctx, html):
    result = await registry.dispatch(
        ctx, "evaluate", {"script": f"document.body.innerHTML = {json.dumps(html)}; 'ok'"}
    )
    assert result.text == "Script evaluated successfully, result: ok"


def payload(text):
    return json.loads(text.split("\n", 1)[1])


def depth(node):
    return 1 + max((depth(child) for child in node["children"]), default=0)


@pytest.mark.asyncio
async def test_text_and_form_commands():
    registry = build_registry()
    ctx = await open_context()
    try:
        await load(registry, ctx, PAGE_HTML)

        page_text = await registry.dispatch(ctx, "get_text")
        assert "Hello" in page_text.text
        assert "Secret" not in page_text.text

        hidden = await registry.dispatch(ctx, "get_text", {"selector": "p"})
        assert hidden.text == "Text content of elements matching 'p':\nHello\n\n[Hidden element]"

        await registry.dispatch(ctx, "select", {"selector": "#lang", "value": "fr"})
        await registry.dispatch(ctx, "fill", {"selector": "#q", "value": "it's \"quoted\""})
        values = await registry.dispatch(
            ctx, "evaluate", {"script": "[document.querySelector('#lang').value, document.querySelector('#q').value]"}
        )
        assert values.text == 'Script evaluated successfully, result: ["fr", "it\'s \\"quoted\\""]'

        missing = await registry.dispatch(ctx, "click", {"selector": "#nope"})
        assert missing.error_code == "driver_error"
        assert str(missing.error).startswith("Failed to find element #nope")
    finally:
        await ctx.session.close()


@pytest.mark.asyncio
async def test_select_element_flags_shape_the_result():
    registry = build_registry()
    ctx = await open_context()
    try:
        await load(registry, ctx, PAGE_HTML)

        with_text = await registry.dispatch(ctx, "select_element", {"selector": "a.nav"})
        [link] = payload(with_text.text)
        assert link["tagName"] == "a"
        assert link["id"] == "docs"
        assert link["text"] == "Docs"
        assert "attributes" not in link
        assert set(link["rect"]) == {"x", "y", "width", "height"}

        with_attributes = await registry.dispatch(
            ctx,
            "select_element",
            {"selector": "a.nav", "get_text": False, "get_attributes": True},
        )
        [link] = payload(with_attributes.text)
        assert "text" not in link
        assert link["attributes"]["data-kind"] == "link"
        assert link["attributes"]["href"] == "/docs"
        assert "rect" in link

        inputs = await registry.dispatch(ctx, "select_element", {"selector": "#q"})
        assert payload(inputs.text)[0]["value"] == ""

        none = await registry.dispatch(ctx, "select_element", {"selector": "table"})
        assert payload(none.text) == []
    finally:
        await ctx.session.close()


@pytest.mark.asyncio
async def test_snapshot_stops_at_depth_ten():
    registry = build_registry()
    ctx = await open_context()
    try:
        await load(registry, ctx, NESTED_HTML)

        result = await registry.dispatch(ctx, "snapshot")

        prefix = "Snapshot captured successfully: "
        tree = json.loads(result.text[len(prefix):])
        assert tree["tag"] == "html"
        assert tree["children"][-1]["tag"] == "body"
        # html is depth 0, so eleven levels survive the cap
        assert depth(tree) == 11
    finally:
        await ctx.session.close()


@pytest.mark.asyncio
async def test_drag_presses_on_source_and_releases_on_target():
    registry = build_registry()
    ctx = await open_context()
    try:
        await load(registry, ctx, PAGE_HTML)
        await registry.dispatch(ctx, "evaluate", {"script": RECORD_POINTER_JS})

        result = await registry.dispatch(
            ctx, "drag", {"source_selector": "#src", "target_selector": "#dst"}
        )
        assert result.text == "Drag and drop from #src to #dst successfully"

        events = await registry.dispatch(ctx, "evaluate", {"script": "window.pointerEvents"})
        assert events.text == (
            'Script evaluated successfully, result: [["mousedown", "src"], ["mouseup", "dst"]]'
        )
    finally:
        await ctx.session.close()
