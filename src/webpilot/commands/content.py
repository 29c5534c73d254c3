"""Capture and introspection commands: screenshot, pdf, snapshot, evaluate, element queries."""

from __future__ import annotations

import posixpath

from pydantic import Field

from ..scripts import select_elements_script, snapshot_script, text_script
from .context import CommandContext, driver_step, find_element, render_value
from .decorator import CommandArgs, NoArgs, command

DEFAULT_SCREENSHOT_WIDTH = 800
DEFAULT_SCREENSHOT_HEIGHT = 600


class ScreenshotArgs(CommandArgs):
    name: str = Field(..., description="Name of the screenshot")
    selector: str = Field("", description="CSS selector of the element to take a screenshot of")
    width: float = Field(
        DEFAULT_SCREENSHOT_WIDTH, ge=1, description="Width in pixels (default: 800)"
    )
    height: float = Field(
        DEFAULT_SCREENSHOT_HEIGHT, ge=1, description="Height in pixels (default: 600)"
    )


class PdfArgs(CommandArgs):
    file_path: str = Field(..., description="Path to save the PDF file")
    file_name: str = Field(..., description="Name of the PDF file")


class EvaluateArgs(CommandArgs):
    script: str = Field(..., min_length=1, description="JavaScript code to execute")


class SelectElementArgs(CommandArgs):
    selector: str = Field(..., description="CSS selector of the elements to retrieve")
    get_attributes: bool = Field(
        False, description="Whether to include element attributes in the result (default: false)"
    )
    get_text: bool = Field(
        True, description="Whether to include element text content in the result (default: true)"
    )


class GetTextArgs(CommandArgs):
    selector: str = Field(
        "",
        description="CSS selector of the element to get text from (if empty, gets text from entire page)",
    )
    trim: bool = Field(True, description="Whether to trim whitespace from the text (default: true)")
    include_hidden: bool = Field(False, description="Whether to include hidden text (default: false)")


@command(description="Take a screenshot of the current page or a specific element", args=ScreenshotArgs)
async def screenshot(ctx: CommandContext, args: ScreenshotArgs) -> str:
    page = await ctx.page("Failed to take screenshot")
    if args.selector:
        element = await find_element(page, args.selector)
        async with driver_step("take screenshot of element", args.selector):
            data = await element.screenshot()
    else:
        width, height = int(args.width), int(args.height)
        async with driver_step("set viewport", f"{width}x{height}"):
            await page.set_viewport(width, height)
        async with driver_step("take screenshot"):
            data = await page.screenshot()

    await ctx.artifacts.store("screenshot", args.name, data)
    return f"Screenshot {args.name} taken successfully"


@command(description="Generate a PDF from the current page", args=PdfArgs)
async def pdf(ctx: CommandContext, args: PdfArgs) -> str:
    page = await ctx.page("Failed to generate PDF")
    async with driver_step("generate PDF"):
        data = await page.pdf()
    location = posixpath.join(args.file_path, args.file_name)
    await ctx.artifacts.store("pdf", location, data)
    return f"PDF {location} generated successfully"


@command(description="Capture accessibility snapshot of the current page", args=NoArgs)
async def snapshot(ctx: CommandContext, args: NoArgs) -> str:
    page = await ctx.page("Failed to capture accessibility snapshot")
    script = snapshot_script()
    async with driver_step("capture accessibility snapshot"):
        tree = await page.evaluate(script.source, script.arg)
    return f"Snapshot captured successfully: {render_value(tree)}"


@command(description="Execute JavaScript in the browser console", args=EvaluateArgs)
async def evaluate(ctx: CommandContext, args: EvaluateArgs) -> str:
    page = await ctx.page("Failed to evaluate script")
    async with driver_step("evaluate script"):
        value = await page.evaluate(args.script)
    return f"Script evaluated successfully, result: {render_value(value)}"


@command(description="Select and retrieve information about elements on the page", args=SelectElementArgs)
async def select_element(ctx: CommandContext, args: SelectElementArgs) -> str:
    page = await ctx.page("Failed to access page")
    script = select_elements_script(
        args.selector,
        get_text=args.get_text,
        get_attributes=args.get_attributes,
    )
    async with driver_step("select elements with selector", args.selector):
        found = await page.evaluate(script.source, script.arg)
    return f"Found elements matching selector '{args.selector}':\n{render_value(found)}"


@command(description="Get text content from the page or a specific element", args=GetTextArgs)
async def get_text(ctx: CommandContext, args: GetTextArgs) -> str:
    page = await ctx.page("Failed to access page")
    script = text_script(args.selector, trim=args.trim, include_hidden=args.include_hidden)
    async with driver_step("get text"):
        text = await page.evaluate(script.source, script.arg)
    if not args.selector:
        return f"Text content of the page:\n{render_value(text)}"
    return f"Text content of elements matching '{args.selector}':\n{render_value(text)}"
