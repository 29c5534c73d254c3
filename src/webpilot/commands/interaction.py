"""Keyboard and pointer commands."""

from __future__ import annotations

from pydantic import Field

from ..pointer import drag_and_drop, element_center
from ..scripts import select_option_script
from .context import CommandContext, driver_step, find_element
from .decorator import CommandArgs, command

# Keys sent as real key presses; anything else is inserted as text.
NAMED_KEYS = frozenset(
    {
        "Enter",
        "Tab",
        "Backspace",
        "Escape",
        "ArrowUp",
        "ArrowDown",
        "ArrowLeft",
        "ArrowRight",
    }
)


class PressKeyArgs(CommandArgs):
    key: str = Field(
        ...,
        min_length=1,
        description="Name of the key to press or a character to generate, such as `ArrowLeft` or `a`",
    )


class ClickArgs(CommandArgs):
    selector: str = Field(..., description="CSS selector of the element to click")


class FillArgs(CommandArgs):
    selector: str = Field(..., description="CSS selector of the element to type into")
    value: str = Field(..., description="Value to fill")


class SelectArgs(CommandArgs):
    selector: str = Field(..., description="CSS selector for element to select")
    value: str = Field(..., description="Value to select")


class DragArgs(CommandArgs):
    source_selector: str = Field(..., description="CSS selector of the source element")
    target_selector: str = Field(..., description="CSS selector of the target element")


@command(description="Press a key on the keyboard", args=PressKeyArgs)
async def press_key(ctx: CommandContext, args: PressKeyArgs) -> str:
    page = await ctx.page("Failed to press key")
    async with driver_step("press key", args.key):
        if len(args.key) > 1 and args.key in NAMED_KEYS:
            await page.press_key(args.key)
        else:
            await page.insert_text(args.key)
    return f"Press key {args.key} successfully"


@command(description="Click an element on the page", args=ClickArgs)
async def click(ctx: CommandContext, args: ClickArgs) -> str:
    page = await ctx.page("Failed to click element")
    element = await find_element(page, args.selector)
    async with driver_step("click element", args.selector):
        await element.click(button="left", click_count=1)
    return f"Click element {args.selector} successfully"


@command(description="Fill out an input field", args=FillArgs)
async def fill(ctx: CommandContext, args: FillArgs) -> str:
    page = await ctx.page("Failed to fill out element")
    element = await find_element(page, args.selector)
    async with driver_step("fill out element", args.selector):
        await element.input(args.value)
    return f"Fill out element {args.selector} successfully"


@command(description="Select an element on the page with Select tag", args=SelectArgs)
async def select(ctx: CommandContext, args: SelectArgs) -> str:
    page = await ctx.page("Failed to select option")
    element = await find_element(page, args.selector, label="select element")
    script = select_option_script(args.value)
    async with driver_step(f"select option {args.value} in element", args.selector):
        await element.evaluate(script.source, script.arg)
    return f"Selected option {args.value} in element {args.selector} successfully"


@command(description="Perform drag and drop between two elements", args=DragArgs)
async def drag(ctx: CommandContext, args: DragArgs) -> str:
    page = await ctx.page("Failed to perform drag and drop")
    source = await find_element(page, args.source_selector, label="source element")
    target = await find_element(page, args.target_selector, label="target element")
    source_point = await element_center(source, label="source", selector=args.source_selector)
    target_point = await element_center(target, label="target", selector=args.target_selector)
    await drag_and_drop(
        page,
        source_point,
        target_point,
        release_on_failure=ctx.settings.interaction.release_on_failure,
    )
    return f"Drag and drop from {args.source_selector} to {args.target_selector} successfully"
