"""Navigation-class commands. Each one ends with the DOM stability wait."""

from __future__ import annotations

from pydantic import Field, field_validator

from .context import CommandContext, driver_step
from .decorator import CommandArgs, NoArgs, command


class NavigateArgs(CommandArgs):
    url: str = Field(..., description="URL to navigate to")

    @field_validator("url")
    @classmethod
    def _require_http(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"invalid URL {value!r}, expected http:// or https://")
        return value


@command(description="Navigate to a URL", args=NavigateArgs)
async def navigate(ctx: CommandContext, args: NavigateArgs) -> str:
    page = await ctx.page(f"Failed to navigate to {args.url}")
    async with driver_step("navigate to", args.url):
        await page.navigate(args.url)
    await ctx.stability.wait(page)
    return f"Navigated to {args.url}"


@command(description="Go back in the browser history, go back to the previous page", args=NoArgs)
async def go_back(ctx: CommandContext, args: NoArgs) -> str:
    page = await ctx.page("Failed to go back")
    async with driver_step("go back"):
        await page.go_back()
    await ctx.stability.wait(page)
    return "Go back successfully"


@command(description="Go forward in the browser history, go to the next page", args=NoArgs)
async def go_forward(ctx: CommandContext, args: NoArgs) -> str:
    page = await ctx.page("Failed to go forward")
    async with driver_step("go forward"):
        await page.go_forward()
    await ctx.stability.wait(page)
    return "Go forward successfully"


@command(description="Reload the current page", args=NoArgs)
async def reload(ctx: CommandContext, args: NoArgs) -> str:
    page = await ctx.page("Failed to reload current page")
    async with driver_step("reload current page"):
        await page.reload()
    await ctx.stability.wait(page)
    return "Reload current page successfully"
