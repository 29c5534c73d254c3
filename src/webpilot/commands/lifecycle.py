"""Commands that do not act on the page: delays and closing the browser."""

from __future__ import annotations

from pydantic import Field

from ..config import MAX_WAIT_CEILING_SECS
from .context import CommandContext
from .decorator import CommandArgs, NoArgs, command


class WaitArgs(CommandArgs):
    time: float = Field(..., description="The time to wait in seconds (capped at 10 seconds)")


@command(description="Wait for a specified time in seconds", args=WaitArgs)
async def wait(ctx: CommandContext, args: WaitArgs) -> str:
    limit = min(ctx.settings.interaction.max_wait_seconds, MAX_WAIT_CEILING_SECS)
    seconds = min(max(0.0, float(args.time)), limit)
    await ctx.sleep(seconds)
    return f"Waited for {seconds:.1f} seconds"


@command(description="Close the browser", args=NoArgs)
async def close(ctx: CommandContext, args: NoArgs) -> str:
    await ctx.session.close()
    return "Browser closed successfully"
