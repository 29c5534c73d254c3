# webpilot/command/webpilot_run.py

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List

import click

from webpilot.command.command_utils import build_context, load_settings, setup_command_logger
from webpilot.commands import CommandContext, CommandRegistry, build_registry
from webpilot.errors import CommandError
from webpilot.util.file_utils import from_json_or_yaml

logger = logging.getLogger(__name__)


def load_steps(path) -> List[Dict[str, Any]]:
    """
    Reads a step file: either a list of steps or a mapping with a `steps` list.
    Each step is `{"command": <name>, "arguments": {...}}`.
    """
    data = from_json_or_yaml(path)
    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a list of steps", param_hint="--script")

    steps = []
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict) or not isinstance(item.get("command"), str):
            raise click.BadParameter(f"step {index} needs a `command` name", param_hint="--script")
        arguments = item.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise click.BadParameter(f"step {index} `arguments` must be a mapping", param_hint="--script")
        steps.append({"command": item["command"], "arguments": arguments})
    return steps


async def run_steps(
    registry: CommandRegistry,
    ctx: CommandContext,
    steps: List[Dict[str, Any]],
    *,
    keep_going: bool = False,
) -> int:
    """
    Runs steps in order on one session and returns the number of failed steps.
    The browser is closed afterwards if a step left it open.
    """
    failures = 0
    try:
        for index, step in enumerate(steps, start=1):
            name = step["command"]
            result = await registry.dispatch(ctx, name, step["arguments"])
            if result.ok:
                click.echo(f"[{index}] {name}: {result.text}")
                continue
            failures += 1
            click.echo(f"[{index}] {name} failed ({result.error_code}): {result.error}", err=True)
            if not keep_going:
                break
    finally:
        if ctx.session.active:
            try:
                await ctx.session.close()
            except CommandError as exc:
                logger.warning("Browser did not close cleanly: %s", exc)
    return failures


@click.command(name="webpilot-run")
@click.option(
    '--script', '-s', 'script_path',
    default=None,
    help='Step file (YAML or JSON) with the commands to run.',
    type=click.Path(exists=True, dir_okay=False)
)
@click.option(
    '--list', 'list_commands',
    is_flag=True,
    help='Print the command schemas as JSON and exit.'
)
@click.option(
    '--keep-going',
    is_flag=True,
    help='Continue with the next step after a failure.'
)
@click.option(
    '--config', '-c',
    default=None,
    help='Path to a settings file (YAML or JSON).',
    type=click.Path(exists=True, dir_okay=False)
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging.'
)
def run(script_path, list_commands, keep_going, config, verbose):
    """
    Runs a sequence of browser commands in one session.
    """
    registry = build_registry()
    if list_commands:
        click.echo(json.dumps(registry.get_schemas(), indent=2))
        return
    if script_path is None:
        raise click.UsageError("Pass --script FILE or --list.")

    setup_command_logger(
        log_filename="webpilot-run.log",
        verbose=verbose,
        log_to_file=False,
    )
    steps = load_steps(script_path)
    ctx = build_context(load_settings(config))
    failures = asyncio.run(run_steps(registry, ctx, steps, keep_going=keep_going))
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    run()
