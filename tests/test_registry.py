import logging

import pytest
from pydantic import Field

from webpilot.commands import CommandRegistry
from webpilot.commands.decorator import CommandArgs, command, semantic_type
from webpilot.errors import ArgumentError, UnknownCommandError

ALL_COMMANDS = [
    "navigate",
    "go_back",
    "go_forward",
    "reload",
    "press_key",
    "click",
    "fill",
    "select",
    "drag",
    "screenshot",
    "pdf",
    "snapshot",
    "evaluate",
    "select_element",
    "get_text",
    "wait",
    "close",
]


def test_registry_exposes_every_command_once(registry):
    assert sorted(registry.names) == sorted(ALL_COMMANDS)
    assert len(registry) == len(ALL_COMMANDS)
    assert "navigate" in registry
    assert "teleport" not in registry


def test_navigate_schema(registry):
    schema = registry.get_schema("navigate")
    assert schema["name"] == "navigate"
    assert schema["description"] == "Navigate to a URL"
    assert schema["inputSchema"] == {
        "type": "object",
        "properties": {"url": {"type": "string", "description": "URL to navigate to"}},
        "required": ["url"],
    }


def test_screenshot_schema_carries_defaults(registry):
    schema = registry.get_schema("screenshot")["inputSchema"]
    assert schema["required"] == ["name"]
    assert schema["properties"]["selector"]["default"] == ""
    assert schema["properties"]["width"] == {
        "type": "number",
        "description": "Width in pixels (default: 800)",
        "default": 800,
    }
    assert schema["properties"]["height"]["default"] == 600


def test_boolean_parameters_are_reported_as_boolean(registry):
    properties = registry.get_schema("get_text")["inputSchema"]["properties"]
    assert properties["trim"]["type"] == "boolean"
    assert properties["trim"]["default"] is True
    assert properties["include_hidden"]["default"] is False


def test_get_schemas_filters_by_name(registry):
    schemas = registry.get_schemas(["click", "missing", "wait"])
    assert [s["name"] for s in schemas] == ["click", "wait"]


def test_semantic_type_mapping():
    assert semantic_type(bool) == "boolean"
    assert semantic_type(int) == "number"
    assert semantic_type(float) == "number"
    assert semantic_type(str) == "string"


def test_duplicate_registration_is_rejected():
    class EchoArgs(CommandArgs):
        text: str = Field(..., description="Text to echo")

    @command(description="Echo", args=EchoArgs, name="echo")
    async def first(ctx, args):
        return args.text

    @command(description="Echo again", args=EchoArgs, name="echo")
    async def second(ctx, args):
        return args.text

    registry = CommandRegistry()
    registry.register(first)
    with pytest.raises(ValueError, match="Duplicate command name: echo"):
        registry.register(second)


def test_register_rejects_plain_functions():
    async def plain(ctx, args):
        return ""

    with pytest.raises(ValueError):
        CommandRegistry().register(plain)


@pytest.mark.asyncio
async def test_unknown_command_is_reported(registry, ctx, driver):
    result = await registry.dispatch(ctx, "teleport", {})
    assert not result.ok
    assert result.error_code == "unknown_command"
    assert result.to_dict()["error"] == "Unknown command: teleport"
    assert driver.log == []

    with pytest.raises(UnknownCommandError):
        await registry.call(ctx, "teleport")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name",
    [
        "navigate",
        "press_key",
        "click",
        "fill",
        "select",
        "drag",
        "screenshot",
        "pdf",
        "evaluate",
        "select_element",
        "wait",
    ],
)
async def test_missing_required_argument_never_reaches_the_driver(registry, ctx, driver, name):
    result = await registry.dispatch(ctx, name, {})
    assert result.error_code == "invalid_arguments"
    assert result.error.__class__ is ArgumentError
    assert str(result.error).startswith(f"Invalid arguments for {name}: ")
    assert driver.log == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, arguments",
    [
        ("navigate", {"url": 42}),
        ("click", {"selector": True}),
        ("wait", {"time": "5"}),
        ("get_text", {"trim": "yes"}),
        ("select_element", {"selector": "a", "get_text": 1}),
        ("screenshot", {"name": "shot", "width": "800"}),
    ],
)
async def test_wrong_argument_types_are_rejected(registry, ctx, driver, name, arguments):
    result = await registry.dispatch(ctx, name, arguments)
    assert result.error_code == "invalid_arguments"
    assert driver.log == []


@pytest.mark.asyncio
async def test_null_arguments_count_as_absent(registry, ctx, driver):
    result = await registry.dispatch(ctx, "get_text", {"selector": None, "trim": None})
    assert result.ok
    script, arg = driver.log[-1][1:]
    assert arg == {"trim": True, "includeHidden": False}

    missing = await registry.dispatch(ctx, "click", {"selector": None})
    assert missing.error_code == "invalid_arguments"


@pytest.mark.asyncio
async def test_extra_arguments_are_ignored(registry, ctx, driver):
    result = await registry.dispatch(ctx, "click", {"selector": "#go", "force": True})
    assert result.ok
    assert result.text == "Click element #go successfully"


@pytest.mark.asyncio
async def test_successful_dispatch_result(registry, ctx):
    result = await registry.dispatch(ctx, "wait", {"time": 2})
    assert result.to_dict() == {
        "success": True,
        "text": "Waited for 2.0 seconds",
        "error": None,
        "error_code": None,
    }


@pytest.mark.asyncio
async def test_unexpected_handler_failure_becomes_driver_error(ctx):
    @command(description="Explode", name="explode")
    async def explode(ctx, args):
        raise KeyError("boom")

    registry = CommandRegistry()
    registry.register(explode)
    result = await registry.dispatch(ctx, "explode")
    assert result.error_code == "driver_error"
    assert str(result.error).startswith("Failed to run explode")


@pytest.mark.asyncio
async def test_dispatch_logs_one_line_per_command(registry, ctx, caplog):
    caplog.set_level(logging.DEBUG, logger="webpilot.commands.registry")

    await registry.dispatch(ctx, "wait", {"time": 1})
    await registry.dispatch(ctx, "close")

    lines = [r.getMessage() for r in caplog.records if r.name == "webpilot.commands.registry"]
    assert lines[0].startswith("dispatch command=wait outcome=ok duration_ms=")
    assert lines[1].startswith("dispatch command=close outcome=failed duration_ms=")
    assert lines[1].endswith("error_code=session_error error=browser not launched")
    assert [r.levelno for r in caplog.records if r.name == "webpilot.commands.registry"] == [
        logging.DEBUG,
        logging.WARNING,
    ]
