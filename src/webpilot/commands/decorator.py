"""
Command Decorator: single source of truth for command definitions.

A command is an async handler ``(ctx, args) -> str`` plus a pydantic model
declaring its parameters. From the model the decorator derives:
- ordered parameter declarations (name, semantic type, required, description)
- the JSON schema handed to transports
- the decode step that turns an untyped argument bag into typed arguments

Usage:
    from pydantic import Field

    from webpilot.commands.decorator import CommandArgs, command

    class ClickArgs(CommandArgs):
        selector: str = Field(..., description="CSS selector of the element to click")

    @command(description="Click an element on the page", args=ClickArgs)
    async def click(ctx, args: ClickArgs) -> str:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Type,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic_core import PydanticUndefined

from ..errors import ArgumentError


class CommandArgs(BaseModel):
    """Base for argument models: strict types, unknown keys ignored, nulls mean absent."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        return data


class NoArgs(CommandArgs):
    pass


# ═══════════════════════════════════════════════════════════════════
# TYPE TO SEMANTIC TYPE MAPPING
# ═══════════════════════════════════════════════════════════════════

def semantic_type(py_type: Any) -> str:
    """Map a field annotation to ``string``, ``number`` or ``boolean``."""
    if get_origin(py_type) is Union:
        non_none = [a for a in get_args(py_type) if a is not type(None)]
        if len(non_none) == 1:
            return semantic_type(non_none[0])
        return "string"
    # bool first: it is a subclass of int
    if py_type is bool:
        return "boolean"
    if py_type in (int, float):
        return "number"
    return "string"


# ═══════════════════════════════════════════════════════════════════
# COMMAND METADATA
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ParamSpec:
    """Declaration of a single command parameter."""
    name: str
    type: str
    description: str
    required: bool
    default: Any = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type, "description": self.description}
        if not self.required:
            schema["default"] = self.default
        return schema


Handler = Callable[[Any, Any], Awaitable[str]]


@dataclass(frozen=True)
class CommandSpec:
    """Complete definition of a command, extracted from a decorated handler."""
    name: str
    description: str
    args_model: Type[CommandArgs]
    parameters: List[ParamSpec]
    handler: Handler

    def to_json_schema(self) -> Dict[str, Any]:
        properties = {param.name: param.to_json_schema() for param in self.parameters}
        required = [param.name for param in self.parameters if param.required]
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        }

    def decode(self, arguments: Optional[Mapping[str, Any]]) -> CommandArgs:
        """Validate the argument bag; any failure becomes one ``ArgumentError``."""
        try:
            return self.args_model.model_validate({} if arguments is None else arguments)
        except ValidationError as exc:
            raise ArgumentError(_format_validation_error(self.name, exc)) from exc

    async def run(self, ctx: Any, arguments: Optional[Mapping[str, Any]]) -> str:
        args = self.decode(arguments)
        return await self.handler(ctx, args)


def _format_validation_error(name: str, exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "arguments"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return f"Invalid arguments for {name}: " + "; ".join(parts)


def parameters_of(model: Type[CommandArgs]) -> List[ParamSpec]:
    params = []
    for field_name, info in model.model_fields.items():
        required = info.is_required()
        default = None if required or info.default is PydanticUndefined else info.default
        params.append(
            ParamSpec(
                name=field_name,
                type=semantic_type(info.annotation),
                description=info.description or f"The {field_name} parameter",
                required=required,
                default=default,
            )
        )
    return params


# ═══════════════════════════════════════════════════════════════════
# THE DECORATOR
# ═══════════════════════════════════════════════════════════════════

def command(
    description: str,
    args: Type[CommandArgs] = NoArgs,
    name: Optional[str] = None,
) -> Callable[[Handler], Handler]:
    """
    Attach a ``CommandSpec`` to an async handler as ``handler.command``.

    Args:
        description: Human-readable description of what the command does.
        args: Argument model; its fields are the command's parameters.
        name: Override command name (defaults to the function name).
    """

    def decorator(func: Handler) -> Handler:
        func.command = CommandSpec(
            name=name or func.__name__,
            description=description,
            args_model=args,
            parameters=parameters_of(args),
            handler=func,
        )
        return func

    return decorator
