# webpilot/command/webpilot_server.py

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import click
import uvicorn
from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from webpilot.command.command_utils import build_context, load_settings, setup_command_logger
from webpilot.commands import CommandContext, CommandRegistry, build_registry
from webpilot.errors import CommandError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE = {
    None: 200,
    "unknown_command": 404,
    "invalid_arguments": 422,
    "session_error": 409,
    "driver_error": 502,
    "partial_sequence": 502,
}


class CommandResponse(BaseModel):
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


def create_app(registry: CommandRegistry, ctx: CommandContext) -> FastAPI:
    """
    HTTP transport over one browser session. Commands run one at a time.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.registry = registry
        app.state.ctx = ctx
        app.state.lock = asyncio.Lock()
        logger.info("Serving %d commands", len(registry))
        try:
            yield
        finally:
            if ctx.session.active:
                try:
                    await ctx.session.close()
                except CommandError as exc:
                    logger.warning("Browser did not close cleanly on shutdown: %s", exc)

    app = FastAPI(lifespan=lifespan)

    @app.get("/commands")
    async def list_commands():
        return {"commands": registry.get_schemas()}

    @app.post("/commands/{name}", response_model=CommandResponse)
    async def run_command(name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
        async with app.state.lock:
            result = await registry.dispatch(ctx, name, arguments or {})
        status = STATUS_BY_ERROR_CODE.get(result.error_code, 500)
        return JSONResponse(status_code=status, content=result.to_dict())

    return app


@click.command(name="webpilot-server")
@click.option(
    '--config', '-c',
    default=None,
    help='Path to a settings file (YAML or JSON) with browser/stability/interaction sections.',
    type=click.Path(exists=True, dir_okay=False)
)
@click.option(
    '--host', '-H',
    default="127.0.0.1",
    help='Host address to run the server on.',
    show_default=True
)
@click.option(
    '--port', '-p',
    default=8000,
    help='Port number to run the server on.',
    show_default=True
)
@click.option(
    '--log-config',
    default=None,
    help='Logging config file (YAML or JSON) for logging.config.dictConfig.',
    type=click.Path(exists=True, dir_okay=False)
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging.'
)
def run(config, host, port, log_config, verbose):
    """
    Starts the browser command server using FastAPI.
    """
    command_logger = setup_command_logger(
        log_filename="webpilot-server.log",
        log_config=log_config,
        verbose=verbose,
    )
    settings = load_settings(config)
    app = create_app(build_registry(), build_context(settings))

    try:
        command_logger.info(f"Starting server at http://{host}:{port}")
        uvicorn.run(app, host=host, port=port)
    except Exception as e:
        command_logger.error(f"Server encountered an error: {e}")
        sys.exit(1)
    finally:
        command_logger.info("Server has been stopped.")


if __name__ == "__main__":
    run()
