"""
Shared helpers for the webpilot console commands: logging, settings and session wiring.
"""

import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from webpilot.commands import CommandContext
from webpilot.common.logger import setup_logging
from webpilot.config import Settings
from webpilot.session import BrowserSession
from webpilot.util.file_utils import from_json_or_yaml


def get_log_dir():
    """
    Logs are stored in the user's home directory under '.webpilot/logs/'.
    """
    log_dir = Path.home() / '.webpilot' / 'logs'
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def setup_command_logger(log_filename, log_config=None, verbose=False, log_to_file=True):
    """
    Configures logging for a console command and returns its logger.
    """
    log_file_path = get_log_dir() / log_filename if log_to_file else None
    setup_logging(
        config_file_path=log_config,
        log_file_path=log_file_path,
        verbose=verbose,
    )
    return logging.getLogger(f"webpilot.command.{Path(log_filename).stem}")


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reads `.env` (without overriding the process environment), then overlays
    the optional YAML/JSON config file on top of the environment settings.
    """
    load_dotenv(override=False)
    settings = Settings.from_env()
    if config_path is None:
        return settings
    data = from_json_or_yaml(config_path) or {}
    if not isinstance(data, dict):
        raise click.BadParameter(f"{config_path} must contain a mapping", param_hint="--config")
    return Settings.from_dict(data, base=settings)


def build_context(settings: Settings) -> CommandContext:
    """
    Creates a fresh browser session on the Playwright driver.
    """
    from webpilot.driver.playwright_driver import PlaywrightDriver

    session = BrowserSession(PlaywrightDriver(settings.browser))
    return CommandContext(session=session, settings=settings)
