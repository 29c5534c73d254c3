# logger.py
import logging
import logging.config

from webpilot.util.file_utils import from_json_or_yaml

DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
}


def setup_logging(
    config_file_path=None,
    log_file_path=None,
    verbose=False,
):
    """
    Loads logging config from 'config_file_path' (YAML or JSON) and sets up logging.
    Falls back to a console-only config when no file is given.
    Optionally add a file handler at 'log_file_path', and set root logger to DEBUG if 'verbose'.
    """
    if config_file_path:
        config = from_json_or_yaml(config_file_path)
    else:
        config = {
            key: (dict(value) if isinstance(value, dict) else value)
            for key, value in DEFAULT_LOGGING_CONFIG.items()
        }

    # If user passed a custom file path for logs, override or add the file handler
    if log_file_path:
        handlers = config.setdefault("handlers", {})
        if "file_handler" in handlers:
            handlers["file_handler"]["filename"] = str(log_file_path)
        else:
            file_handler = {"class": "logging.FileHandler", "filename": str(log_file_path)}
            if "standard" in config.get("formatters", {}):
                file_handler["formatter"] = "standard"
            handlers["file_handler"] = file_handler
            root = config.setdefault("root", {"level": "INFO", "handlers": []})
            root["handlers"] = list(root.get("handlers", [])) + ["file_handler"]

    logging.config.dictConfig(config)

    # If --verbose was passed, raise the global level to DEBUG
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    return logging.getLogger(__name__)
