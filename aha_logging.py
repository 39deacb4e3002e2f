"""Logging set-up for the AHA MCP server."""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "aha_mcp"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """Attach a single handler to the ``aha_mcp`` logger.

    Records go to stderr unless ``log_file`` is given. Stdout is reserved for
    the stdio transport, so nothing here ever writes to it. Calling this
    again is a no-op once a handler is installed.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
