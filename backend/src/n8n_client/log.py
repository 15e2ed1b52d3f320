"""
Logging setup for processes embedding the client.

Records go to stderr so stdout stays free for a stdio transport.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "LOG_LEVEL"
MCP_MODE_ENV = "MCP_MODE"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(level: Optional[str] = None, stdio_mode: Optional[bool] = None) -> int:
    """Pick the effective level from arguments, falling back to the environment."""
    if stdio_mode is None:
        stdio_mode = os.environ.get(MCP_MODE_ENV) == "stdio"
    if stdio_mode:
        # only errors in stdio mode
        return logging.ERROR

    name = (level or os.environ.get(LOG_LEVEL_ENV) or "info").lower()
    return _LEVELS.get(name, logging.INFO)


def configure_logging(level: Optional[str] = None, stdio_mode: Optional[bool] = None) -> logging.Logger:
    """Configure root logging and return the package logger."""
    logging.basicConfig(
        level=resolve_level(level, stdio_mode),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    return logging.getLogger(__package__)
