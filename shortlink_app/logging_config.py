"""Logging configuration for the shortlink service."""

import json
import logging
import sys
from typing import Optional

LOGGER_NAME = "shortlink"


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Fields are serialized with json.dumps, so quotes, backslashes and
    newlines in a message (a submitted URL, a traceback) stay valid JSON.
    """

    def format(self, record):
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Setup logging for the ``shortlink`` logger namespace.

    Every module logs through ``get_logger(__name__)`` style children of this
    logger, so configuring it once at startup covers the whole app.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        json_format: Whether to emit one JSON object per line

    Returns:
        Configured root logger of the namespace
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Calling twice (tests, reload) must not duplicate output
    logger.handlers.clear()

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger inside the ``shortlink`` namespace.

    Module names from the ``shortlink_app`` package are mapped onto the
    namespace, e.g. ``shortlink_app.services.allocator`` becomes
    ``shortlink.services.allocator``.
    """
    if name.startswith("shortlink_app"):
        name = LOGGER_NAME + name[len("shortlink_app"):]
    elif not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
