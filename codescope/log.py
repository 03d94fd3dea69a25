"""Logging utilities for the analysis engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER_NAME = "codescope"

# Set CODESCOPE_DEBUG=1 to enable debug output and per-stage timing
DEBUG = os.environ.get('CODESCOPE_DEBUG', '').lower() in ('1', 'true', 'yes')


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the codescope hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the codescope logger with stderr output and an optional file sink."""
    level = logging.DEBUG if (verbose or DEBUG) else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[codescope] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["DEBUG", "configure_logging", "get_logger"]
