"""Structured logging configuration for Isolator.

Solver modules attach the variable being isolated and the isolation step to
their records through ``extra``; the formatter renders those as trailing
``key=value`` pairs so a trace of one solve can be grepped by variable.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from . import config

ROOT_LOGGER = "isolator"

# Record attributes rendered after the message when present
CONTEXT_FIELDS = ("variable", "step")


def solve_context(variable_id: int, step: Optional[int] = None) -> dict:
    """Build the ``extra`` mapping for a record about one variable."""
    context = {"variable": f"{config.VARIABLE_PREFIX}{variable_id}"}
    if step is not None:
        context["step"] = step
    return context


class StructuredFormatter(logging.Formatter):
    """Formatter producing ``timestamp [LEVEL] logger: message key=value ...`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        context = [
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if hasattr(record, name)
        ]
        if context:
            message = f"{message} " + " ".join(context)
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    level: Optional[str] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """Configure the ``isolator`` logger hierarchy.

    Args:
        level: Logging level name; defaults to ``ISOLATOR_LOG_LEVEL``
        log_file: Optional file path to write logs to in addition to stderr

    Returns:
        The configured root logger of the package
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level_name = (level or config.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    # Reconfiguring replaces the previous handlers
    logger.handlers.clear()

    formatter = StructuredFormatter()
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the child logger ``isolator.<name>`` for a module."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
