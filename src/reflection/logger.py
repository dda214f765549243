from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

LOGGER_NAME = "reflection"

_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
        "message",
    }
)


@dataclass(frozen=True)
class LoggingConfig:
    level: int = logging.WARNING
    file: str | None = None


class KeyValueFormatter(logging.Formatter):
    """Single-line formatter that appends structured ``extra=`` fields."""

    def __init__(self) -> None:
        super().__init__("[%(levelname)s] %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = [
            f"{key}={value!r}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        ]
        if extras:
            line = f"{line} | {' '.join(extras)}"
        return line


def get_logger(name: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name or LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    return logger


def configure_logging(config: LoggingConfig | None = None) -> None:
    config = config or LoggingConfig()
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(config.level)
    logger.propagate = False

    # File handler when a path is given, otherwise stderr
    if config.file:
        handler: logging.Handler = logging.FileHandler(config.file, mode="a")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(KeyValueFormatter())
    logger.addHandler(handler)
