# backend/log.py
"""Key=value logging for the stack builder."""

import logging
import sys
from typing import Any

from .config import get_settings


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        fields = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            fields.update(record.extra_data)
        return " ".join(f"{k}={v}" for k, v in fields.items())


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger writing key=value lines to stdout.
    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(KeyValueFormatter())
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, get_settings().LOG_LEVEL, logging.INFO))
    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    logger.log(level, msg, extra={"extra_data": kwargs})
