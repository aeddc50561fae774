"""Structured logging for the Use Case Document Engine.

Every line is rendered as key=value pairs. Fields passed through ``extra=`` or
``log_with_context`` are appended after the message, with ``use_case_id`` first
so the lines of one record line up when grepping.
"""

import logging
import sys
from typing import Any

from pydantic import ValidationError

# Attributes every LogRecord carries; anything else came from extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName", "extra_data"}


def _render(value: Any) -> str:
    text = str(value)
    if not text or any(c.isspace() for c in text):
        return '"' + text.replace('"', '\\"').replace("\n", "\\n") + '"'
    return text


class StructuredFormatter(logging.Formatter):
    """Key=value structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        if hasattr(record, "use_case_id"):
            fields["use_case_id"] = record.use_case_id

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and key not in fields:
                fields[key] = value
        fields.update(getattr(record, "extra_data", {}))

        if record.exc_info:
            fields["exc"] = self.formatException(record.exc_info)

        return " ".join(f"{key}={_render(value)}" for key, value in fields.items())


def _level_for_environment() -> int:
    from app.core.config import get_settings

    try:
        env = get_settings().USECASE_ENGINE_ENV
    except ValidationError:
        return logging.INFO
    return logging.DEBUG if env == "dev" else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger writing structured lines to stdout; DEBUG in dev, INFO otherwise
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(_level_for_environment())

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **fields: Any) -> None:
    """
    Log with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **fields: Context fields (e.g. use_case_id, provider, task_kind)
    """
    extra: dict[str, Any] = {}
    if "use_case_id" in fields:
        extra["use_case_id"] = fields.pop("use_case_id")
    extra["extra_data"] = fields
    logger.log(level, msg, extra=extra)
