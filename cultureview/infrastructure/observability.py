"""Structured Logging — pipeline-aware formatters and one-shot logging setup.

Invariants:
    - Every record carries timestamp, level, logger name and message
    - Pipeline context (entity, specificulture, stage, error_code, is_root, operation)
      appears only when the emitting call passed it via extra=
    - setup_logging() is idempotent: calling it again replaces its own handler, never
      stacks a second one
    - Timestamps come from the record (emit time), not from formatting time

Design Decisions:
    - Formatters on stdlib logging: the library logs through logging.getLogger(__name__)
      and leaves handler choice to the host application
    - Handlers attached to the "cultureview" logger, not root: host logging untouched
"""

import json
import logging
from datetime import datetime, timezone

from cultureview.config import Settings

CONTEXT_KEYS = (
    "entity", "specificulture", "stage", "error_code", "is_root", "operation",
)

_HANDLER_NAME = "cultureview-handler"


def record_context(record: logging.LogRecord) -> dict:
    """Pipeline context attached to `record`, in CONTEXT_KEYS order."""
    context = {}
    for key in CONTEXT_KEYS:
        val = record.__dict__.get(key)
        if val is not None:
            context[key] = val
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable line, pipeline context appended as key=value pairs."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)s %(name)s: %(message)s%(context_suffix)s",
        )

    def format(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        record.context_suffix = (
            " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
            if context else ""
        )
        return super().format(record)


def setup_logging(
    level: str = "INFO", fmt: str = "json", logger_name: str = "cultureview",
) -> logging.Logger:
    """Install (or replace) the library handler on `logger_name`."""
    logger = logging.getLogger(logger_name)
    for existing in [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def setup_logging_from_settings(settings: Settings) -> logging.Logger:
    return setup_logging(settings.log_level, settings.log_format)
