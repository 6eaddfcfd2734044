"""Logging handler that mirrors application log records into the ``logs`` table."""

from __future__ import annotations

import logging

from sqlalchemy import insert
from sqlalchemy.engine import Engine

from .database import LogEntry


def _is_application_record(record: logging.LogRecord) -> bool:
    # SQLAlchemy's own loggers would recurse through this handler's INSERTs
    if record.name.startswith("sqlalchemy"):
        return False
    return not getattr(record, "skip_database_log", False)


class DatabaseLogHandler(logging.Handler):
    """Persist each record as a row of ``logs`` (level, message, context JSON)."""

    def __init__(self, engine: Engine, level: int | str = logging.INFO):
        super().__init__(level)
        self.engine = engine
        self._emitting = False
        self.addFilter(_is_application_record)

    def emit(self, record: logging.LogRecord) -> None:
        if self._emitting:
            return
        self._emitting = True
        try:
            context = {
                "logger": record.name,
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            }
            if record.exc_info:
                context["exception"] = logging.Formatter().formatException(record.exc_info)

            with self.engine.begin() as conn:
                conn.execute(
                    insert(LogEntry),
                    {
                        "level": record.levelname,
                        "message": record.getMessage(),
                        "context": context,
                    },
                )
        except Exception:
            self.handleError(record)
        finally:
            self._emitting = False
