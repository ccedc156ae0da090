"""
Logging utilities for Receipt Printer.

- Provide a JobIdFilter that attaches the id of the print job being executed
- Provide a JsonFormatter for structured logs when RECEIPTPRINTER_JSON_LOGS=true
- Provide configure_logging() to initialize root logging with journald or console
"""

from __future__ import annotations

import contextvars
import logging
import os
from typing import Optional

current_job_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("receipt_printer_job_id", default=None)


class JobIdFilter(logging.Filter):
    """
    Attach the current job id to log records.
    Records emitted outside of a worker job get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.job_id = current_job_id.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """
    Minimal JSON formatter that includes timestamp, level, logger, message and job_id.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        from json import dumps

        base = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "job_id": getattr(record, "job_id", "-"),
        }
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return dumps(base, ensure_ascii=False)


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure root logging for the library's host process.

    Behavior:
    - Sets root logger to the given level (INFO by default)
    - Clears any existing handlers to avoid duplicates on repeated calls
    - Chooses JSON or plain formatter based on RECEIPTPRINTER_JSON_LOGS
    - Prefer systemd's JournalHandler, fallback to StreamHandler
    - Adds JobIdFilter so formatters can reference %(job_id)s

    Returns the configured root logger.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []

    json_logs = os.environ.get("RECEIPTPRINTER_JSON_LOGS", "false").lower() in ("1", "true", "yes")
    formatter: logging.Formatter
    if json_logs:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(job_id)s %(name)s: %(message)s")

    # Prefer systemd journal when available
    try:
        from systemd.journal import JournalHandler  # type: ignore

        handler: logging.Handler = JournalHandler()
    except ImportError:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(JobIdFilter())
    root.addHandler(handler)
    return root


__all__ = ["JobIdFilter", "JsonFormatter", "configure_logging", "current_job_id"]
