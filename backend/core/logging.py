"""core/logging.py — Structured JSON logging with rotating file output.

Call configure_logging() once at application startup (lifespan in main.py).
After that, use standard logging.getLogger(__name__) throughout the app.

Every record is stamped with the correlation id of the request being served
(``request_id``), taken from a context variable that RequestIDMiddleware sets.
Records emitted outside a request carry ``"-"``.

Output:
  - Console: JSON lines to stdout
  - File:    JSON lines, rotated at 10 MB, 5 backups kept
              Written to logs/app.log relative to the project root.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter


_LOG_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "logs")
_LOG_FILE = os.path.join(_LOG_DIR, "app.log")
_MAX_BYTES = 10 * 1024 * 1024   # 10 MB per file
_BACKUP_COUNT = 5                # keep 5 rotated files

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Copy the current correlation id onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def configure_logging(log_level: str = "DEBUG", log_to_file: bool = True) -> None:
    """Configure the root logger with JSON console + rotating file handlers.

    Args:
        log_level:   One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
                     Passed from settings.log_level at startup.
        log_to_file: Disable to keep logs on stdout only (containers, tests).
    """
    level = getattr(logging, log_level.upper(), logging.DEBUG)
    fmt = "%(asctime)s %(name)s %(levelname)s %(request_id)s %(message)s"
    formatter = JsonFormatter(fmt)
    request_filter = RequestIdFilter()

    handlers: list[logging.Handler] = []

    # ── Console handler ────────────────────────────────────────────────────────
    console_handler = logging.StreamHandler(sys.stdout)
    handlers.append(console_handler)

    # ── Rotating file handler ──────────────────────────────────────────────────
    if log_to_file:
        os.makedirs(_LOG_DIR, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                _LOG_FILE,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    # ── Root logger ────────────────────────────────────────────────────────────
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        handler.addFilter(request_filter)
        root.addHandler(handler)

    # httpx logs every request at INFO; the client already does that with timings
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={
            "log_level": log_level,
            "log_file": os.path.abspath(_LOG_FILE) if log_to_file else None,
        },
    )
