# src/catalog_store/core/logging/formatters.py

"""
Custom logging formatters for the catalog store.

  - JsonFormatter: structured JSON logs for collectors (ELK, Fluentd, CloudWatch, ...).
    Never raises on odd `extra=` values; non-serializable values are stringified.

  - ColorFormatter: compact, ANSI-coloured lines for local consoles.

Both read `record.transaction_id`, which the TransactionIdFilter stamps on every record
("-" when no transaction is active). The builder (dictConfig) picks one of them based on
`settings.LOG_FORMAT`:

    formatters = {
        "standard": {"()": ColorFormatter, "format": "..."},
        "json": {"()": JsonFormatter, "env": settings.ENV, "service": "catalog-store"},
    }

Avoid logging sensitive data: formatters emit whatever is passed in `extra`. The
RedactFilter masks the obvious keys (passwords, DSNs) but is not a substitute for care at
call sites.
"""

import json
import logging
from typing import Any
from logging import LogRecord
from catalog_store.utils.project import get_project_version

PROJECT_VERSION = get_project_version()

# Attributes every LogRecord carries; anything else on the record came from `extra=`.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Emits timestamp, level, logger, message, pathname and lineno, the observability fields
    (service, env, version, transaction_id), exception/stack text when present, and every
    `extra=` key.

    Construction:
      - env: environment name ("development" | "production" | ...); optional.
      - service: logical service name (defaults to "catalog-store").
      - datefmt: passed to logging.Formatter (used by formatTime).
    """

    def __init__(self, *, env: str | None = None, service: str = "catalog-store", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "transaction_id": getattr(record, "transaction_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        extras = {
            k: v
            for k, v in record.__dict__.items()
            if k not in log_record and k not in _STANDARD_RECORD_ATTRS and not k.startswith("_")
        }

        for k, v in extras.items():
            try:
                json.dumps(v)
                log_record[k] = v
            except (TypeError, ValueError):
                # e.g. an ErrorCategory set, a bytes object id
                log_record[k] = str(v)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly coloured formatter:

        TIMESTAMP | LEVEL | LOGGER_NAME | TRANSACTION_ID | MESSAGE [key=value ...]

    Only the level is coloured. Structured extras (dialect, sql_state, ...) are appended as
    key=value pairs so event-style messages like "dialect.detect.resolved" stay readable.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        # reset right after the level so the colour does not spill into the message
        reset = self.COLOR_CODES["RESET"]

        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'transaction_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        extras = [
            f"{k}={v}"
            for k, v in record.__dict__.items()
            if k not in _STANDARD_RECORD_ATTRS and k != "transaction_id" and not k.startswith("_")
        ]
        if extras:
            base = base + " " + " ".join(extras)

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base


__all__ = ["JsonFormatter", "ColorFormatter"]
