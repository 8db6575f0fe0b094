# src/catalog_store/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

  - make_dict_config(settings): pure, returns the dictConfig mapping
  - setup_logging(settings): creates LOG_DIR if needed and applies the mapping

Settings used: LOG_TO_STDOUT, LOG_DIR, LOG_FORMAT, LOG_LEVEL, LOG_MAX_BYTES,
LOG_BACKUP_COUNT, ENABLE_SQL_LOGGING, ENV.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config

from catalog_store.utils.project import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import TransactionIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)
from catalog_store.config.settings import Settings

STANDARD_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(transaction_id)s | %(message)s"


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping:
      - formatters: "standard" (ColorFormatter in text mode, else logging.Formatter) and "json"
      - filters: "transaction_id", "redact"
      - handlers: console + (file, error_file) when writing to LOG_DIR, else error_console
      - loggers: root, catalog_store, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": STANDARD_FORMAT,
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default="catalog-store"),
        },
    }

    filters = {
        "transaction_id": {"()": TransactionIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # Library events (dialect.detect.*, classifier.*, mapper.*) go through the
            # root handlers; the level is set here so LOG_LEVEL=DEBUG shows classifications.
            "catalog_store": {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }
    return config


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging from settings.

      1. Ensure LOG_DIR exists when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. Add a TransactionIdFilter on the root logger as a safety net for handlers added
         later by third-party code (their format strings may reference transaction_id).
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(TransactionIdFilter())


__all__ = ["make_dict_config", "setup_logging", "STANDARD_FORMAT"]
