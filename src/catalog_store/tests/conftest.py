"""
Core pytest configuration for the entire test suite.

Shared fixtures only:
  - session-wide logging setup (the same dictConfig the library uses)
  - a file-backed SQLite engine and connection (real driver errors, real pool)
  - autouse reset of the process-wide dialect detection cache

Engines other than SQLite are exercised through duck-typed fakes inside the test modules.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import sys
import logging
from pathlib import Path
from typing import Generator

# -------------------------------
# Early logging tuning
# -------------------------------
# Keep this block above the project imports so collection stays quiet.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# Ensure 'src' on sys.path so `import catalog_store...` works without installing
SRC = Path(__file__).resolve().parents[2]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from pytest import FixtureRequest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from catalog_store.config.settings import Settings
from catalog_store.core.logging.builder import setup_logging
from catalog_store.dialects.detector import reset_dialect_cache

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    # _env_file=None: a developer's .env must not change test behaviour
    return Settings(
        _env_file=None,
        ENV="testing",
        DATABASE_URL="sqlite://",
        LOG_FORMAT="text",
        LOG_LEVEL="INFO",
        LOG_TO_STDOUT=True,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest, test_settings: Settings):
    """
    Install the library's logging configuration once for the session.

    dictConfig replaces the root handlers, so pytest's capture handler is re-attached
    when available (caplog.records relies on it).
    """
    setup_logging(test_settings)

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None) if caplog_plugin else None
    if handler is not None:
        logging.getLogger().addHandler(handler)

    yield


@pytest.fixture(autouse=True)
def fresh_dialect_cache():
    """Every test starts (and ends) with no detected dialect."""
    reset_dialect_cache()
    yield
    reset_dialect_cache()


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------

@pytest.fixture()
def sqlite_engine(tmp_path) -> Generator[Engine, None, None]:
    """
    File-backed SQLite engine. A file (not :memory:) gives a QueuePool, so tests can assert
    that connections are returned (engine.pool.checkedout() == 0).
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    yield engine
    engine.dispose()


@pytest.fixture()
def sqlite_conn(sqlite_engine: Engine) -> Generator[Connection, None, None]:
    with sqlite_engine.connect() as conn:
        yield conn
