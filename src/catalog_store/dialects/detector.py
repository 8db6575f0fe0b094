"""
Dialect detection.

The first caller probes the live connection and publishes the resulting descriptor in a
process-wide slot; every later (or concurrent) caller gets the same instance. The slot holds
a `concurrent.futures.Future`, so both threads (`resolve`) and asyncio tasks on any event
loop (`resolve_async`) can wait on a probe started by someone else.

Usage:
    from catalog_store.dialects.detector import resolve_dialect

    dialect = resolve_dialect(engine)
    dialect.wrap_insert("INSERT INTO objs (...) VALUES (...)")
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from catalog_store.exceptions.base import DialectDetectionError, UnsupportedDatabaseError

from .descriptor import DialectDescriptor
from .specifics import COCKROACHDB, MYSQL, POSTGRESQL, SQLITE

logger = logging.getLogger(__name__)

# CockroachDB speaks the PostgreSQL wire protocol and reports itself as "postgresql";
# only it ships this schema.
COCKROACH_INTERNAL_SCHEMA = "crdb_internal"

# Dialect names reported by SQLAlchemy that map straight to a descriptor without probing.
_BY_PRODUCT_NAME: dict[str, DialectDescriptor] = {
    "sqlite": SQLITE,
    "mysql": MYSQL,
    "mariadb": MYSQL,
    # sqlalchemy-cockroachdb registers its own dialect name
    "cockroachdb": COCKROACHDB,
}


def _probe(conn: Connection) -> DialectDescriptor:
    """Pick the descriptor for an open (sync) connection. Runs inside `run_sync` for async sources."""
    product = (conn.dialect.name or "").lower()
    logger.debug("dialect.detect.product", extra={"product": product})

    if product in _BY_PRODUCT_NAME:
        return _BY_PRODUCT_NAME[product]

    if product == "postgresql":
        # Inspection autobegins a transaction on an idle connection; end only the one we began.
        began = not conn.in_transaction()
        try:
            is_cockroach = inspect(conn).has_schema(COCKROACH_INTERNAL_SCHEMA)
        finally:
            if began:
                conn.rollback()
        return COCKROACHDB if is_cockroach else POSTGRESQL

    raise UnsupportedDatabaseError(product)


def _probe_source(source: Engine | Connection) -> DialectDescriptor:
    if isinstance(source, Engine):
        with source.connect() as conn:
            return _probe(conn)
    return _probe(source)


async def _probe_source_async(source: AsyncEngine | AsyncConnection) -> DialectDescriptor:
    if isinstance(source, AsyncEngine):
        async with source.connect() as conn:
            return await conn.run_sync(_probe)
    return await source.run_sync(_probe)


def _as_detection_error(exc: BaseException) -> BaseException:
    if isinstance(exc, (UnsupportedDatabaseError, DialectDetectionError)):
        return exc
    wrapped = DialectDetectionError(f"Dialect detection failed: {type(exc).__name__}: {exc}")
    wrapped.__cause__ = exc
    return wrapped


class DialectDetector:
    """
    Once-only descriptor resolution.

    The lock is held only to compare-and-publish the slot, never while probing, so the
    probe itself runs outside any lock and at most once per successful attempt. A failed
    attempt delivers its error to every waiter of that attempt and then clears the slot.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._slot: Future | None = None

    def _claim(self) -> tuple[Future, bool]:
        with self._lock:
            if self._slot is None:
                self._slot = Future()
                return self._slot, True
            return self._slot, False

    def _publish(self, future: Future, dialect: DialectDescriptor) -> None:
        future.set_result(dialect)
        logger.info("dialect.detect.resolved", extra={"dialect": dialect.name})

    def _fail(self, future: Future, exc: BaseException) -> BaseException:
        error = _as_detection_error(exc)
        future.set_exception(error)
        with self._lock:
            if self._slot is future:
                self._slot = None
        logger.error(
            "dialect.detect.failed",
            extra={"error_type": type(exc).__name__, "detail": str(exc)},
        )
        return error

    @property
    def resolved(self) -> DialectDescriptor | None:
        """The cached descriptor, or None when detection has not completed successfully."""
        slot = self._slot
        if slot is not None and slot.done() and slot.exception() is None:
            return slot.result()
        return None

    def resolve(self, source: Engine | Connection) -> DialectDescriptor:
        """
        Return the process-wide descriptor, probing `source` if nobody has yet.

        Raises:
            UnsupportedDatabaseError: the engine is not one of the supported families
            DialectDetectionError: the probe itself failed, or an earlier concurrent attempt was
                interrupted (KeyboardInterrupt, SystemExit) while this caller waited on it

        An open PostgreSQL connection passed in without an active transaction is left without
        one; a transaction already in progress is left untouched.
        """
        future, owner = self._claim()
        if owner:
            try:
                dialect = _probe_source(source)
            except Exception as exc:
                raise self._fail(future, exc)
            except BaseException:
                self._fail(future, DialectDetectionError("Dialect detection was interrupted"))
                raise
            self._publish(future, dialect)
        return future.result()

    async def resolve_async(self, source: AsyncEngine | AsyncConnection) -> DialectDescriptor:
        """Async counterpart of `resolve`; shares the same slot."""
        future, owner = self._claim()
        if owner:
            try:
                dialect = await _probe_source_async(source)
            except asyncio.CancelledError:
                # waiters must not hang on an attempt nobody will finish
                self._fail(future, DialectDetectionError("Dialect detection was cancelled"))
                raise
            except Exception as exc:
                raise self._fail(future, exc)
            except BaseException:
                self._fail(future, DialectDetectionError("Dialect detection was interrupted"))
                raise
            self._publish(future, dialect)
        return await asyncio.wrap_future(future)

    def reset(self) -> None:
        with self._lock:
            self._slot = None


_DETECTOR = DialectDetector()


def resolve_dialect(source: Engine | Connection) -> DialectDescriptor:
    return _DETECTOR.resolve(source)


async def resolve_dialect_async(source: AsyncEngine | AsyncConnection) -> DialectDescriptor:
    return await _DETECTOR.resolve_async(source)


def reset_dialect_cache() -> None:
    """
    Forget the detected descriptor. Test hook only: production code resolves once per
    process and never switches engines.
    """
    _DETECTOR.reset()


__all__ = [
    "COCKROACH_INTERNAL_SCHEMA",
    "DialectDetector",
    "resolve_dialect",
    "resolve_dialect_async",
    "reset_dialect_cache",
]
