"""Durable store handle: engine, connection pool and unit-of-work sessions."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.db.models import Base
from app.utils.errors import AppError, StoreError, StoreUnavailableError

logger = logging.getLogger(__name__)


def _engine_options(settings: Settings) -> dict[str, Any]:
    url = make_url(settings.database_url)
    timeout_seconds = max(0.1, settings.database_pool_timeout_seconds)

    if url.get_backend_name() == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database.
            options["poolclass"] = StaticPool
        else:
            options["connect_args"]["timeout"] = timeout_seconds
        return options

    pool_size = max(1, settings.database_pool_size)
    options = {
        "pool_size": pool_size,
        "max_overflow": 0,
        "pool_timeout": timeout_seconds,
        "pool_pre_ping": True,
    }
    if url.get_backend_name() == "postgresql":
        statement_timeout_ms = max(0, settings.database_statement_timeout_ms)
        options["connect_args"] = {
            "connect_timeout": max(1, int(timeout_seconds)),
            "options": f"-c statement_timeout={statement_timeout_ms}",
        }
    return options


class Database:
    """Explicitly constructed store handle shared by the store components.

    Open one per process at startup with :meth:`from_settings` and release
    the pool with :meth:`close` at shutdown.
    """

    def __init__(self, engine: Engine, slow_query_log_threshold_ms: int = 0) -> None:
        self.engine = engine
        self.slow_query_log_threshold_ms = slow_query_log_threshold_ms
        self._sessionmaker = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        """Build a pooled engine from application settings."""
        engine = create_engine(settings.database_url, **_engine_options(settings))
        return cls(engine, slow_query_log_threshold_ms=settings.slow_query_log_threshold_ms)

    def create_schema(self) -> None:
        """Create missing tables and constraints."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def close(self) -> None:
        """Dispose of every pooled connection."""
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Run one unit of work: commit on success, roll back on any error.

        Driver failures surface as :class:`StoreError`; failing to check a
        connection out of the pool in time surfaces as
        :class:`StoreUnavailableError`.
        """
        started = time.perf_counter()
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except AppError:
            session.rollback()
            raise
        except PoolTimeoutError as exc:
            session.rollback()
            logger.error("Store connection pool exhausted: %s", exc)
            raise StoreUnavailableError(str(exc)) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Store request failed: %s", exc)
            raise StoreError(str(exc)) from exc
        finally:
            session.close()
            elapsed_ms = (time.perf_counter() - started) * 1000
            threshold_ms = self.slow_query_log_threshold_ms
            if threshold_ms > 0 and elapsed_ms >= threshold_ms:
                logger.warning("Slow store session %.1fms", elapsed_ms)
