# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, RowMapping, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from marketplace.shared.config import DatabaseConfig
from marketplace.shared.errors import StorageUnavailableError
from marketplace.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _engine_options(url: URL, config: DatabaseConfig) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
    connect_args: dict[str, object] = {}

    if url.get_backend_name() == "sqlite":
        connect_args = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        if url.database in (None, "", ":memory:"):
            options["connect_args"] = connect_args
            return options
    else:
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
        if url.get_backend_name() == "postgresql":
            connect_args["connect_timeout"] = max(1, int(config.pool_timeout))
            if config.statement_timeout_ms:
                connect_args["options"] = f"-c statement_timeout={config.statement_timeout_ms}"
            if config.ssl:
                connect_args["sslmode"] = "require"

    options["connect_args"] = connect_args
    return options


class Database:
    """Connection pool to the relational store plus scoped session handling."""

    def __init__(self, url: URL | str, config: DatabaseConfig | None = None) -> None:
        config = config or DatabaseConfig()  # type: ignore[call-arg]
        self.engine: Engine = create_engine(url, **_engine_options(_as_url(url), config))
        if self.engine.url.get_backend_name() == "sqlite":
            event.listen(self.engine, "connect", _register_sqlite_functions)
        self._sessions = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> Database:
        return cls(config.resolved_url(), config)

    @property
    def backend(self) -> str:
        return self.engine.url.get_backend_name()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._sessions()
        logger.debug("db.session: opened scoped session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed scoped session")
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(f"db.session: storage failure, rolled back: {type(exc).__name__}")
            raise
        except Exception:
            session.rollback()
            logger.debug("db.session: rolled back scoped session")
            raise
        finally:
            session.close()
            logger.debug("db.session: closed scoped session")

    def execute(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> Sequence[RowMapping]:
        """Run a parameterized statement; values are always bound, never interpolated."""

        try:
            with self.session_scope() as session:
                result = session.execute(text(sql), dict(params or {}))
                return list(result.mappings()) if result.returns_rows else []
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def ping(self) -> bool:
        self.execute("SELECT 1")
        return True

    def create_schema(self) -> None:
        # Model registration happens on import.
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def dispose(self) -> None:
        self.engine.dispose()
        logger.debug("db.engine: pool disposed")


def _unicode_lower(value: object) -> object:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, _record) -> None:
    """Swap SQLite's ASCII-only lower() for Python's Unicode-aware str.lower()."""

    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def _as_url(url: URL | str) -> URL:
    return make_url(url) if isinstance(url, str) else url
