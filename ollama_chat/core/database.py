"""Async SQLite engine, session factory and transaction helper."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ollama_chat.core.exceptions import PersistenceError
from ollama_chat.core.settings import DatabaseConfig

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
    # Hand transaction control to SQLAlchemy so _on_begin can issue BEGIN.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_begin(conn: Any) -> None:
    # Write lock is held from BEGIN; concurrent writers queue on the busy timeout.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create the async engine, making sure the database directory exists."""
    config.path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine_for_url(config.async_url, echo=config.echo)


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async SQLite engine with foreign keys and immediate transactions."""
    engine = create_async_engine(url, echo=echo)
    event.listen(engine.sync_engine, "connect", _on_connect)
    event.listen(engine.sync_engine, "begin", _on_begin)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose objects stay readable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables."""
    # Registers the mapped tables on Base.metadata.
    from ollama_chat import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Run a block in one transaction, committed on success.

    Any exception rolls the transaction back. Driver errors are re-raised
    as PersistenceError; application errors propagate unchanged.
    """
    try:
        async with session_factory() as session, session.begin():
            yield session
    except SQLAlchemyError as exc:
        logger.error("Database operation failed", error=str(exc))
        raise PersistenceError(f"Database error: {exc.__class__.__name__}") from exc
