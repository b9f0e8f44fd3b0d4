"""
Async engine, session factory and declarative base.

The connection string is never logged and SQL echo stays off in production.
"""

import logging
import time
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from finishing_touch.config import settings

logger = logging.getLogger(__name__)

MAX_LOGGED_STATEMENT = 200


class Base(DeclarativeBase):
    pass


def _track_slow_queries(sync_engine: Engine, threshold_ms: int) -> None:
    @event.listens_for(sync_engine, "before_cursor_execute")
    def _start(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_started", []).append(time.monotonic())

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _finish(conn, cursor, statement, parameters, context, executemany):
        started = conn.info.get("query_started")
        if not started:
            return
        elapsed_ms = (time.monotonic() - started.pop()) * 1000
        if elapsed_ms >= threshold_ms:
            # Parameters can hold customer data; only the statement text is logged
            logger.warning(
                "Slow query (%.0fms): %s", elapsed_ms, statement[:MAX_LOGGED_STATEMENT]
            )


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine; SQLite (tests, local runs) keeps its default pool."""
    options = {"echo": settings.sqlalchemy_echo}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=3600,
            pool_pre_ping=True,
        )

    async_engine = create_async_engine(database_url, **options)
    _track_slow_queries(async_engine.sync_engine, settings.SLOW_QUERY_MS)
    return async_engine


engine = build_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Request-scoped session.

    Services commit their own work; anything left uncommitted when the
    request fails is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create any missing tables. Alembic owns schema changes after that."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
