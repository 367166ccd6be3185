"""
Database plumbing for the diary: one async engine per process, one
session per unit of work.

Routes and the pipeline open work with::

    async with get_session() as session:
        repo = DiaryRepository(session)
        ...

The block commits when it exits cleanly and rolls back otherwise, so a
pipeline step that raises never leaves a half-written entry behind.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from pravas.core.config import get_settings


class Base(DeclarativeBase):
    """Shared metadata for the ``trips`` and ``entries`` tables."""


# Process-wide state; tests swap in their own engine and call ``reset_engine``.
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(url: str | None = None) -> AsyncEngine:
    """Build the engine for *url* (default ``Settings.database_url``) once.

    File-backed SQLite gets its parent directory created and foreign keys
    switched on, so an entry can never point at a missing trip.
    """
    global _engine
    if _engine is not None:
        return _engine

    db_url = make_url(url or get_settings().database_url)
    is_sqlite = db_url.get_backend_name() == "sqlite"
    if is_sqlite and db_url.database and db_url.database != ":memory:":
        Path(db_url.database).parent.mkdir(parents=True, exist_ok=True)

    _engine = create_async_engine(db_url, echo=False)
    if is_sqlite:
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return _engine


def get_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to *engine* or the process engine.

    Objects stay loaded after commit (``expire_on_commit=False``) because
    routes build their responses after the session block has closed.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(engine or get_engine(), expire_on_commit=False)
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """One transaction: commit on clean exit, roll back and re-raise otherwise."""
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create any missing tables (startup hook)."""
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose connections at shutdown and forget the engine."""
    if _engine is not None:
        await _engine.dispose()
    reset_engine()


def reset_engine() -> None:
    """Forget the engine and factory without disposing them."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None
