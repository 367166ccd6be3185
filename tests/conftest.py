"""Shared pytest fixtures for the Pravas test suite.

Provides mock STT/translation providers, an in-memory SQLite database,
and helpers shared by unit and integration tests.
"""

from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from pravas.services.storage import database
from pravas.services.storage.database import Base, get_session
from pravas.services.storage.repository import DiaryRepository

# ---------------------------------------------------------------------------
# Provider Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default Marathi transcript.
    """
    from pravas.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.name = "openai"
    stt.transcribe.return_value = "आज आम्ही पुण्याला पोहोचलो."
    return stt


@pytest.fixture
def mock_translator():
    """Create a mock translator for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseTranslator interface with a
        default English translation.
    """
    from pravas.services.translation.base import BaseTranslator

    translator = AsyncMock(spec=BaseTranslator)
    translator.name = "openai"
    translator.translate.return_value = "Today we reached Pune."
    return translator


@pytest.fixture
def mock_fetcher():
    """Create a mock audio fetcher returning a few bytes of audio."""
    from pravas.services.audio.fetcher import AudioFetcher

    fetcher = AsyncMock(spec=AudioFetcher)
    fetcher.fetch.return_value = b"OggS\x00fake-audio"
    return fetcher


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created.

    ``StaticPool`` keeps a single connection so every session sees the
    same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """A session on the in-memory engine, rolled back after the test."""
    from sqlalchemy.ext.asyncio import AsyncSession

    async with AsyncSession(db_engine, expire_on_commit=False) as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """DiaryRepository bound to the test session."""
    return DiaryRepository(db_session)


@pytest.fixture
async def use_db(db_engine):
    """Route ``get_session()`` to the in-memory engine for the test."""
    database._engine = db_engine
    database._session_factory = None
    yield db_engine
    database.reset_engine()


@pytest.fixture
def seed_entry(use_db):
    """Factory that creates a trip and one entry; returns the entry id."""

    async def _seed(
        status: str = "pending",
        owner: str = "user-1",
        audio_url: str = "http://storage.test/audio/user-1/1.ogg",
        started_at: datetime | None = None,
    ) -> str:
        async with get_session() as session:
            repo = DiaryRepository(session)
            trip = await repo.create_trip(title="Konkan coast", created_by=owner)
            entry = await repo.create_entry(
                trip_id=trip.id,
                audio_url=audio_url,
                audio_mime="audio/ogg",
                entry_date=date(2026, 3, 14),
                created_by=owner,
            )
            entry.transcription_status = status
            entry.transcription_started_at = started_at
            await session.flush()
            return entry.id

    return _seed


@pytest.fixture
def load_entry(use_db):
    """Factory that reads an entry back in a fresh session."""

    async def _load(entry_id: str):
        async with get_session() as session:
            return await DiaryRepository(session).get_entry(entry_id)

    return _load
