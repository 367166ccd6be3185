"""Integration test fixtures for Pravas.

Provides an async HTTP client over the real FastAPI app with an in-memory
SQLite database, a temporary audio directory, and mock STT/translation
providers.  Audio is fetched back from the app's own ``/audio`` mount.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from pravas.api.app import create_app
from pravas.api.dependencies import get_pipeline
from pravas.core.config import Settings
from pravas.services.audio.fetcher import AudioFetcher
from pravas.services.pipeline import TranscriptionPipeline
from pravas.services.storage import database

BASE_URL = "http://test"
TOKENS = {
    "tok-asha": "user-1:asha@example.com",
    "tok-ravi": "user-2:ravi@example.com",
}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        audio_dir=str(tmp_path / "audio"),
        public_base_url=BASE_URL,
        auth_tokens=TOKENS,
    )


@pytest.fixture
def app(settings):
    """Create a fresh FastAPI application instance."""
    return create_app(settings)


@pytest.fixture
def pipeline(app, mock_stt, mock_translator):
    """Pipeline with mock providers that downloads audio from the app itself."""
    pipeline = TranscriptionPipeline(
        stt=mock_stt,
        translator=mock_translator,
        fetcher=AudioFetcher(transport=ASGITransport(app=app)),
    )
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield pipeline
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app, pipeline, db_engine):
    """Anonymous AsyncClient backed by the in-memory test engine.

    Injects the test engine into the database module so that all routes
    use the same in-memory SQLite with tables already created.
    """
    database._engine = db_engine
    database._session_factory = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as c:
        yield c
    database.reset_engine()


@pytest.fixture
def auth_headers():
    """Bearer headers for the first test user."""
    return {"Authorization": "Bearer tok-asha"}


@pytest.fixture
def other_headers():
    """Bearer headers for a second, unrelated user."""
    return {"Authorization": "Bearer tok-ravi"}

