"""
HTTP entry point for the diary service.

Everything is wired inside ``create_app()`` so tests can pass their own
``Settings``; the module-level ``app`` is what ``pravas serve`` hands to uvicorn.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from pravas.api.middleware.auth import AuthMiddleware
from pravas.api.middleware.error_handler import register_error_handlers
from pravas.api.routes import audio, entries, session, trips
from pravas.core.config import Settings, get_settings
from pravas.core.models import HealthResponse
from pravas.services.auth import StaticTokenIdentityProvider
from pravas.services.pipeline import build_pipeline
from pravas.services.storage.blobs import LocalBlobStore
from pravas.services.storage.database import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables and the shared pipeline on startup; dispose the engine on exit."""
    await init_db()
    app.state.pipeline = build_pipeline(app.state.settings)
    logger.info("Transcription pipeline ready (%s)", app.state.pipeline.provider_name)
    yield
    await close_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Assemble the diary API around *settings* (``get_settings()`` when omitted)."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Pravas",
        description="Travel diary with voice memos, transcription, and translation.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # -- Object storage --
    audio_dir = Path(settings.audio_dir)
    audio_dir.mkdir(parents=True, exist_ok=True)
    app.state.blob_store = LocalBlobStore(
        root=audio_dir,
        base_url=f"{settings.public_base_url.rstrip('/')}/audio",
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Auth --
    app.add_middleware(
        AuthMiddleware,
        provider=StaticTokenIdentityProvider(settings.auth_tokens),
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Liveness, outside the versioned prefix --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(session.router, prefix="/api/v1")
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(entries.router, prefix="/api/v1")
    app.include_router(audio.router, prefix="/api/v1")

    # -- Public audio reads --
    app.mount("/audio", StaticFiles(directory=audio_dir), name="audio")

    return app


app = create_app()
