"""
Pydantic v2 request / response models used across the API layer.
"""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class Identity(BaseModel):
    """The signed-in user an operation runs on behalf of."""

    user_id: str
    email: str = ""


# ---------------------------------------------------------------------------
# Trip
# ---------------------------------------------------------------------------


class TripCreate(BaseModel):
    """POST /trips request body."""

    title: str = Field(max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    cover_photo_url: str | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value


class TripResponse(BaseModel):
    """Standard trip representation returned by the API."""

    id: str
    title: str
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    cover_photo_url: str | None = None
    created_by: str
    created_at: datetime


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


class TranscriptionStatus(StrEnum):
    """Lifecycle of an entry's transcription: pending -> processing -> done | failed."""

    pending = "pending"
    processing = "processing"
    done = "done"
    failed = "failed"


class EntryCreate(BaseModel):
    """POST /trips/{trip_id}/entries request body."""

    audio_url: str
    audio_mime: str
    entry_date: date


class EntryResponse(BaseModel):
    """Standard entry representation returned by the API."""

    id: str
    trip_id: str
    audio_url: str
    audio_mime: str
    entry_date: date
    created_at: datetime
    created_by: str
    transcription_status: TranscriptionStatus
    transcript_mr: str | None = None
    transcript_en: str | None = None
    transcription_provider: str | None = None
    transcription_error: str | None = None


class TranscribeResponse(BaseModel):
    """POST /entries/{entry_id}/transcribe success response."""

    status: TranscriptionStatus = TranscriptionStatus.done


# ---------------------------------------------------------------------------
# Object storage
# ---------------------------------------------------------------------------


class UploadResponse(BaseModel):
    """POST /audio response: where the blob landed and how to reach it."""

    key: str
    public_url: str
    content_type: str
    size: int


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: str
