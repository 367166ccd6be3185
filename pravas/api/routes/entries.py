"""
Entry REST endpoints.

``POST /entries/{entry_id}/transcribe`` is the external trigger for the
transcription pipeline.  The HTTP response is a convenience for
synchronous callers; the persisted entry is the authoritative result.
"""

import logging

from fastapi import APIRouter, Depends

from pravas.api.dependencies import get_pipeline
from pravas.core.exceptions import TranscriptionFailedError
from pravas.core.models import EntryResponse, TranscribeResponse, TranscriptionStatus
from pravas.services.pipeline import TranscriptionPipeline
from pravas.services.storage.database import get_session
from pravas.services.storage.repository import DiaryRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])


def to_entry_response(entry) -> EntryResponse:
    """Convert an ORM Entry object to its API response model."""
    return EntryResponse(
        id=entry.id,
        trip_id=entry.trip_id,
        audio_url=entry.audio_url,
        audio_mime=entry.audio_mime,
        entry_date=entry.entry_date,
        created_at=entry.created_at,
        created_by=entry.created_by,
        transcription_status=TranscriptionStatus(entry.transcription_status),
        transcript_mr=entry.transcript_mr,
        transcript_en=entry.transcript_en,
        transcription_provider=entry.transcription_provider,
        transcription_error=entry.transcription_error,
    )


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(entry_id: str):
    """Return one entry with its transcription state."""
    async with get_session() as session:
        repo = DiaryRepository(session)
        entry = await repo.get_entry(entry_id)
    return to_entry_response(entry)


@router.post("/{entry_id}/transcribe", response_model=TranscribeResponse)
async def transcribe_entry(
    entry_id: str,
    pipeline: TranscriptionPipeline = Depends(get_pipeline),
):
    """Run the transcription pipeline for one entry.

    Returns 404 if the entry does not exist, 409 if another invocation is
    processing it, 500 if the pipeline recorded a failure.
    """
    status = await pipeline.run(entry_id)
    if status is TranscriptionStatus.failed:
        raise TranscriptionFailedError()
    return TranscribeResponse(status=status)
