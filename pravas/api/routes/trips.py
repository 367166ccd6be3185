"""
Trip REST endpoints.

Trips are scoped to their owner: every route resolves the caller through
``require_identity`` and other users' trips are reported as missing.
"""

import logging

from fastapi import APIRouter, Depends, Query

from pravas.api.middleware.auth import require_identity
from pravas.api.routes.entries import to_entry_response
from pravas.core.models import EntryCreate, EntryResponse, Identity, TripCreate, TripResponse
from pravas.services.storage.database import get_session
from pravas.services.storage.repository import DiaryRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


def _to_response(trip) -> TripResponse:
    """Convert an ORM Trip object to its API response model."""
    return TripResponse(
        id=trip.id,
        title=trip.title,
        start_date=trip.start_date,
        end_date=trip.end_date,
        timezone=trip.timezone,
        cover_photo_url=trip.cover_photo_url,
        created_by=trip.created_by,
        created_at=trip.created_at,
    )


@router.post("", response_model=TripResponse)
async def create_trip(body: TripCreate, identity: Identity = Depends(require_identity)):
    """Create a trip owned by the caller."""
    async with get_session() as session:
        repo = DiaryRepository(session)
        trip = await repo.create_trip(
            title=body.title,
            created_by=identity.user_id,
            start_date=body.start_date,
            end_date=body.end_date,
            timezone=body.timezone,
            cover_photo_url=body.cover_photo_url,
        )
    logger.info("Trip %s created by %s", trip.id, identity.user_id)
    return _to_response(trip)


@router.get("", response_model=list[TripResponse])
async def list_trips(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    identity: Identity = Depends(require_identity),
):
    """List the caller's trips, newest first."""
    async with get_session() as session:
        repo = DiaryRepository(session)
        trips = await repo.list_trips(identity.user_id, limit=limit, offset=offset)
    return [_to_response(t) for t in trips]


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(trip_id: str, identity: Identity = Depends(require_identity)):
    async with get_session() as session:
        repo = DiaryRepository(session)
        trip = await repo.get_trip(trip_id, owner=identity.user_id)
    return _to_response(trip)


@router.get("/{trip_id}/entries", response_model=list[EntryResponse])
async def list_trip_entries(trip_id: str, identity: Identity = Depends(require_identity)):
    """List a trip's entries, most recent ``entry_date`` first."""
    async with get_session() as session:
        repo = DiaryRepository(session)
        await repo.get_trip(trip_id, owner=identity.user_id)
        entries = await repo.list_entries(trip_id)
    return [to_entry_response(e) for e in entries]


@router.post("/{trip_id}/entries", response_model=EntryResponse)
async def create_entry(
    trip_id: str,
    body: EntryCreate,
    identity: Identity = Depends(require_identity),
):
    """Create a *pending* entry pointing at already-uploaded audio."""
    async with get_session() as session:
        repo = DiaryRepository(session)
        entry = await repo.create_entry(
            trip_id=trip_id,
            audio_url=body.audio_url,
            audio_mime=body.audio_mime,
            entry_date=body.entry_date,
            created_by=identity.user_id,
        )
    logger.info("Entry %s created on trip %s", entry.id, trip_id)
    return to_entry_response(entry)
