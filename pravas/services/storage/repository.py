"""
CRUD repository for the Pravas schema.

``DiaryRepository`` receives an ``AsyncSession`` and provides all
data-access methods.  It calls ``flush()`` rather than ``commit()`` so
that transaction boundaries are controlled by the caller (typically
:func:`get_session`).
"""

import logging
from datetime import UTC, date, datetime, timedelta

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pravas.core.exceptions import EntryNotFoundError, TripNotFoundError
from pravas.core.models import TranscriptionStatus
from pravas.services.storage.models_db import Entry, Trip

logger = logging.getLogger(__name__)


class DiaryRepository:
    """Data-access layer for trips and entries.

    All methods use ``flush()`` instead of ``commit()`` so transaction
    boundaries are controlled by the caller (typically ``get_session()``
    context manager which commits on clean exit).

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Trips
    # ------------------------------------------------------------------

    async def create_trip(
        self,
        title: str,
        created_by: str,
        start_date: date | None = None,
        end_date: date | None = None,
        timezone: str | None = None,
        cover_photo_url: str | None = None,
    ) -> Trip:
        """Create and return a new trip owned by *created_by*."""
        trip = Trip(
            title=title.strip(),
            created_by=created_by,
            start_date=start_date,
            end_date=end_date,
            timezone=timezone,
            cover_photo_url=cover_photo_url,
        )
        self._session.add(trip)
        await self._session.flush()
        return trip

    async def get_trip(self, trip_id: str, owner: str | None = None) -> Trip:
        """Return a trip by ID or raise :class:`TripNotFoundError`.

        When *owner* is given, trips belonging to someone else are reported
        as missing rather than forbidden.
        """
        trip = await self._session.get(Trip, trip_id)
        if trip is None or (owner is not None and trip.created_by != owner):
            raise TripNotFoundError(trip_id)
        return trip

    async def list_trips(self, owner: str, limit: int = 50, offset: int = 0) -> list[Trip]:
        """Return *owner*'s trips, most recently created first."""
        stmt = (
            select(Trip)
            .where(Trip.created_by == owner)
            .order_by(Trip.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    async def create_entry(
        self,
        trip_id: str,
        audio_url: str,
        audio_mime: str,
        entry_date: date,
        created_by: str,
    ) -> Entry:
        """Create a *pending* entry on a trip owned by *created_by*."""
        await self.get_trip(trip_id, owner=created_by)
        entry = Entry(
            trip_id=trip_id,
            audio_url=audio_url,
            audio_mime=audio_mime,
            entry_date=entry_date,
            created_by=created_by,
            transcription_status=TranscriptionStatus.pending.value,
        )
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def get_entry(self, entry_id: str) -> Entry:
        """Return an entry by ID or raise :class:`EntryNotFoundError`."""
        entry = await self._session.get(Entry, entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    async def list_entries(self, trip_id: str) -> list[Entry]:
        """Return a trip's entries, newest ``entry_date`` first."""
        stmt = (
            select(Entry)
            .where(Entry.trip_id == trip_id)
            .order_by(Entry.entry_date.desc(), Entry.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Transcription status
    # ------------------------------------------------------------------

    async def claim_for_processing(self, entry_id: str, stale_after: timedelta) -> bool:
        """Atomically move an entry to *processing* if nobody else holds it.

        The swap succeeds from *pending* or *failed*, or from a *processing*
        claim older than *stale_after* (an invocation that died mid-way).

        Returns:
            True if this caller now owns the entry, False otherwise.
        """
        entry = await self.get_entry(entry_id)
        now = datetime.now(UTC)
        stmt = (
            update(Entry)
            .where(
                Entry.id == entry_id,
                or_(
                    Entry.transcription_status.in_(
                        [TranscriptionStatus.pending.value, TranscriptionStatus.failed.value]
                    ),
                    and_(
                        Entry.transcription_status == TranscriptionStatus.processing.value,
                        Entry.transcription_started_at < now - stale_after,
                    ),
                ),
            )
            .values(
                transcription_status=TranscriptionStatus.processing.value,
                transcription_started_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        await self._session.refresh(entry)
        return result.rowcount == 1

    async def complete_transcription(
        self,
        entry_id: str,
        transcript_source: str,
        transcript_target: str,
        provider: str,
    ) -> Entry:
        """Write both transcripts and mark the entry *done* in one update."""
        entry = await self.get_entry(entry_id)
        entry.transcript_mr = transcript_source
        entry.transcript_en = transcript_target
        entry.transcription_provider = provider
        entry.transcription_error = None
        entry.transcription_status = TranscriptionStatus.done.value
        await self._session.flush()
        return entry

    async def fail_transcription(self, entry_id: str, error: str) -> Entry:
        """Mark the entry *failed* with a human-readable error in one update."""
        entry = await self.get_entry(entry_id)
        entry.transcript_mr = None
        entry.transcript_en = None
        entry.transcription_error = error
        entry.transcription_status = TranscriptionStatus.failed.value
        await self._session.flush()
        return entry
