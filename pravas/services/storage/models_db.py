"""
SQLAlchemy ORM models for the Pravas schema.

Tables: ``trips``, ``entries``.
"""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pravas.services.storage.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Trip(Base):
    """A named collection of entries owned by one user."""

    __tablename__ = "trips"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255))
    start_date: Mapped[date | None] = mapped_column(nullable=True)
    end_date: Mapped[date | None] = mapped_column(nullable=True)
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    cover_photo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_by: Mapped[str] = mapped_column(String(255), index=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    entries: Mapped[list["Entry"]] = relationship(
        back_populates="trip",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Trip id={self.id} title={self.title!r}>"


class Entry(Base):
    """One voice memo and the state of its transcription."""

    __tablename__ = "entries"
    __table_args__ = (Index("ix_entries_trip_date", "trip_id", "entry_date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    trip_id: Mapped[str] = mapped_column(ForeignKey("trips.id"))
    audio_url: Mapped[str] = mapped_column(String(1024))
    audio_mime: Mapped[str] = mapped_column(String(100))
    entry_date: Mapped[date] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    created_by: Mapped[str] = mapped_column(String(255))
    transcription_status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    transcription_started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    transcript_mr: Mapped[str | None] = mapped_column(Text, nullable=True)
    transcript_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    transcription_provider: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transcription_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    trip: Mapped["Trip"] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return f"<Entry id={self.id} trip={self.trip_id} status={self.transcription_status!r}>"
