"""Save flow: move a finished recording into a trip.

Order of operations for every save:

1. Refuse if another save is in flight.
2. Check the signed-in identity before touching storage.
3. Upload the blob under ``<user_id>/<epoch-ms><ext>``.
4. Create a ``pending`` entry dated today pointing at the public URL.

A new trip is created before step 3, so a failed trip creation never
leaves an orphaned upload.
"""

import logging
import time
from collections.abc import Callable
from datetime import date

from pravas.client.api_client import APIError, PravasClient
from pravas.core.exceptions import (
    EntryCreateError,
    InvalidTripTitleError,
    NotAuthenticatedError,
    NothingToSaveError,
    SaveInProgressError,
    TripCreateError,
    UploadError,
)
from pravas.core.models import Identity
from pravas.core.utils import extension_for_mime
from pravas.services.recorder.session import RecordingSession

logger = logging.getLogger(__name__)


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class SaveFlow:
    """Attach the stopped session's blob to an existing or new trip.

    Args:
        client: API client carrying the user's token.
        session: The recorder whose blob is being saved.
        today: Returns the entry date (local calendar day).
        clock_ms: Returns a millisecond timestamp for the storage key.
    """

    def __init__(
        self,
        client: PravasClient,
        session: RecordingSession,
        today: Callable[[], date] = date.today,
        clock_ms: Callable[[], int] = _epoch_ms,
    ) -> None:
        self._client = client
        self._session = session
        self._today = today
        self._clock_ms = clock_ms
        self._saving = False
        self._created_trip: dict | None = None

    @property
    def created_trip(self) -> dict | None:
        """The trip made by the last ``create_trip_and_attach``, if it got that far."""
        return self._created_trip

    @property
    def saving(self) -> bool:
        """True while a save is in flight; save controls should be disabled."""
        return self._saving

    async def attach_to_trip(self, trip_id: str, identity: Identity | None) -> dict:
        """Upload the blob and create a pending entry in *trip_id*.

        Returns:
            The created entry as returned by the API.

        Raises:
            SaveInProgressError: Another save has not finished.
            NothingToSaveError: The session holds no stopped recording.
            NotAuthenticatedError: No signed-in user; nothing was uploaded.
            UploadError: Object storage rejected the blob.
            EntryCreateError: The blob was stored but the entry row was not.
        """
        self._begin()
        try:
            return await self._attach(trip_id, identity)
        finally:
            self._saving = False

    async def create_trip_and_attach(self, title: str, identity: Identity | None) -> dict:
        """Create a trip named *title*, then attach the blob to it.

        A blank title is rejected before any network call.
        """
        cleaned = title.strip()
        if not cleaned:
            raise InvalidTripTitleError()

        self._begin()
        try:
            self._check_ready(identity)
            try:
                trip = await self._client.create_trip(cleaned)
            except APIError as exc:
                logger.error("Trip creation failed: %s", exc.message)
                raise TripCreateError(exc.message) from exc
            self._created_trip = trip
            logger.info("Created trip %s", trip["id"])
            return await self._attach(trip["id"], identity)
        finally:
            self._saving = False

    def discard(self) -> None:
        """Drop the recording and return the session to idle."""
        self._session.discard()

    # -- internals --

    def _begin(self) -> None:
        if self._saving:
            raise SaveInProgressError()
        self._saving = True

    def _check_ready(self, identity: Identity | None) -> None:
        if self._session.blob is None:
            raise NothingToSaveError()
        if identity is None:
            raise NotAuthenticatedError("Sign in to save recordings")

    async def _attach(self, trip_id: str, identity: Identity | None) -> dict:
        self._check_ready(identity)
        blob = self._session.blob

        key = f"{identity.user_id}/{self._clock_ms()}{extension_for_mime(blob.mime_type)}"
        try:
            uploaded = await self._client.upload_audio(key, blob.data, blob.mime_type)
        except APIError as exc:
            logger.error("Upload of %s failed: %s", key, exc.message)
            raise UploadError(exc.message) from exc

        try:
            entry = await self._client.create_entry(
                trip_id=trip_id,
                audio_url=uploaded["public_url"],
                audio_mime=blob.mime_type,
                entry_date=self._today(),
            )
        except APIError as exc:
            logger.error("Entry creation for %s failed: %s", key, exc.message)
            raise EntryCreateError(exc.message) from exc

        logger.info("Saved recording to trip %s as entry %s", trip_id, entry["id"])
        self._session.discard()
        return entry
