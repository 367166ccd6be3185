"""
Pravas exception hierarchy.

All application-specific exceptions inherit from PravasError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class PravasError(Exception):
    """Base exception for all Pravas errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "PRAVAS_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Lookup / auth
# ---------------------------------------------------------------------------


class EntryNotFoundError(PravasError):
    """Raised when an entry ID does not exist."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(
            detail=f"Entry not found: {entry_id}",
            code="ENTRY_NOT_FOUND",
            status_code=404,
        )


class TripNotFoundError(PravasError):
    """Raised when a trip ID does not exist."""

    def __init__(self, trip_id: str) -> None:
        super().__init__(
            detail=f"Trip not found: {trip_id}",
            code="TRIP_NOT_FOUND",
            status_code=404,
        )


class NotAuthenticatedError(PravasError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, detail: str = "Not authenticated") -> None:
        super().__init__(detail=detail, code="NOT_AUTHENTICATED", status_code=401)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class UpstreamFetchError(PravasError):
    """Raised when the stored audio cannot be downloaded."""

    def __init__(self, detail: str = "Audio fetch failed") -> None:
        super().__init__(detail=detail, code="UPSTREAM_FETCH_FAILED", status_code=502)


class ProviderError(PravasError):
    """Base for failures reported by an external speech or translation provider."""

    def __init__(self, detail: str = "Provider failed", code: str = "PROVIDER_FAILED") -> None:
        super().__init__(detail=detail, code=code, status_code=502)


class TranscriptionError(ProviderError):
    """Raised when STT processing fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(detail=detail, code="TRANSCRIPTION_ERROR")


class TranslationError(ProviderError):
    """Raised when translating a transcript fails."""

    def __init__(self, detail: str = "Translation failed") -> None:
        super().__init__(detail=detail, code="TRANSLATION_ERROR")


class TranscriptionFailedError(PravasError):
    """Raised by the trigger endpoint after the pipeline recorded a failure.

    The detail is deliberately generic; the real cause is persisted on the
    entry's ``transcription_error`` column.
    """

    def __init__(self) -> None:
        super().__init__(
            detail="Transcription failed",
            code="TRANSCRIPTION_FAILED",
            status_code=500,
        )


class EntryBusyError(PravasError):
    """Raised when an entry is already being processed by another invocation."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(
            detail=f"Entry is already processing: {entry_id}",
            code="ENTRY_BUSY",
            status_code=409,
        )


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class PersistenceError(PravasError):
    """Raised when a trip or entry write fails."""

    def __init__(self, detail: str = "Persistence failed", code: str = "PERSISTENCE_FAILED") -> None:
        super().__init__(detail=detail, code=code, status_code=500)


class UploadError(PersistenceError):
    """Raised when writing an audio blob to object storage fails."""

    def __init__(self, detail: str = "Upload failed") -> None:
        super().__init__(detail=detail, code="UPLOAD_FAILED")


class EntryCreateError(PersistenceError):
    """Raised when the entry row cannot be created."""

    def __init__(self, detail: str = "Entry creation failed") -> None:
        super().__init__(detail=detail, code="ENTRY_CREATE_FAILED")


class TripCreateError(PersistenceError):
    """Raised when the trip row cannot be created."""

    def __init__(self, detail: str = "Trip creation failed") -> None:
        super().__init__(detail=detail, code="TRIP_CREATE_FAILED")


class InvalidStorageKeyError(PravasError):
    """Raised for object-storage keys that would escape the storage root."""

    def __init__(self, key: str) -> None:
        super().__init__(
            detail=f"Invalid storage key: {key}",
            code="INVALID_STORAGE_KEY",
            status_code=400,
        )


# ---------------------------------------------------------------------------
# Recorder (client side)
# ---------------------------------------------------------------------------


class DeviceUnavailableError(PravasError):
    """Raised when no microphone exists or permission was denied."""

    def __init__(self, detail: str = "Microphone unavailable") -> None:
        super().__init__(detail=detail, code="DEVICE_UNAVAILABLE", status_code=503)


class InvalidTripTitleError(PravasError):
    """Raised when a new trip is requested with an empty name."""

    def __init__(self) -> None:
        super().__init__(
            detail="Trip name must not be empty",
            code="INVALID_TRIP_TITLE",
            status_code=422,
        )


class SaveInProgressError(PravasError):
    """Raised when a save is submitted while another save is still running."""

    def __init__(self) -> None:
        super().__init__(
            detail="A save is already in progress",
            code="SAVE_IN_PROGRESS",
            status_code=409,
        )


class NothingToSaveError(PravasError):
    """Raised when a save is requested before a recording has been stopped."""

    def __init__(self) -> None:
        super().__init__(
            detail="No finished recording to save",
            code="NOTHING_TO_SAVE",
            status_code=409,
        )
