"""Shared utility functions for Pravas."""

import logging
import mimetypes

# Containers produced by recorders that ``mimetypes`` does not always know.
_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


def extension_for_mime(mime: str) -> str:
    """Return a file extension (with dot) for an audio MIME type.

    Codec parameters such as ``audio/webm;codecs=opus`` are ignored.
    Unknown types fall back to ``.bin``.
    """
    base = mime.split(";", 1)[0].strip().lower()
    return _EXTENSIONS.get(base) or mimetypes.guess_extension(base) or ".bin"


def configure_logging(level: str) -> None:
    """Configure root logging once for the server or CLI process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
