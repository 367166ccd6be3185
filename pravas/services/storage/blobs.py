"""Object storage for recorded audio.

``BaseBlobStore`` is the write/resolve contract the save flow depends on.
``LocalBlobStore`` keeps blobs under a directory that the API serves as
static files, so every stored key has a publicly resolvable URL.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from pravas.core.exceptions import InvalidStorageKeyError, UploadError

logger = logging.getLogger(__name__)


class BaseBlobStore(ABC):
    """Interface that every object storage backend must implement."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        """Store *data* under *key*.

        Raises:
            UploadError: If the object could not be written.
        """

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Return a URL anyone can GET the stored object from."""


def validate_key(key: str) -> PurePosixPath:
    """Reject keys that are empty, absolute, or climb out of the root."""
    path = PurePosixPath(key)
    if not key or path.is_absolute() or any(part in ("", ".", "..") for part in path.parts):
        raise InvalidStorageKeyError(key)
    return path


class LocalBlobStore(BaseBlobStore):
    """Filesystem-backed blob store.

    Args:
        root: Directory objects are written under.
        base_url: Public URL prefix the directory is served from
            (e.g. ``http://localhost:8000/audio``).
    """

    def __init__(self, root: str | Path, base_url: str) -> None:
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        return self._root.joinpath(*validate_key(key).parts)

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except FileExistsError as exc:
            raise UploadError(f"Object already exists: {key}") from exc
        except OSError as exc:
            raise UploadError(f"Could not store {key}: {exc}") from exc
        logger.info("Stored blob %s (%d bytes, %s)", key, len(data), content_type)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # "x" fails if the key was written first, including by a concurrent upload
        with path.open("xb") as fh:
            fh.write(data)

    def public_url(self, key: str) -> str:
        return f"{self._base_url}/{validate_key(key).as_posix()}"
