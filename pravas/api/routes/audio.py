"""
Object-storage upload endpoint.

Clients ``POST`` the raw recording bytes with the key they generated
(``<user_id>/<epoch_millis>.<ext>``).  Keys must live under the caller's
own prefix.  Reads go through the static ``/audio`` mount.
"""

import logging

from fastapi import APIRouter, Depends, Query, Request

from pravas.api.dependencies import get_blob_store
from pravas.api.middleware.auth import require_identity
from pravas.core.exceptions import InvalidStorageKeyError, PravasError
from pravas.core.models import Identity, UploadResponse
from pravas.services.storage.blobs import BaseBlobStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audio", tags=["audio"])


@router.post("", response_model=UploadResponse)
async def upload_audio(
    request: Request,
    key: str = Query(..., min_length=1, max_length=512),
    identity: Identity = Depends(require_identity),
    store: BaseBlobStore = Depends(get_blob_store),
):
    """Store the request body under *key* and return its public URL."""
    if not key.startswith(f"{identity.user_id}/"):
        raise InvalidStorageKeyError(key)

    data = await request.body()
    if not data:
        raise PravasError(
            detail="Refusing to store an empty recording",
            code="EMPTY_UPLOAD",
            status_code=400,
        )

    content_type = request.headers.get("content-type", "application/octet-stream")
    await store.upload(key, data, content_type)
    return UploadResponse(
        key=key,
        public_url=store.public_url(key),
        content_type=content_type,
        size=len(data),
    )
