"""Session lookup: who does the presented token belong to."""

from fastapi import APIRouter, Depends

from pravas.api.middleware.auth import require_identity
from pravas.core.models import Identity

router = APIRouter(tags=["session"])


@router.get("/me", response_model=Identity)
async def whoami(identity: Identity = Depends(require_identity)):
    return identity
