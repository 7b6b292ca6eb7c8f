"""Auth router -- information about the current caller."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from extreg.auth.models import Identity
from extreg.web.middleware.auth import get_current_identity
from extreg.web.models.api import IdentityResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=IdentityResponse, summary="Current identity")
async def me(identity: Identity = Depends(get_current_identity)):
    """Return the verified identity behind the bearer token."""
    return IdentityResponse(uid=identity.uid, email=identity.email, is_admin=identity.is_admin)
