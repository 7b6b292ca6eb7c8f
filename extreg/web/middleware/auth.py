"""Auth middleware -- FastAPI dependencies for the caller's bearer token.

Privileged routes pass the raw token to the review service, which runs it
through the authorization gate itself. Other routes resolve the caller
with :func:`get_current_identity`.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from extreg.auth.models import Identity
from extreg.auth.permissions import verify_identity
from extreg.context import RegistryContext

# Shared context instance
_context: Optional[RegistryContext] = None


def get_context() -> RegistryContext:
    """Return the singleton RegistryContext instance."""
    global _context
    if _context is None:
        _context = RegistryContext.from_settings()
    return _context


def set_context(context: Optional[RegistryContext]) -> None:
    """Replace the shared context (``None`` rebuilds it from settings)."""
    global _context
    _context = context


async def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Extract ``<token>`` from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_current_identity(
    token: Optional[str] = Depends(get_bearer_token),
    context: RegistryContext = Depends(get_context),
) -> Identity:
    """FastAPI dependency that verifies the caller's token.

    Raises ``Unauthenticated`` (401) when the token is missing or invalid.
    """
    return verify_identity(context.provider, token)
