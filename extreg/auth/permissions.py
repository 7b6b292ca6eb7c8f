"""Authorization gate for privileged operations.

Administrator status comes only from the boolean ``admin`` claim on a
verified token. No email allowlist or stored role takes part.
"""

from __future__ import annotations

from typing import Optional

from extreg.auth.models import Identity
from extreg.auth.provider import IdentityProvider, TokenError
from extreg.errors import PermissionDenied, Unauthenticated


def verify_identity(provider: IdentityProvider, token: Optional[str]) -> Identity:
    """Return the verified caller, or raise ``Unauthenticated``."""
    if not token:
        raise Unauthenticated("Authentication required")
    try:
        return provider.verify_token(token)
    except TokenError as exc:
        raise Unauthenticated(str(exc)) from exc


def require_admin(identity: Identity) -> Identity:
    """Raise ``PermissionDenied`` unless the identity carries ``admin: true``."""
    if not identity.is_admin:
        raise PermissionDenied("Permission Denied: Admins only.")
    return identity


def verify_admin(provider: IdentityProvider, token: Optional[str]) -> Identity:
    """Authenticate ``token`` and require the administrator claim.

    Every privileged operation goes through this function.
    """
    return require_admin(verify_identity(provider, token))
