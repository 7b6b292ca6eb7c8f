"""Auth domain models for accounts and verified identities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class Account:
    """A registered account held by the identity provider."""

    uid: str
    email: str
    display_name: str = ""
    custom_claims: dict[str, Any] = field(default_factory=dict)
    disabled: bool = False
    created_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()


@dataclass
class Identity:
    """The caller behind a verified token.

    ``claims`` are the custom claims embedded in the token when it was
    issued, not the account's current claims.
    """

    uid: str
    email: str
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.claims.get("admin") is True
