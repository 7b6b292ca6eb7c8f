"""Identity-and-claims provider.

Accounts live in ``<data_dir>/auth/accounts.json``. Bearer tokens are
``<payload>.<signature>`` where the payload is base64url JSON and the
signature is HMAC-SHA256 over the encoded payload. Tokens carry the
account's custom claims as of issue time, so a claim change takes effect
on the next token.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
import uuid
from pathlib import Path
from typing import Any, Optional

from extreg.auth.models import Account, Identity


class TokenError(Exception):
    """A token could not be verified."""


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class IdentityProvider:
    """File-backed accounts, custom claims, and signed bearer tokens."""

    def __init__(
        self,
        base_dir: Optional[str | Path] = None,
        secret: str = "extreg-dev-secret",
        token_ttl_hours: int = 24,
    ) -> None:
        if base_dir is None:
            self._base = Path.home() / ".extreg" / "auth"
        else:
            self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)
        self._accounts_path = self._base / "accounts.json"
        self._secret = secret.encode("utf-8")
        self._ttl_seconds = token_ttl_hours * 3600

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self) -> list[dict]:
        if not self._accounts_path.exists():
            return []
        try:
            data = json.loads(self._accounts_path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _write(self, data: list[dict]) -> None:
        self._accounts_path.write_text(json.dumps(data, indent=2))

    @staticmethod
    def _from_dict(d: dict) -> Account:
        return Account(
            uid=d["uid"],
            email=d["email"],
            display_name=d.get("display_name", ""),
            custom_claims=d.get("custom_claims") or {},
            disabled=d.get("disabled", False),
            created_at=d.get("created_at", ""),
        )

    @staticmethod
    def _to_dict(a: Account) -> dict:
        return {
            "uid": a.uid,
            "email": a.email,
            "display_name": a.display_name,
            "custom_claims": a.custom_claims,
            "disabled": a.disabled,
            "created_at": a.created_at,
        }

    def _sign(self, payload: str) -> str:
        mac = hmac.new(self._secret, payload.encode("ascii"), hashlib.sha256)
        return _b64encode(mac.digest())

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def create_account(self, email: str, display_name: str = "") -> Account:
        """Register a new account. Emails are unique, case-insensitively."""
        if self.get_account_by_email(email) is not None:
            raise ValueError(f"An account already exists for {email}")
        account = Account(uid=uuid.uuid4().hex, email=email, display_name=display_name)
        accounts = self._read()
        accounts.append(self._to_dict(account))
        self._write(accounts)
        return account

    def get_account(self, uid: str) -> Optional[Account]:
        for d in self._read():
            if d["uid"] == uid:
                return self._from_dict(d)
        return None

    def get_account_by_email(self, email: str) -> Optional[Account]:
        for d in self._read():
            if d.get("email", "").lower() == email.lower():
                return self._from_dict(d)
        return None

    def list_accounts(self) -> list[Account]:
        return [self._from_dict(d) for d in self._read()]

    def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> Account:
        """Merge ``claims`` into the account's existing custom claims."""
        accounts = self._read()
        for d in accounts:
            if d["uid"] == uid:
                d["custom_claims"] = {**(d.get("custom_claims") or {}), **claims}
                self._write(accounts)
                return self._from_dict(d)
        raise KeyError(f"No account with uid {uid}")

    def set_disabled(self, uid: str, disabled: bool = True) -> Account:
        accounts = self._read()
        for d in accounts:
            if d["uid"] == uid:
                d["disabled"] = disabled
                self._write(accounts)
                return self._from_dict(d)
        raise KeyError(f"No account with uid {uid}")

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_token(self, uid: str, now: Optional[float] = None) -> str:
        """Issue a signed token embedding the account's current claims."""
        account = self.get_account(uid)
        if account is None:
            raise KeyError(f"No account with uid {uid}")
        issued = int(now if now is not None else time.time())
        body = {
            "uid": account.uid,
            "email": account.email,
            "claims": account.custom_claims,
            "iat": issued,
            "exp": issued + self._ttl_seconds,
        }
        payload = _b64encode(json.dumps(body, separators=(",", ":")).encode("utf-8"))
        return f"{payload}.{self._sign(payload)}"

    def verify_token(self, token: str, now: Optional[float] = None) -> Identity:
        """Verify ``token`` and return the identity it was issued to.

        Raises ``TokenError`` for malformed, tampered, expired, or orphaned
        tokens.
        """
        payload, sep, signature = token.partition(".")
        if not sep or not payload or not signature:
            raise TokenError("Malformed token")
        if not hmac.compare_digest(self._sign(payload), signature):
            raise TokenError("Invalid token signature")
        try:
            body = json.loads(_b64decode(payload))
        except (ValueError, UnicodeDecodeError) as exc:
            raise TokenError("Malformed token payload") from exc
        if not isinstance(body, dict):
            raise TokenError("Malformed token payload")

        current = now if now is not None else time.time()
        if body.get("exp", 0) < current:
            raise TokenError("Token expired")

        account = self.get_account(body.get("uid", ""))
        if account is None or account.disabled:
            raise TokenError("Account no longer active")

        claims = body.get("claims")
        return Identity(
            uid=account.uid,
            email=body.get("email", account.email),
            claims=claims if isinstance(claims, dict) else {},
        )
