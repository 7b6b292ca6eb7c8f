"""Tests for the identity provider and the authorization gate."""

import pytest

from extreg.auth.permissions import verify_admin, verify_identity
from extreg.auth.provider import IdentityProvider, TokenError
from extreg.errors import PermissionDenied, Unauthenticated


@pytest.fixture
def provider(tmp_path):
    return IdentityProvider(tmp_path / "auth", secret="s3cret", token_ttl_hours=1)


def test_token_round_trip(provider):
    account = provider.create_account("dev@example.com")
    identity = provider.verify_token(provider.issue_token(account.uid))
    assert identity.uid == account.uid
    assert identity.email == "dev@example.com"
    assert not identity.is_admin


def test_duplicate_email_rejected(provider):
    provider.create_account("dev@example.com")
    with pytest.raises(ValueError):
        provider.create_account("DEV@example.com")


def test_email_lookup_is_case_insensitive(provider):
    account = provider.create_account("Dev@Example.com")
    assert provider.get_account_by_email("dev@example.com").uid == account.uid


def test_tampered_token_rejected(provider):
    account = provider.create_account("dev@example.com")
    token = provider.issue_token(account.uid)
    payload, _, sig = token.partition(".")
    with pytest.raises(TokenError):
        provider.verify_token(payload + "x." + sig)


def test_token_from_other_secret_rejected(provider, tmp_path):
    account = provider.create_account("dev@example.com")
    other = IdentityProvider(tmp_path / "auth", secret="different")
    with pytest.raises(TokenError):
        other.verify_token(provider.issue_token(account.uid))


def test_expired_token_rejected(provider):
    account = provider.create_account("dev@example.com")
    token = provider.issue_token(account.uid, now=1_000_000)
    with pytest.raises(TokenError):
        provider.verify_token(token, now=1_000_000 + 3601)


def test_disabled_account_rejected(provider):
    account = provider.create_account("dev@example.com")
    token = provider.issue_token(account.uid)
    provider.set_disabled(account.uid)
    with pytest.raises(TokenError):
        provider.verify_token(token)


def test_set_custom_claims_merges(provider):
    account = provider.create_account("dev@example.com")
    provider.set_custom_claims(account.uid, {"team": "core"})
    updated = provider.set_custom_claims(account.uid, {"admin": True})
    assert updated.custom_claims == {"team": "core", "admin": True}


def test_claims_reach_only_new_tokens(provider):
    account = provider.create_account("dev@example.com")
    old = provider.issue_token(account.uid)
    provider.set_custom_claims(account.uid, {"admin": True})
    assert not provider.verify_token(old).is_admin
    assert provider.verify_token(provider.issue_token(account.uid)).is_admin


@pytest.mark.parametrize("token", [None, "", "garbage", "abc.def"])
def test_gate_unauthenticated(provider, token):
    with pytest.raises(Unauthenticated):
        verify_identity(provider, token)
    with pytest.raises(Unauthenticated):
        verify_admin(provider, token)


def test_gate_requires_admin_claim(provider):
    account = provider.create_account("someone@example.com")
    with pytest.raises(PermissionDenied):
        verify_admin(provider, provider.issue_token(account.uid))


def test_gate_ignores_truthy_non_boolean_claim(provider):
    account = provider.create_account("dev@example.com")
    provider.set_custom_claims(account.uid, {"admin": "yes"})
    with pytest.raises(PermissionDenied):
        verify_admin(provider, provider.issue_token(account.uid))


def test_gate_admits_admin(provider):
    account = provider.create_account("boss@example.com")
    provider.set_custom_claims(account.uid, {"admin": True})
    identity = verify_admin(provider, provider.issue_token(account.uid))
    assert identity.uid == account.uid
