"""Tests for approve, reject, grant-admin, and resubmit."""

import asyncio

import pytest

from extreg.errors import (
    FailedPrecondition,
    InternalError,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    Unauthenticated,
    Unauthorized,
)
from extreg.registry.catalog import COLLECTION as REGISTRY_COLLECTION
from extreg.submissions.models import SubmissionStatus

from conftest import manifest_url


def _validated_submission(context, github, submitted_by="uid-1"):
    github.files[manifest_url("acme", "toolkit", "main")] = (
        '{"name": "Toolkit", "description": "Does things", "version": "1.0.0"}'
    )
    sub = context.submissions.create(
        repo_url="https://github.com/acme/toolkit",
        category="persona",
        submitted_by=submitted_by,
        submitted_by_email="dev@example.com",
        tags="coffee, tools",
        associated_tools=["grinder"],
    )
    return asyncio.run(context.pipeline.run(sub.id))


def test_approve_publishes_entry(context, github, admin_token):
    sub = _validated_submission(context, github)
    result = context.review.approve_submission(admin_token, sub.id)
    assert result == {"success": True, "registry_id": sub.id}

    entry = context.catalog.get(sub.id)
    assert entry.name == "Toolkit"
    assert entry.version == "1.0.0"
    assert entry.tags == ["coffee", "tools"]
    assert entry.associated_tools == ["grinder"]
    assert entry.approved_by == "admin@example.com"
    assert entry.approved_at
    assert entry.install_command == "gemini extensions install https://github.com/acme/toolkit"

    updated = context.submissions.get(sub.id)
    assert updated.status is SubmissionStatus.approved
    assert updated.registry_id == sub.id


def test_approve_is_single_use(context, github, admin_token):
    sub = _validated_submission(context, github)
    context.review.approve_submission(admin_token, sub.id)
    with pytest.raises(FailedPrecondition):
        context.review.approve_submission(admin_token, sub.id)
    assert len(context.catalog.list_all()) == 1


@pytest.mark.parametrize("status", [SubmissionStatus.rejected, SubmissionStatus.error])
def test_approve_requires_pending(context, github, admin_token, status):
    sub = _validated_submission(context, github)
    context.submissions.update(sub.id, status=status)
    with pytest.raises(FailedPrecondition):
        context.review.approve_submission(admin_token, sub.id)
    assert context.catalog.get(sub.id) is None


def test_approve_completes_interrupted_approval(context, github, admin_token):
    sub = _validated_submission(context, github)
    context.store.set(REGISTRY_COLLECTION, sub.id, {"name": "Orphan", "approved_at": "earlier"})

    result = context.review.approve_submission(admin_token, sub.id)

    assert result["registry_id"] == sub.id
    assert context.catalog.get(sub.id).name == "Orphan"
    assert context.submissions.get(sub.id).status is SubmissionStatus.approved


def test_approve_errors(context, admin_token, user_token):
    with pytest.raises(InvalidArgument):
        context.review.approve_submission(admin_token, "")
    with pytest.raises(NotFound):
        context.review.approve_submission(admin_token, "nope")
    with pytest.raises(Unauthenticated):
        context.review.approve_submission(None, "nope")
    with pytest.raises(PermissionDenied):
        context.review.approve_submission(user_token, "nope")


def test_non_admin_denied_even_with_org_email(context, github):
    account = context.provider.create_account("root@google.com")
    token = context.provider.issue_token(account.uid)
    sub = _validated_submission(context, github)
    with pytest.raises(PermissionDenied):
        context.review.approve_submission(token, sub.id)
    with pytest.raises(PermissionDenied):
        context.review.reject_submission(token, sub.id)
    with pytest.raises(PermissionDenied):
        context.review.grant_admin_role(token, "root@google.com")


def test_reject(context, github, admin_token):
    sub = _validated_submission(context, github)
    assert context.review.reject_submission(admin_token, sub.id) == {"success": True}
    updated = context.submissions.get(sub.id)
    assert updated.status is SubmissionStatus.rejected
    assert updated.rejected_by == "admin@example.com"
    assert updated.rejected_at
    assert [e.action for e in context.audit.get_events(resource_id=sub.id)] == ["reject"]


def test_reject_missing_submission(context, admin_token):
    with pytest.raises(NotFound):
        context.review.reject_submission(admin_token, "nope")


def test_grant_admin(context, admin_token, user):
    result = context.review.grant_admin_role(admin_token, "dev@example.com")
    assert result == {"success": True, "message": "Admin role granted to dev@example.com"}
    token = context.provider.issue_token(user.uid)
    assert context.provider.verify_token(token).is_admin


def test_grant_admin_unknown_email(context, admin_token):
    with pytest.raises(InternalError):
        context.review.grant_admin_role(admin_token, "ghost@example.com")
    with pytest.raises(InvalidArgument):
        context.review.grant_admin_role(admin_token, "")


def test_resubmit_by_owner(context, github, user, user_token):
    sub = context.submissions.create(
        repo_url="https://github.com/acme/toolkit",
        category="tool",
        submitted_by=user.uid,
        submitted_by_email=user.email,
    )
    rejected = asyncio.run(context.pipeline.run(sub.id))
    assert rejected.status is SubmissionStatus.rejected

    github.files[manifest_url("acme", "toolkit", "main")] = '{"name": "T", "description": "D"}'
    assert context.review.resubmit(user_token, sub.id) == {"success": True}
    reset = context.submissions.get(sub.id)
    assert reset.status is SubmissionStatus.pending
    assert reset.resubmitted_at

    revalidated = asyncio.run(context.pipeline.run(sub.id))
    assert revalidated.status is SubmissionStatus.pending
    assert revalidated.name == "T"


def test_resubmit_by_someone_else(context, github, user_token):
    sub = _validated_submission(context, github, submitted_by="someone-else")
    with pytest.raises(Unauthorized):
        context.review.resubmit(user_token, sub.id)
    with pytest.raises(NotFound):
        context.review.resubmit(user_token, "nope")


def test_resubmit_approved_refused(context, github, admin_token, user, user_token):
    sub = _validated_submission(context, github, submitted_by=user.uid)
    context.review.approve_submission(admin_token, sub.id)
    with pytest.raises(FailedPrecondition):
        context.review.resubmit(user_token, sub.id)


def test_resubmit_pending_refused(context, github, user, user_token):
    sub = _validated_submission(context, github, submitted_by=user.uid)
    assert sub.status is SubmissionStatus.pending
    with pytest.raises(FailedPrecondition):
        context.review.resubmit(user_token, sub.id)
    assert context.submissions.get(sub.id).resubmitted_at == ""


def test_unexpected_failure_wrapped_as_internal(context, github, admin_token, monkeypatch):
    sub = _validated_submission(context, github)

    def broken(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(context.store, "set", broken)
    with pytest.raises(InternalError) as exc:
        context.review.approve_submission(admin_token, sub.id)
    assert "disk full" not in exc.value.message
    assert context.submissions.get(sub.id).status is SubmissionStatus.pending
