"""Privileged review operations: approve, reject, grant-admin, resubmit.

Each operation authenticates its caller first. Approve, reject and
grant-admin additionally require the ``admin`` claim. Failures surface as
``RegistryError`` subclasses; anything unexpected is logged and re-raised
as ``InternalError`` so internals never reach the caller.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

from extreg.auth.permissions import verify_admin, verify_identity
from extreg.auth.provider import IdentityProvider
from extreg.errors import (
    FailedPrecondition,
    InternalError,
    InvalidArgument,
    NotFound,
    RegistryError,
    Unauthorized,
)
from extreg.registry.catalog import COLLECTION as REGISTRY_COLLECTION
from extreg.registry.models import RegistryEntry
from extreg.security.audit_log import AuditLogger
from extreg.store import DocumentStore
from extreg.submissions.models import SubmissionStatus, utcnow_iso
from extreg.submissions.store import SubmissionStore

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

REJECTED_BY_ADMIN_MESSAGE = "Rejected during admin review."
APPROVED_MESSAGE = "Approved and published to the registry."
RESUBMITTED_MESSAGE = "Resubmitted. Awaiting validation."


def operation(func: F) -> F:
    """Wrap unexpected exceptions from a privileged operation in ``InternalError``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except RegistryError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure in %s", func.__name__)
            raise InternalError(f"{func.__name__.replace('_', '-')} failed") from exc

    return wrapper  # type: ignore[return-value]


class ReviewService:
    """Administrator and submitter actions on existing submissions."""

    def __init__(
        self,
        provider: IdentityProvider,
        store: DocumentStore,
        audit: Optional[AuditLogger] = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.submissions = SubmissionStore(store)
        self.audit = audit

    def _audit(self, actor: str, action: str, resource_type: str, resource_id: str, **details: Any) -> None:
        if self.audit is not None:
            self.audit.log_event(
                actor=actor,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details,
            )

    @operation
    def approve_submission(self, token: Optional[str], submission_id: str) -> dict:
        """Publish a pending submission to the registry.

        The registry entry is written before the submission is marked
        approved. If a previous attempt wrote the entry but never updated
        the submission, the existing entry is kept and the submission
        update is completed.
        """
        identity = verify_admin(self.provider, token)
        if not submission_id:
            raise InvalidArgument("submissionId is required")

        submission = self.submissions.get(submission_id)
        if submission is None:
            raise NotFound(f"Submission {submission_id} not found")
        if submission.status is not SubmissionStatus.pending:
            raise FailedPrecondition(
                f"Submission {submission_id} is {submission.status.value}, not pending"
            )

        now = utcnow_iso()
        if self.store.exists(REGISTRY_COLLECTION, submission_id):
            logger.warning(
                "Registry entry %s already exists; completing interrupted approval",
                submission_id,
            )
        else:
            entry = RegistryEntry.from_submission(submission, approved_by=identity.email, approved_at=now)
            self.store.set(REGISTRY_COLLECTION, submission_id, entry.to_dict())

        self.submissions.update(
            submission_id,
            status=SubmissionStatus.approved,
            status_message=APPROVED_MESSAGE,
            registry_id=submission_id,
            approved_by=identity.email,
            approved_at=now,
        )
        logger.info("Submission %s approved by %s", submission_id, identity.email)
        self._audit(identity.email, "approve", "submission", submission_id)
        return {"success": True, "registry_id": submission_id}

    @operation
    def reject_submission(self, token: Optional[str], submission_id: str) -> dict:
        """Mark a submission rejected, whatever its current status."""
        identity = verify_admin(self.provider, token)
        if not submission_id:
            raise InvalidArgument("submissionId is required")
        if self.submissions.get(submission_id) is None:
            raise NotFound(f"Submission {submission_id} not found")

        self.submissions.update(
            submission_id,
            status=SubmissionStatus.rejected,
            status_message=REJECTED_BY_ADMIN_MESSAGE,
            rejected_by=identity.email,
            rejected_at=utcnow_iso(),
        )
        logger.info("Submission %s rejected by %s", submission_id, identity.email)
        self._audit(identity.email, "reject", "submission", submission_id)
        return {"success": True}

    @operation
    def grant_admin_role(self, token: Optional[str], email: str) -> dict:
        """Attach the ``admin`` claim to the account registered for ``email``."""
        identity = verify_admin(self.provider, token)
        if not email:
            raise InvalidArgument("email is required")

        account = self.provider.get_account_by_email(email)
        if account is None:
            logger.error("grant-admin: no account for %s", email)
            raise InternalError(f"No account found for {email}")

        self.provider.set_custom_claims(account.uid, {"admin": True})
        logger.info("Admin role granted to %s by %s", email, identity.email)
        self._audit(identity.email, "grant_admin", "account", account.uid, email=email)
        return {"success": True, "message": f"Admin role granted to {email}"}

    @operation
    def resubmit(self, token: Optional[str], submission_id: str) -> dict:
        """Reset the caller's rejected or failed submission to ``pending``.

        The caller is responsible for dispatching the validation pipeline
        afterwards.
        """
        identity = verify_identity(self.provider, token)
        if not submission_id:
            raise InvalidArgument("submissionId is required")

        submission = self.submissions.get(submission_id)
        if submission is None:
            raise NotFound(f"Submission {submission_id} not found")
        if submission.submitted_by != identity.uid:
            raise Unauthorized("You can only resubmit your own extensions.")
        if submission.status not in (SubmissionStatus.rejected, SubmissionStatus.error):
            raise FailedPrecondition(
                f"Submission {submission_id} is {submission.status.value}; "
                "only rejected or failed submissions can be resubmitted"
            )

        self.submissions.update(
            submission_id,
            status=SubmissionStatus.pending,
            status_message=RESUBMITTED_MESSAGE,
            resubmitted_at=utcnow_iso(),
        )
        self._audit(identity.email, "resubmit", "submission", submission_id)
        return {"success": True}
