"""Automated validation of newly created submissions.

The pipeline runs once per created (or resubmitted) submission and moves it
to a final state:

1. URL absent or not http(s)          -> rejected
2. Not a ``github.com/<owner>/<repo>`` -> rejected
3. Manifest not found on any branch   -> rejected
4. Credential pattern in raw text     -> rejected (security warning logged)
5. Manifest is not valid JSON         -> rejected
6. Required manifest fields missing   -> rejected
7. Everything passes                  -> pending, awaiting admin review

Any unexpected exception, including exceeding the validation deadline,
maps to ``error``. Nothing raised here reaches the trigger source.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from extreg.errors import ManifestFetchError, ManifestValidationError
from extreg.logging_setup import get_security_logger
from extreg.security.audit_log import AuditLogger
from extreg.submissions.fetcher import ManifestFetcher
from extreg.submissions.manifest import parse_manifest
from extreg.submissions.models import Submission, SubmissionStatus
from extreg.submissions.secrets import SecretScanner
from extreg.submissions.store import SubmissionStore
from extreg.submissions.urls import parse_repo_url, resolve_image_url

logger = logging.getLogger(__name__)
security_logger = get_security_logger()

INVALID_URL_MESSAGE = "Invalid Repository URL."
NOT_GITHUB_MESSAGE = "URL must be a valid GitHub repository."
SECURITY_VIOLATION_MESSAGE = "Security Violation: Potential API Key detected in manifest."
VERIFIED_MESSAGE = "Manifest verified. Waiting for admin approval."
INTERNAL_ERROR_MESSAGE = "Internal processing error during validation."


@dataclass
class Outcome:
    """The fields a validation run writes back to the submission."""

    status: SubmissionStatus
    message: str
    fields: dict = field(default_factory=dict)


def _rejected(message: str) -> Outcome:
    return Outcome(SubmissionStatus.rejected, message)


def _decision_marks(submission: Submission) -> tuple:
    return (submission.approved_at, submission.rejected_at, submission.resubmitted_at)


class SubmissionPipeline:
    """Validate a submission and persist the resulting state."""

    def __init__(
        self,
        submissions: SubmissionStore,
        fetcher: Optional[ManifestFetcher] = None,
        scanner: Optional[SecretScanner] = None,
        default_version: str = "0.0.1",
        placeholder_image: Optional[str] = None,
        validation_timeout: Optional[float] = 60.0,
        audit: Optional[AuditLogger] = None,
    ) -> None:
        self.submissions = submissions
        self.fetcher = fetcher or ManifestFetcher()
        self.scanner = scanner or SecretScanner()
        self.default_version = default_version
        self.placeholder_image = placeholder_image
        self.validation_timeout = validation_timeout
        self.audit = audit

    async def run(self, submission_id: str) -> Optional[Submission]:
        """Validate ``submission_id`` and return the updated submission."""
        submission = self.submissions.get(submission_id)
        if submission is None:
            logger.error("No submission found for id %s", submission_id)
            return None

        if submission.status is not SubmissionStatus.pending:
            logger.info(
                "Skipping submission %s: status is %s, not pending",
                submission_id,
                submission.status.value,
            )
            return submission

        logger.info("Processing new submission: %s from %s", submission_id, submission.repo_url)

        try:
            outcome = await asyncio.wait_for(
                self.evaluate(submission), timeout=self.validation_timeout
            )
            return self._persist(submission, outcome)
        except asyncio.TimeoutError:
            logger.error(
                "Validation of submission %s exceeded %ss", submission_id, self.validation_timeout
            )
        except Exception:
            logger.exception("Error processing submission %s", submission_id)
        return self._mark_error(submission)

    async def evaluate(self, submission: Submission) -> Outcome:
        """Run the ordered checks without touching the store."""
        repo_url = submission.repo_url
        if not repo_url or not isinstance(repo_url, str) or not repo_url.startswith("http"):
            return _rejected(INVALID_URL_MESSAGE)

        if parse_repo_url(repo_url) is None:
            return _rejected(NOT_GITHUB_MESSAGE)

        try:
            fetched = await self.fetcher.fetch(repo_url)
        except ManifestFetchError as exc:
            if exc.reason == "invalid-url":
                return _rejected(NOT_GITHUB_MESSAGE)
            return _rejected(str(exc))

        label = self.scanner.find(fetched.text)
        if label is not None:
            security_logger.warning(
                "Security alert: potential %s detected in %s (submission %s)",
                label,
                repo_url,
                submission.id,
            )
            if self.audit is not None:
                self.audit.log_event(
                    actor="pipeline",
                    action="security_violation",
                    resource_type="submission",
                    resource_id=submission.id,
                    details={"pattern": label, "manifest_url": fetched.url},
                    success=False,
                )
            return _rejected(SECURITY_VIOLATION_MESSAGE)

        try:
            manifest = parse_manifest(fetched.text, default_version=self.default_version)
        except ManifestValidationError as exc:
            if exc.reason == "invalid-json":
                return _rejected(f"{self.fetcher.filename} is not valid JSON.")
            return _rejected(str(exc))

        logger.info("Submission %s validated. Manifest found at %s", submission.id, fetched.url)
        return Outcome(
            SubmissionStatus.pending,
            VERIFIED_MESSAGE,
            fields={
                "name": manifest.name,
                "description": manifest.description,
                "version": manifest.version,
                "manifest_url": fetched.url,
                "image_url": resolve_image_url(
                    manifest.image_url, submission.image_url, self.placeholder_image
                ),
            },
        )

    def _superseded(self, submission: Submission) -> Optional[Submission]:
        """Return the stored document when a review or resubmission has replaced this run."""
        current = self.submissions.get(submission.id)
        if current is None:
            return None
        if current.status is not SubmissionStatus.pending or _decision_marks(
            current
        ) != _decision_marks(submission):
            logger.info(
                "Discarding validation result for submission %s: now %s (%s)",
                submission.id,
                current.status.value,
                current.status_message,
            )
            return current
        return None

    def _persist(self, submission: Submission, outcome: Outcome) -> Submission:
        current = self._superseded(submission)
        if current is not None:
            return current
        if outcome.status is SubmissionStatus.rejected:
            logger.info("Submission %s rejected: %s", submission.id, outcome.message)
        return self.submissions.update(
            submission.id,
            status=outcome.status,
            status_message=outcome.message,
            **outcome.fields,
        )

    def _mark_error(self, submission: Submission) -> Optional[Submission]:
        submission_id = submission.id
        try:
            current = self._superseded(submission)
            if current is not None:
                return current
            return self.submissions.update(
                submission_id,
                status=SubmissionStatus.error,
                status_message=INTERNAL_ERROR_MESSAGE,
            )
        except Exception:
            logger.exception("Could not record error state for submission %s", submission_id)
            return None
