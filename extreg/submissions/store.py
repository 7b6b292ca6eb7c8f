"""Submission persistence on top of the document store."""

from __future__ import annotations

from typing import Optional

from extreg.store import DocumentStore
from extreg.submissions.models import Category, Submission, SubmissionStatus, utcnow_iso

COLLECTION = "submissions"
DEFAULT_IMAGE = "/file.svg"


class SubmissionStore:
    """CRUD and queries for the ``submissions`` collection."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def create(
        self,
        repo_url: str,
        category: str,
        submitted_by: str,
        submitted_by_email: str,
        name: str = "",
        description: str = "",
        tags: Optional[list[str] | str] = None,
        associated_tools: Optional[list[str]] = None,
        image_url: Optional[str] = None,
    ) -> Submission:
        """Record a new submission in its initial ``pending`` state."""
        if isinstance(tags, str):
            tags = split_tags(tags)
        category = Category(category.lower())
        submission = Submission(
            id="",
            repo_url=repo_url,
            category=category,
            name=name,
            description=description,
            tags=list(tags or []),
            associated_tools=list(associated_tools or []),
            image_url=image_url or DEFAULT_IMAGE,
            submitted_by=submitted_by,
            submitted_by_email=submitted_by_email,
            status=SubmissionStatus.pending,
            submitted_at=utcnow_iso(),
        )
        data = submission.to_dict()
        del data["id"]
        doc = self._store.create(COLLECTION, data)
        return Submission.from_dict(doc)

    def get(self, submission_id: str) -> Optional[Submission]:
        doc = self._store.get(COLLECTION, submission_id)
        return Submission.from_dict(doc) if doc else None

    def update(self, submission_id: str, **fields) -> Submission:
        """Merge ``fields`` into the submission and stamp ``updated_at``."""
        for key, value in list(fields.items()):
            if isinstance(value, SubmissionStatus):
                fields[key] = value.value
        fields.setdefault("updated_at", utcnow_iso())
        return Submission.from_dict(self._store.update(COLLECTION, submission_id, fields))

    def list_for_submitter(self, user_id: str) -> list[Submission]:
        """A submitter's own submissions, newest first."""
        docs = self._store.query(
            COLLECTION, order_by="submitted_at", descending=True, submitted_by=user_id
        )
        return [Submission.from_dict(d) for d in docs]

    def list(self, status: Optional[SubmissionStatus | str] = None) -> list[Submission]:
        if status is None:
            docs = self._store.query(COLLECTION, order_by="submitted_at", descending=True)
        else:
            value = status.value if isinstance(status, SubmissionStatus) else status
            docs = self._store.query(
                COLLECTION, order_by="submitted_at", descending=True, status=value
            )
        return [Submission.from_dict(d) for d in docs]


def split_tags(raw: str) -> list[str]:
    """Split a comma-separated tag string, dropping empty items."""
    return [t.strip() for t in raw.split(",") if t.strip()]
