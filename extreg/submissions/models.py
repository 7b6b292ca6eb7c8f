"""Submission domain models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SubmissionStatus(str, Enum):
    """Lifecycle states of a submission.

    ``rejected`` and ``error`` are terminal unless the submitter resubmits;
    ``approved`` is terminal.
    """

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    error = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not SubmissionStatus.pending


class Category(str, Enum):
    persona = "persona"
    tool = "tool"


@dataclass
class Submission:
    """A user-proposed extension awaiting or having completed review."""

    id: str
    repo_url: str = ""
    category: Category = Category.tool
    name: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    associated_tools: list[str] = field(default_factory=list)
    image_url: Optional[str] = None
    submitted_by: str = ""
    submitted_by_email: str = ""
    status: SubmissionStatus = SubmissionStatus.pending
    status_message: str = ""
    manifest_url: Optional[str] = None
    version: str = ""
    submitted_at: str = ""
    updated_at: str = ""
    approved_at: str = ""
    approved_by: str = ""
    rejected_at: str = ""
    rejected_by: str = ""
    resubmitted_at: str = ""
    registry_id: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.status, str):
            self.status = SubmissionStatus(self.status)
        if isinstance(self.category, str):
            self.category = Category(self.category.lower())
        if self.category is not Category.persona:
            self.associated_tools = []

    @classmethod
    def from_dict(cls, data: dict) -> "Submission":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        # Documents written before validation may carry no status.
        if not values.get("status"):
            values["status"] = SubmissionStatus.pending
        return cls(**values)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["status"] = self.status.value
        d["category"] = self.category.value
        return d
