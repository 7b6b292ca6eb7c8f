"""Registry data models — public catalog entries and search."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Optional

from extreg.submissions.models import Submission

INSTALL_COMMAND_TEMPLATE = "gemini extensions install {repo_url}"


@dataclass
class RegistryEntry:
    """The public, trusted projection of an approved submission.

    ``id`` always equals the id of the submission it was approved from.
    """

    # Identity
    id: str
    name: str
    description: str = ""
    version: str = ""

    # Classification
    category: str = "tool"
    tags: list[str] = field(default_factory=list)
    associated_tools: list[str] = field(default_factory=list)

    # Source
    repo_url: str = ""
    manifest_url: Optional[str] = None
    image_url: Optional[str] = None
    install_command: str = ""

    # Provenance
    submitted_by: str = ""
    submitted_by_email: str = ""
    submitted_at: str = ""
    approved_by: str = ""
    approved_at: str = ""

    @classmethod
    def from_submission(cls, submission: Submission, approved_by: str, approved_at: str) -> "RegistryEntry":
        return cls(
            id=submission.id,
            name=submission.name,
            description=submission.description,
            version=submission.version,
            category=submission.category.value,
            tags=list(submission.tags),
            associated_tools=list(submission.associated_tools),
            repo_url=submission.repo_url,
            manifest_url=submission.manifest_url,
            image_url=submission.image_url,
            install_command=INSTALL_COMMAND_TEMPLATE.format(repo_url=submission.repo_url),
            submitted_by=submission.submitted_by,
            submitted_by_email=submission.submitted_by_email,
            submitted_at=submission.submitted_at,
            approved_by=approved_by,
            approved_at=approved_at,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "RegistryEntry":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SearchQuery:
    """Query for searching the registry."""

    text: str = ""
    tags: list[str] = field(default_factory=list)
    category: str = ""


@dataclass
class SearchResult:
    """Result of a registry search."""

    entries: list[RegistryEntry] = field(default_factory=list)
    total_count: int = 0
    query: SearchQuery = field(default_factory=SearchQuery)
