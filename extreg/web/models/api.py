"""Pydantic models for API request/response serialization.

These models mirror the extreg dataclasses and provide JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Submission models
# ---------------------------------------------------------------------------


class CreateSubmissionRequest(BaseModel):
    """Intake form for a new extension submission."""

    model_config = ConfigDict(populate_by_name=True)

    repo_url: str = Field("", alias="repoUrl")
    category: str = "tool"
    name: str = ""
    description: str = ""
    tags: Union[list[str], str] = Field(default_factory=list)
    associated_tools: list[str] = Field(default_factory=list, alias="associatedTools")
    image_url: Optional[str] = Field(None, alias="imageUrl")


class SubmissionResponse(BaseModel):
    """Mirrors extreg.submissions.models.Submission."""

    id: str
    repo_url: str = ""
    category: str = "tool"
    name: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    associated_tools: list[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    submitted_by: str = ""
    submitted_by_email: str = ""
    status: str = "pending"
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


class SubmissionIdRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submission_id: str = Field("", alias="submissionId")


class GrantAdminRequest(BaseModel):
    email: str = ""


class SuccessResponse(BaseModel):
    success: bool = True


class ApproveResponse(SuccessResponse):
    model_config = ConfigDict(populate_by_name=True)

    registry_id: str = Field(alias="registryId")


class GrantAdminResponse(SuccessResponse):
    message: str = ""


# ---------------------------------------------------------------------------
# Registry models
# ---------------------------------------------------------------------------


class RegistryEntryResponse(BaseModel):
    """Mirrors extreg.registry.models.RegistryEntry."""

    id: str
    name: str
    description: str = ""
    version: str = ""
    category: str = "tool"
    tags: list[str] = Field(default_factory=list)
    associated_tools: list[str] = Field(default_factory=list)
    repo_url: str = ""
    manifest_url: Optional[str] = None
    image_url: Optional[str] = None
    install_command: str = ""
    submitted_by: str = ""
    submitted_by_email: str = ""
    submitted_at: str = ""
    approved_by: str = ""
    approved_at: str = ""


class SearchQueryRequest(BaseModel):
    """Mirrors extreg.registry.models.SearchQuery."""

    text: str = ""
    tags: list[str] = Field(default_factory=list)
    category: str = ""


class SearchResultResponse(BaseModel):
    """Mirrors extreg.registry.models.SearchResult."""

    entries: list[RegistryEntryResponse] = Field(default_factory=list)
    total_count: int = 0
    query: SearchQueryRequest = Field(default_factory=SearchQueryRequest)


# ---------------------------------------------------------------------------
# Auth models
# ---------------------------------------------------------------------------


class IdentityResponse(BaseModel):
    uid: str
    email: str
    is_admin: bool = False


class ErrorResponse(BaseModel):
    kind: str
    detail: str
