"""Admin router -- review queue and privileged operations."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from extreg.auth.permissions import verify_admin
from extreg.context import RegistryContext
from extreg.submissions.models import SubmissionStatus
from extreg.web.middleware.auth import get_bearer_token, get_context
from extreg.web.models.api import (
    ApproveResponse,
    GrantAdminRequest,
    GrantAdminResponse,
    SubmissionIdRequest,
    SubmissionResponse,
    SuccessResponse,
)
from extreg.web.routers.submissions import submission_response

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get(
    "/submissions",
    response_model=list[SubmissionResponse],
    summary="List submissions for review",
)
async def list_submissions(
    status: Optional[SubmissionStatus] = Query(None, description="Filter by status"),
    token: Optional[str] = Depends(get_bearer_token),
    context: RegistryContext = Depends(get_context),
):
    """Return submissions across all submitters, optionally by status."""
    verify_admin(context.provider, token)
    return [submission_response(s) for s in context.submissions.list(status)]


@router.post(
    "/approve",
    response_model=ApproveResponse,
    response_model_by_alias=True,
    summary="Approve a pending submission",
)
async def approve_submission(
    body: SubmissionIdRequest,
    token: Optional[str] = Depends(get_bearer_token),
    context: RegistryContext = Depends(get_context),
):
    """Publish the submission to the registry."""
    return ApproveResponse(**context.review.approve_submission(token, body.submission_id))


@router.post(
    "/reject",
    response_model=SuccessResponse,
    summary="Reject a submission",
)
async def reject_submission(
    body: SubmissionIdRequest,
    token: Optional[str] = Depends(get_bearer_token),
    context: RegistryContext = Depends(get_context),
):
    return SuccessResponse(**context.review.reject_submission(token, body.submission_id))


@router.post(
    "/grant-admin",
    response_model=GrantAdminResponse,
    summary="Grant the admin claim to an account",
)
async def grant_admin_role(
    body: GrantAdminRequest,
    token: Optional[str] = Depends(get_bearer_token),
    context: RegistryContext = Depends(get_context),
):
    """The grantee must sign in again for the claim to reach their token."""
    return GrantAdminResponse(**context.review.grant_admin_role(token, body.email))
