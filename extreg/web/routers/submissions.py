"""Submissions router -- intake, listing, and resubmission.

Creating or resubmitting a submission schedules the validation pipeline as
a background task, which stands in for a document-created trigger.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status

from extreg.auth.models import Identity
from extreg.context import RegistryContext
from extreg.errors import InvalidArgument, NotFound, PermissionDenied
from extreg.submissions.models import Category, Submission
from extreg.web.middleware.auth import get_bearer_token, get_context, get_current_identity
from extreg.web.models.api import (
    CreateSubmissionRequest,
    SubmissionResponse,
    SuccessResponse,
)

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


def submission_response(s: Submission) -> SubmissionResponse:
    """Convert a Submission dataclass to a SubmissionResponse."""
    return SubmissionResponse(**s.to_dict())


@router.post(
    "",
    response_model=SubmissionResponse,
    summary="Submit an extension for review",
    status_code=status.HTTP_201_CREATED,
)
async def create_submission(
    body: CreateSubmissionRequest,
    background_tasks: BackgroundTasks,
    identity: Identity = Depends(get_current_identity),
    context: RegistryContext = Depends(get_context),
):
    """Record a submission and queue automated validation."""
    if body.category.lower() not in {c.value for c in Category}:
        raise InvalidArgument(f"category must be one of: {', '.join(c.value for c in Category)}")

    submission = context.submissions.create(
        repo_url=body.repo_url,
        category=body.category,
        submitted_by=identity.uid,
        submitted_by_email=identity.email,
        name=body.name,
        description=body.description,
        tags=body.tags,
        associated_tools=body.associated_tools,
        image_url=body.image_url,
    )
    background_tasks.add_task(context.pipeline.run, submission.id)
    return submission_response(submission)


@router.get(
    "/mine",
    response_model=list[SubmissionResponse],
    summary="List the caller's submissions",
)
async def list_my_submissions(
    identity: Identity = Depends(get_current_identity),
    context: RegistryContext = Depends(get_context),
):
    """Return the caller's submissions, newest first."""
    return [submission_response(s) for s in context.submissions.list_for_submitter(identity.uid)]


@router.get(
    "/{submission_id}",
    response_model=SubmissionResponse,
    summary="Get one submission",
)
async def get_submission(
    submission_id: str,
    identity: Identity = Depends(get_current_identity),
    context: RegistryContext = Depends(get_context),
):
    """Submitters see their own submissions; administrators see all."""
    submission = context.submissions.get(submission_id)
    if submission is None:
        raise NotFound(f"Submission {submission_id} not found")
    if submission.submitted_by != identity.uid and not identity.is_admin:
        raise PermissionDenied("Not your submission")
    return submission_response(submission)


@router.post(
    "/{submission_id}/resubmit",
    response_model=SuccessResponse,
    summary="Resubmit a rejected submission",
)
async def resubmit_submission(
    submission_id: str,
    background_tasks: BackgroundTasks,
    token: Optional[str] = Depends(get_bearer_token),
    context: RegistryContext = Depends(get_context),
):
    """Reset the submission to pending and run validation again."""
    result = context.review.resubmit(token, submission_id)
    background_tasks.add_task(context.pipeline.run, submission_id)
    return SuccessResponse(**result)
