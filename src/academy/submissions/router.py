"""Submission workflow endpoints."""

from __future__ import annotations

import random

from fastapi import APIRouter, Depends

from academy.auth.service import Principal
from academy.config import Settings
from academy.dependencies import get_current_principal, get_document_store, get_rng, get_settings_dep
from academy.store.base import DocumentStore
from academy.submissions.schemas import (
    EditRequest,
    PublishRequest,
    ShareResponse,
    SubmissionListResponse,
    SubmissionResponse,
    ValidateRequest,
    VersionListResponse,
    VersionResponse,
)
from academy.submissions.service import SubmissionService

router = APIRouter(prefix="/api/v1/submissions", tags=["Submissions"])


def get_submission_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings_dep),
    rng: random.Random = Depends(get_rng),
) -> SubmissionService:
    return SubmissionService(store, settings, rng)


@router.post("", response_model=SubmissionResponse, status_code=201)
async def publish_endpoint(
    body: PublishRequest,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Submit a piece for private review by the accountability partner."""
    submission = await svc.publish(principal, body.title, body.content, body.challenge_id)
    return SubmissionResponse.from_submission(submission)


@router.get("", response_model=SubmissionListResponse)
async def list_mine_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> SubmissionListResponse:
    submissions = await svc.list_mine(principal)
    return SubmissionListResponse(
        submissions=[SubmissionResponse.from_submission(s) for s in submissions],
        total=len(submissions),
    )


@router.get("/review-queue", response_model=SubmissionListResponse)
async def review_queue_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> SubmissionListResponse:
    """Submissions waiting for the partner's feedback."""
    submissions = await svc.pending_review(principal)
    return SubmissionListResponse(
        submissions=[SubmissionResponse.from_submission(s) for s in submissions],
        total=len(submissions),
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission_endpoint(
    submission_id: str,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    return SubmissionResponse.from_submission(await svc.get(principal, submission_id))


@router.patch("/{submission_id}", response_model=SubmissionResponse)
async def edit_endpoint(
    submission_id: str,
    body: EditRequest,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Save a new version."""
    submission = await svc.edit_draft(principal, submission_id, body.content)
    return SubmissionResponse.from_submission(submission)


@router.get("/{submission_id}/versions", response_model=VersionListResponse)
async def versions_endpoint(
    submission_id: str,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> VersionListResponse:
    versions = await svc.versions(principal, submission_id)
    return VersionListResponse(versions=[VersionResponse(**v) for v in versions])


@router.post("/{submission_id}/validate", response_model=SubmissionResponse)
async def validate_endpoint(
    submission_id: str,
    body: ValidateRequest,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Partner approval with written feedback."""
    submission = await svc.validate(principal, submission_id, body.feedback)
    return SubmissionResponse.from_submission(submission)


@router.post("/{submission_id}/share", response_model=ShareResponse)
async def share_endpoint(
    submission_id: str,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> ShareResponse:
    """Share an approved submission with the community."""
    submission, shared = await svc.share_publicly(principal, submission_id)
    return ShareResponse(submission=SubmissionResponse.from_submission(submission), shared=shared)


@router.delete("/{submission_id}", status_code=204)
async def delete_endpoint(
    submission_id: str,
    principal: Principal | None = Depends(get_current_principal),
    svc: SubmissionService = Depends(get_submission_service),
) -> None:
    await svc.delete(principal, submission_id)
