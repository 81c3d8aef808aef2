"""Pydantic schemas for submission endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from academy.submissions.workflow import Submission, read_time_label


class PublishRequest(BaseModel):
    title: str = Field("", max_length=200)
    content: str = Field("", max_length=200_000)
    challenge_id: str | None = None


class EditRequest(BaseModel):
    content: str = Field("", max_length=200_000)


class ValidateRequest(BaseModel):
    feedback: str = Field("", max_length=4000)


class VersionResponse(BaseModel):
    content: str
    saved_at: str


class SubmissionResponse(BaseModel):
    id: str
    title: str
    author: str
    author_id: str
    challenge_id: str | None = None
    challenge: str
    content: str
    excerpt: str
    read_time: int
    read_time_label: str
    state: str
    validated_by_partner: bool
    is_public: bool
    likes: int
    comment_count: int
    views: int
    version_count: int
    created_at: str
    published_at: str | None = None

    @classmethod
    def from_submission(cls, submission: Submission) -> SubmissionResponse:
        return cls(
            id=submission.id,
            title=submission.title,
            author=submission.author,
            author_id=submission.author_id,
            challenge_id=submission.challenge_id,
            challenge=submission.challenge,
            content=submission.content,
            excerpt=submission.excerpt,
            read_time=submission.read_time,
            read_time_label=read_time_label(submission.read_time),
            state=submission.state.value,
            validated_by_partner=submission.validated_by_partner,
            is_public=submission.is_public,
            likes=submission.likes,
            comment_count=submission.comment_count,
            views=submission.views,
            version_count=len(submission.versions),
            created_at=submission.created_at,
            published_at=submission.published_at,
        )


class SubmissionListResponse(BaseModel):
    submissions: list[SubmissionResponse]
    total: int


class ShareResponse(BaseModel):
    submission: SubmissionResponse
    shared: bool


class VersionListResponse(BaseModel):
    versions: list[VersionResponse]
