"""Submission workflow: state machine and derived fields.

State progression: draft -> pending_review -> approved -> published

- draft -> pending_review: the author submits a titled, non-empty piece.
- pending_review -> approved: the partner leaves non-empty feedback.
- approved -> published: the author shares it publicly. Sharing twice is a no-op.
- approved -> pending_review: only when edits are configured to reset approval.

Every transition either succeeds or raises, leaving the submission untouched.
Edits append a version; prior versions are never rewritten or removed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from academy.errors import InvalidTransitionError, MissingFeedbackError, MissingFieldsError

EXCERPT_LENGTH = 150
WORDS_PER_MINUTE = 200


class SubmissionState(str, Enum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    PUBLISHED = "published"


VALID_TRANSITIONS: dict[SubmissionState, list[SubmissionState]] = {
    SubmissionState.DRAFT: [SubmissionState.PENDING_REVIEW],
    SubmissionState.PENDING_REVIEW: [SubmissionState.APPROVED],
    SubmissionState.APPROVED: [SubmissionState.PUBLISHED, SubmissionState.PENDING_REVIEW],
    SubmissionState.PUBLISHED: [],
}


def validate_transition(current: SubmissionState, target: SubmissionState) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is allowed."""
    valid = VALID_TRANSITIONS.get(current, [])
    if target not in valid:
        msg = (
            f"Invalid transition: {current.value} -> {target.value}. "
            f"Valid transitions: {[s.value for s in valid]}"
        )
        raise InvalidTransitionError(msg)


def compute_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    return content[:length]


def count_words(content: str) -> int:
    return len(content.split())


def compute_read_time(content: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimated reading time in whole minutes, rounded up."""
    return math.ceil(count_words(content) / words_per_minute)


def read_time_label(minutes: int) -> str:
    return f"{minutes} min read"


@dataclass
class Version:
    content: str
    saved_at: str


@dataclass
class Submission:
    id: str
    title: str
    author_id: str
    author: str
    challenge_id: str | None
    challenge: str
    content: str
    created_at: str
    versions: list[Version] = field(default_factory=list)
    state: SubmissionState = SubmissionState.DRAFT
    validated_by_partner: bool = False
    is_public: bool = False
    excerpt: str = ""
    read_time: int = 0
    likes: int = 0
    comment_count: int = 0
    views: int = 0
    comments: list[dict[str, Any]] = field(default_factory=list)
    feedback: list[dict[str, Any]] = field(default_factory=list)
    published_at: str | None = None

    def refresh_derived(
        self,
        excerpt_length: int = EXCERPT_LENGTH,
        words_per_minute: int = WORDS_PER_MINUTE,
    ) -> None:
        """Recompute excerpt and read time from the live content."""
        self.excerpt = compute_excerpt(self.content, excerpt_length)
        self.read_time = compute_read_time(self.content, words_per_minute)

    # --- Document mapping ---

    def to_document(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "authorId": self.author_id,
            "author": self.author,
            "challengeId": self.challenge_id,
            "challenge": self.challenge,
            "content": self.content,
            "createdAt": self.created_at,
            "versions": [{"content": v.content, "savedAt": v.saved_at} for v in self.versions],
            "state": self.state.value,
            "validatedByPartner": self.validated_by_partner,
            "isPublic": self.is_public,
            "excerpt": self.excerpt,
            "readTime": self.read_time,
            "likes": self.likes,
            "commentCount": self.comment_count,
            "views": self.views,
            "comments": list(self.comments),
            "feedback": list(self.feedback),
            "publishedAt": self.published_at,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Submission:
        return cls(
            id=doc["id"],
            title=doc["title"],
            author_id=doc.get("authorId", ""),
            author=doc.get("author", "Anonymous"),
            challenge_id=doc.get("challengeId"),
            challenge=doc.get("challenge", ""),
            content=doc.get("content", ""),
            created_at=doc.get("createdAt", ""),
            versions=[Version(content=v["content"], saved_at=v["savedAt"]) for v in doc.get("versions", [])],
            state=SubmissionState(doc.get("state", SubmissionState.DRAFT.value)),
            validated_by_partner=doc.get("validatedByPartner", False),
            is_public=doc.get("isPublic", False),
            excerpt=doc.get("excerpt", ""),
            read_time=doc.get("readTime", 0),
            likes=doc.get("likes", 0),
            comment_count=doc.get("commentCount", 0),
            views=doc.get("views", 0),
            comments=list(doc.get("comments", [])),
            feedback=list(doc.get("feedback", [])),
            published_at=doc.get("publishedAt"),
        )


# --- Transitions ---


def require_title_and_content(title: str, content: str) -> None:
    if not title or not title.strip() or not content or not content.strip():
        msg = "Please enter both title and content"
        raise MissingFieldsError(msg)


def submit(
    *,
    submission_id: str,
    title: str,
    content: str,
    author_id: str,
    author: str,
    challenge_id: str | None,
    challenge: str,
    now: str,
    excerpt_length: int = EXCERPT_LENGTH,
    words_per_minute: int = WORDS_PER_MINUTE,
) -> Submission:
    """Create a submission from a draft and send it for review."""
    require_title_and_content(title, content)

    submission = Submission(
        id=submission_id,
        title=title.strip(),
        author_id=author_id,
        author=author,
        challenge_id=challenge_id,
        challenge=challenge,
        content=content,
        created_at=now,
        versions=[Version(content=content, saved_at=now)],
    )
    validate_transition(submission.state, SubmissionState.PENDING_REVIEW)
    submission.state = SubmissionState.PENDING_REVIEW
    submission.refresh_derived(excerpt_length, words_per_minute)
    return submission


def approve(submission: Submission, feedback: str, now: str, reviewer: str = "") -> None:
    """The partner approves a submission under review."""
    if not feedback or not feedback.strip():
        raise MissingFeedbackError
    validate_transition(submission.state, SubmissionState.APPROVED)
    submission.state = SubmissionState.APPROVED
    submission.validated_by_partner = True
    submission.feedback.append({"text": feedback.strip(), "reviewer": reviewer, "createdAt": now})


def share(submission: Submission, now: str) -> bool:
    """Make an approved submission public. Returns False if it already was."""
    if submission.is_public:
        return False
    if not submission.validated_by_partner:
        msg = "Submission must be approved by your partner before it can be shared"
        raise InvalidTransitionError(msg)
    validate_transition(submission.state, SubmissionState.PUBLISHED)
    submission.state = SubmissionState.PUBLISHED
    submission.is_public = True
    submission.published_at = now
    return True


def edit(
    submission: Submission,
    content: str,
    now: str,
    *,
    reset_approval: bool = False,
    excerpt_length: int = EXCERPT_LENGTH,
    words_per_minute: int = WORDS_PER_MINUTE,
) -> bool:
    """Save a new version of an unpublished submission.

    With ``reset_approval`` an approved submission goes back to review; without
    it the earlier approval stands. Returns True when the submission re-entered review.
    """
    if not content or not content.strip():
        msg = "Content cannot be empty"
        raise MissingFieldsError(msg)
    if submission.state == SubmissionState.PUBLISHED:
        msg = "Published submissions can no longer be edited"
        raise InvalidTransitionError(msg)

    requeue = reset_approval and submission.state == SubmissionState.APPROVED
    if requeue:
        validate_transition(submission.state, SubmissionState.PENDING_REVIEW)

    submission.versions.append(Version(content=content, saved_at=now))
    submission.content = content
    submission.refresh_derived(excerpt_length, words_per_minute)

    if requeue:
        submission.state = SubmissionState.PENDING_REVIEW
        submission.validated_by_partner = False
    return requeue
