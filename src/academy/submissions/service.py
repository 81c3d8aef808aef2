"""Submission service: drives the workflow against the document store.

Each transition loads the submission, applies the pure transition from
``academy.submissions.workflow`` and writes it back, then records the side
effects on the partner thread and the author's profile.
"""

from __future__ import annotations

import random
from typing import Any

import structlog

from academy.auth.service import Principal, require_principal
from academy.catalog.service import challenge_key, get_challenge
from academy.config import Settings
from academy.errors import NotFoundError, PermissionDeniedError
from academy.pairing.service import (
    assign_partner_if_absent,
    dequeue_review,
    enqueue_review,
    post_to_thread,
    review_queue,
)
from academy.store.base import ESSAYS, USERS, DocumentStore, new_document_id, utc_timestamp
from academy.submissions import workflow
from academy.submissions.workflow import Submission

logger = structlog.get_logger()


class SubmissionService:
    """Author-facing submission workflow."""

    def __init__(self, store: DocumentStore, settings: Settings, rng: random.Random | None = None) -> None:
        self.store = store
        self.settings = settings
        self.rng = rng or random.Random()

    async def _load(self, submission_id: str) -> Submission:
        doc = await self.store.read(ESSAYS, submission_id)
        if doc is None or "authorId" not in doc:
            msg = f"Submission {submission_id} not found"
            raise NotFoundError(msg)
        return Submission.from_document(doc)

    async def _load_own(self, principal: Principal, submission_id: str) -> Submission:
        submission = await self._load(submission_id)
        if submission.author_id != principal.user_id:
            msg = "Only the author can do that"
            raise PermissionDeniedError(msg)
        return submission

    async def _save(self, submission: Submission) -> None:
        await self.store.set(ESSAYS, submission.id, submission.to_document())

    # --- Transitions ---

    async def publish(
        self,
        principal: Principal | None,
        title: str,
        content: str,
        challenge_id: str | None = None,
    ) -> Submission:
        """Submit a draft for private review by the author's partner."""
        workflow.require_title_and_content(title, content)
        principal = require_principal(principal)

        challenge_title = "Your Challenge"
        if challenge_id is not None:
            challenge = await get_challenge(self.store, challenge_id)
            challenge_title = challenge.get("title", challenge_title)
            challenge_id = challenge_key(challenge["id"])

        profile = await self.store.read(USERS, principal.user_id) or {}
        submission = workflow.submit(
            submission_id=new_document_id(),
            title=title,
            content=content,
            author_id=principal.user_id,
            author=profile.get("name") or principal.name or "Anonymous",
            challenge_id=challenge_id,
            challenge=challenge_title,
            now=utc_timestamp(),
            excerpt_length=self.settings.excerpt_length,
            words_per_minute=self.settings.words_per_minute,
        )
        await self.store.create(ESSAYS, submission.to_document(), doc_id=submission.id)

        await assign_partner_if_absent(self.store, principal.user_id, self.settings.partner_pool, self.rng)
        await enqueue_review(self.store, principal.user_id, submission.id)
        await post_to_thread(
            self.store,
            principal.user_id,
            f'I\'ll review your essay "{submission.title}" and give you feedback!',
            from_partner=True,
        )
        logger.info("submission_published", submission_id=submission.id, user_id=principal.user_id)
        return submission

    async def validate(self, principal: Principal | None, submission_id: str, feedback: str) -> Submission:
        """Record the partner's approval of a submission under review."""
        principal = require_principal(principal)
        submission = await self._load_own(principal, submission_id)
        partner = (await self.store.read(USERS, principal.user_id) or {}).get("partner") or {}
        workflow.approve(submission, feedback, utc_timestamp(), reviewer=partner.get("name", ""))
        await self._save(submission)

        await dequeue_review(self.store, principal.user_id, submission.id)
        await post_to_thread(
            self.store,
            principal.user_id,
            f'Thanks for the feedback! "{submission.title}" looks great.',
            from_partner=False,
        )
        logger.info("submission_approved", submission_id=submission.id, user_id=principal.user_id)
        return submission

    async def share_publicly(self, principal: Principal | None, submission_id: str) -> tuple[Submission, bool]:
        """Publish an approved submission to the community feed. Idempotent."""
        principal = require_principal(principal)
        submission = await self._load_own(principal, submission_id)
        changed = workflow.share(submission, utc_timestamp())
        if not changed:
            return submission, False

        await self._save(submission)
        profile = await self.store.read(USERS, principal.user_id) or {}
        published = list(profile.get("publishedEssays", []))
        if submission.id not in published:
            await self.store.set(USERS, principal.user_id, {"publishedEssays": [*published, submission.id]}, merge=True)
        logger.info("submission_shared", submission_id=submission.id, user_id=principal.user_id)
        return submission, True

    async def edit_draft(self, principal: Principal | None, submission_id: str, content: str) -> Submission:
        """Save a new version of an unpublished submission."""
        principal = require_principal(principal)
        submission = await self._load_own(principal, submission_id)
        requeued = workflow.edit(
            submission,
            content,
            utc_timestamp(),
            reset_approval=self.settings.reset_approval_on_edit,
            excerpt_length=self.settings.excerpt_length,
            words_per_minute=self.settings.words_per_minute,
        )
        await self._save(submission)

        if requeued:
            await enqueue_review(self.store, principal.user_id, submission.id)
            await post_to_thread(
                self.store,
                principal.user_id,
                f'I\'ll take another look at "{submission.title}" now that you\'ve revised it.',
                from_partner=True,
            )
        logger.info(
            "submission_edited",
            submission_id=submission.id,
            versions=len(submission.versions),
            requeued=requeued,
        )
        return submission

    async def delete(self, principal: Principal | None, submission_id: str) -> None:
        """Remove one of the author's submissions, whatever its state."""
        principal = require_principal(principal)
        submission = await self._load_own(principal, submission_id)
        await self.store.delete(ESSAYS, submission.id)

        if submission.id in await review_queue(self.store, principal.user_id):
            await dequeue_review(self.store, principal.user_id, submission.id)
        profile = await self.store.read(USERS, principal.user_id) or {}
        published = profile.get("publishedEssays", [])
        if submission.id in published:
            remaining = [sid for sid in published if sid != submission.id]
            await self.store.set(USERS, principal.user_id, {"publishedEssays": remaining}, merge=True)
        logger.info("submission_deleted", submission_id=submission.id, user_id=principal.user_id)

    # --- Queries ---

    async def get(self, principal: Principal | None, submission_id: str) -> Submission:
        """Authors see their own submissions in any state; everyone else only public ones."""
        submission = await self._load(submission_id)
        if submission.is_public:
            return submission
        if principal is None or principal.user_id != submission.author_id:
            msg = f"Submission {submission_id} not found"
            raise NotFoundError(msg)
        return submission

    async def list_mine(self, principal: Principal | None) -> list[Submission]:
        principal = require_principal(principal)
        docs = await self.store.query(ESSAYS, {"authorId": principal.user_id}, order_by="createdAt", descending=True)
        return [Submission.from_document(d) for d in docs]

    async def versions(self, principal: Principal | None, submission_id: str) -> list[dict[str, Any]]:
        principal = require_principal(principal)
        submission = await self._load_own(principal, submission_id)
        return [{"content": v.content, "saved_at": v.saved_at} for v in submission.versions]

    async def pending_review(self, principal: Principal | None) -> list[Submission]:
        """Submissions awaiting the partner's review, oldest first."""
        principal = require_principal(principal)
        pending = []
        for submission_id in await review_queue(self.store, principal.user_id):
            doc = await self.store.read(ESSAYS, submission_id)
            if doc is not None:
                pending.append(Submission.from_document(doc))
        return pending
