"""Pydantic schemas for feed endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from academy.submissions.workflow import read_time_label


class FeedItemResponse(BaseModel):
    id: str
    title: str
    author: str
    challenge: str
    excerpt: str
    read_time: int
    read_time_label: str
    likes: int
    comment_count: int
    views: int
    published_at: str | None = None
    validated_by_partner: bool = True
    content: str | None = None

    @classmethod
    def from_entry(cls, entry: dict[str, Any], include_content: bool = False) -> FeedItemResponse:
        read_time = entry.get("readTime", 0)
        return cls(
            id=str(entry["id"]),
            title=entry["title"],
            author=entry.get("author", "Anonymous"),
            challenge=entry.get("challenge", ""),
            excerpt=entry.get("excerpt", ""),
            read_time=read_time,
            read_time_label=read_time_label(read_time),
            likes=entry.get("likes", 0),
            comment_count=entry.get("commentCount", 0),
            views=entry.get("views", 0),
            published_at=entry.get("publishedAt"),
            validated_by_partner=entry.get("validatedByPartner", True),
            content=entry.get("content") if include_content else None,
        )


class FeedResponse(BaseModel):
    items: list[FeedItemResponse]
    total: int
    page: int
    per_page: int


class LikeResponse(BaseModel):
    liked: bool
    likes: int


class CommentRequest(BaseModel):
    text: str = Field("", max_length=4000)


class CommentResponse(BaseModel):
    text: str
    author: str
    created_at: str


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
