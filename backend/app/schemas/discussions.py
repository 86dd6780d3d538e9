"""Schemas for discussion threads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, Field, constr, field_validator

from app.models.enums import DiscussionCategory
from app.schemas.base import CamelModel


class CommentRead(CamelModel):
    id: int
    author_id: int
    author_name: str | None = None
    content: str
    created_at: datetime


class ThreadRead(CamelModel):
    """Discussion thread with its comments and upvoters."""

    id: int
    author_id: int
    author_name: str | None = None
    title: str
    content: str
    category: DiscussionCategory
    tags: list[str] = Field(default_factory=list)
    upvotes: list[int] = Field(default_factory=list)
    upvote_count: int = 0
    comments: list[CommentRead] = Field(default_factory=list)
    created_at: datetime


class ThreadEnvelope(CamelModel):
    thread: ThreadRead


class ThreadList(CamelModel):
    threads: list[ThreadRead]
    total: int
    page: int
    page_size: int


class ThreadCreate(CamelModel):
    """Payload for opening a new discussion thread."""

    author_id: constr(strip_whitespace=True, min_length=1) = Field(
        ..., validation_alias=AliasChoices("authorId", "author_id", "userId", "user_id")
    )
    title: constr(strip_whitespace=True, min_length=1, max_length=256)
    content: constr(strip_whitespace=True, min_length=1, max_length=10000)
    category: DiscussionCategory = DiscussionCategory.GENERAL
    tags: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        if isinstance(value, str):
            return [tag for tag in value.split(",")]
        return value

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in value:
            cleaned = tag.strip().lower()
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        return seen


class UpvoteRequest(CamelModel):
    user_id: constr(strip_whitespace=True, min_length=1)


class CommentCreate(CamelModel):
    user_id: constr(strip_whitespace=True, min_length=1)
    content: constr(strip_whitespace=True, min_length=1, max_length=2000)


ThreadSort = Literal["newest", "top"]
