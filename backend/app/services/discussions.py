"""Discussion board: threads, upvotes and comments."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFoundError
from app.core.ids import parse_id
from app.models import (
    DiscussionCategory,
    DiscussionComment,
    DiscussionThread,
    DiscussionUpvote,
)
from app.schemas import CommentCreate, ThreadCreate, ThreadSort
from app.services.moderation import ModerationGate, moderate
from app.services.profiles import get_user

logger = logging.getLogger(__name__)

_THREAD_LOAD_OPTIONS = (
    selectinload(DiscussionThread.author),
    selectinload(DiscussionThread.upvotes),
    selectinload(DiscussionThread.comments).selectinload(DiscussionComment.author),
)


def get_thread(thread_id: int, db: Session) -> DiscussionThread:
    stmt = (
        select(DiscussionThread)
        .where(DiscussionThread.id == thread_id)
        .options(*_THREAD_LOAD_OPTIONS)
    )
    thread = db.execute(stmt).scalar_one_or_none()
    if thread is None:
        raise NotFoundError("Thread not found")
    return thread


def list_threads(
    db: Session,
    *,
    category: DiscussionCategory | None = None,
    sort: ThreadSort = "newest",
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[DiscussionThread], int]:
    """Return one page of threads and the number of threads matching the filter."""

    criteria = []
    if category is not None:
        criteria.append(DiscussionThread.category == category)

    total = db.execute(
        select(func.count(DiscussionThread.id)).where(*criteria)
    ).scalar_one()

    stmt = select(DiscussionThread).where(*criteria).options(*_THREAD_LOAD_OPTIONS)
    if sort == "top":
        upvote_counts = (
            select(
                DiscussionUpvote.thread_id,
                func.count(DiscussionUpvote.id).label("upvote_count"),
            )
            .group_by(DiscussionUpvote.thread_id)
            .subquery()
        )
        stmt = stmt.outerjoin(
            upvote_counts, upvote_counts.c.thread_id == DiscussionThread.id
        ).order_by(
            func.coalesce(upvote_counts.c.upvote_count, 0).desc(),
            DiscussionThread.created_at.desc(),
        )
    else:
        stmt = stmt.order_by(DiscussionThread.created_at.desc(), DiscussionThread.id.desc())

    stmt = stmt.offset((page - 1) * page_size).limit(page_size)
    return list(db.execute(stmt).scalars()), total


def create_thread(payload: ThreadCreate, gate: ModerationGate, db: Session) -> DiscussionThread:
    author = get_user(parse_id(payload.author_id, "author id"), db)
    moderate(gate, payload.title, "discussion")
    moderate(gate, payload.content, "discussion")

    thread = DiscussionThread(
        author_id=author.id,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        tags=payload.tags,
    )
    db.add(thread)
    db.commit()
    logger.info("User %s opened discussion %s", author.id, thread.id)
    return get_thread(thread.id, db)


def add_comment(
    thread_id: int, payload: CommentCreate, gate: ModerationGate, db: Session
) -> DiscussionThread:
    thread = get_thread(thread_id, db)
    author = get_user(parse_id(payload.user_id, "user id"), db)
    moderate(gate, payload.content, "comment")

    db.add(DiscussionComment(thread_id=thread.id, author_id=author.id, content=payload.content))
    db.commit()
    return get_thread(thread.id, db)


def serialize_thread(thread: DiscussionThread) -> dict:
    upvoters = thread.upvoter_ids
    return {
        "id": thread.id,
        "author_id": thread.author_id,
        "author_name": thread.author.name if thread.author else None,
        "title": thread.title,
        "content": thread.content,
        "category": thread.category,
        "tags": list(thread.tags or []),
        "upvotes": upvoters,
        "upvote_count": len(upvoters),
        "comments": [
            {
                "id": comment.id,
                "author_id": comment.author_id,
                "author_name": comment.author.name if comment.author else None,
                "content": comment.content,
                "created_at": comment.created_at,
            }
            for comment in thread.comments
        ],
        "created_at": thread.created_at,
    }
