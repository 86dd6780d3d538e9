"""Discussion board endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_gate
from app.core.ids import parse_id
from app.database import get_db
from app.models import DiscussionCategory
from app.schemas import (
    CommentCreate,
    ThreadCreate,
    ThreadEnvelope,
    ThreadList,
    ThreadRead,
    ThreadSort,
    UpvoteRequest,
)
from app.services.discussions import (
    add_comment,
    create_thread,
    get_thread,
    list_threads,
    serialize_thread,
)
from app.services.moderation import ModerationGate
from app.services.toggles import toggle_upvote

router = APIRouter(prefix="/discussions", tags=["discussions"])


def _envelope(thread) -> ThreadEnvelope:
    return ThreadEnvelope(thread=ThreadRead.model_validate(serialize_thread(thread)))


@router.get("", response_model=ThreadList)
def read_threads(
    category: DiscussionCategory | None = Query(default=None),
    sort: ThreadSort = Query(default="newest"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db),
) -> ThreadList:
    threads, total = list_threads(
        db, category=category, sort=sort, page=page, page_size=page_size
    )
    return ThreadList(
        threads=[ThreadRead.model_validate(serialize_thread(thread)) for thread in threads],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=ThreadEnvelope, status_code=status.HTTP_201_CREATED)
def open_thread(
    payload: ThreadCreate,
    db: Session = Depends(get_db),
    gate: ModerationGate = Depends(get_gate),
) -> ThreadEnvelope:
    return _envelope(create_thread(payload, gate, db))


@router.patch("/{thread_id}", response_model=ThreadEnvelope)
def upvote_thread(
    thread_id: int,
    payload: UpvoteRequest,
    db: Session = Depends(get_db),
) -> ThreadEnvelope:
    """Toggle the caller's upvote on the thread."""

    thread = get_thread(thread_id, db)
    toggle_upvote(thread, parse_id(payload.user_id, "user id"), db)
    return _envelope(get_thread(thread_id, db))


@router.post(
    "/{thread_id}/comments",
    response_model=ThreadEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def comment_on_thread(
    thread_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    gate: ModerationGate = Depends(get_gate),
) -> ThreadEnvelope:
    return _envelope(add_comment(thread_id, payload, gate, db))
