"""HTTP endpoints for chat messages and the direct-message inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_gate, touch_viewer
from app.core.errors import InvalidRequestError
from app.core.ids import parse_id, parse_optional_id
from app.database import get_db
from app.models import MessageScope
from app.schemas import (
    ConversationInbox,
    ConversationRead,
    MessageAction,
    MessageCreate,
    MessageDeleted,
    MessageFeed,
    MessageRead,
)
from app.services.conversations import build_inbox
from app.services.messages import delete_message, list_messages, post_message
from app.services.moderation import ModerationGate
from app.services.presence import community_counters
from app.services.toggles import toggle_reaction

router = APIRouter(prefix="/messages", tags=["messages"])

CONVERSATIONS_SCOPE = "conversations"


def _resolve_scope(scope: str | None) -> MessageScope:
    if not scope:
        raise InvalidRequestError("Invalid query parameters")
    try:
        return MessageScope(scope.strip().lower())
    except ValueError:
        raise InvalidRequestError(f"Unknown chat scope: {scope}") from None


@router.get("", response_model=MessageFeed | ConversationInbox)
def read_messages(
    scope: str | None = Query(default=None),
    legacy_type: str | None = Query(default=None, alias="type"),
    qualifier: str | None = Query(default=None),
    branch: str | None = Query(default=None),
    year: str | None = Query(default=None),
    viewer_id: str | None = Query(default=None, alias="viewerId"),
    peer_id: str | None = Query(default=None, alias="peerId"),
    db: Session = Depends(get_db),
) -> MessageFeed | ConversationInbox:
    """List a scope's recent messages, or the viewer's inbox for ``scope=conversations``."""

    requested = scope or legacy_type
    if requested == CONVERSATIONS_SCOPE:
        if not viewer_id:
            raise InvalidRequestError("viewerId is required for conversations")
        viewer = touch_viewer(viewer_id, db, required=True)
        summaries, total_unread = build_inbox(viewer, db)
        db.commit()
        return ConversationInbox(
            conversations=[ConversationRead.model_validate(summary) for summary in summaries],
            total_unread=total_unread,
        )

    message_scope = _resolve_scope(requested)
    viewer = touch_viewer(viewer_id, db, required=message_scope == MessageScope.DM)
    page = list_messages(
        message_scope,
        db,
        qualifier=qualifier or branch or year,
        viewer_id=viewer,
        peer_id=parse_optional_id(peer_id, "peer id"),
    )
    db.commit()
    counters = community_counters(db)
    return MessageFeed(
        messages=[MessageRead.model_validate(message) for message in page.messages],
        online_count=counters.online_count,
        total_users=counters.total_users,
        total_messages=page.total,
    )


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def create_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    gate: ModerationGate = Depends(get_gate),
) -> MessageRead:
    message = post_message(payload, gate, db)
    return MessageRead.model_validate(message)


@router.patch("/{message_id}", response_model=MessageRead)
def update_message(
    message_id: int,
    payload: MessageAction,
    db: Session = Depends(get_db),
) -> MessageRead:
    """Apply an action to a message; ``react`` toggles the caller's emoji."""

    message = toggle_reaction(message_id, parse_id(payload.user_id, "user id"), payload.emoji, db)
    return MessageRead.model_validate(message)


@router.delete("/{message_id}", response_model=MessageDeleted)
def remove_message(
    message_id: int,
    user_id: str | None = Query(default=None, alias="userId"),
    db: Session = Depends(get_db),
) -> MessageDeleted:
    delete_message(message_id, user_id, db)
    return MessageDeleted()
