"""Direct-message inbox derived from message history."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.models import DirectReadMarker, Message, MessageScope, PinnedConversation, User


@dataclass(slots=True)
class ConversationSummary:
    peer_id: int
    peer: User | None
    last_message: Message
    unread_count: int
    pinned: bool


def _latest_per_peer(viewer_id: int, db: Session) -> list[tuple[int, int]]:
    """(message id, peer id) of the newest direct message per peer, newest first."""

    peer_expr = case(
        (Message.sender_id == viewer_id, Message.recipient_id),
        else_=Message.sender_id,
    )
    ranked = (
        select(
            Message.id.label("message_id"),
            Message.created_at.label("created_at"),
            peer_expr.label("peer_id"),
            func.row_number()
            .over(
                partition_by=peer_expr,
                order_by=(Message.created_at.desc(), Message.id.desc()),
            )
            .label("rank"),
        )
        .where(
            Message.scope == MessageScope.DM,
            or_(Message.sender_id == viewer_id, Message.recipient_id == viewer_id),
        )
        .subquery()
    )
    stmt = (
        select(ranked.c.message_id, ranked.c.peer_id)
        .where(ranked.c.rank == 1, ranked.c.peer_id.is_not(None))
        .order_by(ranked.c.created_at.desc(), ranked.c.message_id.desc())
    )
    return [(row.message_id, row.peer_id) for row in db.execute(stmt)]


def count_unread(viewer_id: int, peer_ids: list[int], db: Session) -> dict[int, int]:
    """Messages each peer sent the viewer after the viewer last opened that conversation."""

    if not peer_ids:
        return {}
    marker_join = and_(
        DirectReadMarker.user_id == viewer_id,
        DirectReadMarker.peer_id == Message.sender_id,
    )
    stmt = (
        select(Message.sender_id, func.count(Message.id))
        .outerjoin(DirectReadMarker, marker_join)
        .where(
            Message.scope == MessageScope.DM,
            Message.recipient_id == viewer_id,
            Message.sender_id.in_(peer_ids),
            or_(
                DirectReadMarker.id.is_(None),
                Message.created_at > DirectReadMarker.last_read_at,
            ),
        )
        .group_by(Message.sender_id)
    )
    return {sender_id: count for sender_id, count in db.execute(stmt)}


def build_inbox(viewer_id: int, db: Session) -> tuple[list[ConversationSummary], int]:
    """Summaries of every direct conversation of ``viewer_id`` and the total unread count.

    Pinned conversations come first in pin order, the rest by most recent
    message.
    """

    latest = _latest_per_peer(viewer_id, db)
    if not latest:
        return [], 0

    message_ids = [message_id for message_id, _ in latest]
    peer_ids = [peer_id for _, peer_id in latest]

    messages = {
        message.id: message
        for message in db.execute(
            select(Message)
            .where(Message.id.in_(message_ids))
            .options(selectinload(Message.reactions))
        ).scalars()
    }
    peers = {
        user.id: user
        for user in db.execute(select(User).where(User.id.in_(peer_ids))).scalars()
    }
    unread = count_unread(viewer_id, peer_ids, db)
    pin_order = {
        peer_id: index
        for index, peer_id in enumerate(
            db.execute(
                select(PinnedConversation.peer_id)
                .where(PinnedConversation.user_id == viewer_id)
                .order_by(PinnedConversation.position, PinnedConversation.id)
            ).scalars()
        )
    }

    summaries = [
        ConversationSummary(
            peer_id=peer_id,
            peer=peers.get(peer_id),
            last_message=messages[message_id],
            unread_count=unread.get(peer_id, 0),
            pinned=peer_id in pin_order,
        )
        for message_id, peer_id in latest
    ]
    # stable sort keeps recency order among unpinned conversations
    summaries.sort(key=lambda summary: (0, pin_order[summary.peer_id]) if summary.pinned else (1, 0))
    total_unread = sum(summary.unread_count for summary in summaries)
    return summaries, total_unread
