"""Message store covering universal, branch, year and direct-message scopes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.core.errors import (
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.ids import parse_id
from app.models import (
    DirectReadMarker,
    Message,
    MessageScope,
    ReplySnapshot,
    User,
    utcnow,
)
from app.schemas import MessageCreate
from app.services.moderation import ModerationGate, moderate
from app.services.profiles import get_user, is_blocked

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass(slots=True)
class MessagePage:
    """Most recent messages of a scope in ascending order, plus the uncapped total."""

    messages: list[Message]
    total: int


def get_message(message_id: int, db: Session) -> Message:
    stmt = (
        select(Message)
        .where(Message.id == message_id)
        .options(selectinload(Message.reactions))
    )
    message = db.execute(stmt).scalar_one_or_none()
    if message is None:
        raise NotFoundError("Message not found")
    return message


def dm_pair_clause(user_id: int, peer_id: int):
    """Filter matching direct messages exchanged between two users in either direction."""

    return and_(
        Message.scope == MessageScope.DM,
        or_(
            and_(Message.sender_id == user_id, Message.recipient_id == peer_id),
            and_(Message.sender_id == peer_id, Message.recipient_id == user_id),
        ),
    )


def _scope_filter(
    scope: MessageScope,
    qualifier: str | None,
    viewer_id: int | None,
    peer_id: int | None,
):
    if scope == MessageScope.UNIVERSAL:
        return Message.scope == MessageScope.UNIVERSAL
    if scope == MessageScope.BRANCH:
        if not qualifier:
            raise InvalidRequestError("Branch is required for branch chat")
        return and_(Message.scope == MessageScope.BRANCH, Message.branch == qualifier)
    if scope == MessageScope.YEAR:
        try:
            year = int(qualifier) if qualifier is not None else None
        except ValueError:
            year = None
        if year is None:
            raise InvalidRequestError("Year is required for year chat")
        return and_(Message.scope == MessageScope.YEAR, Message.year == year)
    if viewer_id is None or peer_id is None:
        raise InvalidRequestError("Both viewer and peer are required for direct messages")
    return dm_pair_clause(viewer_id, peer_id)


def mark_conversation_read(
    viewer_id: int, peer_id: int, db: Session, now: datetime | None = None
) -> None:
    """Record that ``viewer_id`` has seen everything ``peer_id`` sent so far."""

    stmt = select(DirectReadMarker).where(
        DirectReadMarker.user_id == viewer_id,
        DirectReadMarker.peer_id == peer_id,
    )
    marker = db.execute(stmt).scalar_one_or_none()
    if marker is None:
        marker = DirectReadMarker(user_id=viewer_id, peer_id=peer_id)
        db.add(marker)
    marker.last_read_at = now or utcnow()


def list_messages(
    scope: MessageScope,
    db: Session,
    *,
    qualifier: str | None = None,
    viewer_id: int | None = None,
    peer_id: int | None = None,
) -> MessagePage:
    """Return the newest messages of a scope, oldest first.

    Not a pure read: fetching a direct conversation moves the viewer's read
    marker for that peer to now, which is what zeroes its unread count in the
    inbox. The caller commits. Both parties of a direct conversation must
    exist, otherwise ``NotFoundError`` is raised.
    """

    criteria = _scope_filter(scope, qualifier, viewer_id, peer_id)
    if scope == MessageScope.DM:
        get_user(viewer_id, db)
        try:
            get_user(peer_id, db)
        except NotFoundError:
            raise NotFoundError("Peer not found") from None
    stmt = (
        select(Message)
        .where(criteria)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(settings.chat_history_limit)
        .options(selectinload(Message.reactions))
    )
    newest_first = db.execute(stmt).scalars().all()
    total = db.execute(select(func.count(Message.id)).where(criteria)).scalar_one()

    if scope == MessageScope.DM:
        mark_conversation_read(viewer_id, peer_id, db)

    return MessagePage(messages=list(reversed(newest_first)), total=total)


def _ensure_dm_allowed(sender: User, recipient_id: int, db: Session) -> User:
    if recipient_id == sender.id:
        raise InvalidRequestError("You cannot send a direct message to yourself")
    try:
        recipient = get_user(recipient_id, db)
    except NotFoundError:
        raise NotFoundError("Recipient not found") from None
    if is_blocked(sender.id, recipient.id, db):
        raise ForbiddenError("You have blocked this user. Unblock them to send messages.")
    if is_blocked(recipient.id, sender.id, db):
        raise ForbiddenError("You cannot message this user")
    return recipient


def _ensure_scope_membership(sender: User, scope: MessageScope, payload: MessageCreate) -> None:
    """Senders may only post into their own branch or year; legacy profiles without one are exempt."""

    if scope == MessageScope.BRANCH and sender.branch:
        if sender.branch != payload.target_branch:
            raise ForbiddenError("You can only post in your own branch chat")
    if scope == MessageScope.YEAR and sender.year is not None:
        if sender.year != payload.target_year:
            raise ForbiddenError("You can only post in your own year chat")


def _snapshot_reply(reply_to_id: int, db: Session) -> ReplySnapshot:
    target = db.get(Message, reply_to_id)
    if target is None:
        raise NotFoundError("Reply target not found")
    return ReplySnapshot(
        id=target.id,
        content=target.content,
        sender_name=target.sender_name,
    )


def post_message(payload: MessageCreate, gate: ModerationGate, db: Session) -> Message:
    """Validate and persist a new message.

    Checks run in a fixed order: content presence, sender existence, direct
    message block rules, moderation, then branch/year membership.
    """

    content = payload.content.strip() if payload.content else None
    sticker = str(payload.sticker) if payload.sticker is not None else None
    if not content and not sticker:
        raise InvalidRequestError("Message content or sticker is required")
    if content and len(content) > settings.chat_message_max_length:
        raise InvalidRequestError(
            f"Message exceeds maximum length of {settings.chat_message_max_length} characters"
        )

    sender_id = parse_id(payload.sender_id, "sender id")
    sender = get_user(sender_id, db)

    recipient: User | None = None
    if payload.scope == MessageScope.DM:
        recipient_id = parse_id(payload.target_recipient, "recipient id")
        recipient = _ensure_dm_allowed(sender, recipient_id, db)

    moderate(gate, content, "chat")
    _ensure_scope_membership(sender, payload.scope, payload)

    message = Message(
        content=content,
        sender_id=sender.id,
        sender_name=sender.name,
        scope=payload.scope,
        sticker=sticker,
    )
    if payload.scope == MessageScope.BRANCH:
        message.branch = payload.target_branch
    elif payload.scope == MessageScope.YEAR:
        message.year = payload.target_year
    elif recipient is not None:
        message.recipient_id = recipient.id

    if payload.reply_to is not None:
        message.record_reply(_snapshot_reply(payload.reply_to.id, db))

    db.add(message)
    db.commit()
    return get_message(message.id, db)


def delete_message(message_id: int, requester_id: str | None, db: Session) -> None:
    """Delete a message on behalf of its sender.

    Ownership is asserted by the caller: ``requester_id`` is compared as a
    string with the stored sender id.
    """

    if not requester_id:
        raise UnauthorizedError("Unauthorized")
    message = get_message(message_id, db)
    if str(message.sender_id) != requester_id.strip():
        raise ForbiddenError("Forbidden")
    db.delete(message)
    db.commit()
    logger.info("Message %s deleted by its sender", message_id)
