"""Set-membership toggles: emoji reactions on messages and upvotes on threads."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import InvalidRequestError
from app.models import DiscussionThread, DiscussionUpvote, Message, MessageReaction
from app.services.messages import get_message
from app.services.profiles import get_user

logger = logging.getLogger(__name__)


def toggle_reaction(message_id: int, user_id: int, emoji: str, db: Session) -> Message:
    """Add the (user, emoji) reaction if absent, remove it otherwise.

    Reactions of other users and other emojis of the same user are untouched.
    """

    emoji = emoji.strip()
    if not emoji:
        raise InvalidRequestError("Emoji is required")
    message = get_message(message_id, db)
    get_user(user_id, db)

    stmt = select(MessageReaction).where(
        MessageReaction.message_id == message.id,
        MessageReaction.user_id == user_id,
        MessageReaction.emoji == emoji,
    )
    existing = db.execute(stmt).scalar_one_or_none()
    if existing is not None:
        db.delete(existing)
        db.commit()
    else:
        db.add(MessageReaction(message_id=message.id, user_id=user_id, emoji=emoji))
        try:
            db.commit()
        except IntegrityError:
            # a concurrent request added the same reaction first
            db.rollback()
            logger.info("Reaction %r on message %s already present", emoji, message.id)

    db.expire(message)
    return get_message(message.id, db)


def toggle_upvote(thread: DiscussionThread, user_id: int, db: Session) -> bool:
    """Flip the user's upvote on ``thread``. Returns True when the upvote now exists."""

    get_user(user_id, db)
    stmt = select(DiscussionUpvote).where(
        DiscussionUpvote.thread_id == thread.id,
        DiscussionUpvote.user_id == user_id,
    )
    existing = db.execute(stmt).scalar_one_or_none()
    if existing is not None:
        db.delete(existing)
        db.commit()
        db.expire(thread)
        return False

    db.add(DiscussionUpvote(thread_id=thread.id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
    db.expire(thread)
    return True
