"""Per-viewer conversation preferences: pins, conversation deletion and blocks."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.errors import CapacityError, InvalidRequestError
from app.core.ids import parse_id
from app.models import (
    ConversationAction,
    DirectReadMarker,
    Message,
    MessageReaction,
    PinnedConversation,
    User,
)
from app.services.messages import dm_pair_clause
from app.services.profiles import block_user, get_user, unblock_user

logger = logging.getLogger(__name__)


def pin_conversation(viewer: User, peer_id: int, db: Session) -> str:
    if peer_id in viewer.pinned_peer_ids:
        return "Already pinned"
    limit = get_settings().max_pinned_conversations
    if len(viewer.pinned_conversations) >= limit:
        logger.info("User %s hit the pin limit of %s", viewer.id, limit)
        raise CapacityError(f"You can pin up to {limit} conversations.")
    get_user(peer_id, db)

    next_position = db.execute(
        select(func.coalesce(func.max(PinnedConversation.position), -1)).where(
            PinnedConversation.user_id == viewer.id
        )
    ).scalar_one() + 1
    viewer.pinned_conversations.append(
        PinnedConversation(peer_id=peer_id, position=next_position)
    )
    db.commit()
    return "Conversation pinned"


def unpin_conversation(viewer: User, peer_id: int, db: Session) -> str:
    db.execute(
        delete(PinnedConversation).where(
            PinnedConversation.user_id == viewer.id,
            PinnedConversation.peer_id == peer_id,
        )
    )
    db.commit()
    return "Conversation unpinned"


def delete_conversation(viewer: User, peer_id: int, db: Session) -> str:
    """Remove the whole direct exchange with ``peer_id`` for both parties.

    Messages, their reactions, the viewer's pin and the viewer's read marker
    are removed in one transaction.
    """

    pair = dm_pair_clause(viewer.id, peer_id)
    try:
        db.execute(
            delete(MessageReaction).where(
                MessageReaction.message_id.in_(select(Message.id).where(pair))
            )
        )
        removed = db.execute(delete(Message).where(pair)).rowcount
        db.execute(
            delete(PinnedConversation).where(
                PinnedConversation.user_id == viewer.id,
                PinnedConversation.peer_id == peer_id,
            )
        )
        db.execute(
            delete(DirectReadMarker).where(
                DirectReadMarker.user_id == viewer.id,
                DirectReadMarker.peer_id == peer_id,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Deleting conversation %s <-> %s failed", viewer.id, peer_id)
        raise
    logger.info("User %s deleted conversation with %s (%s messages)", viewer.id, peer_id, removed)
    return "Conversation deleted"


def _block(viewer: User, peer_id: int, db: Session) -> str:
    return "User blocked" if block_user(viewer, peer_id, db) else "User already blocked"


def _unblock(viewer: User, peer_id: int, db: Session) -> str:
    unblock_user(viewer, peer_id, db)
    return "User unblocked"


_ACTIONS = {
    ConversationAction.PIN: pin_conversation,
    ConversationAction.UNPIN: unpin_conversation,
    ConversationAction.DELETE: delete_conversation,
    ConversationAction.BLOCK: _block,
    ConversationAction.UNBLOCK: _unblock,
}


def apply_preference(
    user_id: str, target_id: str, action: ConversationAction, db: Session
) -> str:
    """Apply ``action`` for the viewer ``user_id`` against ``target_id``; returns a status message."""

    viewer_id = parse_id(user_id, "user id")
    peer_id = parse_id(target_id, "target id")
    if viewer_id == peer_id:
        raise InvalidRequestError("Invalid target")
    viewer = get_user(viewer_id, db)
    return _ACTIONS[action](viewer, peer_id, db)
