"""Database models package."""

from .base import Base
from .chat import (
    DirectReadMarker,
    Message,
    MessageReaction,
    PinnedConversation,
    ReplySnapshot,
    User,
    UserBlock,
    utcnow,
)
from .discussions import DiscussionComment, DiscussionThread, DiscussionUpvote
from .enums import ConversationAction, DiscussionCategory, MessageScope, UserRole

__all__ = [
    "Base",
    "User",
    "UserBlock",
    "PinnedConversation",
    "DirectReadMarker",
    "Message",
    "MessageReaction",
    "ReplySnapshot",
    "DiscussionThread",
    "DiscussionUpvote",
    "DiscussionComment",
    "ConversationAction",
    "DiscussionCategory",
    "MessageScope",
    "UserRole",
    "utcnow",
]
