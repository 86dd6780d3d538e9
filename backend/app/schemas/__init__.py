"""Pydantic schemas for API payloads."""

from .discussions import (
    CommentCreate,
    CommentRead,
    ThreadCreate,
    ThreadEnvelope,
    ThreadList,
    ThreadRead,
    ThreadSort,
    UpvoteRequest,
)
from .messages import (
    ConversationInbox,
    ConversationPreferenceRequest,
    ConversationPreferenceResult,
    ConversationRead,
    MessageAction,
    MessageCreate,
    MessageDeleted,
    MessageFeed,
    MessageRead,
    ReactionRead,
    ReplyReference,
    ReplyToRead,
)
from .system import ChatConfigRead, StatsRead
from .users import PublicUser, SocialLinks, UserEnvelope, UserProfileRead, UserProfileUpdate, UserSync

__all__ = [
    "PublicUser",
    "SocialLinks",
    "UserEnvelope",
    "UserProfileRead",
    "UserProfileUpdate",
    "UserSync",
    "MessageRead",
    "MessageCreate",
    "MessageAction",
    "MessageFeed",
    "MessageDeleted",
    "ReactionRead",
    "ReplyReference",
    "ReplyToRead",
    "ConversationRead",
    "ConversationInbox",
    "ConversationPreferenceRequest",
    "ConversationPreferenceResult",
    "ThreadCreate",
    "ThreadRead",
    "ThreadEnvelope",
    "ThreadList",
    "ThreadSort",
    "CommentCreate",
    "CommentRead",
    "UpvoteRequest",
    "ChatConfigRead",
    "StatsRead",
]
