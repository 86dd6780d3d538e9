"""Application service helpers."""

from .conversations import ConversationSummary, build_inbox
from .discussions import add_comment, create_thread, get_thread, list_threads, serialize_thread
from .messages import delete_message, get_message, list_messages, post_message
from .moderation import (
    HttpModerationGate,
    LexiconModerationGate,
    ModerationGate,
    get_moderation_gate,
    moderate,
)
from .preferences import apply_preference, delete_conversation, pin_conversation, unpin_conversation
from .presence import community_counters, count_online, touch_presence
from .toggles import toggle_reaction, toggle_upvote

__all__ = [
    "ConversationSummary",
    "build_inbox",
    "add_comment",
    "create_thread",
    "get_thread",
    "list_threads",
    "serialize_thread",
    "delete_message",
    "get_message",
    "list_messages",
    "post_message",
    "HttpModerationGate",
    "LexiconModerationGate",
    "ModerationGate",
    "get_moderation_gate",
    "moderate",
    "apply_preference",
    "delete_conversation",
    "pin_conversation",
    "unpin_conversation",
    "community_counters",
    "count_online",
    "touch_presence",
    "toggle_reaction",
    "toggle_upvote",
]
