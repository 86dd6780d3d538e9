"""Schemas related to chat messages and the direct-message inbox."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, AnyHttpUrl, Field, constr, model_validator

from app.models.enums import ConversationAction, MessageScope
from app.schemas.base import CamelModel
from app.schemas.users import PublicUser


class ReactionRead(CamelModel):
    user_id: int
    emoji: str


class ReplyToRead(CamelModel):
    """Snapshot of the message being replied to, as it was at reply time."""

    id: int
    content: str | None = None
    sender_name: str


class MessageRead(CamelModel):
    """Serialized representation of a chat message."""

    id: int
    content: str | None = None
    sender_id: int
    sender_name: str
    scope: MessageScope
    branch: str | None = None
    year: int | None = None
    recipient_id: int | None = None
    reply_to: ReplyToRead | None = None
    reactions: list[ReactionRead] = Field(default_factory=list)
    sticker: str | None = None
    created_at: datetime


class ReplyReference(CamelModel):
    """Reference to the message being replied to."""

    id: int = Field(..., validation_alias=AliasChoices("id", "_id"))


class MessageCreate(CamelModel):
    """Payload for posting a message into any scope."""

    content: str | None = None
    sticker: AnyHttpUrl | None = None
    sender_id: constr(strip_whitespace=True, min_length=1)
    scope: MessageScope
    qualifier: str | None = Field(
        default=None,
        description="Branch name for branch scope, year number for year scope, peer id for dm scope",
    )
    branch: str | None = None
    year: int | None = None
    recipient_id: str | None = None
    reply_to: ReplyReference | None = None

    @model_validator(mode="after")
    def ensure_scope_qualifier(self) -> "MessageCreate":
        if self.scope == MessageScope.BRANCH and not self.target_branch:
            raise ValueError("Branch is required for branch chat")
        if self.scope == MessageScope.YEAR and self.target_year is None:
            raise ValueError("Year is required for year chat")
        if self.scope == MessageScope.DM and not self.target_recipient:
            raise ValueError("Recipient is required for direct messages")
        return self

    @property
    def target_branch(self) -> str | None:
        value = self.branch or self.qualifier
        return value.strip() if value and value.strip() else None

    @property
    def target_year(self) -> int | None:
        if self.year is not None:
            return self.year
        if self.qualifier is None:
            return None
        try:
            return int(self.qualifier)
        except ValueError:
            return None

    @property
    def target_recipient(self) -> str | None:
        value = self.recipient_id or self.qualifier
        return value.strip() if value and value.strip() else None


class MessageAction(CamelModel):
    """Payload for mutating an existing message."""

    action: Literal["react"]
    user_id: constr(strip_whitespace=True, min_length=1)
    emoji: constr(strip_whitespace=True, min_length=1, max_length=32)


class MessageFeed(CamelModel):
    """Scoped message listing plus community counters."""

    messages: list[MessageRead]
    online_count: int = 0
    total_users: int = 0
    total_messages: int = 0


class ConversationRead(CamelModel):
    """Derived summary of the direct-message exchange with one peer."""

    peer_id: int
    peer: PublicUser | None = None
    last_message: MessageRead
    unread_count: int = 0
    pinned: bool = False


class ConversationInbox(CamelModel):
    conversations: list[ConversationRead]
    total_unread: int = 0


class MessageDeleted(CamelModel):
    message: str = "Message deleted"


class ConversationPreferenceRequest(CamelModel):
    """Payload for pinning, unpinning or deleting a conversation, or blocking its peer."""

    user_id: constr(strip_whitespace=True, min_length=1)
    target_id: constr(strip_whitespace=True, min_length=1)
    action: ConversationAction


class ConversationPreferenceResult(CamelModel):
    success: bool = True
    message: str
