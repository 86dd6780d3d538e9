from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, Timestamp
from app.models.enums import MessageScope, UserRole


def utcnow() -> datetime:
    """Timezone-aware current time with microsecond precision."""

    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ReplySnapshot:
    """Copy of a reply target recorded when the reply was written.

    The values are never refreshed: later edits to the target message or to
    its sender's name do not show up in the reply.
    """

    id: int
    content: str | None
    sender_name: str


class User(Base):
    """Campus member synced from the external identity provider."""

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_last_active", "last_active"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    external_uid: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=UserRole.STUDENT,
        nullable=False,
    )
    branch: Mapped[str | None] = mapped_column(String(64))
    year: Mapped[int | None] = mapped_column(Integer)
    bio: Mapped[str | None] = mapped_column(Text)
    skills: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    interests: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    github_url: Mapped[str | None] = mapped_column(String(512))
    linkedin_url: Mapped[str | None] = mapped_column(String(512))
    portfolio_url: Mapped[str | None] = mapped_column(String(512))
    profile_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    accepted_guidelines: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_active: Mapped[datetime | None] = mapped_column(Timestamp)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    blocks: Mapped[list["UserBlock"]] = relationship(
        back_populates="user",
        foreign_keys="UserBlock.user_id",
        cascade="all, delete-orphan",
    )
    pinned_conversations: Mapped[list["PinnedConversation"]] = relationship(
        back_populates="user",
        foreign_keys="PinnedConversation.user_id",
        cascade="all, delete-orphan",
        order_by="PinnedConversation.position",
    )
    read_markers: Mapped[list["DirectReadMarker"]] = relationship(
        back_populates="user",
        foreign_keys="DirectReadMarker.user_id",
        cascade="all, delete-orphan",
    )

    @property
    def blocked_user_ids(self) -> list[int]:
        return [block.blocked_user_id for block in self.blocks]

    @property
    def pinned_peer_ids(self) -> list[int]:
        return [pin.peer_id for pin in self.pinned_conversations]


class UserBlock(Base):
    """One entry of a user's block list."""

    __tablename__ = "user_blocks"
    __table_args__ = (
        UniqueConstraint("user_id", "blocked_user_id", name="uq_user_block_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    blocked_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    user: Mapped[User] = relationship(back_populates="blocks", foreign_keys=[user_id])


class PinnedConversation(Base):
    """Direct conversation pinned to the top of a user's inbox."""

    __tablename__ = "pinned_conversations"
    __table_args__ = (
        UniqueConstraint("user_id", "peer_id", name="uq_pinned_conversation_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    peer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    pinned_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    user: Mapped[User] = relationship(back_populates="pinned_conversations", foreign_keys=[user_id])


class DirectReadMarker(Base):
    """Last time a user opened their direct conversation with a peer."""

    __tablename__ = "dm_read_markers"
    __table_args__ = (UniqueConstraint("user_id", "peer_id", name="uq_dm_read_marker_pair"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    peer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    last_read_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    user: Mapped[User] = relationship(back_populates="read_markers", foreign_keys=[user_id])


class Message(Base):
    """Chat message in one of the four audience scopes."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_scope_created_at", "scope", "created_at"),
        Index("ix_messages_dm_pair", "sender_id", "recipient_id", "created_at"),
        Index("ix_messages_recipient", "recipient_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    content: Mapped[str | None] = mapped_column(Text)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sender_name: Mapped[str] = mapped_column(String(128), nullable=False)
    scope: Mapped[MessageScope] = mapped_column(
        SAEnum(
            MessageScope,
            name="message_scope",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    branch: Mapped[str | None] = mapped_column(String(64))
    year: Mapped[int | None] = mapped_column(Integer)
    recipient_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reply_to_id: Mapped[int | None] = mapped_column(Integer)
    reply_to_content: Mapped[str | None] = mapped_column(Text)
    reply_to_sender_name: Mapped[str | None] = mapped_column(String(128))
    sticker: Mapped[str | None] = mapped_column(String(1024))
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    sender: Mapped[User] = relationship(foreign_keys=[sender_id])
    reactions: Mapped[list["MessageReaction"]] = relationship(
        back_populates="message",
        cascade="all, delete-orphan",
        order_by="MessageReaction.id",
    )

    @property
    def reply_to(self) -> ReplySnapshot | None:
        if self.reply_to_id is None:
            return None
        return ReplySnapshot(
            id=self.reply_to_id,
            content=self.reply_to_content,
            sender_name=self.reply_to_sender_name or "",
        )

    def record_reply(self, snapshot: ReplySnapshot) -> None:
        self.reply_to_id = snapshot.id
        self.reply_to_content = snapshot.content
        self.reply_to_sender_name = snapshot.sender_name


class MessageReaction(Base):
    """Individual emoji reaction for a message."""

    __tablename__ = "message_reactions"
    __table_args__ = (
        UniqueConstraint("message_id", "user_id", "emoji", name="uq_message_reaction"),
        Index("ix_reactions_message", "message_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[int] = mapped_column(
        ForeignKey("messages.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    emoji: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    message: Mapped[Message] = relationship(back_populates="reactions")
