from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Enum as SAEnum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, Timestamp
from app.models.chat import User, utcnow
from app.models.enums import DiscussionCategory


class DiscussionThread(Base):
    """Discussion board thread with upvotes and an append-only comment list."""

    __tablename__ = "discussion_threads"
    __table_args__ = (Index("ix_discussion_threads_category", "category", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[DiscussionCategory] = mapped_column(
        SAEnum(
            DiscussionCategory,
            name="discussion_category",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    author: Mapped[User] = relationship()
    upvotes: Mapped[list["DiscussionUpvote"]] = relationship(
        back_populates="thread", cascade="all, delete-orphan", order_by="DiscussionUpvote.id"
    )
    comments: Mapped[list["DiscussionComment"]] = relationship(
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="DiscussionComment.created_at",
    )

    @property
    def upvoter_ids(self) -> list[int]:
        return [upvote.user_id for upvote in self.upvotes]


class DiscussionUpvote(Base):
    """Upvote marker, at most one per user and thread."""

    __tablename__ = "discussion_upvotes"
    __table_args__ = (UniqueConstraint("thread_id", "user_id", name="uq_discussion_upvote"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    thread_id: Mapped[int] = mapped_column(
        ForeignKey("discussion_threads.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    thread: Mapped[DiscussionThread] = relationship(back_populates="upvotes")


class DiscussionComment(Base):
    """Comment appended to a discussion thread."""

    __tablename__ = "discussion_comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    thread_id: Mapped[int] = mapped_column(
        ForeignKey("discussion_threads.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    thread: Mapped[DiscussionThread] = relationship(back_populates="comments")
    author: Mapped[User] = relationship()
