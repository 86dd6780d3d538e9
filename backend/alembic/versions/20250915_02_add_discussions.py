"""add discussion threads

Revision ID: 20250915_02
Revises: 20250901_01
Create Date: 2025-09-15 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision = "20250915_02"
down_revision = "20250901_01"
branch_labels = None
depends_on = None


DISCUSSION_CATEGORY = sa.Enum(
    "BRANCH",
    "YEAR",
    "PLACEMENT",
    "GENERAL",
    "SWE",
    "AI",
    "ML",
    "DATASCIENCE",
    "WEBDEV",
    "APPDEV",
    "CYBERSECURITY",
    "BLOCKCHAIN",
    "CLOUD",
    "DEVOPS",
    name="discussion_category",
)
TIMESTAMP = sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql", "mariadb")


def _now_default():
    if op.get_bind().dialect.name in {"mysql", "mariadb"}:
        return sa.text("CURRENT_TIMESTAMP(6)")
    return sa.func.now()


def upgrade() -> None:
    op.create_table(
        "discussion_threads",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "author_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", DISCUSSION_CATEGORY, nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            TIMESTAMP,
            server_default=_now_default(),
            nullable=False,
        ),
        mysql_charset="utf8mb4",
    )
    op.create_index(
        "ix_discussion_threads_category", "discussion_threads", ["category", "created_at"]
    )

    op.create_table(
        "discussion_upvotes",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "thread_id",
            sa.Integer(),
            sa.ForeignKey("discussion_threads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            TIMESTAMP,
            server_default=_now_default(),
            nullable=False,
        ),
        sa.UniqueConstraint("thread_id", "user_id", name="uq_discussion_upvote"),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "discussion_comments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "thread_id",
            sa.Integer(),
            sa.ForeignKey("discussion_threads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "author_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            TIMESTAMP,
            server_default=_now_default(),
            nullable=False,
        ),
        mysql_charset="utf8mb4",
    )


def downgrade() -> None:
    op.drop_table("discussion_comments")
    op.drop_table("discussion_upvotes")
    op.drop_index("ix_discussion_threads_category", table_name="discussion_threads")
    op.drop_table("discussion_threads")
    DISCUSSION_CATEGORY.drop(op.get_bind(), checkfirst=True)
