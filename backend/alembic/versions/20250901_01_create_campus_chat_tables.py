"""create campus chat tables

Revision ID: 20250901_01
Revises:
Create Date: 2025-09-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision = "20250901_01"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLE = sa.Enum("student", "admin", "alumni", name="user_role")
MESSAGE_SCOPE = sa.Enum("universal", "branch", "year", "dm", name="message_scope")
TIMESTAMP = sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql", "mariadb")


def _now_default():
    if op.get_bind().dialect.name in {"mysql", "mariadb"}:
        return sa.text("CURRENT_TIMESTAMP(6)")
    return sa.func.now()


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        TIMESTAMP,
        server_default=_now_default(),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("external_uid", sa.String(length=128), nullable=False, unique=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False, server_default="student"),
        sa.Column("branch", sa.String(length=64), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("interests", sa.JSON(), nullable=False),
        sa.Column("github_url", sa.String(length=512), nullable=True),
        sa.Column("linkedin_url", sa.String(length=512), nullable=True),
        sa.Column("portfolio_url", sa.String(length=512), nullable=True),
        sa.Column("profile_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("accepted_guidelines", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_active", TIMESTAMP, nullable=True),
        _created_at(),
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_users_last_active", "users", ["last_active"])

    op.create_table(
        "user_blocks",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "blocked_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint("user_id", "blocked_user_id", name="uq_user_block_pair"),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "pinned_conversations",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "peer_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "pinned_at",
            TIMESTAMP,
            server_default=_now_default(),
            nullable=False,
        ),
        sa.UniqueConstraint("user_id", "peer_id", name="uq_pinned_conversation_pair"),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "dm_read_markers",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "peer_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "last_read_at",
            TIMESTAMP,
            server_default=_now_default(),
            nullable=False,
        ),
        sa.UniqueConstraint("user_id", "peer_id", name="uq_dm_read_marker_pair"),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column(
            "sender_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_name", sa.String(length=128), nullable=False),
        sa.Column("scope", MESSAGE_SCOPE, nullable=False),
        sa.Column("branch", sa.String(length=64), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column(
            "recipient_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("reply_to_id", sa.Integer(), nullable=True),
        sa.Column("reply_to_content", sa.Text(), nullable=True),
        sa.Column("reply_to_sender_name", sa.String(length=128), nullable=True),
        sa.Column("sticker", sa.String(length=1024), nullable=True),
        _created_at(),
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_messages_scope_created_at", "messages", ["scope", "created_at"])
    op.create_index(
        "ix_messages_dm_pair", "messages", ["sender_id", "recipient_id", "created_at"]
    )
    op.create_index("ix_messages_recipient", "messages", ["recipient_id", "created_at"])

    op.create_table(
        "message_reactions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "message_id",
            sa.Integer(),
            sa.ForeignKey("messages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("emoji", sa.String(length=32), nullable=False),
        _created_at(),
        sa.UniqueConstraint("message_id", "user_id", "emoji", name="uq_message_reaction"),
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_reactions_message", "message_reactions", ["message_id"])


def downgrade() -> None:
    op.drop_index("ix_reactions_message", table_name="message_reactions")
    op.drop_table("message_reactions")
    op.drop_index("ix_messages_recipient", table_name="messages")
    op.drop_index("ix_messages_dm_pair", table_name="messages")
    op.drop_index("ix_messages_scope_created_at", table_name="messages")
    op.drop_table("messages")
    op.drop_table("dm_read_markers")
    op.drop_table("pinned_conversations")
    op.drop_table("user_blocks")
    op.drop_index("ix_users_last_active", table_name="users")
    op.drop_table("users")
    MESSAGE_SCOPE.drop(op.get_bind(), checkfirst=True)
    USER_ROLE.drop(op.get_bind(), checkfirst=True)
