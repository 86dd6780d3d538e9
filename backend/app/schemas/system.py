"""Schemas for statistics and client configuration endpoints."""

from app.schemas.base import CamelModel


class StatsRead(CamelModel):
    users: int
    messages: int
    discussions: int


class ChatConfigRead(CamelModel):
    """Runtime chat options the web client needs before it starts polling."""

    poll_interval_seconds: int
    history_limit: int
    max_message_length: int
    max_pinned_conversations: int
    reaction_emojis: list[str]
