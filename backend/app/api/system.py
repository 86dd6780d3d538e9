"""Community statistics and runtime chat options for the frontend."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models import DiscussionThread, Message, User
from app.schemas import ChatConfigRead, StatsRead

router = APIRouter(tags=["system"])


@router.get("/stats", response_model=StatsRead)
def read_stats(db: Session = Depends(get_db)) -> StatsRead:
    def count(column) -> int:
        return db.execute(select(func.count(column))).scalar_one()

    return StatsRead(
        users=count(User.id),
        messages=count(Message.id),
        discussions=count(DiscussionThread.id),
    )


@router.get("/config/chat", response_model=ChatConfigRead)
def read_chat_config() -> ChatConfigRead:
    """Expose polling cadence and chat limits."""

    settings = get_settings()
    return ChatConfigRead(
        poll_interval_seconds=settings.chat_poll_interval_seconds,
        history_limit=settings.chat_history_limit,
        max_message_length=settings.chat_message_max_length,
        max_pinned_conversations=settings.max_pinned_conversations,
        reaction_emojis=list(settings.reaction_emojis),
    )
