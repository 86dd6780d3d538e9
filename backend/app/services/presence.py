"""Presence tracking driven by client polling."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import User, utcnow


@dataclass(slots=True)
class CommunityCounters:
    online_count: int
    total_users: int


def touch_presence(user_id: int | None, db: Session, now: datetime | None = None) -> bool:
    """Mark the user as active now. Returns False when no such user exists."""

    if user_id is None:
        return False
    result = db.execute(
        update(User).where(User.id == user_id).values(last_active=now or utcnow())
    )
    return result.rowcount > 0


def count_online(db: Session, now: datetime | None = None) -> int:
    """Users whose last poll falls within the presence window."""

    settings = get_settings()
    cutoff = (now or utcnow()) - timedelta(seconds=settings.presence_window_seconds)
    stmt = select(func.count(User.id)).where(User.last_active >= cutoff)
    return db.execute(stmt).scalar_one()


def community_counters(db: Session, now: datetime | None = None) -> CommunityCounters:
    total_users = db.execute(select(func.count(User.id))).scalar_one()
    return CommunityCounters(online_count=count_online(db, now), total_users=total_users)
