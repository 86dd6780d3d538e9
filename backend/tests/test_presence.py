"""Tests for presence tracking and community counters."""

from __future__ import annotations

from datetime import timedelta

from app.models import utcnow
from app.services.presence import community_counters, count_online, touch_presence


def test_touch_presence_marks_user_online(db_session, make_user):
    user = make_user()
    assert count_online(db_session) == 0

    assert touch_presence(user.id, db_session) is True
    db_session.commit()

    assert count_online(db_session) == 1


def test_touch_presence_for_unknown_user(db_session):
    assert touch_presence(12345, db_session) is False
    assert touch_presence(None, db_session) is False


def test_online_window_excludes_stale_users(db_session, make_user):
    now = utcnow()
    make_user(last_active=now - timedelta(seconds=30))
    make_user(last_active=now - timedelta(seconds=299))
    make_user(last_active=now - timedelta(minutes=10))
    make_user()

    counters = community_counters(db_session, now=now)

    assert counters.online_count == 2
    assert counters.total_users == 4
