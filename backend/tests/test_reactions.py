"""Unit tests for reaction and upvote toggles."""

from __future__ import annotations

import pytest

from app.core.errors import InvalidRequestError, NotFoundError
from app.models import DiscussionCategory, DiscussionThread, Message, MessageScope
from app.services.toggles import toggle_reaction, toggle_upvote


@pytest.fixture()
def message(db_session, make_user) -> Message:
    author = make_user("Author")
    message = Message(
        content="Hackathon this weekend",
        sender_id=author.id,
        sender_name=author.name,
        scope=MessageScope.UNIVERSAL,
    )
    db_session.add(message)
    db_session.commit()
    return message


def _pairs(message: Message) -> list[tuple[int, str]]:
    return [(reaction.user_id, reaction.emoji) for reaction in message.reactions]


def test_double_toggle_restores_original_reactions(db_session, make_user, message):
    reactor = make_user()
    before = _pairs(message)

    toggle_reaction(message.id, reactor.id, "👍", db_session)
    updated = toggle_reaction(message.id, reactor.id, "👍", db_session)

    assert _pairs(updated) == before == []


def test_two_users_reacting_with_same_emoji(db_session, make_user, message):
    first = make_user("First")
    second = make_user("Second")

    toggle_reaction(message.id, first.id, "🔥", db_session)
    updated = toggle_reaction(message.id, second.id, "🔥", db_session)
    assert _pairs(updated) == [(first.id, "🔥"), (second.id, "🔥")]

    updated = toggle_reaction(message.id, first.id, "🔥", db_session)
    assert _pairs(updated) == [(second.id, "🔥")]


def test_same_user_can_hold_several_emojis(db_session, make_user, message):
    reactor = make_user()
    toggle_reaction(message.id, reactor.id, "👍", db_session)
    updated = toggle_reaction(message.id, reactor.id, "😂", db_session)
    assert sorted(emoji for _, emoji in _pairs(updated)) == sorted(["👍", "😂"])


def test_reaction_requires_emoji_and_existing_message(db_session, make_user, message):
    reactor = make_user()
    with pytest.raises(InvalidRequestError):
        toggle_reaction(message.id, reactor.id, "  ", db_session)
    with pytest.raises(NotFoundError):
        toggle_reaction(999, reactor.id, "👍", db_session)


def test_upvote_toggle(db_session, make_user):
    author = make_user("Author")
    voter = make_user("Voter")
    thread = DiscussionThread(
        author_id=author.id,
        title="Best DSA resources?",
        content="Looking for recommendations",
        category=DiscussionCategory.PLACEMENT,
        tags=[],
    )
    db_session.add(thread)
    db_session.commit()

    assert toggle_upvote(thread, voter.id, db_session) is True
    assert thread.upvoter_ids == [voter.id]
    assert toggle_upvote(thread, voter.id, db_session) is False
    assert thread.upvoter_ids == []
