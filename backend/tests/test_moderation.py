"""Tests for the lexicon and HTTP moderation gates."""

from __future__ import annotations

import json

import httpx
import pytest

from app.core.errors import InternalError, ModerationRejection
from app.services.moderation import HttpModerationGate, LexiconModerationGate, moderate


def test_lexicon_gate_matches_whole_words_case_insensitively():
    gate = LexiconModerationGate(["idiot", "shut up"])

    gate.validate_content("Idiomatic Python is nice", "chat")
    with pytest.raises(ModerationRejection) as excinfo:
        gate.validate_content("Please SHUT UP already", "chat")
    assert excinfo.value.detail == "Your message contains inappropriate language."


@pytest.mark.parametrize(
    ("context", "noun"),
    [("chat", "message"), ("discussion", "post"), ("comment", "comment")],
)
def test_lexicon_gate_reason_names_the_context(context, noun):
    gate = LexiconModerationGate(["moron"])
    with pytest.raises(ModerationRejection) as excinfo:
        gate.validate_content("moron", context)
    assert excinfo.value.detail == f"Your {noun} contains inappropriate language."


def test_empty_lexicon_accepts_everything():
    LexiconModerationGate([]).validate_content("anything goes", "chat")


def test_moderate_skips_blank_text():
    class ExplodingGate:
        def validate_content(self, text, context):
            raise AssertionError("gate must not be called")

    moderate(ExplodingGate(), None, "chat")
    moderate(ExplodingGate(), "   ", "chat")


def _gate_with(handler) -> HttpModerationGate:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpModerationGate("https://moderation.campus.test/check", client=client)


def test_http_gate_posts_text_and_context():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"allowed": True})

    _gate_with(handler).validate_content("hello campus", "comment")
    assert seen == [{"text": "hello campus", "context": "comment"}]


def test_http_gate_surfaces_rejection_reason():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"allowed": False, "reason": "Harassment is not allowed."})

    with pytest.raises(ModerationRejection) as excinfo:
        _gate_with(handler).validate_content("...", "chat")
    assert excinfo.value.detail == "Harassment is not allowed."


def test_http_gate_fails_closed_when_service_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(InternalError):
        _gate_with(handler).validate_content("hello", "chat")


def test_http_gate_fails_closed_on_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(InternalError):
        _gate_with(handler).validate_content("hello", "chat")
