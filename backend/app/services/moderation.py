"""Moderation gate consulted before user text is persisted.

The gate is an external collaborator: callers only rely on
``validate_content(text, context)`` returning normally for acceptable text and
raising :class:`~app.core.errors.ModerationRejection` otherwise. The reason
carried by the rejection is shown to the user unmodified.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Protocol

import httpx

from app.config import get_settings
from app.core.errors import InternalError, ModerationRejection

logger = logging.getLogger(__name__)

_CONTEXT_NOUNS: dict[str, str] = {
    "chat": "message",
    "discussion": "post",
    "comment": "comment",
}


class ModerationGate(Protocol):
    """Interface every moderation backend implements."""

    def validate_content(self, text: str, context: str) -> None:
        """Return if ``text`` is acceptable in ``context``, raise ``ModerationRejection`` otherwise."""


class LexiconModerationGate:
    """Rejects text containing any of a fixed list of banned terms."""

    def __init__(self, banned_terms: Iterable[str]) -> None:
        terms = sorted({term.strip().lower() for term in banned_terms if term.strip()})
        self._pattern = (
            re.compile(r"\b(" + "|".join(re.escape(term) for term in terms) + r")\b", re.IGNORECASE)
            if terms
            else None
        )

    def validate_content(self, text: str, context: str) -> None:
        if self._pattern is None or not text:
            return
        if self._pattern.search(text):
            noun = _CONTEXT_NOUNS.get(context, "content")
            raise ModerationRejection(f"Your {noun} contains inappropriate language.")


class HttpModerationGate:
    """Delegates classification to a remote service.

    The service receives ``{"text": ..., "context": ...}`` and answers with
    ``{"allowed": bool, "reason": str | null}``. Unreachable or malformed
    responses fail closed.
    """

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    def _post(self, payload: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self._url, json=payload, timeout=self._timeout)
        with httpx.Client(timeout=self._timeout) as client:
            return client.post(self._url, json=payload)

    def validate_content(self, text: str, context: str) -> None:
        try:
            response = self._post({"text": text, "context": context})
            response.raise_for_status()
            verdict = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Moderation service call to %s failed", self._url)
            raise InternalError("Content moderation is temporarily unavailable") from exc

        if not isinstance(verdict, dict):
            logger.error("Moderation service returned unexpected payload: %r", verdict)
            raise InternalError("Content moderation is temporarily unavailable")
        if verdict.get("allowed", False):
            return
        reason = verdict.get("reason") or "Content rejected by moderation."
        raise ModerationRejection(str(reason))


@lru_cache(maxsize=1)
def get_moderation_gate() -> ModerationGate:
    """Return the configured gate: the remote classifier when a URL is set, the lexicon otherwise."""

    settings = get_settings()
    if settings.moderation_service_url is not None:
        return HttpModerationGate(
            str(settings.moderation_service_url),
            timeout=settings.moderation_timeout_seconds,
        )
    return LexiconModerationGate(settings.moderation_banned_terms)


def moderate(gate: ModerationGate, text: str | None, context: str) -> None:
    """Run ``gate`` over non-empty ``text``; empty text is never sent."""

    if not text or not text.strip():
        return
    try:
        gate.validate_content(text, context)
    except ModerationRejection as rejection:
        logger.info("Moderation rejected %s content: %s", context, rejection.detail)
        raise
