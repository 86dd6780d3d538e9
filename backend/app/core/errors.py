"""Domain exceptions raised by service functions.

Each exception carries the HTTP status and machine-readable code used by the
handlers registered in :mod:`app.main` to build the error payload.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidRequestError(ServiceError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class CapacityError(InvalidRequestError):
    """A bounded collection is already full."""

    code = "capacity_exceeded"


class ModerationRejection(ServiceError):
    """Content refused by the moderation gate; ``detail`` is the gate's reason."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "moderation_rejected"


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ForbiddenError(ServiceError):
    """Ownership, scope or block mismatch."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InternalError(ServiceError):
    """Storage failure or unexpected condition."""


def error_payload(detail: object, code: str) -> dict[str, object]:
    return {"detail": detail, "error": code}
