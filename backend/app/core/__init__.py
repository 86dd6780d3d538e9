"""Core utilities for the campus backend."""

from .errors import (
    CapacityError,
    ForbiddenError,
    InternalError,
    InvalidRequestError,
    ModerationRejection,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from .ids import parse_id, parse_optional_id

__all__ = [
    "ServiceError",
    "InvalidRequestError",
    "CapacityError",
    "ModerationRejection",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "InternalError",
    "parse_id",
    "parse_optional_id",
]
