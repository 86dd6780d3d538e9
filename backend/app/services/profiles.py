"""Profile store: identity sync, academic lock and block lists."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import InvalidRequestError, NotFoundError
from app.models import User, UserBlock, UserRole
from app.schemas import UserProfileUpdate, UserSync

logger = logging.getLogger(__name__)

_PROFILE_LOAD_OPTIONS = (
    selectinload(User.blocks),
    selectinload(User.pinned_conversations),
)

_PLAIN_FIELDS = ("name", "role", "bio", "skills", "interests", "accepted_guidelines")


def get_user(user_id: int, db: Session) -> User:
    """Load a user with block list and pins, raising ``NotFoundError`` when absent."""

    stmt = select(User).where(User.id == user_id).options(*_PROFILE_LOAD_OPTIONS)
    user = db.execute(stmt).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


def find_user_by_uid(external_uid: str, db: Session) -> User | None:
    stmt = select(User).where(User.external_uid == external_uid).options(*_PROFILE_LOAD_OPTIONS)
    return db.execute(stmt).scalar_one_or_none()


def sync_user(payload: UserSync, db: Session) -> User:
    """Return the profile for an identity-provider subject, creating it on first sign-in."""

    user = find_user_by_uid(payload.external_uid, db)
    if user is not None:
        return user
    user = User(
        external_uid=payload.external_uid,
        email=payload.email,
        name=payload.name,
        role=UserRole.STUDENT,
        skills=[],
        interests=[],
    )
    db.add(user)
    db.commit()
    logger.info("Created profile %s for subject %s", user.id, payload.external_uid)
    return get_user(user.id, db)


def _apply_updates(user: User, changes: dict) -> None:
    for field in _PLAIN_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(user, field, changes[field])
    links = changes.get("social_links")
    if links is not None:
        user.github_url = links.get("github")
        user.linkedin_url = links.get("linkedin")
        user.portfolio_url = links.get("portfolio")


def _apply_academic_fields(user: User, changes: dict) -> None:
    """Branch and year become immutable once both were supplied in one update."""

    if user.profile_locked:
        return
    branch = changes.get("branch")
    year = changes.get("year")
    if "branch" in changes:
        user.branch = branch
    if "year" in changes:
        user.year = year
    if branch and year:
        user.profile_locked = True


def upsert_profile(external_uid: str, payload: UserProfileUpdate, db: Session) -> User:
    """Update the profile for ``external_uid`` or create it when it does not exist."""

    changes = payload.model_dump(exclude_unset=True)
    user = find_user_by_uid(external_uid, db)
    if user is None:
        if not payload.email:
            raise InvalidRequestError("Email is required for creating a profile")
        if not payload.name:
            raise InvalidRequestError("Name is required for creating a profile")
        user = User(
            external_uid=external_uid,
            email=payload.email,
            name=payload.name,
            skills=[],
            interests=[],
        )
        db.add(user)
    # email and subject id are owned by the identity provider
    changes.pop("email", None)
    _apply_updates(user, changes)
    _apply_academic_fields(user, changes)
    db.commit()
    return get_user(user.id, db)


def delete_user(external_uid: str, db: Session) -> None:
    user = find_user_by_uid(external_uid, db)
    if user is None:
        raise NotFoundError("User not found")
    db.delete(user)
    db.commit()
    logger.info("Deleted profile for subject %s", external_uid)


def is_blocked(user_id: int, other_id: int, db: Session) -> bool:
    """True when ``user_id`` has ``other_id`` on their block list."""

    stmt = select(UserBlock.id).where(
        UserBlock.user_id == user_id,
        UserBlock.blocked_user_id == other_id,
    )
    return db.execute(stmt).first() is not None


def block_user(user: User, target_id: int, db: Session) -> bool:
    """Add ``target_id`` to the block list. Returns False when it was already there."""

    if target_id == user.id:
        raise InvalidRequestError("Invalid target")
    get_user(target_id, db)
    if target_id in user.blocked_user_ids:
        return False
    user.blocks.append(UserBlock(blocked_user_id=target_id))
    db.commit()
    return True


def unblock_user(user: User, target_id: int, db: Session) -> bool:
    remaining = [block for block in user.blocks if block.blocked_user_id != target_id]
    if len(remaining) == len(user.blocks):
        return False
    user.blocks = remaining
    db.commit()
    return True


def serialize_profile(user: User) -> dict:
    """Shape a user row into the ``UserProfileRead`` field layout."""

    return {
        "id": user.id,
        "external_uid": user.external_uid,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "branch": user.branch,
        "year": user.year,
        "bio": user.bio,
        "skills": list(user.skills or []),
        "interests": list(user.interests or []),
        "social_links": {
            "github": user.github_url,
            "linkedin": user.linkedin_url,
            "portfolio": user.portfolio_url,
        },
        "profile_locked": user.profile_locked,
        "accepted_guidelines": user.accepted_guidelines,
        "blocked_users": user.blocked_user_ids,
        "pinned_dms": [pin.peer_id for pin in user.pinned_conversations],
        "last_active": user.last_active,
        "created_at": user.created_at,
    }

