"""Profile endpoints keyed by the identity provider's subject id."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import UserEnvelope, UserProfileRead, UserProfileUpdate, UserSync
from app.services.profiles import (
    delete_user,
    find_user_by_uid,
    serialize_profile,
    sync_user,
    upsert_profile,
)

router = APIRouter(prefix="/users", tags=["users"])


def _envelope(user) -> UserEnvelope:
    if user is None:
        return UserEnvelope(user=None)
    return UserEnvelope(user=UserProfileRead.model_validate(serialize_profile(user)))


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def sync_profile(payload: UserSync, db: Session = Depends(get_db)) -> UserEnvelope:
    """Create the profile on first sign-in, or return the existing one."""

    return _envelope(sync_user(payload, db))


@router.get("/{uid}", response_model=UserEnvelope)
def read_profile(uid: str, db: Session = Depends(get_db)) -> UserEnvelope:
    """Return the profile, or ``{"user": null}`` when the subject has none yet."""

    return _envelope(find_user_by_uid(uid, db))


@router.put("/{uid}", response_model=UserEnvelope)
def update_profile(
    uid: str,
    payload: UserProfileUpdate,
    db: Session = Depends(get_db),
) -> UserEnvelope:
    return _envelope(upsert_profile(uid, payload, db))


@router.delete("/{uid}")
def remove_profile(uid: str, db: Session = Depends(get_db)) -> dict[str, str]:
    delete_user(uid, db)
    return {"message": "User deleted successfully"}
