"""Schemas related to user profiles."""

from datetime import datetime

from pydantic import AliasChoices, Field, constr

from app.models.enums import UserRole
from app.schemas.base import CamelModel


class PublicUser(CamelModel):
    """Minimal public-facing user information."""

    id: int
    name: str
    role: UserRole = UserRole.STUDENT
    branch: str | None = None
    year: int | None = None
    last_active: datetime | None = None


class SocialLinks(CamelModel):
    github: str | None = None
    linkedin: str | None = None
    portfolio: str | None = None


class UserProfileRead(CamelModel):
    """Full profile of a campus member."""

    id: int
    external_uid: str
    email: str
    name: str
    role: UserRole
    branch: str | None = None
    year: int | None = None
    bio: str | None = None
    skills: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    profile_locked: bool = False
    accepted_guidelines: bool = False
    blocked_users: list[int] = Field(default_factory=list)
    pinned_dms: list[int] = Field(default_factory=list)
    last_active: datetime | None = None
    created_at: datetime


class UserEnvelope(CamelModel):
    user: UserProfileRead | None = None


class UserSync(CamelModel):
    """Payload sent by the client right after the identity provider signs a user in."""

    external_uid: constr(strip_whitespace=True, min_length=1, max_length=128) = Field(
        ...,
        validation_alias=AliasChoices("externalUid", "external_uid", "firebaseUid"),
        description="Subject identifier issued by the identity provider",
    )
    email: constr(strip_whitespace=True, min_length=3, max_length=255)
    name: constr(strip_whitespace=True, min_length=1, max_length=128)


class UserProfileUpdate(CamelModel):
    """Partial profile update; only supplied fields are applied."""

    email: constr(strip_whitespace=True, min_length=3, max_length=255) | None = Field(
        default=None,
        description="Only used when the profile does not exist yet.",
    )
    name: constr(strip_whitespace=True, min_length=1, max_length=128) | None = None
    role: UserRole | None = None
    branch: constr(strip_whitespace=True, min_length=1, max_length=64) | None = None
    year: int | None = Field(default=None, ge=1, le=10)
    bio: constr(max_length=2000) | None = None
    skills: list[str] | None = None
    interests: list[str] | None = None
    social_links: SocialLinks | None = None
    accepted_guidelines: bool | None = None
