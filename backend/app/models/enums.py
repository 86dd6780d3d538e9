from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Roles a campus member can hold."""

    STUDENT = "student"
    ADMIN = "admin"
    ALUMNI = "alumni"


class MessageScope(str, Enum):
    """Audience partition a chat message belongs to."""

    UNIVERSAL = "universal"
    BRANCH = "branch"
    YEAR = "year"
    DM = "dm"


class DiscussionCategory(str, Enum):
    """Closed set of discussion thread categories."""

    BRANCH = "BRANCH"
    YEAR = "YEAR"
    PLACEMENT = "PLACEMENT"
    GENERAL = "GENERAL"
    SWE = "SWE"
    AI = "AI"
    ML = "ML"
    DATASCIENCE = "DATASCIENCE"
    WEBDEV = "WEBDEV"
    APPDEV = "APPDEV"
    CYBERSECURITY = "CYBERSECURITY"
    BLOCKCHAIN = "BLOCKCHAIN"
    CLOUD = "CLOUD"
    DEVOPS = "DEVOPS"


class ConversationAction(str, Enum):
    """Actions accepted by the conversation preferences endpoint."""

    PIN = "pin"
    UNPIN = "unpin"
    DELETE = "delete"
    BLOCK = "block"
    UNBLOCK = "unblock"
