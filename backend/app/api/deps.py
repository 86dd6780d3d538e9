"""FastAPI dependencies for the API layer."""

from sqlalchemy.orm import Session

from app.core.errors import InvalidRequestError
from app.core.ids import parse_optional_id
from app.services.moderation import ModerationGate, get_moderation_gate
from app.services.presence import touch_presence


def get_gate() -> ModerationGate:
    """Moderation gate used by write endpoints; tests override this dependency."""

    return get_moderation_gate()


def touch_viewer(viewer_id: str | None, db: Session, *, required: bool = False) -> int | None:
    """Parse the viewer id and refresh that user's presence.

    When the viewer is optional an unparsable id only skips the presence touch.
    """

    try:
        parsed = parse_optional_id(viewer_id, "viewer id")
    except InvalidRequestError:
        if required:
            raise
        return None
    if parsed is not None:
        touch_presence(parsed, db)
    return parsed
