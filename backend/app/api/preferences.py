"""Conversation preference endpoint: pin, unpin, delete and block actions."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import ConversationPreferenceRequest, ConversationPreferenceResult
from app.services.preferences import apply_preference

router = APIRouter(prefix="/conversation-preferences", tags=["messages"])


@router.post("", response_model=ConversationPreferenceResult)
def update_conversation_preference(
    payload: ConversationPreferenceRequest,
    db: Session = Depends(get_db),
) -> ConversationPreferenceResult:
    message = apply_preference(payload.user_id, payload.target_id, payload.action, db)
    return ConversationPreferenceResult(message=message)
