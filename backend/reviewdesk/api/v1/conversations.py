"""
Conversation API endpoints.

One thread per resume between its owner and the reviewer it was shared
with. The thread is created the first time either side opens it.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session
from reviewdesk.core.errors import authorization_error, not_found_error
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.base import utcnow
from reviewdesk.db.session import get_db
from reviewdesk.models import Conversation, Message, Resume
from reviewdesk.services.reviewers import get_reviewer_by_slug

router = APIRouter()


# ============== Pydantic Schemas ==============


class ConversationResponse(BaseModel):
    id: int
    resume_id: int
    user_id: str
    reviewer_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    id: int
    sender_id: str
    message: str
    message_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageIn(BaseModel):
    conversation_id: int
    message: str = Field(..., min_length=1)
    message_type: str = "text"


# ============== Helper Functions ==============


def _is_participant(session: UserSession, user_id: str, reviewer_id: str) -> bool:
    return session.role == Role.ADMIN or session.user.id in (user_id, reviewer_id)


def get_or_create_conversation(db: Session, session: UserSession, resume_id: int) -> Conversation:
    conversation = db.query(Conversation).filter(Conversation.resume_id == resume_id).first()
    if conversation is not None:
        if not _is_participant(session, conversation.user_id, conversation.reviewer_id):
            raise authorization_error("Not a participant in this conversation")
        return conversation

    resume = db.query(Resume).filter(Resume.id == resume_id).first()
    if resume is None:
        raise not_found_error("Resume not found")
    reviewer = get_reviewer_by_slug(db, resume.reviewer_slug) if resume.reviewer_slug else None
    if reviewer is None:
        raise not_found_error("Resume has not been shared with a reviewer")
    if not _is_participant(session, resume.user_id, reviewer.user_id):
        raise authorization_error("Not a participant in this conversation")

    conversation = Conversation(
        resume_id=resume.id,
        user_id=resume.user_id,
        reviewer_id=reviewer.user_id,
    )
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        # The other participant opened it at the same time
        db.rollback()
        return db.query(Conversation).filter(Conversation.resume_id == resume_id).one()
    db.refresh(conversation)
    return conversation


def list_messages(db: Session, conversation: Conversation) -> list[Message]:
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation.id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


# ============== API Endpoints ==============


@router.get("")
async def get_conversation(
    resume_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    conversation = get_or_create_conversation(db, session, resume_id)
    return {
        "conversation": ConversationResponse.model_validate(conversation),
        "messages": [MessageResponse.model_validate(m) for m in list_messages(db, conversation)],
    }


@router.post("")
async def send_message(
    data: MessageIn,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    conversation = db.query(Conversation).filter(Conversation.id == data.conversation_id).first()
    if conversation is None:
        raise not_found_error("Conversation not found")
    if not _is_participant(session, conversation.user_id, conversation.reviewer_id):
        raise authorization_error("Not a participant in this conversation")

    message = Message(
        conversation_id=conversation.id,
        sender_id=session.user.id,
        message=data.message,
        message_type=data.message_type or "text",
    )
    db.add(message)
    conversation.updated_at = utcnow()
    db.commit()
    db.refresh(message)

    return {"message": MessageResponse.model_validate(message)}
