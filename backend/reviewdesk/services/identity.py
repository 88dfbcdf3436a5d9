"""
SQLAlchemy-backed identity source.

Binds the session resolver to one request: the identity comes from the
access token (bearer header or cookie), profiles and reviewer records from
the database.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from reviewdesk.core.config import settings
from reviewdesk.core.security import extract_token, get_token_subject
from reviewdesk.core.session import Session as UserSession, resolve_session
from reviewdesk.db.session import SessionLocal
from reviewdesk.models import Profile, Reviewer, User

logger = logging.getLogger("reviewdesk.identity")


class SqlIdentitySource:
    """``IdentitySource`` over the application database."""

    def __init__(self, db: Session, token: Optional[str]):
        self.db = db
        self.token = token

    def get_current_identity(self) -> Optional[User]:
        identity_id = get_token_subject(self.token)
        if identity_id is None:
            return None
        return self.db.query(User).filter(User.id == identity_id).first()

    def get_profile(self, identity_id: str) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.id == identity_id).first()

    def create_profile(self, identity_id: str) -> Profile:
        profile = Profile(id=identity_id, role="user", onboarded=False)
        self.db.add(profile)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request created it first
            self.db.rollback()
            existing = self.get_profile(identity_id)
            if existing is None:
                raise
            return existing
        self.db.refresh(profile)
        return profile

    def has_reviewer_record(self, identity_id: str) -> bool:
        return (
            self.db.query(Reviewer.id).filter(Reviewer.user_id == identity_id).first()
            is not None
        )


def session_for_connection(db: Session, connection: HTTPConnection) -> Optional[UserSession]:
    """Resolve the session for a request or websocket with the configured policy."""
    source = SqlIdentitySource(db, extract_token(connection))
    return resolve_session(
        source,
        settings.admin_emails,
        create_missing_profile=settings.PROFILE_AUTOCREATE,
    )


def resolve_request_session(connection: HTTPConnection) -> Optional[UserSession]:
    """Resolve a session outside dependency injection, on a short-lived DB session."""
    db = SessionLocal()
    try:
        return session_for_connection(db, connection)
    finally:
        db.close()
