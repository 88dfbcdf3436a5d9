import uuid

from sqlalchemy import Column, DateTime, JSON, String
from sqlalchemy.orm import relationship

from reviewdesk.db.base import Base, utcnow


class User(Base):
    """
    Identity owned by the auth endpoints.

    Everything else in the system reads it; only the metadata fields
    (``full_name``, ``avatar_url``, ``user_metadata``) are ever patched.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String)
    avatar_url = Column(String)
    # Free-form provider metadata: name, display_name, first_name, picture, ...
    user_metadata = Column(JSON, default=dict)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False)
    reviewer = relationship("Reviewer", back_populates="user", uselist=False)
