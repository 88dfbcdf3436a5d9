from sqlalchemy import Column, DateTime, ForeignKey, String

from reviewdesk.db.base import Base, utcnow


class Follow(Base):
    """A user following a reviewer; both sides are identity ids."""

    __tablename__ = "follows"

    follower_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    reviewer_id = Column(String(36), ForeignKey("users.id"), primary_key=True, index=True)
    created_at = Column(DateTime, default=utcnow)
