from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship

from reviewdesk.db.base import Base, utcnow


class Reviewer(Base):
    """Public reviewer page for an identity (one per identity)."""

    __tablename__ = "reviewers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)

    display_name = Column(String)
    slug = Column(String, unique=True, index=True, nullable=False)
    photo_url = Column(String)
    company = Column(String)
    experience_years = Column(Integer)
    headline = Column(String)
    country = Column(String)
    expertise = Column(JSON, default=list)

    # Link as entered, plus its normalized form used for uniqueness
    social_link = Column(String)
    social_link_key = Column(String, unique=True, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="reviewer")
    experiences = relationship(
        "Experience", back_populates="reviewer", cascade="all, delete-orphan"
    )


class Experience(Base):
    """Work history entry shown on a reviewer's public page."""

    __tablename__ = "experiences"

    id = Column(Integer, primary_key=True, index=True)
    reviewer_id = Column(Integer, ForeignKey("reviewers.id"), index=True, nullable=False)

    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    employment_type = Column(String, nullable=False)
    location = Column(String)
    location_type = Column(String)  # "On-site", "Hybrid", "Remote"
    start_date = Column(String, nullable=False)  # ISO date as entered
    end_date = Column(String)
    currently_working = Column(Boolean, default=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reviewer = relationship("Reviewer", back_populates="experiences")
