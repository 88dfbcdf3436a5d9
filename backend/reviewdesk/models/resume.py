from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from reviewdesk.db.base import Base, utcnow

RESUME_STATUSES = (
    "Pending",
    "Under Review",
    "Completed",
    "Approved",
    "Needs Revision",
    "Rejected",
)


class Resume(Base):
    """An uploaded resume; the PDF itself lives in object storage."""

    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)

    file_url = Column(String, nullable=False)
    status = Column(String, default="Pending")
    # Latest score: 1-10 from a reviewer, or anything an admin typed in
    score = Column(Float)
    notes = Column(Text)

    # Reviewer the resume was shared with (reviewers.slug)
    reviewer_slug = Column(String, index=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reviews = relationship("Review", back_populates="resume", cascade="all, delete-orphan")


class Review(Base):
    """A reviewer's scored feedback on a resume."""

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("reviewer_id", "resume_id"),)

    id = Column(Integer, primary_key=True, index=True)
    reviewer_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    resume_id = Column(Integer, ForeignKey("resumes.id"), index=True, nullable=False)

    score = Column(Integer, nullable=False)  # 1-10
    feedback = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    resume = relationship("Resume", back_populates="reviews")


class ReviewerRating(Base):
    """A resume owner's 1-5 rating of the reviewer who reviewed it."""

    __tablename__ = "reviewer_ratings"
    __table_args__ = (UniqueConstraint("user_id", "reviewer_id", "resume_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    reviewer_id = Column(Integer, ForeignKey("reviewers.id"), index=True, nullable=False)
    resume_id = Column(Integer, ForeignKey("resumes.id"), nullable=False)

    rating = Column(Integer, nullable=False)
    comment = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
