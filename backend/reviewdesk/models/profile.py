from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from reviewdesk.db.base import Base, utcnow


class Profile(Base):
    """Per-identity row carrying the role and onboarding answers."""

    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("users.id"), primary_key=True)

    # 'user' | 'reviewer' | 'admin'; anything else is ignored during resolution
    role = Column(String, default="user")
    onboarded = Column(Boolean, default=False)

    # Onboarding / discovery
    employment_status = Column(String)
    student_university = Column(String)
    student_degree = Column(String)
    student_graduation_year = Column(Integer)
    desired_job_title = Column(String)
    desired_location = Column(String)
    current_role = Column(String)
    years_experience = Column(Integer)
    industry = Column(String)
    looking_for = Column(String)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")
