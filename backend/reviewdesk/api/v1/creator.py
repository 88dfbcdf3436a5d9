"""
Creator (reviewer workspace) API endpoints.

Reviewers see the resumes shared with their slug and submit scored reviews.
Admins see and may review every resume.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reviewdesk.api.deps import require_roles
from reviewdesk.core.errors import not_found_error
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import RESUME_STATUSES, Resume, Review
from reviewdesk.services.resumes import resume_with_owner, shared_resumes_query
from reviewdesk.services.reviewers import get_reviewer_for_user

logger = logging.getLogger("reviewdesk.api.creator")

router = APIRouter()

reviewer_or_admin = require_roles(Role.REVIEWER, Role.ADMIN)


# ============== Pydantic Schemas ==============


class ReviewSubmit(BaseModel):
    """A reviewer's verdict; the score is the 1-10 scale shown to reviewers."""

    score: int = Field(..., ge=1, le=10)
    feedback: str = Field(..., min_length=1)
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in RESUME_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(RESUME_STATUSES)}")
        return v


# ============== Helper Functions ==============


def visible_resumes(db: Session, session: UserSession):
    if session.role != Role.ADMIN and get_reviewer_for_user(db, session.user.id) is None:
        raise not_found_error("No reviewer profile found")
    return shared_resumes_query(db, session)


def get_visible_resume(db: Session, session: UserSession, resume_id: int) -> Resume:
    resume = visible_resumes(db, session).filter(Resume.id == resume_id).first()
    if resume is None:
        raise not_found_error("Resume not found")
    return resume


def upsert_review(db: Session, reviewer_id: str, resume_id: int, score: int, feedback: str) -> Review:
    review = (
        db.query(Review)
        .filter(Review.reviewer_id == reviewer_id, Review.resume_id == resume_id)
        .first()
    )
    if review is None:
        review = Review(reviewer_id=reviewer_id, resume_id=resume_id)
        db.add(review)
    review.score = score
    review.feedback = feedback
    db.commit()
    return review


# ============== API Endpoints ==============


@router.get("/resumes")
async def list_shared_resumes(
    session: UserSession = Depends(reviewer_or_admin),
    db: Session = Depends(get_db),
):
    """Resumes shared with the caller, newest first, with owner display info."""
    resumes = (
        visible_resumes(db, session)
        .order_by(Resume.created_at.desc(), Resume.id.desc())
        .all()
    )
    return {"resumes": [resume_with_owner(db, resume) for resume in resumes]}


@router.get("/resumes/{resume_id}")
async def get_shared_resume(
    resume_id: int,
    session: UserSession = Depends(reviewer_or_admin),
    db: Session = Depends(get_db),
):
    return resume_with_owner(db, get_visible_resume(db, session, resume_id))


@router.post("/reviews/{resume_id}")
async def submit_review(
    resume_id: int,
    data: ReviewSubmit,
    session: UserSession = Depends(reviewer_or_admin),
    db: Session = Depends(get_db),
):
    """
    Score a resume.

    The resume update and the review record are separate writes. The
    resume update is what the owner sees, so a failed review upsert is
    logged and the request still succeeds.
    """
    resume = get_visible_resume(db, session, resume_id)

    resume.score = data.score
    resume.notes = data.feedback
    resume.status = data.status
    db.commit()

    try:
        upsert_review(db, session.user.id, resume.id, data.score, data.feedback)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating review record for resume {resume.id}: {e}")

    logger.info(f"Resume {resume.id} reviewed by {session.user.id} with score {data.score}")
    return {"success": True}
