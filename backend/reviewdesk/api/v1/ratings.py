"""
Reviewer rating API endpoints.

A resume owner rates (1-5) the reviewer who reviewed one of their resumes.
One rating per (owner, reviewer, resume); rating again replaces it.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session
from reviewdesk.core.errors import not_found_error, validation_error
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import Resume, Review, Reviewer, ReviewerRating

router = APIRouter()


# ============== Pydantic Schemas ==============


class RatingIn(BaseModel):
    reviewer_id: int
    resume_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class RatingResponse(BaseModel):
    id: int
    user_id: str
    reviewer_id: int
    resume_id: int
    rating: int
    comment: Optional[str] = None

    class Config:
        from_attributes = True


# ============== API Endpoints ==============


@router.post("")
async def rate_reviewer(
    data: RatingIn,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    resume = (
        db.query(Resume)
        .filter(Resume.id == data.resume_id, Resume.user_id == session.user.id)
        .first()
    )
    if resume is None:
        raise not_found_error("Resume not found or access denied")

    reviewer = db.query(Reviewer).filter(Reviewer.id == data.reviewer_id).first()
    if reviewer is None:
        raise not_found_error("Reviewer not found")

    reviewed = (
        db.query(Review.id)
        .filter(Review.resume_id == resume.id, Review.reviewer_id == reviewer.user_id)
        .first()
    )
    if reviewed is None:
        raise validation_error("No review found for this resume", field="resume_id", code="not_reviewed")

    rating = (
        db.query(ReviewerRating)
        .filter(
            ReviewerRating.user_id == session.user.id,
            ReviewerRating.reviewer_id == reviewer.id,
            ReviewerRating.resume_id == resume.id,
        )
        .first()
    )
    if rating is None:
        rating = ReviewerRating(user_id=session.user.id, reviewer_id=reviewer.id, resume_id=resume.id)
        db.add(rating)
    rating.rating = data.rating
    rating.comment = data.comment or None

    db.commit()
    db.refresh(rating)

    return {
        "success": True,
        "rating": RatingResponse.model_validate(rating),
        "message": "Rating saved successfully",
    }


@router.get("")
async def get_rating(
    resume_id: Optional[int] = None,
    reviewer_id: Optional[int] = None,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    if resume_id is None or reviewer_id is None:
        raise validation_error("Missing resume_id or reviewer_id")

    rating = (
        db.query(ReviewerRating)
        .filter(
            ReviewerRating.user_id == session.user.id,
            ReviewerRating.reviewer_id == reviewer_id,
            ReviewerRating.resume_id == resume_id,
        )
        .first()
    )
    return {"rating": RatingResponse.model_validate(rating) if rating else None}
