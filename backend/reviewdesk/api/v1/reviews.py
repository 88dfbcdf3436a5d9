"""
Review API endpoints.

Reviewers list the reviews they wrote; resume owners read the reviews left
on their resumes.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session
from reviewdesk.core.errors import not_found_error
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session as UserSession, require_any_role
from reviewdesk.db.session import get_db
from reviewdesk.models import Resume, Review
from reviewdesk.services.resumes import reviewer_summary
from reviewdesk.services.reviewers import get_reviewer_for_user

router = APIRouter()


class ReviewResponse(BaseModel):
    id: int
    reviewer_id: str
    resume_id: int
    score: int
    feedback: str

    class Config:
        from_attributes = True


@router.get("")
async def list_reviews(
    resume_id: Optional[int] = None,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    if resume_id is not None:
        resume = (
            db.query(Resume)
            .filter(Resume.id == resume_id, Resume.user_id == session.user.id)
            .first()
        )
        if resume is None:
            raise not_found_error("Resume not found")
        reviews = db.query(Review).filter(Review.resume_id == resume.id).all()
        return {
            "reviews": [
                {
                    **ReviewResponse.model_validate(review).model_dump(),
                    "reviewer": reviewer_summary(get_reviewer_for_user(db, review.reviewer_id)),
                }
                for review in reviews
            ]
        }

    require_any_role(session, (Role.REVIEWER, Role.ADMIN))
    reviews = (
        db.query(Review)
        .filter(Review.reviewer_id == session.user.id)
        .order_by(Review.updated_at.desc())
        .all()
    )
    return {"reviews": [ReviewResponse.model_validate(review) for review in reviews]}
