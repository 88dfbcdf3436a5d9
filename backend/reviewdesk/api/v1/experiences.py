"""
Experience API endpoints.

Work history on a reviewer's public page. Entries belong to the caller's
reviewer record; the public listing is keyed by reviewer slug.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session
from reviewdesk.core.errors import not_found_error
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import Experience, Reviewer
from reviewdesk.services.reviewers import get_reviewer_by_slug, get_reviewer_for_user

router = APIRouter()
public_router = APIRouter()


# ============== Pydantic Schemas ==============


class ExperienceIn(BaseModel):
    title: str
    company: str
    employment_type: str
    start_date: str
    location: Optional[str] = None
    location_type: Optional[str] = None
    end_date: Optional[str] = None
    currently_working: bool = False

    @field_validator("title", "company", "employment_type", "start_date")
    @classmethod
    def required_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("This field is required")
        return v.strip()


class ExperienceResponse(BaseModel):
    id: int
    reviewer_id: int
    title: str
    company: str
    employment_type: str
    location: Optional[str] = None
    location_type: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    currently_working: bool = False

    class Config:
        from_attributes = True


# ============== Helper Functions ==============


def _require_reviewer(db: Session, session: UserSession) -> Reviewer:
    reviewer = get_reviewer_for_user(db, session.user.id)
    if reviewer is None:
        raise not_found_error("Reviewer profile not found")
    return reviewer


def _apply(experience: Experience, data: ExperienceIn) -> None:
    experience.title = data.title
    experience.company = data.company
    experience.employment_type = data.employment_type
    experience.location = data.location
    experience.location_type = data.location_type
    experience.start_date = data.start_date
    experience.currently_working = data.currently_working
    experience.end_date = None if data.currently_working else data.end_date


def list_experiences(db: Session, reviewer: Reviewer) -> list[Experience]:
    return (
        db.query(Experience)
        .filter(Experience.reviewer_id == reviewer.id)
        .order_by(Experience.start_date.desc())
        .all()
    )


def _get_owned(db: Session, reviewer: Reviewer, experience_id: int) -> Experience:
    experience = (
        db.query(Experience)
        .filter(Experience.id == experience_id, Experience.reviewer_id == reviewer.id)
        .first()
    )
    if experience is None:
        raise not_found_error("Experience not found")
    return experience


# ============== API Endpoints ==============


@router.get("")
async def get_experiences(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    reviewer = get_reviewer_for_user(db, session.user.id)
    if reviewer is None:
        return {"experiences": []}
    return {
        "experiences": [ExperienceResponse.model_validate(e) for e in list_experiences(db, reviewer)]
    }


@router.post("")
async def create_experience(
    data: ExperienceIn,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    reviewer = _require_reviewer(db, session)

    experience = Experience(reviewer_id=reviewer.id)
    _apply(experience, data)
    db.add(experience)
    db.commit()
    db.refresh(experience)

    return {"experience": ExperienceResponse.model_validate(experience)}


@router.put("/{experience_id}")
async def update_experience(
    experience_id: int,
    data: ExperienceIn,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    reviewer = _require_reviewer(db, session)
    experience = _get_owned(db, reviewer, experience_id)

    _apply(experience, data)
    db.commit()
    db.refresh(experience)

    return {"experience": ExperienceResponse.model_validate(experience)}


@router.delete("/{experience_id}")
async def delete_experience(
    experience_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    reviewer = _require_reviewer(db, session)
    experience = _get_owned(db, reviewer, experience_id)

    db.delete(experience)
    db.commit()

    return {"success": True}


@public_router.get("/{slug}")
async def get_reviewer_experiences(slug: str, db: Session = Depends(get_db)):
    """Public work history for a reviewer page."""
    reviewer = get_reviewer_by_slug(db, slug)
    if reviewer is None:
        raise not_found_error("Reviewer not found")
    return {
        "experiences": [ExperienceResponse.model_validate(e) for e in list_experiences(db, reviewer)]
    }
