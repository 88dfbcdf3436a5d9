"""
Profile API endpoints.

Onboarding answers stored on the caller's profile row.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session, get_optional_session
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import Profile

router = APIRouter()

ONBOARDING_FIELDS = (
    "employment_status",
    "student_university",
    "student_degree",
    "student_graduation_year",
    "desired_job_title",
    "desired_location",
    "current_role",
    "years_experience",
    "industry",
    "looking_for",
)


# ============== Pydantic Schemas ==============


class OnboardingData(BaseModel):
    employment_status: Optional[str] = None
    student_university: Optional[str] = None
    student_degree: Optional[str] = None
    student_graduation_year: Optional[int] = None
    desired_job_title: Optional[str] = None
    desired_location: Optional[str] = None
    current_role: Optional[str] = None
    years_experience: Optional[int] = None
    industry: Optional[str] = None
    looking_for: Optional[str] = None


def profile_to_dict(profile: Profile) -> dict:
    data = {"onboarded": bool(profile.onboarded)}
    for field in ONBOARDING_FIELDS:
        data[field] = getattr(profile, field)
    return data


# ============== API Endpoints ==============


@router.get("")
async def get_profile(
    session: Optional[UserSession] = Depends(get_optional_session),
    db: Session = Depends(get_db),
):
    """Onboarding state of the caller; anonymous callers are simply not onboarded."""
    if session is None:
        return {"onboarded": False}
    profile = db.query(Profile).filter(Profile.id == session.user.id).first()
    if profile is None:
        return {"onboarded": False}
    return profile_to_dict(profile)


@router.post("")
async def save_profile(
    data: OnboardingData,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Store the onboarding answers and mark the caller as onboarded."""
    profile = db.query(Profile).filter(Profile.id == session.user.id).first()
    if profile is None:
        profile = Profile(id=session.user.id, role="user")
        db.add(profile)

    for field in ONBOARDING_FIELDS:
        setattr(profile, field, getattr(data, field))
    profile.onboarded = True

    db.commit()
    return {"ok": True}
