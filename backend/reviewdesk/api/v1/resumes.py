"""
Resume API endpoints.

Resume owners share an uploaded file with a reviewer and follow its status.
Sharing again with the same reviewer replaces the file on the existing
resume instead of starting a new thread.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session
from reviewdesk.core.errors import not_found_error
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import RESUME_STATUSES, Resume
from reviewdesk.services.resumes import list_user_resumes, resume_with_reviewer

logger = logging.getLogger("reviewdesk.api.resumes")

router = APIRouter()


# ============== Pydantic Schemas ==============


class ResumeCreate(BaseModel):
    file_url: str
    reviewer_slug: Optional[str] = None
    status: str = "Pending"
    notes: Optional[str] = None
    score: Optional[float] = None

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("file_url is required")
        return v.strip()

    @field_validator("reviewer_slug")
    @classmethod
    def normalize_slug(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().lower() or None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in RESUME_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(RESUME_STATUSES)}")
        return v


class ResumeSaved(BaseModel):
    ok: bool = True
    action: str  # 'created' | 'updated'
    id: int
    message: str


# ============== API Endpoints ==============


@router.post("", response_model=ResumeSaved, status_code=status.HTTP_200_OK)
async def create_resume(
    data: ResumeCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Share a resume with a reviewer.

    If the caller already shared a resume with the same reviewer, the most
    recent one gets the new file, its status goes back to ``Pending`` and
    the previous score and notes are cleared.
    """
    existing = None
    if data.reviewer_slug:
        existing = (
            db.query(Resume)
            .filter(
                Resume.user_id == session.user.id,
                Resume.reviewer_slug == data.reviewer_slug,
            )
            .order_by(Resume.created_at.desc(), Resume.id.desc())
            .first()
        )

    if existing is not None:
        existing.file_url = data.file_url
        existing.status = "Pending"
        existing.notes = None
        existing.score = None
        db.commit()
        logger.info(f"Resume {existing.id} replaced by {session.user.id}")
        return ResumeSaved(
            action="updated",
            id=existing.id,
            message="Resume updated in existing conversation",
        )

    resume = Resume(
        user_id=session.user.id,
        file_url=data.file_url,
        status=data.status,
        notes=data.notes,
        score=data.score,
        reviewer_slug=data.reviewer_slug,
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    logger.info(f"Resume {resume.id} created by {session.user.id}")

    return ResumeSaved(action="created", id=resume.id, message="New conversation started")


@router.get("")
async def list_resumes(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """The caller's resumes, newest first, with the reviewer they were shared with."""
    resumes = list_user_resumes(db, session.user.id)
    return {
        "total": len(resumes),
        "resumes": [resume_with_reviewer(db, resume) for resume in resumes],
    }


@router.get("/{resume_id}")
async def get_resume(
    resume_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    resume = (
        db.query(Resume)
        .filter(Resume.id == resume_id, Resume.user_id == session.user.id)
        .first()
    )
    if resume is None:
        raise not_found_error("Resume not found")
    return resume_with_reviewer(db, resume)
