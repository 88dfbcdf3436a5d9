"""
Admin API endpoints.

Moderation of the whole resume pipeline and a view of every identity with
its resolved role. Admin role required on every endpoint.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from reviewdesk.api.deps import require_roles
from reviewdesk.core.config import settings
from reviewdesk.core.errors import not_found_error, validation_error
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session as UserSession, determine_role
from reviewdesk.db.session import get_db
from reviewdesk.models import RESUME_STATUSES, Profile, Resume, User
from reviewdesk.services.identity import SqlIdentitySource
from reviewdesk.services.resumes import resume_with_owner

logger = logging.getLogger("reviewdesk.api.admin")

router = APIRouter()

admin_only = require_roles(Role.ADMIN)


class AdminUser(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: Role
    role_source: str
    onboarded: bool


def parse_admin_score(raw: Optional[str]) -> Optional[float]:
    """The admin score box is free text: blank clears it, any number is kept as is."""
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError:
        raise validation_error("Score must be a number", field="score")


def list_users_with_roles(db: Session) -> list[AdminUser]:
    source = SqlIdentitySource(db, None)
    result: list[AdminUser] = []
    for user in db.query(User).order_by(User.created_at.desc()).all():
        profile = db.query(Profile).filter(Profile.id == user.id).first()
        decision = determine_role(user, profile, source, settings.admin_emails)
        result.append(
            AdminUser(
                id=user.id,
                email=user.email,
                full_name=user.full_name,
                role=decision.role,
                role_source=decision.source,
                onboarded=bool(profile and profile.onboarded),
            )
        )
    return result


@router.get("/resumes")
async def list_all_resumes(
    session: UserSession = Depends(admin_only),
    db: Session = Depends(get_db),
):
    resumes = db.query(Resume).order_by(Resume.created_at.desc(), Resume.id.desc()).all()
    return {"total": len(resumes), "resumes": [resume_with_owner(db, r) for r in resumes]}


@router.post("/resumes/{resume_id}")
async def update_resume(
    resume_id: int,
    status_value: str = Form(..., alias="status"),
    score: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    session: UserSession = Depends(admin_only),
    db: Session = Depends(get_db),
):
    """Form post from the admin edit page; redirects back to the admin dashboard."""
    resume = db.query(Resume).filter(Resume.id == resume_id).first()
    if resume is None:
        raise not_found_error("Resume not found")
    if status_value not in RESUME_STATUSES:
        raise validation_error(
            f"Status must be one of: {', '.join(RESUME_STATUSES)}", field="status"
        )

    resume.status = status_value
    resume.score = parse_admin_score(score)
    resume.notes = notes or None
    db.commit()

    logger.info(f"Resume {resume.id} set to {status_value} by admin {session.user.id}")
    return RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/users")
async def list_users(
    session: UserSession = Depends(admin_only),
    db: Session = Depends(get_db),
):
    users = list_users_with_roles(db)
    return {"total": len(users), "users": users}
