"""Resume read models and the shared-with-reviewer queries."""

from typing import Any, Optional

from sqlalchemy.orm import Session

from reviewdesk.core.session import Session as UserSession
from reviewdesk.core.roles import Role
from reviewdesk.models import Resume, Reviewer, User
from reviewdesk.services.reviewers import get_reviewer_by_slug, get_reviewer_for_user


def owner_summary(user: Optional[User]) -> dict[str, Any]:
    if user is None:
        return {"id": None, "email": None, "full_name": None}
    metadata = user.user_metadata or {}
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name or metadata.get("full_name") or metadata.get("name"),
    }


def reviewer_summary(reviewer: Optional[Reviewer]) -> Optional[dict[str, Any]]:
    if reviewer is None:
        return None
    return {
        "id": reviewer.id,
        "user_id": reviewer.user_id,
        "display_name": reviewer.display_name,
        "slug": reviewer.slug,
        "photo_url": reviewer.photo_url,
        "headline": reviewer.headline,
    }


def resume_to_dict(resume: Resume) -> dict[str, Any]:
    return {
        "id": resume.id,
        "user_id": resume.user_id,
        "file_url": resume.file_url,
        "status": resume.status,
        "score": resume.score,
        "notes": resume.notes,
        "reviewer_slug": resume.reviewer_slug,
        "created_at": resume.created_at,
        "updated_at": resume.updated_at,
    }


def resume_with_reviewer(db: Session, resume: Resume) -> dict[str, Any]:
    data = resume_to_dict(resume)
    reviewer = get_reviewer_by_slug(db, resume.reviewer_slug) if resume.reviewer_slug else None
    data["reviewer"] = reviewer_summary(reviewer)
    return data


def resume_with_owner(db: Session, resume: Resume) -> dict[str, Any]:
    data = resume_to_dict(resume)
    owner = db.query(User).filter(User.id == resume.user_id).first()
    data["owner"] = owner_summary(owner)
    return data


def list_user_resumes(db: Session, user_id: str) -> list[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == user_id)
        .order_by(Resume.created_at.desc(), Resume.id.desc())
        .all()
    )


def shared_resumes_query(db: Session, session: UserSession):
    """
    Resumes visible to a reviewer: the ones shared with their slug.

    Admins see every resume.
    """
    query = db.query(Resume)
    if session.role == Role.ADMIN:
        return query
    reviewer = get_reviewer_for_user(db, session.user.id)
    if reviewer is None:
        return query.filter(Resume.id.is_(None))
    return query.filter(Resume.reviewer_slug == reviewer.slug)
