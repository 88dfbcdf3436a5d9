"""
Reviewer API endpoints.

Lookup of reviewer pages (own record, by slug, by id, filtered list) and
creation/update of the caller's own reviewer record. Saving a reviewer
record promotes the caller's profile to the ``reviewer`` role.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session, get_optional_session
from reviewdesk.core.errors import authentication_error, not_found_error, validation_error
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import Profile, Resume, Reviewer
from reviewdesk.services.reviewers import (
    get_reviewer_by_slug,
    get_reviewer_for_user,
    reviewer_to_dict,
    search_reviewers,
)
from reviewdesk.services.slugs import assign_unique_slug
from reviewdesk.services.social import normalize_social_link
from reviewdesk.services.text import HEADLINE_WORD_LIMIT, headline_within_limit

logger = logging.getLogger("reviewdesk.api.reviewers")

router = APIRouter()


# ============== Pydantic Schemas ==============


class ReviewerSave(BaseModel):
    """Fields of a reviewer page; omitted fields keep their stored value on update."""

    slug: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    company: Optional[str] = None
    experience_years: Optional[int] = None
    headline: Optional[str] = None
    country: Optional[str] = None
    expertise: Optional[list[str]] = None
    social_link: Optional[str] = None

    @field_validator("expertise")
    @classmethod
    def clean_expertise(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return None
        return [item.strip() for item in v if item and item.strip()]

    @field_validator("experience_years")
    @classmethod
    def validate_years(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Experience years cannot be negative")
        return v


# ============== Helper Functions ==============


def _validate_for_save(data: ReviewerSave, existing: Optional[Reviewer]) -> None:
    if existing is None or data.expertise is not None:
        if not data.expertise:
            raise validation_error("Select at least one area of expertise", field="expertise")
    if existing is None:
        if not data.slug:
            raise validation_error("Slug is required", field="slug")
        if not normalize_social_link(data.social_link):
            raise validation_error("Social profile link is required", field="social_link")
    if data.headline is not None and not headline_within_limit(data.headline):
        raise validation_error(
            f"Headline must be {HEADLINE_WORD_LIMIT} words or fewer",
            field="headline",
            code="headline_too_long",
        )


def _check_social_link(db: Session, social_key: str, owner_user_id: str) -> None:
    taken = (
        db.query(Reviewer.id)
        .filter(Reviewer.social_link_key == social_key, Reviewer.user_id != owner_user_id)
        .first()
    )
    if taken is not None:
        raise validation_error(
            "This social profile is already linked to another reviewer",
            field="social_link",
            code="social_link_taken",
        )


def _promote_to_reviewer(db: Session, session: UserSession) -> None:
    profile = db.query(Profile).filter(Profile.id == session.user.id).first()
    if profile is None:
        profile = Profile(id=session.user.id, onboarded=False)
        db.add(profile)
    if session.role != Role.ADMIN and profile.role != Role.ADMIN.value:
        profile.role = Role.REVIEWER.value


# ============== API Endpoints ==============


@router.get("")
async def get_reviewers(
    me: Optional[str] = None,
    slug: Optional[str] = None,
    expertise: Optional[str] = None,
    q: Optional[str] = None,
    session: Optional[UserSession] = Depends(get_optional_session),
    db: Session = Depends(get_db),
):
    """
    Reviewer lookup.

    - ``?me=1``: the caller's own record (null when they have none)
    - ``?slug=``: one reviewer with follower count, rating and review count
    - otherwise: reviewers filtered by ``expertise`` and free text ``q``
    """
    if me:
        if session is None:
            raise authentication_error()
        reviewer = get_reviewer_for_user(db, session.user.id)
        return {"reviewer": reviewer_to_dict(db, reviewer) if reviewer else None}

    if slug:
        reviewer = get_reviewer_by_slug(db, slug)
        if reviewer is None:
            raise not_found_error("Reviewer not found")
        return {"reviewer": reviewer_to_dict(db, reviewer)}

    reviewers = search_reviewers(db, expertise=expertise, query=q)
    return {"reviewers": [reviewer_to_dict(db, reviewer) for reviewer in reviewers]}


@router.get("/{reviewer_id}")
async def get_reviewer(reviewer_id: int, db: Session = Depends(get_db)):
    reviewer = db.query(Reviewer).filter(Reviewer.id == reviewer_id).first()
    if reviewer is None:
        raise not_found_error("Reviewer not found")
    return {"reviewer": reviewer_to_dict(db, reviewer)}


@router.post("")
async def save_reviewer(
    data: ReviewerSave,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Create or update the caller's reviewer record.

    Slugs are sanitized to ``[a-z0-9-]`` and de-duplicated with a numeric
    suffix. A normalized social link may back only one reviewer.
    """
    user_id = session.user.id
    existing = get_reviewer_for_user(db, user_id)
    _validate_for_save(data, existing)

    reviewer = existing or Reviewer(user_id=user_id)
    old_slug = existing.slug if existing else None

    if data.slug is not None or existing is None:
        reviewer.slug = assign_unique_slug(db, data.slug or "", owner_user_id=user_id)

    # Shared resumes point at the slug, so they follow a rename
    if old_slug and reviewer.slug != old_slug:
        db.query(Resume).filter(Resume.reviewer_slug == old_slug).update(
            {"reviewer_slug": reviewer.slug}, synchronize_session=False
        )
        logger.info(f"Reviewer slug renamed {old_slug} -> {reviewer.slug}")

    if data.social_link is not None:
        social_key = normalize_social_link(data.social_link)
        if social_key is None:
            raise validation_error("Social profile link is required", field="social_link")
        _check_social_link(db, social_key, user_id)
        reviewer.social_link = data.social_link.strip()
        reviewer.social_link_key = social_key

    if data.expertise is not None:
        reviewer.expertise = data.expertise

    for field in ("display_name", "photo_url", "company", "experience_years", "country"):
        value = getattr(data, field)
        if value is not None:
            setattr(reviewer, field, value)

    if data.headline is not None:
        reviewer.headline = data.headline.strip() or None
    elif existing is None:
        reviewer.headline = f"{reviewer.expertise[0]} expert"

    if not reviewer.display_name:
        reviewer.display_name = session.user.full_name or reviewer.slug

    if existing is None:
        db.add(reviewer)
    _promote_to_reviewer(db, session)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise validation_error(
            "Reviewer profile conflicts with an existing reviewer",
            field="slug",
            code="slug_taken",
        )
    db.refresh(reviewer)

    logger.info(f"Reviewer {reviewer.slug} {'updated' if existing else 'created'} by {user_id}")
    return {"reviewer": reviewer_to_dict(db, reviewer)}
