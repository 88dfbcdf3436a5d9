"""
Reviewer read models.

Shapes reviewer rows for the API and the pages, attaching the derived
follower count, average rating and review count.
"""

from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from reviewdesk.models import Follow, Review, Reviewer, ReviewerRating


def follower_count(db: Session, reviewer: Reviewer) -> int:
    return (
        db.query(func.count(Follow.follower_id))
        .filter(Follow.reviewer_id == reviewer.user_id)
        .scalar()
        or 0
    )


def review_count(db: Session, reviewer: Reviewer) -> int:
    return (
        db.query(func.count(Review.id))
        .filter(Review.reviewer_id == reviewer.user_id)
        .scalar()
        or 0
    )


def average_rating(db: Session, reviewer: Reviewer) -> Optional[float]:
    value = (
        db.query(func.avg(ReviewerRating.rating))
        .filter(ReviewerRating.reviewer_id == reviewer.id)
        .scalar()
    )
    return round(float(value), 2) if value is not None else None


def reviewer_to_dict(db: Session, reviewer: Reviewer, with_stats: bool = True) -> dict[str, Any]:
    data = {
        "id": reviewer.id,
        "user_id": reviewer.user_id,
        "display_name": reviewer.display_name,
        "slug": reviewer.slug,
        "photo_url": reviewer.photo_url,
        "company": reviewer.company,
        "experience_years": reviewer.experience_years,
        "headline": reviewer.headline,
        "country": reviewer.country,
        "expertise": list(reviewer.expertise or []),
        "social_link": reviewer.social_link,
        "created_at": reviewer.created_at,
        "updated_at": reviewer.updated_at,
    }
    if with_stats:
        data["follower_count"] = follower_count(db, reviewer)
        data["rating"] = average_rating(db, reviewer)
        data["review_count"] = review_count(db, reviewer)
    return data


def get_reviewer_by_slug(db: Session, slug: str) -> Optional[Reviewer]:
    return db.query(Reviewer).filter(Reviewer.slug == (slug or "").strip().lower()).first()


def get_reviewer_for_user(db: Session, user_id: str) -> Optional[Reviewer]:
    return db.query(Reviewer).filter(Reviewer.user_id == user_id).first()


def search_reviewers(
    db: Session,
    expertise: Optional[str] = None,
    query: Optional[str] = None,
) -> list[Reviewer]:
    """
    List reviewers, newest first.

    ``expertise`` keeps reviewers listing that area (case-insensitive);
    ``query`` matches name, headline or company.
    """
    reviewers = db.query(Reviewer).order_by(Reviewer.created_at.desc()).all()

    if expertise:
        wanted = expertise.strip().lower()
        reviewers = [
            r for r in reviewers
            if any(wanted == str(area).strip().lower() for area in (r.expertise or []))
        ]

    if query:
        needle = query.strip().lower()
        reviewers = [
            r for r in reviewers
            if any(
                needle in (value or "").lower()
                for value in (r.display_name, r.headline, r.company)
            )
        ]

    return reviewers


EXPERTISE_OPTIONS = (
    "Cybersecurity",
    "Law",
    "Content & Branding",
    "Others",
    "HR",
    "Software",
    "Product",
    "Study Abroad",
    "Finance",
    "Design",
    "Data",
    "Mental Health & Wellbeing",
    "Marketing",
)
