"""
Presentation pages.

Page-data endpoints for the public site, the user dashboard, the reviewer
workspace and the admin console. Each returns the view model its page
renders. Protected pages are gated twice: by the edge guard middleware and
by ``guard_page`` on the handler.
"""

from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_optional_session
from reviewdesk.api.v1.admin import list_users_with_roles
from reviewdesk.api.v1.creator import get_visible_resume, visible_resumes
from reviewdesk.api.v1.experiences import ExperienceResponse, list_experiences
from reviewdesk.api.v1.follow import is_following
from reviewdesk.api.v1.profile import profile_to_dict
from reviewdesk.core.errors import not_found_error
from reviewdesk.core.role_guard import PageRedirect, guard_page
from reviewdesk.core.roles import Role, get_default_redirect_path
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import RESUME_STATUSES, Follow, Profile, Resume, Review, Reviewer
from reviewdesk.services.resumes import (
    list_user_resumes,
    resume_with_owner,
    resume_with_reviewer,
    reviewer_summary,
)
from reviewdesk.services.reviewers import (
    EXPERTISE_OPTIONS,
    average_rating,
    follower_count,
    get_reviewer_by_slug,
    get_reviewer_for_user,
    reviewer_to_dict,
    search_reviewers,
)
from reviewdesk.services.text import HEADLINE_WORD_LIMIT

router = APIRouter(tags=["Pages"])

users_page = guard_page(Role.USER, Role.ADMIN)
any_role_page = guard_page(Role.USER, Role.REVIEWER, Role.ADMIN)
reviewers_page = guard_page(Role.REVIEWER, Role.ADMIN)
admin_page = guard_page(Role.ADMIN)


def _status_counts(resumes: list[Resume]) -> dict[str, int]:
    counts = Counter(resume.status for resume in resumes)
    return {status: counts.get(status, 0) for status in RESUME_STATUSES}


# ============== Public pages ==============


@router.get("/")
async def home(session: Optional[UserSession] = Depends(get_optional_session)):
    return {
        "page": "home",
        "user": session.user if session else None,
        "dashboard_url": get_default_redirect_path(session.role) if session else None,
    }


@router.get("/login")
async def login_page(
    next: Optional[str] = None,
    session: Optional[UserSession] = Depends(get_optional_session),
):
    """Signed-in visitors go straight to where they were headed or to their landing page."""
    if session is not None:
        if next and next.startswith("/") and not next.startswith("//"):
            raise PageRedirect(next)
        raise PageRedirect(get_default_redirect_path(session.role))
    return {"page": "login", "next": next}


@router.get("/become-reviewer")
async def become_reviewer(
    session: Optional[UserSession] = Depends(get_optional_session),
    db: Session = Depends(get_db),
):
    reviewer = get_reviewer_for_user(db, session.user.id) if session else None
    return {
        "page": "become-reviewer",
        "authenticated": session is not None,
        "is_reviewer": reviewer is not None,
        "expertise_options": list(EXPERTISE_OPTIONS),
        "min_slug_length": 3,
    }


@router.get("/r/{slug}")
async def reviewer_public_page(
    slug: str,
    session: Optional[UserSession] = Depends(get_optional_session),
    db: Session = Depends(get_db),
):
    reviewer = get_reviewer_by_slug(db, slug)
    if reviewer is None:
        raise not_found_error("Reviewer not found")
    return {
        "page": "reviewer",
        "reviewer": reviewer_to_dict(db, reviewer),
        "experiences": [ExperienceResponse.model_validate(e) for e in list_experiences(db, reviewer)],
        "following": is_following(db, session.user.id, reviewer.user_id) if session else False,
        "is_owner": bool(session and session.user.id == reviewer.user_id),
    }


# ============== User pages ==============


@router.get("/dashboard")
async def dashboard(session: UserSession = Depends(users_page), db: Session = Depends(get_db)):
    resumes = list_user_resumes(db, session.user.id)
    return {
        "page": "dashboard",
        "user": session.user,
        "resumes": [resume_with_reviewer(db, resume) for resume in resumes],
        "status_counts": _status_counts(resumes),
    }


@router.get("/upload")
async def upload_page(
    reviewer: Optional[str] = None,
    session: UserSession = Depends(users_page),
    db: Session = Depends(get_db),
):
    target = get_reviewer_by_slug(db, reviewer) if reviewer else None
    return {
        "page": "upload",
        "reviewer": reviewer_summary(target),
        "accepted_types": ["application/pdf"],
    }


@router.get("/reviewers")
async def find_reviewers(
    expertise: Optional[str] = None,
    q: Optional[str] = None,
    session: UserSession = Depends(users_page),
    db: Session = Depends(get_db),
):
    """Reviewer directory; defaults the search to the caller's desired job title."""
    profile = db.query(Profile).filter(Profile.id == session.user.id).first()
    desired = profile.desired_job_title if profile else None

    reviewers = search_reviewers(db, expertise=expertise, query=q)
    followed = {
        follow.reviewer_id
        for follow in db.query(Follow).filter(Follow.follower_id == session.user.id).all()
    }
    return {
        "page": "reviewers",
        "desired_job_title": desired,
        "reviewers": [
            {**reviewer_to_dict(db, r), "following": r.user_id in followed} for r in reviewers
        ],
    }


@router.get("/settings/profile")
async def profile_settings(session: UserSession = Depends(any_role_page), db: Session = Depends(get_db)):
    profile = db.query(Profile).filter(Profile.id == session.user.id).first()
    return {
        "page": "settings-profile",
        "user": session.user,
        "role": session.role,
        "profile": profile_to_dict(profile) if profile else {"onboarded": False},
    }


# ============== Reviewer pages ==============


@router.get("/creator")
async def creator_home(session: UserSession = Depends(reviewers_page), db: Session = Depends(get_db)):
    reviewer = get_reviewer_for_user(db, session.user.id)
    if reviewer is None and session.role != Role.ADMIN:
        # Reviewer role without a page yet: finish the sign-up first
        raise PageRedirect("/become-reviewer")

    resumes = (
        visible_resumes(db, session)
        .order_by(Resume.created_at.desc(), Resume.id.desc())
        .all()
    )
    return {
        "page": "creator",
        "reviewer": reviewer_to_dict(db, reviewer) if reviewer else None,
        "resumes": [resume_with_owner(db, resume) for resume in resumes],
        "status_counts": _status_counts(resumes),
    }


@router.get("/creator/profile")
async def creator_profile(session: UserSession = Depends(reviewers_page), db: Session = Depends(get_db)):
    reviewer = get_reviewer_for_user(db, session.user.id)
    return {
        "page": "creator-profile",
        "reviewer": reviewer_to_dict(db, reviewer, with_stats=False) if reviewer else None,
        "experiences": (
            [ExperienceResponse.model_validate(e) for e in list_experiences(db, reviewer)]
            if reviewer
            else []
        ),
        "expertise_options": list(EXPERTISE_OPTIONS),
        "headline_word_limit": HEADLINE_WORD_LIMIT,
    }


@router.get("/creator/reviews")
async def creator_reviews(session: UserSession = Depends(reviewers_page), db: Session = Depends(get_db)):
    reviews = (
        db.query(Review)
        .filter(Review.reviewer_id == session.user.id)
        .order_by(Review.updated_at.desc())
        .all()
    )
    return {
        "page": "creator-reviews",
        "reviews": [
            {
                "id": review.id,
                "resume_id": review.resume_id,
                "score": review.score,
                "feedback": review.feedback,
                "updated_at": review.updated_at,
            }
            for review in reviews
        ],
    }


@router.get("/creator/analytics")
async def creator_analytics(session: UserSession = Depends(reviewers_page), db: Session = Depends(get_db)):
    reviewer = get_reviewer_for_user(db, session.user.id)
    scores = [
        score
        for (score,) in db.query(Review.score).filter(Review.reviewer_id == session.user.id).all()
    ]
    distribution = Counter(scores)
    return {
        "page": "creator-analytics",
        "review_count": len(scores),
        "average_score": round(sum(scores) / len(scores), 2) if scores else None,
        "score_distribution": {str(score): distribution.get(score, 0) for score in range(1, 11)},
        "follower_count": follower_count(db, reviewer) if reviewer else 0,
        "rating": average_rating(db, reviewer) if reviewer else None,
    }


@router.get("/creator/review/{resume_id}")
async def creator_review(
    resume_id: int,
    session: UserSession = Depends(reviewers_page),
    db: Session = Depends(get_db),
):
    resume = get_visible_resume(db, session, resume_id)
    existing = (
        db.query(Review)
        .filter(Review.reviewer_id == session.user.id, Review.resume_id == resume.id)
        .first()
    )
    return {
        "page": "creator-review",
        "resume": resume_with_owner(db, resume),
        "review": (
            {"score": existing.score, "feedback": existing.feedback} if existing else None
        ),
        "statuses": list(RESUME_STATUSES),
        "score_range": [1, 10],
    }


# ============== Admin pages ==============


@router.get("/admin")
async def admin_home(session: UserSession = Depends(admin_page), db: Session = Depends(get_db)):
    resumes = db.query(Resume).order_by(Resume.created_at.desc(), Resume.id.desc()).all()
    return {
        "page": "admin",
        "resumes": [resume_with_owner(db, resume) for resume in resumes],
        "status_counts": _status_counts(resumes),
        "reviewer_count": db.query(Reviewer).count(),
    }


@router.get("/admin/users")
async def admin_users(session: UserSession = Depends(admin_page), db: Session = Depends(get_db)):
    return {"page": "admin-users", "users": list_users_with_roles(db)}


@router.get("/admin/reviewers")
async def admin_reviewers(session: UserSession = Depends(admin_page), db: Session = Depends(get_db)):
    reviewers = db.query(Reviewer).order_by(Reviewer.created_at.desc()).all()
    return {"page": "admin-reviewers", "reviewers": [reviewer_to_dict(db, r) for r in reviewers]}


@router.get("/admin/resumes")
async def admin_resumes(session: UserSession = Depends(admin_page), db: Session = Depends(get_db)):
    resumes = db.query(Resume).order_by(Resume.created_at.desc(), Resume.id.desc()).all()
    return {"page": "admin-resumes", "resumes": [resume_with_owner(db, resume) for resume in resumes]}


@router.get("/admin/{resume_id}")
async def admin_edit_resume(
    resume_id: int,
    session: UserSession = Depends(admin_page),
    db: Session = Depends(get_db),
):
    resume = db.query(Resume).filter(Resume.id == resume_id).first()
    if resume is None:
        raise PageRedirect("/admin")
    return {
        "page": "admin-edit",
        "resume": resume_with_owner(db, resume),
        "statuses": list(RESUME_STATUSES),
        "form_action": f"/api/v1/admin/resumes/{resume.id}",
    }
