"""
Follow API endpoints.

Following is keyed by (follower identity, reviewer identity). The POST
endpoint serves both plain HTML forms (redirect back to the page) and
script clients (JSON).
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session
from reviewdesk.core.errors import not_found_error, validation_error
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import Follow
from reviewdesk.services.reviewers import get_reviewer_by_slug

logger = logging.getLogger("reviewdesk.api.follow")

router = APIRouter()

FOLLOW_ACTIONS = ("follow", "unfollow")


# ============== Helper Functions ==============


async def _read_follow_params(request: Request) -> dict[str, Optional[str]]:
    """Read slug/action/next from a form post, a JSON body or the query string."""
    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        form = await request.form()
        source = {key: form.get(key) for key in ("slug", "action", "next")}
    elif "application/json" in content_type:
        try:
            body = await request.json()
        except (ValueError, json.JSONDecodeError):
            body = {}
        source = body if isinstance(body, dict) else {}
    else:
        source = dict(request.query_params)

    return {
        key: (str(source.get(key)).strip() or None) if source.get(key) is not None else None
        for key in ("slug", "action", "next")
    }


def _wants_redirect(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    accept = request.headers.get("accept", "")
    return "application/x-www-form-urlencoded" in content_type or "text/html" in accept


def _safe_next(next_url: Optional[str], slug: str) -> str:
    # Only same-site paths; anything else goes back to the reviewer page
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return f"/r/{slug}"


def is_following(db: Session, follower_id: str, reviewer_user_id: str) -> bool:
    return (
        db.query(Follow)
        .filter(Follow.follower_id == follower_id, Follow.reviewer_id == reviewer_user_id)
        .first()
        is not None
    )


def follow_reviewer(db: Session, follower_id: str, reviewer_user_id: str) -> None:
    """Idempotent: following twice leaves one record."""
    if is_following(db, follower_id, reviewer_user_id):
        return
    db.add(Follow(follower_id=follower_id, reviewer_id=reviewer_user_id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair
        db.rollback()


def unfollow_reviewer(db: Session, follower_id: str, reviewer_user_id: str) -> None:
    """Idempotent: unfollowing when not following is a no-op."""
    db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.reviewer_id == reviewer_user_id,
    ).delete(synchronize_session=False)
    db.commit()


# ============== API Endpoints ==============


@router.get("")
async def get_follow_state(
    slug: Optional[str] = None,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    if not slug:
        raise validation_error("Missing slug", field="slug")
    reviewer = get_reviewer_by_slug(db, slug)
    if reviewer is None:
        return {"following": False}
    return {"following": is_following(db, session.user.id, reviewer.user_id)}


@router.post("")
async def change_follow_state(
    request: Request,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    params = await _read_follow_params(request)
    slug, action = params["slug"], params["action"]

    if not slug:
        raise validation_error("Missing slug", field="slug")
    if action not in FOLLOW_ACTIONS:
        raise validation_error("Action must be 'follow' or 'unfollow'", field="action")

    reviewer = get_reviewer_by_slug(db, slug)
    if reviewer is None:
        raise not_found_error("Reviewer not found")

    if action == "follow":
        follow_reviewer(db, session.user.id, reviewer.user_id)
    else:
        unfollow_reviewer(db, session.user.id, reviewer.user_id)
    logger.info(f"{session.user.id} {action}ed {reviewer.slug}")

    if _wants_redirect(request):
        return RedirectResponse(
            _safe_next(params["next"], reviewer.slug),
            status_code=status.HTTP_303_SEE_OTHER,
        )
    return {"following": action == "follow"}
