"""Reviewer slug sanitizing and collision resolution."""

import re
from typing import Callable, Optional

from sqlalchemy.orm import Session

from reviewdesk.core.errors import validation_error
from reviewdesk.models import Reviewer

MIN_SLUG_LENGTH = 3
MAX_SLUG_ATTEMPTS = 100

_INVALID_SLUG_CHARS = re.compile(r"[^a-z0-9-]")


def sanitize_slug(value: str) -> str:
    """Lower-case and keep only ``[a-z0-9-]``; spaces become hyphens."""
    value = (value or "").strip().lower()
    value = re.sub(r"\s+", "-", value)
    return _INVALID_SLUG_CHARS.sub("", value)


def resolve_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """
    Find a free slug starting from ``base``.

    Tries ``base`` and then ``base-1`` .. ``base-100``.

    Raises:
        AppError: 400 ``slug_taken`` when every candidate is taken
    """
    if not is_taken(base):
        return base
    for suffix in range(1, MAX_SLUG_ATTEMPTS + 1):
        candidate = f"{base}-{suffix}"
        if not is_taken(candidate):
            return candidate
    raise validation_error(
        "This URL is already taken. Please choose a different one.",
        field="slug",
        code="slug_taken",
    )


def assign_unique_slug(db: Session, requested: str, owner_user_id: Optional[str] = None) -> str:
    """
    Sanitize ``requested`` and resolve collisions against stored reviewers.

    The reviewer record belonging to ``owner_user_id`` never counts as a
    collision, so re-saving an unchanged slug keeps it.
    """
    base = sanitize_slug(requested)
    if len(base) < MIN_SLUG_LENGTH:
        raise validation_error(
            f"Slug must be at least {MIN_SLUG_LENGTH} characters (a-z, 0-9, -)",
            field="slug",
        )

    def is_taken(slug: str) -> bool:
        query = db.query(Reviewer.id).filter(Reviewer.slug == slug)
        if owner_user_id is not None:
            query = query.filter(Reviewer.user_id != owner_user_id)
        return query.first() is not None

    return resolve_slug(base, is_taken)
