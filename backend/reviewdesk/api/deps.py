"""
Shared dependencies for the API routers.

Every handler derives its session through ``get_optional_session`` (the same
resolver the guards use) and enforces its role and ownership rules itself.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from reviewdesk.core.config import settings
from reviewdesk.core.errors import rate_limit_error
from reviewdesk.core.rate_limit import rate_limit_key
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session as UserSession, require_any_role, require_auth
from reviewdesk.db.session import get_db
from reviewdesk.services.identity import session_for_connection


def get_optional_session(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[UserSession]:
    """Resolved session for the request, or None when unauthenticated."""
    return session_for_connection(db, request)


def get_current_session(
    session: Optional[UserSession] = Depends(get_optional_session),
) -> UserSession:
    return require_auth(session)


def require_roles(*roles: Role):
    """
    Dependency factory requiring one of ``roles``.

    Usage:
        @router.get("/resumes")
        async def list_resumes(session: UserSession = Depends(require_roles(Role.REVIEWER, Role.ADMIN))):
            ...
    """

    def checker(session: Optional[UserSession] = Depends(get_optional_session)) -> UserSession:
        return require_any_role(session, roles)

    return checker


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def rate_limited(scope: str = "public"):
    """
    Dependency factory counting the request against one installed limiter.

    The app keeps one limiter per scope on ``app.state.rate_limiters``
    (``public`` for open endpoints, ``auth`` for credential endpoints).
    Signed-in callers are counted per user, so users behind one address do
    not share a budget.
    """

    def checker(
        request: Request,
        session: Optional[UserSession] = Depends(get_optional_session),
    ) -> None:
        limiters = getattr(request.app.state, "rate_limiters", None) or {}
        limiter = limiters.get(scope)
        if limiter is None:
            return
        user_id = session.user.id if session else None
        key = rate_limit_key(client_ip(request), request.url.path, user_id)
        if not limiter.check(key):
            raise rate_limit_error(
                f"Rate limit exceeded. Try again in {settings.RATE_LIMIT_WINDOW_SECONDS // 60} minutes"
            )

    return checker
