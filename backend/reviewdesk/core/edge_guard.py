"""
Edge route guard.

Starlette middleware that runs before every page navigation: static assets
and API calls pass straight through, public pages are open, and everything
else needs a session whose role the route table allows.
"""

import logging
import re
from typing import Callable, Optional
from urllib.parse import quote

from fastapi import Request, status
from fastapi.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import HTTPConnection
from starlette.responses import RedirectResponse

from reviewdesk.core.roles import check_route_access, get_default_redirect_path
from reviewdesk.core.session import Session

logger = logging.getLogger("reviewdesk.edge_guard")

SKIP_PREFIXES = ("/api/", "/_next/", "/static/", "/public/")
SKIP_PATHS = frozenset({"/api", "/favicon.ico", "/docs", "/redoc", "/openapi.json", "/health"})

PUBLIC_PATHS = frozenset(
    {
        "/",
        "/login",
        "/become-reviewer",
        "/become-reviewer-auth",
        "/reviewer-login",
        "/leaderboard",
        "/auth/callback",
    }
)

PUBLIC_PATTERNS = (
    re.compile(r"^/r/[^/]+$"),  # public reviewer profile
    re.compile(r"^/debug(/.*)?$"),
)

LOGIN_PATH = "/login"


def should_skip(path: str) -> bool:
    """Requests the guard never looks at: API routes, docs, and anything that looks like a file."""
    if path in SKIP_PATHS or path.startswith(SKIP_PREFIXES):
        return True
    return "." in path


def is_public_path(path: str) -> bool:
    if path in PUBLIC_PATHS:
        return True
    return any(pattern.match(path) for pattern in PUBLIC_PATTERNS)


def login_redirect_url(path: str) -> str:
    return f"{LOGIN_PATH}?next={quote(path, safe='')}"


class EdgeGuardMiddleware(BaseHTTPMiddleware):
    """
    Gate page navigations on the session and the route table.

    - no session: 302 to ``/login?next=<path>``
    - role not allowed (or unknown route): 302 to the role's landing page
    - allowed: ``request.state.user_role`` / ``user_id`` are set for the handler
    """

    def __init__(self, app, resolve: Callable[[HTTPConnection], Optional[Session]]):
        super().__init__(app)
        self.resolve = resolve

    async def _resolve(self, request: Request) -> Optional[Session]:
        try:
            return await run_in_threadpool(self.resolve, request)
        except Exception:
            logger.warning(f"Session lookup failed for {request.url.path}", exc_info=True)
            return None

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if should_skip(path) or is_public_path(path):
            return await call_next(request)

        session = await self._resolve(request)
        if session is None:
            logger.info(f"Unauthenticated request to {path}; redirecting to login")
            return RedirectResponse(login_redirect_url(path), status_code=status.HTTP_302_FOUND)

        decision = check_route_access(session.role, path)
        if not decision.allowed:
            target = get_default_redirect_path(session.role)
            logger.info(
                f"{session.role.value} denied on {path} ({decision.reason}); redirecting to {target}"
            )
            return RedirectResponse(target, status_code=status.HTTP_302_FOUND)

        request.state.user_role = session.role.value
        request.state.user_id = session.user.id
        return await call_next(request)
