"""
Page-level role guard.

``RoleGuard`` wraps one page mount: it starts in ``loading``, resolves the
session through the shared resolver, and ends in ``allowed``,
``redirecting`` (navigation requested) or ``denied_fallback`` (nowhere to
navigate to). ``guard_page`` exposes it as a FastAPI dependency whose
redirects become 302 responses.

A guard does not cancel an in-flight check: calling ``mount`` again before
the first call finishes lets both run, and whichever finishes last decides
the state.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, Optional

from fastapi import Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session as DbSession

from reviewdesk.core.errors import authorization_error
from reviewdesk.core.roles import Role, get_default_redirect_path
from reviewdesk.core.session import Session
from reviewdesk.db.session import get_db
from reviewdesk.services.identity import session_for_connection

logger = logging.getLogger("reviewdesk.role_guard")

LOGIN_PATH = "/login"


class GuardState(str, Enum):
    LOADING = "loading"
    ALLOWED = "allowed"
    REDIRECTING = "redirecting"
    DENIED_FALLBACK = "denied_fallback"


class RoleGuard:
    """
    Declarative allow-list for one page.

    Args:
        allowed_roles: Roles that may see the page
        resolve: Returns the current session, or None when unauthenticated
        navigate: Performs a client navigation; without one, denials end in
            ``denied_fallback``
        redirect_to: Where to send signed-in users whose role is not allowed;
            defaults to their role's landing page
    """

    def __init__(
        self,
        allowed_roles: Iterable[Role],
        resolve: Callable[[], Optional[Session]],
        navigate: Optional[Callable[[str], None]] = None,
        redirect_to: Optional[str] = None,
    ):
        self.allowed_roles = tuple(Role(role) for role in allowed_roles)
        self.resolve = resolve
        self.navigate = navigate
        self.redirect_to = redirect_to
        self.state = GuardState.LOADING
        self.session: Optional[Session] = None
        self.target: Optional[str] = None

    def _deny(self, target: str) -> GuardState:
        self.target = target
        if self.navigate is None:
            self.state = GuardState.DENIED_FALLBACK
        else:
            self.navigate(target)
            self.state = GuardState.REDIRECTING
        return self.state

    def mount(self) -> GuardState:
        self.state = GuardState.LOADING
        session = self.resolve()
        if session is None:
            return self._deny(LOGIN_PATH)

        if session.role not in self.allowed_roles:
            return self._deny(self.redirect_to or get_default_redirect_path(session.role))

        self.session = session
        self.target = None
        self.state = GuardState.ALLOWED
        return self.state

    @property
    def can_render(self) -> bool:
        """Children render only once access is confirmed."""
        return self.state == GuardState.ALLOWED


class PageRedirect(Exception):
    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


async def page_redirect_handler(request: Request, exc: PageRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_302_FOUND)


def guard_page(*roles: Role, redirect_to: Optional[str] = None):
    """
    Dependency factory guarding a page handler.

    Usage:
        @router.get("/creator")
        async def creator_home(session: Session = Depends(guard_page(Role.REVIEWER, Role.ADMIN))):
            ...
    """

    def dependency(request: Request, db: DbSession = Depends(get_db)) -> Session:
        guard = RoleGuard(
            roles,
            resolve=lambda: session_for_connection(db, request),
            navigate=lambda target: None,
            redirect_to=redirect_to,
        )
        state = guard.mount()
        if state == GuardState.REDIRECTING:
            logger.info(f"Page guard redirecting {request.url.path} to {guard.target}")
            raise PageRedirect(guard.target)
        if state != GuardState.ALLOWED:
            raise authorization_error()
        return guard.session

    return dependency
