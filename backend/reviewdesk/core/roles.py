"""
Role model.

Static configuration mapping roles to permissions, routes to the roles allowed
on them, and roles to their landing page.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional


class Role(str, Enum):
    USER = "user"
    REVIEWER = "reviewer"
    ADMIN = "admin"


VALID_ROLES = tuple(role.value for role in Role)

_USER_PERMISSIONS = [
    "upload_resume",
    "view_reviewers",
    "follow_reviewer",
    "view_own_resumes",
    "edit_own_profile",
]

_REVIEWER_PERMISSIONS = _USER_PERMISSIONS + [
    "create_reviewer_profile",
    "edit_reviewer_profile",
    "view_own_reviews",
    "review_resumes",
    "manage_followers",
]

_ADMIN_PERMISSIONS = _REVIEWER_PERMISSIONS + [
    "manage_all_users",
    "manage_all_reviewers",
    "manage_all_resumes",
    "view_analytics",
    "manage_system",
]

ROLE_PERMISSIONS: dict[Role, tuple[str, ...]] = {
    Role.USER: tuple(_USER_PERMISSIONS),
    Role.REVIEWER: tuple(_REVIEWER_PERMISSIONS),
    Role.ADMIN: tuple(_ADMIN_PERMISSIONS),
}


@dataclass(frozen=True)
class RouteRule:
    path: str
    roles: tuple[Role, ...]
    requires_auth: bool
    description: str = ""


@dataclass(frozen=True)
class RouteAccessDecision:
    allowed: bool
    reason: Optional[str] = None


ROUTE_NOT_FOUND = "Route not found"
INSUFFICIENT_PERMISSIONS = "Insufficient permissions"

_ALL = (Role.USER, Role.REVIEWER, Role.ADMIN)
_USERS = (Role.USER, Role.ADMIN)
_REVIEWERS = (Role.REVIEWER, Role.ADMIN)
_ADMINS = (Role.ADMIN,)

# First matching rule wins, so literal paths go before the bracket patterns
# that would also match them.
ROUTE_ACCESS: tuple[RouteRule, ...] = (
    # Public routes
    RouteRule("/", (), False, "Home page"),
    RouteRule("/login", (), False, "Login page"),
    RouteRule("/become-reviewer", (), False, "Become reviewer page"),
    RouteRule("/become-reviewer-auth", (), False, "Reviewer auth page"),
    RouteRule("/reviewer-login", (), False, "Reviewer login page"),
    RouteRule("/leaderboard", (), False, "Leaderboard"),
    RouteRule("/r/[slug]", (), False, "Public reviewer profile"),
    # User routes
    RouteRule("/dashboard", _USERS, True, "User dashboard"),
    RouteRule("/upload", _USERS, True, "Upload resume"),
    RouteRule("/reviewers", _USERS, True, "Find reviewers"),
    RouteRule("/settings/profile", _ALL, True, "User profile settings"),
    # Reviewer routes
    RouteRule("/creator", _REVIEWERS, True, "Reviewer dashboard"),
    RouteRule("/creator/profile", _REVIEWERS, True, "Edit reviewer profile"),
    RouteRule("/creator/reviews", _REVIEWERS, True, "Manage reviews"),
    RouteRule("/creator/analytics", _REVIEWERS, True, "Reviewer analytics"),
    RouteRule("/creator/review/[id]", _REVIEWERS, True, "Review a resume"),
    # Admin routes
    RouteRule("/admin", _ADMINS, True, "Admin dashboard"),
    RouteRule("/admin/users", _ADMINS, True, "Manage users"),
    RouteRule("/admin/reviewers", _ADMINS, True, "Manage reviewers"),
    RouteRule("/admin/resumes", _ADMINS, True, "Manage resumes"),
    RouteRule("/admin/[id]", _ADMINS, True, "Edit resume"),
)

DEFAULT_REDIRECT_PATHS: dict[Role, str] = {
    Role.ADMIN: "/admin",
    Role.REVIEWER: "/creator",
    Role.USER: "/dashboard",
}


def is_valid_role(value: object) -> bool:
    return isinstance(value, str) and value in VALID_ROLES


def get_permissions_for_role(role: Role) -> list[str]:
    return list(ROLE_PERMISSIONS.get(role, ()))


def has_permission(role: Role, permission: str) -> bool:
    """Check whether a role's static permission list contains ``permission``."""
    return permission in ROLE_PERMISSIONS.get(role, ())


def get_default_redirect_path(role: Optional[Role]) -> str:
    """Landing page for a role; unknown values fall back to the user dashboard."""
    try:
        return DEFAULT_REDIRECT_PATHS[Role(role)]
    except ValueError:
        return DEFAULT_REDIRECT_PATHS[Role.USER]


@lru_cache(maxsize=None)
def _compile_pattern(pattern: str) -> re.Pattern:
    parts = re.split(r"\[[^\]]*\]", pattern)
    return re.compile("[^/]+".join(re.escape(part) for part in parts))


def route_matches(pattern: str, path: str) -> bool:
    """
    Match a request path against a route pattern.

    A ``[param]`` placeholder matches exactly one non-empty path segment;
    everything else must match literally.
    """
    if pattern == path:
        return True
    if "[" not in pattern:
        return False
    return _compile_pattern(pattern).fullmatch(path) is not None


def find_route_rule(path: str) -> Optional[RouteRule]:
    for rule in ROUTE_ACCESS:
        if route_matches(rule.path, path):
            return rule
    return None


def check_route_access(role: Optional[Role], path: str) -> RouteAccessDecision:
    """
    Decide whether ``role`` may open ``path``.

    Args:
        role: The caller's role (None when unauthenticated)
        path: Request path without query string

    Returns:
        The decision, with a reason when access is denied
    """
    rule = find_route_rule(path)
    if rule is None:
        return RouteAccessDecision(False, ROUTE_NOT_FOUND)
    if not rule.requires_auth:
        return RouteAccessDecision(True)
    if role not in rule.roles:
        return RouteAccessDecision(False, INSUFFICIENT_PERMISSIONS)
    return RouteAccessDecision(True)
