"""
Session resolution.

One resolver turns the current request's identity into a ``Session`` (identity
fields + role + permissions + onboarding state). The edge guard, the page
guard and the API dependencies all call ``resolve_session`` with an
``IdentitySource`` bound to their request, so role resolution exists in
exactly one place.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Protocol

from pydantic import BaseModel

from reviewdesk.core.errors import authentication_error, authorization_error
from reviewdesk.core.roles import Role, get_permissions_for_role, is_valid_role

logger = logging.getLogger("reviewdesk.session")


class IdentityRecord(Protocol):
    id: str
    email: str
    full_name: Optional[str]
    avatar_url: Optional[str]
    user_metadata: Optional[dict]
    created_at: Optional[datetime]


class ProfileRecord(Protocol):
    role: Optional[str]
    onboarded: Optional[bool]
    updated_at: Optional[datetime]


class IdentitySource(Protocol):
    """What the resolver needs from the identity provider and the data store."""

    def get_current_identity(self) -> Optional[IdentityRecord]: ...

    def get_profile(self, identity_id: str) -> Optional[ProfileRecord]: ...

    def create_profile(self, identity_id: str) -> ProfileRecord: ...

    def has_reviewer_record(self, identity_id: str) -> bool: ...


class SessionUser(BaseModel):
    id: str
    email: str
    role: Role
    onboarded: bool = False
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Session(BaseModel):
    user: SessionUser
    role: Role
    permissions: list[str]
    is_authenticated: bool = True


# ============== Role precedence ==============


@dataclass(frozen=True)
class RoleContext:
    identity: Any
    profile: Any
    source: IdentitySource
    admin_emails: frozenset[str]


@dataclass(frozen=True)
class RoleDecision:
    role: Role
    source: str


def _from_admin_allow_list(ctx: RoleContext) -> Optional[Role]:
    email = (ctx.identity.email or "").strip().lower()
    if email and email in ctx.admin_emails:
        return Role.ADMIN
    return None


def _from_profile_role(ctx: RoleContext) -> Optional[Role]:
    role = getattr(ctx.profile, "role", None)
    if is_valid_role(role):
        return Role(role)
    return None


def _from_reviewer_record(ctx: RoleContext) -> Optional[Role]:
    # Older accounts became reviewers before profiles carried a role.
    if ctx.source.has_reviewer_record(ctx.identity.id):
        return Role.REVIEWER
    return None


def _default_role(ctx: RoleContext) -> Optional[Role]:
    return Role.USER


ROLE_PRECEDENCE: tuple[tuple[str, Callable[[RoleContext], Optional[Role]]], ...] = (
    ("admin_allow_list", _from_admin_allow_list),
    ("profile_role", _from_profile_role),
    ("reviewer_record", _from_reviewer_record),
    ("default", _default_role),
)


def normalize_admin_emails(admin_emails: Iterable[str]) -> frozenset[str]:
    return frozenset(email.strip().lower() for email in admin_emails if email and email.strip())


def determine_role(
    identity: Any,
    profile: Any,
    source: IdentitySource,
    admin_emails: Iterable[str],
) -> RoleDecision:
    """
    Walk the precedence chain and return the first role that applies.

    Later steps are only evaluated when earlier ones do not decide, so the
    reviewer-record lookup only happens for profiles without a valid role.
    """
    ctx = RoleContext(identity, profile, source, normalize_admin_emails(admin_emails))
    for tag, step in ROLE_PRECEDENCE:
        role = step(ctx)
        if role is not None:
            return RoleDecision(role=role, source=tag)
    return RoleDecision(role=Role.USER, source="default")


# ============== Resolver ==============


def _display_name(identity: Any) -> Optional[str]:
    metadata = getattr(identity, "user_metadata", None) or {}
    if getattr(identity, "full_name", None):
        return identity.full_name
    for key in ("full_name", "name", "display_name"):
        if metadata.get(key):
            return metadata[key]
    first, last = metadata.get("first_name"), metadata.get("last_name")
    if first or last:
        return " ".join(part for part in (first, last) if part)
    return None


def _avatar_url(identity: Any) -> Optional[str]:
    metadata = getattr(identity, "user_metadata", None) or {}
    return (
        getattr(identity, "avatar_url", None)
        or metadata.get("avatar_url")
        or metadata.get("picture")
    )


def resolve_session(
    source: IdentitySource,
    admin_emails: Iterable[str],
    create_missing_profile: bool = True,
) -> Optional[Session]:
    """
    Resolve the session for the identity behind ``source``.

    Args:
        source: Identity and data access bound to the current request
        admin_emails: Addresses that always resolve to ``admin``
        create_missing_profile: Create a default profile (role ``user``,
            not onboarded) when the identity has none; otherwise treat a
            missing profile as no session

    Returns:
        The session, or None when unauthenticated. Data-layer failures are
        logged and also yield None.
    """
    try:
        identity = source.get_current_identity()
        if identity is None:
            return None

        profile = source.get_profile(identity.id)
        if profile is None:
            if not create_missing_profile:
                logger.info(f"No profile for identity {identity.id}")
                return None
            profile = source.create_profile(identity.id)
            logger.info(f"Created default profile for identity {identity.id}")

        decision = determine_role(identity, profile, source, admin_emails)
        logger.debug(f"Role for identity {identity.id}: {decision.role.value} ({decision.source})")

        user = SessionUser(
            id=identity.id,
            email=identity.email or "",
            role=decision.role,
            onboarded=bool(getattr(profile, "onboarded", False)),
            full_name=_display_name(identity),
            avatar_url=_avatar_url(identity),
            created_at=getattr(identity, "created_at", None),
            updated_at=getattr(profile, "updated_at", None) or getattr(identity, "created_at", None),
        )
        return Session(
            user=user,
            role=decision.role,
            permissions=get_permissions_for_role(decision.role),
        )
    except Exception:
        logger.warning("Session resolution failed; treating request as unauthenticated", exc_info=True)
        return None


# ============== Checks ==============


def require_auth(session: Optional[Session]) -> Session:
    if session is None or not session.is_authenticated:
        raise authentication_error()
    return session


def require_role(session: Optional[Session], role: Role) -> Session:
    """Require an exact role; admins pass every role check."""
    session = require_auth(session)
    if session.role != role and session.role != Role.ADMIN:
        raise authorization_error(f"Role '{Role(role).value}' required")
    return session


def require_any_role(session: Optional[Session], roles: Iterable[Role]) -> Session:
    session = require_auth(session)
    allowed = tuple(roles)
    if session.role not in allowed:
        names = " or ".join(Role(role).value for role in allowed)
        raise authorization_error(f"Access denied. Required role: {names}")
    return session


def require_permission(session: Optional[Session], permission: str) -> Session:
    session = require_auth(session)
    if permission not in session.permissions:
        raise authorization_error(f"Permission '{permission}' required")
    return session
