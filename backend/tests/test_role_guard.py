"""Tests for the page-level role guard state machine."""

from reviewdesk.core.role_guard import GuardState, RoleGuard
from reviewdesk.core.roles import Role
from reviewdesk.core.session import Session, SessionUser


def _session(role: Role) -> Session:
    return Session(
        user=SessionUser(id="u1", email="u1@example.com", role=role),
        role=role,
        permissions=[],
    )


def test_starts_loading():
    guard = RoleGuard([Role.USER], resolve=lambda: _session(Role.USER))
    assert guard.state == GuardState.LOADING
    assert not guard.can_render


def test_allowed_role_renders():
    guard = RoleGuard([Role.USER, Role.ADMIN], resolve=lambda: _session(Role.ADMIN))
    assert guard.mount() == GuardState.ALLOWED
    assert guard.can_render
    assert guard.session.role == Role.ADMIN


def test_unauthenticated_navigates_to_login():
    visited = []
    guard = RoleGuard([Role.USER], resolve=lambda: None, navigate=visited.append)
    assert guard.mount() == GuardState.REDIRECTING
    assert visited == ["/login"]
    assert not guard.can_render


def test_wrong_role_navigates_to_landing_page():
    visited = []
    guard = RoleGuard([Role.ADMIN], resolve=lambda: _session(Role.REVIEWER), navigate=visited.append)
    assert guard.mount() == GuardState.REDIRECTING
    assert visited == ["/creator"]


def test_explicit_redirect_target():
    visited = []
    guard = RoleGuard(
        [Role.ADMIN],
        resolve=lambda: _session(Role.USER),
        navigate=visited.append,
        redirect_to="/upload",
    )
    guard.mount()
    assert visited == ["/upload"]


def test_without_navigator_lands_in_fallback():
    guard = RoleGuard([Role.ADMIN], resolve=lambda: _session(Role.USER))
    assert guard.mount() == GuardState.DENIED_FALLBACK
    assert guard.target == "/dashboard"
    assert not guard.can_render


def test_fresh_guard_starts_over():
    first = RoleGuard([Role.ADMIN], resolve=lambda: None)
    first.mount()
    second = RoleGuard([Role.ADMIN], resolve=lambda: _session(Role.ADMIN))
    assert second.state == GuardState.LOADING
    assert second.mount() == GuardState.ALLOWED


def test_overlapping_mounts_are_not_cancelled():
    """A second mount started during the first one is not cancelled: the last to finish wins."""
    visited = []
    outcomes = iter([None])

    def resolve():
        nxt = next(outcomes, "done")
        if nxt is None:
            # Re-mount while the first check is still in flight
            guard.mount()
            return None
        return _session(Role.USER)

    guard = RoleGuard([Role.USER], resolve=resolve, navigate=visited.append)
    final = guard.mount()

    # The inner mount allowed access, then the outer one overwrote it
    assert final == GuardState.REDIRECTING
    assert visited == ["/login"]
