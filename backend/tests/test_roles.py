"""Tests for the static role model: permissions, route table and landing pages."""

import pytest

from reviewdesk.core.roles import (
    INSUFFICIENT_PERMISSIONS,
    ROLE_PERMISSIONS,
    ROUTE_ACCESS,
    ROUTE_NOT_FOUND,
    Role,
    check_route_access,
    find_route_rule,
    get_default_redirect_path,
    get_permissions_for_role,
    has_permission,
    is_valid_role,
    route_matches,
)


def _concrete(path: str) -> str:
    return path.replace("[slug]", "jane").replace("[id]", "42")


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("rule", ROUTE_ACCESS, ids=lambda rule: rule.path)
def test_route_access_matches_rule(role, rule):
    path = _concrete(rule.path)
    matched = find_route_rule(path)
    decision = check_route_access(role, path)

    expected = (not matched.requires_auth) or role in matched.roles
    assert decision.allowed is expected
    if not expected:
        assert decision.reason == INSUFFICIENT_PERMISSIONS
    else:
        assert decision.reason is None


def test_unknown_route_is_denied():
    decision = check_route_access(Role.ADMIN, "/nowhere")
    assert decision.allowed is False
    assert decision.reason == ROUTE_NOT_FOUND


def test_unauthenticated_role_only_opens_public_routes():
    assert check_route_access(None, "/").allowed
    assert check_route_access(None, "/r/jane").allowed
    assert check_route_access(None, "/dashboard").reason == INSUFFICIENT_PERMISSIONS


def test_literal_route_declared_before_pattern_wins():
    assert find_route_rule("/admin/users").description == "Manage users"
    assert find_route_rule("/admin/17").description == "Edit resume"


def test_bracket_pattern_matches_exactly_one_segment():
    assert route_matches("/r/[slug]", "/r/jane")
    assert not route_matches("/r/[slug]", "/r/")
    assert not route_matches("/r/[slug]", "/r/jane/extra")
    assert not route_matches("/r/[slug]", "/prefix/r/jane")


def test_user_routes():
    assert check_route_access(Role.USER, "/dashboard").allowed
    assert not check_route_access(Role.REVIEWER, "/dashboard").allowed
    assert check_route_access(Role.REVIEWER, "/settings/profile").allowed
    assert not check_route_access(Role.USER, "/creator").allowed
    assert check_route_access(Role.ADMIN, "/creator/review/9").allowed


def test_default_redirect_paths():
    assert get_default_redirect_path(Role.ADMIN) == "/admin"
    assert get_default_redirect_path(Role.REVIEWER) == "/creator"
    assert get_default_redirect_path(Role.USER) == "/dashboard"
    assert get_default_redirect_path("reviewer") == "/creator"
    assert get_default_redirect_path("superuser") == "/dashboard"
    assert len({get_default_redirect_path(role) for role in Role}) == 3


def test_permissions_are_cumulative():
    user = set(ROLE_PERMISSIONS[Role.USER])
    reviewer = set(ROLE_PERMISSIONS[Role.REVIEWER])
    admin = set(ROLE_PERMISSIONS[Role.ADMIN])
    assert user < reviewer < admin
    assert has_permission(Role.ADMIN, "manage_system")
    assert not has_permission(Role.USER, "review_resumes")


def test_get_permissions_returns_copy():
    permissions = get_permissions_for_role(Role.USER)
    permissions.append("manage_system")
    assert not has_permission(Role.USER, "manage_system")
    assert len(get_permissions_for_role(Role.USER)) == 5


def test_is_valid_role():
    assert is_valid_role("user")
    assert is_valid_role("admin")
    assert not is_valid_role("Admin")
    assert not is_valid_role(None)
    assert not is_valid_role("")
