from __future__ import annotations

import pytest

from src.dayflow.dayflow.auth.guard import DecisionKind, RouteGuard
from src.dayflow.dayflow.auth.model import Identity, Profile, SessionSnapshot
from src.dayflow.dayflow.core.constants import CHANGE_PASSWORD_PATH, LOGIN_PATH, ROLE_HOME_PATHS
from src.dayflow.dayflow.core.enums import Role


def _snapshot(*, authenticated=True, loading=False, role=None, first_login=False) -> SessionSnapshot:
    identity = Identity(user_id="u-1", email="u@dayflow.com") if authenticated else None
    profile = Profile(user_id="u-1", name="U", email="u@dayflow.com") if authenticated else None
    return SessionSnapshot(
        authenticated=authenticated,
        identity=identity,
        is_loading=loading,
        profile=profile,
        role=role,
        is_first_login=first_login,
    )


@pytest.fixture
def guard() -> RouteGuard:
    return RouteGuard()


def test_loading_always_shows_placeholder(guard):
    for authenticated in (True, False):
        for role in (None, Role.HR, Role.EMPLOYEE):
            decision = guard.decide(
                _snapshot(authenticated=authenticated, loading=True, role=role, first_login=True),
                "/hr/dashboard",
                [Role.EMPLOYEE],
            )
            assert decision.kind is DecisionKind.LOADING


def test_unauthenticated_redirects_to_login_and_remembers_path(guard):
    decision = guard.decide(_snapshot(authenticated=False), "/hr/attendance", [Role.HR])
    assert decision.kind is DecisionKind.REDIRECT
    assert decision.location == LOGIN_PATH
    assert decision.remembered_path == "/hr/attendance"


def test_first_login_forces_password_change(guard):
    decision = guard.decide(_snapshot(role=Role.HR, first_login=True), "/hr/dashboard", [Role.HR])
    assert decision.kind is DecisionKind.REDIRECT
    assert decision.location == CHANGE_PASSWORD_PATH
    assert decision.remembered_path is None


def test_first_login_takes_precedence_over_role_mismatch(guard):
    decision = guard.decide(_snapshot(role=Role.EMPLOYEE, first_login=True), "/hr/dashboard", [Role.HR])
    assert decision.location == CHANGE_PASSWORD_PATH


def test_first_login_renders_change_password_page_itself(guard):
    decision = guard.decide(_snapshot(role=Role.EMPLOYEE, first_login=True), CHANGE_PASSWORD_PATH)
    assert decision.kind is DecisionKind.RENDER


@pytest.mark.parametrize(
    "role,allowed,home",
    [
        (Role.EMPLOYEE, [Role.HR], ROLE_HOME_PATHS[Role.EMPLOYEE]),
        (Role.HR, [Role.EMPLOYEE], ROLE_HOME_PATHS[Role.HR]),
    ],
)
def test_role_mismatch_redirects_to_own_home(guard, role, allowed, home):
    decision = guard.decide(_snapshot(role=role), "/somewhere", allowed)
    assert decision.kind is DecisionKind.REDIRECT
    assert decision.location == home


def test_unknown_role_renders_while_enrichment_is_pending(guard):
    decision = guard.decide(_snapshot(role=None), "/hr/dashboard", [Role.HR])
    assert decision.kind is DecisionKind.RENDER


def test_matching_role_renders(guard):
    assert guard.decide(_snapshot(role=Role.HR), "/hr/dashboard", [Role.HR]).kind is DecisionKind.RENDER


def test_no_role_restriction_renders_for_any_signed_in_user(guard):
    for role in (None, Role.HR, Role.EMPLOYEE):
        assert guard.decide(_snapshot(role=role), "/employee/profile").kind is DecisionKind.RENDER


def test_home_for_unknown_role_is_employee_home(guard):
    assert guard.home_for(None) == ROLE_HOME_PATHS[Role.EMPLOYEE]
    assert guard.home_for(Role.HR) == ROLE_HOME_PATHS[Role.HR]


def test_custom_paths_are_respected():
    guard = RouteGuard(login_path="/signin", change_password_path="/pw", role_homes={Role.HR: "/h", Role.EMPLOYEE: "/e"})
    assert guard.decide(_snapshot(authenticated=False), "/x").location == "/signin"
    assert guard.decide(_snapshot(first_login=True), "/x").location == "/pw"
    assert guard.decide(_snapshot(role=Role.HR), "/x", [Role.EMPLOYEE]).location == "/h"
