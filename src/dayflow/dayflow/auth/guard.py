from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional

from ..core.constants import CHANGE_PASSWORD_PATH, LOGIN_PATH, ROLE_HOME_PATHS
from ..core.enums import Role
from .model import SessionSnapshot


class DecisionKind(str, Enum):
    RENDER = "render"
    LOADING = "loading"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    kind: DecisionKind
    location: Optional[str] = None
    remembered_path: Optional[str] = None

    @classmethod
    def render(cls) -> "GuardDecision":
        return cls(DecisionKind.RENDER)

    @classmethod
    def loading(cls) -> "GuardDecision":
        return cls(DecisionKind.LOADING)

    @classmethod
    def redirect(cls, location: str, *, remembered_path: Optional[str] = None) -> "GuardDecision":
        return cls(DecisionKind.REDIRECT, location=location, remembered_path=remembered_path)


class RouteGuard:
    """Decides, per navigation, whether a protected view renders.

    Rules are checked in order and the first match wins:
    loading, unauthenticated, first login, role mismatch, render.

    A role that has not been fetched yet never triggers the role rule; the
    view renders and must cope with the missing role. This is a lenient
    default, not a security boundary: mutating operations are authorized
    again by the services.
    """

    def __init__(
        self,
        *,
        login_path: str = LOGIN_PATH,
        change_password_path: str = CHANGE_PASSWORD_PATH,
        role_homes: Optional[Mapping[Role, str]] = None,
    ):
        self._login_path = login_path
        self._change_password_path = change_password_path
        self._role_homes = dict(role_homes or ROLE_HOME_PATHS)

    @property
    def login_path(self) -> str:
        return self._login_path

    @property
    def change_password_path(self) -> str:
        return self._change_password_path

    def home_for(self, role: Optional[Role]) -> str:
        """Landing page for ``role``.

        A role that has not been fetched yet, or whose fetch failed, maps to
        the employee home. This is a lenient default for navigation only and
        not an access check; role-restricted writes re-check in the services.
        """
        if role is None:
            return self._role_homes[Role.EMPLOYEE]
        return self._role_homes[role]

    def decide(
        self,
        snapshot: SessionSnapshot,
        path: str,
        allowed_roles: Optional[Iterable[Role]] = None,
    ) -> GuardDecision:
        if snapshot.is_loading:
            return GuardDecision.loading()

        if not snapshot.authenticated:
            return GuardDecision.redirect(self._login_path, remembered_path=path)

        if snapshot.is_first_login and path != self._change_password_path:
            return GuardDecision.redirect(self._change_password_path)

        if allowed_roles is not None and snapshot.role is not None:
            if snapshot.role not in set(allowed_roles):
                return GuardDecision.redirect(self.home_for(snapshot.role))

        return GuardDecision.render()
