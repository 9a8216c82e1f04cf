from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Opaque identity handed out by the auth backend for a signed-in account."""

    user_id: str
    email: str
    must_change_password: bool = False


@dataclass(frozen=True)
class AccountRecord:
    user_id: str
    email: str
    password_hash: str
    must_change_password: bool = False


@dataclass(frozen=True)
class Profile:
    """User-facing attributes, fetched separately from the session."""

    user_id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    employee_id: Optional[str] = None


@dataclass(frozen=True)
class SignupMetadata:
    """Fields the backend uses to provision profile and role rows on sign-up."""

    name: str
    role: Role
    company: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class BackendResult:
    identity: Optional[Identity] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AuthResult:
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class SignupResult:
    success: bool
    error: Optional[str] = None
    role: Optional[Role] = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session store handed to the guard and views."""

    authenticated: bool
    identity: Optional[Identity]
    is_loading: bool
    profile: Optional[Profile]
    role: Optional[Role]
    is_first_login: bool

    @classmethod
    def anonymous(cls) -> "SessionSnapshot":
        """State of a browser that has no session client yet."""
        return cls(
            authenticated=False,
            identity=None,
            is_loading=False,
            profile=None,
            role=None,
            is_first_login=False,
        )

    @property
    def display_name(self) -> str:
        if self.profile and self.profile.name:
            return self.profile.name
        if self.identity:
            return self.identity.email
        return ""
