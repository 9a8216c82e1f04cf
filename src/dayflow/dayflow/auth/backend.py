from __future__ import annotations

from typing import Callable, Optional, Protocol

from ..core.enums import Role
from .events import SessionListener
from .model import BackendResult, Identity, Profile, SignupMetadata

ALREADY_REGISTERED = "user_already_exists"


class AuthBackend(Protocol):
    """Auth/data service as seen by one browser client.

    sign_in/sign_up/sign_out report failures in the returned BackendResult;
    the fetch methods raise BackendError when the service cannot answer.
    """

    async def sign_in(self, email: str, password: str) -> BackendResult:
        raise NotImplementedError

    async def sign_up(self, email: str, password: str, metadata: SignupMetadata) -> BackendResult:
        raise NotImplementedError

    async def sign_out(self) -> BackendResult:
        raise NotImplementedError

    async def get_current_session(self) -> Optional[Identity]:
        raise NotImplementedError

    def subscribe(self, on_change: SessionListener) -> Callable[[], None]:
        raise NotImplementedError

    async def fetch_profile_by_identity(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    async def fetch_role_by_identity(self, user_id: str) -> Optional[Role]:
        raise NotImplementedError

    async def update_password(self, new_password: str) -> BackendResult:
        raise NotImplementedError
