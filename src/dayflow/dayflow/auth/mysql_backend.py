from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.enums import Role
from ..core.exceptions import BackendError
from .backend import ALREADY_REGISTERED, AuthBackend
from .events import SessionEvents, SessionListener
from .model import BackendResult, Identity, Profile, SignupMetadata
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class MySQLAuthBackend(AuthBackend):
    """Auth client for one browser client, backed by the accounts tables.

    Blocking repository calls run in worker threads so the event loop stays free.
    Session changes are announced through SessionEvents before the call returns.
    """

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts
        self._events = SessionEvents()
        self._current: Optional[Identity] = None

    def subscribe(self, on_change: SessionListener) -> Callable[[], None]:
        return self._events.subscribe(on_change)

    async def get_current_session(self) -> Optional[Identity]:
        self._events.ensure_idle("get_current_session")
        return self._current

    async def sign_in(self, email: str, password: str) -> BackendResult:
        self._events.ensure_idle("sign_in")
        email = (email or "").strip().lower()
        try:
            account = await asyncio.to_thread(self._accounts.get_by_email, email)
        except BackendError as e:
            return BackendResult(error=str(e))

        try:
            ok = bool(account) and check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            return BackendResult(error="Invalid login credentials", error_code="invalid_credentials")

        identity = Identity(
            user_id=account.user_id,
            email=account.email,
            must_change_password=account.must_change_password,
        )
        self._current = identity
        self._events.emit(identity)
        return BackendResult(identity=identity)

    async def sign_up(self, email: str, password: str, metadata: SignupMetadata) -> BackendResult:
        self._events.ensure_idle("sign_up")
        email = (email or "").strip().lower()
        try:
            if await asyncio.to_thread(self._accounts.get_by_email, email):
                return BackendResult(error="User already registered", error_code=ALREADY_REGISTERED)
            user_id = await asyncio.to_thread(
                lambda: self._accounts.create_account(
                    email=email,
                    password_hash=generate_password_hash(password),
                    metadata=metadata,
                )
            )
        except BackendError as e:
            return BackendResult(error=str(e))

        identity = Identity(user_id=user_id, email=email)
        self._current = identity
        self._events.emit(identity)
        return BackendResult(identity=identity)

    async def sign_out(self) -> BackendResult:
        self._events.ensure_idle("sign_out")
        if self._current is None:
            return BackendResult(error="No active session")
        self._current = None
        self._events.emit(None)
        return BackendResult()

    async def fetch_profile_by_identity(self, user_id: str) -> Optional[Profile]:
        self._events.ensure_idle("fetch_profile_by_identity")
        return await asyncio.to_thread(self._accounts.get_profile, user_id)

    async def fetch_role_by_identity(self, user_id: str) -> Optional[Role]:
        self._events.ensure_idle("fetch_role_by_identity")
        return await asyncio.to_thread(self._accounts.get_role, user_id)

    async def update_password(self, new_password: str) -> BackendResult:
        self._events.ensure_idle("update_password")
        if self._current is None:
            return BackendResult(error="Not signed in")
        user_id = self._current.user_id
        try:
            updated = await asyncio.to_thread(
                lambda: self._accounts.update_password(user_id, password_hash=generate_password_hash(new_password))
            )
        except BackendError as e:
            return BackendResult(error=str(e))
        if not updated:
            return BackendResult(error="Password update failed")
        logger.info("password updated for %s", user_id)
        return BackendResult(identity=self._current)
