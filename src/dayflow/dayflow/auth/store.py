from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from ..core.constants import ALREADY_REGISTERED_MESSAGE, DEFAULT_SIGNUP_SETTLE_SECONDS
from ..core.enums import Role
from ..core.exceptions import BackendError
from .backend import ALREADY_REGISTERED, AuthBackend
from .model import AuthResult, BackendResult, Identity, Profile, SessionSnapshot, SignupMetadata, SignupResult

logger = logging.getLogger(__name__)

_UNCHANGED = object()


class SessionStore:
    """Single source of truth for one client's session, profile and role.

    Profile and role are fetched separately after the session becomes
    authenticated, so there is a window where ``authenticated`` is true while
    either is still None. Consumers must tolerate that window.

    Every fetch is tagged with the generation current when it started. Logout
    and sign-out events bump the generation, and results from an older
    generation are dropped instead of repopulating cleared state.
    """

    def __init__(self, backend: AuthBackend, *, settle_seconds: float = DEFAULT_SIGNUP_SETTLE_SECONDS):
        self._backend = backend
        self._settle_seconds = float(settle_seconds)

        self._identity: Optional[Identity] = None
        self._is_loading = True
        self._profile: Optional[Profile] = None
        self._role: Optional[Role] = None
        self._first_login = False

        self._generation = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._background: set[asyncio.Task] = set()

    # -- read accessors -------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def user(self) -> Optional[Identity]:
        return self._identity

    @property
    def profile(self) -> Optional[Profile]:
        return self._profile

    @property
    def role(self) -> Optional[Role]:
        return self._role

    @property
    def is_first_login(self) -> bool:
        return self._first_login

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            authenticated=self.is_authenticated,
            identity=self._identity,
            is_loading=self._is_loading,
            profile=self._profile,
            role=self._role,
            is_first_login=self._first_login,
        )

    # -- lifecycle ------------------------------------------------------

    async def start(self) -> None:
        """Subscribe to session changes and run the initial session check."""
        self._loop = asyncio.get_running_loop()
        self._unsubscribe = self._backend.subscribe(self._on_session_changed)
        try:
            identity = await self._backend.get_current_session()
            self._set_identity(identity)
            if identity is not None:
                await self._load_enrichment(identity.user_id, self._generation)
        except BackendError:
            logger.exception("initial session check failed")
        finally:
            self._is_loading = False

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._background):
            task.cancel()
        self._background.clear()

    # -- operations -----------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            result = await self._backend.sign_in(email, password)
        except BackendError as e:
            logger.warning("sign-in failed: %s", e)
            return AuthResult(success=False, error=str(e) or "Login failed")

        if result.error or result.identity is None:
            return AuthResult(success=False, error=result.error or "Login failed")

        # The session itself is set by the session-changed event.
        self._first_login = result.identity.must_change_password
        await self._load_enrichment(result.identity.user_id, self._generation)
        return AuthResult(success=True)

    async def signup(
        self,
        name: str,
        email: str,
        password: str,
        company: Optional[str],
        phone: Optional[str],
        role: Role,
    ) -> SignupResult:
        metadata = SignupMetadata(name=name, role=role, company=company, phone=phone)
        try:
            result = await self._backend.sign_up(email, password, metadata)
        except BackendError as e:
            logger.warning("sign-up failed: %s", e)
            return SignupResult(success=False, error=str(e) or "Signup failed")

        if result.error or result.identity is None:
            if _is_already_registered(result):
                return SignupResult(success=False, error=ALREADY_REGISTERED_MESSAGE)
            return SignupResult(success=False, error=result.error or "Signup failed")

        self._first_login = True
        # Give server-side provisioning of the profile and role rows time to land.
        if self._settle_seconds > 0:
            await asyncio.sleep(self._settle_seconds)
        await self._load_enrichment(result.identity.user_id, self._generation)
        return SignupResult(success=True, role=role)

    async def logout(self) -> None:
        try:
            result = await self._backend.sign_out()
            if result.error:
                logger.warning("sign-out reported an error: %s", result.error)
        except BackendError:
            logger.exception("sign-out failed")
        finally:
            self._clear()

    def complete_password_change(self) -> None:
        self._first_login = False

    async def refresh_profile(self) -> None:
        if self._identity is None:
            return
        await self._load_enrichment(self._identity.user_id, self._generation)

    # -- internals ------------------------------------------------------

    def _on_session_changed(self, identity: Optional[Identity]) -> None:
        self._set_identity(identity)
        if identity is None:
            self._clear()
            return

        # The auth client rejects calls made while it is still dispatching
        # this event, so the fetch has to start on the next loop turn.
        generation = self._generation
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(self._spawn_enrichment, identity.user_id, generation)

    def _spawn_enrichment(self, user_id: str, generation: int) -> None:
        task = asyncio.ensure_future(self._load_enrichment(user_id, generation))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _set_identity(self, identity: Optional[Identity]) -> None:
        previous = self._identity
        if identity is not None and previous is not None and previous.user_id != identity.user_id:
            self._profile = None
            self._role = None
            self._first_login = False
            self._generation += 1
        self._identity = identity

    def _clear(self) -> None:
        self._identity = None
        self._profile = None
        self._role = None
        self._first_login = False
        self._generation += 1

    async def _load_enrichment(self, user_id: str, generation: int) -> None:
        profile, role = await asyncio.gather(
            self._fetch(self._backend.fetch_profile_by_identity, user_id, "profile"),
            self._fetch(self._backend.fetch_role_by_identity, user_id, "role"),
        )
        if generation != self._generation:
            logger.debug("dropping stale profile/role for %s (generation %s)", user_id, generation)
            return
        if profile is not _UNCHANGED:
            self._profile = profile
        if role is not _UNCHANGED:
            self._role = role

    async def _fetch(self, fetcher, user_id: str, what: str):
        try:
            return await fetcher(user_id)
        except Exception:
            logger.exception("failed to fetch %s for %s", what, user_id)
            return _UNCHANGED


def _is_already_registered(result: BackendResult) -> bool:
    if result.error_code == ALREADY_REGISTERED:
        return True
    return "already registered" in (result.error or "").lower()
