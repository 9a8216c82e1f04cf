from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..common.loop import BackgroundLoop
from .backend import AuthBackend
from .model import SessionSnapshot
from .store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionClient:
    """The auth client and session store belonging to one browser."""

    client_id: str
    backend: AuthBackend
    store: SessionStore


class SessionRegistry:
    """Creates, looks up and tears down per-browser session stores.

    All store work runs on the shared background loop; Flask threads only
    submit coroutines and wait for their results.
    """

    def __init__(
        self,
        *,
        backend_factory: Callable[[], AuthBackend],
        loop: BackgroundLoop,
        settle_seconds: float,
        start_wait_seconds: float = 2.0,
    ):
        self._backend_factory = backend_factory
        self._loop = loop
        self._settle_seconds = settle_seconds
        self._start_wait_seconds = start_wait_seconds
        self._clients: dict[str, SessionClient] = {}
        self._lock = threading.Lock()

    @staticmethod
    def new_client_id() -> str:
        return uuid.uuid4().hex

    def get(self, client_id: Optional[str]) -> Optional[SessionClient]:
        if not client_id:
            return None
        with self._lock:
            return self._clients.get(client_id)

    def get_or_create(self, client_id: str) -> SessionClient:
        with self._lock:
            client = self._clients.get(client_id)
            if client is not None:
                return client
            backend = self._backend_factory()
            store = SessionStore(backend, settle_seconds=self._settle_seconds)
            client = SessionClient(client_id=client_id, backend=backend, store=store)
            self._clients[client_id] = client

        future = asyncio.run_coroutine_threadsafe(store.start(), self._loop.loop)
        try:
            future.result(self._start_wait_seconds)
        except concurrent.futures.TimeoutError:
            # Still checking; the guard shows the loading page until it finishes.
            logger.info("session check for client %s still running", client_id)
        return client

    def run(self, coro: Awaitable[Any]) -> Any:
        return self._loop.run(coro)

    def snapshot(self, client: SessionClient) -> SessionSnapshot:
        async def _snapshot() -> SessionSnapshot:
            return client.store.snapshot()

        return self._loop.run(_snapshot())

    def complete_password_change(self, client: SessionClient) -> None:
        async def _complete() -> None:
            client.store.complete_password_change()

        self._loop.run(_complete())

    def discard(self, client_id: Optional[str]) -> None:
        """Close and forget one client; unknown ids are ignored."""
        if not client_id:
            return
        with self._lock:
            client = self._clients.pop(client_id, None)
        if client is None:
            return
        try:
            self._loop.run(client.store.close(), timeout=5)
        except Exception:
            logger.exception("failed to close session store for client %s", client_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def close_all(self) -> None:
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            try:
                self._loop.run(client.store.close(), timeout=5)
            except Exception:
                logger.exception("failed to close session store for client %s", client.client_id)
        self._loop.stop()
