from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """A long-lived asyncio loop on a daemon thread.

    Flask handlers are synchronous, but session stores keep background fetches
    alive between requests, so they cannot live on a per-request loop.
    """

    def __init__(self, *, name: str = "dayflow-loop", timeout: Optional[float] = None):
        self._name = name
        self._timeout = timeout
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        self.start()
        assert self._loop is not None
        return self._loop

    def start(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            ready = threading.Event()

            def _run() -> None:
                loop = asyncio.new_event_loop()
                asyncio.set_event_loop(loop)
                self._loop = loop
                ready.set()
                loop.run_forever()
                loop.close()

            self._thread = threading.Thread(target=_run, name=self._name, daemon=True)
            self._thread.start()
            ready.wait()

    def run(self, coro: Awaitable[Any], *, timeout: Optional[float] = None) -> Any:
        """Submit a coroutine to the loop and block until it finishes."""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return future.result(timeout if timeout is not None else self._timeout)

    def stop(self) -> None:
        with self._lock:
            if self._loop is None or self._thread is None:
                return
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)
            logger.debug("background loop %s stopped", self._name)
            self._loop = None
            self._thread = None
