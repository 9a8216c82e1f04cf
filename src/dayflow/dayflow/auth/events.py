from __future__ import annotations

import logging
from typing import Callable, Optional

from ..core.exceptions import ReentrantCallError
from .model import Identity

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Identity]], None]


class SessionEvents:
    """Session-changed event stream of one auth client.

    Listeners are invoked synchronously. While they run, the owning client is
    "dispatching" and refuses further calls (see ensure_idle).
    """

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []
        self._dispatching = False

    @property
    def dispatching(self) -> bool:
        return self._dispatching

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, identity: Optional[Identity]) -> None:
        self._dispatching = True
        try:
            for listener in list(self._listeners):
                try:
                    listener(identity)
                except Exception:
                    logger.exception("session listener %r failed", listener)
        finally:
            self._dispatching = False

    def ensure_idle(self, operation: str) -> None:
        if self._dispatching:
            raise ReentrantCallError(f"{operation} called while a session event is being dispatched")
