"""Bearer credential holder shared by the API client and the UI."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Session:
    """Holds the bearer token attached to every request.

    A 401 from any endpoint invalidates the session: the token is dropped
    and every registered listener is told, so the UI can ask for a new one.
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None
        self._listeners: list[Callable[[], None]] = []

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def set_token(self, token: str) -> None:
        self._token = token or None

    def on_invalidated(self, listener: Callable[[], None]) -> None:
        """Register a callback run when the session is invalidated."""
        self._listeners.append(listener)

    def invalidate(self) -> None:
        """Drop the token and notify listeners."""
        was_authenticated = self._token is not None
        self._token = None
        logger.warning("Session invalidated (had_token=%s)", was_authenticated)
        for listener in list(self._listeners):
            listener()
