"""Conversation continuity across tool calls.

The Claude CLI reports a session_id in its stream-json output. Passing it
back with --resume continues the same conversation, so the bridge keeps
the most recent one until the caller asks for a fresh context.
"""
from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Holds the session id to resume on the next call."""

    def get(self) -> str | None: ...

    def update(self, session_id: str) -> None: ...

    def clear(self) -> None: ...


class SessionTracker:
    """In-memory SessionStore shared by every call in the server process.

    No locking: all mutation happens on the event loop thread. When two
    calls overlap, the one whose process exits last wins.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self._session_id = session_id

    def get(self) -> str | None:
        return self._session_id

    def update(self, session_id: str) -> None:
        if session_id != self._session_id:
            logger.debug(
                "Session id updated: %s -> %s", self._session_id, session_id,
            )
        self._session_id = session_id

    def clear(self) -> None:
        if self._session_id is not None:
            logger.debug("Session id cleared (was %s)", self._session_id)
        self._session_id = None
