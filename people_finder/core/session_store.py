"""
In-memory chat session store. Keyed by session_id; history is not sent from the client.
"""

import logging
import threading
from typing import Any

logger = logging.getLogger(__name__)


class SessionStore:
    """session_id -> list of {"role": "user"|"assistant", "content": str}."""

    def __init__(self) -> None:
        self._sessions: dict[str, list[dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get_history(self, session_id: str) -> list[dict[str, Any]]:
        """Return chat history for the session (copy so caller cannot mutate store)."""
        if not session_id or not isinstance(session_id, str):
            return []
        with self._lock:
            out = list(self._sessions.get(session_id) or [])
        logger.info("[session_store:get_history] session_id=%s messages=%d", session_id[:16], len(out))
        return out

    def append_message(self, session_id: str, role: str, content: str) -> None:
        if not session_id or not isinstance(session_id, str):
            logger.info("[session_store:append_message] skip invalid session_id=%r", session_id)
            return
        with self._lock:
            self._sessions.setdefault(session_id, []).append({"role": role, "content": content or ""})

    def clear(self) -> None:
        """Forget every session; used when the record set is cleared."""
        with self._lock:
            self._sessions.clear()
        logger.info("[session_store:clear] all sessions cleared")
