# parkwatch/services/session_store.py
"""
Session storage capability: get / set / clear, keyed by an opaque token.

Routers depend on get_session_store(); nothing else needs to know where
sessions live. The in-memory store is per-process, so sessions are lost on
restart and are not shared between workers.
"""

import secrets
import threading
from datetime import datetime, timedelta
from typing import Optional

from parkwatch.config import settings


class SessionStore:
    def get(self, token: str) -> Optional[int]:
        raise NotImplementedError

    def set(self, token: str, user_id: int) -> None:
        raise NotImplementedError

    def clear(self, token: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self, ttl_minutes: int = None):
        self._ttl = timedelta(minutes=ttl_minutes or settings.SESSION_TTL_MINUTES)
        self._sessions: dict[str, tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def get(self, token: str) -> Optional[int]:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= datetime.utcnow():
                del self._sessions[token]
                return None
            return user_id

    def set(self, token: str, user_id: int) -> None:
        with self._lock:
            self._sessions[token] = (user_id, datetime.utcnow() + self._ttl)

    def clear(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


_store = InMemorySessionStore()


def get_session_store() -> SessionStore:
    """FastAPI dependency — override in tests or swap for a shared backend."""
    return _store
