# core/wizard_sessions.py

"""
In-memory store of open wizard sessions.

One session per open wizard; each has exactly one writer (the user who
opened it). Sessions idle longer than their TTL are dropped.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from threading import Lock
from typing import Optional

from core.config import settings
from core.dirty_guard import DirtyStateGuard
from core.logging_config import logger
from core.wizard import WizardController
from models.enums import WizardKind


@dataclass
class WizardSession:
    kind: WizardKind
    controller: WizardController
    guard: Optional[DirtyStateGuard] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    expires_at: datetime = field(default_factory=datetime.now)

    def touch(self, ttl_seconds: int):
        self.expires_at = datetime.now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        """Check if the session has been idle past its TTL."""
        return datetime.now() >= self.expires_at

    def to_dict(self) -> dict:
        state = self.controller.snapshot()
        state["sessionId"] = self.id
        state["kind"] = self.kind.value
        state["isOpen"] = self.guard.is_open if self.guard else True
        return state


class WizardSessionStore:
    """
    Thread-safe session registry with idle expiry.
    """

    def __init__(self, ttl_seconds: int = 3600):
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, WizardSession] = {}
        self._lock = Lock()

    def add(self, session: WizardSession) -> WizardSession:
        session.touch(self.ttl_seconds)
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Opened {session.kind} wizard session {session.id}")
        return session

    def get(self, session_id: str) -> Optional[WizardSession]:
        """
        Get a session and extend its lifetime.

        Returns:
            The session, or None if unknown or expired
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            if session.is_expired():
                del self._sessions[session_id]
                logger.info(f"Wizard session {session_id} expired")
                return None

            session.touch(self.ttl_seconds)
            return session

    def delete(self, session_id: str):
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear(self):
        """Drop every session."""
        with self._lock:
            self._sessions.clear()

    def cleanup_expired(self) -> int:
        """Remove all expired sessions. Returns how many were dropped."""
        with self._lock:
            expired_ids = [
                sid for sid, session in self._sessions.items()
                if session.is_expired()
            ]
            for sid in expired_ids:
                del self._sessions[sid]
        return len(expired_ids)

    def size(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global store instance
_store = WizardSessionStore(ttl_seconds=settings.WIZARD_SESSION_TTL_SECONDS)


def get_session_store() -> WizardSessionStore:
    """Get the global session store."""
    return _store
