"""
Session Store.

Server-side sessions: opaque id -> user id with a fixed expiry counted
from creation. Kept apart from Storage, with its own lock.
"""

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from notekeep.backend.core.utils import utc_now

DEFAULT_TTL = timedelta(hours=24)
DEFAULT_SWEEP_INTERVAL = timedelta(minutes=5)


@dataclass(frozen=True)
class Session:
    """An authenticated session for one user."""

    id: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore:
    """
    Thread-safe in-memory session table.

    Expired sessions are dropped when looked up, by purge_expired(), and
    by a sweep that create() runs at most once per sweep_interval. The
    table therefore stays bounded by the sessions opened within one TTL.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
        sweep_interval: timedelta = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _drop_expired(self, now: datetime) -> int:
        # Caller holds self._lock.
        expired = [key for key, session in self._sessions.items() if session.is_expired(now)]
        for key in expired:
            del self._sessions[key]
        self._last_sweep = now
        return len(expired)

    def create(self, user_id: str) -> Session:
        """Open a new session for user_id."""
        now = self._clock()
        session = Session(
            id=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._lock:
            if now - self._last_sweep >= self.sweep_interval:
                self._drop_expired(now)
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        """Return the live session for session_id, or None."""
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(now):
                del self._sessions[session_id]
                return None
            return session

    def revoke(self, session_id: str) -> None:
        """End a session. Unknown ids are ignored."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop every expired session. Returns the number removed."""
        now = self._clock()
        with self._lock:
            return self._drop_expired(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
