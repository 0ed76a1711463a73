"""
In-memory session table.

Maps opaque bearer tokens to short-lived session records. One instance lives
for the whole process (created in the app lifespan); a restart invalidates
every session.

Locking rules:
- a single coarse lock guards the map
- the lock is held only for the dict operation itself, never across I/O
- expiry is enforced on read: an expired record that has not been swept yet
  is still treated as absent
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from core.config import env_int
from core.errors import InternalError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_DAYS = 7
LOCK_TIMEOUT_S = 5.0


def session_ttl() -> timedelta:
    return timedelta(days=env_int("SESSION_TTL_DAYS", DEFAULT_SESSION_TTL_DAYS))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    user_id: int
    # Cached at issue time; may go stale after a profile update.
    username: str
    expires_at: datetime


@dataclass(frozen=True)
class Principal:
    user_id: int
    username: str

    @classmethod
    def from_session(cls, session: Session) -> "Principal":
        return cls(user_id=session.user_id, username=session.username)


class SessionTable:
    def __init__(
        self,
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = _utc_now,
        token_factory: Callable[[], str] | None = None,
    ) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._ttl = ttl if ttl is not None else session_ttl()
        self._clock = clock
        self._token_factory = token_factory or (lambda: str(uuid.uuid4()))

    @contextmanager
    def _locked(self) -> Iterator[dict[str, Session]]:
        if not self._lock.acquire(timeout=LOCK_TIMEOUT_S):
            # Treating every token as invalid here would be a silent auth failure.
            raise InternalError("Session table lock could not be acquired.")
        try:
            yield self._sessions
        finally:
            self._lock.release()

    def create(self, *, user_id: int, username: str) -> str:
        """
        Issue a new session for the user and return its token.
        """
        session = Session(
            user_id=int(user_id),
            username=str(username),
            expires_at=self._clock() + self._ttl,
        )
        with self._locked() as sessions:
            token = self._token_factory()
            while token in sessions:
                token = self._token_factory()
            sessions[token] = session
        logger.debug("session_created user_id=%s", session.user_id)
        return token

    def validate(self, token: str | None) -> Session | None:
        """
        Return the live session for `token`, or None when absent or expired.
        """
        raw = (token or "").strip()
        if not raw:
            return None
        with self._locked() as sessions:
            session = sessions.get(raw)
        if session is None:
            return None
        if session.expires_at <= self._clock():
            return None
        return session

    def remove(self, token: str | None) -> None:
        raw = (token or "").strip()
        if not raw:
            return None
        with self._locked() as sessions:
            sessions.pop(raw, None)

    def sweep(self, now: datetime | None = None) -> int:
        """
        Delete every session whose expiry is at or before `now`.
        Returns the number of removed sessions.
        """
        cutoff = now if now is not None else self._clock()
        with self._locked() as sessions:
            expired = [token for token, s in sessions.items() if s.expires_at <= cutoff]
            for token in expired:
                del sessions[token]
        if expired:
            logger.info("sessions_swept count=%s", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._locked() as sessions:
            return len(sessions)
