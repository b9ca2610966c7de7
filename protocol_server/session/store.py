"""
Session Store

In-memory registry of live protocol sessions.

STAGE-S: Session lifecycle

Responsibility: create, validate (with lazy TTL expiry) and close sessions
under arbitrary concurrent callers.

Implementation Details:
- Records live in a plain dict keyed by session id
- Lock striping: a fixed pool of ``threading.Lock`` objects, one chosen per
  session id by hash, so operations on different ids rarely contend and no
  single lock guards the whole store
- Expiry is lazy: a record is only checked, and evicted, when someone looks
  it up. There is no background sweeper.
- The store is a per-process object. It is created once by the app factory
  and handed to handlers through dependency injection.
"""

import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from protocol_server.core.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SESSION_TTL = timedelta(minutes=30)
DEFAULT_LOCK_STRIPES = 16


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionRecord:
    """
    One live session.

    ``access_token`` is stored as given and never verified.
    ``analysis_history`` collects stat-analysis results produced for this
    session by the completions endpoint.
    """

    id: str
    created_at: datetime
    last_accessed_at: datetime
    access_token: str | None = None
    ttl: timedelta = DEFAULT_SESSION_TTL
    analysis_history: list[dict[str, Any]] = field(default_factory=list)

    def is_expired(self, now: datetime) -> bool:
        """A record is live while ``now - created_at <= ttl``."""
        return now - self.created_at > self.ttl


class SessionStore:
    """
    Concurrent session registry with per-key atomicity.

    Thread-Safety:
    - Every read-modify-write on one id happens under that id's stripe lock
    - ``validate`` and ``close`` racing on the same id: whichever removes the
      record first wins, and the other observes it gone (False, never raises)
    - An expired record is evicted under the same lock that detected the
      expiry, so it can never be resurrected by a concurrent validation

    Usage:
        store = SessionStore(ttl=timedelta(minutes=30))
        session_id = store.create(access_token="abc")
        store.validate(session_id)   # True
        store.close(session_id)      # True
        store.close(session_id)      # False
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        lock_stripes: int = DEFAULT_LOCK_STRIPES,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the store.

        Args:
            ttl: Lifetime of every session, measured from creation
            lock_stripes: Number of locks the id space is spread over
            clock: Source of "now" (injectable for tests)
        """
        if lock_stripes < 1:
            raise ValueError("lock_stripes must be at least 1")

        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, SessionRecord] = {}
        self._locks = [threading.Lock() for _ in range(lock_stripes)]

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def _lock_for(self, session_id: str) -> threading.Lock:
        return self._locks[hash(session_id) % len(self._locks)]

    # ========================================================================
    # LIFECYCLE OPERATIONS
    # ========================================================================

    def create(self, access_token: str | None = None) -> str:
        """
        Open a new session and return its id.

        Never fails: ids are uuid4 strings, so collisions are not handled.
        """
        session_id = str(uuid.uuid4())
        now = self._clock()
        record = SessionRecord(
            id=session_id,
            created_at=now,
            last_accessed_at=now,
            access_token=access_token,
            ttl=self._ttl,
        )

        with self._lock_for(session_id):
            self._sessions[session_id] = record

        logger.info("session_created", session_id=session_id, has_access_token=access_token is not None)
        return session_id

    def lookup(self, session_id: str) -> SessionRecord | None:
        """
        Return the live record for ``session_id``, or None.

        Absent ids return None. Expired records are evicted and return None.
        Live records get ``last_accessed_at`` refreshed.
        """
        with self._lock_for(session_id):
            record = self._sessions.get(session_id)
            if record is None:
                return None

            now = self._clock()
            if record.is_expired(now):
                del self._sessions[session_id]
                expired = True
            else:
                record.last_accessed_at = now
                expired = False

        if expired:
            logger.info("session_expired", session_id=session_id)
            return None
        return record

    def validate(self, session_id: str) -> bool:
        """True if the session is live (see ``lookup`` for the rules)."""
        return self.lookup(session_id) is not None

    def close(self, session_id: str) -> bool:
        """
        Remove the session if present.

        Returns:
            True if a record was removed, False otherwise (idempotent)
        """
        with self._lock_for(session_id):
            removed = self._sessions.pop(session_id, None) is not None

        if removed:
            logger.info("session_closed", session_id=session_id)
        return removed

    def append_history(self, session_id: str, entry: dict[str, Any]) -> list[dict[str, Any]] | None:
        """
        Append ``entry`` to the session's analysis history.

        Returns:
            A copy of the full history, oldest first, or None when the
            session is not live (same rules as ``lookup``)
        """
        with self._lock_for(session_id):
            record = self._sessions.get(session_id)
            if record is None or record.is_expired(self._clock()):
                return None
            record.analysis_history.append(dict(entry))
            return list(record.analysis_history)

    # ========================================================================
    # INTROSPECTION
    # ========================================================================

    def active_count(self) -> int:
        """
        Number of records currently held.

        Expired records that nobody has looked up yet are still counted.
        """
        return len(self._sessions)

    def __len__(self) -> int:
        return self.active_count()

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
