from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Final

from minisnap_core.errors import RandomnessUnavailable
from minisnap_core.locks import ReadWriteLock

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL: Final[timedelta] = timedelta(hours=24)
TOKEN_BYTES: Final[int] = 32


def _utc_now() -> datetime:
    return datetime.now(UTC)


def new_session_token() -> str:
    try:
        return secrets.token_urlsafe(TOKEN_BYTES)
    except (NotImplementedError, OSError) as exc:
        raise RandomnessUnavailable("session token") from exc


class SessionRegistry:
    """In-memory table of session tokens and their expiry.

    Expired tokens are dropped lazily by ``validate``; ``purge_expired`` sweeps
    the whole table.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._lock = ReadWriteLock()
        self._sessions: dict[str, datetime] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._sessions)

    def create(self) -> tuple[str, datetime]:
        token = new_session_token()
        expires = self._clock() + self._ttl
        with self._lock.write():
            self._sessions[token] = expires
        return token, expires

    def validate(self, token: str | None) -> bool:
        if not token:
            return False

        with self._lock.read():
            expires = self._sessions.get(token)

        if expires is None:
            return False
        if self._clock() >= expires:
            self.remove(token)
            return False
        return True

    def remove(self, token: str | None) -> None:
        if not token:
            return
        with self._lock.write():
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock.write():
            expired = [t for t, expires in self._sessions.items() if now >= expires]
            for token in expired:
                del self._sessions[token]
        if expired:
            logger.info("Purged %d expired sessions", len(expired))
        return len(expired)
