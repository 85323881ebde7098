"""Session and sudo token store."""

import hashlib
import os
import secrets
import threading
import time
from collections.abc import Callable

import structlog
from cachetools import TTLCache

logger = structlog.get_logger()


def _token_key(username: str, token: str) -> tuple[str, str]:
    """Cache key from token hash to prevent token leakage in logs."""
    return username, hashlib.sha256(token.encode()).hexdigest()[:16]


class TokenCache:
    """In-memory store of session and sudo tokens with expiry."""

    def __init__(
        self,
        session_ttl_seconds: int | None = None,
        sudo_ttl_seconds: int | None = None,
        maxsize: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache with TTLs in seconds.

        Args:
            session_ttl_seconds: Lifetime of login tokens (default: 5 minutes,
                                 or AUTH_SESSION_TTL_SECONDS)
            sudo_ttl_seconds: Lifetime of sudo tokens (default: 1 minute,
                              or AUTH_SUDO_TTL_SECONDS)
            maxsize: Maximum number of tokens kept per table
            timer: Clock used for expiry
        """
        if session_ttl_seconds is None:
            session_ttl_seconds = int(os.getenv("AUTH_SESSION_TTL_SECONDS", "300"))
        if sudo_ttl_seconds is None:
            sudo_ttl_seconds = int(os.getenv("AUTH_SUDO_TTL_SECONDS", "60"))
        self.session_ttl_seconds = session_ttl_seconds
        self.sudo_ttl_seconds = sudo_ttl_seconds
        self._sessions: TTLCache[tuple[str, str], bool] = TTLCache(
            maxsize=maxsize, ttl=session_ttl_seconds, timer=timer
        )
        self._sudo: TTLCache[tuple[str, str], bool] = TTLCache(
            maxsize=maxsize, ttl=sudo_ttl_seconds, timer=timer
        )
        self._lock = threading.Lock()

    def issue(self, username: str) -> str:
        """Create and store a new session token for the user."""
        token = secrets.token_urlsafe(32)
        key = _token_key(username, token)
        with self._lock:
            self._sessions[key] = True
        logger.debug("Session token issued", username=username, cache_key=key[1])
        return token

    def issue_sudo(self, username: str) -> str:
        """Create and store a new sudo token for the user."""
        token = secrets.token_urlsafe(32)
        key = _token_key(username, token)
        with self._lock:
            self._sudo[key] = True
        logger.info("Sudo token issued", username=username, cache_key=key[1])
        return token

    def validate(self, username: str, token: str) -> bool:
        """Return True if the token is a live session or sudo token for the user."""
        key = _token_key(username, token)
        with self._lock:
            return key in self._sessions or key in self._sudo

    def remove(self, username: str, token: str) -> None:
        """Remove a single token for the user."""
        key = _token_key(username, token)
        with self._lock:
            self._sessions.pop(key, None)
            self._sudo.pop(key, None)

    def evict(self, username: str) -> int:
        """Remove every token held for the user. Returns the number removed."""
        removed = 0
        with self._lock:
            for table in (self._sessions, self._sudo):
                table.expire()
                for key in [k for k in table.keys() if k[0] == username]:
                    del table[key]
                    removed += 1
        if removed:
            logger.debug("Evicted tokens", username=username, count=removed)
        return removed

    def clear(self) -> None:
        """Clear all cached tokens."""
        with self._lock:
            self._sessions.clear()
            self._sudo.clear()
        logger.debug("Token cache cleared")

    def size(self) -> int:
        """Return current number of live tokens."""
        with self._lock:
            self._sessions.expire()
            self._sudo.expire()
            return len(self._sessions) + len(self._sudo)
