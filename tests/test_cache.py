"""Unit tests for the token cache."""

import os
from unittest.mock import patch

from nested_auth.cache import TokenCache, _token_key


class FakeTimer:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_token_cache_initialization() -> None:
    """Test TokenCache initialization."""
    cache = TokenCache(session_ttl_seconds=600, sudo_ttl_seconds=30)
    assert cache.session_ttl_seconds == 600
    assert cache.sudo_ttl_seconds == 30
    assert cache.size() == 0


def test_token_cache_ttl_from_environment() -> None:
    """Test TTLs default to environment variables."""
    with patch.dict(
        os.environ, {"AUTH_SESSION_TTL_SECONDS": "120", "AUTH_SUDO_TTL_SECONDS": "15"}
    ):
        cache = TokenCache()

    assert cache.session_ttl_seconds == 120
    assert cache.sudo_ttl_seconds == 15


def test_token_cache_ttl_defaults() -> None:
    """Test TTL defaults without environment overrides."""
    with patch.dict(os.environ, {}, clear=True):
        cache = TokenCache()

    assert cache.session_ttl_seconds == 300
    assert cache.sudo_ttl_seconds == 60


def test_issue_and_validate() -> None:
    """Test issued tokens validate only for their user."""
    cache = TokenCache()

    token = cache.issue("alice")

    assert cache.validate("alice", token)
    assert not cache.validate("bob", token)
    assert not cache.validate("alice", "made-up")


def test_tokens_are_unique() -> None:
    """Test each login gets a distinct token."""
    cache = TokenCache()

    assert cache.issue("alice") != cache.issue("alice")
    assert cache.size() == 2


def test_token_expiration() -> None:
    """Test session and sudo tokens expire with their own TTLs."""
    timer = FakeTimer()
    cache = TokenCache(session_ttl_seconds=300, sudo_ttl_seconds=60, timer=timer)
    session = cache.issue("alice")
    sudo = cache.issue_sudo("alice")

    timer.now = 61
    assert cache.validate("alice", session)
    assert not cache.validate("alice", sudo)

    timer.now = 301
    assert not cache.validate("alice", session)
    assert cache.size() == 0


def test_remove_single_token() -> None:
    """Test removing one token leaves the others."""
    cache = TokenCache()
    first = cache.issue("alice")
    second = cache.issue("alice")

    cache.remove("alice", first)

    assert not cache.validate("alice", first)
    assert cache.validate("alice", second)


def test_remove_unknown_token() -> None:
    """Test removing an unknown token is a no-op."""
    cache = TokenCache()
    cache.remove("alice", "never-issued")
    assert cache.size() == 0


def test_evict_user() -> None:
    """Test evicting a user drops all of their tokens only."""
    cache = TokenCache()
    session = cache.issue("alice")
    sudo = cache.issue_sudo("alice")
    other = cache.issue("bob")

    assert cache.evict("alice") == 2

    assert not cache.validate("alice", session)
    assert not cache.validate("alice", sudo)
    assert cache.validate("bob", other)
    assert cache.evict("alice") == 0


def test_token_cache_clear() -> None:
    """Test clearing the cache."""
    cache = TokenCache()
    token1 = cache.issue("alice")
    token2 = cache.issue_sudo("bob")
    assert cache.size() == 2

    cache.clear()
    assert cache.size() == 0
    assert not cache.validate("alice", token1)
    assert not cache.validate("bob", token2)


def test_token_keys_are_hashed() -> None:
    """Test raw tokens are not used as cache keys."""
    username, digest = _token_key("alice", "token1")

    assert username == "alice"
    assert digest != "token1"
    assert len(digest) == 16  # SHA256 truncated to 16 chars
    assert digest != _token_key("alice", "token2")[1]
