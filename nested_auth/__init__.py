"""Nested authentication: combine an inner and an outer authenticator."""

from .backends import NoAuthAuthenticator, StaticAuthenticator, StaticUser
from .cache import TokenCache
from .exceptions import InvalidConfigurationError, NestedAuthError, ReleaseError
from .models import Authenticator, User, join_users
from .nested import NestedAuthenticator

__all__ = [
    "Authenticator",
    "InvalidConfigurationError",
    "NestedAuthError",
    "NestedAuthenticator",
    "NoAuthAuthenticator",
    "ReleaseError",
    "StaticAuthenticator",
    "StaticUser",
    "TokenCache",
    "User",
    "join_users",
]
