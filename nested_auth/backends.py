"""Authenticator backends."""

import hmac
from dataclasses import dataclass, field

import structlog

from .cache import TokenCache
from .models import Authenticator, User

logger = structlog.get_logger()


@dataclass
class StaticUser:
    """A user entry declared in configuration."""

    name: str
    password: str | None = None
    groups: list[str] = field(default_factory=list)
    uid: str = ""
    attributes: dict[str, str] = field(default_factory=dict)


class NoAuthAuthenticator(Authenticator):
    """No authentication backend for development."""

    async def is_admin(self, user: User | None) -> bool:
        return False

    async def login(
        self, username: str | None, password: str | None, secure: bool
    ) -> str | None:
        if not await self.verify(username, password, secure):
            return None
        return f"dev-token-{username}"

    async def verify(
        self, username: str | None, password: str | None, secure: bool
    ) -> bool:
        return bool(username) and bool(password)

    async def authenticate(
        self, username: str | None, secret: str | None
    ) -> User | None:
        """Return a mock user for any non-empty secret."""
        if not secret:
            return None
        return await self.get_user(username)

    async def get_user(self, username: str | None) -> User | None:
        if not username:
            return None
        return User(
            username=username,
            uid=f"{username}-id",
            groups=["developers"],
            auth_method="none",
        )

    async def sudo_token(self, username: str | None) -> str | None:
        return None

    async def evict(self, username: str | None) -> None:
        pass

    async def logout(self, username: str | None, secret: str | None) -> None:
        pass

    def admin_groups(self) -> list[str]:
        return []

    def admin_users(self) -> list[str]:
        return []

    async def close(self) -> None:
        pass


class StaticAuthenticator(Authenticator):
    """Authenticator backed by a user list from configuration.

    Login issues session tokens from a TokenCache; admins may also obtain
    short-lived sudo tokens. Both kinds of token are accepted by
    ``authenticate``.
    """

    def __init__(
        self,
        users: list[StaticUser],
        admin_groups: list[str] | None = None,
        admin_users: list[str] | None = None,
        cache: TokenCache | None = None,
        require_secure: bool = False,
    ):
        """Initialize the static authenticator.

        Args:
            users: Known users
            admin_groups: Groups whose members are administrators
            admin_users: Usernames of administrators
            cache: Token store (a new TokenCache if omitted)
            require_secure: Reject credentials sent over insecure connections
        """
        self.users = {user.name: user for user in users}
        self._admin_groups = list(admin_groups or [])
        self._admin_users = list(admin_users or [])
        self.cache = cache if cache is not None else TokenCache()
        self.require_secure = require_secure
        logger.info(
            "Registering static authentication",
            users=len(self.users),
            admin_groups=self._admin_groups,
            admin_users=self._admin_users,
        )

    async def is_admin(self, user: User | None) -> bool:
        if user is None:
            return False
        if user.username in self._admin_users:
            return True
        return any(group in self._admin_groups for group in user.groups)

    async def login(
        self, username: str | None, password: str | None, secure: bool
    ) -> str | None:
        if username is None or not await self.verify(username, password, secure):
            return None
        token = self.cache.issue(username)
        logger.info("Login successful", username=username, auth_method="static")
        return token

    async def verify(
        self, username: str | None, password: str | None, secure: bool
    ) -> bool:
        if username is None or password is None:
            return False
        if self.require_secure and not secure:
            logger.warning("Rejecting credentials sent without TLS", username=username)
            return False
        entry = self.users.get(username)
        if entry is None or entry.password is None:
            return False
        return hmac.compare_digest(entry.password.encode(), password.encode())

    async def authenticate(
        self, username: str | None, secret: str | None
    ) -> User | None:
        if username is None or secret is None:
            return None
        if not self.cache.validate(username, secret):
            return None
        return await self.get_user(username)

    async def get_user(self, username: str | None) -> User | None:
        if username is None:
            return None
        entry = self.users.get(username)
        if entry is None:
            return None
        return User(
            username=entry.name,
            uid=entry.uid,
            groups=list(entry.groups),
            attributes=dict(entry.attributes),
            auth_method="static",
        )

    async def sudo_token(self, username: str | None) -> str | None:
        """Issue a sudo token, only for known administrators."""
        user = await self.get_user(username)
        if user is None or not await self.is_admin(user):
            return None
        return self.cache.issue_sudo(user.username)

    async def evict(self, username: str | None) -> None:
        if username is None:
            return
        self.cache.evict(username)

    async def logout(self, username: str | None, secret: str | None) -> None:
        if username is None or secret is None:
            return
        self.cache.remove(username, secret)

    def admin_groups(self) -> list[str]:
        return list(self._admin_groups)

    def admin_users(self) -> list[str]:
        return list(self._admin_users)

    async def close(self) -> None:
        self.cache.clear()
