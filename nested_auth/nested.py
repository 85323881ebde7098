"""Nested authenticator combining an inner and an outer authenticator.

The inner authenticator has precedence over the outer one. If a user is
authenticated by the inner authenticator, the outer authenticator only
augments the profile of that user and its own authentication is not
consulted. If the inner authenticator does not authenticate the user,
authentication is performed by the outer authenticator.
"""

import structlog

from .exceptions import InvalidConfigurationError, ReleaseError
from .models import Authenticator, User, join_users

logger = structlog.get_logger()


class NestedAuthenticator(Authenticator):
    """Authenticator that gives ``inner`` precedence over ``outer``."""

    def __init__(self, inner: Authenticator | None, outer: Authenticator | None):
        """Initialize the nested authenticator.

        Args:
            inner: Authenticator consulted first
            outer: Authenticator used as fallback and to augment profiles

        Raises:
            InvalidConfigurationError: If either authenticator is missing
        """
        if inner is None:
            raise InvalidConfigurationError("Nested authenticator requires 'inner'")
        if outer is None:
            raise InvalidConfigurationError("Nested authenticator requires 'outer'")
        self.inner = inner
        self.outer = outer
        # Released in this order by close()
        self._closeables: list[Authenticator] = [inner, outer]
        logger.info(
            "Registering nested authentication",
            inner=type(inner).__name__,
            outer=type(outer).__name__,
        )

    async def is_admin(self, user: User | None) -> bool:
        if user is None:
            return False
        return await self.inner.is_admin(user) or await self.outer.is_admin(user)

    async def login(
        self, username: str | None, password: str | None, secure: bool
    ) -> str | None:
        if username is None or password is None:
            return None
        token = await self.inner.login(username, password, secure)
        if token is None:
            logger.debug("Inner login failed, trying outer", username=username)
            token = await self.outer.login(username, password, secure)
        return token

    async def verify(
        self, username: str | None, password: str | None, secure: bool
    ) -> bool:
        if username is None or password is None:
            return False
        return await self.inner.verify(
            username, password, secure
        ) or await self.outer.verify(username, password, secure)

    async def authenticate(
        self, username: str | None, secret: str | None
    ) -> User | None:
        """Authenticate against inner first, augmenting with the outer profile.

        The outer profile is looked up, not re-authenticated, when the inner
        authenticator accepts the secret.
        """
        if username is None or secret is None:
            return None
        inner_match = await self.inner.authenticate(username, secret)
        if inner_match is not None:
            outer_match = await self.outer.get_user(username)
        else:
            logger.debug("Inner authentication failed, trying outer", username=username)
            outer_match = await self.outer.authenticate(username, secret)
        return join_users(inner_match, outer_match)

    async def get_user(self, username: str | None) -> User | None:
        if username is None:
            return None
        inner_user = await self.inner.get_user(username)
        outer_user = await self.outer.get_user(username)
        return join_users(inner_user, outer_user)

    async def sudo_token(self, username: str | None) -> str | None:
        if username is None:
            return None
        token = await self.inner.sudo_token(username)
        if token is not None:
            return token
        return await self.outer.sudo_token(username)

    async def evict(self, username: str | None) -> None:
        await self.inner.evict(username)
        await self.outer.evict(username)

    async def logout(self, username: str | None, secret: str | None) -> None:
        await self.inner.logout(username, secret)
        await self.outer.logout(username, secret)

    def admin_groups(self) -> list[str]:
        return [*self.inner.admin_groups(), *self.outer.admin_groups()]

    def admin_users(self) -> list[str]:
        return [*self.inner.admin_users(), *self.outer.admin_users()]

    async def close(self) -> None:
        """Close both authenticators.

        Every authenticator is closed even if an earlier one fails, including
        on cancellation. Non-``Exception`` failures such as
        ``asyncio.CancelledError`` are re-raised once both were attempted.

        Raises:
            ReleaseError: If any authenticator failed to close
        """
        errors: list[BaseException] = []
        for authenticator in self._closeables:
            try:
                await authenticator.close()
            except BaseException as e:
                logger.error(
                    "Failed to close authenticator",
                    authenticator=type(authenticator).__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                errors.append(e)
        for error in errors:
            if not isinstance(error, Exception):
                raise error
        if errors:
            raise ReleaseError(errors) from errors[0]
