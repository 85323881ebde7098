"""Authentication models and types."""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class User:
    """User information from authentication."""

    username: str
    uid: str = ""
    groups: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    auth_method: str = ""


def join_users(first: User | None, second: User | None) -> User | None:
    """Merge two profiles of the same user.

    Groups are the union of both (``first`` order, then new groups from
    ``second``). On attribute conflicts ``first`` wins. If either side is
    missing the other is returned as is.
    """
    if first is None:
        return second
    if second is None:
        return first

    groups = list(first.groups)
    for group in second.groups:
        if group not in groups:
            groups.append(group)

    return User(
        username=first.username,
        uid=first.uid or second.uid,
        groups=groups,
        attributes={**second.attributes, **first.attributes},
        auth_method=first.auth_method or second.auth_method,
    )


class Authenticator(Protocol):
    """Protocol for authenticators."""

    async def is_admin(self, user: User | None) -> bool:
        """Return True if the user has administrative rights."""
        ...

    async def login(
        self, username: str | None, password: str | None, secure: bool
    ) -> str | None:
        """Verify credentials and return a session token, or None."""
        ...

    async def verify(
        self, username: str | None, password: str | None, secure: bool
    ) -> bool:
        """Check credentials without issuing a token."""
        ...

    async def authenticate(
        self, username: str | None, secret: str | None
    ) -> User | None:
        """Resolve a user from a session or sudo token, or None."""
        ...

    async def get_user(self, username: str | None) -> User | None:
        """Look up a user profile without checking credentials."""
        ...

    async def sudo_token(self, username: str | None) -> str | None:
        """Return an impersonation token for the user, or None."""
        ...

    async def evict(self, username: str | None) -> None:
        """Invalidate all session state held for the user."""
        ...

    async def logout(self, username: str | None, secret: str | None) -> None:
        """Invalidate a single session token."""
        ...

    def admin_groups(self) -> list[str]:
        """Groups whose members are administrators."""
        ...

    def admin_users(self) -> list[str]:
        """Users who are administrators."""
        ...

    async def close(self) -> None:
        """Release any resources held by the authenticator."""
        ...
