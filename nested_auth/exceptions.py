"""Exceptions raised by nested-auth."""


class NestedAuthError(Exception):
    """Base exception for all nested-auth errors."""


class InvalidConfigurationError(NestedAuthError):
    """Raised when an authenticator is missing or misconfigured."""

    def __init__(self, message: str = "Invalid authenticator configuration") -> None:
        self.message = message
        super().__init__(self.message)


class ReleaseError(NestedAuthError):
    """Raised when one or more authenticators fail to release their resources.

    Every underlying failure is kept in ``errors``, in release order.
    """

    def __init__(self, errors: list[BaseException]) -> None:
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"Failed to release {len(self.errors)} authenticator(s): {details}")
