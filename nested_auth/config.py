"""Configuration loader for authenticator YAML files."""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog
import yaml

from .backends import NoAuthAuthenticator, StaticAuthenticator, StaticUser
from .cache import TokenCache
from .exceptions import InvalidConfigurationError
from .logging import configure_logging
from .models import Authenticator
from .nested import NestedAuthenticator

logger = structlog.get_logger()

AuthenticatorBuilder = Callable[[dict[str, Any]], Authenticator]


def _build_nested(spec: dict[str, Any]) -> Authenticator:
    for name in ("inner", "outer"):
        if spec.get(name) is None:
            raise InvalidConfigurationError(
                f"Nested authenticator is missing '{name}'"
            )
    return NestedAuthenticator(
        inner=build_authenticator(spec["inner"]),
        outer=build_authenticator(spec["outer"]),
    )


def _get_list(config: dict[str, Any], key: str) -> list[Any]:
    """Return a list value, treating a missing or empty key as []."""
    value = config.get(key) or []
    if not isinstance(value, list):
        raise InvalidConfigurationError(
            f"'{key}' must be a list, got {type(value).__name__}"
        )
    return value


def _get_str_list(config: dict[str, Any], key: str) -> list[str]:
    return [str(item) for item in _get_list(config, key)]


def _parse_user(user_config: Any) -> StaticUser:
    """Parse a single static user entry."""
    if not isinstance(user_config, dict) or "name" not in user_config:
        raise InvalidConfigurationError(f"Invalid static user entry: {user_config!r}")

    attributes = user_config.get("attributes") or {}
    if not isinstance(attributes, dict):
        raise InvalidConfigurationError(
            f"'attributes' of user {user_config['name']!r} must be a mapping, "
            f"got {type(attributes).__name__}"
        )

    # YAML reads unquoted digits as int
    password = user_config.get("password")
    uid = user_config.get("uid")
    return StaticUser(
        name=str(user_config["name"]),
        password=str(password) if password is not None else None,
        groups=_get_str_list(user_config, "groups"),
        uid=str(uid) if uid is not None else "",
        attributes={str(k): str(v) for k, v in attributes.items()},
    )


def _build_static(spec: dict[str, Any]) -> Authenticator:
    users = [_parse_user(u) for u in _get_list(spec, "users")]
    cache = TokenCache(
        session_ttl_seconds=spec.get("session_ttl_seconds"),
        sudo_ttl_seconds=spec.get("sudo_ttl_seconds"),
    )
    return StaticAuthenticator(
        users=users,
        admin_groups=_get_str_list(spec, "admin_groups"),
        admin_users=_get_str_list(spec, "admin_users"),
        cache=cache,
        require_secure=bool(spec.get("require_secure", False)),
    )


def _build_none(spec: dict[str, Any]) -> Authenticator:
    logger.warning("No-auth authenticator configured, for development only")
    return NoAuthAuthenticator()


_builders: dict[str, AuthenticatorBuilder] = {
    "nested": _build_nested,
    "static": _build_static,
    "none": _build_none,
}


def register_authenticator(name: str, builder: AuthenticatorBuilder) -> None:
    """Register a builder for a custom authenticator type.

    Args:
        name: Value of the ``type`` key selecting this builder
        builder: Callable taking the authenticator mapping
    """
    _builders[name] = builder


def build_authenticator(spec: Any) -> Authenticator:
    """Build an authenticator tree from a configuration mapping.

    Raises:
        InvalidConfigurationError: If the mapping or its type is invalid
    """
    if not isinstance(spec, dict):
        raise InvalidConfigurationError(
            f"Authenticator configuration must be a mapping, got {type(spec).__name__}"
        )
    auth_type = spec.get("type")
    builder = _builders.get(auth_type) if isinstance(auth_type, str) else None
    if builder is None:
        raise InvalidConfigurationError(
            f"Unknown authenticator type: {auth_type!r}. "
            f"Available: {sorted(_builders)}"
        )
    return builder(spec)


class ConfigLoader:
    """Loads the authenticator tree from a YAML file."""

    def __init__(self, config_file: str = "/etc/nested-auth/auth.yaml"):
        self.config_file = Path(config_file)

    def load(self) -> Authenticator:
        """Load and build the configured authenticator.

        An optional top-level ``logging`` mapping (``level``) configures
        structured logging before the authenticators are built.

        Raises:
            InvalidConfigurationError: If the file is missing or invalid
        """
        if not self.config_file.exists():
            logger.error("Auth config file does not exist", file=str(self.config_file))
            raise InvalidConfigurationError(
                f"Auth config file not found: {self.config_file}"
            )

        try:
            with open(self.config_file) as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(
                "Failed to parse auth config file",
                file=str(self.config_file),
                error=str(e),
            )
            raise InvalidConfigurationError(
                f"Invalid YAML in {self.config_file}: {e}"
            ) from e

        if not isinstance(content, dict) or "authenticator" not in content:
            raise InvalidConfigurationError(
                f"No 'authenticator' section in {self.config_file}"
            )

        logging_config = content.get("logging") or {}
        if not isinstance(logging_config, dict):
            raise InvalidConfigurationError(
                f"'logging' must be a mapping in {self.config_file}"
            )
        if logging_config:
            configure_logging(logging_config.get("level"))

        authenticator = build_authenticator(content["authenticator"])
        logger.info(
            "Loaded authenticator",
            file=str(self.config_file),
            authenticator=type(authenticator).__name__,
        )
        return authenticator


def get_config_loader() -> ConfigLoader:
    """Get configured config loader instance."""
    config_file = os.getenv("AUTH_CONFIG_PATH", "/etc/nested-auth/auth.yaml")
    return ConfigLoader(config_file)
