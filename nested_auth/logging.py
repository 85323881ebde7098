"""Structured logging setup for nested-auth.

Modules log through ``structlog.get_logger()``. Applications call
``configure_logging`` once, or set a ``logging`` section in the auth YAML
file so that ``ConfigLoader.load`` does it for them.
"""

import logging
import os

import structlog


def get_log_level(level: str | None = None) -> int:
    """Resolve a level name, falling back to LOG_LEVEL and then INFO."""
    name = level or os.getenv("LOG_LEVEL", "INFO")
    resolved = logging.getLevelName(str(name).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Route structlog events through a JSON handler on the root logger.

    Args:
        level: Level name such as "DEBUG"; LOG_LEVEL is used when omitted
    """
    log_level = get_log_level(level)

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
