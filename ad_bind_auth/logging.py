"""Structured logging setup for the authenticator's loggers."""

import logging
import os

import structlog
from structlog.types import EventDict

PACKAGE_LOGGER = "ad_bind_auth"

# Stdlib loggers owned by the authenticator and the level each one gets.
# ldap3 logs protocol detail, including bind DNs, below WARNING.
_LEVEL_OVERRIDES = {"ldap3": logging.WARNING}

# Event keys whose values are never rendered.
_REDACTED_KEYS = frozenset({"password", "bind_user_password"})


def redact_secrets(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credential values bound to an event."""
    for key in event_dict.keys() & _REDACTED_KEYS:
        event_dict[key] = "***"
    return event_dict


def configure_logging(level: str | None = None, json_output: bool = True) -> logging.Logger:
    """Send authenticator events to a dedicated handler on the package logger.

    Only the ``ad_bind_auth`` and ``ldap3`` loggers are touched, so handlers
    the host application installs on the root logger are left alone. Calling
    it again replaces the handler rather than adding a second one.

    Args:
        level: Level name for the package logger (default: ``AD_LOG_LEVEL``,
               then INFO)
        json_output: Render JSON lines, or key/value console output when False

    Returns:
        The configured package logger
    """
    level_name = (level or os.getenv("AD_LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    handler = logging.StreamHandler()
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    for logger_name, logger_level in _LEVEL_OVERRIDES.items():
        logging.getLogger(logger_name).setLevel(logger_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return package_logger
