"""Core utilities package."""

from .exceptions import (
    AccessDeniedError,
    InvariantViolationError,
    RBACConfigurationError,
    RBACError,
)
from .logging import (
    LoggerAdapter,
    get_logger,
    get_logger_with_context,
    log_event,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
    "get_logger_with_context",
    "log_event",
    "RBACError",
    "AccessDeniedError",
    "InvariantViolationError",
    "RBACConfigurationError",
]
