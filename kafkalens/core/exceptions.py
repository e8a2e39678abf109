"""Access control exceptions."""


class RBACError(Exception):
    """Base exception for access control errors."""


class AccessDeniedError(RBACError):
    """The caller's roles do not grant the requested operation."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class InvariantViolationError(RBACError, ValueError):
    """An access check was invoked with an inconsistent request.

    Raised for contexts carrying a target value without any required action
    and for cluster-scoped checks without a cluster name. These are bugs in
    the calling code, never authorization outcomes.
    """


class RBACConfigurationError(RBACError):
    """Role definitions could not be loaded."""
