"""Data models package."""

from .access_context import AccessContext, AccessContextBuilder
from .auth import AuthenticatedUser, AuthenticationPayload
from .rbac import (
    Permission,
    Provider,
    Resource,
    Role,
    RoleBasedAccessControlProperties,
    Subject,
)

__all__ = [
    "AccessContext",
    "AccessContextBuilder",
    "AuthenticatedUser",
    "AuthenticationPayload",
    "Permission",
    "Provider",
    "Resource",
    "Role",
    "RoleBasedAccessControlProperties",
    "Subject",
]
