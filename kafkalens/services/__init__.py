"""Business logic services package."""

from .rbac import (
    AccessControlService,
    AccessControlState,
    init_access_control,
    load_rbac_properties,
)

__all__ = [
    "AccessControlService",
    "AccessControlState",
    "init_access_control",
    "load_rbac_properties",
]
