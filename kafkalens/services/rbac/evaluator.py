"""Stateless access evaluation over the loaded roles."""

import logging
from typing import Iterable, Iterator, Optional, Sequence, Set

from kafkalens.core.exceptions import InvariantViolationError
from kafkalens.core.logging import get_logger
from kafkalens.models.access_context import AccessContext
from kafkalens.models.auth import AuthenticatedUser
from kafkalens.models.rbac import Permission, Resource, Role

logger = get_logger(__name__)


def require_cluster(cluster: Optional[str]) -> str:
    if not cluster:
        raise InvariantViolationError("cluster value is empty")
    return cluster


def filter_roles_by_user(
    roles: Iterable[Role], user: AuthenticatedUser
) -> Iterator[Role]:
    """Roles whose name is one of the user's groups (case-sensitive)."""
    return (role for role in roles if user.has_group(role.name))


def filter_roles_by_cluster(roles: Iterable[Role], cluster: str) -> Iterator[Role]:
    """Roles listing ``cluster``, compared case-insensitively."""
    return (role for role in roles if role.applies_to_cluster(cluster))


def filter_permissions_by_resource(
    permissions: Iterable[Permission], resource: Resource
) -> Iterator[Permission]:
    return (p for p in permissions if p.resource == resource)


def filter_permissions_by_value(
    permissions: Iterable[Permission], resource_value: Optional[str]
) -> Iterator[Permission]:
    return (p for p in permissions if p.matches_value(resource_value))


def granted_actions(
    roles: Sequence[Role],
    resource: Resource,
    resource_value: Optional[str],
    user: AuthenticatedUser,
    cluster: Optional[str],
) -> Set[str]:
    """Union of the uppercased actions granted to ``user`` on one resource.

    Raises:
        InvariantViolationError: ``cluster`` is empty.
    """
    cluster = require_cluster(cluster)
    matching_roles = filter_roles_by_cluster(filter_roles_by_user(roles, user), cluster)
    permissions = (p for role in matching_roles for p in role.permissions)
    permissions = filter_permissions_by_value(
        filter_permissions_by_resource(permissions, resource), resource_value
    )
    return {action.upper() for p in permissions for action in p.actions}


def is_accessible(
    roles: Sequence[Role],
    resource: Resource,
    resource_value: Optional[str],
    user: AuthenticatedUser,
    context: AccessContext,
    required_actions: Iterable[str],
) -> bool:
    """Whether the granted actions cover every required action.

    There is no partial credit: one missing action denies the whole check.

    Raises:
        InvariantViolationError: the context has no cluster.
    """
    required = {a.upper() for a in required_actions}
    granted = granted_actions(roles, resource, resource_value, user, context.cluster)
    allowed = required <= granted

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"{resource.value} check for {user.name}: value={resource_value!r} "
            f"required={sorted(required)} granted={sorted(granted)} allowed={allowed}",
            extra={"user_id": user.name, "cluster": context.cluster},
        )
    return allowed
