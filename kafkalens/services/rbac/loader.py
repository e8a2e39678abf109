"""Startup loading of role definitions."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Tuple

import yaml
from pydantic import ValidationError

from kafkalens.config.settings import Settings
from kafkalens.core.exceptions import RBACConfigurationError
from kafkalens.core.logging import get_logger
from kafkalens.models.rbac import Role, RoleBasedAccessControlProperties
from kafkalens.services.rbac.extractors import (
    ProviderAuthorityExtractor,
    extractors_for,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessControlState:
    """Result of startup initialization, never mutated afterwards."""

    enabled: bool = False
    roles: Tuple[Role, ...] = ()
    extractors: FrozenSet[ProviderAuthorityExtractor] = field(
        default_factory=frozenset
    )


def _read_roles_file(path: Path) -> List[Dict[str, Any]]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise RBACConfigurationError(f"Cannot read RBAC config {path}: {e}") from e

    if not isinstance(data, dict):
        raise RBACConfigurationError(f"RBAC config {path} must be a mapping")

    # Accept both a top-level "roles" list and the nested "rbac.roles" layout
    section = data.get("rbac", data)
    roles = (section or {}).get("roles") or []
    if not isinstance(roles, list):
        raise RBACConfigurationError(f"'roles' in {path} must be a list")
    return roles


def parse_roles(raw_roles: List[Dict[str, Any]]) -> RoleBasedAccessControlProperties:
    """Validate raw role definitions into the policy model."""
    try:
        return RoleBasedAccessControlProperties(roles=raw_roles)
    except ValidationError as e:
        raise RBACConfigurationError(f"Invalid role definitions: {e}") from e


def load_rbac_properties(settings: Settings) -> RoleBasedAccessControlProperties:
    """Load roles from ``RBAC_CONFIG_FILE`` or, failing that, ``RBAC_ROLES``."""
    if settings.rbac_config_file:
        raw_roles = _read_roles_file(Path(settings.rbac_config_file))
        source = settings.rbac_config_file
    else:
        raw_roles = settings.rbac_roles
        source = "RBAC_ROLES"

    properties = parse_roles(raw_roles)
    logger.info(f"Loaded {len(properties.roles)} roles from {source}")
    return properties


def init_access_control(
    properties: RoleBasedAccessControlProperties, auth_registered: bool
) -> AccessControlState:
    """Derive the access-control state from the loaded roles.

    No roles means access control is disabled and every check passes.
    """
    if not properties.roles:
        logger.debug("No roles provided, disabling RBAC")
        return AccessControlState()

    extractors = extractors_for(properties.roles)

    if not auth_registered:
        logger.error(
            "Roles are configured but no authentication methods are present. "
            "Authentication might fail."
        )

    logger.info(
        f"RBAC enabled with {len(properties.roles)} roles",
        extra={"extractors": sorted(repr(e) for e in extractors)},
    )
    return AccessControlState(
        enabled=True, roles=properties.roles, extractors=extractors
    )
