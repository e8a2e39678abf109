"""Access control dependencies."""

from typing import Optional

from kafkalens.api.dependencies.auth import (
    SessionPrincipalResolver,
    get_session_repository,
)
from kafkalens.config.settings import Settings, settings
from kafkalens.core.logging import get_logger
from kafkalens.services.rbac import (
    AccessControlService,
    init_access_control,
    load_rbac_properties,
)

logger = get_logger(__name__)

_access_control: Optional[AccessControlService] = None


def create_access_control(app_settings: Settings) -> AccessControlService:
    """Load roles and build the access control service.

    The OAuth proxy counts as a registered authentication mechanism.
    """
    properties = load_rbac_properties(app_settings)
    auth_registered = bool(
        app_settings.registered_auth_providers or app_settings.oauth_proxy_enabled
    )
    state = init_access_control(properties, auth_registered)
    return AccessControlService(state, SessionPrincipalResolver(get_session_repository()))


def set_access_control(service: Optional[AccessControlService]) -> None:
    global _access_control
    _access_control = service


def get_access_control() -> AccessControlService:
    """Get or create the access control singleton."""
    global _access_control
    if _access_control is None:
        _access_control = create_access_control(settings)
    return _access_control
