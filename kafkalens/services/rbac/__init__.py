"""Role-based access control for Kafka resources."""

from .access_control import AccessControlService, PrincipalResolver
from .evaluator import granted_actions, is_accessible
from .extractors import (
    PROVIDER_EXTRACTORS,
    CognitoAuthorityExtractor,
    GithubAuthorityExtractor,
    GoogleAuthorityExtractor,
    LdapAuthorityExtractor,
    ProviderAuthorityExtractor,
    extractors_for,
)
from .loader import (
    AccessControlState,
    init_access_control,
    load_rbac_properties,
    parse_roles,
)
from .sessions import establish_session, extract_groups

__all__ = [
    "AccessControlService",
    "PrincipalResolver",
    "AccessControlState",
    "init_access_control",
    "load_rbac_properties",
    "parse_roles",
    "is_accessible",
    "granted_actions",
    "ProviderAuthorityExtractor",
    "CognitoAuthorityExtractor",
    "GoogleAuthorityExtractor",
    "GithubAuthorityExtractor",
    "LdapAuthorityExtractor",
    "PROVIDER_EXTRACTORS",
    "extractors_for",
    "establish_session",
    "extract_groups",
]
