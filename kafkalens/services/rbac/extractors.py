"""Group extraction strategies per identity provider.

Each extractor maps the claims of one provider's authentication payload to
the names of the roles bound to that caller. Those role names are what the
session stores as the caller's groups.
"""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Iterable, Sequence, Set

from kafkalens.core.logging import get_logger
from kafkalens.models.auth import AuthenticationPayload
from kafkalens.models.rbac import Provider, Role

logger = get_logger(__name__)


class ProviderAuthorityExtractor(ABC):
    """Stateless strategy extracting role bindings from provider claims."""

    providers: FrozenSet[Provider] = frozenset()
    registration_name: str = ""

    def is_applicable(self, provider_name: str) -> bool:
        """Whether this extractor handles logins through ``provider_name``."""
        return (provider_name or "").strip().lower() == self.registration_name

    @abstractmethod
    def extract(
        self, roles: Sequence[Role], payload: AuthenticationPayload
    ) -> Set[str]:
        """Names of the roles the payload binds to."""

    def _roles_matching(
        self, roles: Sequence[Role], subject_type: str, candidates: Iterable[str]
    ) -> Set[str]:
        wanted = set(candidates)
        if not wanted:
            return set()
        return {
            role.name
            for role in roles
            if any(
                s.type == subject_type and s.value in wanted
                for s in role.subjects_for(*self.providers)
            )
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CognitoAuthorityExtractor(ProviderAuthorityExtractor):
    GROUPS_ATTRIBUTE = "cognito:groups"

    providers = frozenset({Provider.OAUTH_COGNITO})
    registration_name = "cognito"

    def extract(self, roles, payload):
        by_user = self._roles_matching(roles, "user", [payload.name])
        groups = payload.attribute_values(self.GROUPS_ATTRIBUTE)
        if not groups:
            logger.debug(f"No {self.GROUPS_ATTRIBUTE} claim for {payload.name}")
            return by_user
        return by_user | self._roles_matching(roles, "group", groups)


class GoogleAuthorityExtractor(ProviderAuthorityExtractor):
    EMAIL_ATTRIBUTE = "email"
    DOMAIN_ATTRIBUTE = "hd"

    providers = frozenset({Provider.OAUTH_GOOGLE})
    registration_name = "google"

    def extract(self, roles, payload):
        by_user = self._roles_matching(
            roles, "user", payload.attribute_values(self.EMAIL_ATTRIBUTE)
        )
        by_domain = self._roles_matching(
            roles, "domain", payload.attribute_values(self.DOMAIN_ATTRIBUTE)
        )
        return by_user | by_domain


class GithubAuthorityExtractor(ProviderAuthorityExtractor):
    """GitHub logins.

    Organization membership must already be resolved by the login flow and
    passed in the ``organizations`` attribute.
    """

    USERNAME_ATTRIBUTE = "login"
    ORGANIZATIONS_ATTRIBUTE = "organizations"

    providers = frozenset({Provider.OAUTH_GITHUB})
    registration_name = "github"

    def extract(self, roles, payload):
        by_user = self._roles_matching(
            roles, "user", payload.attribute_values(self.USERNAME_ATTRIBUTE)
        )
        by_org = self._roles_matching(
            roles,
            "organization",
            payload.attribute_values(self.ORGANIZATIONS_ATTRIBUTE),
        )
        return by_user | by_org


class LdapAuthorityExtractor(ProviderAuthorityExtractor):
    AUTHORITIES_ATTRIBUTE = "authorities"

    providers = frozenset({Provider.LDAP, Provider.LDAP_AD})
    registration_name = "ldap"

    def extract(self, roles, payload):
        by_user = self._roles_matching(roles, "user", [payload.name])
        by_group = self._roles_matching(
            roles, "group", payload.attribute_values(self.AUTHORITIES_ATTRIBUTE)
        )
        return by_user | by_group


_LDAP = LdapAuthorityExtractor()

PROVIDER_EXTRACTORS: Dict[Provider, ProviderAuthorityExtractor] = {
    Provider.OAUTH_COGNITO: CognitoAuthorityExtractor(),
    Provider.OAUTH_GOOGLE: GoogleAuthorityExtractor(),
    Provider.OAUTH_GITHUB: GithubAuthorityExtractor(),
    Provider.LDAP: _LDAP,
    Provider.LDAP_AD: _LDAP,
}


def extractors_for(roles: Iterable[Role]) -> FrozenSet[ProviderAuthorityExtractor]:
    """Distinct extractors for every provider referenced by the roles' subjects."""
    return frozenset(
        PROVIDER_EXTRACTORS[subject.provider]
        for role in roles
        for subject in role.subjects
    )
