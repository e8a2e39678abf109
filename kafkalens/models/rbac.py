"""Role-based access control policy model.

Roles are loaded once at startup and never mutated afterwards; every model
here is frozen.
"""

import re
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL_ACTIONS = "ALL"


class _CaseInsensitiveEnum(str, Enum):
    """String enum that accepts any casing of its values."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Resource(_CaseInsensitiveEnum):
    """Resource kinds a permission can target."""

    CLUSTERCONFIG = "clusterconfig"
    TOPIC = "topic"
    CONSUMER = "consumer"
    SCHEMA = "schema"
    CONNECT = "connect"
    KSQL = "ksql"


class Provider(_CaseInsensitiveEnum):
    """Identity providers a role subject can be bound to."""

    OAUTH_GOOGLE = "oauth_google"
    OAUTH_GITHUB = "oauth_github"
    OAUTH_COGNITO = "oauth_cognito"
    LDAP = "ldap"
    LDAP_AD = "ldap_ad"


class ClusterConfigAction(str, Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"


class TopicAction(str, Enum):
    VIEW = "VIEW"
    CREATE = "CREATE"
    EDIT = "EDIT"
    DELETE = "DELETE"
    MESSAGES_READ = "MESSAGES_READ"
    MESSAGES_PRODUCE = "MESSAGES_PRODUCE"
    MESSAGES_DELETE = "MESSAGES_DELETE"


class ConsumerGroupAction(str, Enum):
    VIEW = "VIEW"
    DELETE = "DELETE"
    RESET_OFFSETS = "RESET_OFFSETS"


class SchemaAction(str, Enum):
    VIEW = "VIEW"
    CREATE = "CREATE"
    DELETE = "DELETE"
    EDIT = "EDIT"
    MODIFY_GLOBAL_COMPATIBILITY = "MODIFY_GLOBAL_COMPATIBILITY"


class ConnectAction(str, Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"
    CREATE = "CREATE"


class KsqlAction(str, Enum):
    EXECUTE = "EXECUTE"


ACTIONS_BY_RESOURCE: Dict[Resource, Type[Enum]] = {
    Resource.CLUSTERCONFIG: ClusterConfigAction,
    Resource.TOPIC: TopicAction,
    Resource.CONSUMER: ConsumerGroupAction,
    Resource.SCHEMA: SchemaAction,
    Resource.CONNECT: ConnectAction,
    Resource.KSQL: KsqlAction,
}


def normalize_action(action) -> str:
    """Uppercase string form of an action enum member or free-form name."""
    value = action.value if isinstance(action, Enum) else str(action)
    return value.strip().upper()


class Subject(BaseModel):
    """Binding of a role to an identity-provider user, group, domain or organization."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    type: str = "group"
    value: str = Field(..., min_length=1)

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()


class Permission(BaseModel):
    """One grant within a role: resource kind, optional value pattern, actions."""

    model_config = ConfigDict(frozen=True)

    resource: Resource
    value: Optional[re.Pattern] = None
    actions: FrozenSet[str]

    @field_validator("resource", mode="before")
    @classmethod
    def normalize_resource(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("actions", mode="before")
    @classmethod
    def normalize_actions(cls, v, info):
        if isinstance(v, str):
            v = [v]
        actions = {normalize_action(a) for a in (v or [])}
        actions.discard("")
        if not actions:
            raise ValueError("Actions are empty")

        if ALL_ACTIONS in actions:
            resource = info.data.get("resource")
            vocabulary = ACTIONS_BY_RESOURCE.get(resource)
            if vocabulary is not None:
                actions.discard(ALL_ACTIONS)
                actions.update(a.value for a in vocabulary)

        return frozenset(actions)

    def matches_value(self, resource_value: Optional[str]) -> bool:
        """Whether the value pattern admits ``resource_value``.

        An absent pattern or an absent value always matches.
        """
        if resource_value is None or self.value is None:
            return True
        return self.value.fullmatch(resource_value) is not None


class Role(BaseModel):
    """Named bundle of cluster applicability and granted permissions."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    subjects: Tuple[Subject, ...] = ()
    clusters: Tuple[str, ...] = Field(..., min_length=1)
    permissions: Tuple[Permission, ...] = ()

    def applies_to_cluster(self, cluster: str) -> bool:
        """Case-insensitive membership of ``cluster`` in the role's clusters."""
        wanted = cluster.casefold()
        return any(c.casefold() == wanted for c in self.clusters)

    def subjects_for(self, *providers: Provider) -> List[Subject]:
        return [s for s in self.subjects if s.provider in providers]


class RoleBasedAccessControlProperties(BaseModel):
    """Role definitions as read from configuration."""

    model_config = ConfigDict(frozen=True)

    roles: Tuple[Role, ...] = ()
