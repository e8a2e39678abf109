"""Authentication models for KafkaLens with RBAC support."""

from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthenticatedUser(BaseModel):
    """Caller identity resolved for a single request."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "jdoe",
                "groups": ["ops", "viewers"],
            }
        },
    )

    name: str = Field(..., description="Principal name from the security context")
    groups: FrozenSet[str] = Field(
        default_factory=frozenset, description="Group identifiers from the session"
    )

    @field_validator("groups", mode="before")
    @classmethod
    def default_groups(cls, v):
        """Absent groups resolve to the empty set."""
        return frozenset() if v is None else v

    @property
    def id(self) -> str:
        return self.name

    def has_group(self, group: str) -> bool:
        """Case-sensitive membership check."""
        return group in self.groups


class AuthenticationPayload(BaseModel):
    """Claims handed over by an identity provider after a successful login.

    ``attributes`` holds provider specific claims, e.g. ``cognito:groups``,
    ``email`` and ``hd`` for Google, ``login`` and the resolved
    ``organizations`` for GitHub, or ``authorities`` for LDAP.
    """

    model_config = ConfigDict(frozen=True)

    provider: str = Field(..., description="Registration id of the provider")
    name: str = Field(..., description="Principal name reported by the provider")
    attributes: Dict[str, Any] = Field(default_factory=dict)

    def attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def attribute_values(self, key: str) -> List[str]:
        """Attribute as a list of distinct strings, empty when missing."""
        raw = self.attribute(key)
        if raw is None:
            return []
        if isinstance(raw, (str, bytes)):
            raw = [raw]
        seen = []
        for item in raw:
            text = str(item)
            if text not in seen:
                seen.append(text)
        return seen


class PermissionInfo(BaseModel):
    """Permission as exposed to the UI."""

    resource: str
    value: Optional[str] = None
    actions: List[str]


class RoleInfo(BaseModel):
    """Role granted to the current user."""

    name: str
    clusters: List[str]
    permissions: List[PermissionInfo]


class AuthorizationInfo(BaseModel):
    """Authorization summary for the current user."""

    rbac_enabled: bool = Field(..., description="Whether access control is active")
    user: Optional[AuthenticatedUser] = Field(None, description="Resolved caller")
    roles: List[RoleInfo] = Field(default_factory=list)
