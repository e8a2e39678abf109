"""Access control facade used by the API layer."""

from typing import (
    Any,
    Awaitable,
    Callable,
    FrozenSet,
    List,
    Optional,
    Tuple,
)

from kafkalens.core.exceptions import AccessDeniedError, InvariantViolationError
from kafkalens.core.logging import get_logger, get_logger_with_context
from kafkalens.models.access_context import AccessContext
from kafkalens.models.auth import AuthenticatedUser
from kafkalens.models.rbac import (
    ConnectAction,
    ConsumerGroupAction,
    Resource,
    Role,
    SchemaAction,
    TopicAction,
)
from kafkalens.services.rbac.evaluator import (
    filter_roles_by_cluster,
    filter_roles_by_user,
    is_accessible,
    require_cluster,
)
from kafkalens.services.rbac.extractors import ProviderAuthorityExtractor
from kafkalens.services.rbac.loader import AccessControlState

logger = get_logger(__name__)

PrincipalResolver = Callable[[Any], Awaitable[Optional[AuthenticatedUser]]]


def _require_actions(actions: FrozenSet[str], kind: str) -> None:
    if not actions:
        raise InvariantViolationError(f"{kind} actions are empty")


class AccessControlService:
    """Evaluates access requests against the roles loaded at startup.

    When no roles are configured every check passes without resolving the
    caller. Otherwise the caller is resolved once per check through
    ``principal_resolver`` and each resource kind touched by the request is
    evaluated; all of them must pass.
    """

    def __init__(self, state: AccessControlState, principal_resolver: PrincipalResolver):
        self._state = state
        self._resolve_principal = principal_resolver

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def rbac_enabled(self) -> bool:
        return self._state.enabled

    @property
    def roles(self) -> Tuple[Role, ...]:
        return self._state.roles

    @property
    def extractors(self) -> FrozenSet[ProviderAuthorityExtractor]:
        return self._state.extractors

    def roles_for(self, user: AuthenticatedUser) -> List[Role]:
        """Roles bound to the user through their groups."""
        return list(filter_roles_by_user(self.roles, user))

    async def get_user(self, request: Any) -> Optional[AuthenticatedUser]:
        """Resolve the caller of ``request``; ``None`` when unauthenticated."""
        return await self._resolve_principal(request)

    # =========================================================================
    # Full request validation
    # =========================================================================

    async def validate_access(self, context: AccessContext) -> None:
        """Check every resource kind of ``context``.

        Raises:
            AccessDeniedError: the caller cannot be resolved or any check fails.
            InvariantViolationError: the context is inconsistent.
        """
        if not self.rbac_enabled:
            return

        user = await self.get_user(context.request)
        if user is None:
            logger.info("Access denied: no authenticated principal")
            raise AccessDeniedError()

        access_granted = (
            self.is_cluster_accessible(context, user)
            and self.is_cluster_config_accessible(context, user)
            and self.is_topic_accessible(context, user)
            and self.is_consumer_group_accessible(context, user)
            and self.is_connect_accessible(context, user)
            and self.is_connector_accessible(context, user)
            and self.is_schema_accessible(context, user)
            and self.is_ksql_accessible(context, user)
        )

        if not access_granted:
            get_logger_with_context(
                __name__, user=user, cluster=context.cluster
            ).info(f"Access denied for {user.name} on cluster {context.cluster}")
            raise AccessDeniedError()

    # =========================================================================
    # Per resource kind checks
    # =========================================================================

    def is_cluster_accessible(self, context: AccessContext, user: AuthenticatedUser) -> bool:
        if not self.rbac_enabled:
            return True

        require_cluster(context.cluster)

        matching = filter_roles_by_cluster(
            filter_roles_by_user(self.roles, user), context.cluster
        )
        return any(True for _ in matching)

    def is_cluster_config_accessible(
        self, context: AccessContext, user: AuthenticatedUser
    ) -> bool:
        if not self.rbac_enabled:
            return True

        if not context.cluster_config_actions:
            return True
        require_cluster(context.cluster)

        return is_accessible(
            self.roles,
            Resource.CLUSTERCONFIG,
            context.cluster,
            user,
            context,
            context.cluster_config_actions,
        )

    def is_topic_accessible(self, context: AccessContext, user: AuthenticatedUser) -> bool:
        return self._check(
            Resource.TOPIC, context.topic, context.topic_actions, context, user
        )

    def is_consumer_group_accessible(
        self, context: AccessContext, user: AuthenticatedUser
    ) -> bool:
        return self._check(
            Resource.CONSUMER,
            context.consumer_group,
            context.consumer_group_actions,
            context,
            user,
        )

    def is_schema_accessible(self, context: AccessContext, user: AuthenticatedUser) -> bool:
        return self._check(
            Resource.SCHEMA, context.schema, context.schema_actions, context, user
        )

    def is_connect_accessible(self, context: AccessContext, user: AuthenticatedUser) -> bool:
        return self._check(
            Resource.CONNECT, context.connect, context.connect_actions, context, user
        )

    def is_connector_accessible(
        self, context: AccessContext, user: AuthenticatedUser
    ) -> bool:
        # TODO: filter on context.connector once permissions support connector selectors
        return self.is_connect_accessible(context, user)

    def is_ksql_accessible(self, context: AccessContext, user: AuthenticatedUser) -> bool:
        if not self.rbac_enabled:
            return True

        if not context.ksql_actions:
            return True
        require_cluster(context.cluster)

        # KSQL has no addressable value, so every ksql permission applies
        return is_accessible(
            self.roles, Resource.KSQL, None, user, context, context.ksql_actions
        )

    def _check(
        self,
        resource: Resource,
        value: Optional[str],
        actions: FrozenSet[str],
        context: AccessContext,
        user: AuthenticatedUser,
    ) -> bool:
        if not self.rbac_enabled:
            return True

        if value is None and not actions:
            return True
        _require_actions(actions, resource.value)
        require_cluster(context.cluster)

        required = {a.upper() for a in actions}
        return is_accessible(self.roles, resource, value, user, context, required)

    # =========================================================================
    # Single object entry points
    # =========================================================================

    async def _check_with_user(self, context: AccessContext, check) -> bool:
        user = await self.get_user(context.request)
        if user is None:
            return False
        return check(context, user)

    async def can_access_cluster(self, cluster_name: str, request: Any) -> bool:
        if not self.rbac_enabled:
            return True

        context = AccessContext.builder(request).cluster(cluster_name).build()
        return await self._check_with_user(context, self.is_cluster_accessible)

    async def can_access_topic(self, topic: str, cluster_name: str, request: Any) -> bool:
        if not self.rbac_enabled:
            return True

        context = (
            AccessContext.builder(request)
            .cluster(cluster_name)
            .topic(topic)
            .topic_actions(TopicAction.VIEW)
            .build()
        )
        return await self._check_with_user(context, self.is_topic_accessible)

    async def can_access_consumer_group(
        self, group_id: str, cluster_name: str, request: Any
    ) -> bool:
        if not self.rbac_enabled:
            return True

        context = (
            AccessContext.builder(request)
            .cluster(cluster_name)
            .consumer_group(group_id)
            .consumer_group_actions(ConsumerGroupAction.VIEW)
            .build()
        )
        return await self._check_with_user(context, self.is_consumer_group_accessible)

    async def can_access_schema(self, schema: str, cluster_name: str, request: Any) -> bool:
        if not self.rbac_enabled:
            return True

        context = (
            AccessContext.builder(request)
            .cluster(cluster_name)
            .schema(schema)
            .schema_actions(SchemaAction.VIEW)
            .build()
        )
        return await self._check_with_user(context, self.is_schema_accessible)

    async def can_access_connect(
        self, connect_name: str, cluster_name: str, request: Any
    ) -> bool:
        if not self.rbac_enabled:
            return True

        context = (
            AccessContext.builder(request)
            .cluster(cluster_name)
            .connect(connect_name)
            .connect_actions(ConnectAction.VIEW)
            .build()
        )
        return await self._check_with_user(context, self.is_connect_accessible)

    async def can_access_connector(
        self, connect_name: str, connector_name: str, cluster_name: str, request: Any
    ) -> bool:
        if not self.rbac_enabled:
            return True

        context = (
            AccessContext.builder(request)
            .cluster(cluster_name)
            .connect(connect_name)
            .connect_actions(ConnectAction.VIEW)
            .connector(connector_name)
            .build()
        )
        return await self._check_with_user(context, self.is_connector_accessible)
