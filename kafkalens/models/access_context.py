"""Per-operation access request descriptor."""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

from kafkalens.core.exceptions import InvariantViolationError
from kafkalens.models.rbac import normalize_action


@dataclass(frozen=True)
class AccessContext:
    """Everything one operation needs checked.

    A single API call may touch several resource kinds (e.g. a connector
    restart needs both connect and connector checks), so each kind carries
    its own optional target value and required actions. Build instances with
    :meth:`builder`.
    """

    request: Any = None
    cluster: Optional[str] = None

    cluster_config_actions: FrozenSet[str] = frozenset()

    topic: Optional[str] = None
    topic_actions: FrozenSet[str] = frozenset()

    consumer_group: Optional[str] = None
    consumer_group_actions: FrozenSet[str] = frozenset()

    connect: Optional[str] = None
    connect_actions: FrozenSet[str] = frozenset()

    connector: Optional[str] = None

    schema: Optional[str] = None
    schema_actions: FrozenSet[str] = frozenset()

    ksql_actions: FrozenSet[str] = frozenset()

    @staticmethod
    def builder(request: Any = None) -> "AccessContextBuilder":
        return AccessContextBuilder(request)


@dataclass
class AccessContextBuilder:
    """Mutable builder producing an immutable :class:`AccessContext`."""

    request: Any = None
    _values: dict = field(default_factory=dict)

    def _set(self, key: str, value: Any) -> "AccessContextBuilder":
        self._values[key] = value
        return self

    def _actions(self, key: str, actions) -> "AccessContextBuilder":
        current = set(self._values.get(key, frozenset()))
        normalized = (normalize_action(a) for a in actions)
        current.update(a for a in normalized if a)
        return self._set(key, frozenset(current))

    def cluster(self, cluster: str) -> "AccessContextBuilder":
        return self._set("cluster", cluster)

    def cluster_config_actions(self, *actions) -> "AccessContextBuilder":
        return self._actions("cluster_config_actions", actions)

    def topic(self, topic: str) -> "AccessContextBuilder":
        return self._set("topic", topic)

    def topic_actions(self, *actions) -> "AccessContextBuilder":
        return self._actions("topic_actions", actions)

    def consumer_group(self, consumer_group: str) -> "AccessContextBuilder":
        return self._set("consumer_group", consumer_group)

    def consumer_group_actions(self, *actions) -> "AccessContextBuilder":
        return self._actions("consumer_group_actions", actions)

    def connect(self, connect: str) -> "AccessContextBuilder":
        return self._set("connect", connect)

    def connect_actions(self, *actions) -> "AccessContextBuilder":
        return self._actions("connect_actions", actions)

    def connector(self, connector: str) -> "AccessContextBuilder":
        return self._set("connector", connector)

    def schema(self, schema: str) -> "AccessContextBuilder":
        return self._set("schema", schema)

    def schema_actions(self, *actions) -> "AccessContextBuilder":
        return self._actions("schema_actions", actions)

    def ksql_actions(self, *actions) -> "AccessContextBuilder":
        return self._actions("ksql_actions", actions)

    def build(self) -> AccessContext:
        """Validate and freeze the context.

        Raises:
            InvariantViolationError: a target value was given without any
                action for its resource kind.
        """
        values = self._values
        for target, actions in (
            ("topic", "topic_actions"),
            ("consumer_group", "consumer_group_actions"),
            ("connect", "connect_actions"),
            ("connector", "connect_actions"),
            ("schema", "schema_actions"),
        ):
            if values.get(target) is not None and not values.get(actions):
                raise InvariantViolationError(
                    f"{target} '{values[target]}' given but {actions} are empty"
                )

        return AccessContext(request=self.request, **values)
