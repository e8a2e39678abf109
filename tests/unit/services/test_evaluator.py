"""Unit tests for the stateless access evaluator."""

import logging

import pytest

from kafkalens.core.exceptions import InvariantViolationError
from kafkalens.models.access_context import AccessContext
from kafkalens.models.auth import AuthenticatedUser
from kafkalens.models.rbac import Permission, Resource, Role
from kafkalens.services.rbac.evaluator import (
    filter_permissions_by_resource,
    filter_permissions_by_value,
    filter_roles_by_cluster,
    filter_roles_by_user,
    granted_actions,
    is_accessible,
)


@pytest.fixture
def roles(ops_role, readonly_role, admin_role):
    return tuple(Role(**r) for r in (ops_role, readonly_role, admin_role))


@pytest.mark.unit
class TestFilters:
    """Test the individual filtering stages."""

    def test_roles_by_user(self, roles):
        user = AuthenticatedUser(name="alice", groups={"ops", "unknown"})
        assert [r.name for r in filter_roles_by_user(roles, user)] == ["ops"]

    def test_roles_by_user_is_case_sensitive(self, roles):
        user = AuthenticatedUser(name="alice", groups={"OPS"})
        assert list(filter_roles_by_user(roles, user)) == []

    def test_roles_by_cluster(self, roles):
        names = [r.name for r in filter_roles_by_cluster(roles, "STAGING")]
        assert names == ["readonly", "admins"]

    def test_permissions_by_resource(self, roles):
        permissions = [p for r in roles for p in r.permissions]
        topic = list(filter_permissions_by_resource(permissions, Resource.TOPIC))

        assert len(topic) == 3
        assert all(p.resource == Resource.TOPIC for p in topic)

    def test_permissions_by_value(self):
        permissions = [
            Permission(resource="topic", value="^public-.*", actions=["VIEW"]),
            Permission(resource="topic", actions=["EDIT"]),
        ]

        matched = list(filter_permissions_by_value(permissions, "internal"))
        assert [p.actions for p in matched] == [frozenset({"EDIT"})]
        assert len(list(filter_permissions_by_value(permissions, None))) == 2


@pytest.mark.unit
@pytest.mark.rbac
class TestIsAccessible:
    """Test action coverage decisions."""

    def test_granted_actions_union(self, roles):
        user = AuthenticatedUser(name="bob", groups={"ops", "readonly"})
        granted = granted_actions(roles, Resource.TOPIC, "public-x", user, "prod")

        assert granted == {"VIEW", "EDIT"}

    def test_granted_actions_outside_cluster(self, roles):
        user = AuthenticatedUser(name="alice", groups={"ops"})
        assert granted_actions(roles, Resource.TOPIC, "orders", user, "dev") == set()

    def test_all_required_actions_must_be_granted(self, roles):
        user = AuthenticatedUser(name="bob", groups={"readonly"})
        context = AccessContext.builder().cluster("prod").build()

        assert is_accessible(
            roles, Resource.TOPIC, "public-a", user, context, {"VIEW"}
        )
        assert not is_accessible(
            roles, Resource.TOPIC, "public-a", user, context, {"VIEW", "EDIT"}
        )

    def test_required_actions_compared_uppercase(self, roles):
        user = AuthenticatedUser(name="alice", groups={"ops"})
        context = AccessContext.builder().cluster("PROD").build()

        assert is_accessible(roles, Resource.TOPIC, "orders", user, context, {"view"})

    def test_no_required_actions_is_vacuously_true(self, roles):
        user = AuthenticatedUser(name="mallory")
        context = AccessContext.builder().cluster("prod").build()

        assert is_accessible(roles, Resource.SCHEMA, "x", user, context, set())

    def test_repeated_evaluation_is_stable(self, roles):
        user = AuthenticatedUser(name="bob", groups={"readonly"})
        context = AccessContext.builder().cluster("prod").build()

        first = is_accessible(roles, Resource.TOPIC, "public-a", user, context, {"VIEW"})
        second = is_accessible(roles, Resource.TOPIC, "public-a", user, context, {"VIEW"})
        assert first is second is True

    def test_adding_actions_only_grows_access(self):
        def role(actions):
            return Role(
                name="dev",
                clusters=["prod"],
                permissions=[{"resource": "topic", "actions": actions}],
            )

        user = AuthenticatedUser(name="erin", groups={"dev"})
        context = AccessContext.builder().cluster("prod").build()
        narrow, wide = (role(["VIEW"]),), (role(["VIEW", "EDIT"]),)

        for required in ({"VIEW"}, {"EDIT"}, {"VIEW", "EDIT"}):
            if is_accessible(narrow, Resource.TOPIC, "t", user, context, required):
                assert is_accessible(wide, Resource.TOPIC, "t", user, context, required)
        assert is_accessible(wide, Resource.TOPIC, "t", user, context, {"EDIT"})
        assert not is_accessible(narrow, Resource.TOPIC, "t", user, context, {"EDIT"})

    def test_missing_cluster_is_invariant_violation(self, roles):
        user = AuthenticatedUser(name="alice", groups={"ops"})

        with pytest.raises(InvariantViolationError, match="cluster value is empty"):
            is_accessible(roles, Resource.TOPIC, "x", user, AccessContext(), {"VIEW"})

    def test_granted_actions_require_cluster(self, roles):
        user = AuthenticatedUser(name="alice", groups={"ops"})

        with pytest.raises(InvariantViolationError):
            granted_actions(roles, Resource.TOPIC, "x", user, "")


@pytest.mark.unit
class TestDecisionLogging:
    """Test debug logging of access decisions."""

    LOGGER = "kafkalens.services.rbac.evaluator"

    def test_decision_logged_at_debug(self, roles, caplog):
        user = AuthenticatedUser(name="alice", groups={"ops"})
        context = AccessContext.builder().cluster("prod").build()

        with caplog.at_level(logging.DEBUG, logger=self.LOGGER):
            is_accessible(roles, Resource.TOPIC, "orders", user, context, {"VIEW"})

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert "allowed=True" in record.getMessage()
        assert record.user_id == "alice"

    def test_nothing_formatted_above_debug(self, roles, caplog, monkeypatch):
        user = AuthenticatedUser(name="alice", groups={"ops"})
        context = AccessContext.builder().cluster("prod").build()
        evaluator_logger = logging.getLogger(self.LOGGER)

        def fail(*args, **kwargs):
            raise AssertionError("debug message built while DEBUG is off")

        monkeypatch.setattr(evaluator_logger, "debug", fail)
        with caplog.at_level(logging.INFO, logger=self.LOGGER):
            assert is_accessible(
                roles, Resource.TOPIC, "orders", user, context, {"VIEW"}
            )
