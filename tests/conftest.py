"""Pytest configuration and shared fixtures for KafkaLens tests."""

from typing import Any, Dict, Iterable, List, Optional, Set

import pytest
from fakeredis import FakeServer, aioredis
from fastapi.testclient import TestClient

from kafkalens.models.auth import AuthenticatedUser
from kafkalens.repositories.session import SessionRepository
from kafkalens.services.rbac import (
    AccessControlService,
    init_access_control,
    parse_roles,
)

# ============================================================================
# Redis Fixtures
# ============================================================================


@pytest.fixture
def fake_redis():
    """Async FakeRedis with its own server so tests never share state."""
    return aioredis.FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def session_repository(fake_redis):
    return SessionRepository(fake_redis, key_prefix="session", ttl_seconds=3600)


class InMemorySessionRepository(SessionRepository):
    """Session store kept in a dict, for tests driven through TestClient."""

    def __init__(self):
        super().__init__(redis_client=None)
        self.sessions: Dict[str, Set[str]] = {}

    async def get_groups(self, session_id: str) -> Optional[Set[str]]:
        groups = self.sessions.get(session_id)
        return set(groups) if groups is not None else None

    async def save_groups(self, session_id: str, groups: Iterable[str]) -> None:
        self.sessions[session_id] = set(groups)

    async def delete(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None


@pytest.fixture
def memory_sessions():
    return InMemorySessionRepository()


# ============================================================================
# User Fixtures
# ============================================================================


@pytest.fixture
def ops_user():
    return AuthenticatedUser(name="alice", groups={"ops"})


@pytest.fixture
def readonly_user():
    return AuthenticatedUser(name="bob", groups={"readonly"})


@pytest.fixture
def no_access_user():
    return AuthenticatedUser(name="mallory", groups=set())


# ============================================================================
# Role Fixtures
# ============================================================================


@pytest.fixture
def ops_role() -> Dict[str, Any]:
    """Operators: full topic access on prod."""
    return {
        "name": "ops",
        "subjects": [
            {"provider": "oauth_cognito", "type": "group", "value": "kafka-ops"},
            {"provider": "ldap", "type": "group", "value": "cn=ops"},
        ],
        "clusters": ["prod"],
        "permissions": [
            {"resource": "topic", "value": ".*", "actions": ["VIEW", "EDIT"]},
        ],
    }


@pytest.fixture
def readonly_role() -> Dict[str, Any]:
    """Read-only access to public topics on every cluster."""
    return {
        "name": "readonly",
        "subjects": [
            {"provider": "oauth_google", "type": "domain", "value": "example.com"},
        ],
        "clusters": ["prod", "staging"],
        "permissions": [
            {"resource": "topic", "value": "^public-.*", "actions": ["VIEW"]},
            {"resource": "consumer", "actions": ["view"]},
            {"resource": "schema", "value": "public-.*", "actions": ["VIEW"]},
        ],
    }


@pytest.fixture
def admin_role() -> Dict[str, Any]:
    """Everything on every resource of prod and staging."""
    return {
        "name": "admins",
        "subjects": [
            {"provider": "oauth_github", "type": "organization", "value": "acme"},
        ],
        "clusters": ["PROD", "staging"],
        "permissions": [
            {"resource": "clusterconfig", "actions": "all"},
            {"resource": "topic", "actions": "all"},
            {"resource": "consumer", "actions": "all"},
            {"resource": "schema", "actions": "all"},
            {"resource": "connect", "actions": "all"},
            {"resource": "ksql", "actions": ["execute"]},
        ],
    }


# ============================================================================
# Service Fixtures
# ============================================================================


class StaticResolver:
    """Principal resolver returning a fixed user and counting calls."""

    def __init__(self, user: Optional[AuthenticatedUser]):
        self.user = user
        self.calls = 0

    async def __call__(self, request: Any) -> Optional[AuthenticatedUser]:
        self.calls += 1
        return self.user


@pytest.fixture
def make_resolver():
    """Factory for resolvers returning a fixed user."""
    return StaticResolver


@pytest.fixture
def make_service():
    """Build an access control service from raw role dicts and a fixed caller."""

    def _make(
        roles: List[Dict[str, Any]],
        user: Optional[AuthenticatedUser] = None,
        resolver=None,
    ) -> AccessControlService:
        state = init_access_control(parse_roles(roles), auth_registered=True)
        return AccessControlService(state, resolver or StaticResolver(user))

    return _make


# ============================================================================
# API Test Client Fixtures
# ============================================================================


@pytest.fixture
def test_client(monkeypatch, memory_sessions, ops_role, readonly_role, admin_role):
    """Test client with roles loaded and sessions kept in memory."""
    from kafkalens.api.dependencies.auth import (
        SessionPrincipalResolver,
        get_session_repository,
    )
    from kafkalens.api.dependencies.rbac import get_access_control
    from kafkalens.config.settings import settings
    from kafkalens.main import app

    monkeypatch.setattr(settings, "kafka_clusters", "prod,staging,dev")
    monkeypatch.setattr(settings, "oauth_proxy_enabled", True)

    state = init_access_control(
        parse_roles([ops_role, readonly_role, admin_role]), auth_registered=True
    )
    service = AccessControlService(state, SessionPrincipalResolver(memory_sessions))

    app.dependency_overrides[get_access_control] = lambda: service
    app.dependency_overrides[get_session_repository] = lambda: memory_sessions

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def login(test_client, memory_sessions):
    """Attach proxy identity and a session holding ``groups`` to the client."""

    def _login(user: str, groups) -> str:
        session_id = f"sess-{user}"
        memory_sessions.sessions[session_id] = set(groups)
        test_client.headers.update({"X-Forwarded-User": user})
        test_client.cookies.set("SESSION", session_id)
        return session_id

    return _login


# ============================================================================
# Markers
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "rbac: RBAC-specific tests")
    config.addinivalue_line("markers", "redis: Redis-dependent tests")
