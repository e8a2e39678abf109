"""Tests for resolving the caller from proxy headers and the session."""

import pytest
from starlette.requests import Request

from kafkalens.api.dependencies.auth import (
    DEV_USER,
    SessionPrincipalResolver,
    extract_principal_name,
)
from kafkalens.config.settings import Environment, settings


def make_request(headers=None, cookies=None):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


@pytest.mark.unit
class TestExtractPrincipalName:
    """Test principal name extraction."""

    def test_from_proxy_header(self, monkeypatch):
        monkeypatch.setattr(settings, "oauth_proxy_enabled", True)
        request = make_request({"X-Forwarded-User": " alice "})

        assert extract_principal_name(request) == "alice"

    def test_blank_header(self, monkeypatch):
        monkeypatch.setattr(settings, "oauth_proxy_enabled", True)
        assert extract_principal_name(make_request({"X-Forwarded-User": "  "})) is None

    def test_dev_user_without_proxy(self, monkeypatch):
        monkeypatch.setattr(settings, "oauth_proxy_enabled", False)
        monkeypatch.setattr(settings, "environment", Environment.DEVELOPMENT)

        assert extract_principal_name(make_request()) == DEV_USER

    def test_no_proxy_in_production(self, monkeypatch):
        monkeypatch.setattr(settings, "oauth_proxy_enabled", False)
        monkeypatch.setattr(settings, "environment", Environment.PRODUCTION)

        assert extract_principal_name(make_request()) is None


@pytest.mark.unit
@pytest.mark.redis
class TestSessionPrincipalResolver:
    """Test group resolution from the session store."""

    @pytest.fixture(autouse=True)
    def proxy_enabled(self, monkeypatch):
        monkeypatch.setattr(settings, "oauth_proxy_enabled", True)

    @pytest.mark.asyncio
    async def test_groups_from_session(self, session_repository):
        await session_repository.save_groups("s1", ["ops"])
        resolver = SessionPrincipalResolver(session_repository)

        user = await resolver(
            make_request({"X-Forwarded-User": "alice"}, {"SESSION": "s1"})
        )

        assert user.name == "alice"
        assert user.groups == frozenset({"ops"})

    @pytest.mark.asyncio
    async def test_missing_session_means_no_groups(self, session_repository):
        resolver = SessionPrincipalResolver(session_repository)

        user = await resolver(
            make_request({"X-Forwarded-User": "alice"}, {"SESSION": "gone"})
        )

        assert user.groups == frozenset()

    @pytest.mark.asyncio
    async def test_unauthenticated(self, session_repository):
        resolver = SessionPrincipalResolver(session_repository)

        assert await resolver(make_request()) is None
        assert await resolver(None) is None
