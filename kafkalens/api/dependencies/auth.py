"""Authentication dependencies for FastAPI."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from kafkalens.config.settings import Environment, settings
from kafkalens.core.logging import get_logger
from kafkalens.db.redis import get_redis_client
from kafkalens.models.auth import AuthenticatedUser
from kafkalens.repositories.session import SessionRepository

logger = get_logger(__name__)

DEV_USER = "dev-user"


class AuthenticationError(HTTPException):
    """Raised when authentication fails."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_session_repository() -> SessionRepository:
    return SessionRepository(
        get_redis_client(),
        key_prefix=settings.session_key_prefix,
        ttl_seconds=settings.session_expire_minutes * 60,
    )


def extract_principal_name(request: Request) -> Optional[str]:
    """Principal name from the OAuth proxy headers."""
    if not settings.oauth_proxy_enabled:
        if settings.environment == Environment.DEVELOPMENT:
            return DEV_USER
        return None

    username = request.headers.get(settings.oauth_header_user)
    return username.strip() if username and username.strip() else None


def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


class SessionPrincipalResolver:
    """Resolves the caller from the proxy headers and the session's groups."""

    def __init__(self, sessions: SessionRepository):
        self.sessions = sessions

    async def __call__(self, request: Optional[Request]) -> Optional[AuthenticatedUser]:
        if request is None:
            return None

        name = extract_principal_name(request)
        if not name:
            return None

        groups = None
        session_id = get_session_id(request)
        if session_id:
            groups = await self.sessions.get_groups(session_id)

        user = AuthenticatedUser(name=name, groups=groups)
        logger.debug(f"Resolved {len(user.groups)} groups for {user.name}")
        return user


async def get_current_user(
    request: Request,
    sessions: SessionRepository = Depends(get_session_repository),
) -> AuthenticatedUser:
    """Get authenticated user from request."""
    user = await SessionPrincipalResolver(sessions)(request)
    if user is None:
        raise AuthenticationError("No valid authentication found")
    return user


async def get_optional_current_user(
    request: Request,
    sessions: SessionRepository = Depends(get_session_repository),
) -> Optional[AuthenticatedUser]:
    """Get user if authenticated, else None."""
    return await SessionPrincipalResolver(sessions)(request)
