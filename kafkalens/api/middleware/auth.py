"""Authentication middleware for request processing."""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from kafkalens.config.settings import settings
from kafkalens.core.logging import get_logger

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


class AuthMiddleware(BaseHTTPMiddleware):
    """Tags requests with an id and adds security headers to responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in (
            settings.health_check_path,
            settings.readiness_check_path,
        ):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        if settings.debug:
            logger.debug(
                "Identity headers in request",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "principal": request.headers.get(settings.oauth_header_user),
                    "has_session": settings.session_cookie_name in request.cookies,
                },
            )

        response = await call_next(request)

        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        response.headers["X-Request-ID"] = request_id

        return response
