"""
Authentication and authorization routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from kafkalens.api.dependencies.auth import (
    get_current_user,
    get_optional_current_user,
    get_session_id,
    get_session_repository,
)
from kafkalens.api.dependencies.rbac import get_access_control
from kafkalens.core.logging import get_logger
from kafkalens.models.auth import (
    AuthenticatedUser,
    AuthorizationInfo,
    PermissionInfo,
    RoleInfo,
)
from kafkalens.repositories.session import SessionRepository
from kafkalens.services.rbac import AccessControlService

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/auth/me",
    response_model=AuthenticatedUser,
    summary="Current User",
    description="Get current authenticated user and the groups of their session",
)
async def get_me(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    logger.info(
        "User information requested",
        extra={"user_id": user.id, "groups_count": len(user.groups)},
    )
    return user


@router.get(
    "/authorization",
    response_model=AuthorizationInfo,
    summary="Authorization Summary",
    description="Whether access control is enabled and the roles granted to the caller",
)
async def get_authorization(
    user: Optional[AuthenticatedUser] = Depends(get_optional_current_user),
    access_control: AccessControlService = Depends(get_access_control),
) -> AuthorizationInfo:
    if not access_control.rbac_enabled or user is None:
        return AuthorizationInfo(rbac_enabled=access_control.rbac_enabled, user=user)

    roles = [
        RoleInfo(
            name=role.name,
            clusters=list(role.clusters),
            permissions=[
                PermissionInfo(
                    resource=p.resource.value,
                    value=p.value.pattern if p.value is not None else None,
                    actions=sorted(p.actions),
                )
                for p in role.permissions
            ],
        )
        for role in access_control.roles_for(user)
    ]
    return AuthorizationInfo(rbac_enabled=True, user=user, roles=roles)


@router.post("/auth/logout", summary="Logout", description="Drop the current session")
async def logout(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    sessions: SessionRepository = Depends(get_session_repository),
) -> dict:
    session_id = get_session_id(request)
    removed = await sessions.delete(session_id) if session_id else False

    logger.info("User logout", extra={"user_id": user.id})
    return {"message": "Logout successful", "session_cleared": removed}
