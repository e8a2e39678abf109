"""
Cluster routes guarded by the access control service.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from kafkalens.api.dependencies.rbac import get_access_control
from kafkalens.config.settings import settings
from kafkalens.core.exceptions import InvariantViolationError
from kafkalens.core.logging import get_logger
from kafkalens.models.access_context import AccessContext
from kafkalens.models.cluster import AccessCheck, KafkaCluster, ResourceAccess
from kafkalens.services.rbac import AccessControlService

logger = get_logger(__name__)
router = APIRouter()


def get_known_cluster(cluster_name: str) -> str:
    """Resolve a configured cluster name, ignoring case."""
    for name in settings.cluster_names:
        if name.lower() == cluster_name.lower():
            return name
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Cluster '{cluster_name}' not found",
    )


@router.get("", response_model=List[KafkaCluster])
async def list_clusters(
    request: Request,
    access_control: AccessControlService = Depends(get_access_control),
) -> List[KafkaCluster]:
    """List the clusters the caller may see."""
    names = settings.cluster_names
    if not access_control.rbac_enabled:
        return [KafkaCluster(name=name) for name in names]

    user = await access_control.get_user(request)
    if user is None:
        return []

    return [
        KafkaCluster(name=name)
        for name in names
        if access_control.is_cluster_accessible(
            AccessContext.builder(request).cluster(name).build(), user
        )
    ]


@router.get("/{cluster_name}/topics/{topic}/access", response_model=ResourceAccess)
async def topic_access(
    cluster_name: str,
    topic: str,
    request: Request,
    access_control: AccessControlService = Depends(get_access_control),
) -> ResourceAccess:
    """Whether the caller may view a topic."""
    cluster = get_known_cluster(cluster_name)
    allowed = await access_control.can_access_topic(topic, cluster, request)
    return ResourceAccess(cluster=cluster, resource="topic", name=topic, allowed=allowed)


@router.get(
    "/{cluster_name}/consumer-groups/{group_id}/access", response_model=ResourceAccess
)
async def consumer_group_access(
    cluster_name: str,
    group_id: str,
    request: Request,
    access_control: AccessControlService = Depends(get_access_control),
) -> ResourceAccess:
    """Whether the caller may view a consumer group."""
    cluster = get_known_cluster(cluster_name)
    allowed = await access_control.can_access_consumer_group(group_id, cluster, request)
    return ResourceAccess(
        cluster=cluster, resource="consumer", name=group_id, allowed=allowed
    )


@router.post(
    "/{cluster_name}/access",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={403: {"description": "Access denied"}},
)
async def validate_access(
    cluster_name: str,
    check: AccessCheck,
    request: Request,
    access_control: AccessControlService = Depends(get_access_control),
) -> Response:
    """Validate a full access request; 204 when allowed, 403 otherwise."""
    cluster = get_known_cluster(cluster_name)

    try:
        context = check.to_context(cluster, request)
    except InvariantViolationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await access_control.validate_access(context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
