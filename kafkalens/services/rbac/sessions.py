"""Post-login glue storing extracted role bindings in the session."""

from typing import Set

from kafkalens.core.logging import get_logger
from kafkalens.models.auth import AuthenticationPayload
from kafkalens.repositories.session import SessionRepository
from kafkalens.services.rbac.access_control import AccessControlService

logger = get_logger(__name__)


def extract_groups(
    access_control: AccessControlService, payload: AuthenticationPayload
) -> Set[str]:
    """Run every active extractor applicable to the payload's provider."""
    groups: Set[str] = set()
    for extractor in access_control.extractors:
        if extractor.is_applicable(payload.provider):
            groups |= extractor.extract(access_control.roles, payload)
    return groups


async def establish_session(
    access_control: AccessControlService,
    sessions: SessionRepository,
    session_id: str,
    payload: AuthenticationPayload,
) -> Set[str]:
    """Store the caller's groups after a successful login.

    Nothing is written while access control is disabled.
    """
    if not access_control.rbac_enabled:
        return set()

    groups = extract_groups(access_control, payload)
    await sessions.save_groups(session_id, groups)
    logger.info(
        f"Session established for {payload.name} with {len(groups)} groups",
        extra={"user_id": payload.name},
    )
    return groups
