"""Session attribute storage in Redis."""

import json
from typing import Iterable, Optional, Set

from redis.asyncio import Redis

from kafkalens.core.logging import get_logger

logger = get_logger(__name__)

GROUPS_ATTRIBUTE = "GROUPS"


class SessionRepository:
    """Reads and writes session attributes kept as Redis hashes."""

    def __init__(
        self, redis_client: Redis, key_prefix: str = "session", ttl_seconds: int = 0
    ):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}:{session_id}"

    async def get_groups(self, session_id: str) -> Optional[Set[str]]:
        """Group identifiers stored in the session, ``None`` when absent."""
        raw = await self.redis.hget(self._key(session_id), GROUPS_ATTRIBUTE)
        if raw is None:
            return None
        try:
            groups = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt {GROUPS_ATTRIBUTE} attribute in session: {e}")
            return None
        if not isinstance(groups, list):
            return None
        return {str(g) for g in groups}

    async def save_groups(self, session_id: str, groups: Iterable[str]) -> None:
        key = self._key(session_id)
        await self.redis.hset(key, GROUPS_ATTRIBUTE, json.dumps(sorted(groups)))
        if self.ttl_seconds > 0:
            await self.redis.expire(key, self.ttl_seconds)

    async def delete(self, session_id: str) -> bool:
        return bool(await self.redis.delete(self._key(session_id)))
