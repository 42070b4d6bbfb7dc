"""Redis Session Store.

Sessões serializadas em JSON com TTL (SETEX). Chave por user_id.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from app.protocols.session_store import AsyncSessionStoreProtocol
from app.sessions.models import ConversationSession
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"


class RedisSessionStore(AsyncSessionStoreProtocol):
    """Store de sessão usando Redis.

    Args:
        async_redis_client: Cliente Redis assíncrono
    """

    def __init__(self, async_redis_client: AsyncRedis) -> None:
        self._redis = async_redis_client

    def _key(self, user_id: str) -> str:
        return f"{SESSION_PREFIX}{user_id}"

    async def save_async(self, session: ConversationSession, ttl_seconds: int) -> None:
        data = json.dumps(session.to_dict())
        try:
            await self._redis.setex(self._key(session.user_id), ttl_seconds, data)
        except Exception as exc:
            raise RedisConnectionError("Falha ao salvar sessão no Redis") from exc
        logger.debug("session_saved", extra={"user_id": session.user_id, "ttl": ttl_seconds})

    async def load_async(self, user_id: str) -> ConversationSession | None:
        try:
            data = await self._redis.get(self._key(user_id))
        except Exception as exc:
            raise RedisConnectionError("Falha ao carregar sessão do Redis") from exc
        if data is None:
            return None
        try:
            return ConversationSession.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            # Sessão corrompida equivale a sessão ausente (força novo login)
            logger.warning("session_load_error", extra={"user_id": user_id, "error": str(e)})
            return None

    async def delete_async(self, user_id: str) -> bool:
        return bool(await self._redis.delete(self._key(user_id)))

    async def exists_async(self, user_id: str) -> bool:
        return bool(await self._redis.exists(self._key(user_id)))
