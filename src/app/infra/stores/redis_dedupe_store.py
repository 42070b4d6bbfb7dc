"""Redis Dedupe Store.

Usa SET NX EX para marcar chaves de forma atômica.

Contrato de keys: IDs opacos (ex.: update_id). Nunca PII; keys
são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEDUPE_PREFIX = "dedupe:"


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando Redis.

    Args:
        async_redis_client: Cliente Redis assíncrono
    """

    def __init__(self, async_redis_client: AsyncRedis) -> None:
        self._redis = async_redis_client

    def _key(self, key: str) -> str:
        return f"{DEDUPE_PREFIX}{key}"

    async def seen_async(self, key: str, ttl: int) -> bool:
        """SET NX EX: cria a chave se nova (False) ou detecta duplicado (True)."""
        try:
            was_set = await self._redis.set(self._key(key), "1", nx=True, ex=ttl)
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc
        is_duplicate = not was_set
        if is_duplicate:
            key_masked = key[:16] + "..." if len(key) > 16 else key
            logger.debug("dedupe_duplicate_detected", extra={"key": key_masked})
        return is_duplicate
