"""Testes do RedisDedupeStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from utils.errors import RedisConnectionError


class TestRedisDedupeStore:
    """SET NX EX: primeira vez False, duplicado True."""

    @pytest.mark.asyncio
    async def test_new_key_is_not_duplicate(self) -> None:
        mock_redis = AsyncMock()
        mock_redis.set.return_value = True
        store = RedisDedupeStore(mock_redis)

        assert await store.seen_async("telegram:update:1", ttl=3600) is False
        mock_redis.set.assert_awaited_once_with("dedupe:telegram:update:1", "1", nx=True, ex=3600)

    @pytest.mark.asyncio
    async def test_existing_key_is_duplicate(self) -> None:
        mock_redis = AsyncMock()
        mock_redis.set.return_value = None
        store = RedisDedupeStore(mock_redis)

        assert await store.seen_async("telegram:update:1", ttl=3600) is True

    @pytest.mark.asyncio
    async def test_error_raises_redis_connection_error(self) -> None:
        mock_redis = AsyncMock()
        mock_redis.set.side_effect = ConnectionError("down")
        store = RedisDedupeStore(mock_redis)

        with pytest.raises(RedisConnectionError):
            await store.seen_async("k", ttl=10)
