"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - redis_session_store: Store de sessão usando Redis
    - redis_dedupe_store: Store de dedupe usando Redis
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryDedupeStore, MemorySessionStore
from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from app.infra.stores.redis_session_store import RedisSessionStore

__all__ = [
    "MemoryDedupeStore",
    "MemorySessionStore",
    "RedisDedupeStore",
    "RedisSessionStore",
]
