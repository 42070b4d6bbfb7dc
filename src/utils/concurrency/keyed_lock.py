"""Registro de locks asyncio por chave.

Serializa operações sobre a mesma chave (user_id, organization_id)
sem bloquear chaves diferentes. Locks sem usuários são descartados
para o registro não crescer indefinidamente.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLock:
    """Lock por chave com contagem de referências."""

    __slots__ = ("_locks",)

    def __init__(self) -> None:
        # chave -> (lock, quantidade de tarefas aguardando ou segurando)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Adquire o lock da chave durante o bloco `async with`."""
        lock, users = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            current_lock, current_users = self._locks[key]
            if current_users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (current_lock, current_users - 1)

    def locked(self, key: str) -> bool:
        entry = self._locks.get(key)
        return entry is not None and entry[0].locked()

    def __len__(self) -> int:
        return len(self._locks)
