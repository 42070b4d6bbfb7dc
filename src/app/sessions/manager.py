"""Gerenciador de sessões de conversa.

Resolve, cria e persiste sessões por user_id, e serializa o turno
inteiro de um usuário com um lock por chave (usuários diferentes
seguem em paralelo).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from app.sessions.models import ConversationSession
from config.settings.base.session import DEFAULT_SESSION_TTL_SECONDS
from utils.concurrency import KeyedLock

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from app.protocols.session_store import AsyncSessionStoreProtocol

logger = logging.getLogger(__name__)


class SessionManager:
    """Gerenciador de sessões de conversa.

    `hold()` é o caminho do turno: adquire o lock do usuário, entrega a
    sessão para mutação direta e persiste ao final. `update()` e
    `reset()` adquirem o mesmo lock; não chamá-los dentro de `hold()`
    para o mesmo usuário (asyncio.Lock não é reentrante).
    """

    __slots__ = ("_locks", "_store", "_ttl_seconds")

    def __init__(
        self,
        store: AsyncSessionStoreProtocol,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._locks = KeyedLock()

    async def get(self, user_id: str, destination: str | None = None) -> ConversationSession:
        """Retorna a sessão do usuário, criando uma padrão se ausente.

        Nunca falha: erro no store é logado e resulta em sessão nova.
        """
        try:
            existing = await self._store.load_async(user_id)
        except Exception as exc:
            logger.warning(
                "session_load_failed",
                extra={"user_id": user_id, "error_type": type(exc).__name__},
            )
            existing = None

        if existing is not None:
            if destination and existing.destination != destination:
                existing.destination = destination
            logger.debug("session_resolved", extra={"user_id": user_id})
            return existing

        logger.debug("session_created", extra={"user_id": user_id})
        return ConversationSession(user_id=user_id, destination=destination or user_id)

    async def save(self, session: ConversationSession) -> None:
        await self._store.save_async(session, self._ttl_seconds)

    async def update(
        self,
        user_id: str,
        mutator: Callable[[ConversationSession], None],
    ) -> ConversationSession:
        """Aplica `mutator` atomicamente em relação ao mesmo user_id."""
        async with self._locks.hold(user_id):
            session = await self.get(user_id)
            mutator(session)
            await self.save(session)
            return session

    async def reset(self, user_id: str) -> ConversationSession:
        """Restaura os padrões da sessão (mantém destino)."""
        return await self.update(user_id, ConversationSession.reset)

    @asynccontextmanager
    async def hold(
        self,
        user_id: str,
        destination: str | None = None,
    ) -> AsyncIterator[ConversationSession]:
        """Serializa um turno do usuário.

        A sessão é persistida ao sair do bloco sem exceção.
        """
        async with self._locks.hold(user_id):
            session = await self.get(user_id, destination)
            yield session
            await self.save(session)
