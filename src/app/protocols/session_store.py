"""Protocolo de domínio para persistência de sessão."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.sessions.models import ConversationSession


class AsyncSessionStoreProtocol(ABC):
    """Contrato assíncrono para armazenamento de ConversationSession.

    Chave é o user_id. Usa sufixo _async como os demais stores.
    """

    @abstractmethod
    async def save_async(self, session: ConversationSession, ttl_seconds: int) -> None: ...

    @abstractmethod
    async def load_async(self, user_id: str) -> ConversationSession | None: ...

    @abstractmethod
    async def delete_async(self, user_id: str) -> bool: ...

    @abstractmethod
    async def exists_async(self, user_id: str) -> bool: ...
