"""Stores em memória — desenvolvimento e testes.

ATENÇÃO: sem persistência entre reinícios. A perda de sessão apenas
força novo login (o backend é a fonte de verdade da autenticação).
"""

from __future__ import annotations

import json
import time

from app.protocols.dedupe import AsyncDedupeProtocol
from app.protocols.session_store import AsyncSessionStoreProtocol
from app.sessions.models import ConversationSession


class MemorySessionStore(AsyncSessionStoreProtocol):
    """Store de sessão em memória.

    Guarda JSON (não o objeto) para que mutações fora do store só
    valham após save_async, como no Redis.
    """

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}  # user_id -> (json, expires_at)

    def _live_entry(self, user_id: str) -> str | None:
        entry = self._store.get(user_id)
        if entry is None:
            return None
        data, expires_at = entry
        if time.time() > expires_at:
            del self._store[user_id]
            return None
        return data

    async def save_async(self, session: ConversationSession, ttl_seconds: int) -> None:
        data = json.dumps(session.to_dict())
        self._store[session.user_id] = (data, time.time() + ttl_seconds)

    async def load_async(self, user_id: str) -> ConversationSession | None:
        data = self._live_entry(user_id)
        if data is None:
            return None
        return ConversationSession.from_dict(json.loads(data))

    async def delete_async(self, user_id: str) -> bool:
        return self._store.pop(user_id, None) is not None

    async def exists_async(self, user_id: str) -> bool:
        return self._live_entry(user_id) is not None


class MemoryDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe em memória."""

    def __init__(self) -> None:
        self._store: dict[str, float] = {}  # key -> expires_at

    def _cleanup_expired(self) -> None:
        now = time.time()
        expired = [k for k, v in self._store.items() if v < now]
        for k in expired:
            del self._store[k]

    async def seen_async(self, key: str, ttl: int) -> bool:
        self._cleanup_expired()
        if key in self._store:
            return True
        self._store[key] = time.time() + ttl
        return False
