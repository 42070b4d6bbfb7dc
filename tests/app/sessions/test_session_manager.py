"""Testes para SessionManager (lock por usuário + persistência)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.infra.stores.memory_stores import MemorySessionStore
from app.sessions.manager import SessionManager
from app.sessions.models import ConversationSession
from fsm import Step
from utils.concurrency import KeyedLock
from utils.errors import RedisConnectionError


@pytest.fixture
def manager() -> SessionManager:
    return SessionManager(MemorySessionStore())


class TestSessionManager:
    """Testes do SessionManager."""

    @pytest.mark.asyncio
    async def test_get_creates_default_session(self, manager: SessionManager) -> None:
        session = await manager.get("u1", "chat-1")

        assert session.user_id == "u1"
        assert session.destination == "chat-1"
        assert session.is_idle

    @pytest.mark.asyncio
    async def test_hold_persists_on_exit(self, manager: SessionManager) -> None:
        async with manager.hold("u1") as session:
            session.current_step = Step.AUTH_EMAIL

        assert (await manager.get("u1")).current_step == Step.AUTH_EMAIL

    @pytest.mark.asyncio
    async def test_hold_does_not_persist_on_error(self, manager: SessionManager) -> None:
        with pytest.raises(RuntimeError):
            async with manager.hold("u1") as session:
                session.auth_token = "tok"
                raise RuntimeError("boom")

        assert (await manager.get("u1")).auth_token is None

    @pytest.mark.asyncio
    async def test_get_updates_destination(self, manager: SessionManager) -> None:
        await manager.save(ConversationSession(user_id="u1", destination="chat-1"))

        session = await manager.get("u1", "chat-2")

        assert session.destination == "chat-2"

    @pytest.mark.asyncio
    async def test_store_failure_yields_fresh_session(self) -> None:
        store = AsyncMock()
        store.load_async.side_effect = RedisConnectionError("down")
        manager = SessionManager(store)

        session = await manager.get("u1")

        assert session.user_id == "u1"
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_update_and_reset(self, manager: SessionManager) -> None:
        await manager.update("u1", lambda s: setattr(s, "auth_token", "tok"))
        assert (await manager.get("u1")).auth_token == "tok"

        await manager.reset("u1")

        assert (await manager.get("u1")).auth_token is None

    @pytest.mark.asyncio
    async def test_turns_of_same_user_are_serialized(self, manager: SessionManager) -> None:
        order: list[str] = []

        async def turn(label: str) -> None:
            async with manager.hold("u1"):
                order.append(f"{label}-start")
                await asyncio.sleep(0.01)
                order.append(f"{label}-end")

        await asyncio.gather(turn("a"), turn("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_users_run_in_parallel(self, manager: SessionManager) -> None:
        started = asyncio.Event()
        release = asyncio.Event()

        async def first() -> None:
            async with manager.hold("u1"):
                started.set()
                await release.wait()

        task = asyncio.create_task(first())
        await started.wait()

        async with manager.hold("u2") as other:
            assert other.user_id == "u2"

        release.set()
        await task


class TestKeyedLock:
    """Registro de locks por chave."""

    @pytest.mark.asyncio
    async def test_lock_is_released_and_discarded(self) -> None:
        locks = KeyedLock()

        async with locks.hold("k"):
            assert locks.locked("k")
            assert len(locks) == 1

        assert not locks.locked("k")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_discarded_after_exception(self) -> None:
        locks = KeyedLock()

        with pytest.raises(ValueError):
            async with locks.hold("k"):
                raise ValueError("x")

        assert len(locks) == 0
