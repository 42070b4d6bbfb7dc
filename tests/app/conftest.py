"""Fixtures compartilhadas dos testes do core (fakes sem IO)."""

from __future__ import annotations

import pytest

from app.infra.stores import MemorySessionStore
from app.services.subscriptions import NotificationSubscriptionManager
from app.sessions.manager import SessionManager
from app.use_cases.conversation import ConversationService
from tests.fakes.fake_backend import FakeBackendApi
from tests.fakes.fake_messenger import FakeMessenger, FakePushProvider


@pytest.fixture
def backend() -> FakeBackendApi:
    return FakeBackendApi()


@pytest.fixture
def provider() -> FakePushProvider:
    return FakePushProvider()


@pytest.fixture
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def sessions(store: MemorySessionStore) -> SessionManager:
    return SessionManager(store)


@pytest.fixture
def subscriptions(
    provider: FakePushProvider,
    messenger: FakeMessenger,
    backend: FakeBackendApi,
) -> NotificationSubscriptionManager:
    return NotificationSubscriptionManager(provider, messenger, backend)


@pytest.fixture
def service(
    sessions: SessionManager,
    backend: FakeBackendApi,
    subscriptions: NotificationSubscriptionManager,
) -> ConversationService:
    return ConversationService(sessions, backend, subscriptions)

