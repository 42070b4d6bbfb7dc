"""Factories de dependências — criação de implementações concretas.

Centraliza a escolha de backends (memory/redis) e o wiring dos
adaptadores externos (API de pagamentos, Telegram, Pusher) com os
serviços do core.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.payouts import PayoutApiClient
from api.connectors.pusher import PusherClient
from api.connectors.telegram import TelegramMessenger
from app.bootstrap.clients import create_async_redis_client
from app.infra.stores import (
    MemoryDedupeStore,
    MemorySessionStore,
    RedisDedupeStore,
    RedisSessionStore,
)
from app.services.subscriptions import NotificationSubscriptionManager
from app.sessions.manager import SessionManager
from app.use_cases.conversation import ConversationService
from config.settings import (
    get_backend_api_settings,
    get_base_settings,
    get_dedupe_settings,
    get_pusher_settings,
    get_session_settings,
    get_telegram_settings,
)

if TYPE_CHECKING:
    from app.protocols.backend_api import BackendApiProtocol
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.messenger import MessengerProtocol
    from app.protocols.push_channel import PushChannelProviderProtocol
    from app.protocols.session_store import AsyncSessionStoreProtocol

logger = logging.getLogger(__name__)


def _warn_memory_outside_dev(store_kind: str) -> None:
    base = get_base_settings()
    if not base.is_development:
        logger.warning(
            "memory_store_in_non_dev",
            extra={"store": store_kind, "environment": base.environment},
        )


def create_async_session_store() -> AsyncSessionStoreProtocol:
    """Cria store de sessão conforme SESSION_STORE_BACKEND."""
    backend = get_session_settings().store_backend

    if backend == "redis":
        store: AsyncSessionStoreProtocol = RedisSessionStore(create_async_redis_client())
        logger.info("session_store_created", extra={"backend": "redis"})
        return store

    _warn_memory_outside_dev("session")
    store = MemorySessionStore()
    logger.info("session_store_created", extra={"backend": "memory"})
    return store


def create_async_dedupe_store() -> AsyncDedupeProtocol:
    """Cria store de dedupe conforme DEDUPE_BACKEND."""
    backend = get_dedupe_settings().backend

    if backend == "redis":
        store: AsyncDedupeProtocol = RedisDedupeStore(create_async_redis_client())
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return store

    _warn_memory_outside_dev("dedupe")
    store = MemoryDedupeStore()
    logger.info("dedupe_store_created", extra={"backend": "memory"})
    return store


def create_session_manager(store: AsyncSessionStoreProtocol) -> SessionManager:
    return SessionManager(store, ttl_seconds=get_session_settings().ttl_seconds)


def create_backend_client() -> PayoutApiClient:
    return PayoutApiClient.from_settings(get_backend_api_settings())


def create_messenger() -> TelegramMessenger:
    return TelegramMessenger.from_settings(get_telegram_settings())


def create_push_provider() -> PusherClient | None:
    """Cliente Pusher; None quando PUSHER_APP_KEY/PUSHER_CLUSTER ausentes."""
    settings = get_pusher_settings()
    if not settings.enabled:
        logger.warning("push_provider_disabled")
        return None
    return PusherClient(settings)


def create_subscription_manager(
    provider: PushChannelProviderProtocol | None,
    messenger: MessengerProtocol,
    backend: BackendApiProtocol,
) -> NotificationSubscriptionManager | None:
    if provider is None:
        return None
    return NotificationSubscriptionManager(
        provider,
        messenger,
        backend,
        channel_prefix=get_pusher_settings().channel_prefix,
    )


def create_conversation_service(
    sessions: SessionManager,
    backend: BackendApiProtocol,
    subscriptions: NotificationSubscriptionManager | None,
) -> ConversationService:
    backend_settings = get_backend_api_settings()
    return ConversationService(
        sessions,
        backend,
        subscriptions,
        currency=backend_settings.transfer_currency,
        history_page_size=backend_settings.history_page_size,
        inactivity_timeout_seconds=get_session_settings().inactivity_timeout_seconds,
    )
