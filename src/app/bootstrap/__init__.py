"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_conversation_service

    # Na inicialização do serviço
    initialize_app()

    # Obter o serviço de conversa (singleton)
    service = get_conversation_service()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_backend_api_settings,
    get_base_settings,
    get_dedupe_settings,
    get_pusher_settings,
    get_session_settings,
    get_telegram_settings,
)

if TYPE_CHECKING:
    from api.connectors.payouts import PayoutApiClient
    from api.connectors.pusher import PusherClient
    from api.connectors.telegram import TelegramMessenger
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.session_store import AsyncSessionStoreProtocol
    from app.services.subscriptions import NotificationSubscriptionManager
    from app.sessions.manager import SessionManager
    from app.use_cases.conversation import ConversationService

# Nome do serviço para logs e métricas
SERVICE_NAME = "payout_bot"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.
    Configura logging estruturado JSON com correlation_id.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"session: {error}" for error in get_session_settings().validate(base))
    errors.extend(f"dedupe: {error}" for error in get_dedupe_settings().validate(base))
    errors.extend(f"telegram: {error}" for error in get_telegram_settings().validate())
    errors.extend(f"backend: {error}" for error in get_backend_api_settings().validate())
    errors.extend(f"pusher: {error}" for error in get_pusher_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_session_store() -> AsyncSessionStoreProtocol:
    from app.bootstrap.dependencies import create_async_session_store
    return create_async_session_store()


@lru_cache(maxsize=1)
def get_dedupe_store() -> AsyncDedupeProtocol:
    from app.bootstrap.dependencies import create_async_dedupe_store
    return create_async_dedupe_store()


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    from app.bootstrap.dependencies import create_session_manager
    return create_session_manager(get_session_store())


@lru_cache(maxsize=1)
def get_backend_client() -> PayoutApiClient:
    from app.bootstrap.dependencies import create_backend_client
    return create_backend_client()


@lru_cache(maxsize=1)
def get_messenger() -> TelegramMessenger:
    from app.bootstrap.dependencies import create_messenger
    return create_messenger()


@lru_cache(maxsize=1)
def get_push_provider() -> PusherClient | None:
    from app.bootstrap.dependencies import create_push_provider
    return create_push_provider()


@lru_cache(maxsize=1)
def get_subscription_manager() -> NotificationSubscriptionManager | None:
    from app.bootstrap.dependencies import create_subscription_manager
    return create_subscription_manager(get_push_provider(), get_messenger(), get_backend_client())


@lru_cache(maxsize=1)
def get_conversation_service() -> ConversationService:
    """Serviço de conversa (singleton) com todas as dependências."""
    from app.bootstrap.dependencies import create_conversation_service
    return create_conversation_service(
        get_session_manager(),
        get_backend_client(),
        get_subscription_manager(),
    )


async def shutdown_dependencies() -> None:
    """Encerra assinaturas, websocket e clientes HTTP criados."""
    if get_subscription_manager.cache_info().currsize:
        subscriptions = get_subscription_manager()
        if subscriptions is not None:
            await subscriptions.close()
    if get_push_provider.cache_info().currsize:
        provider = get_push_provider()
        if provider is not None:
            await provider.disconnect()
    if get_messenger.cache_info().currsize:
        await get_messenger().aclose()
    if get_backend_client.cache_info().currsize:
        await get_backend_client().aclose()
