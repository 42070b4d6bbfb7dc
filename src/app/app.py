"""Entrypoint da aplicação payout-bot.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from api.routes.telegram.webhook_runtime import drain_processing_tasks
from app.bootstrap import (
    get_push_provider,
    initialize_app,
    shutdown_dependencies,
    validate_runtime_settings,
)
from app.bootstrap.clients import create_async_redis_client
from config.logging import get_logger
from config.settings import get_dedupe_settings, get_session_settings
from utils.errors import PushChannelError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


def _uses_redis() -> bool:
    return get_session_settings().store_backend == "redis" or get_dedupe_settings().backend == "redis"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria cliente Redis (se algum store usa Redis)
    - Conecta o websocket Pusher (falha não impede o boot)

    Shutdown:
    - Aguarda updates em processamento
    - Remove assinaturas e desconecta o Pusher
    - Fecha clientes HTTP e Redis
    """
    logger.info("app_starting", extra={"service": "payout-bot"})
    validate_runtime_settings()
    app.state.redis_client = None
    app.state.push_provider = None

    if _uses_redis():
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    push_provider = get_push_provider()
    if push_provider is not None:
        app.state.push_provider = push_provider
        try:
            await push_provider.connect()
        except PushChannelError as exc:
            # Reconecta na primeira assinatura
            logger.warning("pusher_not_ready", extra={"error": str(exc)})

    yield

    logger.info("app_shutting_down", extra={"service": "payout-bot"})
    await drain_processing_tasks(timeout_seconds=30.0)
    await shutdown_dependencies()
    redis_client = app.state.redis_client
    if redis_client is not None:
        await redis_client.aclose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI."""
    fastapi_app = FastAPI(
        title="payout-bot",
        description="Bot Telegram de payouts (auth, envios, saques e notificações)",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "payout-bot"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting payout-bot in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
