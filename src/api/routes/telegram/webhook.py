"""Endpoint de webhook do Telegram.

POST /webhook/telegram: recebimento de updates da Bot API.

Fluxo:
1. Valida o secret token (X-Telegram-Bot-Api-Secret-Token)
2. Parseia o JSON
3. Agenda o processamento em background e responde 200 imediatamente
   (o Telegram reenvia updates sem 2xx; o update_id é deduplicado)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from api.connectors.telegram import InvalidJsonError, InvalidSecretError, parse_webhook_request
from api.routes.telegram.webhook_runtime import process_update_safe, schedule_processing_task
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.settings import get_telegram_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=None)
async def receive_webhook(request: Request) -> Response | dict[str, Any]:
    """Recebimento de updates do Telegram.

    Returns:
        Confirmação de recebimento ou Response de erro.
    """
    correlation_id = request.headers.get("x-correlation-id")
    token = set_correlation_id(correlation_id)

    try:
        settings = get_telegram_settings()
        raw_body = await request.body()
        headers = dict(request.headers)

        try:
            payload = parse_webhook_request(
                raw_body=raw_body,
                headers=headers,
                secret=settings.webhook_secret or None,
            )
        except InvalidSecretError as exc:
            logger.warning(
                "webhook_secret_invalid",
                extra={
                    "channel": "telegram",
                    "correlation_id": get_correlation_id(),
                    "error": str(exc),
                },
            )
            return Response(
                content="Unauthorized",
                media_type="text/plain",
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        except InvalidJsonError as exc:
            logger.warning(
                "webhook_json_invalid",
                extra={
                    "channel": "telegram",
                    "correlation_id": get_correlation_id(),
                    "error": str(exc),
                },
            )
            return Response(
                content="Bad Request",
                media_type="text/plain",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        logger.info(
            "webhook_received",
            extra={
                "channel": "telegram",
                "correlation_id": get_correlation_id(),
                "payload_size": len(raw_body),
            },
        )

        schedule_processing_task(
            correlation_id=get_correlation_id(),
            coroutine=process_update_safe(payload=payload, correlation_id=get_correlation_id()),
        )
        return {
            "status": "received",
            "correlation_id": get_correlation_id(),
        }

    finally:
        reset_correlation_id(token)
