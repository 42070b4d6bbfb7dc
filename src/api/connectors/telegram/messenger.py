"""Envio de mensagens pela Telegram Bot API.

Implementa MessengerProtocol: uma chamada por mensagem, sem retry
(POST), falha reportada como NotificationDeliveryError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.payload_builders.telegram import build_answer_callback_payload, build_send_message_payload
from app.infra.http import HttpClient, HttpClientConfig, HttpError
from utils.errors import NotificationDeliveryError

if TYPE_CHECKING:
    import httpx

    from app.protocols.models import MessageOptions
    from config.settings import TelegramSettings

logger: logging.Logger = logging.getLogger(__name__)


class TelegramMessenger:
    """Adapter de saída para a Bot API."""

    def __init__(self, settings: TelegramSettings, http: HttpClient) -> None:
        self._settings = settings
        self._http = http

    @classmethod
    def from_settings(
        cls,
        settings: TelegramSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TelegramMessenger:
        config = HttpClientConfig(
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
            default_headers={"Content-Type": "application/json"},
        )
        return cls(settings, HttpClient(config, transport=transport))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send(
        self,
        destination: str,
        text: str,
        options: MessageOptions | None = None,
    ) -> None:
        try:
            payload = build_send_message_payload(destination, text, options)
        except ValueError as exc:
            raise NotificationDeliveryError(str(exc)) from exc
        await self._call("sendMessage", payload)

    async def acknowledge_action(self, action_id: str, text: str | None = None) -> None:
        await self._call("answerCallbackQuery", build_answer_callback_payload(action_id, text))

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._http.post(self._settings.get_method_endpoint(method), json=payload)
        except HttpError as exc:
            logger.warning(
                "telegram_call_failed",
                extra={"method": method, "status_code": exc.status_code},
            )
            raise NotificationDeliveryError(f"telegram {method} failed: {exc.detail or exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise NotificationDeliveryError(f"telegram {method}: invalid JSON") from exc

        if not isinstance(body, dict) or not body.get("ok", False):
            description = body.get("description") if isinstance(body, dict) else None
            logger.warning("telegram_call_rejected", extra={"method": method})
            raise NotificationDeliveryError(f"telegram {method} rejected: {description}")

        logger.debug("telegram_call_ok", extra={"method": method})
        return body
