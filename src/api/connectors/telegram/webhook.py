"""Parse e validação inicial do webhook Telegram (sem PII).

A Bot API envia o secret configurado em setWebhook no header
X-Telegram-Bot-Api-Secret-Token.
"""

from __future__ import annotations

import hmac
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

SECRET_HEADER = "x-telegram-bot-api-secret-token"


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidSecretError(WebhookRequestError):
    """Secret token ausente ou divergente."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


def verify_secret_token(headers: Mapping[str, str], expected: str | None) -> bool:
    """Compara o header de secret em tempo constante.

    Sem secret configurado a verificação é desabilitada.
    """
    if not expected:
        return True
    received = headers.get(SECRET_HEADER) or ""
    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> dict[str, Any]:
    """Valida secret e parseia JSON do webhook.

    Raises:
        InvalidSecretError: Se o secret não confere
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto
    """
    if not verify_secret_token(headers, secret):
        raise InvalidSecretError("invalid_secret_token")

    try:
        payload = json.loads(raw_body or b"{}")
    except json.JSONDecodeError as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload
