"""Conector Telegram - adapter de borda para a Bot API.

Responsabilidades:
- Webhook (secret token, parse do corpo)
- Envio de mensagens e confirmação de callback queries
"""

from .messenger import TelegramMessenger
from .webhook import InvalidJsonError, InvalidSecretError, WebhookRequestError, parse_webhook_request

__all__ = [
    "InvalidJsonError",
    "InvalidSecretError",
    "TelegramMessenger",
    "WebhookRequestError",
    "parse_webhook_request",
]
