"""Normalizer Telegram — converte updates para modelo interno.

Estrutura relevante do webhook:
- update_id
- message: {message_id, from: {id}, chat: {id}, text}
- callback_query: {id, from: {id}, data, message: {chat: {id}}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from app.protocols.models import UserInput

logger = logging.getLogger(__name__)


class UpdateKind(StrEnum):
    MESSAGE = "message"
    CALLBACK_QUERY = "callback_query"


@dataclass(frozen=True, slots=True)
class InboundUpdate:
    """Entrada normalizada de um update.

    Attributes:
        update_id: ID do update (idempotência)
        user_id: ID do usuário Telegram (chave da sessão)
        chat_id: Chat de destino das respostas
        raw_input: Texto digitado ou callback data
        kind: Tipo do update de origem
        callback_query_id: ID a confirmar via answerCallbackQuery
        display_name: first_name do remetente (saudação)
    """

    update_id: int
    user_id: str
    chat_id: str
    raw_input: UserInput
    kind: UpdateKind
    callback_query_id: str | None = None
    display_name: str | None = None


def _as_id(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | str) and str(value).strip():
        return str(value)
    return None


def _first_name(sender: Any) -> str | None:
    if not isinstance(sender, dict):
        return None
    name = sender.get("first_name")
    if not isinstance(name, str):
        return None
    return name.strip() or None


def _normalize_message(update_id: int, message: dict[str, Any]) -> InboundUpdate | None:
    text = message.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    sender = message.get("from") or {}
    chat = message.get("chat") or {}
    user_id = _as_id(sender.get("id")) if isinstance(sender, dict) else None
    chat_id = _as_id(chat.get("id")) if isinstance(chat, dict) else None
    if user_id is None or chat_id is None:
        return None
    return InboundUpdate(
        update_id=update_id,
        user_id=user_id,
        chat_id=chat_id,
        raw_input=UserInput.text(text.strip()),
        kind=UpdateKind.MESSAGE,
        display_name=_first_name(sender),
    )


def _normalize_callback(update_id: int, callback: dict[str, Any]) -> InboundUpdate | None:
    data = callback.get("data")
    callback_id = _as_id(callback.get("id"))
    sender = callback.get("from") or {}
    user_id = _as_id(sender.get("id")) if isinstance(sender, dict) else None
    if not isinstance(data, str) or not data or callback_id is None or user_id is None:
        return None

    chat_id = user_id
    message = callback.get("message")
    if isinstance(message, dict) and isinstance(message.get("chat"), dict):
        chat_id = _as_id(message["chat"].get("id")) or user_id

    return InboundUpdate(
        update_id=update_id,
        user_id=user_id,
        chat_id=chat_id,
        raw_input=UserInput.action(data),
        kind=UpdateKind.CALLBACK_QUERY,
        callback_query_id=callback_id,
        display_name=_first_name(sender),
    )


def normalize_update(payload: dict[str, Any]) -> InboundUpdate | None:
    """Normaliza um update; retorna None para tipos não suportados."""
    update_id = payload.get("update_id")
    if not isinstance(update_id, int) or isinstance(update_id, bool):
        logger.debug("telegram_update_without_id")
        return None

    message = payload.get("message")
    if isinstance(message, dict):
        return _normalize_message(update_id, message)

    callback = payload.get("callback_query")
    if isinstance(callback, dict):
        return _normalize_callback(update_id, callback)

    logger.debug("telegram_update_ignored", extra={"update_id": update_id})
    return None
