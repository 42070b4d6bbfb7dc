"""Payloads de sendMessage e answerCallbackQuery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.protocols.models import Keyboard, MessageOptions

# Limite de callback_data da Bot API (bytes)
CALLBACK_DATA_MAX_BYTES = 64


def build_keyboard_markup(keyboard: Keyboard) -> dict[str, Any]:
    """Converte Keyboard interno para inline_keyboard.

    Raises:
        ValueError: Se alguma ação excede o limite de callback_data.
    """
    rows: list[list[dict[str, str]]] = []
    for row in keyboard:
        buttons: list[dict[str, str]] = []
        for button in row:
            if len(button.action.encode("utf-8")) > CALLBACK_DATA_MAX_BYTES:
                raise ValueError(f"callback_data excede {CALLBACK_DATA_MAX_BYTES} bytes")
            buttons.append({"text": button.label, "callback_data": button.action})
        rows.append(buttons)
    return {"inline_keyboard": rows}


def build_send_message_payload(
    chat_id: str,
    text: str,
    options: MessageOptions | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
    if options is None:
        return payload
    if options.parse_mode:
        payload["parse_mode"] = options.parse_mode
    if options.keyboard:
        payload["reply_markup"] = build_keyboard_markup(options.keyboard)
    return payload


def build_answer_callback_payload(callback_query_id: str, text: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"callback_query_id": callback_query_id}
    if text:
        payload["text"] = text
    return payload
