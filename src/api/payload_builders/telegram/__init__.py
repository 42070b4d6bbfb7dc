"""Builders de payload da Telegram Bot API."""

from .message import build_answer_callback_payload, build_keyboard_markup, build_send_message_payload

__all__ = [
    "build_answer_callback_payload",
    "build_keyboard_markup",
    "build_send_message_payload",
]
