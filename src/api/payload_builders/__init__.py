"""Payload builders — construção de payloads para APIs externas.

Estrutura:
- telegram/: Telegram Bot API (sendMessage, answerCallbackQuery)
"""

__all__: list[str] = []
