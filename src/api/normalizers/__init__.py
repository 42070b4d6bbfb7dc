"""Normalizers por canal — conversão de payloads externos para modelos internos.

Estrutura:
- telegram/: updates da Telegram Bot API (mensagens e callback queries)
"""

from .telegram import InboundUpdate, UpdateKind, normalize_update

__all__ = [
    "InboundUpdate",
    "UpdateKind",
    "normalize_update",
]
