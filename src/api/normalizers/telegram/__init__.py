"""Normalizer Telegram — extração de updates da Bot API.

Suporta mensagens de texto (comandos inclusos) e callback queries
de teclados inline. Demais tipos de update são ignorados.
"""

from .normalizer import InboundUpdate, UpdateKind, normalize_update

__all__ = ["InboundUpdate", "UpdateKind", "normalize_update"]
