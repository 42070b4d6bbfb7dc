"""Agregador de settings do payout-bot.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Payments backend
from config.settings.backend import (
    BackendApiSettings,
    get_backend_api_settings,
)

# Base settings
from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    SessionSettings,
    SessionStoreBackend,
    get_base_settings,
    get_dedupe_settings,
    get_session_settings,
)

# Push notifications
from config.settings.pusher import (
    PusherSettings,
    get_pusher_settings,
)

# Channel
from config.settings.telegram import (
    TELEGRAM_API_BASE_URL,
    TelegramSettings,
    get_telegram_settings,
)

__all__ = [
    "TELEGRAM_API_BASE_URL",
    "BackendApiSettings",
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "PusherSettings",
    "SessionSettings",
    "SessionStoreBackend",
    "TelegramSettings",
    "get_backend_api_settings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_pusher_settings",
    "get_session_settings",
    "get_telegram_settings",
]
