"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    BackendCallError,
    InfrastructureError,
    NotificationDeliveryError,
    PayoutBotError,
    PushChannelError,
    RedisConnectionError,
    SessionExpiredError,
    ValidationError,
)

__all__ = [
    "BackendCallError",
    "InfrastructureError",
    "NotificationDeliveryError",
    "PayoutBotError",
    "PushChannelError",
    "RedisConnectionError",
    "SessionExpiredError",
    "ValidationError",
]
