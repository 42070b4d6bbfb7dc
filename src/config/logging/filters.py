"""Filters de logging para injeção de contexto e mascaramento.

- CorrelationIdFilter: adiciona correlation_id e service a cada record
- SensitiveFieldFilter: mascara credenciais e PII passados via `extra`
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Atributos de record que nunca devem sair em claro
SENSITIVE_FIELDS = frozenset(
    {
        "access_token",
        "token",
        "otp",
        "exchange_id",
        "email",
        "recipient_email",
        "auth",
    }
)

REDACTED = "***"


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Se correlation_id já foi passado via `extra`, preserva o valor.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveFieldFilter(logging.Filter):
    """Mascara atributos sensíveis do record (não filtra, apenas reescreve)."""

    def __init__(self, fields: frozenset[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for field in self._fields:
            value = record.__dict__.get(field)
            if value:
                record.__dict__[field] = _mask(field, str(value))
        return True


def _mask(field: str, value: str) -> str:
    """Mascara valor mantendo só o domínio de emails."""
    if "email" in field and "@" in value:
        return f"{REDACTED}@{value.split('@', 1)[1]}"
    return REDACTED
