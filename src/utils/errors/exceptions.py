"""Exceções de domínio e de infraestrutura do bot de payouts.

Taxonomia:
    - ValidationError: input malformado do usuário (recuperado com re-prompt)
    - BackendCallError: falha de rede/aplicação na API de backend
    - SessionExpiredError: sessão autenticada expirada por inatividade
    - NotificationDeliveryError: falha de push/envio de notificação
    - InfrastructureError: falhas transitórias de infraestrutura (Redis etc.)
"""

from __future__ import annotations


class PayoutBotError(Exception):
    """Base para erros de domínio do bot."""


class ValidationError(PayoutBotError):
    """Input do usuário não corresponde ao formato esperado pelo step."""

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class BackendCallError(PayoutBotError):
    """Falha ao chamar a API de backend (transporte ou aplicação).

    Attributes:
        operation: Nome da operação chamada (ex: "send_to_email")
        status_code: Status HTTP quando disponível
    """

    def __init__(
        self,
        message: str,
        operation: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class SessionExpiredError(PayoutBotError):
    """Sessão autenticada ficou inativa além do limite."""


class NotificationDeliveryError(PayoutBotError):
    """Falha ao entregar notificação (push ou mensagem outbound)."""


class PushChannelError(NotificationDeliveryError):
    """Falha de conexão, autorização ou protocolo no canal de push."""


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""
