"""Pipeline de middlewares de turno.

Ordem fixa: logging → contenção de erros → expiração de sessão →
gate de autenticação.
"""

from app.middleware.auth_gate import AuthGateMiddleware, is_public_input
from app.middleware.base import TurnContext, TurnHandler, TurnMiddleware, build_pipeline
from app.middleware.error_containment import ErrorContainmentMiddleware
from app.middleware.request_logging import LoggingMiddleware
from app.middleware.session_expiry import SessionExpiryMiddleware

__all__ = [
    "AuthGateMiddleware",
    "ErrorContainmentMiddleware",
    "LoggingMiddleware",
    "SessionExpiryMiddleware",
    "TurnContext",
    "TurnHandler",
    "TurnMiddleware",
    "build_pipeline",
    "default_middlewares",
    "is_public_input",
]


def default_middlewares(inactivity_timeout_seconds: int) -> list[TurnMiddleware]:
    """Cadeia padrão na ordem obrigatória."""
    return [
        LoggingMiddleware(),
        ErrorContainmentMiddleware(),
        SessionExpiryMiddleware(inactivity_timeout_seconds),
        AuthGateMiddleware(),
    ]
