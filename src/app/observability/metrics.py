"""Registro de métricas via structured logging.

Métricas são logs estruturados com `metric_type`, agregáveis
posteriormente (ex: Cloud Logging, Loki).

Métricas suportadas:
- Latência: tempo de processamento por componente/operação
- Notificação: resultado de entrega de eventos de push
- Movimentação: resultado de envios e saques
- Expiração: sessões expiradas por inatividade
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "middleware", "backend_api")
        operation: Nome da operação (ex: "handle_input", "get_balances")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (None = do contexto)
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if correlation_id:
        extra["correlation_id"] = correlation_id
    logger.info("metric_latency", extra=extra)


def record_notification(event_name: str, outcome: str, organization_id: str = "") -> None:
    """Registra entrega de notificação de push.

    Args:
        event_name: Evento (ex: "deposit")
        outcome: "delivered" | "dropped_unmapped" | "failed" | "invalid_payload"
        organization_id: Organização do canal
    """
    logger.info(
        "metric_notification",
        extra={
            "metric_type": "notification",
            "event_name": event_name,
            "outcome": outcome,
            "organization_id": organization_id,
        },
    )


def record_money_movement(operation: str, outcome: str, status: str | None = None) -> None:
    """Registra resultado de envio/saque (sem valores nem destinatários)."""
    logger.info(
        "metric_money_movement",
        extra={
            "metric_type": "money_movement",
            "operation": operation,
            "outcome": outcome,
            "status": status,
        },
    )


def record_session_expired(user_id: str, idle_seconds: float) -> None:
    logger.info(
        "metric_session_expired",
        extra={
            "metric_type": "session_expired",
            "user_id": user_id,
            "idle_seconds": round(idle_seconds, 1),
        },
    )
