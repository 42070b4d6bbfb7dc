"""Middleware de logging: recebimento e conclusão com latência."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from app.observability import record_latency
from app.protocols.models import InputSource

if TYPE_CHECKING:
    from app.middleware.base import TurnContext, TurnHandler
    from app.protocols.models import Reply

logger = logging.getLogger(__name__)

# Prefixo de texto livre registrado (comandos e ações completos)
_PREVIEW_CHARS = 32


class LoggingMiddleware:
    """Primeiro da cadeia; nunca registra texto livre completo (pode ser OTP/email)."""

    async def dispatch(self, ctx: TurnContext, call_next: TurnHandler) -> Reply:
        user_input = ctx.user_input
        logger.info(
            "turn_received",
            extra={
                "user_id": ctx.user_id,
                "source": user_input.source.value,
                "command": user_input.command,
                "action": user_input.value[:_PREVIEW_CHARS] if user_input.source == InputSource.ACTION else None,
                "step": ctx.session.current_step.value if ctx.session.current_step else "idle",
            },
        )
        started = time.perf_counter()
        try:
            return await call_next(ctx)
        finally:
            latency_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "turn_completed",
                extra={
                    "user_id": ctx.user_id,
                    "step": ctx.session.current_step.value if ctx.session.current_step else "idle",
                    "latency_ms": round(latency_ms, 2),
                    **ctx.annotations,
                },
            )
            record_latency("middleware", "handle_input", latency_ms, ctx.correlation_id or None)
