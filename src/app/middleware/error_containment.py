"""Middleware de contenção de erros (backstop do turno)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.constants import bot_texts as texts
from app.protocols.models import Reply

if TYPE_CHECKING:
    from app.middleware.base import TurnContext, TurnHandler

logger = logging.getLogger(__name__)


class ErrorContainmentMiddleware:
    """Qualquer exceção vira a resposta genérica de falha; nada propaga."""

    async def dispatch(self, ctx: TurnContext, call_next: TurnHandler) -> Reply:
        try:
            return await call_next(ctx)
        except Exception as exc:
            logger.exception(
                "turn_failed",
                extra={"user_id": ctx.user_id, "error_type": type(exc).__name__},
            )
            ctx.annotations["error_type"] = type(exc).__name__
            return Reply(texts.GENERIC_ERROR, parse_mode=None)
