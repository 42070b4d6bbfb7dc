"""Middleware de expiração de sessão por inatividade.

Avaliada de forma preguiçosa na próxima entrada (sem timer).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.constants import bot_texts as texts
from app.observability import record_session_expired
from app.protocols.models import Reply
from config.settings.base.session import DEFAULT_INACTIVITY_TIMEOUT_SECONDS
from utils.errors import SessionExpiredError

if TYPE_CHECKING:
    from app.middleware.base import TurnContext, TurnHandler

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionExpiryMiddleware:
    """Sessão autenticada inativa além do limite perde o token.

    Args:
        timeout_seconds: Inatividade máxima (padrão 1h)
        clock: Fonte de tempo (injetável em testes)
    """

    def __init__(
        self,
        timeout_seconds: int = DEFAULT_INACTIVITY_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._clock = clock

    def check(self, ctx: TurnContext, now: datetime) -> None:
        """Levanta SessionExpiredError se a sessão autenticada expirou."""
        session = ctx.session
        if not session.is_authenticated:
            return
        idle = session.idle_seconds(now)
        if idle > self._timeout_seconds:
            raise SessionExpiredError(f"idle for {int(idle)}s")

    async def dispatch(self, ctx: TurnContext, call_next: TurnHandler) -> Reply:
        now = self._clock()
        try:
            self.check(ctx, now)
        except SessionExpiredError:
            idle = ctx.session.idle_seconds(now)
            ctx.session.clear_auth()
            ctx.session.touch(now)
            ctx.annotations["session_expired"] = True
            record_session_expired(ctx.user_id, idle)
            logger.info("session_expired", extra={"user_id": ctx.user_id})
            return Reply(texts.SESSION_EXPIRED, parse_mode=None)

        ctx.session.touch(now)
        return await call_next(ctx)
