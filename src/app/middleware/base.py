"""Contrato do pipeline de middlewares de turno.

Cada middleware recebe o contexto do turno e o próximo handler; pode
responder direto (curto-circuito) ou chamar `call_next`.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.protocols.models import Reply, UserInput
    from app.sessions.models import ConversationSession


@dataclass(slots=True)
class TurnContext:
    """Estado de um turno (uma entrada de um usuário)."""

    session: ConversationSession
    user_input: UserInput
    correlation_id: str = ""
    started_at: float = field(default_factory=time.perf_counter)
    # Preenchido pelos middlewares para o log de conclusão
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def user_id(self) -> str:
        return self.session.user_id


TurnHandler = Callable[[TurnContext], Awaitable["Reply"]]


class TurnMiddleware(Protocol):
    async def dispatch(self, ctx: TurnContext, call_next: TurnHandler) -> Reply: ...


def build_pipeline(middlewares: Sequence[TurnMiddleware], handler: TurnHandler) -> TurnHandler:
    """Encadeia middlewares na ordem dada (o primeiro é o mais externo)."""
    chain = handler
    for middleware in reversed(middlewares):
        chain = _bind(middleware, chain)
    return chain


def _bind(middleware: TurnMiddleware, call_next: TurnHandler) -> TurnHandler:
    async def _run(ctx: TurnContext) -> Reply:
        return await middleware.dispatch(ctx, call_next)

    return _run
