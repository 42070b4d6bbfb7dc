"""Middleware de autenticação (gate por allow-list)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.constants import bot_texts as texts
from app.protocols.models import InputSource, Reply
from fsm.rules import looks_like_email
from fsm.states import is_public

if TYPE_CHECKING:
    from app.middleware.base import TurnContext, TurnHandler
    from app.protocols.models import UserInput
    from app.sessions.models import ConversationSession

logger = logging.getLogger(__name__)

PUBLIC_COMMANDS: frozenset[str] = frozenset({"start", "login", "help", "cancel"})
PUBLIC_ACTIONS: frozenset[str] = frozenset({"main_menu", "help", "cancel"})


def is_public_input(session: ConversationSession, user_input: UserInput) -> bool:
    """Entradas liberadas sem autenticação.

    - /start, /login, /help, /cancel e as ações main_menu, help, cancel
    - qualquer entrada enquanto o passo atual é do fluxo de autenticação
    - email digitado em idle (login implícito)
    """
    command = user_input.command
    if command is not None:
        return command in PUBLIC_COMMANDS
    if user_input.source == InputSource.ACTION:
        return user_input.value in PUBLIC_ACTIONS
    if session.current_step is not None:
        return is_public(session.current_step)
    return looks_like_email(user_input.value)


class AuthGateMiddleware:
    async def dispatch(self, ctx: TurnContext, call_next: TurnHandler) -> Reply:
        if ctx.session.is_authenticated or is_public_input(ctx.session, ctx.user_input):
            return await call_next(ctx)

        # Passo não público sem token (ex: restaurado após expiração)
        if ctx.session.current_step is not None and not is_public(ctx.session.current_step):
            ctx.session.clear_flow()
        ctx.annotations["auth_gate"] = "rejected"
        logger.info("auth_gate_rejected", extra={"user_id": ctx.user_id})
        return Reply(texts.LOGIN_REQUIRED, parse_mode=None)
