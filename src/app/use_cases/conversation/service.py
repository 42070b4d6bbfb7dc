"""Serviço de conversa — ponto de entrada de cada turno.

Um turno:
1. Adquire o lock do usuário e carrega a sessão (SessionManager.hold)
2. Passa pelo pipeline de middlewares (logging, contenção de erros,
   expiração, gate de autenticação)
3. Roteia comando, ação de menu ou texto para o handler do fluxo
4. Persiste a sessão e renova a assinatura de notificações da
   organização (sessões autenticadas)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING, Any

from app.constants import bot_texts as texts
from app.constants.actions import Action, Command, parse_tx_page_action, parse_wallet_action
from app.middleware import TurnContext, build_pipeline, default_middlewares
from app.observability import get_correlation_id
from app.protocols.models import InputSource, Reply, UserInput
from app.use_cases.conversation import auth_flow, keyboards, payout_flows, wallet_flow
from app.use_cases.conversation.context import FlowContext
from config.settings.base.session import DEFAULT_INACTIVITY_TIMEOUT_SECONDS
from fsm import Flow, InputKind, Step, expected_input, flow_of
from fsm.rules import looks_like_email, validate_input
from utils.errors import NotificationDeliveryError, ValidationError

if TYPE_CHECKING:
    from app.middleware import TurnMiddleware
    from app.protocols.backend_api import BackendApiProtocol
    from app.services.subscriptions import NotificationSubscriptionManager
    from app.sessions.manager import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "there"

# Ação de menu -> fluxo de movimentação
_PAYOUT_ACTIONS: dict[str, Flow] = {
    Action.SEND_EMAIL: Flow.SEND_EMAIL,
    Action.SEND_WALLET: Flow.SEND_WALLET,
    Action.WITHDRAW_BANK: Flow.WITHDRAW_BANK,
    Action.WITHDRAW_WALLET: Flow.WITHDRAW_WALLET,
}

_CONFIRM_ACTION_BY_STEP: dict[Step, str] = {
    step: action for action, step in payout_flows.CONFIRM_STEP_BY_ACTION.items()
}

# Resposta para formato inválido em passos de texto (o passo não muda)
_INVALID_INPUT_TEXTS: dict[Step, str] = {
    Step.AUTH_EMAIL: texts.INVALID_EMAIL,
    Step.AUTH_OTP: texts.INVALID_OTP,
    Step.SEND_EMAIL_ADDRESS: texts.INVALID_RECIPIENT_EMAIL,
    Step.SEND_EMAIL_AMOUNT: texts.INVALID_AMOUNT,
    Step.SEND_WALLET_ADDRESS: texts.INVALID_ADDRESS,
    Step.SEND_WALLET_NETWORK: texts.INVALID_NETWORK,
    Step.SEND_WALLET_AMOUNT: texts.INVALID_AMOUNT,
    Step.WITHDRAW_BANK_AMOUNT: texts.INVALID_AMOUNT,
    Step.WITHDRAW_WALLET_ADDRESS: texts.INVALID_ADDRESS,
    Step.WITHDRAW_WALLET_NETWORK: texts.INVALID_NETWORK,
    Step.WITHDRAW_WALLET_AMOUNT: texts.INVALID_AMOUNT,
}


class ConversationService:
    """Máquina de conversa por usuário.

    Args:
        sessions: Gerenciador de sessões (lock por usuário + persistência)
        backend: Fachada da API de backend
        subscriptions: Gerenciador de notificações (None desliga push)
        currency: Moeda de transferências e saques
        history_page_size: Itens por página do histórico
        middlewares: Cadeia de middlewares (padrão: default_middlewares)
        inactivity_timeout_seconds: Limite de inatividade da sessão autenticada
    """

    def __init__(
        self,
        sessions: SessionManager,
        backend: BackendApiProtocol,
        subscriptions: NotificationSubscriptionManager | None = None,
        *,
        currency: str = "USDC",
        history_page_size: int = 5,
        middlewares: Sequence[TurnMiddleware] | None = None,
        inactivity_timeout_seconds: int = DEFAULT_INACTIVITY_TIMEOUT_SECONDS,
    ) -> None:
        self._sessions = sessions
        self._backend = backend
        self._subscriptions = subscriptions
        self._currency = currency
        self._history_page_size = history_page_size
        self._middlewares = (
            list(middlewares) if middlewares is not None else default_middlewares(inactivity_timeout_seconds)
        )

    async def handle_input(
        self,
        user_id: str,
        raw_input: UserInput | str,
        destination: str | None = None,
        display_name: str | None = None,
    ) -> Reply:
        """Processa uma entrada do usuário e retorna a resposta do turno.

        Entradas do mesmo usuário são serializadas; usuários diferentes
        seguem em paralelo. Nunca levanta.
        """
        user_input = raw_input if isinstance(raw_input, UserInput) else UserInput.text(raw_input)
        reply: Reply | None = None
        resubscribe: tuple[str, str, str | None] | None = None

        try:
            async with self._sessions.hold(user_id, destination) as session:
                turn = TurnContext(
                    session=session,
                    user_input=user_input,
                    correlation_id=get_correlation_id(),
                )
                pipeline = build_pipeline(self._middlewares, partial(self._route, display_name=display_name))
                reply = await pipeline(turn)
                if session.is_authenticated and session.organization_id and not turn.annotations.get("subscribed"):
                    resubscribe = (session.organization_id, session.destination, session.auth_token)
        except Exception as exc:
            logger.exception(
                "turn_persistence_failed",
                extra={"user_id": user_id, "error_type": type(exc).__name__},
            )
            return reply or Reply(texts.GENERIC_ERROR, parse_mode=None)

        if resubscribe is not None:
            await self._subscribe(user_id, *resubscribe)
        return reply

    async def on_authenticated(
        self,
        user_id: str,
        organization_id: str,
        destination: str,
        auth_token: str | None = None,
    ) -> None:
        """Registra a assinatura da organização após login."""
        await self._subscribe(user_id, organization_id, destination, auth_token)

    async def on_logged_out(self, user_id: str, organization_id: str) -> None:
        if self._subscriptions is None:
            return
        try:
            await self._subscriptions.unsubscribe(organization_id)
        except NotificationDeliveryError:
            logger.warning(
                "unsubscribe_failed",
                extra={"user_id": user_id, "organization_id": organization_id},
            )

    async def on_push_event(self, channel_name: str, event_name: str, payload: dict[str, Any]) -> None:
        if self._subscriptions is None:
            logger.warning("push_event_without_subscriptions", extra={"event_name": event_name})
            return
        await self._subscriptions.on_push_event(channel_name, event_name, payload)

    async def _subscribe(
        self,
        user_id: str,
        organization_id: str,
        destination: str,
        auth_token: str | None,
    ) -> None:
        if self._subscriptions is None:
            return
        try:
            await self._subscriptions.subscribe(organization_id, destination, auth_token)
        except NotificationDeliveryError:
            logger.warning(
                "subscribe_failed",
                extra={"user_id": user_id, "organization_id": organization_id},
            )

    # ---- roteamento ---------------------------------------------------------

    async def _route(self, turn: TurnContext, *, display_name: str | None = None) -> Reply:
        async def _authenticated(
            user_id: str,
            organization_id: str,
            destination: str,
            auth_token: str | None,
        ) -> None:
            turn.annotations["subscribed"] = True
            await self.on_authenticated(user_id, organization_id, destination, auth_token)

        ctx = FlowContext.for_session(
            turn.session,
            self._backend,
            currency=self._currency,
            history_page_size=self._history_page_size,
            on_authenticated=_authenticated,
            on_logged_out=self.on_logged_out,
        )
        user_input = turn.user_input
        if user_input.command is not None:
            reply = await self._on_command(ctx, user_input.command, display_name or DEFAULT_DISPLAY_NAME)
        elif user_input.source == InputSource.ACTION:
            reply = await self._on_action(ctx, user_input.value, display_name or DEFAULT_DISPLAY_NAME)
        else:
            reply = await self._on_text(ctx, user_input.value)
        logger.debug("turn_routed", extra={"input_source": str(user_input.source), **ctx.machine.get_state_summary()})
        return reply

    async def _on_command(self, ctx: FlowContext, command: str, name: str) -> Reply:
        if command in (Command.START, Command.MENU):
            return self._main_menu(ctx, command, name, welcome=command == Command.START)
        if command == Command.HELP:
            return Reply(texts.HELP, keyboard=keyboards.BACK_ONLY)
        if command == Command.LOGIN:
            return auth_flow.start_login(ctx)
        if command == Command.LOGOUT:
            return await auth_flow.logout(ctx)
        if command == Command.CANCEL:
            return self._cancel(ctx)
        if command == Command.BALANCE:
            return await wallet_flow.show_balance(ctx)
        if command == Command.DEPOSIT:
            return await wallet_flow.show_deposit(ctx)
        if command == Command.TRANSACTIONS:
            return await wallet_flow.show_transactions(ctx)
        if command == Command.SETTINGS:
            return Reply(texts.SETTINGS, keyboard=keyboards.SETTINGS)
        if command == Command.SEND:
            return Reply(texts.SEND_OPTIONS, keyboard=keyboards.SEND_OPTIONS)
        if command == Command.WITHDRAW:
            return Reply(texts.WITHDRAW_OPTIONS, keyboard=keyboards.WITHDRAW_OPTIONS)
        return Reply(texts.IDLE_HINT, keyboard=keyboards.MAIN_MENU)

    async def _on_action(self, ctx: FlowContext, action: str, name: str) -> Reply:
        if action == Action.MAIN_MENU:
            return self._main_menu(ctx, action, name, welcome=False)
        if action == Action.CANCEL:
            return self._cancel(ctx)
        if action == Action.HELP:
            return Reply(texts.HELP, keyboard=keyboards.BACK_ONLY)
        if action == Action.BALANCE:
            return await wallet_flow.show_balance(ctx)
        if action == Action.DEPOSIT:
            return await wallet_flow.show_deposit(ctx)
        if action == Action.TRANSACTIONS:
            return await wallet_flow.show_transactions(ctx)
        if action == Action.SETTINGS:
            return Reply(texts.SETTINGS, keyboard=keyboards.SETTINGS)
        if action == Action.VIEW_PROFILE:
            return await wallet_flow.show_profile(ctx)
        if action == Action.SET_DEFAULT_WALLET:
            return await wallet_flow.start_wallet_selection(ctx, action)
        if action == Action.SEND_MONEY:
            return Reply(texts.SEND_OPTIONS, keyboard=keyboards.SEND_OPTIONS)
        if action == Action.WITHDRAW:
            return Reply(texts.WITHDRAW_OPTIONS, keyboard=keyboards.WITHDRAW_OPTIONS)
        if action in _PAYOUT_ACTIONS:
            return await payout_flows.start_payout_flow(ctx, _PAYOUT_ACTIONS[action], action)
        if action in payout_flows.CONFIRM_STEP_BY_ACTION:
            return await payout_flows.confirm(ctx, action)

        page = parse_tx_page_action(action)
        if page is not None:
            return await wallet_flow.show_transactions(ctx, page)
        wallet_id = parse_wallet_action(action)
        if wallet_id is not None:
            return await wallet_flow.select_wallet(ctx, wallet_id)

        logger.info("unknown_action", extra={"user_id": ctx.session.user_id, "action": action[:64]})
        return Reply(texts.UNKNOWN_ACTION, keyboard=keyboards.MAIN_MENU)

    async def _on_text(self, ctx: FlowContext, value: str) -> Reply:
        """Texto livre: despacha pela classe de entrada do passo atual.

        Passos de confirmação e seleção só repetem a dica dos botões.
        Passos de texto validam o formato antes do handler; formato
        inválido repete o prompt sem mudar o passo.
        """
        step = ctx.session.current_step
        if step is None:
            if not ctx.session.is_authenticated and looks_like_email(value):
                ctx.enter(Flow.AUTH, "implicit_login")
                return await auth_flow.handle_email(ctx, validate_input(Step.AUTH_EMAIL, value))
            return Reply(texts.IDLE_HINT, keyboard=keyboards.MAIN_MENU)

        kind = expected_input(step)
        if kind == InputKind.CONFIRMATION:
            return Reply(texts.CONFIRM_EXPECTED, keyboard=keyboards.confirm(_CONFIRM_ACTION_BY_STEP[step]))
        if kind == InputKind.SELECTION:
            return Reply(texts.WALLET_SELECTION_EXPECTED, keyboard=keyboards.CANCEL_ONLY)

        try:
            validated = validate_input(step, value)
        except ValidationError as exc:
            logger.info(
                "input_rejected",
                extra={"user_id": ctx.session.user_id, "step": step.value, "field": exc.field},
            )
            return Reply(_INVALID_INPUT_TEXTS[step], keyboard=keyboards.CANCEL_ONLY)

        if step == Step.AUTH_EMAIL:
            return await auth_flow.handle_email(ctx, validated)
        if step == Step.AUTH_OTP:
            return await auth_flow.handle_otp(ctx, validated)
        return payout_flows.TEXT_HANDLERS[step](ctx, validated)

    def _main_menu(self, ctx: FlowContext, trigger: str, name: str, *, welcome: bool) -> Reply:
        ctx.finish(trigger)
        if not ctx.session.is_authenticated:
            return Reply(texts.welcome(name), parse_mode=None)
        if welcome:
            return Reply(texts.welcome_back(name), keyboard=keyboards.MAIN_MENU)
        return Reply(texts.MAIN_MENU, keyboard=keyboards.MAIN_MENU)

    def _cancel(self, ctx: FlowContext) -> Reply:
        """Volta para idle de qualquer passo, sem chamada ao backend."""
        step = ctx.session.current_step
        menu = keyboards.MAIN_MENU if ctx.session.is_authenticated else ()
        if step is None:
            return Reply(texts.NOTHING_TO_CANCEL, keyboard=menu)

        ctx.finish("cancel")
        logger.info("flow_cancelled", extra={"user_id": ctx.session.user_id, "step": step.value})
        if flow_of(step) == Flow.AUTH:
            return Reply(texts.LOGIN_CANCELLED)
        return Reply(texts.CANCELLED, keyboard=menu)
