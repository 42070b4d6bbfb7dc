"""Fluxos de movimentação: envio (email/carteira) e saque (banco/carteira).

Regras comuns:
- entrada no fluxo consulta saldos; sem saldo ou falha volta para idle
- handlers de texto recebem o valor já validado para o passo
  (formato inválido é respondido antes, sem mudar o passo)
- confirmação executa uma única chamada e sempre termina em idle;
  falha aborta o fluxo (nunca há retry automático)
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.constants import bot_texts as texts
from app.constants.actions import Action
from app.observability import record_money_movement
from app.protocols.models import Reply
from app.sessions.scratch import (
    BankWithdrawScratch,
    SendEmailScratch,
    SendWalletScratch,
    WalletWithdrawScratch,
)
from app.use_cases.conversation import keyboards
from fsm import Flow, Step
from utils.errors import BackendCallError

if TYPE_CHECKING:
    from app.domain.payouts import TransferResult
    from app.use_cases.conversation.context import FlowContext

logger = logging.getLogger(__name__)

_ENTRY_PROMPTS: dict[Flow, str] = {
    Flow.SEND_EMAIL: texts.SEND_EMAIL_PROMPT,
    Flow.SEND_WALLET: texts.SEND_WALLET_PROMPT,
    Flow.WITHDRAW_BANK: texts.WITHDRAW_BANK_PROMPT,
    Flow.WITHDRAW_WALLET: texts.WITHDRAW_WALLET_PROMPT,
}

_ENTRY_VERBS: dict[Flow, str] = {
    Flow.SEND_EMAIL: "send",
    Flow.SEND_WALLET: "send",
    Flow.WITHDRAW_BANK: "withdraw",
    Flow.WITHDRAW_WALLET: "withdraw",
}

PAYOUT_FLOWS: frozenset[Flow] = frozenset(_ENTRY_PROMPTS)


async def start_payout_flow(ctx: FlowContext, flow: Flow, trigger: str) -> Reply:
    """Entra no fluxo e exibe o saldo disponível junto do primeiro prompt."""
    ctx.enter(flow, trigger)
    try:
        balances = await ctx.backend.get_balances(ctx.token)
    except BackendCallError:
        logger.warning("balances_fetch_failed", extra={"user_id": ctx.session.user_id})
        ctx.finish("balances_unavailable")
        return Reply(texts.BALANCES_FAILED, keyboard=keyboards.BACK_ONLY)

    if not balances:
        ctx.finish("no_funds")
        return Reply(texts.no_funds(_ENTRY_VERBS[flow]), keyboard=keyboards.BACK_ONLY)

    text = f"{texts.available_balances(balances)}\n\n{_ENTRY_PROMPTS[flow]}"
    return Reply(text, keyboard=keyboards.CANCEL_ONLY)


def _session_error(ctx: FlowContext, trigger: str) -> Reply:
    ctx.finish(trigger)
    return Reply(texts.SESSION_ERROR, keyboard=keyboards.MAIN_MENU)


# ---- envio para email ---------------------------------------------------


def handle_send_email_address(ctx: FlowContext, email: str) -> Reply:
    if ctx.session.scratch_as(SendEmailScratch) is None:
        return _session_error(ctx, "scratch_missing")
    ctx.advance(Step.SEND_EMAIL_AMOUNT, "recipient_entered", SendEmailScratch(recipient_email=email))
    return Reply(texts.amount_prompt(email), keyboard=keyboards.CANCEL_ONLY)


def handle_send_email_amount(ctx: FlowContext, amount: str) -> Reply:
    scratch = ctx.session.scratch_as(SendEmailScratch)
    if scratch is None or not scratch.recipient_email:
        return _session_error(ctx, "scratch_missing")
    ctx.advance(
        Step.CONFIRM_EMAIL_TRANSFER,
        "amount_entered",
        dataclasses.replace(scratch, amount=amount),
    )
    return Reply(
        texts.confirm_email_transfer(amount, ctx.currency, scratch.recipient_email),
        keyboard=keyboards.confirm(Action.CONFIRM_EMAIL_TRANSFER),
    )


async def confirm_send_email(ctx: FlowContext) -> Reply:
    scratch = ctx.session.scratch_as(SendEmailScratch)
    if scratch is None or not scratch.is_complete:
        return _session_error(ctx, "scratch_incomplete")
    ctx.finish("confirmed")
    try:
        result = await ctx.backend.send_to_email(
            ctx.token,
            email=scratch.recipient_email or "",
            amount=scratch.amount or "",
            currency=ctx.currency,
            description=texts.SEND_DESCRIPTION,
        )
    except BackendCallError as exc:
        return _movement_failed(ctx, "send_to_email", exc, texts.TRANSFER_FAILED)
    _movement_succeeded(ctx, "send_to_email", result)
    return Reply(
        texts.transfer_success(
            scratch.amount or "",
            ctx.currency,
            scratch.recipient_email or "",
            result.id,
            result.status,
        ),
        keyboard=keyboards.MAIN_MENU,
    )


# ---- carteira (envio e saque) -------------------------------------------


@dataclass(frozen=True, slots=True)
class _WalletPayout:
    """Parâmetros dos dois fluxos de carteira (mesma sequência de passos)."""

    scratch_type: type[SendWalletScratch] | type[WalletWithdrawScratch]
    network_step: Step
    amount_step: Step
    confirm_step: Step
    confirm_action: Action
    verb: str
    operation: str
    description: str
    confirm_text: Callable[[str, str, str, str], str]
    failure_text: str


_SEND_WALLET = _WalletPayout(
    scratch_type=SendWalletScratch,
    network_step=Step.SEND_WALLET_NETWORK,
    amount_step=Step.SEND_WALLET_AMOUNT,
    confirm_step=Step.CONFIRM_WALLET_TRANSFER,
    confirm_action=Action.CONFIRM_WALLET_TRANSFER,
    verb="send",
    operation="send_to_wallet",
    description=texts.SEND_DESCRIPTION,
    confirm_text=texts.confirm_wallet_transfer,
    failure_text=texts.TRANSFER_FAILED,
)

_WITHDRAW_WALLET = _WalletPayout(
    scratch_type=WalletWithdrawScratch,
    network_step=Step.WITHDRAW_WALLET_NETWORK,
    amount_step=Step.WITHDRAW_WALLET_AMOUNT,
    confirm_step=Step.CONFIRM_WALLET_WITHDRAWAL,
    confirm_action=Action.CONFIRM_WALLET_WITHDRAWAL,
    verb="withdraw",
    operation="withdraw_to_wallet",
    description=texts.WITHDRAW_DESCRIPTION,
    confirm_text=texts.confirm_wallet_withdrawal,
    failure_text=texts.WALLET_WITHDRAWAL_FAILED,
)


def _wallet_address(ctx: FlowContext, payout: _WalletPayout, address: str) -> Reply:
    if ctx.session.scratch_as(payout.scratch_type) is None:
        return _session_error(ctx, "scratch_missing")
    ctx.advance(payout.network_step, "address_entered", payout.scratch_type(address=address))
    return Reply(texts.NETWORK_PROMPT, keyboard=keyboards.CANCEL_ONLY)


def _wallet_network(ctx: FlowContext, payout: _WalletPayout, network: str) -> Reply:
    scratch = ctx.session.scratch_as(payout.scratch_type)
    if scratch is None or not scratch.address:
        return _session_error(ctx, "scratch_missing")
    ctx.advance(payout.amount_step, "network_selected", dataclasses.replace(scratch, network=network))
    return Reply(
        texts.amount_prompt(texts.short_address(scratch.address), payout.verb),
        keyboard=keyboards.CANCEL_ONLY,
    )


def _wallet_amount(ctx: FlowContext, payout: _WalletPayout, amount: str) -> Reply:
    scratch = ctx.session.scratch_as(payout.scratch_type)
    if scratch is None or not scratch.address or not scratch.network:
        return _session_error(ctx, "scratch_missing")
    ctx.advance(payout.confirm_step, "amount_entered", dataclasses.replace(scratch, amount=amount))
    return Reply(
        payout.confirm_text(amount, ctx.currency, scratch.address, scratch.network),
        keyboard=keyboards.confirm(payout.confirm_action),
    )


async def _wallet_confirm(ctx: FlowContext, payout: _WalletPayout) -> Reply:
    scratch = ctx.session.scratch_as(payout.scratch_type)
    if scratch is None or not scratch.is_complete:
        return _session_error(ctx, "scratch_incomplete")
    ctx.finish("confirmed")
    address = scratch.address or ""
    amount = scratch.amount or ""
    try:
        result = await ctx.backend.send_to_wallet(
            ctx.token,
            address=address,
            network=scratch.network or "",
            amount=amount,
            currency=ctx.currency,
            description=payout.description,
        )
    except BackendCallError as exc:
        return _movement_failed(ctx, payout.operation, exc, payout.failure_text)
    _movement_succeeded(ctx, payout.operation, result)
    if payout is _WITHDRAW_WALLET:
        text = texts.wallet_withdrawal_success(amount, ctx.currency, address, result.id, result.status)
    else:
        text = texts.transfer_success(amount, ctx.currency, texts.short_address(address), result.id, result.status)
    return Reply(text, keyboard=keyboards.MAIN_MENU)


# ---- saque para banco ---------------------------------------------------


def handle_withdraw_bank_amount(ctx: FlowContext, amount: str) -> Reply:
    if ctx.session.scratch_as(BankWithdrawScratch) is None:
        return _session_error(ctx, "scratch_missing")
    ctx.advance(Step.CONFIRM_BANK_WITHDRAWAL, "amount_entered", BankWithdrawScratch(amount=amount))
    return Reply(
        texts.confirm_bank_withdrawal(amount, ctx.currency),
        keyboard=keyboards.confirm(Action.CONFIRM_BANK_WITHDRAWAL),
    )


async def confirm_withdraw_bank(ctx: FlowContext) -> Reply:
    scratch = ctx.session.scratch_as(BankWithdrawScratch)
    if scratch is None or not scratch.is_complete:
        return _session_error(ctx, "scratch_incomplete")
    ctx.finish("confirmed")
    amount = scratch.amount or ""
    try:
        result = await ctx.backend.withdraw_to_bank(
            ctx.token,
            amount=amount,
            currency=ctx.currency,
            description=texts.WITHDRAW_DESCRIPTION,
        )
    except BackendCallError as exc:
        return _movement_failed(ctx, "withdraw_to_bank", exc, texts.BANK_WITHDRAWAL_FAILED)
    _movement_succeeded(ctx, "withdraw_to_bank", result)
    return Reply(
        texts.bank_withdrawal_success(amount, ctx.currency, result.id, result.status),
        keyboard=keyboards.MAIN_MENU,
    )


# ---- despacho -----------------------------------------------------------

TextHandler = Callable[["FlowContext", str], Reply]

TEXT_HANDLERS: dict[Step, TextHandler] = {
    Step.SEND_EMAIL_ADDRESS: handle_send_email_address,
    Step.SEND_EMAIL_AMOUNT: handle_send_email_amount,
    Step.SEND_WALLET_ADDRESS: lambda ctx, value: _wallet_address(ctx, _SEND_WALLET, value),
    Step.SEND_WALLET_NETWORK: lambda ctx, value: _wallet_network(ctx, _SEND_WALLET, value),
    Step.SEND_WALLET_AMOUNT: lambda ctx, value: _wallet_amount(ctx, _SEND_WALLET, value),
    Step.WITHDRAW_BANK_AMOUNT: handle_withdraw_bank_amount,
    Step.WITHDRAW_WALLET_ADDRESS: lambda ctx, value: _wallet_address(ctx, _WITHDRAW_WALLET, value),
    Step.WITHDRAW_WALLET_NETWORK: lambda ctx, value: _wallet_network(ctx, _WITHDRAW_WALLET, value),
    Step.WITHDRAW_WALLET_AMOUNT: lambda ctx, value: _wallet_amount(ctx, _WITHDRAW_WALLET, value),
}

# Ação de confirmação -> passo em que ela é aceita
CONFIRM_STEP_BY_ACTION: dict[str, Step] = {
    Action.CONFIRM_EMAIL_TRANSFER: Step.CONFIRM_EMAIL_TRANSFER,
    Action.CONFIRM_WALLET_TRANSFER: Step.CONFIRM_WALLET_TRANSFER,
    Action.CONFIRM_BANK_WITHDRAWAL: Step.CONFIRM_BANK_WITHDRAWAL,
    Action.CONFIRM_WALLET_WITHDRAWAL: Step.CONFIRM_WALLET_WITHDRAWAL,
}


async def confirm(ctx: FlowContext, action: str) -> Reply:
    """Executa a movimentação do passo de confirmação correspondente.

    Confirmação fora do passo (ex: segundo clique após sucesso) é erro
    de sessão e nunca chama o backend.
    """
    expected = CONFIRM_STEP_BY_ACTION[action]
    if ctx.session.current_step != expected:
        logger.warning(
            "confirm_out_of_step",
            extra={
                "user_id": ctx.session.user_id,
                "action": action,
                "step": ctx.session.current_step.value if ctx.session.current_step else "idle",
            },
        )
        return Reply(texts.SESSION_ERROR, keyboard=keyboards.MAIN_MENU)

    if expected == Step.CONFIRM_EMAIL_TRANSFER:
        return await confirm_send_email(ctx)
    if expected == Step.CONFIRM_WALLET_TRANSFER:
        return await _wallet_confirm(ctx, _SEND_WALLET)
    if expected == Step.CONFIRM_BANK_WITHDRAWAL:
        return await confirm_withdraw_bank(ctx)
    return await _wallet_confirm(ctx, _WITHDRAW_WALLET)


def _movement_succeeded(ctx: FlowContext, operation: str, result: TransferResult) -> None:
    record_money_movement(operation, "succeeded", result.status)
    logger.info(
        "money_movement_succeeded",
        extra={"user_id": ctx.session.user_id, "operation": operation, "transfer_id": result.id},
    )


def _movement_failed(ctx: FlowContext, operation: str, exc: BackendCallError, text: str) -> Reply:
    record_money_movement(operation, "failed")
    logger.warning(
        "money_movement_failed",
        extra={
            "user_id": ctx.session.user_id,
            "operation": operation,
            "status_code": exc.status_code,
        },
    )
    return Reply(text, keyboard=keyboards.MAIN_MENU)
