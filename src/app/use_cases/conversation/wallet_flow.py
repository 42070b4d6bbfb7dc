"""Consultas de conta e seleção de carteira padrão."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.constants import bot_texts as texts
from app.protocols.models import Reply
from app.sessions.scratch import WalletSelectionScratch
from app.use_cases.conversation import keyboards
from fsm import Flow, Step
from utils.errors import BackendCallError

if TYPE_CHECKING:
    from app.use_cases.conversation.context import FlowContext

logger = logging.getLogger(__name__)


async def show_balance(ctx: FlowContext) -> Reply:
    try:
        balances = await ctx.backend.get_balances(ctx.token)
    except BackendCallError:
        logger.warning("balances_fetch_failed", extra={"user_id": ctx.session.user_id})
        return Reply(texts.BALANCES_FAILED, keyboard=keyboards.BACK_ONLY)
    return Reply(texts.balances(balances), keyboard=keyboards.balance(bool(balances)))


async def show_deposit(ctx: FlowContext) -> Reply:
    try:
        wallet = await ctx.backend.get_default_wallet(ctx.token)
    except BackendCallError:
        logger.warning("default_wallet_fetch_failed", extra={"user_id": ctx.session.user_id})
        return Reply(texts.DEPOSIT_FAILED, keyboard=keyboards.BACK_ONLY)
    return Reply(texts.deposit_info(wallet, ctx.currency), keyboard=keyboards.BACK_ONLY)


async def show_transactions(ctx: FlowContext, page: int = 1) -> Reply:
    """Histórico paginado; há próxima página quando a página veio cheia."""
    limit = ctx.history_page_size
    try:
        items = await ctx.backend.list_transfer_history(ctx.token, page, limit)
    except BackendCallError:
        logger.warning("transfer_history_failed", extra={"user_id": ctx.session.user_id, "page": page})
        return Reply(texts.TRANSACTIONS_FAILED, keyboard=keyboards.BACK_ONLY)
    return Reply(
        texts.transactions(items, page),
        keyboard=keyboards.history(page, has_more=len(items) == limit),
    )


async def show_profile(ctx: FlowContext) -> Reply:
    try:
        user = await ctx.backend.get_profile(ctx.token)
    except BackendCallError:
        logger.warning("profile_fetch_failed", extra={"user_id": ctx.session.user_id})
        return Reply(texts.PROFILE_FAILED, keyboard=keyboards.BACK_ONLY)
    return Reply(texts.profile(user), keyboard=keyboards.BACK_ONLY)


async def start_wallet_selection(ctx: FlowContext, trigger: str) -> Reply:
    """Entra em select_default_wallet com os ids ofertados no teclado."""
    ctx.enter(Flow.WALLET_SELECTION, trigger)
    try:
        wallets = await ctx.backend.list_wallets(ctx.token)
    except BackendCallError:
        logger.warning("wallets_fetch_failed", extra={"user_id": ctx.session.user_id})
        ctx.finish("wallets_unavailable")
        return Reply(texts.WALLETS_FAILED, keyboard=keyboards.BACK_ONLY)

    if not wallets:
        ctx.finish("no_wallets")
        return Reply(texts.NO_WALLETS, keyboard=keyboards.BACK_ONLY)

    ctx.session.scratch = WalletSelectionScratch(wallet_ids=tuple(wallet.id for wallet in wallets))
    return Reply(texts.SELECT_DEFAULT_WALLET, keyboard=keyboards.wallets(wallets))


async def select_wallet(ctx: FlowContext, wallet_id: str) -> Reply:
    """Ação wallet_<id>: aceita só em select_default_wallet e só ids ofertados."""
    scratch = ctx.session.scratch_as(WalletSelectionScratch)
    if ctx.session.current_step != Step.SELECT_DEFAULT_WALLET or scratch is None:
        logger.warning("wallet_selection_out_of_step", extra={"user_id": ctx.session.user_id})
        return Reply(texts.SESSION_ERROR, keyboard=keyboards.MAIN_MENU)

    if wallet_id not in scratch.wallet_ids:
        return Reply(texts.UNKNOWN_WALLET, keyboard=keyboards.CANCEL_ONLY)

    ctx.finish("wallet_selected")
    try:
        await ctx.backend.set_default_wallet(ctx.token, wallet_id)
    except BackendCallError as exc:
        logger.warning(
            "set_default_wallet_failed",
            extra={"user_id": ctx.session.user_id, "status_code": exc.status_code},
        )
        return Reply(texts.DEFAULT_WALLET_FAILED, keyboard=keyboards.BACK_ONLY)

    logger.info("default_wallet_updated", extra={"user_id": ctx.session.user_id})
    return Reply(texts.DEFAULT_WALLET_UPDATED, keyboard=keyboards.BACK_ONLY)
