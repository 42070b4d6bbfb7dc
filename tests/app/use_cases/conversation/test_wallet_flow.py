"""Testes de consultas de conta e seleção de carteira padrão."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.constants import bot_texts as texts
from app.constants.actions import Action, tx_page_action, wallet_action
from app.domain.payouts import Transfer
from app.protocols.models import UserInput
from app.sessions.scratch import WalletSelectionScratch
from fsm import Step
from tests.fakes.session_helpers import USER_ID, save_authenticated


async def _act(service, action: str):
    return await service.handle_input(USER_ID, UserInput.action(action))


def _transfers(count: int) -> list[Transfer]:
    return [
        Transfer(
            id=f"t{index}",
            amount="10",
            currency="USDC",
            status="success",
            type="deposit",
            created_at=datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        )
        for index in range(count)
    ]


class TestQueries:
    """Consultas não mudam o passo."""

    @pytest.mark.asyncio
    async def test_balance_command(self, service, sessions) -> None:
        await save_authenticated(sessions)

        reply = await service.handle_input(USER_ID, "/balance")

        assert "Your Wallet Balances" in reply.text
        assert "250.5 USDC" in reply.text
        assert Action.DEPOSIT in reply.actions
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_empty_balances(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.balances = []

        reply = await _act(service, Action.BALANCE)

        assert reply.text == texts.NO_BALANCES
        assert reply.actions == [Action.MAIN_MENU]

    @pytest.mark.asyncio
    async def test_balance_failure(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.failing.add("get_balances")

        reply = await _act(service, Action.BALANCE)

        assert reply.text == texts.BALANCES_FAILED

    @pytest.mark.asyncio
    async def test_query_does_not_leave_flow(self, service, sessions) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.WITHDRAW_BANK)

        await _act(service, Action.BALANCE)

        assert (await sessions.get(USER_ID)).current_step == Step.WITHDRAW_BANK_AMOUNT

    @pytest.mark.asyncio
    async def test_deposit_shows_default_wallet(self, service, sessions) -> None:
        await save_authenticated(sessions)

        reply = await service.handle_input(USER_ID, "/deposit")

        assert "So1anaAddr0000000001" in reply.text
        assert "solana" in reply.text

    @pytest.mark.asyncio
    async def test_profile(self, service, sessions) -> None:
        await save_authenticated(sessions)

        reply = await _act(service, Action.VIEW_PROFILE)

        assert "Ada" in reply.text
        assert "org-1" in reply.text


class TestTransactions:
    """Histórico paginado."""

    @pytest.mark.asyncio
    async def test_empty_history(self, service, sessions) -> None:
        await save_authenticated(sessions)

        reply = await service.handle_input(USER_ID, "/transactions")

        assert reply.text == texts.NO_TRANSACTIONS
        assert reply.actions == [Action.MAIN_MENU]

    @pytest.mark.asyncio
    async def test_full_page_offers_next(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.history = _transfers(7)

        reply = await _act(service, Action.TRANSACTIONS)

        assert tx_page_action(2) in reply.actions
        assert tx_page_action(0) not in reply.actions
        assert backend.calls_to("list_transfer_history")[0]["limit"] == 5

    @pytest.mark.asyncio
    async def test_last_page_offers_previous_only(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.history = _transfers(7)

        reply = await _act(service, tx_page_action(2))

        assert "(page 2)" in reply.text
        assert reply.actions == [tx_page_action(1), Action.MAIN_MENU]


class TestWalletSelection:
    """Fluxo select_default_wallet."""

    @pytest.mark.asyncio
    async def test_selection_sets_default(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)

        reply = await _act(service, Action.SET_DEFAULT_WALLET)

        session = await sessions.get(USER_ID)
        assert session.current_step == Step.SELECT_DEFAULT_WALLET
        assert session.scratch == WalletSelectionScratch(wallet_ids=("w1", "w2"))
        assert wallet_action("w2") in reply.actions

        reply = await _act(service, wallet_action("w2"))

        assert reply.text == texts.DEFAULT_WALLET_UPDATED
        assert (await sessions.get(USER_ID)).current_step is None
        assert backend.calls_to("set_default_wallet")[0]["wallet_id"] == "w2"

    @pytest.mark.asyncio
    async def test_unknown_wallet_keeps_step(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SET_DEFAULT_WALLET)

        reply = await _act(service, wallet_action("w9"))

        assert reply.text == texts.UNKNOWN_WALLET
        assert (await sessions.get(USER_ID)).current_step == Step.SELECT_DEFAULT_WALLET
        assert backend.calls_to("set_default_wallet") == []

    @pytest.mark.asyncio
    async def test_selection_out_of_step(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)

        reply = await _act(service, wallet_action("w1"))

        assert reply.text == texts.SESSION_ERROR
        assert backend.calls_to("set_default_wallet") == []

    @pytest.mark.asyncio
    async def test_no_wallets_returns_to_idle(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.wallets = []

        reply = await _act(service, Action.SET_DEFAULT_WALLET)

        assert reply.text == texts.NO_WALLETS
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_text_during_selection(self, service, sessions) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SET_DEFAULT_WALLET)

        reply = await service.handle_input(USER_ID, "w1")

        assert reply.text == texts.WALLET_SELECTION_EXPECTED
        assert (await sessions.get(USER_ID)).current_step == Step.SELECT_DEFAULT_WALLET

    @pytest.mark.asyncio
    async def test_set_default_failure(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.failing.add("set_default_wallet")
        await _act(service, Action.SET_DEFAULT_WALLET)

        reply = await _act(service, wallet_action("w1"))

        assert reply.text == texts.DEFAULT_WALLET_FAILED
        assert (await sessions.get(USER_ID)).current_step is None
