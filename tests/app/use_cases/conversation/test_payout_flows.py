"""Testes dos fluxos de envio e saque."""

from __future__ import annotations

import asyncio

import pytest

from app.constants import bot_texts as texts
from app.constants.actions import Action
from app.protocols.models import UserInput
from app.sessions.scratch import (
    BankWithdrawScratch,
    SendEmailScratch,
    SendWalletScratch,
    WalletWithdrawScratch,
)
from fsm import Step
from tests.fakes.fake_backend import ACCESS_TOKEN
from tests.fakes.session_helpers import USER_ID, save_authenticated

WALLET_ADDRESS = "So1anaRecipientAddress000000000000000000001"


async def _act(service, action: str):
    return await service.handle_input(USER_ID, UserInput.action(action))


async def _say(service, text: str):
    return await service.handle_input(USER_ID, text)


class TestFlowEntry:
    """Entrada nos fluxos consulta saldos antes do primeiro prompt."""

    @pytest.mark.asyncio
    async def test_entry_shows_balances_and_prompt(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)

        reply = await _act(service, Action.SEND_EMAIL)

        session = await sessions.get(USER_ID)
        assert session.current_step == Step.SEND_EMAIL_ADDRESS
        assert session.scratch == SendEmailScratch()
        assert "250.5 USDC" in reply.text
        assert texts.SEND_EMAIL_PROMPT in reply.text
        assert reply.actions == [Action.CANCEL]
        assert backend.calls_to("get_balances") == [{"token": ACCESS_TOKEN}]

    @pytest.mark.asyncio
    async def test_no_balances_returns_to_idle(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.balances = []

        reply = await _act(service, Action.WITHDRAW_BANK)

        assert reply.text == texts.no_funds("withdraw")
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_balance_failure_returns_to_idle(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.failing.add("get_balances")

        reply = await _act(service, Action.SEND_WALLET)

        assert reply.text == texts.BALANCES_FAILED
        session = await sessions.get(USER_ID)
        assert session.current_step is None
        assert session.scratch is None

    @pytest.mark.asyncio
    async def test_entering_new_flow_abandons_current(self, service, sessions) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)
        await _say(service, "friend@example.com")

        await _act(service, Action.WITHDRAW_BANK)

        session = await sessions.get(USER_ID)
        assert session.current_step == Step.WITHDRAW_BANK_AMOUNT
        assert session.scratch == BankWithdrawScratch()


class TestSendToEmail:
    """Fluxo send_email_address → send_email_amount → confirm_email_transfer."""

    @pytest.mark.asyncio
    async def test_happy_path(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)

        reply = await _say(service, "friend@example.com")
        assert "friend@example.com" in reply.text
        assert (await sessions.get(USER_ID)).current_step == Step.SEND_EMAIL_AMOUNT

        reply = await _say(service, "100")
        session = await sessions.get(USER_ID)
        assert session.current_step == Step.CONFIRM_EMAIL_TRANSFER
        assert session.scratch == SendEmailScratch(recipient_email="friend@example.com", amount="100")
        assert reply.text == texts.confirm_email_transfer("100", "USDC", "friend@example.com")
        assert reply.actions == [Action.CONFIRM_EMAIL_TRANSFER, Action.CANCEL]

        reply = await _act(service, Action.CONFIRM_EMAIL_TRANSFER)

        assert "Transfer Successful" in reply.text
        assert "tr-email" in reply.text
        assert (await sessions.get(USER_ID)).current_step is None
        assert backend.calls_to("send_to_email") == [
            {
                "token": ACCESS_TOKEN,
                "email": "friend@example.com",
                "amount": "100",
                "currency": "USDC",
                "description": texts.SEND_DESCRIPTION,
            }
        ]

    @pytest.mark.asyncio
    async def test_double_confirm_sends_once(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)
        await _say(service, "friend@example.com")
        await _say(service, "100")

        first = await _act(service, Action.CONFIRM_EMAIL_TRANSFER)
        second = await _act(service, Action.CONFIRM_EMAIL_TRANSFER)

        assert "Transfer Successful" in first.text
        assert second.text == texts.SESSION_ERROR
        assert len(backend.calls_to("send_to_email")) == 1

    @pytest.mark.asyncio
    async def test_concurrent_confirms_send_once(
        self, service, sessions, backend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Dois confirms no mesmo instante com o backend ainda processando o primeiro."""
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)
        await _say(service, "friend@example.com")
        await _say(service, "100")

        release = asyncio.Event()
        started: list[str] = []
        original = backend.send_to_email

        async def slow_send(token: str, **kwargs):
            started.append(kwargs["email"])
            await release.wait()
            return await original(token, **kwargs)

        monkeypatch.setattr(backend, "send_to_email", slow_send)

        confirms = asyncio.gather(
            _act(service, Action.CONFIRM_EMAIL_TRANSFER),
            _act(service, Action.CONFIRM_EMAIL_TRANSFER),
        )
        for _ in range(100):
            if started:
                break
            await asyncio.sleep(0)
        release.set()
        replies = await confirms

        assert started == ["friend@example.com"]
        assert len(backend.calls_to("send_to_email")) == 1
        texts_sent = sorted(reply.text for reply in replies)
        assert texts.SESSION_ERROR in texts_sent
        assert sum("Transfer Successful" in text for text in texts_sent) == 1
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_invalid_recipient_keeps_step(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)

        reply = await _say(service, "friend at example")

        assert reply.text == texts.INVALID_RECIPIENT_EMAIL
        assert (await sessions.get(USER_ID)).current_step == Step.SEND_EMAIL_ADDRESS

    @pytest.mark.parametrize("amount", ["abc", "-5", "0", "1,5", ""])
    @pytest.mark.asyncio
    async def test_invalid_amount_keeps_step(self, service, sessions, amount: str) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)
        await _say(service, "friend@example.com")

        reply = await _say(service, amount)

        session = await sessions.get(USER_ID)
        assert reply.text == texts.INVALID_AMOUNT
        assert session.current_step == Step.SEND_EMAIL_AMOUNT
        assert session.scratch == SendEmailScratch(recipient_email="friend@example.com")

    @pytest.mark.asyncio
    async def test_backend_failure_aborts_without_retry(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.failing.add("send_to_email")
        await _act(service, Action.SEND_EMAIL)
        await _say(service, "friend@example.com")
        await _say(service, "100")

        reply = await _act(service, Action.CONFIRM_EMAIL_TRANSFER)

        assert reply.text == texts.TRANSFER_FAILED
        assert len(backend.calls_to("send_to_email")) == 1
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_text_at_confirm_step_asks_for_buttons(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_EMAIL)
        await _say(service, "friend@example.com")
        await _say(service, "100")

        reply = await _say(service, "yes")

        assert reply.text == texts.CONFIRM_EXPECTED
        assert reply.actions == [Action.CONFIRM_EMAIL_TRANSFER, Action.CANCEL]
        assert (await sessions.get(USER_ID)).current_step == Step.CONFIRM_EMAIL_TRANSFER
        assert backend.calls_to("send_to_email") == []


class TestSendToWallet:
    """Fluxo de envio para carteira (endereço, rede, valor)."""

    @pytest.mark.asyncio
    async def test_network_by_number(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_WALLET)

        reply = await _say(service, WALLET_ADDRESS)
        assert reply.text == texts.NETWORK_PROMPT

        await _say(service, "1")
        session = await sessions.get(USER_ID)
        assert session.current_step == Step.SEND_WALLET_AMOUNT
        assert session.scratch == SendWalletScratch(address=WALLET_ADDRESS, network="solana")

        reply = await _say(service, "12.5")
        assert reply.text == texts.confirm_wallet_transfer("12.5", "USDC", WALLET_ADDRESS, "solana")

        reply = await _act(service, Action.CONFIRM_WALLET_TRANSFER)

        assert "Transfer Successful" in reply.text
        assert backend.calls_to("send_to_wallet") == [
            {
                "token": ACCESS_TOKEN,
                "address": WALLET_ADDRESS,
                "network": "solana",
                "amount": "12.5",
                "currency": "USDC",
                "description": texts.SEND_DESCRIPTION,
            }
        ]

    @pytest.mark.asyncio
    async def test_address_with_spaces_is_rejected(self, service, sessions) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_WALLET)

        reply = await _say(service, "not an address")

        assert reply.text == texts.INVALID_ADDRESS
        assert (await sessions.get(USER_ID)).current_step == Step.SEND_WALLET_ADDRESS

    @pytest.mark.asyncio
    async def test_unknown_network_keeps_step(self, service, sessions) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.SEND_WALLET)
        await _say(service, WALLET_ADDRESS)

        reply = await _say(service, "bitcoin")

        assert reply.text == texts.INVALID_NETWORK
        assert (await sessions.get(USER_ID)).current_step == Step.SEND_WALLET_NETWORK


class TestWithdrawals:
    """Saques para banco e carteira externa."""

    @pytest.mark.asyncio
    async def test_bank_withdrawal(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.WITHDRAW_BANK)

        reply = await _say(service, "100")
        assert reply.text == texts.confirm_bank_withdrawal("100", "USDC")

        reply = await _act(service, Action.CONFIRM_BANK_WITHDRAWAL)

        assert "Withdrawal Initiated" in reply.text
        assert backend.calls_to("withdraw_to_bank") == [
            {
                "token": ACCESS_TOKEN,
                "amount": "100",
                "currency": "USDC",
                "description": texts.WITHDRAW_DESCRIPTION,
            }
        ]
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_bank_withdrawal_failure(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        backend.failing.add("withdraw_to_bank")
        await _act(service, Action.WITHDRAW_BANK)
        await _say(service, "100")

        reply = await _act(service, Action.CONFIRM_BANK_WITHDRAWAL)

        assert reply.text == texts.BANK_WITHDRAWAL_FAILED
        assert (await sessions.get(USER_ID)).current_step is None

    @pytest.mark.asyncio
    async def test_wallet_withdrawal(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.WITHDRAW_WALLET)
        await _say(service, WALLET_ADDRESS)
        await _say(service, "ethereum")

        reply = await _say(service, "5")
        session = await sessions.get(USER_ID)
        assert session.scratch == WalletWithdrawScratch(address=WALLET_ADDRESS, network="ethereum", amount="5")
        assert reply.actions == [Action.CONFIRM_WALLET_WITHDRAWAL, Action.CANCEL]

        reply = await _act(service, Action.CONFIRM_WALLET_WITHDRAWAL)

        assert "Withdrawal Successful" in reply.text
        calls = backend.calls_to("send_to_wallet")
        assert len(calls) == 1
        assert calls[0]["description"] == texts.WITHDRAW_DESCRIPTION
        assert calls[0]["network"] == "ethereum"

    @pytest.mark.asyncio
    async def test_confirm_of_other_flow_is_session_error(self, service, sessions, backend) -> None:
        await save_authenticated(sessions)
        await _act(service, Action.WITHDRAW_BANK)
        await _say(service, "100")

        reply = await _act(service, Action.CONFIRM_EMAIL_TRANSFER)

        assert reply.text == texts.SESSION_ERROR
        assert (await sessions.get(USER_ID)).current_step == Step.CONFIRM_BANK_WITHDRAWAL
        assert backend.calls_to("withdraw_to_bank") == []
        assert backend.calls_to("send_to_email") == []
