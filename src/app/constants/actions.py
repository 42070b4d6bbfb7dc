"""Comandos e ações de menu (callback data) do bot."""

from __future__ import annotations

from enum import StrEnum


class Command(StrEnum):
    """Comandos digitados (sem a barra)."""

    START = "start"
    HELP = "help"
    LOGIN = "login"
    LOGOUT = "logout"
    CANCEL = "cancel"
    MENU = "menu"
    BALANCE = "balance"
    DEPOSIT = "deposit"
    TRANSACTIONS = "transactions"
    SETTINGS = "settings"
    SEND = "send"
    WITHDRAW = "withdraw"


class Action(StrEnum):
    """Ações de botões inline."""

    MAIN_MENU = "main_menu"
    CANCEL = "cancel"
    HELP = "help"
    BALANCE = "balance"
    DEPOSIT = "deposit"
    TRANSACTIONS = "transactions"
    SETTINGS = "settings"
    SEND_MONEY = "send_money"
    SEND_EMAIL = "send_email"
    SEND_WALLET = "send_wallet"
    WITHDRAW = "withdraw"
    WITHDRAW_BANK = "withdraw_bank"
    WITHDRAW_WALLET = "withdraw_wallet"
    VIEW_PROFILE = "view_profile"
    SET_DEFAULT_WALLET = "set_default_wallet"
    CONFIRM_EMAIL_TRANSFER = "confirm_email_transfer"
    CONFIRM_WALLET_TRANSFER = "confirm_wallet_transfer"
    CONFIRM_BANK_WITHDRAWAL = "confirm_bank_withdrawal"
    CONFIRM_WALLET_WITHDRAWAL = "confirm_wallet_withdrawal"


# Ações parametrizadas: wallet_<id>, tx_page_<n>
WALLET_ACTION_PREFIX = "wallet_"
TX_PAGE_ACTION_PREFIX = "tx_page_"


def wallet_action(wallet_id: str) -> str:
    return f"{WALLET_ACTION_PREFIX}{wallet_id}"


def tx_page_action(page: int) -> str:
    return f"{TX_PAGE_ACTION_PREFIX}{page}"


def parse_wallet_action(value: str) -> str | None:
    """Extrai o wallet_id de `wallet_<id>`; None se não for essa ação."""
    if not value.startswith(WALLET_ACTION_PREFIX):
        return None
    wallet_id = value[len(WALLET_ACTION_PREFIX) :]
    return wallet_id or None


def parse_tx_page_action(value: str) -> int | None:
    if not value.startswith(TX_PAGE_ACTION_PREFIX):
        return None
    raw = value[len(TX_PAGE_ACTION_PREFIX) :]
    if not raw.isdigit() or int(raw) < 1:
        return None
    return int(raw)
