"""Teclados inline do bot (linhas de Button)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.constants.actions import Action, tx_page_action, wallet_action
from app.protocols.models import Button, Keyboard

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.payouts import Wallet

BACK_TO_MENU = Button("🔙 Back to Menu", Action.MAIN_MENU)
CANCEL = Button("❌ Cancel", Action.CANCEL)

MAIN_MENU: Keyboard = (
    (Button("💰 Balance", Action.BALANCE), Button("💸 Send Money", Action.SEND_MONEY)),
    (Button("📤 Withdraw", Action.WITHDRAW), Button("📥 Deposit", Action.DEPOSIT)),
    (Button("📋 Transaction History", Action.TRANSACTIONS),),
    (Button("⚙️ Settings", Action.SETTINGS), Button("ℹ️ Help", Action.HELP)),
)

CANCEL_ONLY: Keyboard = ((CANCEL,),)

BACK_ONLY: Keyboard = ((BACK_TO_MENU,),)

SEND_OPTIONS: Keyboard = (
    (Button("📧 Send to Email", Action.SEND_EMAIL),),
    (Button("🔑 Send to Wallet", Action.SEND_WALLET),),
    (BACK_TO_MENU,),
)

WITHDRAW_OPTIONS: Keyboard = (
    (Button("🏦 To Bank Account", Action.WITHDRAW_BANK),),
    (Button("🔑 To External Wallet", Action.WITHDRAW_WALLET),),
    (BACK_TO_MENU,),
)

SETTINGS: Keyboard = (
    (Button("🔄 Set Default Wallet", Action.SET_DEFAULT_WALLET),),
    (Button("👤 View Profile", Action.VIEW_PROFILE),),
    (BACK_TO_MENU,),
)


def confirm(confirm_action: str) -> Keyboard:
    return ((Button("✅ Confirm", confirm_action), CANCEL),)


def balance(has_balances: bool) -> Keyboard:
    if not has_balances:
        return BACK_ONLY
    return (
        (Button("📥 Deposit", Action.DEPOSIT), Button("📤 Withdraw", Action.WITHDRAW)),
        (BACK_TO_MENU,),
    )


def wallets(items: Sequence[Wallet]) -> Keyboard:
    rows: list[tuple[Button, ...]] = []
    for wallet in items:
        mark = "✅ " if wallet.is_default else ""
        label = f"{mark}{wallet.network or 'wallet'}: {wallet.short_address}"
        rows.append((Button(label, wallet_action(wallet.id)),))
    rows.append((Button("🔙 Back", Action.MAIN_MENU),))
    return tuple(rows)


def history(page: int, has_more: bool) -> Keyboard:
    nav: list[Button] = []
    if page > 1:
        nav.append(Button("⬅️ Previous", tx_page_action(page - 1)))
    if has_more:
        nav.append(Button("➡️ Next", tx_page_action(page + 1)))
    rows: list[tuple[Button, ...]] = [tuple(nav)] if nav else []
    rows.append((BACK_TO_MENU,))
    return tuple(rows)
