"""Textos exibidos ao usuário no chat.

Textos com `*`/`_` são enviados com parse_mode Markdown; os textos de
middleware (sem marcação) vão como texto puro.
"""

from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.payouts import DepositEvent, Transfer, UserProfile, Wallet, WalletBalances

SUPPORT_URL = "https://t.me/copperxcommunity/2183"

MARKDOWN_SPECIAL_CHARS = ("_", "*", "`", "[")


def escape_markdown(value: object) -> str:
    """Escapa metacaracteres do Markdown legado para interpolar fora de entidades."""
    text = str(value)
    for char in MARKDOWN_SPECIAL_CHARS:
        text = text.replace(char, f"\\{char}")
    return text


def bold(value: object) -> str:
    """Negrito seguro: o Markdown legado não aceita escape dentro de entidades.

    Valores com metacaracteres saem como texto escapado, sem negrito.
    """
    text = str(value)
    if "\\" in text or any(char in text for char in MARKDOWN_SPECIAL_CHARS):
        return escape_markdown(text)
    return f"*{text}*"


def code(value: object) -> str:
    text = str(value)
    if "`" in text:
        return escape_markdown(text)
    return f"`{text}`"


# ---- middleware ---------------------------------------------------------

GENERIC_ERROR = (
    "❌ An error occurred while processing your request.\n\n"
    f"Please try again later or contact support: {SUPPORT_URL}"
)
SESSION_EXPIRED = (
    "⏱️ Your session has expired for security reasons.\n\n"
    "Please use /login to authenticate again."
)
LOGIN_REQUIRED = (
    "🔒 You need to log in before using this feature.\n\n"
    "Use /login to authenticate with your Copperx account."
)

# ---- geral --------------------------------------------------------------

MAIN_MENU = "🏠 *Main Menu*\n\nPlease select an option from the menu below:"
CANCELLED = "❌ Operation cancelled.\n\nWhat would you like to do next?"
LOGIN_CANCELLED = "❌ Login process cancelled.\n\nUse /login to try again."
NOTHING_TO_CANCEL = "Nothing to cancel.\n\nWhat would you like to do next?"
IDLE_HINT = "🤔 I didn't understand that.\n\nPlease choose an option from the menu below:"
UNKNOWN_ACTION = "❌ This option is no longer available.\n\nPlease choose an option from the menu below:"
SESSION_ERROR = "❌ *Error*\n\nSession error. Please restart the process."
HELP = (
    "📌 *Copperx Payout Bot Help*\n\n"
    "*Available Commands:*\n"
    "/start - Start the bot and get a welcome message\n"
    "/login - Login to your Copperx account\n"
    "/balance - Check your wallet balances\n"
    "/send - Send funds to email or wallet\n"
    "/withdraw - Withdraw funds to bank or external wallet\n"
    "/deposit - Get deposit information\n"
    "/transactions - View your recent transactions\n"
    "/settings - Manage your settings\n"
    "/logout - Logout from your account\n\n"
    f"Need more help? Contact support at {SUPPORT_URL}"
)


def welcome(name: str) -> str:
    return (
        f"👋 Hello, {name}!\n\n"
        "Welcome to the Copperx Payout Bot. This bot allows you to manage your Copperx "
        "account, view balances, send funds, and more directly from Telegram.\n\n"
        "🔐 To get started, please use /login to authenticate with your Copperx account.\n\n"
        f"Need help? Use /help to see all available commands or contact support at {SUPPORT_URL}"
    )


def welcome_back(name: str) -> str:
    return f"👋 Welcome back, {escape_markdown(name)}!\n\n" + MAIN_MENU


# ---- autenticação -------------------------------------------------------

LOGIN_PROMPT = "🔐 *Login to Copperx*\n\nPlease enter the email address associated with your Copperx account:"
ALREADY_LOGGED_IN = "✅ You are already logged in.\n\nUse /logout first if you want to switch accounts."
INVALID_EMAIL = "❌ *Invalid Email Format*\n\nPlease enter a valid email address:"
OTP_REQUEST_FAILED = (
    "❌ *Error Requesting OTP*\n\n"
    "We couldn't send an OTP to this email. Please check if the email is correct and try again."
)
INVALID_OTP = "❌ *Invalid OTP Format*\n\nPlease enter a valid 6-digit OTP:"
LOGIN_SESSION_ERROR = "❌ *Error*\n\nSession error. Please restart the login process with /login."
AUTH_FAILED = (
    "❌ *Authentication Failed*\n\n"
    "The OTP you entered is invalid or has expired. Please try again."
)
LOGGED_OUT = "👋 You have been successfully logged out.\n\nUse /login to authenticate again."


def otp_sent(email: str) -> str:
    return (
        "📧 *Email OTP Sent*\n\n"
        f"We've sent a one-time password to {escape_markdown(email)}.\n\n"
        "Please enter the OTP you received:"
    )


def login_success(name: str) -> str:
    return (
        "✅ *Login Successful*\n\n"
        f"Welcome back, {escape_markdown(name)}!\n\n"
        "You're now logged in to your Copperx account."
    )


def kyc_warning(status: str) -> str:
    return (
        f"⚠️ {bold(f'KYC Status: {escape_markdown(status)}')}\n\n"
        "Your KYC verification is not complete. Some features may be limited.\n\n"
        "Please complete your KYC verification on the Copperx platform."
    )


# ---- saldos / carteiras -------------------------------------------------

BALANCES_FAILED = "❌ *Error*\n\nFailed to fetch your balances. Please try again later."
NO_BALANCES = "You don't have any wallet balances yet."
DEPOSIT_FAILED = "❌ *Error*\n\nFailed to fetch your deposit information. Please try again later."
SETTINGS = "⚙️ *Settings*\n\nManage your account and wallet settings:"
PROFILE_FAILED = "❌ *Error*\n\nFailed to fetch your profile. Please try again later."
SELECT_DEFAULT_WALLET = "🔄 *Set Default Wallet*\n\nSelect a wallet to set as your default:"
NO_WALLETS = "❌ *No Wallets Available*\n\nYou don't have any wallets yet."
WALLETS_FAILED = "❌ *Error*\n\nFailed to fetch your wallets. Please try again later."
DEFAULT_WALLET_UPDATED = "✅ *Default Wallet Updated*\n\nYour default wallet has been updated successfully."
DEFAULT_WALLET_FAILED = "❌ *Error*\n\nFailed to set default wallet. Please try again later."
UNKNOWN_WALLET = "❌ *Error*\n\nThis wallet is not in the list. Please select one of the wallets below:"
WALLET_SELECTION_EXPECTED = "Please select a wallet using the buttons below, or cancel."
TRANSACTIONS_FAILED = "❌ *Error*\n\nFailed to fetch your transactions. Please try again later."
NO_TRANSACTIONS = "📋 *Recent Transactions*\n\nYou don't have any transactions yet."


def balances(wallets: Sequence[WalletBalances]) -> str:
    if not wallets:
        return NO_BALANCES
    lines = ["💰 *Your Wallet Balances*", ""]
    for wallet in wallets:
        suffix = " (default)" if wallet.is_default else ""
        lines.append(f"{bold(wallet.network or 'wallet')}{suffix}")
        if not wallet.balances:
            lines.append("• Available: 0")
        for token in wallet.balances:
            lines.append(f"• Available: {escape_markdown(token.balance)} {escape_markdown(token.symbol)}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def available_balances(wallets: Sequence[WalletBalances]) -> str:
    """Bloco de saldo exibido na entrada dos fluxos de envio/saque."""
    lines = ["💰 *Available Balances*", ""]
    for wallet in wallets:
        for token in wallet.balances:
            lines.append(f"• Available: {escape_markdown(token.balance)} {escape_markdown(token.symbol)}")
    return "\n".join(lines)


def no_funds(verb: str) -> str:
    return f"❌ *No Funds Available*\n\nYou don't have any funds available to {verb}."


def deposit_info(wallet: Wallet, currency: str) -> str:
    network = escape_markdown(wallet.network or "default")
    currency = escape_markdown(currency)
    return (
        "📥 *Deposit Information*\n\n"
        f"To deposit funds to your Copperx account, send {currency} to the address below "
        f"on the {network} network.\n\n"
        f"*Address* ({network}):\n"
        f"{code(wallet.wallet_address)}\n\n"
        f"⚠️ Make sure to send only {currency} on the {network} network to this address. "
        "Sending other tokens may result in loss of funds."
    )


def profile(user: UserProfile) -> str:
    name = " ".join(part for part in (user.first_name, user.last_name) if part) or "N/A"
    return (
        "👤 *User Profile*\n\n"
        f"*Name:* {escape_markdown(name)}\n"
        f"*Email:* {escape_markdown(user.email or 'N/A')}\n"
        f"*Organization ID:* {escape_markdown(user.organization_id or 'N/A')}"
    )


def transactions(items: Sequence[Transfer], page: int) -> str:
    if not items:
        return NO_TRANSACTIONS
    header = "📋 *Recent Transactions*" + (f" (page {page})" if page > 1 else "")
    blocks = [header, ""]
    for item in items:
        date = item.created_at.strftime("%Y-%m-%d %H:%M") if item.created_at else "-"
        blocks.append(
            f"{bold(item.description)}\n"
            f"• Amount: {escape_markdown(item.amount)} {escape_markdown(item.currency)}\n"
            f"• Status: {escape_markdown(item.status)}\n"
            f"• Date: {date}\n"
        )
    return "\n".join(blocks)


# ---- envio / saque ------------------------------------------------------

SEND_OPTIONS = "💸 *Send Money*\n\nHow would you like to send funds?"
WITHDRAW_OPTIONS = "📤 *Withdraw*\n\nWhere would you like to withdraw your funds?"
SEND_EMAIL_PROMPT = "📧 *Send to Email*\n\nPlease enter the recipient's email address:"
SEND_WALLET_PROMPT = "🔑 *Send to Wallet*\n\nPlease enter the recipient's wallet address:"
WITHDRAW_BANK_PROMPT = (
    "🏦 *Withdraw to Bank Account*\n\n"
    "Please enter the amount you wish to withdraw (e.g., 100):"
)
WITHDRAW_WALLET_PROMPT = (
    "🔑 *Withdraw to External Wallet*\n\n"
    "Please enter the wallet address you wish to withdraw to:"
)
INVALID_RECIPIENT_EMAIL = "❌ *Invalid Email Format*\n\nPlease enter a valid recipient email address:"
INVALID_ADDRESS = "❌ *Invalid Wallet Address*\n\nPlease enter a valid wallet address (no spaces):"
INVALID_AMOUNT = "❌ *Invalid Amount*\n\nPlease enter a valid positive number (e.g., 100):"
NETWORK_PROMPT = (
    "🌐 *Network Selection*\n\n"
    "Please select the network for this transfer:\n\n"
    "1. Solana\n"
    "2. Ethereum\n\n"
    "Reply with the number or name of the network:"
)
INVALID_NETWORK = (
    "❌ *Invalid Network*\n\n"
    "Please select a valid network:\n\n"
    "1. Solana\n"
    "2. Ethereum"
)
CONFIRM_EXPECTED = "Please use the buttons below to confirm or cancel."
TRANSFER_FAILED = (
    "❌ *Transfer Failed*\n\n"
    "We couldn't process your transfer. Please try again later or contact support."
)
WALLET_WITHDRAWAL_FAILED = (
    "❌ *Withdrawal Failed*\n\n"
    "We couldn't process your withdrawal. Please try again later or contact support."
)
BANK_WITHDRAWAL_FAILED = (
    "❌ *Withdrawal Failed*\n\n"
    "We couldn't process your withdrawal. This might be due to insufficient funds "
    "or minimum withdrawal requirements. Please try again later or contact support."
)

SEND_DESCRIPTION = "Sent via Telegram bot"
WITHDRAW_DESCRIPTION = "Withdrawn via Telegram bot"


def short_address(address: str) -> str:
    """Abrevia endereços longos: 15 primeiros + ... + 15 últimos."""
    if len(address) <= 33:
        return address
    return f"{address[:15]}...{address[-15:]}"


def amount_prompt(recipient: str, verb: str = "send") -> str:
    return (
        "💰 *Amount*\n\n"
        f"Recipient: {escape_markdown(recipient)}\n\n"
        f"Please enter the amount you wish to {verb} (e.g., 100):"
    )


def confirm_email_transfer(amount: str, currency: str, email: str) -> str:
    return (
        "✅ *Confirm Transfer*\n\n"
        f"You are about to send {bold(f'{amount} {currency}')} to:\n{escape_markdown(email)}\n\n"
        "Is this correct?"
    )


def confirm_wallet_transfer(amount: str, currency: str, address: str, network: str) -> str:
    return (
        "✅ *Confirm Transfer*\n\n"
        f"You are about to send {bold(f'{amount} {currency}')} to:\n{escape_markdown(short_address(address))}\n"
        f"Network: {escape_markdown(network)}\n\n"
        "Is this correct?"
    )


def confirm_bank_withdrawal(amount: str, currency: str) -> str:
    return (
        "✅ *Confirm Bank Withdrawal*\n\n"
        f"You are about to withdraw {bold(f'{amount} {currency}')} to your bank account.\n\n"
        "Is this correct?"
    )


def confirm_wallet_withdrawal(amount: str, currency: str, address: str, network: str) -> str:
    return (
        "✅ *Confirm Wallet Withdrawal*\n\n"
        f"You are about to withdraw {bold(f'{amount} {currency}')} to:\n{escape_markdown(short_address(address))}\n"
        f"Network: {escape_markdown(network)}\n\n"
        "Is this correct?"
    )


def transfer_success(amount: str, currency: str, destination: str, transfer_id: str, status: str) -> str:
    return (
        "✅ *Transfer Successful*\n\n"
        f"You have successfully sent {bold(f'{amount} {currency}')} to:\n{escape_markdown(destination)}\n\n"
        f"Transaction ID: {code(transfer_id)}\n"
        f"Status: {escape_markdown(status)}"
    )


def bank_withdrawal_success(amount: str, currency: str, transfer_id: str, status: str) -> str:
    return (
        "✅ *Withdrawal Initiated*\n\n"
        f"You have successfully initiated a withdrawal of {bold(f'{amount} {currency}')} to your bank account.\n\n"
        f"Transaction ID: {code(transfer_id)}\n"
        f"Status: {escape_markdown(status)}\n\n"
        "Note: Bank withdrawals typically take 1-3 business days to process."
    )


def wallet_withdrawal_success(amount: str, currency: str, address: str, transfer_id: str, status: str) -> str:
    return (
        "✅ *Withdrawal Successful*\n\n"
        f"You have successfully withdrawn {bold(f'{amount} {currency}')} to:\n"
        f"{escape_markdown(short_address(address))}\n\n"
        f"Transaction ID: {code(transfer_id)}\n"
        f"Status: {escape_markdown(status)}"
    )


# ---- notificações -------------------------------------------------------


def deposit_notification(event: DepositEvent) -> str:
    received = event.received_at
    if received.tzinfo is not None:
        received = received.astimezone(UTC)
    amount = f"{event.amount} {event.currency}".strip()
    lines = ["💰 *New Deposit Received*", "", f"Amount: {bold(amount)}"]
    if event.network:
        lines.append(f"Network: {bold(event.network)}")
    lines.append(f"Date: {received.strftime('%Y-%m-%d %H:%M:%S')}")
    if event.transaction_id:
        lines.append(f"Transaction ID: {code(event.transaction_id)}")
    return "\n".join(lines)
