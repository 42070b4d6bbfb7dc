"""
Validação do formato da entrada de cada passo de texto.

Falha de formato nunca muda o passo nem chama o backend: o handler
apenas repete o prompt.
"""

import re
from collections.abc import Callable
from decimal import Decimal

from fsm.states.steps import Step
from utils.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_PATTERN = re.compile(r"^\d{6}$")
AMOUNT_PATTERN = re.compile(r"^\d+(\.\d+)?$")

# Atalhos do prompt de rede ("1. Solana / 2. Ethereum")
NETWORK_ALIASES: dict[str, str] = {
    "1": "solana",
    "2": "ethereum",
    "solana": "solana",
    "ethereum": "ethereum",
}

InputValidator = Callable[[str], str]


def looks_like_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


def validate_email(value: str) -> str:
    email = value.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("invalid email", field="email")
    return email


def validate_otp(value: str) -> str:
    otp = value.strip()
    if not OTP_PATTERN.match(otp):
        raise ValidationError("otp must be exactly 6 digits", field="otp")
    return otp


def validate_amount(value: str) -> str:
    """Valor decimal positivo; devolve o texto normalizado (sem espaços)."""
    amount = value.strip()
    if not AMOUNT_PATTERN.match(amount):
        raise ValidationError("invalid amount", field="amount")
    if Decimal(amount) <= 0:
        raise ValidationError("amount must be positive", field="amount")
    return amount


def validate_network(value: str) -> str:
    network = NETWORK_ALIASES.get(value.strip().lower())
    if network is None:
        raise ValidationError("unknown network", field="network")
    return network


def validate_wallet_address(value: str) -> str:
    address = value.strip()
    if not address or any(char.isspace() for char in address):
        raise ValidationError("invalid wallet address", field="address")
    return address


STEP_VALIDATORS: dict[Step, InputValidator] = {
    Step.AUTH_EMAIL: validate_email,
    Step.AUTH_OTP: validate_otp,
    Step.SEND_EMAIL_ADDRESS: validate_email,
    Step.SEND_EMAIL_AMOUNT: validate_amount,
    Step.SEND_WALLET_ADDRESS: validate_wallet_address,
    Step.SEND_WALLET_NETWORK: validate_network,
    Step.SEND_WALLET_AMOUNT: validate_amount,
    Step.WITHDRAW_BANK_AMOUNT: validate_amount,
    Step.WITHDRAW_WALLET_ADDRESS: validate_wallet_address,
    Step.WITHDRAW_WALLET_NETWORK: validate_network,
    Step.WITHDRAW_WALLET_AMOUNT: validate_amount,
}


def validate_input(step: Step, value: str) -> str:
    """
    Valida a entrada de texto de um passo.

    Raises:
        ValidationError: formato inválido para o passo
        KeyError: passo sem entrada de texto (confirmação/seleção)
    """
    return STEP_VALIDATORS[step](value)
