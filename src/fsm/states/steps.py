"""
Passos canônicos dos fluxos conversacionais.

Cada fluxo é uma sequência fechada de passos; `None` representa o
estado ocioso (idle), fora de qualquer fluxo.
"""

from enum import StrEnum


class Flow(StrEnum):
    """Fluxos que o usuário pode executar."""

    AUTH = "auth"
    SEND_EMAIL = "send_email"
    SEND_WALLET = "send_wallet"
    WITHDRAW_BANK = "withdraw_bank"
    WITHDRAW_WALLET = "withdraw_wallet"
    WALLET_SELECTION = "wallet_selection"

    def __str__(self) -> str:
        return self.value


class Step(StrEnum):
    """
    Passos de todos os fluxos.

    O valor é persistido na sessão; nunca renomear sem migração.
    """

    # Autenticação
    AUTH_EMAIL = "auth_email"
    AUTH_OTP = "auth_otp"

    # Envio para email
    SEND_EMAIL_ADDRESS = "send_email_address"
    SEND_EMAIL_AMOUNT = "send_email_amount"
    CONFIRM_EMAIL_TRANSFER = "confirm_email_transfer"

    # Envio para carteira
    SEND_WALLET_ADDRESS = "send_wallet_address"
    SEND_WALLET_NETWORK = "send_wallet_network"
    SEND_WALLET_AMOUNT = "send_wallet_amount"
    CONFIRM_WALLET_TRANSFER = "confirm_wallet_transfer"

    # Saque para banco
    WITHDRAW_BANK_AMOUNT = "withdraw_bank_amount"
    CONFIRM_BANK_WITHDRAWAL = "confirm_bank_withdrawal"

    # Saque para carteira externa
    WITHDRAW_WALLET_ADDRESS = "withdraw_wallet_address"
    WITHDRAW_WALLET_NETWORK = "withdraw_wallet_network"
    WITHDRAW_WALLET_AMOUNT = "withdraw_wallet_amount"
    CONFIRM_WALLET_WITHDRAWAL = "confirm_wallet_withdrawal"

    # Carteira padrão
    SELECT_DEFAULT_WALLET = "select_default_wallet"

    def __str__(self) -> str:
        return self.value


class InputKind(StrEnum):
    """Classe de entrada esperada por um passo."""

    TEXT = "text"
    CONFIRMATION = "confirmation"
    SELECTION = "selection"


# Sequência ordenada de passos de cada fluxo
FLOW_STEPS: dict[Flow, tuple[Step, ...]] = {
    Flow.AUTH: (Step.AUTH_EMAIL, Step.AUTH_OTP),
    Flow.SEND_EMAIL: (
        Step.SEND_EMAIL_ADDRESS,
        Step.SEND_EMAIL_AMOUNT,
        Step.CONFIRM_EMAIL_TRANSFER,
    ),
    Flow.SEND_WALLET: (
        Step.SEND_WALLET_ADDRESS,
        Step.SEND_WALLET_NETWORK,
        Step.SEND_WALLET_AMOUNT,
        Step.CONFIRM_WALLET_TRANSFER,
    ),
    Flow.WITHDRAW_BANK: (Step.WITHDRAW_BANK_AMOUNT, Step.CONFIRM_BANK_WITHDRAWAL),
    Flow.WITHDRAW_WALLET: (
        Step.WITHDRAW_WALLET_ADDRESS,
        Step.WITHDRAW_WALLET_NETWORK,
        Step.WITHDRAW_WALLET_AMOUNT,
        Step.CONFIRM_WALLET_WITHDRAWAL,
    ),
    Flow.WALLET_SELECTION: (Step.SELECT_DEFAULT_WALLET,),
}

STEP_FLOW: dict[Step, Flow] = {
    step: flow for flow, steps in FLOW_STEPS.items() for step in steps
}

# Primeiro passo de cada fluxo (entrada permitida de qualquer passo)
FLOW_ENTRY: dict[Flow, Step] = {flow: steps[0] for flow, steps in FLOW_STEPS.items()}
ENTRY_STEPS: frozenset[Step] = frozenset(FLOW_ENTRY.values())

# Passos acessíveis sem autenticação (além de idle)
PUBLIC_STEPS: frozenset[Step] = frozenset(FLOW_STEPS[Flow.AUTH])

CONFIRM_STEPS: frozenset[Step] = frozenset({
    Step.CONFIRM_EMAIL_TRANSFER,
    Step.CONFIRM_WALLET_TRANSFER,
    Step.CONFIRM_BANK_WITHDRAWAL,
    Step.CONFIRM_WALLET_WITHDRAWAL,
})

EXPECTED_INPUT: dict[Step, InputKind] = {
    step: (
        InputKind.CONFIRMATION
        if step in CONFIRM_STEPS
        else InputKind.SELECTION
        if step == Step.SELECT_DEFAULT_WALLET
        else InputKind.TEXT
    )
    for step in Step
}


def flow_of(step: Step) -> Flow:
    """Retorna o fluxo ao qual o passo pertence."""
    return STEP_FLOW[step]


def is_public(step: Step | None) -> bool:
    """True se o passo é alcançável sem autenticação."""
    return step is None or step in PUBLIC_STEPS


def expected_input(step: Step) -> InputKind:
    """Classe de entrada que o passo aceita."""
    return EXPECTED_INPUT[step]


def parse_step(value: str | None) -> Step | None:
    """
    Converte valor persistido em Step.

    Valores desconhecidos (ex: passo removido) voltam para idle.
    """
    if not value:
        return None
    try:
        return Step(value)
    except ValueError:
        return None
