"""Scratch por fluxo (união etiquetada).

Cada fluxo lê apenas a própria variante; a variante de outro fluxo é
tratada como ausente. Entrar em um fluxo substitui a variante anterior,
então restos de um fluxo abandonado nunca vazam para o próximo.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, TypeVar

from fsm.states import Flow


@dataclass(frozen=True, slots=True)
class AuthScratch:
    flow: ClassVar[Flow] = Flow.AUTH

    email: str | None = None
    exchange_id: str | None = None


@dataclass(frozen=True, slots=True)
class SendEmailScratch:
    flow: ClassVar[Flow] = Flow.SEND_EMAIL

    recipient_email: str | None = None
    amount: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.recipient_email and self.amount)


@dataclass(frozen=True, slots=True)
class SendWalletScratch:
    flow: ClassVar[Flow] = Flow.SEND_WALLET

    address: str | None = None
    network: str | None = None
    amount: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.address and self.network and self.amount)


@dataclass(frozen=True, slots=True)
class BankWithdrawScratch:
    flow: ClassVar[Flow] = Flow.WITHDRAW_BANK

    amount: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.amount)


@dataclass(frozen=True, slots=True)
class WalletWithdrawScratch:
    flow: ClassVar[Flow] = Flow.WITHDRAW_WALLET

    address: str | None = None
    network: str | None = None
    amount: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.address and self.network and self.amount)


@dataclass(frozen=True, slots=True)
class WalletSelectionScratch:
    flow: ClassVar[Flow] = Flow.WALLET_SELECTION

    wallet_ids: tuple[str, ...] = field(default_factory=tuple)


Scratch = (
    AuthScratch
    | SendEmailScratch
    | SendWalletScratch
    | BankWithdrawScratch
    | WalletWithdrawScratch
    | WalletSelectionScratch
)

SCRATCH_TYPES: dict[Flow, type[Scratch]] = {
    cls.flow: cls
    for cls in (
        AuthScratch,
        SendEmailScratch,
        SendWalletScratch,
        BankWithdrawScratch,
        WalletWithdrawScratch,
        WalletSelectionScratch,
    )
}

S = TypeVar("S", bound=Scratch)


def empty_scratch_for(flow: Flow) -> Scratch:
    """Variante vazia do fluxo (usada na entrada do fluxo)."""
    return SCRATCH_TYPES[flow]()


def scratch_to_dict(scratch: Scratch | None) -> dict[str, Any] | None:
    if scratch is None:
        return None
    data = asdict(scratch)
    if isinstance(scratch, WalletSelectionScratch):
        data["wallet_ids"] = list(scratch.wallet_ids)
    return {"flow": scratch.flow.value, "data": data}


def scratch_from_dict(data: dict[str, Any] | None) -> Scratch | None:
    """Deserializa scratch persistido; formato desconhecido vira None."""
    if not data:
        return None
    try:
        cls = SCRATCH_TYPES[Flow(data.get("flow", ""))]
    except ValueError:
        return None
    fields = dict(data.get("data") or {})
    if cls is WalletSelectionScratch:
        fields["wallet_ids"] = tuple(fields.get("wallet_ids") or ())
    try:
        return cls(**fields)
    except TypeError:
        return None
