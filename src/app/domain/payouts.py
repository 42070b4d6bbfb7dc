"""Modelos de domínio da API de payouts.

Espelham as respostas do backend (camelCase) com nomes Python;
`populate_by_name` permite construir também pelos nomes snake_case.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class OtpChallenge(_ApiModel):
    """Resposta de solicitação de OTP; `sid` identifica a troca."""

    email: str
    exchange_id: str = Field(alias="sid")


class UserProfile(_ApiModel):
    id: str = ""
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    organization_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.first_name or "User"


class AuthResult(_ApiModel):
    """Resultado da autenticação por OTP."""

    access_token: str
    user: UserProfile

    @property
    def organization_id(self) -> str | None:
        return self.user.organization_id


class KycStatus(_ApiModel):
    id: str = ""
    status: str
    type: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status.lower() == "approved"


class Wallet(_ApiModel):
    id: str
    network: str = ""
    wallet_address: str = Field(
        default="",
        validation_alias=AliasChoices("walletAddress", "address", "wallet_address"),
    )
    is_default: bool = False

    @property
    def short_address(self) -> str:
        return f"{self.wallet_address[:10]}..." if self.wallet_address else "-"


class TokenBalance(_ApiModel):
    balance: str
    symbol: str
    decimals: int = 6
    address: str = ""


class WalletBalances(_ApiModel):
    wallet_id: str
    is_default: bool = False
    network: str = ""
    balances: list[TokenBalance] = Field(default_factory=list)


class TransferResult(_ApiModel):
    """Resposta de uma movimentação (envio ou saque)."""

    id: str
    status: str = "pending"


class Transfer(_ApiModel):
    """Item do histórico de transferências."""

    id: str
    amount: str
    currency: str = ""
    status: str = ""
    type: str = ""
    created_at: datetime | None = None
    to_address: str | None = None
    recipient_email: str | None = None

    @property
    def description(self) -> str:
        if self.type == "deposit":
            return "📥 Deposit"
        if self.type == "withdrawal":
            return "📤 Withdrawal"
        if self.type == "email_transfer":
            return f"📧 Email Transfer to {self.recipient_email or 'user'}"
        if self.type == "wallet_transfer":
            target = f"{self.to_address[:10]}..." if self.to_address else "address"
            return f"🔑 Wallet Transfer to {target}"
        return f"💸 {self.type}"


class ChannelAuthorization(_ApiModel):
    """Credencial de curta duração para canal privado de push."""

    auth: str
    channel_data: str | None = None


class DepositEvent(_ApiModel):
    """Evento `deposit` recebido pelo canal da organização."""

    amount: str
    currency: str = ""
    network: str = ""
    transaction_id: str = ""
    timestamp: datetime | None = None

    @property
    def received_at(self) -> datetime:
        return self.timestamp or datetime.now(UTC)

