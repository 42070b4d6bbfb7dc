"""Protocolo da API de backend (autenticação, carteiras, transferências).

O bearer token é passado por chamada: sessões são por usuário e o
cliente HTTP não guarda estado de autenticação.

Toda falha de transporte ou de aplicação é levantada como
BackendCallError. Chamadas de movimentação não são idempotentes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.payouts import (
        AuthResult,
        ChannelAuthorization,
        KycStatus,
        OtpChallenge,
        Transfer,
        TransferResult,
        UserProfile,
        Wallet,
        WalletBalances,
    )


class BackendApiProtocol(Protocol):
    """Fachada da API de backend consumida pelo core."""

    async def request_otp(self, email: str) -> OtpChallenge: ...

    async def authenticate(self, email: str, otp: str, exchange_id: str) -> AuthResult: ...

    async def get_profile(self, token: str) -> UserProfile: ...

    async def get_kyc_status(self, token: str) -> list[KycStatus]: ...

    async def list_wallets(self, token: str) -> list[Wallet]: ...

    async def get_balances(self, token: str) -> list[WalletBalances]: ...

    async def get_default_wallet(self, token: str) -> Wallet: ...

    async def set_default_wallet(self, token: str, wallet_id: str) -> Wallet: ...

    async def send_to_email(
        self,
        token: str,
        *,
        email: str,
        amount: str,
        currency: str,
        description: str,
    ) -> TransferResult: ...

    async def send_to_wallet(
        self,
        token: str,
        *,
        address: str,
        network: str,
        amount: str,
        currency: str,
        description: str,
    ) -> TransferResult: ...

    async def withdraw_to_bank(
        self,
        token: str,
        *,
        amount: str,
        currency: str,
        description: str,
    ) -> TransferResult: ...

    async def list_transfer_history(
        self,
        token: str,
        page: int,
        limit: int,
    ) -> list[Transfer]: ...

    async def authorize_push_channel(
        self,
        token: str,
        socket_id: str,
        channel_name: str,
    ) -> ChannelAuthorization: ...
