"""Fake in-memory da API de payouts para testes deterministas."""

from __future__ import annotations

from typing import Any

from app.domain.payouts import (
    AuthResult,
    ChannelAuthorization,
    KycStatus,
    OtpChallenge,
    TokenBalance,
    Transfer,
    TransferResult,
    UserProfile,
    Wallet,
    WalletBalances,
)
from utils.errors import BackendCallError

VALID_OTP = "123456"
ACCESS_TOKEN = "token-abc"
ORGANIZATION_ID = "org-1"


class FakeBackendApi:
    """Implementa BackendApiProtocol sem IO.

    Cada chamada fica registrada em `calls` como (operação, argumentos).
    Operações listadas em `failing` levantam BackendCallError.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failing: set[str] = set()
        self.profile = UserProfile(
            id="user-1",
            email="user@example.com",
            first_name="Ada",
            organization_id=ORGANIZATION_ID,
        )
        self.kyc: list[KycStatus] = [KycStatus(id="kyc-1", status="approved")]
        self.wallets: list[Wallet] = [
            Wallet(id="w1", network="solana", wallet_address="So1anaAddr0000000001", is_default=True),
            Wallet(id="w2", network="ethereum", wallet_address="0xEthAddr000000000002"),
        ]
        self.balances: list[WalletBalances] = [
            WalletBalances(
                wallet_id="w1",
                is_default=True,
                network="solana",
                balances=[TokenBalance(balance="250.5", symbol="USDC")],
            )
        ]
        self.history: list[Transfer] = []

    def calls_to(self, operation: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == operation]

    def _record(self, operation: str, **kwargs: Any) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.failing:
            raise BackendCallError(f"{operation} failed", operation=operation, status_code=500)

    async def request_otp(self, email: str) -> OtpChallenge:
        self._record("request_otp", email=email)
        return OtpChallenge(email=email, exchange_id="sid-1")

    async def authenticate(self, email: str, otp: str, exchange_id: str) -> AuthResult:
        self._record("authenticate", email=email, otp=otp, exchange_id=exchange_id)
        if otp != VALID_OTP:
            raise BackendCallError("invalid otp", operation="authenticate", status_code=401)
        return AuthResult(access_token=ACCESS_TOKEN, user=self.profile)

    async def get_profile(self, token: str) -> UserProfile:
        self._record("get_profile", token=token)
        return self.profile

    async def get_kyc_status(self, token: str) -> list[KycStatus]:
        self._record("get_kyc_status", token=token)
        return list(self.kyc)

    async def list_wallets(self, token: str) -> list[Wallet]:
        self._record("list_wallets", token=token)
        return list(self.wallets)

    async def get_balances(self, token: str) -> list[WalletBalances]:
        self._record("get_balances", token=token)
        return list(self.balances)

    async def get_default_wallet(self, token: str) -> Wallet:
        self._record("get_default_wallet", token=token)
        return next(wallet for wallet in self.wallets if wallet.is_default)

    async def set_default_wallet(self, token: str, wallet_id: str) -> Wallet:
        self._record("set_default_wallet", token=token, wallet_id=wallet_id)
        return next(wallet for wallet in self.wallets if wallet.id == wallet_id)

    async def send_to_email(self, token: str, **kwargs: Any) -> TransferResult:
        self._record("send_to_email", token=token, **kwargs)
        return TransferResult(id="tr-email", status="success")

    async def send_to_wallet(self, token: str, **kwargs: Any) -> TransferResult:
        self._record("send_to_wallet", token=token, **kwargs)
        return TransferResult(id="tr-wallet", status="pending")

    async def withdraw_to_bank(self, token: str, **kwargs: Any) -> TransferResult:
        self._record("withdraw_to_bank", token=token, **kwargs)
        return TransferResult(id="tr-bank", status="pending")

    async def list_transfer_history(self, token: str, page: int, limit: int) -> list[Transfer]:
        self._record("list_transfer_history", token=token, page=page, limit=limit)
        start = (page - 1) * limit
        return self.history[start : start + limit]

    async def authorize_push_channel(
        self,
        token: str,
        socket_id: str,
        channel_name: str,
    ) -> ChannelAuthorization:
        self._record("authorize_push_channel", token=token, socket_id=socket_id, channel_name=channel_name)
        return ChannelAuthorization(auth=f"key:{socket_id}:{channel_name}")
