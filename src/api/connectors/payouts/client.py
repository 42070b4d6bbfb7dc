"""Cliente HTTP da API de backend de payouts.

Implementa BackendApiProtocol sobre o HttpClient genérico:
- Bearer token por chamada (o cliente não guarda sessão)
- Respostas validadas com modelos pydantic
- Toda falha vira BackendCallError(operation, status_code)
- Logging sem tokens, e-mails ou OTP
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

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
from app.infra.http import HttpClient, HttpClientConfig, HttpError
from app.observability import record_latency
from utils.errors import BackendCallError

if TYPE_CHECKING:
    import httpx

    from config.settings import BackendApiSettings

logger: logging.Logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_KYC_LIST = TypeAdapter(list[KycStatus])
_WALLET_LIST = TypeAdapter(list[Wallet])
_BALANCES_LIST = TypeAdapter(list[WalletBalances])
_TRANSFER_LIST = TypeAdapter(list[Transfer])


class PayoutApiClient:
    """Fachada HTTP da API de backend.

    Args:
        http: HttpClient já configurado com base_url
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    @classmethod
    def from_settings(
        cls,
        settings: BackendApiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PayoutApiClient:
        config = HttpClientConfig(
            base_url=settings.base_url,
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
            default_headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        return cls(HttpClient(config, transport=transport))

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---- auth -----------------------------------------------------------

    async def request_otp(self, email: str) -> OtpChallenge:
        data = await self._call("request_otp", "POST", "/auth/email-otp/request", json={"email": email})
        return self._parse_model("request_otp", OtpChallenge, data)

    async def authenticate(self, email: str, otp: str, exchange_id: str) -> AuthResult:
        data = await self._call(
            "authenticate",
            "POST",
            "/auth/email-otp/authenticate",
            json={"email": email, "otp": otp, "sid": exchange_id},
        )
        return self._parse_model("authenticate", AuthResult, data)

    async def get_profile(self, token: str) -> UserProfile:
        data = await self._call("get_profile", "GET", "/auth/me", token=token)
        return self._parse_model("get_profile", UserProfile, data)

    async def get_kyc_status(self, token: str) -> list[KycStatus]:
        data = await self._call("get_kyc_status", "GET", "/kycs", token=token)
        return self._parse_list("get_kyc_status", _KYC_LIST, data)

    # ---- wallets --------------------------------------------------------

    async def list_wallets(self, token: str) -> list[Wallet]:
        data = await self._call("list_wallets", "GET", "/wallets", token=token)
        return self._parse_list("list_wallets", _WALLET_LIST, data)

    async def get_balances(self, token: str) -> list[WalletBalances]:
        data = await self._call("get_balances", "GET", "/wallets/balances", token=token)
        return self._parse_list("get_balances", _BALANCES_LIST, data)

    async def get_default_wallet(self, token: str) -> Wallet:
        data = await self._call("get_default_wallet", "GET", "/wallets/default", token=token)
        return self._parse_model("get_default_wallet", Wallet, data)

    async def set_default_wallet(self, token: str, wallet_id: str) -> Wallet:
        data = await self._call(
            "set_default_wallet",
            "PUT",
            "/wallets/default",
            token=token,
            json={"walletId": wallet_id},
        )
        return self._parse_model("set_default_wallet", Wallet, data)

    # ---- transfers ------------------------------------------------------

    async def send_to_email(
        self,
        token: str,
        *,
        email: str,
        amount: str,
        currency: str,
        description: str,
    ) -> TransferResult:
        data = await self._call(
            "send_to_email",
            "POST",
            "/transfers/send",
            token=token,
            json={
                "email": email,
                "amount": amount,
                "currency": currency,
                "description": description,
            },
        )
        return self._parse_model("send_to_email", TransferResult, data)

    async def send_to_wallet(
        self,
        token: str,
        *,
        address: str,
        network: str,
        amount: str,
        currency: str,
        description: str,
    ) -> TransferResult:
        data = await self._call(
            "send_to_wallet",
            "POST",
            "/transfers/wallet-withdraw",
            token=token,
            json={
                "toAddress": address,
                "network": network,
                "amount": amount,
                "currency": currency,
                "description": description,
            },
        )
        return self._parse_model("send_to_wallet", TransferResult, data)

    async def withdraw_to_bank(
        self,
        token: str,
        *,
        amount: str,
        currency: str,
        description: str,
    ) -> TransferResult:
        data = await self._call(
            "withdraw_to_bank",
            "POST",
            "/transfers/offramp",
            token=token,
            json={"amount": amount, "currency": currency, "description": description},
        )
        return self._parse_model("withdraw_to_bank", TransferResult, data)

    async def list_transfer_history(self, token: str, page: int, limit: int) -> list[Transfer]:
        data = await self._call(
            "list_transfer_history",
            "GET",
            "/transfers",
            token=token,
            params={"page": page, "limit": limit},
        )
        # A API pode devolver a lista direto ou paginada em {"data": [...]}
        if isinstance(data, dict):
            data = data.get("data", [])
        return self._parse_list("list_transfer_history", _TRANSFER_LIST, data)

    # ---- notifications --------------------------------------------------

    async def authorize_push_channel(
        self,
        token: str,
        socket_id: str,
        channel_name: str,
    ) -> ChannelAuthorization:
        data = await self._call(
            "authorize_push_channel",
            "POST",
            "/notifications/auth",
            token=token,
            json={"socket_id": socket_id, "channel_name": channel_name},
        )
        return self._parse_model("authorize_push_channel", ChannelAuthorization, data)

    # ---- internals ------------------------------------------------------

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        started = time.perf_counter()
        try:
            response = await self._http.request(method, path, json=json, params=params, headers=headers)
        except HttpError as exc:
            logger.warning(
                "backend_call_failed",
                extra={
                    "operation": operation,
                    "status_code": exc.status_code,
                    "retryable": exc.is_retryable,
                },
            )
            raise BackendCallError(
                exc.detail or f"{operation} failed",
                operation=operation,
                status_code=exc.status_code,
            ) from exc
        finally:
            record_latency("backend_api", operation, (time.perf_counter() - started) * 1000)

        try:
            return response.json()
        except ValueError as exc:
            logger.error("backend_invalid_json", extra={"operation": operation})
            raise BackendCallError("invalid JSON response", operation=operation) from exc

    def _parse_model(self, operation: str, model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            logger.error(
                "backend_invalid_payload",
                extra={"operation": operation, "error_count": exc.error_count()},
            )
            raise BackendCallError("unexpected response shape", operation=operation) from exc

    def _parse_list(self, operation: str, adapter: TypeAdapter[Any], data: Any) -> list[Any]:
        try:
            return adapter.validate_python(data)
        except PydanticValidationError as exc:
            logger.error(
                "backend_invalid_payload",
                extra={"operation": operation, "error_count": exc.error_count()},
            )
            raise BackendCallError("unexpected response shape", operation=operation) from exc
