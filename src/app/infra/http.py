"""Cliente HTTP base para conectores externos (httpx).

Política de retry:
- GET (idempotente): retry com backoff exponencial em 429/5xx/timeout
- POST/PUT: nunca repetidos (movimentações não são idempotentes)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD"})


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    base_url: str = ""
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 8.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis.

    Attributes:
        status_code: Status HTTP (None em erro de transporte)
        is_retryable: Se a falha é transitória
        detail: Mensagem de erro devolvida pela API (quando houver)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable
        self.detail = detail


class HttpClient:
    """Cliente HTTP com um AsyncClient compartilhado.

    Args:
        config: Configuração (base_url, timeouts, retries)
        transport: Transport httpx opcional (ex: httpx.MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                headers=self._config.default_headers,
                timeout=self._config.timeout_seconds,
                verify=self._config.verify_ssl,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Executa requisição; retry apenas para métodos idempotentes.

        Raises:
            HttpError: Status >= 400 ou falha de transporte.
        """
        method = method.upper()
        max_retries = self._config.max_retries if method in IDEMPOTENT_METHODS else 0

        for attempt in range(max_retries + 1):
            try:
                response = await self._get_client().request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=headers,
                )
                _raise_for_status(response)
                return response
            except HttpError as exc:
                if not exc.is_retryable or attempt >= max_retries:
                    raise
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                if attempt >= max_retries:
                    raise HttpError(
                        f"http_connection_error: {type(exc).__name__}",
                        is_retryable=True,
                    ) from exc
            await _backoff_sleep(
                attempt,
                self._config.backoff_base_seconds,
                self._config.backoff_max_seconds,
            )
        raise HttpError("http_retry_exhausted", is_retryable=True)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    raise HttpError(
        "http_status_error",
        status_code=response.status_code,
        is_retryable=response.status_code == 429 or response.status_code >= 500,
        detail=_extract_detail(response),
    )


def _extract_detail(response: httpx.Response) -> str | None:
    """Extrai `message` do corpo de erro (JSON), se houver."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("description") or body.get("error")
        if isinstance(message, list):
            return "; ".join(str(item) for item in message)
        return str(message) if message else None
    return None


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff, "attempt": attempt + 1})
    await asyncio.sleep(backoff)
