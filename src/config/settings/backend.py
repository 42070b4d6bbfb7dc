"""Settings da API de backend (payouts).

Configurações do cliente HTTP que executa autenticação, consulta de
carteiras e movimentação de fundos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class BackendApiSettings:
    """Configurações da API de backend.

    Attributes:
        base_url: URL base da API (ex: https://income-api.copperx.io/api)
        request_timeout_seconds: Timeout por requisição
        max_retries: Tentativas para GETs idempotentes (POST/PUT nunca repetem)
        transfer_currency: Moeda usada em transferências e saques
        history_page_size: Itens por página no histórico de transferências
    """

    base_url: str = ""
    request_timeout_seconds: float = 10.0
    max_retries: int = 2
    transfer_currency: str = "USDC"
    history_page_size: int = 5

    def validate(self) -> list[str]:
        """Valida configurações da API de backend."""
        errors: list[str] = []
        if not self.base_url:
            errors.append("API_BASE_URL não configurado")
        elif not self.base_url.startswith(("http://", "https://")):
            errors.append(f"API_BASE_URL inválido: {self.base_url}")
        if self.request_timeout_seconds <= 0:
            errors.append("API_REQUEST_TIMEOUT_SECONDS deve ser > 0")
        if self.max_retries < 0:
            errors.append("API_MAX_RETRIES deve ser >= 0")
        if self.history_page_size < 1:
            errors.append("API_HISTORY_PAGE_SIZE deve ser >= 1")
        return errors


def _load_from_env() -> BackendApiSettings:
    """Carrega BackendApiSettings de variáveis de ambiente."""
    return BackendApiSettings(
        base_url=os.getenv("API_BASE_URL", "").rstrip("/"),
        request_timeout_seconds=float(os.getenv("API_REQUEST_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("API_MAX_RETRIES", "2")),
        transfer_currency=os.getenv("API_TRANSFER_CURRENCY", "USDC"),
        history_page_size=int(os.getenv("API_HISTORY_PAGE_SIZE", "5")),
    )


@lru_cache(maxsize=1)
def get_backend_api_settings() -> BackendApiSettings:
    """Retorna instância cacheada de BackendApiSettings."""
    return _load_from_env()
