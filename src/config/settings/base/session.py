"""Settings de sessão/conversação.

Sessões são por usuário do canal; a autenticação expira após
um período de inatividade.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

SessionStoreBackend = Literal["memory", "redis"]

# 1 hora sem atividade invalida a sessão autenticada
DEFAULT_INACTIVITY_TIMEOUT_SECONDS = 3600
DEFAULT_SESSION_TTL_SECONDS = 7 * 24 * 3600


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão/conversação.

    Attributes:
        inactivity_timeout_seconds: Inatividade que expira a autenticação
        ttl_seconds: TTL de persistência da sessão no store
        store_backend: Backend para armazenamento de sessão
    """

    inactivity_timeout_seconds: int = DEFAULT_INACTIVITY_TIMEOUT_SECONDS
    ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    store_backend: SessionStoreBackend = "memory"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.inactivity_timeout_seconds <= 0:
            errors.append("SESSION_INACTIVITY_TIMEOUT_SECONDS deve ser > 0")

        if self.ttl_seconds < self.inactivity_timeout_seconds:
            errors.append("SESSION_TTL_SECONDS deve ser >= SESSION_INACTIVITY_TIMEOUT_SECONDS")

        if self.store_backend not in {"memory", "redis"}:
            errors.append(f"SESSION_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("SESSION_STORE_BACKEND=redis requer REDIS_URL configurado")

        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    backend_str = os.getenv("SESSION_STORE_BACKEND", "memory").lower()
    backend: SessionStoreBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    return SessionSettings(
        inactivity_timeout_seconds=int(
            os.getenv(
                "SESSION_INACTIVITY_TIMEOUT_SECONDS",
                str(DEFAULT_INACTIVITY_TIMEOUT_SECONDS),
            )
        ),
        ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", str(DEFAULT_SESSION_TTL_SECONDS))),
        store_backend=backend,
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
