"""Settings do canal de push (Pusher Channels).

Notificações de depósito chegam por canais privados por organização.
Sem app_key/cluster o canal fica desabilitado (bot segue funcionando).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

PUSHER_PROTOCOL_VERSION: int = 7
PUSHER_CLIENT_NAME: str = "payout-bot-python"


@dataclass(frozen=True)
class PusherSettings:
    """Configurações do Pusher.

    Attributes:
        app_key: Chave pública do app Pusher
        cluster: Cluster do app (ex: ap1, mt1)
        connect_timeout_seconds: Timeout para handshake inicial
        channel_prefix: Prefixo dos canais privados por organização
    """

    app_key: str = ""
    cluster: str = ""
    connect_timeout_seconds: float = 15.0
    channel_prefix: str = "private-org-"

    @property
    def enabled(self) -> bool:
        """Retorna True se há configuração suficiente para conectar."""
        return bool(self.app_key and self.cluster)

    @property
    def websocket_url(self) -> str:
        """URL websocket do cluster configurado."""
        return (
            f"wss://ws-{self.cluster}.pusher.com/app/{self.app_key}"
            f"?protocol={PUSHER_PROTOCOL_VERSION}&client={PUSHER_CLIENT_NAME}"
            "&version=1.0"
        )

    def channel_for(self, organization_id: str) -> str:
        """Nome do canal privado de uma organização."""
        return f"{self.channel_prefix}{organization_id}"

    def validate(self) -> list[str]:
        """Valida configurações do Pusher.

        Configuração parcial é erro; ausência total apenas desabilita.
        """
        errors: list[str] = []
        if bool(self.app_key) != bool(self.cluster):
            errors.append("PUSHER_APP_KEY e PUSHER_CLUSTER devem ser configurados juntos")
        if self.connect_timeout_seconds <= 0:
            errors.append("PUSHER_CONNECT_TIMEOUT_SECONDS deve ser > 0")
        return errors


def _load_from_env() -> PusherSettings:
    """Carrega PusherSettings de variáveis de ambiente."""
    return PusherSettings(
        app_key=os.getenv("PUSHER_APP_KEY", ""),
        cluster=os.getenv("PUSHER_CLUSTER", ""),
        connect_timeout_seconds=float(os.getenv("PUSHER_CONNECT_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_pusher_settings() -> PusherSettings:
    """Retorna instância cacheada de PusherSettings."""
    return _load_from_env()
