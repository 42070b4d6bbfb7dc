"""Protocolo de domínio para stores de dedupe."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncDedupeProtocol(ABC):
    """Contrato assíncrono para deduplicação de eventos inbound.

    Método canônico:
    - seen_async(key, ttl) -> bool
      Verifica e marca a chave atomicamente. True se já vista (duplicado);
      False se foi marcada agora (novo).
    """

    @abstractmethod
    async def seen_async(self, key: str, ttl: int) -> bool:
        """Verifica e marca a chave de forma atômica.

        Args:
            key: Chave opaca (ex.: "telegram:update:123"); nunca PII
            ttl: TTL em segundos

        Returns:
            True se duplicado; False se novo.
        """
