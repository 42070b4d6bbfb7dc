"""Protocolo do endpoint de mensagens (canal de saída)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.protocols.models import MessageOptions


class MessengerProtocol(Protocol):
    """Entrega uma mensagem por chamada; falha é reportada na hora.

    Implementações levantam NotificationDeliveryError; não há retry
    implícito.
    """

    async def send(
        self,
        destination: str,
        text: str,
        options: MessageOptions | None = None,
    ) -> None: ...

    async def acknowledge_action(self, action_id: str, text: str | None = None) -> None:
        """Confirma recebimento de uma seleção de menu (ex: callback query)."""
        ...
