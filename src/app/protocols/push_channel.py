"""Protocolo do provedor de canais de push.

Autorização de canal privado é um handshake em dois passos: o
provedor informa o socket_id e o nome do canal ao `authorizer`, que
obtém a credencial do backend; o provedor apresenta essa credencial
no frame de subscribe.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.payouts import ChannelAuthorization

# (socket_id, channel_name) -> credencial
ChannelAuthorizer = Callable[[str, str], Awaitable["ChannelAuthorization"]]

# (channel_name, event_name, payload)
PushEventHandler = Callable[[str, str, dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class ChannelHandle:
    """Referência opaca a uma assinatura ativa."""

    channel_name: str
    events: frozenset[str]


class PushChannelProviderProtocol(Protocol):
    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def subscribe(
        self,
        channel_name: str,
        authorizer: ChannelAuthorizer,
        handler: PushEventHandler,
        events: frozenset[str],
    ) -> ChannelHandle: ...

    async def unsubscribe(self, channel_name: str) -> None: ...

    @property
    def is_connected(self) -> bool: ...
