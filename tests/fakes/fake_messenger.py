"""Fakes de canal de saída e provedor de push."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.protocols.push_channel import ChannelHandle
from utils.errors import NotificationDeliveryError, PushChannelError

if TYPE_CHECKING:
    from app.protocols.models import MessageOptions
    from app.protocols.push_channel import ChannelAuthorizer, PushEventHandler


@dataclass
class SentMessage:
    destination: str
    text: str
    options: MessageOptions | None = None


class FakeMessenger:
    """Registra mensagens enviadas; `fail=True` simula falha de entrega."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[SentMessage] = []
        self.acknowledged: list[str] = []
        self.fail = fail

    async def send(self, destination: str, text: str, options: MessageOptions | None = None) -> None:
        if self.fail:
            raise NotificationDeliveryError("send failed")
        self.sent.append(SentMessage(destination, text, options))

    async def acknowledge_action(self, action_id: str, text: str | None = None) -> None:
        if self.fail:
            raise NotificationDeliveryError("ack failed")
        self.acknowledged.append(action_id)


@dataclass
class _Channel:
    authorizer: ChannelAuthorizer
    handler: PushEventHandler
    events: frozenset[str]
    auth: str = ""


@dataclass
class FakePushProvider:
    """Provedor de push em memória.

    `subscribe` executa o handshake de autorização com um socket_id fixo
    para que os testes observem a credencial obtida do backend.
    """

    socket_id: str = "123.456"
    fail_subscribe: bool = False
    channels: dict[str, _Channel] = field(default_factory=dict)
    subscribe_calls: list[str] = field(default_factory=list)
    unsubscribe_calls: list[str] = field(default_factory=list)
    connected: bool = False

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False
        self.channels.clear()

    async def subscribe(
        self,
        channel_name: str,
        authorizer: ChannelAuthorizer,
        handler: PushEventHandler,
        events: frozenset[str],
    ) -> ChannelHandle:
        self.subscribe_calls.append(channel_name)
        if self.fail_subscribe:
            raise PushChannelError("subscribe failed")
        credential = await authorizer(self.socket_id, channel_name)
        self.channels[channel_name] = _Channel(authorizer, handler, events, credential.auth)
        return ChannelHandle(channel_name=channel_name, events=events)

    async def unsubscribe(self, channel_name: str) -> None:
        self.unsubscribe_calls.append(channel_name)
        self.channels.pop(channel_name, None)

    async def emit(self, channel_name: str, event_name: str, payload: dict[str, Any]) -> None:
        """Simula um evento recebido pelo websocket."""
        channel = self.channels[channel_name]
        await channel.handler(channel_name, event_name, payload)
