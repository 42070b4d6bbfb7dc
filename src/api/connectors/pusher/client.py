"""Cliente websocket do Pusher Channels (protocolo 7).

Implementa PushChannelProviderProtocol:
- Handshake: aguarda `pusher:connection_established` (socket_id)
- Canais privados: autorização em dois passos via `authorizer`
- Eventos despachados em tasks rastreadas (não bloqueiam o recv loop)
- Keepalive: `pusher:ping` após `activity_timeout` sem tráfego
- Reconexão com backoff e re-subscribe de todos os canais; se as
  tentativas se esgotam, o próximo `connect()` restaura todos os canais
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from app.protocols.push_channel import ChannelHandle
from utils.errors import PushChannelError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.push_channel import ChannelAuthorizer, PushEventHandler
    from config.settings import PusherSettings

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_TIMEOUT_SECONDS = 120.0
MAX_RECONNECT_ATTEMPTS = 5
RECONNECT_BASE_DELAY_SECONDS = 1.0
RECONNECT_MAX_DELAY_SECONDS = 30.0

EVENT_CONNECTION_ESTABLISHED = "pusher:connection_established"
EVENT_ERROR = "pusher:error"
EVENT_PING = "pusher:ping"
EVENT_PONG = "pusher:pong"
EVENT_SUBSCRIBE = "pusher:subscribe"
EVENT_UNSUBSCRIBE = "pusher:unsubscribe"
EVENT_SUBSCRIPTION_SUCCEEDED = "pusher_internal:subscription_succeeded"
EVENT_SUBSCRIPTION_ERROR = "pusher:subscription_error"


@dataclass(slots=True)
class _Subscription:
    channel_name: str
    authorizer: ChannelAuthorizer
    handler: PushEventHandler
    events: frozenset[str]
    confirmed: bool = False


def encode_frame(event: str, data: Any, channel: str | None = None) -> str:
    frame: dict[str, Any] = {"event": event, "data": data}
    if channel is not None:
        frame["channel"] = channel
    return json.dumps(frame)


def decode_frame(raw: str | bytes) -> tuple[str, str | None, dict[str, Any]]:
    """Decodifica frame Pusher; `data` pode vir como string JSON.

    Raises:
        ValueError: Se o frame não for um objeto JSON com `event`.
    """
    frame = json.loads(raw)
    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        raise ValueError("invalid_frame")
    data = frame.get("data")
    if isinstance(data, str):
        try:
            data = json.loads(data) if data else {}
        except json.JSONDecodeError:
            data = {"raw": data}
    if not isinstance(data, dict):
        data = {"value": data}
    return frame["event"], frame.get("channel"), data


class PusherClient:
    """Conexão única compartilhada por todos os canais de organização."""

    def __init__(
        self,
        settings: PusherSettings,
        connector: Callable[[str], Awaitable[Any]] | None = None,
    ) -> None:
        self._settings = settings
        self._connector = connector or self._default_connector
        self._ws: Any = None
        self._socket_id: str | None = None
        self._activity_timeout = DEFAULT_ACTIVITY_TIMEOUT_SECONDS
        self._subscriptions: dict[str, _Subscription] = {}
        self._recv_task: asyncio.Task[None] | None = None
        self._dispatch_tasks: set[asyncio.Task[None]] = set()
        self._connect_lock = asyncio.Lock()
        self._reconnect_idle = asyncio.Event()
        self._reconnect_idle.set()
        self._closing = False

    async def _default_connector(self, url: str) -> Any:
        return await websockets.connect(
            url,
            open_timeout=self._settings.connect_timeout_seconds,
            ping_interval=None,
        )

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and self._socket_id is not None

    @property
    def socket_id(self) -> str | None:
        return self._socket_id

    @property
    def channels(self) -> frozenset[str]:
        return frozenset(self._subscriptions)

    async def connect(self) -> None:
        """Abre a conexão e aguarda o socket_id.

        Espera uma reconexão em andamento terminar antes de abrir outro
        socket. Canais que já estavam assinados (reconexão esgotada) são
        re-assinados no socket novo.

        Raises:
            PushChannelError: Se o provedor estiver desabilitado ou o handshake falhar.
        """
        if not self._settings.enabled:
            raise PushChannelError("pusher_disabled")
        while True:
            await self._reconnect_idle.wait()
            async with self._connect_lock:
                if not self._reconnect_idle.is_set():
                    continue
                if self.is_connected:
                    return
                self._closing = False
                await self._open()
                if self._subscriptions:
                    await self._resubscribe_all()
                self._recv_task = asyncio.create_task(self._recv_loop())
                return

    async def _open(self) -> None:
        try:
            ws = await self._connector(self._settings.websocket_url)
            raw = await asyncio.wait_for(ws.recv(), timeout=self._settings.connect_timeout_seconds)
            event, _, data = decode_frame(raw)
        except (OSError, TimeoutError, ValueError, WebSocketException) as exc:
            logger.warning("pusher_connect_failed", extra={"error_type": type(exc).__name__})
            raise PushChannelError(f"pusher connect failed: {type(exc).__name__}") from exc

        if event != EVENT_CONNECTION_ESTABLISHED or not data.get("socket_id"):
            await ws.close()
            raise PushChannelError(f"unexpected handshake event: {event}")

        self._ws = ws
        self._socket_id = str(data["socket_id"])
        self._activity_timeout = float(data.get("activity_timeout") or DEFAULT_ACTIVITY_TIMEOUT_SECONDS)
        logger.info("pusher_connected", extra={"activity_timeout": self._activity_timeout})

    async def disconnect(self) -> None:
        self._closing = True
        if self._recv_task is not None:
            self._recv_task.cancel()
            try:
                await self._recv_task
            except asyncio.CancelledError:
                pass
            self._recv_task = None
        if self._ws is not None:
            try:
                await self._ws.close()
            except WebSocketException:
                logger.debug("pusher_close_failed")
        self._ws = None
        self._socket_id = None
        self._subscriptions.clear()
        if self._dispatch_tasks:
            await asyncio.gather(*self._dispatch_tasks, return_exceptions=True)
        logger.info("pusher_disconnected")

    async def subscribe(
        self,
        channel_name: str,
        authorizer: ChannelAuthorizer,
        handler: PushEventHandler,
        events: frozenset[str],
    ) -> ChannelHandle:
        """Assina um canal privado.

        Raises:
            PushChannelError: Se a autorização ou o envio do frame falhar.
        """
        await self._reconnect_idle.wait()
        if not self.is_connected:
            await self.connect()
        subscription = _Subscription(channel_name, authorizer, handler, events)
        await self._send_subscribe(subscription)
        self._subscriptions[channel_name] = subscription
        return ChannelHandle(channel_name=channel_name, events=events)

    async def unsubscribe(self, channel_name: str) -> None:
        if self._subscriptions.pop(channel_name, None) is None:
            return
        if self.is_connected:
            try:
                await self._ws.send(encode_frame(EVENT_UNSUBSCRIBE, {"channel": channel_name}))
            except ConnectionClosed:
                logger.debug("pusher_unsubscribe_on_closed_socket")
        logger.info("pusher_unsubscribed", extra={"channel": channel_name})

    async def _send_subscribe(self, subscription: _Subscription) -> None:
        if self._socket_id is None:
            raise PushChannelError("not connected")
        try:
            authorization = await subscription.authorizer(self._socket_id, subscription.channel_name)
        except Exception as exc:
            logger.warning(
                "pusher_authorization_failed",
                extra={"channel": subscription.channel_name, "error_type": type(exc).__name__},
            )
            raise PushChannelError("channel authorization failed") from exc

        data: dict[str, Any] = {"channel": subscription.channel_name, "auth": authorization.auth}
        if authorization.channel_data:
            data["channel_data"] = authorization.channel_data
        try:
            await self._ws.send(encode_frame(EVENT_SUBSCRIBE, data))
        except ConnectionClosed as exc:
            raise PushChannelError("connection closed during subscribe") from exc

    async def _recv_loop(self) -> None:
        while not self._closing:
            try:
                raw = await asyncio.wait_for(self._ws.recv(), timeout=self._activity_timeout)
            except TimeoutError:
                await self._send_ping()
                continue
            except ConnectionClosed:
                if self._closing:
                    return
                logger.warning("pusher_connection_lost")
                if not await self._reconnect():
                    return
                continue
            await self._handle_frame(raw)

    async def _send_ping(self) -> None:
        try:
            await self._ws.send(encode_frame(EVENT_PING, {}))
        except ConnectionClosed:
            logger.debug("pusher_ping_on_closed_socket")

    async def _handle_frame(self, raw: str | bytes) -> None:
        try:
            event, channel, data = decode_frame(raw)
        except ValueError:
            logger.warning("pusher_invalid_frame")
            return

        if event == EVENT_PING:
            try:
                await self._ws.send(encode_frame(EVENT_PONG, {}))
            except ConnectionClosed:
                logger.debug("pusher_pong_on_closed_socket")
        elif event == EVENT_PONG:
            return
        elif event == EVENT_ERROR:
            logger.warning("pusher_error", extra={"code": data.get("code")})
        elif event == EVENT_SUBSCRIPTION_SUCCEEDED:
            subscription = self._subscriptions.get(channel or "")
            if subscription is not None:
                subscription.confirmed = True
            logger.info("pusher_subscription_succeeded", extra={"channel": channel})
        elif event == EVENT_SUBSCRIPTION_ERROR:
            logger.warning(
                "pusher_subscription_error",
                extra={"channel": channel, "status": data.get("status")},
            )
        else:
            self._dispatch(event, channel, data)

    def _dispatch(self, event: str, channel: str | None, data: dict[str, Any]) -> None:
        subscription = self._subscriptions.get(channel or "")
        if subscription is None or event not in subscription.events:
            return
        task = asyncio.create_task(self._run_handler(subscription, event, data))
        self._dispatch_tasks.add(task)
        task.add_done_callback(self._dispatch_tasks.discard)

    async def _run_handler(self, subscription: _Subscription, event: str, data: dict[str, Any]) -> None:
        try:
            await subscription.handler(subscription.channel_name, event, data)
        except Exception:
            logger.exception(
                "pusher_handler_failed",
                extra={"channel": subscription.channel_name, "event_name": event},
            )

    async def drain(self) -> None:
        """Aguarda handlers de eventos em andamento."""
        if self._dispatch_tasks:
            await asyncio.gather(*self._dispatch_tasks, return_exceptions=True)

    async def _reconnect(self) -> bool:
        """Reabre o socket com backoff exponencial limitado.

        Enquanto roda, `connect()` e `subscribe()` ficam em espera; cada
        tentativa de abertura segura `_connect_lock`. Retorna False quando
        as tentativas se esgotam (o recv loop termina).
        """
        self._reconnect_idle.clear()
        self._ws = None
        self._socket_id = None
        try:
            for attempt in range(MAX_RECONNECT_ATTEMPTS):
                delay = min(RECONNECT_BASE_DELAY_SECONDS * (2**attempt), RECONNECT_MAX_DELAY_SECONDS)
                logger.info("pusher_reconnect_backoff", extra={"attempt": attempt + 1, "delay_seconds": delay})
                await asyncio.sleep(delay)
                if self._closing:
                    return False
                async with self._connect_lock:
                    try:
                        await self._open()
                    except PushChannelError:
                        continue
                    await self._resubscribe_all()
                return True
            logger.error("pusher_reconnect_exhausted", extra={"attempts": MAX_RECONNECT_ATTEMPTS})
            return False
        finally:
            self._reconnect_idle.set()

    async def _resubscribe_all(self) -> None:
        for subscription in list(self._subscriptions.values()):
            subscription.confirmed = False
            try:
                await self._send_subscribe(subscription)
            except PushChannelError:
                logger.warning("pusher_resubscribe_failed", extra={"channel": subscription.channel_name})
