"""Gerenciador de assinaturas de notificação (organização → chat).

Mantém no máximo uma assinatura de canal por organização. O mapa é um
cache reconstruído a partir das sessões autenticadas (não persiste).
Operações da mesma organização são serializadas por um lock por chave;
organizações diferentes seguem em paralelo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from app.constants import bot_texts as texts
from app.domain.payouts import DepositEvent
from app.observability import record_notification
from utils.concurrency import KeyedLock
from utils.errors import NotificationDeliveryError

if TYPE_CHECKING:
    from app.domain.payouts import ChannelAuthorization
    from app.protocols.backend_api import BackendApiProtocol
    from app.protocols.messenger import MessengerProtocol
    from app.protocols.push_channel import ChannelHandle, PushChannelProviderProtocol

logger = logging.getLogger(__name__)

DEPOSIT_EVENT = "deposit"
DEFAULT_CHANNEL_PREFIX = "private-org-"


@dataclass(slots=True)
class ChannelCredentials:
    """Token lido pelo authorizer a cada (re)autorização do canal."""

    auth_token: str | None = None


@dataclass(slots=True)
class Subscription:
    """Assinatura ativa de uma organização.

    Attributes:
        organization_id: Chave da assinatura
        destination: Chat que recebe as notificações (último a assinar)
        channel_handle: Referência da assinatura no provedor de push
        credentials: Token do canal (renovado a cada assinatura)
    """

    organization_id: str
    destination: str
    channel_handle: ChannelHandle
    credentials: ChannelCredentials = field(default_factory=ChannelCredentials)

    @property
    def auth_token(self) -> str | None:
        return self.credentials.auth_token


class NotificationSubscriptionManager:
    """Roteia eventos de push da organização para o chat do usuário.

    Args:
        provider: Provedor de canais de push
        messenger: Endpoint de mensagens para entregar notificações
        backend: Fachada da API (autorização de canal privado)
        channel_prefix: Prefixo do canal privado por organização
    """

    def __init__(
        self,
        provider: PushChannelProviderProtocol,
        messenger: MessengerProtocol,
        backend: BackendApiProtocol,
        channel_prefix: str = DEFAULT_CHANNEL_PREFIX,
    ) -> None:
        self._provider = provider
        self._messenger = messenger
        self._backend = backend
        self._channel_prefix = channel_prefix
        self._subscriptions: dict[str, Subscription] = {}
        self._locks = KeyedLock()

    def channel_for(self, organization_id: str) -> str:
        return f"{self._channel_prefix}{organization_id}"

    def organization_for(self, channel_name: str) -> str | None:
        if not channel_name.startswith(self._channel_prefix):
            return None
        return channel_name[len(self._channel_prefix) :] or None

    def get(self, organization_id: str) -> Subscription | None:
        return self._subscriptions.get(organization_id)

    def __len__(self) -> int:
        return len(self._subscriptions)

    async def subscribe(
        self,
        organization_id: str,
        destination: str,
        auth_token: str | None = None,
    ) -> Subscription:
        """Assina o canal da organização (idempotente).

        A primeira chamada abre o canal; as seguintes só atualizam o
        destino (e o token usado em re-autorizações).

        Raises:
            PushChannelError: Se o provedor falhar ao abrir o canal.
        """
        async with self._locks.hold(organization_id):
            existing = self._subscriptions.get(organization_id)
            if existing is not None:
                if existing.destination != destination:
                    logger.info(
                        "subscription_destination_updated",
                        extra={"organization_id": organization_id},
                    )
                existing.destination = destination
                if auth_token:
                    existing.credentials.auth_token = auth_token
                return existing

            credentials = ChannelCredentials(auth_token=auth_token)
            handle = await self._provider.subscribe(
                self.channel_for(organization_id),
                self._authorizer_for(credentials),
                self.on_push_event,
                frozenset({DEPOSIT_EVENT}),
            )
            subscription = Subscription(
                organization_id=organization_id,
                destination=destination,
                channel_handle=handle,
                credentials=credentials,
            )
            self._subscriptions[organization_id] = subscription
            logger.info("subscription_created", extra={"organization_id": organization_id})
            return subscription

    async def unsubscribe(self, organization_id: str) -> None:
        """Remove a assinatura; no-op se ausente."""
        async with self._locks.hold(organization_id):
            subscription = self._subscriptions.pop(organization_id, None)
            if subscription is None:
                return
            await self._provider.unsubscribe(subscription.channel_handle.channel_name)
            logger.info("subscription_removed", extra={"organization_id": organization_id})

    async def close(self) -> None:
        """Remove todas as assinaturas (shutdown)."""
        for organization_id in list(self._subscriptions):
            try:
                await self.unsubscribe(organization_id)
            except NotificationDeliveryError:
                logger.warning(
                    "subscription_close_failed",
                    extra={"organization_id": organization_id},
                )

    def _authorizer_for(self, credentials: ChannelCredentials):
        """Handshake de canal privado: pede a credencial ao backend."""

        async def _authorize(socket_id: str, channel_name: str) -> ChannelAuthorization:
            return await self._backend.authorize_push_channel(
                credentials.auth_token or "",
                socket_id,
                channel_name,
            )

        return _authorize

    async def on_push_event(self, channel_name: str, event_name: str, payload: dict[str, Any]) -> None:
        """Entrega um evento de depósito ao chat da organização.

        Nunca levanta: evento sem destino é descartado; falha de entrega
        é registrada e não repetida.
        """
        organization_id = self.organization_for(channel_name) or ""
        subscription = self._subscriptions.get(organization_id)
        if subscription is None:
            record_notification(event_name, "dropped_unmapped", organization_id)
            logger.warning(
                "push_event_unmapped",
                extra={"channel": channel_name, "event_name": event_name},
            )
            return

        if event_name != DEPOSIT_EVENT:
            logger.debug("push_event_ignored", extra={"event_name": event_name})
            return

        try:
            event = DepositEvent.model_validate(payload)
        except PydanticValidationError:
            record_notification(event_name, "invalid_payload", organization_id)
            logger.warning("push_event_invalid_payload", extra={"organization_id": organization_id})
            return

        try:
            await self._messenger.send(subscription.destination, texts.deposit_notification(event))
        except NotificationDeliveryError:
            record_notification(event_name, "failed", organization_id)
            logger.warning("deposit_notification_failed", extra={"organization_id": organization_id})
            return

        record_notification(event_name, "delivered", organization_id)
        logger.info("deposit_notification_sent", extra={"organization_id": organization_id})
