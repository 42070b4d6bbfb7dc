"""Processamento inbound Telegram: normaliza, deduplica, processa e responde.

Um update gera no máximo uma resposta. Updates repetidos (retry do
Telegram) são descartados pelo update_id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.normalizers.telegram import UpdateKind, normalize_update
from utils.errors import NotificationDeliveryError

if TYPE_CHECKING:
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.messenger import MessengerProtocol
    from app.use_cases.conversation import ConversationService

logger = logging.getLogger(__name__)

DEFAULT_DEDUPE_TTL_SECONDS = 3600


@dataclass(frozen=True, slots=True)
class InboundResult:
    """Resultado do processamento de um update."""

    status: str  # processed | duplicate | ignored | send_failed
    update_id: int | None = None


def dedupe_key(update_id: int) -> str:
    return f"telegram:update:{update_id}"


async def process_telegram_update(
    payload: dict[str, Any],
    *,
    service: ConversationService,
    messenger: MessengerProtocol,
    dedupe: AsyncDedupeProtocol | None = None,
    dedupe_ttl_seconds: int = DEFAULT_DEDUPE_TTL_SECONDS,
) -> InboundResult:
    """Processa um update do webhook.

    Sem logs com PII: só ids e tipo do update.

    Args:
        payload: Update JSON do Telegram
        service: Serviço de conversa
        messenger: Canal de saída para a resposta
        dedupe: Store de idempotência (None desliga)
        dedupe_ttl_seconds: Janela de idempotência

    Returns:
        InboundResult com o desfecho
    """
    update = normalize_update(payload)
    if update is None:
        logger.debug("telegram_update_skipped")
        return InboundResult(status="ignored")

    if dedupe is not None and await dedupe.seen_async(dedupe_key(update.update_id), dedupe_ttl_seconds):
        logger.info("telegram_update_duplicate", extra={"update_id": update.update_id})
        return InboundResult(status="duplicate", update_id=update.update_id)

    if update.kind == UpdateKind.CALLBACK_QUERY and update.callback_query_id:
        try:
            await messenger.acknowledge_action(update.callback_query_id)
        except NotificationDeliveryError:
            logger.warning("callback_ack_failed", extra={"update_id": update.update_id})

    reply = await service.handle_input(
        update.user_id,
        update.raw_input,
        destination=update.chat_id,
        display_name=update.display_name,
    )

    try:
        await messenger.send(update.chat_id, reply.text, reply.options)
    except NotificationDeliveryError:
        logger.warning("reply_send_failed", extra={"update_id": update.update_id})
        return InboundResult(status="send_failed", update_id=update.update_id)

    logger.info(
        "telegram_update_processed",
        extra={"update_id": update.update_id, "kind": update.kind.value},
    )
    return InboundResult(status="processed", update_id=update.update_id)
