"""Casos de uso da conversa do bot (fluxos por passo)."""

from app.use_cases.conversation.context import FlowContext
from app.use_cases.conversation.service import ConversationService

__all__ = [
    "ConversationService",
    "FlowContext",
]
