"""Protocolos e contratos do core da aplicação."""

from .backend_api import BackendApiProtocol
from .dedupe import AsyncDedupeProtocol
from .messenger import MessengerProtocol
from .models import (
    Button,
    InputSource,
    Keyboard,
    MessageOptions,
    Reply,
    UserInput,
)
from .push_channel import (
    ChannelAuthorizer,
    ChannelHandle,
    PushChannelProviderProtocol,
    PushEventHandler,
)
from .session_store import AsyncSessionStoreProtocol

__all__ = [
    "AsyncDedupeProtocol",
    "AsyncSessionStoreProtocol",
    "BackendApiProtocol",
    "Button",
    "ChannelAuthorizer",
    "ChannelHandle",
    "InputSource",
    "Keyboard",
    "MessageOptions",
    "MessengerProtocol",
    "PushChannelProviderProtocol",
    "PushEventHandler",
    "Reply",
    "UserInput",
]
