"""Testes do TelegramMessenger sobre httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.telegram import TelegramMessenger
from app.protocols.models import Button, MessageOptions
from config.settings import TelegramSettings
from utils.errors import NotificationDeliveryError

SETTINGS = TelegramSettings(bot_token="123:abc", api_base_url="https://tg.test")


def _messenger(response: httpx.Response) -> tuple[TelegramMessenger, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return response

    return TelegramMessenger.from_settings(SETTINGS, transport=httpx.MockTransport(handler)), requests


class TestSend:
    @pytest.mark.asyncio
    async def test_send_message(self) -> None:
        messenger, requests = _messenger(httpx.Response(200, json={"ok": True, "result": {}}))
        keyboard = ((Button("🏠 Main Menu", "main_menu"),),)

        await messenger.send("4242", "hello", MessageOptions(keyboard=keyboard))

        assert requests[0].url.host == "tg.test"
        assert requests[0].url.path == "/bot123:abc/sendMessage"
        body = json.loads(requests[0].content)
        assert body["chat_id"] == "4242"
        assert body["reply_markup"]["inline_keyboard"][0][0]["callback_data"] == "main_menu"

    @pytest.mark.asyncio
    async def test_rejected_by_api(self) -> None:
        messenger, _ = _messenger(
            httpx.Response(200, json={"ok": False, "description": "chat not found"})
        )

        with pytest.raises(NotificationDeliveryError, match="chat not found"):
            await messenger.send("1", "hello")

    @pytest.mark.asyncio
    async def test_http_error_is_not_retried(self) -> None:
        messenger, requests = _messenger(httpx.Response(502))

        with pytest.raises(NotificationDeliveryError):
            await messenger.send("1", "hello")

        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_invalid_keyboard_is_delivery_error(self) -> None:
        messenger, requests = _messenger(httpx.Response(200, json={"ok": True}))
        keyboard = ((Button("x", "y" * 65),),)

        with pytest.raises(NotificationDeliveryError):
            await messenger.send("1", "hello", MessageOptions(keyboard=keyboard))

        assert requests == []


class TestAcknowledge:
    @pytest.mark.asyncio
    async def test_answer_callback_query(self) -> None:
        messenger, requests = _messenger(httpx.Response(200, json={"ok": True, "result": True}))

        await messenger.acknowledge_action("cb-1")

        assert requests[0].url.path.endswith("/answerCallbackQuery")
        assert json.loads(requests[0].content) == {"callback_query_id": "cb-1"}
