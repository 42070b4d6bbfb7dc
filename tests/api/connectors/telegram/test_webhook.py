"""Testes de parse e secret do webhook Telegram."""

from __future__ import annotations

import pytest

from api.connectors.telegram import InvalidJsonError, InvalidSecretError, parse_webhook_request
from api.connectors.telegram.webhook import SECRET_HEADER, verify_secret_token


class TestVerifySecretToken:
    def test_disabled_without_secret(self) -> None:
        assert verify_secret_token({}, None)
        assert verify_secret_token({}, "")

    def test_matching_secret(self) -> None:
        assert verify_secret_token({SECRET_HEADER: "s3cret"}, "s3cret")

    def test_wrong_or_missing_secret(self) -> None:
        assert not verify_secret_token({SECRET_HEADER: "other"}, "s3cret")
        assert not verify_secret_token({}, "s3cret")


class TestParseWebhookRequest:
    def test_valid_payload(self) -> None:
        payload = parse_webhook_request(b'{"update_id": 1}', {SECRET_HEADER: "s"}, "s")

        assert payload == {"update_id": 1}

    def test_empty_body_is_empty_object(self) -> None:
        assert parse_webhook_request(b"", {}, None) == {}

    def test_invalid_secret(self) -> None:
        with pytest.raises(InvalidSecretError):
            parse_webhook_request(b"{}", {SECRET_HEADER: "x"}, "s")

    @pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b'"text"'])
    def test_invalid_json(self, body: bytes) -> None:
        with pytest.raises(InvalidJsonError):
            parse_webhook_request(body, {}, None)
