"""Unit tests for WebhookVerifier."""

import base64
import hashlib
import hmac
import json
from unittest.mock import create_autospec

import pytest

from identity.infrastructure.observability import WebhookVerifierProbe
from identity.infrastructure.webhook_verifier import WebhookVerifier
from identity.ports.webhooks import IWebhookVerifier, WebhookVerificationError

SECRET_KEY = b"test-signing-key-0123456789abcdef"
SIGNING_SECRET = "whsec_" + base64.b64encode(SECRET_KEY).decode()
NOW = 1_760_000_000


def sign(message_id: str, timestamp: int, body: bytes, key: bytes = SECRET_KEY) -> str:
    signed = f"{message_id}.{timestamp}.".encode() + body
    digest = hmac.new(key, signed, hashlib.sha256).digest()
    return "v1," + base64.b64encode(digest).decode()


def signed_headers(body: bytes, timestamp: int = NOW, message_id: str = "msg_1"):
    return {
        "svix-id": message_id,
        "svix-timestamp": str(timestamp),
        "svix-signature": sign(message_id, timestamp, body),
    }


@pytest.fixture
def mock_probe():
    return create_autospec(WebhookVerifierProbe, instance=True)


@pytest.fixture
def verifier(mock_probe):
    return WebhookVerifier(
        signing_secret=SIGNING_SECRET,
        tolerance_seconds=300,
        probe=mock_probe,
        clock=lambda: NOW,
    )


BODY = json.dumps({"type": "user.created", "data": {"id": "user_2alice"}}).encode()


def test_implements_protocol(verifier):
    assert isinstance(verifier, IWebhookVerifier)


def test_accepts_valid_delivery(verifier, mock_probe):
    payload = verifier.verify(signed_headers(BODY), BODY)

    assert payload["data"]["id"] == "user_2alice"
    mock_probe.delivery_verified.assert_called_once_with("msg_1")


def test_header_names_are_case_insensitive(verifier):
    headers = {name.upper(): value for name, value in signed_headers(BODY).items()}

    assert verifier.verify(headers, BODY)["type"] == "user.created"


def test_any_matching_v1_signature_is_enough(verifier):
    headers = signed_headers(BODY)
    headers["svix-signature"] = "v1,bm90LWl0 v2,ignored " + headers["svix-signature"]

    assert verifier.verify(headers, BODY)["type"] == "user.created"


@pytest.mark.parametrize("missing", ["svix-id", "svix-timestamp", "svix-signature"])
def test_missing_header(verifier, mock_probe, missing):
    headers = signed_headers(BODY)
    del headers[missing]

    with pytest.raises(WebhookVerificationError, match="Missing required headers"):
        verifier.verify(headers, BODY)
    mock_probe.delivery_rejected.assert_called_once()


def test_tampered_body(verifier):
    headers = signed_headers(BODY)

    with pytest.raises(WebhookVerificationError, match="No matching signature"):
        verifier.verify(headers, BODY.replace(b"alice", b"mallory"))


def test_wrong_key(verifier):
    headers = signed_headers(BODY)
    headers["svix-signature"] = sign("msg_1", NOW, BODY, key=b"another-key")

    with pytest.raises(WebhookVerificationError, match="No matching signature"):
        verifier.verify(headers, BODY)


def test_non_ascii_signature_is_rejected(verifier):
    headers = signed_headers(BODY)
    headers["svix-signature"] = "v1,\xff\xfe"

    with pytest.raises(WebhookVerificationError, match="No matching signature"):
        verifier.verify(headers, BODY)


def test_non_ascii_entry_does_not_hide_valid_signature(verifier):
    headers = signed_headers(BODY)
    headers["svix-signature"] = "v1,\xe9t\xe9 " + headers["svix-signature"]

    assert verifier.verify(headers, BODY)["type"] == "user.created"


def test_stale_timestamp(verifier):
    with pytest.raises(WebhookVerificationError, match="too old"):
        verifier.verify(signed_headers(BODY, timestamp=NOW - 301), BODY)


def test_future_timestamp(verifier):
    with pytest.raises(WebhookVerificationError, match="too new"):
        verifier.verify(signed_headers(BODY, timestamp=NOW + 301), BODY)


def test_timestamp_within_tolerance(verifier):
    assert verifier.verify(signed_headers(BODY, timestamp=NOW - 299), BODY)


def test_non_numeric_timestamp(verifier):
    headers = signed_headers(BODY)
    headers["svix-timestamp"] = "yesterday"

    with pytest.raises(WebhookVerificationError, match="Invalid timestamp"):
        verifier.verify(headers, BODY)


def test_signed_non_object_body(verifier):
    body = b"[1, 2, 3]"

    with pytest.raises(WebhookVerificationError, match="not a JSON object"):
        verifier.verify(signed_headers(body), body)


def test_signed_invalid_json(verifier):
    body = b"not json"

    with pytest.raises(WebhookVerificationError, match="not valid JSON"):
        verifier.verify(signed_headers(body), body)


def test_unconfigured_secret():
    verifier = WebhookVerifier(signing_secret="", clock=lambda: NOW)

    with pytest.raises(WebhookVerificationError, match="not configured"):
        verifier.verify(signed_headers(BODY), BODY)
