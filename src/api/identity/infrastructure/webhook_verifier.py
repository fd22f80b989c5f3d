"""Verification of signed identity-provider webhook deliveries.

The provider signs ``"{svix-id}.{svix-timestamp}.{body}"`` with HMAC-SHA256
using the base64 key that follows the ``whsec_`` prefix of the signing
secret. The ``svix-signature`` header carries one or more space-separated
``v1,<base64 digest>`` entries; any one matching is enough.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, Callable, Mapping

from identity.infrastructure.observability import (
    DefaultWebhookVerifierProbe,
    WebhookVerifierProbe,
)
from identity.ports.webhooks import IWebhookVerifier, WebhookVerificationError

SECRET_PREFIX = "whsec_"
SIGNATURE_VERSION = "v1"

ID_HEADER = "svix-id"
TIMESTAMP_HEADER = "svix-timestamp"
SIGNATURE_HEADER = "svix-signature"


class WebhookVerifier(IWebhookVerifier):
    """HMAC-SHA256 verifier for provider webhooks."""

    def __init__(
        self,
        signing_secret: str,
        tolerance_seconds: int = 300,
        probe: WebhookVerifierProbe | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the verifier.

        Args:
            signing_secret: The ``whsec_`` secret from the provider dashboard
            tolerance_seconds: Accepted distance between the signed timestamp and now
            probe: Optional domain probe for observability
            clock: Source of the current Unix time
        """
        self._signing_secret = signing_secret
        self._tolerance_seconds = tolerance_seconds
        self._probe = probe or DefaultWebhookVerifierProbe()
        self._clock = clock

    def verify(self, headers: Mapping[str, str], body: bytes) -> dict[str, Any]:
        lowered = {name.lower(): value for name, value in headers.items()}
        message_id = lowered.get(ID_HEADER)
        timestamp = lowered.get(TIMESTAMP_HEADER)
        signatures = lowered.get(SIGNATURE_HEADER)
        if not message_id or not timestamp or not signatures:
            raise self._rejection(message_id, "Missing required headers")

        self._check_timestamp(message_id, timestamp)
        key = _decode_secret(self._signing_secret)

        signed_content = f"{message_id}.{timestamp}.".encode() + body
        expected = base64.b64encode(
            hmac.new(key, signed_content, hashlib.sha256).digest()
        ).decode()

        if not any(
            hmac.compare_digest(expected, candidate)
            for candidate in _v1_signatures(signatures)
        ):
            raise self._rejection(message_id, "No matching signature")

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise self._rejection(message_id, "Body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise self._rejection(message_id, "Body is not a JSON object")

        self._probe.delivery_verified(message_id)
        return payload

    def _check_timestamp(self, message_id: str, timestamp: str) -> None:
        try:
            signed_at = int(timestamp)
        except ValueError as e:
            raise self._rejection(message_id, "Invalid timestamp header") from e
        now = self._clock()
        if now - signed_at > self._tolerance_seconds:
            raise self._rejection(message_id, "Message timestamp too old")
        if signed_at - now > self._tolerance_seconds:
            raise self._rejection(message_id, "Message timestamp too new")

    def _rejection(
        self, message_id: str | None, reason: str
    ) -> WebhookVerificationError:
        self._probe.delivery_rejected(message_id, reason)
        return WebhookVerificationError(reason)


def _decode_secret(signing_secret: str) -> bytes:
    secret = signing_secret.removeprefix(SECRET_PREFIX)
    if not secret:
        raise WebhookVerificationError("Webhook signing secret is not configured")
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise WebhookVerificationError("Webhook signing secret is not base64") from e


def _v1_signatures(header: str) -> list[str]:
    """Extract the digests of the ``v1`` entries of a signature header.

    Base64 digests are ASCII; anything else cannot match and is skipped
    (``hmac.compare_digest`` rejects non-ASCII str arguments).
    """
    result = []
    for part in header.split():
        version, _, digest = part.partition(",")
        if version == SIGNATURE_VERSION and digest and digest.isascii():
            result.append(digest)
    return result
