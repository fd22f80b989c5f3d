"""Port for verifying signed identity-provider webhook deliveries."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


class WebhookVerificationError(Exception):
    """Raised when a delivery's signature, timestamp or body is not acceptable."""

    pass


@runtime_checkable
class IWebhookVerifier(Protocol):
    """Checks that a delivery was signed by the provider."""

    def verify(self, headers: Mapping[str, str], body: bytes) -> dict[str, Any]:
        """Verify a delivery and return its decoded JSON body.

        Raises:
            WebhookVerificationError: If the delivery cannot be trusted
        """
        ...
