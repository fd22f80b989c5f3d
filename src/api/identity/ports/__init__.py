"""Ports for the Identity bounded context."""

from identity.ports.repositories import IUserRepository
from identity.ports.webhooks import IWebhookVerifier, WebhookVerificationError

__all__ = [
    "IUserRepository",
    "IWebhookVerifier",
    "WebhookVerificationError",
]
