"""Infrastructure adapters for the Identity bounded context."""

from identity.infrastructure.user_repository import UserRepository
from identity.infrastructure.webhook_verifier import WebhookVerifier

__all__ = [
    "UserRepository",
    "WebhookVerifier",
]
