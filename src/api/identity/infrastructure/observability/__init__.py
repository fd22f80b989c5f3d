"""Domain-Oriented Observability for Identity infrastructure."""

from identity.infrastructure.observability.repository_probe import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from identity.infrastructure.observability.webhook_probe import (
    DefaultWebhookVerifierProbe,
    WebhookVerifierProbe,
)

__all__ = [
    "UserRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "WebhookVerifierProbe",
    "DefaultWebhookVerifierProbe",
]
