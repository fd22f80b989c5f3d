"""Domain-Oriented Observability for the Identity application layer."""

from identity.application.observability.sync_service_probe import (
    DefaultIdentitySyncProbe,
    IdentitySyncProbe,
)

__all__ = [
    "IdentitySyncProbe",
    "DefaultIdentitySyncProbe",
]
