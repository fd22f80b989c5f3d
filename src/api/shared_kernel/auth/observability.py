"""Domain probe for session token validation.

Captures the events worth seeing in logs when requests are authenticated:
accepted and rejected tokens, and signing-key fetches.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SessionTokenProbe(Protocol):
    """Domain probe for session token validation."""

    def token_accepted(self, subject: str) -> None:
        """Record that a session token was accepted."""
        ...

    def token_rejected(self, reason: str) -> None:
        """Record that a session token was rejected."""
        ...

    def signing_keys_fetched(self, jwks_url: str, key_count: int) -> None:
        """Record that signing keys were fetched from the provider."""
        ...

    def signing_keys_reused(self) -> None:
        """Record that cached signing keys were used."""
        ...

    def signing_keys_unavailable(self, jwks_url: str, error: str) -> None:
        """Record that signing keys could not be fetched."""
        ...

    def with_context(self, context: ObservationContext) -> SessionTokenProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSessionTokenProbe:
    """Default implementation of SessionTokenProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSessionTokenProbe:
        """Create a new probe with observation context bound."""
        return DefaultSessionTokenProbe(logger=self._logger, context=context)

    def token_accepted(self, subject: str) -> None:
        self._logger.debug(
            "session_token_accepted",
            subject=subject,
            **self._get_context_kwargs(),
        )

    def token_rejected(self, reason: str) -> None:
        self._logger.warning(
            "session_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def signing_keys_fetched(self, jwks_url: str, key_count: int) -> None:
        self._logger.info(
            "signing_keys_fetched",
            jwks_url=jwks_url,
            key_count=key_count,
            **self._get_context_kwargs(),
        )

    def signing_keys_reused(self) -> None:
        self._logger.debug("signing_keys_reused", **self._get_context_kwargs())

    def signing_keys_unavailable(self, jwks_url: str, error: str) -> None:
        self._logger.error(
            "signing_keys_unavailable",
            jwks_url=jwks_url,
            error=error,
            **self._get_context_kwargs(),
        )
