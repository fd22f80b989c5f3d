"""Domain probe for webhook signature verification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WebhookVerifierProbe(Protocol):
    """Domain probe for webhook verification."""

    def delivery_verified(self, message_id: str) -> None:
        ...

    def delivery_rejected(self, message_id: str | None, reason: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> WebhookVerifierProbe:
        ...


class DefaultWebhookVerifierProbe:
    """Default implementation of WebhookVerifierProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultWebhookVerifierProbe:
        return DefaultWebhookVerifierProbe(logger=self._logger, context=context)

    def delivery_verified(self, message_id: str) -> None:
        self._logger.debug(
            "webhook_delivery_verified",
            message_id=message_id,
            **self._get_context_kwargs(),
        )

    def delivery_rejected(self, message_id: str | None, reason: str) -> None:
        self._logger.warning(
            "webhook_delivery_rejected",
            message_id=message_id,
            reason=reason,
            **self._get_context_kwargs(),
        )
