"""HTTP routes for the Identity bounded context.

The identity provider calls ``POST /webhooks/identity`` for user lifecycle
events. Deliveries are verified before anything is written.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from identity.application.services import IdentitySyncService
from identity.dependencies import get_identity_sync_service, get_webhook_verifier
from identity.domain.events import IdentityEvent
from identity.ports.webhooks import IWebhookVerifier, WebhookVerificationError

logger = structlog.get_logger()

router = APIRouter(
    prefix="/webhooks",
    tags=["webhooks"],
)


@router.post(
    "/identity",
    summary="Receive identity provider webhook",
    description=(
        "Verifies the signed delivery and mirrors user.created / user.updated "
        "events into the users table. Other event types are acknowledged."
    ),
    responses={
        400: {"description": "Signature, timestamp or payload rejected"},
        500: {"description": "Verified event could not be stored; provider retries"},
    },
)
async def receive_identity_webhook(
    request: Request,
    verifier: Annotated[IWebhookVerifier, Depends(get_webhook_verifier)],
    service: Annotated[IdentitySyncService, Depends(get_identity_sync_service)],
) -> JSONResponse:
    """Verify and apply one identity-provider event."""
    body = await request.body()
    try:
        payload = verifier.verify(request.headers, body)
        event = IdentityEvent.from_payload(payload)
    except (WebhookVerificationError, ValueError) as e:
        logger.warning("identity_webhook_rejected", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Error verifying webhook"},
        )

    try:
        outcome = await service.handle_event(event)
    except ValueError as e:
        logger.warning("identity_webhook_malformed", event_type=event.type, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Error verifying webhook"},
        )
    except Exception:
        logger.exception("identity_webhook_failed", event_type=event.type)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error processing webhook"},
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=outcome.to_response())
