"""FastAPI dependency providers for the Identity bounded context.

Session authentication (``get_current_user``) lives here because every
other context resolves the request's owner through it.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultIdentitySyncProbe,
    IdentitySyncProbe,
)
from identity.application.services import IdentitySyncService
from identity.application.value_objects import CurrentUser
from identity.infrastructure.user_repository import UserRepository
from identity.infrastructure.webhook_verifier import WebhookVerifier
from identity.ports.webhooks import IWebhookVerifier
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_auth_settings, get_webhook_settings
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultSessionTokenProbe

# Session tokens arrive as "Authorization: Bearer <jwt>"
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached session token validator.

    Uses lru_cache so a single validator (and its JWKS cache) is reused
    across requests.
    """
    settings = get_auth_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        jwks_url=settings.effective_jwks_url,
        probe=DefaultSessionTokenProbe(),
        authorized_parties=settings.authorized_parties,
        jwks_cache_ttl=timedelta(seconds=settings.jwks_cache_ttl_seconds),
    )


async def get_current_user(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> CurrentUser:
    """Resolve the authenticated caller from the session token.

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = await validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return CurrentUser(user_id=claims.sub, session_id=claims.session_id)


def get_webhook_verifier() -> IWebhookVerifier:
    """Get a webhook verifier configured from settings."""
    settings = get_webhook_settings()
    return WebhookVerifier(
        signing_secret=settings.signing_secret.get_secret_value(),
        tolerance_seconds=settings.tolerance_seconds,
    )


def get_identity_sync_probe() -> IdentitySyncProbe:
    """Get IdentitySyncProbe instance."""
    return DefaultIdentitySyncProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance.

    Args:
        session: Async database session
    """
    return UserRepository(session=session)


def get_identity_sync_service(
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[IdentitySyncProbe, Depends(get_identity_sync_probe)],
) -> IdentitySyncService:
    """Get IdentitySyncService instance.

    Args:
        user_repository: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: Sync service probe for observability
    """
    return IdentitySyncService(
        user_repository=user_repository,
        session=session,
        probe=probe,
    )
