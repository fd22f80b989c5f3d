"""Session token validation against the identity provider's JWKS.

Session tokens are short-lived RS256 JWTs. The subject claim is the user's
external id, which is also the owner id of their entries.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Callable, Iterable

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated session claims."""

    sub: str
    session_id: str | None = None
    authorized_party: str | None = None


class InvalidTokenError(Exception):
    """Raised when a session token cannot be accepted."""

    pass


class JWTValidator:
    """Validates session tokens with keys from the provider's JWKS endpoint.

    Keys are cached for ``jwks_cache_ttl``. Validation checks the signature,
    expiry, not-before and issuer; when ``authorized_parties`` is non-empty
    the ``azp`` claim must be one of them.
    """

    def __init__(
        self,
        issuer_url: str,
        jwks_url: str,
        probe: SessionTokenProbe,
        authorized_parties: Iterable[str] = (),
        jwks_cache_ttl: timedelta = timedelta(hours=1),
        http_client_factory: Callable[[], httpx.AsyncClient] = httpx.AsyncClient,
    ):
        """Initialize the validator.

        Args:
            issuer_url: Expected ``iss`` claim.
            jwks_url: Endpoint serving the signing keys.
            probe: Observability probe for logging events.
            authorized_parties: Allowed ``azp`` values (empty allows any).
            jwks_cache_ttl: How long fetched keys are reused.
            http_client_factory: Builds the client used to fetch keys.
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._jwks_url = jwks_url
        self._probe = probe
        self._authorized_parties = frozenset(authorized_parties)
        self._jwks_cache_ttl = jwks_cache_ttl
        self._http_client_factory = http_client_factory

        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None
        self._jwks_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a session token and return its claims.

        Raises:
            InvalidTokenError: If the token is malformed, expired, signed by an
                unknown key, or issued for another issuer or party.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_rejected(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not header:
            self._probe.token_rejected(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        jwks = await self._get_jwks()

        try:
            claims = jwt.decode(
                token=token,
                key=jwks,
                algorithms=["RS256"],
                issuer=self._issuer_url,
                options={
                    "verify_signature": True,
                    "verify_aud": False,
                    "verify_iss": True,
                    "verify_exp": True,
                    "verify_nbf": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_rejected(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            if "issuer" in str(e).lower():
                self._probe.token_rejected(reason="Invalid issuer")
                raise InvalidTokenError("Invalid issuer claim") from e
            self._probe.token_rejected(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            if "signature" in str(e).lower():
                self._probe.token_rejected(reason="Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._probe.token_rejected(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = claims.get("sub")
        if not subject:
            self._probe.token_rejected(reason="Missing sub claim")
            raise InvalidTokenError("Missing required claim: sub")

        azp = claims.get("azp")
        if self._authorized_parties and azp not in self._authorized_parties:
            self._probe.token_rejected(reason=f"Unauthorized party: {azp}")
            raise InvalidTokenError("Token was issued for another party")

        self._probe.token_accepted(subject=str(subject))
        return TokenClaims(
            sub=str(subject),
            session_id=claims.get("sid"),
            authorized_party=azp,
        )

    async def _get_jwks(self) -> dict[str, Any]:
        """Return cached keys, fetching them when the cache is stale.

        Raises:
            InvalidTokenError: If the keys cannot be fetched.
        """
        if self._is_cache_valid():
            self._probe.signing_keys_reused()
            return self._jwks  # type: ignore[return-value]

        async with self._jwks_lock:
            # Another request may have refreshed the cache while we waited
            if self._is_cache_valid():
                self._probe.signing_keys_reused()
                return self._jwks  # type: ignore[return-value]

            return await self._fetch_jwks()

    def _is_cache_valid(self) -> bool:
        if self._jwks is None or self._jwks_fetched_at is None:
            return False
        now = datetime.now(tz=timezone.utc)
        return (now - self._jwks_fetched_at) < self._jwks_cache_ttl

    async def _fetch_jwks(self) -> dict[str, Any]:
        try:
            async with self._http_client_factory() as client:
                response = await client.get(self._jwks_url)
                response.raise_for_status()
                jwks = response.json()
        except httpx.HTTPError as e:
            self._probe.signing_keys_unavailable(self._jwks_url, str(e))
            raise InvalidTokenError(f"Failed to fetch signing keys: {e}") from e
        except ValueError as e:
            self._probe.signing_keys_unavailable(self._jwks_url, str(e))
            raise InvalidTokenError(f"Malformed signing key response: {e}") from e

        if not isinstance(jwks, dict) or not jwks.get("keys"):
            self._probe.signing_keys_unavailable(self._jwks_url, "No keys in JWKS")
            raise InvalidTokenError("Signing key response contained no keys")

        self._jwks = jwks
        self._jwks_fetched_at = datetime.now(tz=timezone.utc)
        self._probe.signing_keys_fetched(self._jwks_url, len(jwks["keys"]))
        return jwks
