"""Session authentication shared kernel module."""

from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.auth.observability import (
    DefaultSessionTokenProbe,
    SessionTokenProbe,
)

__all__ = [
    "InvalidTokenError",
    "JWTValidator",
    "SessionTokenProbe",
    "DefaultSessionTokenProbe",
    "TokenClaims",
]
