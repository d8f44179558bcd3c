"""Session token signing and validation.

Session tokens are HMAC-signed JWTs binding a user to the tenant and role
they held when the token was issued. Claims:

    sub        user id
    tenant_id  tenant the session is scoped to
    role       'admin' or 'member'
    iat, exp   issue and expiry timestamps (seconds since epoch)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe

REQUIRED_CLAIMS = ("sub", "tenant_id", "role", "exp")


@dataclass(frozen=True)
class SessionClaims:
    """Validated session token claims."""

    user_id: str
    tenant_id: str
    role: str
    expires_at: datetime


class InvalidTokenError(Exception):
    """Raised when a session token is malformed, forged or expired."""

    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionTokenService:
    """Issues and validates session tokens with a shared secret."""

    def __init__(
        self,
        secret: str,
        probe: SessionTokenProbe,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the session token service.

        Args:
            secret: HMAC secret used to sign and verify tokens.
            probe: Observability probe for logging events.
            algorithm: JWS algorithm (default: HS256).
            ttl: How long an issued token stays valid (default: 7 days).
            clock: Source of the current time, injectable for tests.
        """
        if not secret:
            raise ValueError("Session token secret must not be empty")
        self._secret = secret
        self._probe = probe
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: str, tenant_id: str, role: str) -> str:
        """Sign a session token for the given principal.

        Args:
            user_id: The user the session belongs to.
            tenant_id: The tenant the session is scoped to.
            role: The user's role within that tenant.

        Returns:
            The encoded token string.
        """
        issued_at = self._clock()
        expires_at = issued_at + self._ttl
        token = jwt.encode(
            {
                "sub": user_id,
                "tenant_id": tenant_id,
                "role": role,
                "iat": int(issued_at.timestamp()),
                "exp": int(expires_at.timestamp()),
            },
            self._secret,
            algorithm=self._algorithm,
        )
        self._probe.token_issued(user_id=user_id, tenant_id=tenant_id, role=role)
        return token

    def validate(self, token: str) -> SessionClaims:
        """Verify a session token and return its claims.

        Args:
            token: The encoded token string.

        Returns:
            SessionClaims for the principal.

        Raises:
            InvalidTokenError: If the token is malformed, forged, expired
                or missing a required claim.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_aud": False, "require_exp": True},
            )
        except ExpiredSignatureError as e:
            self._probe.token_rejected(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_rejected(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_rejected(reason=f"JWT error: {e}")
            raise InvalidTokenError("Invalid token") from e

        missing = [name for name in REQUIRED_CLAIMS if claims.get(name) is None]
        if missing:
            self._probe.token_rejected(reason=f"Missing claims: {', '.join(missing)}")
            raise InvalidTokenError(f"Missing required claims: {', '.join(missing)}")

        self._probe.token_validated(user_id=str(claims["sub"]))
        return SessionClaims(
            user_id=str(claims["sub"]),
            tenant_id=str(claims["tenant_id"]),
            role=str(claims["role"]),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
