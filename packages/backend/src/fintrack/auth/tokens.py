"""JWT token issuance and validation.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (15min), sent as `Authorization: Bearer ...`
- Refresh token: long-lived (30 days), exchanged for a new pair

Both kinds carry the same claims (sub, iat, exp, jti). What tells them
apart is the secret that signed them: an access token never verifies
against the refresh secret and vice versa, so a leaked refresh secret
does not let anyone forge access tokens.

Nothing is stored server-side. Validation is a signature check plus an
expiry comparison, so any process holding the secrets can validate any
token without I/O or locking.
"""

import binascii
import enum
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Union

import jwt
from jwt.utils import base64url_decode, base64url_encode

from fintrack.errors import (
    EmptyTokenError,
    ExpiredTokenError,
    InvalidPrincipalError,
    InvalidTokenError,
    TokenConfigError,
)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenKind(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenConfig:
    """Secrets and lifetimes for both token kinds.

    Validated on construction: an unusable config must stop the process
    from starting rather than fail on the first request.
    """

    access_secret: str = field(repr=False)
    refresh_secret: str = field(repr=False)
    access_ttl: timedelta
    refresh_ttl: timedelta

    def __post_init__(self):
        if not self.access_secret or not self.refresh_secret:
            raise TokenConfigError("token secret cannot be empty")
        if self.access_secret == self.refresh_secret:
            raise TokenConfigError("access and refresh secrets must differ")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise TokenConfigError("token TTL must be positive")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded payload of a validated token."""

    subject: uuid.UUID
    issued_at: datetime
    expires_at: datetime
    token_id: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenManager:
    """Issues and validates access/refresh tokens.

    Holds only read-only configuration after construction, so a single
    instance is shared by every request.
    """

    def __init__(self, config: TokenConfig, now: Callable[[], datetime] = utcnow):
        self._keys = {
            TokenKind.ACCESS: (config.access_secret, config.access_ttl),
            TokenKind.REFRESH: (config.refresh_secret, config.refresh_ttl),
        }
        self._now = now

    def ttl(self, kind: TokenKind) -> timedelta:
        return self._keys[kind][1]

    def issue(self, kind: TokenKind, principal: Union[uuid.UUID, str]) -> str:
        """Create a signed token of `kind` for `principal`.

        Raises InvalidPrincipalError for a nil or unparseable user ID.
        """
        user_id = _coerce_principal(principal)
        secret, ttl = self._keys[kind]

        # NumericDate has second precision; truncate so the embedded and
        # reported timestamps agree.
        issued_at = self._now().replace(microsecond=0)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + ttl,
            "jti": secrets.token_hex(32),
        }
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def issue_pair(self, principal: Union[uuid.UUID, str]) -> TokenPair:
        return TokenPair(
            access_token=self.issue(TokenKind.ACCESS, principal),
            refresh_token=self.issue(TokenKind.REFRESH, principal),
        )

    def validate(self, kind: TokenKind, token: str) -> TokenClaims:
        """Verify `token` against the secret for `kind` and decode it.

        Raises EmptyTokenError, InvalidTokenError, or ExpiredTokenError.
        A token is expired from the instant `now == exp` onwards.
        """
        if not token:
            raise EmptyTokenError("token is empty")

        secret, _ = self._keys[kind]
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                # Expiry is checked below against the injected clock.
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"invalid token: {e}") from e

        # The final base64url character carries padding bits the decoder
        # discards; only the encoding we issued may verify.
        if not _is_canonical_segment(token.rsplit(".", 1)[-1]):
            raise InvalidTokenError("invalid token: non-canonical signature")

        claims = _claims_from_payload(payload)
        if self._now() >= claims.expires_at:
            raise ExpiredTokenError("token has expired")
        return claims


def _coerce_principal(principal) -> uuid.UUID:
    if isinstance(principal, uuid.UUID):
        user_id = principal
    elif isinstance(principal, str) and principal:
        try:
            user_id = uuid.UUID(principal)
        except ValueError as e:
            raise InvalidPrincipalError("invalid user ID") from e
    else:
        raise InvalidPrincipalError("invalid user ID")

    if user_id.int == 0:
        raise InvalidPrincipalError("invalid user ID")
    return user_id


def _is_canonical_segment(segment: str) -> bool:
    try:
        raw = base64url_decode(segment)
    except (binascii.Error, ValueError):
        return False
    return base64url_encode(raw).decode("ascii") == segment


def _numeric_date(value) -> datetime:
    # bool is an int subclass; `true` is not a timestamp.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"not a NumericDate: {value!r}")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _claims_from_payload(payload: dict) -> TokenClaims:
    try:
        subject = uuid.UUID(payload["sub"])
        issued_at = _numeric_date(payload["iat"])
        expires_at = _numeric_date(payload["exp"])
    except (AttributeError, TypeError, ValueError, OverflowError, OSError) as e:
        raise InvalidTokenError("invalid token claims") from e

    if subject.int == 0 or not isinstance(payload["jti"], str):
        raise InvalidTokenError("invalid token claims")

    return TokenClaims(
        subject=subject,
        issued_at=issued_at,
        expires_at=expires_at,
        token_id=payload["jti"],
    )
