"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers (or at
include_router level) to extract and validate the caller's identity.

The gate is pass/fail:
1. No `Authorization: Bearer ...` header → 401, no crypto work done.
2. Token present but rejected by the TokenManager → 401 plus
   `X-Token-Expired: true`, telling the client to try the refresh
   cookie instead of asking the user for credentials again.
3. Token valid → a Principal is attached to request.state and returned.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, Request

from fintrack.auth.tokens import TokenClaims, TokenKind, TokenManager
from fintrack.errors import AppError, AuthError

BEARER_PREFIX = "Bearer "
TOKEN_EXPIRED_HEADER = "X-Token-Expired"


@dataclass(frozen=True)
class Principal:
    """The authenticated user behind a request."""

    user_id: uuid.UUID
    claims: TokenClaims


def get_token_manager(request: Request) -> TokenManager:
    """The app-wide TokenManager built by create_app()."""
    return request.app.state.token_manager


async def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenManager = Depends(get_token_manager),
) -> Principal:
    """Resolve the access token to a Principal (required, 401 otherwise)."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise HTTPException(
            status_code=401,
            detail="authorization header missing or malformed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[len(BEARER_PREFIX):]
    try:
        claims = tokens.validate(TokenKind.ACCESS, token)
    except AuthError:
        raise HTTPException(
            status_code=401,
            detail="invalid or expired access token",
            headers={
                TOKEN_EXPIRED_HEADER: "true",
                "WWW-Authenticate": 'Bearer error="invalid_token"',
            },
        )

    principal = Principal(user_id=claims.subject, claims=claims)
    request.state.principal = principal
    structlog.contextvars.bind_contextvars(user_id=str(principal.user_id))
    return principal


def principal_from_request(request: Request) -> Principal:
    """Read back the Principal bound by get_current_principal.

    Calling this on a route that is not behind the auth gate is a wiring
    bug, reported as a 500.
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AppError("no principal bound to request")
    return principal
