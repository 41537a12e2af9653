"""Auth API — sign-up, sign-in, refresh.

Learn: Routes for user authentication:
- POST /user/auth/sign-up → create account → access token + refresh cookie
- POST /user/auth/sign-in → email/password → access token + refresh cookie
- POST /user/auth/refresh → refresh cookie → NEW access token + NEW cookie

The refresh token never appears in a response body. It lives in an
http-only, secure, strict same-site cookie scoped to the refresh path,
so page scripts cannot read it and other routes never receive it.
"""

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.responses import envelope
from fintrack.auth.dependencies import get_token_manager
from fintrack.auth.tokens import TokenKind, TokenManager, TokenPair
from fintrack.db.engine import get_db
from fintrack.schemas.user import AccessTokenRead, SignInRequest, SignUpRequest
from fintrack.services.user_service import UserService

router = APIRouter(prefix="/user/auth")

REFRESH_COOKIE = "refresh_token"
REFRESH_COOKIE_PATH = "/api/v1/user/auth/refresh"


def get_user_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    tokens: TokenManager = Depends(get_token_manager),
) -> UserService:
    return UserService(db, tokens, bcrypt_rounds=request.app.state.settings.bcrypt_rounds)


def _issue(response: Response, pair: TokenPair, tokens: TokenManager) -> AccessTokenRead:
    """Put the refresh token in its cookie; return the access token body."""
    max_age = int(tokens.ttl(TokenKind.REFRESH).total_seconds())
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=pair.refresh_token,
        max_age=max_age,
        expires=max_age,
        path=REFRESH_COOKIE_PATH,
        secure=True,
        httponly=True,
        samesite="strict",
    )
    return AccessTokenRead(access_token=pair.access_token)


@router.post("/sign-up", status_code=201)
async def sign_up(
    body: SignUpRequest,
    response: Response,
    svc: UserService = Depends(get_user_service),
):
    """Create a user and sign them in."""
    pair = await svc.sign_up(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return envelope(_issue(response, pair, svc.tokens), status_code=201)


@router.post("/sign-in")
async def sign_in(
    body: SignInRequest,
    response: Response,
    svc: UserService = Depends(get_user_service),
):
    """Email/password → access token + refresh cookie."""
    pair = await svc.sign_in(email=body.email, password=body.password)
    return envelope(_issue(response, pair, svc.tokens))


@router.post("/refresh")
async def refresh(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    svc: UserService = Depends(get_user_service),
):
    """Rotate: exchange the refresh cookie for a new access + refresh pair."""
    if not refresh_token:
        raise HTTPException(status_code=401, detail="missing refresh token")

    pair = await svc.refresh(refresh_token)
    return envelope(_issue(response, pair, svc.tokens))
