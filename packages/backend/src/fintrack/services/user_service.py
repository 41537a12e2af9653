"""User service — sign-up, sign-in, token refresh, profile changes.

Learn: Service layer separates business logic from HTTP routing.
Routes call services, services call the database and the TokenManager.
Every failure is an AppError subclass; routes never translate errors.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.auth.password import hash_password, verify_password
from fintrack.auth.tokens import TokenKind, TokenManager, TokenPair
from fintrack.db.models import User
from fintrack.errors import (
    EmailInUseError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

logger = structlog.get_logger()


class UserService:
    """Business logic for user identity and credentials."""

    def __init__(self, db: AsyncSession, tokens: TokenManager, bcrypt_rounds: int = 12):
        self.db = db
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    # ─── Auth ───────────────────────────────────────────

    async def sign_up(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> TokenPair:
        if await self._get_by_email(email):
            raise UserAlreadyExistsError(email)

        user = User(
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same email.
            await self.db.rollback()
            raise UserAlreadyExistsError(email)

        logger.info("user.signed_up", user_id=str(user.id))
        return self.tokens.issue_pair(user.id)

    async def sign_in(self, email: str, password: str) -> TokenPair:
        user = await self._get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError(email)

        logger.info("user.signed_in", user_id=str(user.id))
        return self.tokens.issue_pair(user.id)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a valid refresh token for a brand-new pair.

        Learn: This is rotation, not renewal: both tokens are new. The
        presented refresh token is NOT invalidated (there is no server-side
        store to invalidate it against) and stays usable until it expires.
        """
        claims = self.tokens.validate(TokenKind.REFRESH, refresh_token)
        logger.info("user.tokens_refreshed", user_id=str(claims.subject))
        return self.tokens.issue_pair(claims.subject)

    # ─── Profile ────────────────────────────────────────

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    async def update_profile(
        self,
        user_id: uuid.UUID,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        user = await self.get_user(user_id)

        changed = False
        if first_name and first_name != user.first_name:
            user.first_name = first_name
            changed = True
        if last_name and last_name != user.last_name:
            user.last_name = last_name
            changed = True

        if changed:
            await self.db.commit()
        return user

    async def change_email(
        self, user_id: uuid.UUID, new_email: str, current_password: str
    ) -> User:
        user = await self.get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError(str(user_id))

        if new_email != user.email and await self._get_by_email(new_email):
            raise EmailInUseError(new_email)

        user.email = new_email
        await self.db.commit()
        logger.info("user.email_changed", user_id=str(user_id))
        return user

    async def change_password(
        self, user_id: uuid.UUID, new_password: str, current_password: str
    ) -> None:
        user = await self.get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError(str(user_id))

        user.password_hash = hash_password(new_password, rounds=self.bcrypt_rounds)
        await self.db.commit()
        logger.info("user.password_changed", user_id=str(user_id))

    async def _get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()
