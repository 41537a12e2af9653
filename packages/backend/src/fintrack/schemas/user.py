"""Pydantic schemas for sign-up/sign-in and the user profile.

Learn: Pydantic v2 models validate request/response data. Separate
"Request" schemas (input) from "Read" schemas (output) for clean APIs.
"""

import string
import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _check_password_strength(value: str) -> str:
    """Require upper, lower, digit, and punctuation/symbol characters."""
    has_upper = any(c.isupper() for c in value)
    has_lower = any(c.islower() for c in value)
    has_digit = any(c.isdigit() for c in value)
    has_special = any(
        c in string.punctuation or not (c.isalnum() or c.isspace()) for c in value
    )
    if not (has_upper and has_lower and has_digit and has_special):
        raise ValueError(
            "password must contain upper and lower case letters, "
            "a digit, and a special character"
        )
    return value


# ─── Auth ───────────────────────────────────────────────

class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=6, max_length=254)
    password: str = Field(..., min_length=8, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_password_strength(value)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=6, max_length=254)
    password: str = Field(..., min_length=8, max_length=72)


class AccessTokenRead(BaseModel):
    """Body of sign-up/sign-in/refresh. The refresh token travels as a cookie."""
    access_token: str
    token_type: str = "bearer"


# ─── Profile ────────────────────────────────────────────

class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)


class EmailUpdate(BaseModel):
    email: str = Field(..., min_length=6, max_length=254)
    password: str = Field(..., min_length=8, max_length=72)


class PasswordUpdate(BaseModel):
    current_password: str = Field(..., min_length=8, max_length=72)
    new_password: str = Field(..., min_length=8, max_length=72)
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_password_strength(value)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("confirm_password must match new_password")
        return self
