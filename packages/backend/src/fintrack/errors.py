"""Application error hierarchy.

Learn: Every error the service layer raises is an AppError subclass
carrying the HTTP status and a short public message. The API layer
renders them with one exception handler (see main.py), so services
never import FastAPI and routes never build error bodies by hand.

Internal distinctions (empty vs. malformed vs. expired token) live in
the exception type only. The public message is deliberately generic.
"""


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    public_message: str = "internal server error"


# ─── Configuration ──────────────────────────────────────


class TokenConfigError(ValueError):
    """Token secrets/lifetimes are unusable. Raised once, at startup."""


# ─── Identity & tokens ──────────────────────────────────


class InvalidPrincipalError(AppError):
    """Token issuance was requested for a nil or unparseable user ID."""

    status_code = 400
    public_message = "invalid user ID"


class AuthError(AppError):
    """Any failure to authenticate a presented credential."""

    status_code = 401
    public_message = "invalid or missing token"


class EmptyTokenError(AuthError):
    """Validation was called with an empty credential."""


class InvalidTokenError(AuthError):
    """Signature mismatch, decode failure, or malformed claims."""


class ExpiredTokenError(InvalidTokenError):
    """Structurally valid token whose expiry has passed."""


class InvalidCredentialsError(AuthError):
    public_message = "invalid credentials"


# ─── Users ──────────────────────────────────────────────


class UserAlreadyExistsError(AppError):
    status_code = 409
    public_message = "user already exists"


class EmailInUseError(AppError):
    status_code = 409
    public_message = "email already in use"


class UserNotFoundError(AppError):
    status_code = 404
    public_message = "user not found"


# ─── Accounts & transactions ────────────────────────────


class AccountNotFoundError(AppError):
    status_code = 404
    public_message = "account not found"
