"""Test fixtures — a fresh app and in-memory database per test.

Learn: create_app() takes its Settings explicitly, so each test builds
its own app pointed at `sqlite+aiosqlite://`. The engine uses a single
shared connection (StaticPool), so the schema created here is the one
every request sees, and it vanishes when the engine is disposed.

httpx's ASGITransport does not run the lifespan, so the fixture creates
the schema itself.
"""

import uuid
from dataclasses import dataclass
from http.cookies import SimpleCookie

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fintrack.config import Settings
from fintrack.db.models import Base
from fintrack.main import create_app

TEST_ACCESS_SECRET = "test-access-secret-0123456789abcdef0123456789"
TEST_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012345678"
TEST_PASSWORD = "Str0ng!Passw0rd"


@dataclass
class SignedUpUser:
    email: str
    password: str
    access_token: str
    refresh_token: str

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"}


def refresh_cookie(response) -> str:
    """Pull the refresh token out of a response's Set-Cookie header."""
    cookie = SimpleCookie()
    cookie.load(response.headers["set-cookie"])
    return cookie["refresh_token"].value


@pytest.fixture()
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        access_token_secret=TEST_ACCESS_SECRET,
        refresh_token_secret=TEST_REFRESH_SECRET,
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture()
async def app(settings):
    app = create_app(settings)
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def sign_up(client):
    """Register a fresh user; returns their email, password, and tokens."""

    async def _sign_up(email=None, password=TEST_PASSWORD) -> SignedUpUser:
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/v1/user/auth/sign-up",
            json={
                "email": email,
                "password": password,
                "first_name": "Test",
                "last_name": "User",
            },
        )
        assert r.status_code == 201, r.text
        return SignedUpUser(
            email=email,
            password=password,
            access_token=r.json()["data"]["access_token"],
            refresh_token=refresh_cookie(r),
        )

    return _sign_up
