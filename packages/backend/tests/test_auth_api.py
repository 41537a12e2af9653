"""Auth API tests — sign-up, sign-in, and the refresh protocol.

Learn: Tests cover:
1. Sign-up → access token in body, refresh token in a locked-down cookie
2. Sign-in with good/bad credentials
3. Refresh rotates BOTH tokens, and older tokens keep working until expiry
"""

import uuid

import pytest

from conftest import TEST_PASSWORD, refresh_cookie

REFRESH_URL = "/api/v1/user/auth/refresh"


def _cookie_header(refresh_token: str) -> dict:
    return {"Cookie": f"refresh_token={refresh_token}"}


# ═══════════════════════════════════════════════════════════
# Sign-up
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_sign_up(client):
    r = await client.post(
        "/api/v1/user/auth/sign-up",
        json={
            "email": f"new-{uuid.uuid4().hex[:8]}@example.com",
            "password": TEST_PASSWORD,
            "first_name": "Ada",
            "last_name": "Lovelace",
        },
    )
    assert r.status_code == 201
    body = r.json()
    assert body["status_code"] == 201
    assert body["data"]["access_token"]
    assert body["data"]["token_type"] == "bearer"
    assert "refresh_token" not in body["data"]


@pytest.mark.asyncio
async def test_sign_up_sets_locked_down_refresh_cookie(client, settings):
    r = await client.post(
        "/api/v1/user/auth/sign-up",
        json={
            "email": f"cookie-{uuid.uuid4().hex[:8]}@example.com",
            "password": TEST_PASSWORD,
            "first_name": "Ada",
            "last_name": "Lovelace",
        },
    )
    set_cookie = r.headers["set-cookie"]
    assert set_cookie.startswith("refresh_token=")
    assert "HttpOnly" in set_cookie
    assert "Secure" in set_cookie
    assert "SameSite=strict" in set_cookie
    assert f"Path={REFRESH_URL}" in set_cookie
    max_age = settings.refresh_token_expire_days * 24 * 3600
    assert f"Max-Age={max_age}" in set_cookie
    assert refresh_cookie(r)


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(client, sign_up):
    user = await sign_up()
    r = await client.post(
        "/api/v1/user/auth/sign-up",
        json={
            "email": user.email,
            "password": TEST_PASSWORD,
            "first_name": "Second",
            "last_name": "User",
        },
    )
    assert r.status_code == 409
    assert r.json() == {"status_code": 409, "error": "user already exists"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "password",
    ["short1!", "alllowercase1!", "ALLUPPERCASE1!", "NoDigitsHere!", "NoSpecial123"],
)
async def test_sign_up_weak_password(client, password):
    r = await client.post(
        "/api/v1/user/auth/sign-up",
        json={
            "email": f"weak-{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "first_name": "Weak",
            "last_name": "Password",
        },
    )
    assert r.status_code == 422
    assert r.json() == {"status_code": 422, "error": "invalid input"}


# ═══════════════════════════════════════════════════════════
# Sign-in
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_sign_in(client, sign_up):
    user = await sign_up()
    r = await client.post(
        "/api/v1/user/auth/sign-in",
        json={"email": user.email, "password": user.password},
    )
    assert r.status_code == 200
    assert r.json()["data"]["access_token"]
    assert refresh_cookie(r)


@pytest.mark.asyncio
async def test_sign_in_wrong_password(client, sign_up):
    user = await sign_up()
    r = await client.post(
        "/api/v1/user/auth/sign-in",
        json={"email": user.email, "password": "Wr0ng!Password"},
    )
    assert r.status_code == 401
    assert r.json()["error"] == "invalid credentials"
    assert "set-cookie" not in r.headers


@pytest.mark.asyncio
async def test_sign_in_nonexistent_user(client):
    r = await client.post(
        "/api/v1/user/auth/sign-in",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD},
    )
    assert r.status_code == 401
    assert r.json()["error"] == "invalid credentials"


# ═══════════════════════════════════════════════════════════
# Refresh
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_refresh_rotates_both_tokens(client, sign_up):
    """sign-up → (access1, refresh1) → refresh → (access2, refresh2)."""
    user = await sign_up()

    r = await client.post(REFRESH_URL, headers=_cookie_header(user.refresh_token))
    assert r.status_code == 200
    access2 = r.json()["data"]["access_token"]
    refresh2 = refresh_cookie(r)

    assert access2 != user.access_token
    assert refresh2 != user.refresh_token

    # No forced invalidation: both access tokens work.
    for token in (user.access_token, access2):
        r = await client.get(
            "/api/v1/user/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert r.status_code == 200
        assert r.json()["data"]["email"] == user.email


@pytest.mark.asyncio
async def test_consumed_refresh_token_still_valid(client, sign_up):
    """Rotation does not revoke: the old refresh token works until it expires."""
    user = await sign_up()

    r1 = await client.post(REFRESH_URL, headers=_cookie_header(user.refresh_token))
    r2 = await client.post(REFRESH_URL, headers=_cookie_header(user.refresh_token))
    assert r1.status_code == 200
    assert r2.status_code == 200
    assert refresh_cookie(r1) != refresh_cookie(r2)


@pytest.mark.asyncio
async def test_refresh_without_cookie(client):
    r = await client.post(REFRESH_URL)
    assert r.status_code == 401
    assert r.json() == {"status_code": 401, "error": "missing refresh token"}


@pytest.mark.asyncio
async def test_refresh_with_access_token_fails(client, sign_up):
    """Access tokens are signed with a different secret."""
    user = await sign_up()
    r = await client.post(REFRESH_URL, headers=_cookie_header(user.access_token))
    assert r.status_code == 401
    assert r.json()["error"] == "invalid or missing token"
    assert "set-cookie" not in r.headers


@pytest.mark.asyncio
async def test_refresh_with_garbage(client):
    r = await client.post(REFRESH_URL, headers=_cookie_header("garbage"))
    assert r.status_code == 401
    assert r.json()["error"] == "invalid or missing token"


@pytest.mark.asyncio
async def test_refresh_token_not_accepted_as_bearer(client, sign_up):
    user = await sign_up()
    r = await client.get(
        "/api/v1/user/me",
        headers={"Authorization": f"Bearer {user.refresh_token}"},
    )
    assert r.status_code == 401
    assert r.headers["X-Token-Expired"] == "true"
