"""Integration tests for the session gate in front of console pages."""

from datetime import UTC, datetime, timedelta

import pytest

from edu_admin.auth.security import TokenKind, mint_token
from tests.conftest import cookie_header, set_cookies


def _expired_access(admin) -> str:
    return mint_token(
        admin.id, admin.role, TokenKind.access, now=datetime.now(UTC) - timedelta(hours=2)
    )


async def _sign_in(client):
    resp = await client.post(
        "/api/v1/admin/sign-in", json={"username": "johndoe12", "password": "Passw0rd!"}
    )
    cookies = set_cookies(resp)
    return cookies["accessToken"].value, cookies["refreshToken"].value


@pytest.mark.asyncio
class TestGatedPage:
    async def test_valid_session_passes(self, client, store):
        admin = store.add()
        access, _ = await _sign_in(client)

        resp = await client.get("/", headers=cookie_header(accessToken=access))

        assert resp.status_code == 200
        body = resp.json()
        assert body["page"] == "home"
        assert body["admin"]["id"] == admin.id
        assert "set-cookie" not in resp.headers

    async def test_no_session_redirects_to_sign_in(self, client):
        resp = await client.get("/")

        assert resp.status_code == 307
        assert resp.headers["location"] == "/admins/signin"
        cleared = set_cookies(resp)
        assert cleared["accessToken"]["max-age"] == "0"
        assert cleared["refreshToken"]["max-age"] == "0"

    async def test_invalid_access_cookie_redirects(self, client, store):
        store.add()
        _, refresh = await _sign_in(client)
        headers = cookie_header(accessToken="garbage", refreshToken=refresh)
        resp = await client.get("/", headers=headers)
        # invalid, not expired: no refresh attempt
        assert resp.status_code == 307
        assert resp.headers["location"] == "/admins/signin"

    async def test_expired_access_is_refreshed(self, client, store):
        admin = store.add()
        _, refresh = await _sign_in(client)

        resp = await client.get(
            "/", headers=cookie_header(accessToken=_expired_access(admin), refreshToken=refresh)
        )

        assert resp.status_code == 200
        assert resp.json()["admin"]["username"] == "johndoe12"
        rotated = set_cookies(resp)
        assert rotated["refreshToken"].value != refresh
        assert admin.refresh_token == rotated["refreshToken"].value
        assert rotated["accessToken"]["max-age"] == "3600"

    async def test_expired_access_with_stale_refresh_is_denied(self, client, store):
        admin = store.add()
        _, refresh = await _sign_in(client)
        await _sign_in(client)  # newer session replaces the stored token

        resp = await client.get(
            "/", headers=cookie_header(accessToken=_expired_access(admin), refreshToken=refresh)
        )

        assert resp.status_code == 307
        assert resp.headers["location"] == "/admins/signin"
        assert admin.refresh_token is None

    async def test_expired_access_without_refresh_is_denied(self, client, store):
        admin = store.add()
        resp = await client.get("/", headers=cookie_header(accessToken=_expired_access(admin)))
        assert resp.status_code == 307


@pytest.mark.asyncio
class TestPublicPages:
    async def test_signed_in_admin_is_sent_home(self, client, store):
        store.add()
        access, _ = await _sign_in(client)

        resp = await client.get("/admins/signin", headers=cookie_header(accessToken=access))

        assert resp.status_code == 307
        assert resp.headers["location"] == "/"

    async def test_anonymous_visitor_passes_through(self, client):
        resp = await client.get("/admins/signin")
        # the gate lets it through; no page is mounted at this path
        assert resp.status_code == 404

    async def test_unverified_pages_are_public(self, client):
        resp = await client.get("/admins/unverified/pending")
        assert resp.status_code == 404


@pytest.mark.asyncio
class TestUngatedPaths:
    async def test_static_asset(self, client):
        resp = await client.get("/static/app.css")
        assert resp.status_code == 404

    async def test_api_routes_are_not_redirected(self, client):
        resp = await client.get("/api/v1/admin/verify-session")
        assert resp.status_code == 401
