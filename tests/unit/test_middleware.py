"""Unit tests for session gate route classification and token transport."""

from unittest.mock import MagicMock

import pytest

from edu_admin.auth.errors import STATUS_BY_KIND, AuthErrorKind, status_for
from edu_admin.auth.middleware import is_gated, is_public_route
from edu_admin.auth.transport import bearer_token, refresh_token_from


class TestPublicRoutes:
    @pytest.mark.parametrize(
        "path",
        ["/admins/signin", "/admins/signup", "/admins/unverified", "/admins/unverified/abc"],
    )
    def test_public(self, path):
        assert is_public_route(path)

    @pytest.mark.parametrize(
        "path", ["/", "/admins", "/admins/signin/extra", "/admins/unverifiedx", "/courses"]
    )
    def test_not_public(self, path):
        assert not is_public_route(path)


class TestGatedPaths:
    @pytest.mark.parametrize("path", ["/", "/courses", "/admins/signin", "/students/42"])
    def test_gated(self, path):
        assert is_gated(path)

    @pytest.mark.parametrize(
        "path",
        [
            "/api/v1/admin/sign-in",
            "/static/app.css",
            "/health",
            "/ready",
            "/docs",
            "/openapi.json",
            "/favicon.ico",
            "/logo.SVG",
            "/images/banner.webp",
        ],
    )
    def test_ungated(self, path):
        assert not is_gated(path)


def _request(headers: dict | None = None, cookies: dict | None = None):
    request = MagicMock()
    request.headers = headers or {}
    request.cookies = cookies or {}
    return request


class TestTokenTransport:
    def test_bearer_is_case_insensitive(self):
        assert bearer_token(_request({"Authorization": "BEARER abc"})) == "abc"

    def test_bearer_missing(self):
        assert bearer_token(_request({"Authorization": "Basic abc"})) is None

    def test_refresh_prefers_header(self):
        request = _request({"Authorization": "Bearer from-header"}, {"refreshToken": "from-cookie"})
        assert refresh_token_from(request) == "from-header"

    def test_refresh_falls_back_to_cookie(self):
        request = _request(cookies={"refreshToken": "from-cookie"})
        assert refresh_token_from(request) == "from-cookie"


class TestErrorTaxonomy:
    def test_every_kind_has_a_status(self):
        assert set(STATUS_BY_KIND) == set(AuthErrorKind)

    def test_statuses(self):
        assert status_for(AuthErrorKind.validation_error) == 400
        assert status_for(AuthErrorKind.not_found) == 404
        assert status_for(AuthErrorKind.incorrect_credential) == 401
        assert status_for(AuthErrorKind.account_unavailable) == 403
        assert status_for(AuthErrorKind.token_expired) == 401
        assert status_for(AuthErrorKind.security_violation) == 403
        assert status_for(AuthErrorKind.configuration_error) == 500

