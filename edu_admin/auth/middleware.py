"""Session gate in front of the console pages.

Per request: public pages pass through (or bounce signed-in admins home),
everything else is verified, refreshed once if the access token has expired,
or denied with cleared cookies and a redirect to the sign-in page.
"""

import re

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse, Response

from edu_admin.auth.sessions import refresh_session, verify_session
from edu_admin.auth.transport import clear_session_cookies, set_session_cookies
from edu_admin.config import get_settings
from edu_admin.utils.logging import get_logger

logger = get_logger(__name__)

PUBLIC_ROUTES: tuple[str | re.Pattern[str], ...] = (
    "/admins/signin",
    "/admins/signup",
    re.compile(r"^/admins/unverified($|/.*)"),
)

UNGATED_PREFIXES = (
    "/api/",
    "/static/",
    "/health",
    "/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)

_ASSET = re.compile(r".*\.(?:svg|png|jpg|jpeg|gif|webp|ico|css|js)$", re.IGNORECASE)


def is_public_route(path: str) -> bool:
    return any(
        path == route if isinstance(route, str) else route.match(path) is not None
        for route in PUBLIC_ROUTES
    )


def is_gated(path: str) -> bool:
    if path.startswith(UNGATED_PREFIXES):
        return False
    return _ASSET.match(path) is None


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Allow, refresh or deny each console request based on its cookies."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not is_gated(path):
            return await call_next(request)

        settings = get_settings()
        access_token = request.cookies.get(settings.access_cookie_name)

        if is_public_route(path):
            if access_token:
                return RedirectResponse(settings.home_path, status_code=307)
            return await call_next(request)

        store = request.app.state.admin_store
        async with store.repository() as repo:
            session = await verify_session(repo, access_token)
        if session.ok:
            request.state.admin = session.admin
            return await call_next(request)

        if not session.is_expired:
            logger.info("Session rejected on %s: %s", path, session.error)
            return self._deny(settings.sign_in_path)

        async with store.repository() as repo:
            refreshed = await refresh_session(
                repo, request.cookies.get(settings.refresh_cookie_name)
            )
        if not refreshed.ok or refreshed.tokens is None:
            logger.info("Session refresh failed on %s: %s", path, refreshed.error)
            return self._deny(settings.sign_in_path)

        async with store.repository() as repo:
            renewed = await verify_session(repo, refreshed.tokens.access_token)
        if not renewed.ok:
            logger.info("Refreshed session rejected on %s: %s", path, renewed.error)
            return self._deny(settings.sign_in_path)
        request.state.admin = renewed.admin
        response = await call_next(request)
        set_session_cookies(response, refreshed.tokens, settings)
        return response

    @staticmethod
    def _deny(sign_in_path: str) -> Response:
        response = RedirectResponse(sign_in_path, status_code=307)
        clear_session_cookies(response)
        return response
