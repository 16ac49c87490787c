"""How session tokens travel: cookies, bearer headers and error bodies."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from edu_admin.auth.errors import AuthErrorKind, status_for
from edu_admin.auth.sessions import SessionResult, SessionTokens
from edu_admin.config import Settings, get_settings
from edu_admin.schemas.auth import AuthErrorResponse

_BEARER = "bearer "


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header[: len(_BEARER)].lower() != _BEARER:
        return None
    return header[len(_BEARER) :].strip() or None


def access_token_from(request: Request) -> str | None:
    """Cookie first, then ``Authorization: Bearer``."""
    settings = get_settings()
    return request.cookies.get(settings.access_cookie_name) or bearer_token(request)


def refresh_token_from(request: Request) -> str | None:
    """``Authorization: Bearer`` first, then cookie."""
    settings = get_settings()
    return bearer_token(request) or request.cookies.get(settings.refresh_cookie_name)


def set_session_cookies(
    response: Response, tokens: SessionTokens, settings: Settings | None = None
) -> None:
    settings = settings or get_settings()
    for name, value, max_age in (
        (settings.access_cookie_name, tokens.access_token, settings.access_token_expire_seconds),
        (settings.refresh_cookie_name, tokens.refresh_token, settings.refresh_token_expire_seconds),
    ):
        response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            path="/",
            httponly=True,
            secure=settings.secure_cookies,
            samesite="strict",
        )


def clear_session_cookies(response: Response, settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(
            key=name,
            path="/",
            httponly=True,
            secure=settings.secure_cookies,
            samesite="strict",
        )


def error_response(
    result: SessionResult, *, clear_cookies: bool = False, session_state: bool = False
) -> JSONResponse:
    """Translate a failed :class:`SessionResult` into its HTTP response.

    ``session_state`` adds ``isValid``/``isExpired`` for verification replies.
    """
    kind = result.error or AuthErrorKind.unauthenticated
    body = AuthErrorResponse(
        error=result.message,
        type=kind.value,
        is_valid=False if session_state else None,
        is_expired=result.is_expired if session_state else None,
        status=result.detail.get("status"),
        fields=result.detail.get("fields"),
    )
    response = JSONResponse(
        status_code=status_for(kind),
        content=body.model_dump(by_alias=True, exclude_none=True),
    )
    if clear_cookies:
        clear_session_cookies(response)
    return response
