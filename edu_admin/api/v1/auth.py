"""Authentication API endpoints for admins."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from edu_admin.auth.dependencies import CurrentAdmin
from edu_admin.auth.errors import AuthErrorKind
from edu_admin.auth.security import hash_password
from edu_admin.auth.sessions import (
    SessionResult,
    SessionTokens,
    refresh_session,
    sign_in,
    sign_out,
    verify_session,
)
from edu_admin.auth.transport import (
    access_token_from,
    clear_session_cookies,
    error_response,
    refresh_token_from,
    set_session_cookies,
)
from edu_admin.config import get_settings
from edu_admin.dependencies import AdminRepo
from edu_admin.models.admin import Admin, AdminPermission, AdminRole, AdminStatus
from edu_admin.schemas.auth import (
    AuthErrorResponse,
    SessionAdmin,
    SessionResponse,
    SignInRequest,
    SignOutResponse,
    SignUpRequest,
    SignUpResponse,
    VerifySessionResponse,
)

router = APIRouter()

_ERRORS = {
    code: {"model": AuthErrorResponse}
    for code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
}


def _session_response(message: str, tokens: SessionTokens) -> JSONResponse:
    body = SessionResponse(message=message, id=tokens.admin_id)
    response = JSONResponse(content=body.model_dump(by_alias=True))
    set_session_cookies(response, tokens)
    return response


@router.post("/sign-in", response_model=SessionResponse, responses=_ERRORS)
async def sign_in_admin(body: SignInRequest, repo: AdminRepo) -> JSONResponse:
    """Authenticate an admin and set the access/refresh cookies."""
    result = await sign_in(repo, body.username, body.password)
    if not result.ok or result.tokens is None:
        return error_response(result)
    return _session_response(result.message, result.tokens)


@router.get("/verify-session", response_model=VerifySessionResponse, responses=_ERRORS)
async def verify_admin_session(
    request: Request, repo: AdminRepo
) -> VerifySessionResponse | JSONResponse:
    """Check the access token (cookie first, then bearer header)."""
    result = await verify_session(repo, access_token_from(request))
    if not result.ok or result.admin is None:
        return error_response(result, session_state=True)
    return VerifySessionResponse(admin=result.admin)


@router.get("/refresh-token", response_model=SessionResponse, responses=_ERRORS)
async def refresh_admin_token(request: Request, repo: AdminRepo) -> JSONResponse:
    """Rotate the refresh token (bearer header first, then cookie).

    Every failure clears both cookies so the client must sign in again.
    """
    result = await refresh_session(repo, refresh_token_from(request))
    if not result.ok or result.tokens is None:
        return error_response(result, clear_cookies=True)
    return _session_response(result.message, result.tokens)


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out_admin(request: Request, repo: AdminRepo) -> JSONResponse:
    """Revoke the stored refresh token and clear cookies. Always 200."""
    settings = get_settings()
    result = await sign_out(repo, request.cookies.get(settings.refresh_cookie_name))
    body = SignOutResponse(message=result.message)
    response = JSONResponse(content=body.model_dump(by_alias=True))
    clear_session_cookies(response, settings)
    return response


@router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": AuthErrorResponse}},
)
async def sign_up_admin(body: SignUpRequest, repo: AdminRepo) -> SignUpResponse | JSONResponse:
    """Create an admin account; it stays ``unverified`` until activated."""
    existing = await repo.find_conflict(body.username, body.email, body.phone)
    if existing is not None:
        field = "username"
        if existing.username != body.username:
            if body.email and existing.email == body.email.lower():
                field = "email"
            elif body.phone and existing.phone == body.phone:
                field = "phone"
        return error_response(
            SessionResult.failure(
                AuthErrorKind.conflict, f"Admin with this {field} already exists"
            )
        )

    admin = await repo.create(
        Admin(
            username=body.username,
            email=body.email.lower() if body.email else None,
            phone=body.phone,
            hashed_password=hash_password(body.password),
            role=AdminRole.instructor.value,
            permission=AdminPermission.view_students.value,
            status=AdminStatus.unverified.value,
        )
    )
    return SignUpResponse(message="Admin created successfully", username=admin.username)


@router.get("/me", response_model=SessionAdmin)
async def get_current_admin_info(current_admin: CurrentAdmin) -> SessionAdmin:
    """Return the authenticated admin's session view."""
    return current_admin
