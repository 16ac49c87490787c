"""Session lifecycle: sign-in, verification, refresh rotation and sign-out.

Each operation returns a :class:`SessionResult` instead of raising for expected
outcomes, so routes and the session gate can branch on ``result.error``.
Only :func:`sign_in` and :func:`refresh_session` write a new refresh token;
:func:`verify_session` never writes.
"""

import hmac
from dataclasses import dataclass, field
from typing import Any

from edu_admin.auth.errors import (
    AuthErrorKind,
    ConfigurationError,
    TokenError,
    TokenExpiredError,
)
from edu_admin.auth.security import TokenKind, mint_token_pair, verify_password, verify_token
from edu_admin.config import get_settings
from edu_admin.models.admin import AdminStatus
from edu_admin.repositories.admin_repository import AdminRepository, normalize_username
from edu_admin.schemas.auth import SessionAdmin
from edu_admin.utils.logging import get_logger

logger = get_logger(__name__)
audit = get_logger("audit")

MIN_USERNAME_LENGTH = 4
MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class SessionTokens:
    admin_id: str
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class SessionResult:
    ok: bool
    error: AuthErrorKind | None = None
    message: str = ""
    tokens: SessionTokens | None = None
    admin: SessionAdmin | None = None
    detail: dict[str, Any] = field(default_factory=dict)

    @property
    def is_expired(self) -> bool:
        return self.error is AuthErrorKind.token_expired

    @classmethod
    def success(cls, message: str = "", **kwargs: Any) -> "SessionResult":
        return cls(ok=True, message=message, **kwargs)

    @classmethod
    def failure(cls, kind: AuthErrorKind, message: str, **detail: Any) -> "SessionResult":
        return cls(ok=False, error=kind, message=message, detail=detail)


def _configuration_failure(err: ConfigurationError) -> SessionResult:
    logger.error("Token signing is misconfigured: %s", err)
    return SessionResult.failure(AuthErrorKind.configuration_error, "Server configuration error")


def _tokens_equal(stored: str | None, presented: str) -> bool:
    if stored is None:
        return False
    return hmac.compare_digest(stored.encode(), presented.encode())


async def sign_in(repo: AdminRepository, username: str, password: str) -> SessionResult:
    """Check credentials and issue a token pair.

    Nothing is written until every check has passed; the new refresh token
    then replaces whatever the admin held before.
    """
    if isinstance(username, str):
        username = normalize_username(username)
    invalid: list[str] = []
    if not isinstance(username, str) or len(username) < MIN_USERNAME_LENGTH:
        invalid.append("username")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        invalid.append("password")
    if invalid:
        message = (
            "Valid username (minimum 4 characters) is required"
            if invalid[0] == "username"
            else "Valid password (minimum 8 characters) is required"
        )
        return SessionResult.failure(AuthErrorKind.validation_error, message, fields=invalid)

    admin = await repo.get_by_username(username)
    if admin is None:
        audit.info("AUDIT action=sign_in outcome=unknown_user username=%r", username)
        return SessionResult.failure(AuthErrorKind.not_found, "No admin found with this username")

    if not verify_password(password, admin.hashed_password):
        audit.info("AUDIT action=sign_in outcome=bad_password admin=%s", admin.id)
        return SessionResult.failure(AuthErrorKind.incorrect_credential, "Incorrect password")

    if admin.status != AdminStatus.active.value:
        audit.info(
            "AUDIT action=sign_in outcome=unavailable admin=%s status=%s", admin.id, admin.status
        )
        return SessionResult.failure(
            AuthErrorKind.account_unavailable,
            f"Account is {admin.status}. Contact support for assistance.",
            status=admin.status,
        )

    try:
        access_token, refresh_token = mint_token_pair(admin.id, admin.role)
    except ConfigurationError as err:
        return _configuration_failure(err)

    await repo.record_sign_in(admin.id, refresh_token)
    audit.info("AUDIT action=sign_in outcome=ok admin=%s role=%s", admin.id, admin.role)
    return SessionResult.success(
        "Signed in successfully",
        tokens=SessionTokens(str(admin.id), access_token, refresh_token),
    )


async def verify_session(repo: AdminRepository, token: str | None) -> SessionResult:
    """Validate an access token and confirm its admin still holds the role."""
    if not token:
        return SessionResult.failure(AuthErrorKind.unauthenticated, "No access token provided")

    try:
        claims = verify_token(token, TokenKind.access)
    except ConfigurationError as err:
        return _configuration_failure(err)
    except TokenExpiredError:
        return SessionResult.failure(AuthErrorKind.token_expired, "Session expired")
    except TokenError as err:
        message = (
            "Invalid token payload"
            if err.kind is AuthErrorKind.malformed_token
            else "Invalid token"
        )
        return SessionResult.failure(err.kind, message)

    if claims.role not in get_settings().allowed_roles:
        return SessionResult.failure(AuthErrorKind.forbidden, "Invalid role")

    row = await repo.get_session_view(claims.id, claims.role)
    if row is None:
        return SessionResult.failure(AuthErrorKind.unauthenticated, "Admin not found")

    return SessionResult.success(admin=SessionAdmin.model_validate(row))


async def refresh_session(repo: AdminRepository, token: str | None) -> SessionResult:
    """Exchange a refresh token for a new pair, rotating the stored token.

    A token that verifies but is not the one on record has either been
    rotated already or was stolen: the stored token is cleared so the
    legitimate holder must sign in again too.
    """
    if not token:
        return SessionResult.failure(AuthErrorKind.unauthenticated, "No refresh token provided")

    try:
        claims = verify_token(token, TokenKind.refresh)
    except ConfigurationError as err:
        return _configuration_failure(err)
    except TokenExpiredError:
        return SessionResult.failure(AuthErrorKind.token_expired, "Refresh token expired")
    except TokenError as err:
        return SessionResult.failure(err.kind, "Invalid refresh token")

    admin = await repo.get_by_id(claims.id)
    if admin is None:
        return SessionResult.failure(AuthErrorKind.unauthenticated, "Invalid refresh token")

    if not _tokens_equal(admin.refresh_token, token):
        await repo.set_refresh_token(admin.id, None)
        audit.warning("AUDIT action=refresh outcome=reuse_detected admin=%s", admin.id)
        return SessionResult.failure(AuthErrorKind.security_violation, "Security violation")

    try:
        access_token, new_refresh_token = mint_token_pair(admin.id, admin.role)
    except ConfigurationError as err:
        return _configuration_failure(err)

    if not await repo.rotate_refresh_token(admin.id, token, new_refresh_token):
        # another request rotated this token between our read and write
        await repo.set_refresh_token(admin.id, None)
        audit.warning("AUDIT action=refresh outcome=rotation_race admin=%s", admin.id)
        return SessionResult.failure(AuthErrorKind.security_violation, "Security violation")

    return SessionResult.success(
        "Token refreshed successfully",
        tokens=SessionTokens(str(admin.id), access_token, new_refresh_token),
    )


async def sign_out(repo: AdminRepository, token: str | None) -> SessionResult:
    """Revoke the admin's refresh token if one is presented. Never fails."""
    if not token:
        return SessionResult.success("Signed out successfully - no active session found")

    admin = await repo.get_by_refresh_token(token)
    if admin is not None:
        await repo.set_refresh_token(admin.id, None)
        audit.info("AUDIT action=sign_out admin=%s", admin.id)
    return SessionResult.success("Signed out successfully")
