"""JWT token and password hashing utilities."""

import enum
import uuid
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from edu_admin.auth.errors import (
    ConfigurationError,
    MalformedTokenError,
    TokenExpiredError,
    TokenInvalidError,
)
from edu_admin.config import Settings, get_settings


class TokenKind(enum.StrEnum):
    access = "access"
    refresh = "refresh"


class TokenClaims(BaseModel):
    """Validated payload of an access or refresh token."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    role: str
    iat: int
    exp: int
    jti: str | None = None


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a bcrypt hash (constant-time)."""
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def _secret_for(kind: TokenKind, settings: Settings) -> str:
    secret = (
        settings.access_token_secret
        if kind is TokenKind.access
        else settings.refresh_token_secret
    )
    if secret is None or not secret.get_secret_value():
        raise ConfigurationError(f"{kind.value} token secret is not configured")
    return secret.get_secret_value()


def _lifetime_for(kind: TokenKind, settings: Settings) -> int:
    if kind is TokenKind.access:
        return settings.access_token_expire_seconds
    return settings.refresh_token_expire_seconds


def mint_token(
    admin_id: str,
    role: str,
    kind: TokenKind,
    *,
    now: datetime | None = None,
    expires_in: int | None = None,
) -> str:
    """Sign a token carrying ``{id, role}`` for ``kind``.

    ``now`` and ``expires_in`` override the clock and the configured lifetime.
    """
    settings = get_settings()
    secret = _secret_for(kind, settings)
    issued_at = now or datetime.now(UTC)
    lifetime = expires_in if expires_in is not None else _lifetime_for(kind, settings)
    payload = {
        "id": str(admin_id),
        "role": role,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(seconds=lifetime)).timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def mint_token_pair(admin_id: str, role: str) -> tuple[str, str]:
    """Return ``(access_token, refresh_token)``."""
    return (
        mint_token(admin_id, role, TokenKind.access),
        mint_token(admin_id, role, TokenKind.refresh),
    )


def verify_token(token: str, kind: TokenKind) -> TokenClaims:
    """Decode and validate a token of ``kind``.

    Raises TokenExpiredError, TokenInvalidError or MalformedTokenError; an
    expired token is never reported as invalid.
    """
    settings = get_settings()
    secret = _secret_for(kind, settings)
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as err:
        raise TokenExpiredError(f"{kind.value} token expired") from err
    except JWTError as err:
        raise TokenInvalidError(f"invalid {kind.value} token") from err

    if not payload.get("id") or not payload.get("role"):
        raise MalformedTokenError("token payload is missing id or role")
    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as err:
        raise MalformedTokenError("token payload is malformed") from err
