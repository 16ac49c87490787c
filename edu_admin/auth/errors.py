"""Error kinds for the session lifecycle and the exceptions raised by the token layer."""

import enum

from fastapi import status


class AuthErrorKind(enum.StrEnum):
    validation_error = "validation_error"
    not_found = "not_found"
    incorrect_credential = "incorrect_credential"
    account_unavailable = "account_unavailable"
    unauthenticated = "unauthenticated"
    token_expired = "token_expired"
    token_invalid = "token_invalid"
    malformed_token = "malformed_token"
    forbidden = "forbidden"
    security_violation = "security_violation"
    configuration_error = "configuration_error"
    conflict = "conflict"


STATUS_BY_KIND: dict[AuthErrorKind, int] = {
    AuthErrorKind.validation_error: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    AuthErrorKind.incorrect_credential: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.account_unavailable: status.HTTP_403_FORBIDDEN,
    AuthErrorKind.unauthenticated: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.token_expired: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.token_invalid: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.malformed_token: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.forbidden: status.HTTP_403_FORBIDDEN,
    AuthErrorKind.security_violation: status.HTTP_403_FORBIDDEN,
    AuthErrorKind.configuration_error: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthErrorKind.conflict: status.HTTP_409_CONFLICT,
}


def status_for(kind: AuthErrorKind) -> int:
    return STATUS_BY_KIND[kind]


class ConfigurationError(Exception):
    """A signing secret required to mint or verify a token is not configured."""


class TokenError(Exception):
    """Base class for token verification failures."""

    kind: AuthErrorKind = AuthErrorKind.token_invalid


class TokenExpiredError(TokenError):
    kind = AuthErrorKind.token_expired


class TokenInvalidError(TokenError):
    kind = AuthErrorKind.token_invalid


class MalformedTokenError(TokenError):
    kind = AuthErrorKind.malformed_token
