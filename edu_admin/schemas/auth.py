"""Pydantic schemas for sign-in, sign-up and session endpoints.

Session responses are serialized in camelCase (``isValid``, ``isExpired``)
because the console frontend reads them that way.
"""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
_PHONE_RULE = re.compile(r"^\+?[1-9]\d{6,14}$")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignInRequest(BaseModel):
    """Request body for sign-in; length rules are checked by the issuer."""

    username: str
    password: str


class SignUpRequest(BaseModel):
    """Request body for creating an admin account."""

    username: str = Field(min_length=4, max_length=25)
    password: str = Field(min_length=8, max_length=128)
    email: EmailStr | None = None
    phone: str | None = None

    @field_validator("username", mode="before")
    @classmethod
    def normalize_username(cls, v: object) -> object:
        # length limits apply to the stored form
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        if not _PASSWORD_RULE.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase "
                "letter, one number, and one special character"
            )
        return v

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: str | None) -> str | None:
        if v is None:
            return v
        cleaned = re.sub(r"[\s()-]", "", v)
        if not _PHONE_RULE.match(cleaned):
            raise ValueError("Invalid phone number format")
        return cleaned

    @model_validator(mode="after")
    def email_or_phone(self) -> "SignUpRequest":
        if not self.email and not self.phone:
            raise ValueError("Either email or phone number must be provided")
        return self


class SessionAdmin(BaseModel):
    """The projection of an admin returned by session verification."""

    id: str
    username: str
    role: str
    status: str

    model_config = {"from_attributes": True}


class SessionResponse(_CamelModel):
    """Response for sign-in and refresh."""

    success: bool = True
    message: str
    id: str


class SignOutResponse(_CamelModel):
    success: bool = True
    message: str


class SignUpResponse(_CamelModel):
    success: bool = True
    message: str
    username: str


class VerifySessionResponse(_CamelModel):
    is_valid: bool = True
    admin: SessionAdmin


class AuthErrorResponse(_CamelModel):
    """Error body shared by all auth endpoints.

    ``isValid``/``isExpired`` are only set by session verification.
    """

    success: bool = False
    error: str
    type: str
    is_valid: bool | None = None
    is_expired: bool | None = None
    status: str | None = None
    fields: list[str] | None = None
