"""Pydantic schemas for client-facing admin projections."""

from datetime import datetime

from pydantic import BaseModel, Field

from edu_admin.models.admin import AdminStatus


class AdminResponse(BaseModel):
    """Client-facing admin record; never carries password or refresh token."""

    id: str
    username: str
    email: str | None = None
    phone: str | None = None
    role: str
    permission: str
    status: str
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class AdminStatusUpdate(BaseModel):
    status: AdminStatus


class AdminBulkStatusUpdate(BaseModel):
    ids: list[str] = Field(min_length=1, max_length=100)
    status: AdminStatus


class AdminBulkStatusResponse(BaseModel):
    updated: int
