"""Admin model: the principal that owns a console session."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from edu_admin.models.base import Base, TimestampMixin, UUIDMixin


class AdminRole(enum.StrEnum):
    super_instructor = "super_instructor"
    instructor = "instructor"
    support = "support"
    manager = "manager"


class AdminPermission(enum.StrEnum):
    handle_admin_panel = "handle_admin_panel"
    manage_courses = "manage_courses"
    view_students = "view_students"


class AdminStatus(enum.StrEnum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"
    unverified = "unverified"


class Admin(UUIDMixin, TimestampMixin, Base):
    """Instructor or staff member of the admin console.

    ``hashed_password`` and ``refresh_token`` must never reach a response
    schema; response models list their fields explicitly.
    """

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(25), unique=True, index=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AdminRole.instructor.value
    )
    permission: Mapped[str] = mapped_column(
        String(30), nullable=False, default=AdminPermission.view_students.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AdminStatus.unverified.value
    )
    refresh_token: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    last_login: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_admin_role", "role"),
        Index("idx_admin_status", "status"),
        Index("idx_admin_refresh_token", "refresh_token"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == AdminStatus.active.value
