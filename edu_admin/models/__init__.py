"""Database models package."""

from edu_admin.models.admin import Admin, AdminPermission, AdminRole, AdminStatus
from edu_admin.models.base import Base

__all__ = [
    "Base",
    "Admin",
    "AdminRole",
    "AdminPermission",
    "AdminStatus",
]
