"""Repository for admin data access."""

from datetime import UTC, datetime

from sqlalchemy import Row, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from edu_admin.models.admin import Admin, AdminRole, AdminStatus


def normalize_username(username: str) -> str:
    """Usernames are stored trimmed and lower-cased."""
    return username.strip().lower()


class AdminRepository:
    """Data access layer for admins.

    Every write to ``refresh_token`` is a full overwrite of the column so an
    admin never holds more than one live refresh token.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, admin_id: str) -> Admin | None:
        result = await self.session.execute(select(Admin).where(Admin.id == admin_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Admin | None:
        result = await self.session.execute(
            select(Admin).where(Admin.username == normalize_username(username))
        )
        return result.scalar_one_or_none()

    async def get_session_view(self, admin_id: str, role: str) -> Row | None:
        """Return ``(id, username, role, status)`` when the admin still holds ``role``."""
        result = await self.session.execute(
            select(Admin.id, Admin.username, Admin.role, Admin.status).where(
                Admin.id == admin_id, Admin.role == role
            )
        )
        return result.one_or_none()

    async def get_by_refresh_token(self, token: str) -> Admin | None:
        result = await self.session.execute(select(Admin).where(Admin.refresh_token == token))
        return result.scalar_one_or_none()

    async def find_conflict(
        self, username: str, email: str | None = None, phone: str | None = None
    ) -> Admin | None:
        clauses = [Admin.username == normalize_username(username)]
        if email:
            clauses.append(Admin.email == email.strip().lower())
        if phone:
            clauses.append(Admin.phone == phone.strip())
        result = await self.session.execute(select(Admin).where(or_(*clauses)).limit(1))
        return result.scalar_one_or_none()

    async def create(self, admin: Admin) -> Admin:
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def record_sign_in(self, admin_id: str, refresh_token: str) -> None:
        await self.session.execute(
            update(Admin)
            .where(Admin.id == admin_id)
            .values(refresh_token=refresh_token, last_login=datetime.now(UTC))
        )

    async def set_refresh_token(self, admin_id: str, refresh_token: str | None) -> None:
        await self.session.execute(
            update(Admin).where(Admin.id == admin_id).values(refresh_token=refresh_token)
        )

    async def rotate_refresh_token(self, admin_id: str, presented: str, new_token: str) -> bool:
        """Swap ``presented`` for ``new_token`` only if it is still the stored value."""
        result = await self.session.execute(
            update(Admin)
            .where(Admin.id == admin_id, Admin.refresh_token == presented)
            .values(refresh_token=new_token)
        )
        return result.rowcount == 1

    async def update_status(self, admin_id: str, status: str) -> Admin | None:
        """Set ``status``; leaving ``active`` also revokes the refresh token."""
        admin = await self.get_by_id(admin_id)
        if not admin:
            return None

        admin.status = status
        if status != AdminStatus.active.value:
            admin.refresh_token = None

        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def bulk_update_status(self, admin_ids: list[str], status: str) -> int:
        """Set ``status`` on many admins at once. Super instructors are skipped."""
        values: dict[str, str | None] = {"status": status}
        if status != AdminStatus.active.value:
            values["refresh_token"] = None
        result = await self.session.execute(
            update(Admin)
            .where(Admin.id.in_(admin_ids), Admin.role != AdminRole.super_instructor.value)
            .values(**values)
        )
        return result.rowcount
