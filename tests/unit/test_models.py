"""Unit tests for database models and enums."""

from edu_admin.models import Admin, AdminPermission, AdminRole, AdminStatus, Base


class TestAdminRole:
    def test_values(self):
        assert AdminRole.super_instructor.value == "super_instructor"
        assert AdminRole.instructor.value == "instructor"
        assert AdminRole.support.value == "support"
        assert AdminRole.manager.value == "manager"

    def test_all_members(self):
        assert len(AdminRole) == 4


class TestAdminPermission:
    def test_values(self):
        assert AdminPermission.handle_admin_panel.value == "handle_admin_panel"
        assert AdminPermission.manage_courses.value == "manage_courses"
        assert AdminPermission.view_students.value == "view_students"


class TestAdminStatus:
    def test_values(self):
        assert AdminStatus.active.value == "active"
        assert AdminStatus.inactive.value == "inactive"
        assert AdminStatus.suspended.value == "suspended"
        assert AdminStatus.unverified.value == "unverified"

    def test_is_str(self):
        assert AdminStatus.active == "active"


class TestAdminModel:
    def test_tablename(self):
        assert Admin.__tablename__ == "admins"

    def test_registered_on_metadata(self):
        assert "admins" in Base.metadata.tables

    def test_columns(self):
        columns = set(Admin.__table__.columns.keys())
        assert {
            "id",
            "username",
            "email",
            "phone",
            "hashed_password",
            "role",
            "permission",
            "status",
            "refresh_token",
            "last_login",
            "created_at",
            "updated_at",
        } <= columns

    def test_refresh_token_is_nullable(self):
        assert Admin.__table__.c.refresh_token.nullable is True

    def test_username_is_unique(self):
        assert Admin.__table__.c.username.unique is True

    def test_indexes(self):
        names = {index.name for index in Admin.__table__.indexes}
        assert {"idx_admin_role", "idx_admin_status", "idx_admin_refresh_token"} <= names

    def test_is_active(self):
        assert Admin(status="active").is_active
        assert not Admin(status="unverified").is_active
