"""Admin profile and account status endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from edu_admin.auth.dependencies import SuperInstructor, require_role
from edu_admin.dependencies import AdminRepo
from edu_admin.models.admin import AdminRole
from edu_admin.schemas.admin import (
    AdminBulkStatusResponse,
    AdminBulkStatusUpdate,
    AdminResponse,
    AdminStatusUpdate,
)
from edu_admin.utils.audit import audit_logged

router = APIRouter()


def _check_admin_id(admin_id: str) -> None:
    try:
        uuid.UUID(admin_id)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid admin ID format",
        ) from err


@router.patch(
    "/status",
    response_model=AdminBulkStatusResponse,
    dependencies=[
        Depends(require_role(AdminRole.super_instructor.value)),
        Depends(audit_logged("bulk_update_admin_status")),
    ],
)
async def bulk_update_admin_status(
    data: AdminBulkStatusUpdate,
    repo: AdminRepo,
) -> AdminBulkStatusResponse:
    """Set the status of several admins. Super instructors are left unchanged."""
    for admin_id in data.ids:
        _check_admin_id(admin_id)
    updated = await repo.bulk_update_status(data.ids, data.status.value)
    return AdminBulkStatusResponse(updated=updated)


@router.get(
    "/{admin_id}",
    response_model=AdminResponse,
    dependencies=[Depends(audit_logged("view_admin"))],
)
async def get_admin(admin_id: str, repo: AdminRepo) -> AdminResponse:
    """Get an admin by ID."""
    _check_admin_id(admin_id)

    admin = await repo.get_by_id(admin_id)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found",
        )
    return AdminResponse.model_validate(admin)


@router.patch(
    "/{admin_id}/status",
    response_model=AdminResponse,
    dependencies=[Depends(audit_logged("update_admin_status"))],
)
async def update_admin_status(
    admin_id: str,
    data: AdminStatusUpdate,
    repo: AdminRepo,
    current_admin: SuperInstructor,
) -> AdminResponse:
    """Activate, suspend or deactivate an admin.

    A super instructor's own status can only be changed by that admin.
    """
    _check_admin_id(admin_id)

    admin = await repo.get_by_id(admin_id)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found",
        )
    if admin.role == AdminRole.super_instructor.value and admin.id != current_admin.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only a super instructor can change their own status",
        )

    admin = await repo.update_status(admin_id, data.status.value)
    return AdminResponse.model_validate(admin)
