"""FastAPI dependencies that guard API routes with the access token."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from edu_admin.auth.errors import AuthErrorKind, status_for
from edu_admin.auth.sessions import verify_session
from edu_admin.auth.transport import access_token_from
from edu_admin.dependencies import AdminRepo
from edu_admin.models.admin import AdminRole
from edu_admin.schemas.auth import SessionAdmin


async def get_current_admin(request: Request, repo: AdminRepo) -> SessionAdmin:
    """Resolve the admin behind the request's access token or fail with 401/403/500."""
    result = await verify_session(repo, access_token_from(request))
    if not result.ok or result.admin is None:
        kind = result.error or AuthErrorKind.unauthenticated
        code = status_for(kind)
        raise HTTPException(
            status_code=code,
            detail=result.message,
            headers={"WWW-Authenticate": "Bearer"}
            if code == status.HTTP_401_UNAUTHORIZED
            else None,
        )
    return result.admin


CurrentAdmin = Annotated[SessionAdmin, Depends(get_current_admin)]


def require_role(*roles: str):
    """Dependency factory that admits only admins holding one of ``roles``."""

    async def _check(current_admin: CurrentAdmin) -> SessionAdmin:
        if current_admin.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_admin

    return _check


SuperInstructor = Annotated[SessionAdmin, Depends(require_role(AdminRole.super_instructor.value))]
