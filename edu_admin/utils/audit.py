"""Audit logging for privileged actions."""

from fastapi import Request

from edu_admin.auth.dependencies import CurrentAdmin
from edu_admin.utils.logging import get_logger

logger = get_logger("audit")


def audit_logged(action: str):
    """Dependency factory that logs privileged actions.

    Usage::

        @router.get("/admins/{admin_id}", dependencies=[Depends(audit_logged("view_admin"))])
    """

    async def _log(request: Request, current_admin: CurrentAdmin) -> None:
        client_ip = request.client.host if request.client else "unknown"
        request_id = getattr(request.state, "request_id", "n/a")
        logger.info(
            "AUDIT action=%s admin=%s role=%s ip=%s request_id=%s path=%s",
            action,
            current_admin.username,
            current_admin.role,
            client_ip,
            request_id,
            request.url.path,
        )

    return _log
