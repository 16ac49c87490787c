"""Console landing route, served behind the session gate."""

from fastapi import APIRouter, Request

from edu_admin.schemas.auth import SessionAdmin

router = APIRouter()


@router.get("/", tags=["Console"])
async def console_home(request: Request) -> dict[str, SessionAdmin | str | None]:
    """Landing payload for the signed-in admin."""
    return {
        "page": "home",
        "admin": getattr(request.state, "admin", None),
    }
