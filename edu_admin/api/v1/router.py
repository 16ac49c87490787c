"""API v1 router aggregating the sub-routers."""

from fastapi import APIRouter

from edu_admin.api.v1 import admins, auth

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/admin", tags=["Auth"])
api_router.include_router(admins.router, prefix="/admins", tags=["Admins"])
