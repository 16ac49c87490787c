"""Seed script for the edu-admin database.

Seeds demo admins covering each role and account status.
Run: python -m scripts.seed_data
"""

import asyncio
import logging

from edu_admin.auth.security import hash_password
from edu_admin.config import get_settings
from edu_admin.dependencies import AdminStore
from edu_admin.models.admin import Admin
from edu_admin.repositories.admin_repository import AdminRepository

logger = logging.getLogger(__name__)

# Demo admins

DEMO_ADMINS = [
    {
        "username": "headinstructor",
        "email": "head@edu-academy.io",
        "role": "super_instructor",
        "permission": "handle_admin_panel",
        "status": "active",
        "password": "HeadPass1!",
    },
    {
        "username": "johndoe12",
        "email": "john.doe@edu-academy.io",
        "role": "instructor",
        "permission": "manage_courses",
        "status": "active",
        "password": "Passw0rd!",
    },
    {
        "username": "supportdesk",
        "email": "support@edu-academy.io",
        "role": "support",
        "permission": "view_students",
        "status": "active",
        "password": "Support1!",
    },
    {
        "username": "newinstructor",
        "phone": "+27821234567",
        "role": "instructor",
        "permission": "view_students",
        "status": "unverified",
        "password": "Pending1!",
    },
]


async def seed_admins(repo: AdminRepository) -> None:
    """Seed demo admins if they don't exist."""
    for data in DEMO_ADMINS:
        if await repo.get_by_username(data["username"]):
            logger.info(f"Admin '{data['username']}' already exists, skipping")
            continue

        await repo.create(
            Admin(
                username=data["username"],
                email=data.get("email"),
                phone=data.get("phone"),
                role=data["role"],
                permission=data["permission"],
                status=data["status"],
                hashed_password=hash_password(data["password"]),
            )
        )
        logger.info(f"Created admin: {data['username']} ({data['role']}, {data['status']})")


async def main() -> None:
    """Run all seed scripts."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    store = AdminStore(get_settings())
    await store.open()
    try:
        async with store.repository() as repo:
            logger.info("Seeding admins...")
            await seed_admins(repo)
    finally:
        await store.close()
    logger.info("Seeding complete!")


if __name__ == "__main__":
    asyncio.run(main())
