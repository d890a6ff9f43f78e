"""
Seed an admin user so the protected endpoints can be reached.

Usage (from `api/`):

    python -m auth.seed
"""

from __future__ import annotations

import asyncio
import logging
import os

from core import db
from core.logs import configure_logging

from . import repository, security

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "Admin@123"


def admin_credentials() -> tuple[str, str]:
    email = os.environ.get("ADMIN_EMAIL", "").strip() or DEFAULT_ADMIN_EMAIL
    password = os.environ.get("ADMIN_PASSWORD", "").strip() or DEFAULT_ADMIN_PASSWORD
    return email, password


async def seed_admin_user() -> bool:
    """
    Create the admin user if missing. Returns True when a user was created.
    """
    email, password = admin_credentials()
    existing = await repository.get_user_by_email(email)
    if existing is not None:
        logger.info("Admin user already exists: %s", email)
        return False

    await repository.create_user(email=email, password_hash=security.hash_password(password))
    logger.info("Admin user seeded: %s", email)
    return True


async def _main() -> None:
    await db.init_pool()
    try:
        await seed_admin_user()
    finally:
        await db.close_pool()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(_main())
