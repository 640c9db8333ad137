"""
Seed the admin account and sample articles.

Creates the admin from SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD
(default "admin" / "admin123") and three published sample articles.
This script is idempotent - it will not create duplicates if run multiple times.

Usage:
    python scripts/seed.py

Security:
    IMPORTANT: Change the default password immediately after first login!
    The default credentials are publicly known and insecure.
"""

import asyncio
import sys
from pathlib import Path

# Add backend directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.config import settings
from app.core.database import async_session_maker, close_db, init_db
from app.core.logging_config import setup_logging
from app.services.content_seeder import seed_admin, seed_sample_articles


async def seed() -> None:
    """Create tables if needed, then the admin and sample articles."""
    await init_db()

    async with async_session_maker() as session:
        try:
            admin = await seed_admin(
                session,
                settings.seed_admin_username,
                settings.seed_admin_password,
            )
            created = await seed_sample_articles(session, admin)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    print(f"Admin user ready: {admin.username}")
    print(f"Sample articles created: {len(created)}")
    if settings.seed_admin_password == "admin123":
        print("")
        print("WARNING: Please change the default password immediately after first login!")

    await close_db()


if __name__ == "__main__":
    setup_logging(level=settings.log_level, json_format=False)
    print("Seeding database...")
    asyncio.run(seed())
    print("Done!")
