"""
Admin repository.

Read access to admin accounts for login, plus the create call used by
the seed step.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Admin


class AdminRepository:
    """
    Repository for admin data access.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_username(self, username: str) -> Optional[Admin]:
        """
        Look up an admin by username.

        Returns:
            Admin instance if found, None otherwise
        """
        stmt = select(Admin).where(Admin.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, username: str, hashed_password: str) -> Admin:
        """
        Create an admin with an already-hashed password.

        Raises:
            IntegrityError: If the username is taken
        """
        admin = Admin(username=username, hashed_password=hashed_password)
        self.session.add(admin)
        await self.session.flush()
        return admin
