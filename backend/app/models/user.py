"""
Admin user model for authentication.

Admins are created by the seed step and are read-only to the auth core.
"""

from sqlalchemy import Column, String

from app.models.base import Base, UUIDMixin, TimestampMixin


class Admin(Base, UUIDMixin, TimestampMixin):
    """
    Admin account allowed to manage articles.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        username: Unique username for login
        hashed_password: bcrypt hash (never store plaintext)
        created_at: Timestamp when admin was created (from TimestampMixin)
        updated_at: Timestamp when admin was last updated (from TimestampMixin)

    Security considerations:
        - Never log or expose hashed_password
        - Passwords are only ever checked through verify_password
    """

    __tablename__ = "admins"

    username = Column(
        String,
        nullable=False,
        unique=True,
        index=True,
        doc="Unique username for authentication"
    )

    hashed_password = Column(
        String,
        nullable=False,
        doc="bcrypt-hashed password (never store plaintext)"
    )

    def __repr__(self) -> str:
        # Never include the hash
        return f"Admin(id={self.id!r}, username={self.username!r})"
