"""
Base models and mixins for SQLAlchemy ORM.

Provides the declarative base plus mixins for UUID primary keys and
timestamps shared by all tables.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base


# SQLAlchemy declarative base for all ORM models
Base = declarative_base()


def utc_now_iso() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        ISO format timestamp string (e.g., "2025-01-15T10:30:45.123456+00:00")

    Note:
        Microsecond precision keeps "newest first" ordering stable for
        rows created within the same second.
    """
    return datetime.now(timezone.utc).isoformat()


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at timestamp columns.

    Uses TEXT type (ISO format strings) so SQLite and PostgreSQL
    sort them identically.

    Attributes:
        created_at: Timestamp when record was created (immutable)
        updated_at: Timestamp when record was last updated (auto-updated)
    """

    created_at = Column(
        String,
        nullable=False,
        default=utc_now_iso,
        index=True,
        doc="UTC timestamp when record was created"
    )

    updated_at = Column(
        String,
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
        doc="UTC timestamp when record was last updated"
    )


class UUIDMixin:
    """
    Mixin that adds a UUID primary key column.

    UUIDs are stored as strings for portability between SQLite and PostgreSQL.

    Attributes:
        id: UUID primary key as TEXT
    """

    id = Column(
        String,
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        doc="UUID primary key"
    )

