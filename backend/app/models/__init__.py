"""
SQLAlchemy ORM models.

This module exports all database models and the declarative base.
Import models from this module to ensure they're registered with SQLAlchemy.
"""

from app.models.base import Base, TimestampMixin, UUIDMixin
from app.models.user import Admin
from app.models.article import Article

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "Admin",
    "Article",
]
