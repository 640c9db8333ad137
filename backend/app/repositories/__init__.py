"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating database access from business logic.
"""

from app.repositories.admin import AdminRepository
from app.repositories.article import ArticleRepository

__all__ = ["AdminRepository", "ArticleRepository"]
