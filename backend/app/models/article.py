"""
Article model.

Articles are written by admins and shown publicly once published.
"""

from sqlalchemy import Boolean, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, UUIDMixin


class Article(Base, UUIDMixin, TimestampMixin):
    """
    Blog article.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        title: Headline
        slug: URL identifier, unique across all articles
        content: Markdown body
        excerpt: Optional teaser shown in listings
        cover_image: Optional image URL
        published: Draft (False) or publicly visible (True)
        author_id: Admin who created the article
        created_at / updated_at: From TimestampMixin
    """

    __tablename__ = "articles"

    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    cover_image = Column(String, nullable=True)
    published = Column(Boolean, nullable=False, default=False, index=True)

    author_id = Column(
        String,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    author = relationship("Admin", lazy="selectin")

    def __repr__(self) -> str:
        return f"Article(id={self.id!r}, slug={self.slug!r}, published={self.published!r})"
