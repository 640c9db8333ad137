"""
Pydantic schemas for article endpoints.

JSON bodies use camelCase (``coverImage``, ``createdAt``, ...); Python
code uses snake_case. Both spellings are accepted on input.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.auth import AdminIdentity


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ArticleCreate(_CamelModel):
    """
    Request body for creating an article.

    Attributes:
        title: Headline (required)
        slug: URL identifier, unique (required)
        content: Markdown body (required)
        excerpt: Optional teaser
        cover_image: Optional image URL
        published: Publish immediately (default and null: False, i.e. draft)
    """
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    published: bool = False

    @field_validator("slug")
    @classmethod
    def strip_slug(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be blank")
        return v

    @field_validator("published", mode="before")
    @classmethod
    def null_published_is_draft(cls, v):
        return False if v is None else v


class ArticleUpdate(_CamelModel):
    """
    Partial update; only fields present in the request body change.

    Required fields (title, slug, content) may be omitted but not emptied.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    published: Optional[bool] = None

    @field_validator("title", "slug", "content")
    @classmethod
    def reject_null(cls, v: Optional[str], info: ValidationInfo) -> str:
        if v is None or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v.strip() if info.field_name == "slug" else v

    def changes(self) -> dict:
        """Fields explicitly set by the client, snake_case keys."""
        changes = self.model_dump(exclude_unset=True)
        if changes.get("published", False) is None:
            del changes["published"]
        return changes


class ArticleResponse(_CamelModel):
    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    published: bool
    created_at: str
    updated_at: str
    author_id: str
    author: Optional[AdminIdentity] = None


class DeleteResponse(BaseModel):
    success: bool = True
