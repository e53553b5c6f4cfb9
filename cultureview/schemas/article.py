"""Article Views — transfer representations of Article and ArticleTag.

Invariants:
    - ArticleView.title: 1-250 chars, stripped
    - ArticleView.status restricted to draft/published/archived
    - tags are not columns: FieldMapper skips them, ArticleHooks persists them
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, field_validator

from cultureview.schemas.view import ViewBase


class ArticleTagView(ViewBase):
    """Tag as carried inside an article view."""
    id: int | None = None
    article_id: int | None = None
    name: str = Field("", min_length=1, max_length=100)


class ArticleView(ViewBase):
    """Article with its tags."""
    id: int | None = None
    title: str = Field("", min_length=1, max_length=250)
    excerpt: str | None = None
    content: str | None = None
    status: Literal["draft", "published", "archived"] = "draft"
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    tags: list[ArticleTagView] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v
