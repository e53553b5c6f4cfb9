"""Article ORM — localized content record, one row per (id, specificulture).

Invariants:
    - (id, specificulture) is the composite primary key; id is shared across cultures
    - id is assigned by the caller (no autoincrement on a composite key)
    - Tags live in article_tags and are maintained by ArticleHooks, not by ORM cascades

Design Decisions:
    - No relationship() to ArticleTag: cascades go through the view-model pipeline so they
      share its transaction scope and result aggregation
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cultureview.db.base import Base


class Article(Base):
    """Article entity — a localized piece of content."""
    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    specificulture: Mapped[str] = mapped_column(String(10), primary_key=True)
    title: Mapped[str] = mapped_column(String(250), nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft",
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
