"""ArticleTag ORM — sub-model of Article, localized alongside its parent.

Invariants:
    - (id, specificulture) is the composite primary key
    - (article_id, specificulture) references the parent article in the same culture
"""

from sqlalchemy import ForeignKeyConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cultureview.db.base import Base


class ArticleTag(Base):
    """Tag attached to one article in one culture."""
    __tablename__ = "article_tags"
    __table_args__ = (
        ForeignKeyConstraint(
            ["article_id", "specificulture"],
            ["articles.id", "articles.specificulture"],
            ondelete="CASCADE",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    specificulture: Mapped[str] = mapped_column(String(10), primary_key=True)
    article_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
