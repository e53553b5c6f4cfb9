"""ORM Models — SQLAlchemy declarative models for cultures and the bundled Article entity.

Invariants:
    - All models inherit from Base (db/base.py)
    - Localized entities key on (id, specificulture): one row per culture

Design Decisions:
    - One file per entity for locality
    - All models imported here so metadata is complete before create_all runs
"""

from cultureview.models.culture import CultureRecord  # noqa: F401
from cultureview.models.article import Article  # noqa: F401
from cultureview.models.article_tag import ArticleTag  # noqa: F401
