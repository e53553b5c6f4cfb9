"""Culture ORM — the universe of cultures an entity family may be cloned into.

Invariants:
    - code is the primary key (e.g. "en-us", "vi-vn")
    - At most one row is expected to carry is_default=True (not enforced in the schema)
"""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cultureview.db.base import Base


class CultureRecord(Base):
    """Persisted SupportedCulture."""
    __tablename__ = "cultures"

    code: Mapped[str] = mapped_column(String(10), primary_key=True)
    alias: Mapped[str | None] = mapped_column(String(50), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    is_supported: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
