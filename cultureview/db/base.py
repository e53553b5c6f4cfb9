"""Declarative Base — metadata root for cultures, articles and their tags.

Invariants:
    - Every ORM model inherits from Base, so create_all sees the full schema
    - Constraint names are deterministic (naming convention), identical on SQLite and
      PostgreSQL

Design Decisions:
    - Separate file for Base: models import it without importing each other
    - Composite keys everywhere a record is localized: the convention names them by
      table, not by column list
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all CultureView ORM models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
