"""Field Mapping — projects values between ORM models and pydantic views.

Invariants:
    - Only fields present on BOTH sides are projected; everything else is left untouched
    - Orchestration metadata (validity, errors, clone flag, cultures) never reaches a model
    - ModelMapper copies column values only — relationships and ORM state stay behind

Design Decisions:
    - Field sets computed once per mapper instance (construction), not per call
    - SQLAlchemy inspection for mapped classes, dataclass fields for plain ones: tests and
      non-ORM stores use the same mapper
"""

import dataclasses
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

# View-only fields; never copied onto a model even if a column shares the name
VIEW_METADATA_FIELDS: frozenset[str] = frozenset({
    "is_clone", "is_lazy_load", "cultures", "is_valid", "errors", "exception",
})


def model_field_names(model_cls: type) -> tuple[str, ...]:
    """Column attribute keys of a mapped class, or dataclass field names."""
    try:
        mapper = sa_inspect(model_cls)
    except NoInspectionAvailable:
        mapper = None
    if mapper is not None:
        return tuple(attr.key for attr in mapper.column_attrs)
    if dataclasses.is_dataclass(model_cls):
        return tuple(f.name for f in dataclasses.fields(model_cls))
    raise TypeError(f"Cannot determine fields of {model_cls.__name__}")


def view_field_names(view_cls: type) -> tuple[str, ...]:
    return tuple(
        name for name in view_cls.model_fields
        if name not in VIEW_METADATA_FIELDS
    )


class FieldMapper:
    """Model <-> View projection over the shared field set."""

    def __init__(self, model_cls: type, view_cls: type):
        view_fields = set(view_field_names(view_cls))
        self.fields: tuple[str, ...] = tuple(
            name for name in model_field_names(model_cls) if name in view_fields
        )

    def to_view(self, model: Any, view: Any) -> Any:
        for name in self.fields:
            setattr(view, name, getattr(model, name))
        return view

    def to_model(self, view: Any, model: Any) -> Any:
        for name in self.fields:
            setattr(model, name, getattr(view, name))
        return model


class ModelMapper:
    """Model <-> Model duplication, used to give clone targets their own copy."""

    def __init__(self, model_cls: type):
        self.fields = model_field_names(model_cls)

    def copy(self, source: Any, target: Any) -> Any:
        for name in self.fields:
            setattr(target, name, getattr(source, name))
        return target
