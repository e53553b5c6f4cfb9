"""Field Mapping — verifies model/view projection and model copies.

Invariants:
    - Only fields present on both sides are projected
    - Orchestration metadata never reaches a model
    - Projection round-trips: to_model(to_view(m)) reproduces m's shared fields
    - ModelMapper copies every column, producing an independent instance
"""

from dataclasses import dataclass

import pytest

from cultureview.core.mapping import (
    FieldMapper, ModelMapper, VIEW_METADATA_FIELDS, model_field_names,
)
from cultureview.models import Article
from cultureview.schemas.article import ArticleView


@dataclass
class _Plain:
    id: int | None = None
    specificulture: str | None = None
    title: str | None = None
    is_clone: bool | None = None


def test_model_field_names_from_orm_columns():
    names = model_field_names(Article)
    assert set(names) == {
        "id", "specificulture", "title", "excerpt", "content",
        "status", "priority", "created_at",
    }


def test_model_field_names_from_dataclass():
    assert model_field_names(_Plain) == ("id", "specificulture", "title", "is_clone")


def test_model_field_names_rejects_unknown_types():
    with pytest.raises(TypeError):
        model_field_names(object)


def test_field_mapper_uses_shared_fields_only():
    mapper = FieldMapper(Article, ArticleView)
    assert "tags" not in mapper.fields
    assert not set(mapper.fields) & VIEW_METADATA_FIELDS
    assert "title" in mapper.fields


def test_metadata_never_projected_even_with_same_name():
    mapper = FieldMapper(_Plain, ArticleView)
    view = ArticleView(title="Hello", is_clone=True)
    model = mapper.to_model(view, _Plain())
    assert model.is_clone is None
    assert model.title == "Hello"


def test_to_view_then_to_model_round_trip():
    mapper = FieldMapper(Article, ArticleView)
    source = Article(
        id=7, specificulture="en-us", title="Hello", excerpt="e",
        content="c", status="published", priority=3,
    )
    view = mapper.to_view(source, ArticleView())
    rebuilt = mapper.to_model(view, Article())
    for name in mapper.fields:
        assert getattr(rebuilt, name) == getattr(source, name)


def test_model_mapper_copies_into_independent_instance():
    source = Article(id=1, specificulture="en-us", title="Hi", priority=2)
    target = ModelMapper(Article).copy(source, Article())
    assert target is not source
    assert (target.id, target.specificulture, target.title, target.priority) == (
        1, "en-us", "Hi", 2,
    )
    target.specificulture = "vi-vn"
    assert source.specificulture == "en-us"
