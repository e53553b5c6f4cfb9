"""Article Pipeline — end-to-end save/clone/remove of articles and tags on SQLite.

Invariants:
    - Tags persisted with their parent's id and culture, in the same transaction
    - Cloning replicates the article AND its tags into every supported culture
    - Existing culture rows are never overwritten by a clone
    - A failing tag rolls back the whole save (article included)
    - remove(remove_related=True) deletes tags before the article
"""

import pytest
from sqlalchemy import select

from cultureview.core.errors import ResourceNotFoundError, ValidationFailure
from cultureview.models import Article, ArticleTag
from cultureview.schemas.article import ArticleTagView, ArticleView
from cultureview.services.article_hooks import ARTICLE_BINDING, ArticleHooks
from cultureview.services.entity_service import EntityService
from cultureview.services.view_model import ViewModel


@pytest.fixture
def service(article_gateway, tag_gateway, scopes):
    return EntityService(
        ARTICLE_BINDING, article_gateway, scopes, ArticleHooks(tag_gateway),
    )


def _article_view(**kwargs) -> ArticleView:
    defaults = {
        "id": 1,
        "specificulture": "en-us",
        "title": "Hello",
        "tags": [ArticleTagView(id=1, name="python"), ArticleTagView(id=2, name="sql")],
    }
    defaults.update(kwargs)
    return ArticleView(**defaults)


def _rows(session_factory, model_cls):
    with session_factory() as session:
        query = select(model_cls).order_by(model_cls.specificulture, model_cls.id)
        return session.execute(query).scalars().all()


def test_register_saves_article_and_tags(service, session_factory):
    """Tags land with the article's id and culture."""
    result = service.register(_article_view())
    assert result.success is True

    articles = _rows(session_factory, Article)
    tags = _rows(session_factory, ArticleTag)
    assert [(a.id, a.specificulture, a.title) for a in articles] == [(1, "en-us", "Hello")]
    assert [(t.name, t.article_id, t.specificulture) for t in tags] == [
        ("python", 1, "en-us"), ("sql", 1, "en-us"),
    ]


def test_register_with_clone_replicates_into_supported_cultures(
    service, session_factory, cultures,
):
    """Article and tags appear in every supported culture."""
    result = service.register(_article_view(is_clone=True, cultures=cultures))
    assert result.success is True

    articles = _rows(session_factory, Article)
    assert sorted(a.specificulture for a in articles) == ["en-us", "fr-fr", "vi-vn"]
    assert {a.title for a in articles} == {"Hello"}

    tags = _rows(session_factory, ArticleTag)
    by_culture = {}
    for tag in tags:
        by_culture.setdefault(tag.specificulture, []).append(tag.name)
    assert by_culture == {
        "en-us": ["python", "sql"],
        "fr-fr": ["python", "sql"],
        "vi-vn": ["python", "sql"],
    }


def test_clone_leaves_existing_culture_untouched(service, session_factory, cultures):
    """A culture that already has the article keeps its own row and tags."""
    service.register(_article_view(specificulture="vi-vn", title="Xin chao", tags=[]))

    result = service.register(_article_view(is_clone=True, cultures=cultures))
    assert result.success is True

    articles = {a.specificulture: a for a in _rows(session_factory, Article)}
    assert articles["vi-vn"].title == "Xin chao"
    assert articles["fr-fr"].title == "Hello"
    vi_tags = [t for t in _rows(session_factory, ArticleTag) if t.specificulture == "vi-vn"]
    assert vi_tags == []


def test_invalid_tag_rolls_back_article(service, session_factory):
    """One invalid tag undoes the whole save."""
    result = service.register(_article_view(tags=[ArticleTagView(id=1)]))
    assert result.success is False
    assert isinstance(result.exception, ValidationFailure)
    assert _rows(session_factory, Article) == []
    assert _rows(session_factory, ArticleTag) == []


def test_invalid_article_saves_nothing(service, session_factory):
    """A whitespace title never reaches the database."""
    view = _article_view()
    view.title = "   "
    result = service.register(view)
    assert result.success is False
    assert any("title" in e for e in result.errors)
    assert _rows(session_factory, Article) == []


def test_get_by_id_expands_tags(service):
    """Expanded lookup loads tags into the view."""
    service.register(_article_view())
    result = service.get_by_id((1, "en-us"))
    assert result.success is True
    assert result.data.title == "Hello"
    assert [t.name for t in result.data.tags] == ["python", "sql"]


def test_get_by_id_without_expand_has_no_tags(service):
    service.register(_article_view())
    result = service.get_by_id((1, "en-us"), expand=False)
    assert result.data.tags == []


def test_get_by_id_missing_is_not_found(service):
    result = service.get_by_id((404, "en-us"))
    assert result.success is False
    assert isinstance(result.exception, ResourceNotFoundError)


def test_get_all_filters_by_culture(service, cultures):
    """Culture filter narrows the list; no filter returns every culture."""
    service.register(_article_view(is_clone=True, cultures=cultures))
    service.register(_article_view(id=2, title="Second", tags=[]))
    english = service.get_all("en-us")
    everything = service.get_all()
    assert [v.id for v in english.data] == [1, 2]
    assert len(everything.data) == 4


def test_update_changes_existing_row(service, session_factory):
    """Update rewrites the article and leaves its tags alone."""
    service.register(_article_view())
    result = service.update(_article_view(title="Changed", tags=[]))
    assert result.success is True
    assert _rows(session_factory, Article)[0].title == "Changed"
    assert len(_rows(session_factory, ArticleTag)) == 2


def test_update_missing_is_not_found(service, session_factory):
    """Updating an unknown id inserts nothing."""
    result = service.update(_article_view(id=9))
    assert isinstance(result.exception, ResourceNotFoundError)
    assert _rows(session_factory, Article) == []


def test_remove_related_deletes_tags_then_article(service, session_factory):
    service.register(_article_view())
    result = service.remove((1, "en-us"), remove_related=True)
    assert result.success is True
    assert _rows(session_factory, Article) == []
    assert _rows(session_factory, ArticleTag) == []


def test_remove_only_touches_one_culture(service, session_factory, cultures):
    """Removing one culture keeps the other cultures and their tags."""
    service.register(_article_view(is_clone=True, cultures=cultures))
    service.remove((1, "vi-vn"), remove_related=True)
    remaining = sorted(a.specificulture for a in _rows(session_factory, Article))
    assert remaining == ["en-us", "fr-fr"]
    tag_cultures = {t.specificulture for t in _rows(session_factory, ArticleTag)}
    assert tag_cultures == {"en-us", "fr-fr"}


def test_remove_missing_is_not_found(service):
    result = service.remove((1, "en-us"))
    assert isinstance(result.exception, ResourceNotFoundError)


def test_update_reprojects_from_session_instance(article_gateway, scopes):
    """After an update the view-model holds the merged, session-tracked row."""
    with scopes.scope() as scope:
        ViewModel(
            ARTICLE_BINDING, article_gateway, scopes, view=_article_view(tags=[]),
        ).save_model(scope=scope)

        vm = ViewModel(
            ARTICLE_BINDING, article_gateway, scopes,
            view=_article_view(title="Changed", tags=[]),
        )
        assert vm.save_model(scope=scope).success is True

        persistent = article_gateway.get_single((1, "en-us"), scope)
        assert vm.model is persistent
        assert vm.model in scope.session
        assert vm.view.title == "Changed"
