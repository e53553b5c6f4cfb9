"""Article Hooks — tag cascades for the Article entity (load, save, remove, clone).

Invariants:
    - Tags always carry their parent's id and culture before being saved
    - Every tag operation runs on the parent's scope (borrowed, never finalized here)
    - clone_sub_models clones tags ONLY into the culture of the clone just saved; the
      other cultures get theirs in their own clone iteration

Design Decisions:
    - Tags handled by their own view-models: they get validation, result aggregation and
      transaction discipline for free
    - Tag lookup queries the scope's session directly (no relationship() on Article)
"""

from typing import Any

from sqlalchemy import select

from cultureview.core.binding import EntityBinding
from cultureview.core.domain_types import SupportedCulture
from cultureview.core.operation_result import OperationResult
from cultureview.core.repository_protocols import (
    AsyncPersistenceGateway, PersistenceGateway, ViewModelLike,
)
from cultureview.core.transaction_scope import TransactionScope
from cultureview.models.article import Article
from cultureview.models.article_tag import ArticleTag
from cultureview.schemas.article import ArticleTagView, ArticleView
from cultureview.services.async_view_model import AsyncViewModel
from cultureview.services.hooks import AsyncNoCascadeHooks, NoCascadeHooks
from cultureview.services.view_model import ViewModel

ARTICLE_BINDING: EntityBinding[Article, ArticleView] = EntityBinding(
    Article, ArticleView,
)
TAG_BINDING: EntityBinding[ArticleTag, ArticleTagView] = EntityBinding(
    ArticleTag, ArticleTagView,
)


def _tags_query(article_id: int | None, specificulture: str | None):
    return (
        select(ArticleTag)
        .where(
            ArticleTag.article_id == article_id,
            ArticleTag.specificulture == specificulture,
        )
        .order_by(ArticleTag.priority, ArticleTag.id)
    )


def _cultures_of(
    parent: Any, cultures: list[SupportedCulture],
) -> list[SupportedCulture]:
    return [c for c in cultures if c.code == parent.specificulture]


class ArticleHooks(NoCascadeHooks):
    """Blocking tag cascades."""

    def __init__(self, tag_gateway: PersistenceGateway):
        self.tag_gateway = tag_gateway

    def _tag_vm(self, vm: ViewModelLike, **kwargs) -> ViewModel:
        return ViewModel(TAG_BINDING, self.tag_gateway, vm.scopes, **kwargs)

    def _load_tags(
        self, article_id: int | None, specificulture: str | None,
        scope: TransactionScope,
    ) -> list[ArticleTag]:
        result = scope.session.execute(_tags_query(article_id, specificulture))
        return list(result.scalars().all())

    def expand_view(self, vm: ViewModelLike, scope: TransactionScope) -> bool:
        tags = self._load_tags(vm.view.id, vm.view.specificulture, scope)
        vm.view.tags = [self._tag_vm(vm, model=tag).view for tag in tags]
        return True

    def save_sub_models(
        self, vm: ViewModelLike, parent: Any, scope: TransactionScope,
    ) -> OperationResult:
        result = OperationResult.ok(True)
        for tag_view in vm.view.tags:
            tag_view.article_id = parent.id
            tag_view.specificulture = parent.specificulture
            result.absorb(self._tag_vm(vm, view=tag_view).save_model(scope=scope))
        return result

    def remove_related_models(
        self, vm: ViewModelLike, scope: TransactionScope,
    ) -> OperationResult:
        result = OperationResult.ok(True)
        for tag in self._load_tags(vm.model.id, vm.model.specificulture, scope):
            result.absorb(self._tag_vm(vm, model=tag).remove_model(scope=scope))
        return result

    def clone_sub_models(
        self, vm: ViewModelLike, parent: Any,
        cultures: list[SupportedCulture], scope: TransactionScope,
    ) -> OperationResult:
        result = OperationResult.ok(True)
        targets = _cultures_of(parent, cultures)
        for tag in self._load_tags(vm.model.id, vm.model.specificulture, scope):
            result.absorb(self._tag_vm(vm, model=tag).clone(tag, targets, scope=scope))
        return result


class AsyncArticleHooks(AsyncNoCascadeHooks):
    """Async tag cascades."""

    def __init__(self, tag_gateway: AsyncPersistenceGateway):
        self.tag_gateway = tag_gateway

    def _tag_vm(self, vm: ViewModelLike, **kwargs) -> AsyncViewModel:
        return AsyncViewModel(TAG_BINDING, self.tag_gateway, vm.scopes, **kwargs)

    async def _load_tags(
        self, article_id: int | None, specificulture: str | None,
        scope: TransactionScope,
    ) -> list[ArticleTag]:
        result = await scope.session.execute(_tags_query(article_id, specificulture))
        return list(result.scalars().all())

    async def expand_view(self, vm: ViewModelLike, scope: TransactionScope) -> bool:
        tags = await self._load_tags(vm.view.id, vm.view.specificulture, scope)
        vm.view.tags = [self._tag_vm(vm, model=tag).view for tag in tags]
        return True

    async def save_sub_models(
        self, vm: ViewModelLike, parent: Any, scope: TransactionScope,
    ) -> OperationResult:
        result = OperationResult.ok(True)
        for tag_view in vm.view.tags:
            tag_view.article_id = parent.id
            tag_view.specificulture = parent.specificulture
            result.absorb(
                await self._tag_vm(vm, view=tag_view).save_model(scope=scope),
            )
        return result

    async def remove_related_models(
        self, vm: ViewModelLike, scope: TransactionScope,
    ) -> OperationResult:
        result = OperationResult.ok(True)
        for tag in await self._load_tags(vm.model.id, vm.model.specificulture, scope):
            result.absorb(
                await self._tag_vm(vm, model=tag).remove_model(scope=scope),
            )
        return result

    async def clone_sub_models(
        self, vm: ViewModelLike, parent: Any,
        cultures: list[SupportedCulture], scope: TransactionScope,
    ) -> OperationResult:
        result = OperationResult.ok(True)
        targets = _cultures_of(parent, cultures)
        for tag in await self._load_tags(vm.model.id, vm.model.specificulture, scope):
            result.absorb(
                await self._tag_vm(vm, model=tag).clone(tag, targets, scope=scope),
            )
        return result
