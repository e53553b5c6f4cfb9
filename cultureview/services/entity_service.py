"""Entity Service — get/list/register/update/remove facade over the view-model pipelines.

Invariants:
    - Writes always go through a ROOT view-model pipeline (so clone-on-save can run)
    - Missing records come back as failure results carrying ResourceNotFoundError
    - Reads never commit: their scope is only closed

Design Decisions:
    - Lookups and writes use separate scopes: the write pipeline must own its transaction
    - Returns OperationResult everywhere, including reads, so callers handle one shape
"""

import logging
from typing import Any, Generic

from cultureview.core.binding import EntityBinding
from cultureview.core.errors import ExpansionFault, ResourceNotFoundError
from cultureview.core.operation_result import OperationResult
from cultureview.core.repository_protocols import (
    AsyncPersistenceGateway, AsyncViewModelHooks,
    PersistenceGateway, ViewModelHooks,
)
from cultureview.infrastructure.unit_of_work import (
    AsyncTransactionScopeManager, TransactionScopeManager,
)
from cultureview.services.async_view_model import AsyncViewModel
from cultureview.services.view_model import ViewModel
from cultureview.services.view_model_base import ModelT, ViewT

logger = logging.getLogger(__name__)


def _not_found(entity: str, ident: Any) -> OperationResult:
    fault = ResourceNotFoundError(entity, str(ident))
    return OperationResult.failure([fault.message], exception=fault)


def _not_expanded(entity: str, ident: Any, vm_exception: Any) -> OperationResult:
    fault = vm_exception or ExpansionFault(f"{entity} '{ident}' could not be expanded")
    return OperationResult.failure([fault.message], exception=fault)


class EntityService(Generic[ModelT, ViewT]):
    """Blocking service for one entity type."""

    def __init__(
        self,
        binding: EntityBinding[ModelT, ViewT],
        gateway: PersistenceGateway,
        scopes: TransactionScopeManager,
        hooks: ViewModelHooks | None = None,
    ):
        self.binding = binding
        self.gateway = gateway
        self.scopes = scopes
        self.hooks = hooks

    def _view_model(self, **kwargs) -> ViewModel[ModelT, ViewT]:
        return ViewModel(self.binding, self.gateway, self.scopes, self.hooks, **kwargs)

    def get_by_id(self, ident: Any, expand: bool = True) -> OperationResult[ViewT]:
        with self.scopes.scope() as scope:
            model = self.gateway.get_single(ident, scope)
            if model is None:
                return _not_found(self.binding.entity_name, ident)
            vm = self._view_model(model=model)
            if vm.parse_view(expand=expand, scope=scope) is None:
                return _not_expanded(self.binding.entity_name, ident, vm.view.exception)
            return OperationResult.ok(vm.view)

    def get_all(
        self, specificulture: str | None = None, expand: bool = False,
    ) -> OperationResult[list[ViewT]]:
        result: OperationResult[list[ViewT]] = OperationResult.ok([])
        with self.scopes.scope() as scope:
            for model in self.gateway.get_by_culture(specificulture, scope):
                vm = self._view_model(model=model)
                if vm.parse_view(expand=expand, scope=scope) is not None:
                    result.data.append(vm.view)
        return result

    def register(
        self, view: ViewT, save_sub_models: bool = True,
    ) -> OperationResult[ViewT]:
        return self._view_model(view=view).save_model(save_sub_models)

    def update(
        self, view: ViewT, save_sub_models: bool = True,
    ) -> OperationResult[ViewT]:
        vm = self._view_model(view=view)
        with self.scopes.scope() as scope:
            exists = self.gateway.check_exists(vm.parse_model(), scope)
        if not exists:
            return _not_found(
                self.binding.entity_name, self.gateway.identity_of(vm.model),
            )
        return vm.save_model(save_sub_models)

    def remove(
        self, ident: Any, remove_related: bool = False,
    ) -> OperationResult[ModelT]:
        with self.scopes.scope() as scope:
            model = self.gateway.get_single(ident, scope)
        if model is None:
            return _not_found(self.binding.entity_name, ident)
        result = self._view_model(model=model).remove_model(remove_related)
        logger.info(
            f"{self.binding.entity_name} '{ident}' removed: {result.success}",
            extra={"entity": self.binding.entity_name},
        )
        return result


class AsyncEntityService(Generic[ModelT, ViewT]):
    """Async service for one entity type."""

    def __init__(
        self,
        binding: EntityBinding[ModelT, ViewT],
        gateway: AsyncPersistenceGateway,
        scopes: AsyncTransactionScopeManager,
        hooks: AsyncViewModelHooks | None = None,
    ):
        self.binding = binding
        self.gateway = gateway
        self.scopes = scopes
        self.hooks = hooks

    def _view_model(self, **kwargs) -> AsyncViewModel[ModelT, ViewT]:
        return AsyncViewModel(
            self.binding, self.gateway, self.scopes, self.hooks, **kwargs,
        )

    async def get_by_id(
        self, ident: Any, expand: bool = True,
    ) -> OperationResult[ViewT]:
        async with self.scopes.scope() as scope:
            model = await self.gateway.get_single(ident, scope)
            if model is None:
                return _not_found(self.binding.entity_name, ident)
            vm = self._view_model(model=model)
            if await vm.parse_view(expand=expand, scope=scope) is None:
                return _not_expanded(self.binding.entity_name, ident, vm.view.exception)
            return OperationResult.ok(vm.view)

    async def get_all(
        self, specificulture: str | None = None, expand: bool = False,
    ) -> OperationResult[list[ViewT]]:
        result: OperationResult[list[ViewT]] = OperationResult.ok([])
        async with self.scopes.scope() as scope:
            for model in await self.gateway.get_by_culture(specificulture, scope):
                vm = self._view_model(model=model)
                if await vm.parse_view(expand=expand, scope=scope) is not None:
                    result.data.append(vm.view)
        return result

    async def register(
        self, view: ViewT, save_sub_models: bool = True,
    ) -> OperationResult[ViewT]:
        return await self._view_model(view=view).save_model(save_sub_models)

    async def update(
        self, view: ViewT, save_sub_models: bool = True,
    ) -> OperationResult[ViewT]:
        vm = self._view_model(view=view)
        async with self.scopes.scope() as scope:
            exists = await self.gateway.check_exists(vm.parse_model(), scope)
        if not exists:
            return _not_found(
                self.binding.entity_name, self.gateway.identity_of(vm.model),
            )
        return await vm.save_model(save_sub_models)

    async def remove(
        self, ident: Any, remove_related: bool = False,
    ) -> OperationResult[ModelT]:
        async with self.scopes.scope() as scope:
            model = await self.gateway.get_single(ident, scope)
        if model is None:
            return _not_found(self.binding.entity_name, ident)
        result = await self._view_model(model=model).remove_model(remove_related)
        logger.info(
            f"{self.binding.entity_name} '{ident}' removed: {result.success}",
            extra={"entity": self.binding.entity_name},
        )
        return result
