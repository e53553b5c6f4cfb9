"""View-Model Orchestrator (async) — same pipelines as ViewModel, suspending at IO.

Invariants:
    - Semantics identical to the blocking ViewModel (validation gate, cascade order,
      root-only finalization, cumulative clone finalization)
    - Suspends only at gateway calls, hook calls and scope finalization — no fan-out:
      cultures are cloned one after another on the same session
    - No public pipeline raises: faults come back as failure results

Design Decisions:
    - Clone-on-save gated on is_root here too, so both variants share one policy
    - Pure steps (parse_model, validate) inherited unchanged: they never suspend
"""

import logging

from cultureview.core.binding import EntityBinding
from cultureview.core.domain_types import PipelineStage, SupportedCulture
from cultureview.core.errors import ExpansionFault
from cultureview.core.operation_result import OperationResult
from cultureview.core.repository_protocols import (
    AsyncPersistenceGateway, AsyncViewModelHooks,
)
from cultureview.core.transaction_scope import TransactionScope
from cultureview.infrastructure.unit_of_work import AsyncTransactionScopeManager
from cultureview.services.hooks import AsyncNoCascadeHooks
from cultureview.services.view_model_base import ModelT, ViewModelBase, ViewT

logger = logging.getLogger(__name__)


class AsyncViewModel(ViewModelBase[ModelT, ViewT]):
    """Async orchestrator over an AsyncSession-backed scope manager."""

    def __init__(
        self,
        binding: EntityBinding[ModelT, ViewT],
        gateway: AsyncPersistenceGateway,
        scopes: AsyncTransactionScopeManager,
        hooks: AsyncViewModelHooks | None = None,
        model: ModelT | None = None,
        view: ViewT | None = None,
    ):
        super().__init__(
            binding, gateway, scopes, hooks or AsyncNoCascadeHooks(), model, view,
        )

    @classmethod
    async def init_view(
        cls,
        binding: EntityBinding[ModelT, ViewT],
        gateway: AsyncPersistenceGateway,
        scopes: AsyncTransactionScopeManager,
        hooks: AsyncViewModelHooks | None = None,
        model: ModelT | None = None,
        expand: bool = True,
        scope: TransactionScope | None = None,
    ) -> "AsyncViewModel[ModelT, ViewT] | None":
        """Empty view-model, or one built from `model` (expanded when asked).

        Returns None when expansion fails.
        """
        vm = cls(binding, gateway, scopes, hooks, model=model)
        if model is None:
            return vm
        vm.view.is_lazy_load = expand
        if await vm.parse_view(expand=expand, scope=scope) is None:
            return None
        return vm

    # ─── View projection ──────────────────────────────────────────

    async def parse_view(
        self, expand: bool = True, scope: TransactionScope | None = None,
    ) -> ViewT | None:
        """Project the Model onto the View, then run the expand hook if asked."""
        self.mapper.to_view(self.model, self.view)
        if not expand:
            return self.view
        async with self.scopes.scope(scope) as current:
            try:
                expanded = await self.hooks.expand_view(self, current)
            except Exception as e:
                fault = ExpansionFault(str(e), self._context(PipelineStage.MAPPED))
                fault.__cause__ = e
                self.view.exception = fault
                self.gateway.log_error_message(fault)
                await self.scopes.handle_exception(fault, current)
                return None
        return self.view if expanded else None

    # ─── Save ─────────────────────────────────────────────────────

    async def save_model(
        self, save_sub_models: bool = False, scope: TransactionScope | None = None,
    ) -> OperationResult[ViewT]:
        async with self.scopes.scope(scope) as current:
            try:
                self._log_stage(PipelineStage.VALIDATING)
                self.validate()
                if not self.view.is_valid:
                    return self._invalid_result()
                return await self._save_valid(save_sub_models, current)
            except Exception as e:
                self._log_stage(PipelineStage.FAILED, level=logging.ERROR)
                return await self.scopes.handle_exception(e, current)

    async def _save_valid(
        self, save_sub_models: bool, scope: TransactionScope,
    ) -> OperationResult[ViewT]:
        self.parse_model()
        self._log_stage(PipelineStage.PERSISTING)
        result = await self.gateway.save_model(self.model, self.view, scope)

        if result.success:
            self.model = await self._persisted_model(scope)
            self.mapper.to_view(self.model, self.view)
            self._log_stage(PipelineStage.PERSISTED)
            if save_sub_models:
                self._log_stage(PipelineStage.CASCADING_SUB_MODELS)
                result.absorb(self._cascade_result(
                    await self.hooks.save_sub_models(self, self.model, scope),
                    "save_sub_models",
                ))
            if result.success and self.view.is_clone and scope.is_root:
                self._log_stage(PipelineStage.CLONING)
                result.absorb(await self.clone(
                    self.model, self.clone_cultures(), scope=scope,
                ))

        await self.scopes.handle_transaction(result.success, scope)
        self._log_stage(
            PipelineStage.DONE if result.success else PipelineStage.FAILED,
            level=logging.INFO if result.success else logging.WARNING,
            is_root=scope.is_root,
        )
        return result

    async def _persisted_model(self, scope: TransactionScope) -> ModelT:
        ident = self.gateway.identity_of(self.model)
        persisted = await self.gateway.get_single(ident, scope) if ident else None
        return persisted if persisted is not None else self.model

    # ─── Remove ───────────────────────────────────────────────────

    async def remove_model(
        self, remove_related: bool = False, scope: TransactionScope | None = None,
    ) -> OperationResult[ModelT]:
        async with self.scopes.scope(scope) as current:
            try:
                self.parse_model()
                if remove_related:
                    related = self._cascade_result(
                        await self.hooks.remove_related_models(self, current),
                        "remove_related_models",
                    )
                    if related.success:
                        result = await self.gateway.remove_model(self.model, current)
                    else:
                        result = OperationResult.failure(
                            related.errors, exception=related.exception,
                        )
                else:
                    result = await self.gateway.remove_model(self.model, current)
                await self.scopes.handle_transaction(result.success, current)
                return result
            except Exception as e:
                return await self.scopes.handle_exception(e, current)

    # ─── Clone ────────────────────────────────────────────────────

    async def clone(
        self,
        model: ModelT,
        cultures: list[SupportedCulture] | None,
        scope: TransactionScope | None = None,
    ) -> OperationResult[list[ViewT]]:
        """Replicate `model` into each culture; existing records are left as they are."""
        result: OperationResult[list[ViewT]] = OperationResult.ok([])
        if not cultures:
            return result
        async with self.scopes.scope(scope) as current:
            try:
                for culture in cultures:
                    await self._clone_into(model, cultures, culture, current, result)
                    await self.scopes.handle_transaction(result.success, current)
                return result
            except Exception as e:
                fault_result = await self.scopes.handle_exception(e, current)
                fault_result.errors[:0] = result.errors
                return fault_result

    async def _clone_into(
        self,
        source: ModelT,
        cultures: list[SupportedCulture],
        culture: SupportedCulture,
        scope: TransactionScope,
        result: OperationResult[list[ViewT]],
    ) -> None:
        target = self._new_clone_target(source, culture)
        if await self.gateway.check_exists(target.parse_model(), scope):
            logger.debug(
                f"{self.binding.entity_name} already exists in {culture.code}, skipped",
                extra={"entity": self.binding.entity_name,
                       "specificulture": culture.code},
            )
            result.data.append(target.view)
            return

        saved = await target.save_model(scope=scope)
        if saved.success:
            saved.absorb(self._cascade_result(
                await self.hooks.clone_sub_models(self, saved.data, cultures, scope),
                "clone_sub_models",
            ))
        result.absorb(saved)
