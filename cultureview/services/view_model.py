"""View-Model Orchestrator (blocking) — validate, map, persist, cascade, clone by culture.

Invariants:
    - Validation runs first and unconditionally; an invalid view never reaches the gateway
    - Sub-models are saved only after the model persisted; cloning only after sub-models
      succeeded, only when view.is_clone is set, and only from a root scope
    - Only the call that opened the scope (is_root) commits, rolls back or closes it
    - No public pipeline raises: faults come back as failure results
    - Clone iterates cultures strictly in the given order; each iteration finalizes the
      scope with the CUMULATIVE success flag

Design Decisions:
    - Collaborators injected (binding, gateway, scope manager, hooks) instead of static
      repositories and overridable methods
    - Save and Remove short-circuit on the first failed required stage; Clone continues
      through every culture and aggregates
"""

import logging

from cultureview.core.binding import EntityBinding
from cultureview.core.domain_types import PipelineStage, SupportedCulture
from cultureview.core.errors import ExpansionFault
from cultureview.core.operation_result import OperationResult
from cultureview.core.repository_protocols import (
    PersistenceGateway, ViewModelHooks,
)
from cultureview.core.transaction_scope import TransactionScope
from cultureview.infrastructure.unit_of_work import TransactionScopeManager
from cultureview.services.hooks import NoCascadeHooks
from cultureview.services.view_model_base import ModelT, ViewModelBase, ViewT

logger = logging.getLogger(__name__)


class ViewModel(ViewModelBase[ModelT, ViewT]):
    """Blocking orchestrator over a Session-backed scope manager."""

    def __init__(
        self,
        binding: EntityBinding[ModelT, ViewT],
        gateway: PersistenceGateway,
        scopes: TransactionScopeManager,
        hooks: ViewModelHooks | None = None,
        model: ModelT | None = None,
        view: ViewT | None = None,
    ):
        super().__init__(
            binding, gateway, scopes, hooks or NoCascadeHooks(), model, view,
        )

    @classmethod
    def init_view(
        cls,
        binding: EntityBinding[ModelT, ViewT],
        gateway: PersistenceGateway,
        scopes: TransactionScopeManager,
        hooks: ViewModelHooks | None = None,
        model: ModelT | None = None,
        expand: bool = True,
        scope: TransactionScope | None = None,
    ) -> "ViewModel[ModelT, ViewT] | None":
        """Empty view-model, or one built from `model` (expanded when asked).

        Returns None when expansion fails.
        """
        vm = cls(binding, gateway, scopes, hooks, model=model)
        if model is None:
            return vm
        vm.view.is_lazy_load = expand
        if vm.parse_view(expand=expand, scope=scope) is None:
            return None
        return vm

    # ─── View projection ──────────────────────────────────────────

    def parse_view(
        self, expand: bool = True, scope: TransactionScope | None = None,
    ) -> ViewT | None:
        """Project the Model onto the View, then run the expand hook if asked."""
        self.mapper.to_view(self.model, self.view)
        if not expand:
            return self.view
        with self.scopes.scope(scope) as current:
            try:
                expanded = self.hooks.expand_view(self, current)
            except Exception as e:
                fault = ExpansionFault(str(e), self._context(PipelineStage.MAPPED))
                fault.__cause__ = e
                self.view.exception = fault
                self.gateway.log_error_message(fault)
                self.scopes.handle_exception(fault, current)
                return None
        return self.view if expanded else None

    # ─── Save ─────────────────────────────────────────────────────

    def save_model(
        self, save_sub_models: bool = False, scope: TransactionScope | None = None,
    ) -> OperationResult[ViewT]:
        with self.scopes.scope(scope) as current:
            try:
                self._log_stage(PipelineStage.VALIDATING)
                self.validate()
                if not self.view.is_valid:
                    return self._invalid_result()
                return self._save_valid(save_sub_models, current)
            except Exception as e:
                self._log_stage(PipelineStage.FAILED, level=logging.ERROR)
                return self.scopes.handle_exception(e, current)

    def _save_valid(
        self, save_sub_models: bool, scope: TransactionScope,
    ) -> OperationResult[ViewT]:
        self.parse_model()
        self._log_stage(PipelineStage.PERSISTING)
        result = self.gateway.save_model(self.model, self.view, scope)

        if result.success:
            self.model = self._persisted_model(scope)
            self.mapper.to_view(self.model, self.view)
            self._log_stage(PipelineStage.PERSISTED)
            if save_sub_models:
                self._log_stage(PipelineStage.CASCADING_SUB_MODELS)
                result.absorb(self._cascade_result(
                    self.hooks.save_sub_models(self, self.model, scope),
                    "save_sub_models",
                ))
            if result.success and self.view.is_clone and scope.is_root:
                self._log_stage(PipelineStage.CLONING)
                result.absorb(self.clone(
                    self.model, self.clone_cultures(), scope=scope,
                ))

        self.scopes.handle_transaction(result.success, scope)
        self._log_stage(
            PipelineStage.DONE if result.success else PipelineStage.FAILED,
            level=logging.INFO if result.success else logging.WARNING,
            is_root=scope.is_root,
        )
        return result

    def _persisted_model(self, scope: TransactionScope) -> ModelT:
        """Session-tracked instance of the saved model; the merge target on update."""
        ident = self.gateway.identity_of(self.model)
        persisted = self.gateway.get_single(ident, scope) if ident else None
        return persisted if persisted is not None else self.model

    # ─── Remove ───────────────────────────────────────────────────

    def remove_model(
        self, remove_related: bool = False, scope: TransactionScope | None = None,
    ) -> OperationResult[ModelT]:
        with self.scopes.scope(scope) as current:
            try:
                self.parse_model()
                if remove_related:
                    related = self._cascade_result(
                        self.hooks.remove_related_models(self, current),
                        "remove_related_models",
                    )
                    if related.success:
                        result = self.gateway.remove_model(self.model, current)
                    else:
                        result = OperationResult.failure(
                            related.errors, exception=related.exception,
                        )
                else:
                    result = self.gateway.remove_model(self.model, current)
                self.scopes.handle_transaction(result.success, current)
                return result
            except Exception as e:
                return self.scopes.handle_exception(e, current)

    # ─── Clone ────────────────────────────────────────────────────

    def clone(
        self,
        model: ModelT,
        cultures: list[SupportedCulture] | None,
        scope: TransactionScope | None = None,
    ) -> OperationResult[list[ViewT]]:
        """Replicate `model` into each culture; existing records are left as they are."""
        result: OperationResult[list[ViewT]] = OperationResult.ok([])
        if not cultures:
            return result
        with self.scopes.scope(scope) as current:
            try:
                for culture in cultures:
                    self._clone_into(model, cultures, culture, current, result)
                    self.scopes.handle_transaction(result.success, current)
                return result
            except Exception as e:
                fault_result = self.scopes.handle_exception(e, current)
                fault_result.errors[:0] = result.errors
                return fault_result

    def _clone_into(
        self,
        source: ModelT,
        cultures: list[SupportedCulture],
        culture: SupportedCulture,
        scope: TransactionScope,
        result: OperationResult[list[ViewT]],
    ) -> None:
        target = self._new_clone_target(source, culture)
        if self.gateway.check_exists(target.parse_model(), scope):
            logger.debug(
                f"{self.binding.entity_name} already exists in {culture.code}, skipped",
                extra={"entity": self.binding.entity_name,
                       "specificulture": culture.code},
            )
            result.data.append(target.view)
            return

        saved = target.save_model(scope=scope)
        if saved.success:
            saved.absorb(self._cascade_result(
                self.hooks.clone_sub_models(self, saved.data, cultures, scope),
                "clone_sub_models",
            ))
        result.absorb(saved)
