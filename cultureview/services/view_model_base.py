"""View-Model Base — state and pure steps shared by the blocking and async orchestrators.

Invariants:
    - A view-model owns exactly one Model and one View at a time
    - parse_model() ALWAYS replaces the Model with a fresh instance before mapping
    - The mapper and model mapper are built at most once per instance (single-flight)
    - An empty view-model keeps its view defaults: a blank Model is never projected onto it
    - validate() reports only the latest run: errors never carry over from an earlier save

Design Decisions:
    - Pure steps (mapping, validation, clone-culture selection) live here; anything that
      touches a scope lives in ViewModel / AsyncViewModel
    - Double-checked lock around lazy mapper creation: first access from several threads
      builds one mapper
"""

import logging
import threading
from typing import Any, Generic, TypeVar

from cultureview.core.binding import EntityBinding
from cultureview.core.domain_types import (
    PipelineStage, SupportedCulture, select_clone_cultures,
)
from cultureview.core.errors import (
    CascadeFailure, ErrorContext, ValidationFailure,
)
from cultureview.core.operation_result import OperationResult
from cultureview.core.repository_protocols import Mapper, ModelCopier

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
ViewT = TypeVar("ViewT")


class ViewModelBase(Generic[ModelT, ViewT]):
    """Model + View pair with its collaborators."""

    def __init__(
        self,
        binding: EntityBinding[ModelT, ViewT],
        gateway: Any,
        scopes: Any,
        hooks: Any,
        model: ModelT | None = None,
        view: ViewT | None = None,
    ):
        self.binding = binding
        self.gateway = gateway
        self.scopes = scopes
        self.hooks = hooks
        self._mapper: Mapper | None = None
        self._model_mapper: ModelCopier | None = None
        self._mapper_lock = threading.Lock()

        self.view: ViewT = view if view is not None else binding.new_view()
        if model is not None:
            self.model: ModelT = model
            self.mapper.to_view(self.model, self.view)
        else:
            self.model = binding.new_model()

    # ─── Lazy mappers ─────────────────────────────────────────────

    @property
    def mapper(self) -> Mapper:
        if self._mapper is None:
            with self._mapper_lock:
                if self._mapper is None:
                    self._mapper = self.binding.create_mapper()
        return self._mapper

    @mapper.setter
    def mapper(self, value: Mapper) -> None:
        self._mapper = value

    @property
    def model_mapper(self) -> ModelCopier:
        if self._model_mapper is None:
            with self._mapper_lock:
                if self._model_mapper is None:
                    self._model_mapper = self.binding.create_model_mapper()
        return self._model_mapper

    @model_mapper.setter
    def model_mapper(self, value: ModelCopier) -> None:
        self._model_mapper = value

    # ─── Pure steps ───────────────────────────────────────────────

    def parse_model(self) -> ModelT:
        """Fresh Model built from the current View."""
        model = self.binding.new_model()
        self.mapper.to_model(self.view, model)
        self.hooks.expand_model(self, model)
        self.model = model
        return model

    def validate(self) -> None:
        """Run the validator; replaces view.is_valid and view.errors with this run's outcome."""
        is_valid, errors = self.binding.validator.validate(self.view)
        self.view.is_valid = is_valid
        self.view.errors = [] if is_valid else list(errors)

    def clone_cultures(self) -> list[SupportedCulture]:
        """Supported cultures other than this view's own, in declared order."""
        return select_clone_cultures(self.view.cultures, self.view.specificulture)

    def _new_clone_target(self, source: ModelT, culture: SupportedCulture) -> "ViewModelBase":
        """Independent copy of `source`, re-labelled for `culture`, never cloning further."""
        target_model = self.binding.new_model()
        self.model_mapper.copy(source, target_model)
        target = type(self)(
            self.binding, self.gateway, self.scopes, self.hooks, model=target_model,
        )
        target.view.specificulture = culture.code
        target.view.is_clone = False
        return target

    # ─── Result helpers ───────────────────────────────────────────

    def _context(self, stage: PipelineStage) -> ErrorContext:
        return ErrorContext(
            entity=self.binding.entity_name,
            specificulture=getattr(self.view, "specificulture", None),
            stage=stage.value,
        )

    def _invalid_result(self) -> OperationResult[ViewT]:
        errors = list(self.view.errors)
        fault = ValidationFailure(errors, self._context(PipelineStage.INVALID))
        self._log_stage(PipelineStage.INVALID, level=logging.WARNING)
        return OperationResult.failure(errors, exception=fault)

    def _cascade_result(
        self, result: OperationResult, stage: str,
    ) -> OperationResult:
        """Attach a CascadeFailure when a hook failed without capturing a fault."""
        if not result.success and result.exception is None:
            result.exception = CascadeFailure(
                stage, result.errors,
                self._context(PipelineStage.CASCADING_SUB_MODELS),
            )
        return result

    def _log_stage(
        self, stage: PipelineStage, level: int = logging.DEBUG, **extra: Any,
    ) -> None:
        logger.log(
            level,
            f"{self.binding.entity_name} pipeline -> {stage.value}",
            extra={
                "entity": self.binding.entity_name,
                "specificulture": getattr(self.view, "specificulture", None),
                "stage": stage.value,
                **extra,
            },
        )
