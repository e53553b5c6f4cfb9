"""Entity Binding — explicit per-entity factories that replace runtime type lookup.

Invariants:
    - model_factory / view_factory return fresh, empty instances on every call
    - A binding is immutable and shared by every view-model of its entity type

Design Decisions:
    - Factories injected at wiring time instead of reflective constructor discovery
    - Mapper factories default to the field mappers but stay swappable per entity
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from cultureview.core.mapping import FieldMapper, ModelMapper
from cultureview.core.repository_protocols import Mapper, ModelCopier, Validator
from cultureview.core.validation import PydanticValidator

ModelT = TypeVar("ModelT")
ViewT = TypeVar("ViewT")


@dataclass(frozen=True)
class EntityBinding(Generic[ModelT, ViewT]):
    """How to build, map and validate one model/view pair."""
    model_cls: type[ModelT]
    view_cls: type[ViewT]
    validator: Validator = field(default_factory=PydanticValidator)
    mapper_factory: Callable[[type, type], Mapper] = FieldMapper
    model_mapper_factory: Callable[[type], ModelCopier] = ModelMapper

    @property
    def entity_name(self) -> str:
        return self.model_cls.__name__

    def new_model(self) -> ModelT:
        return self.model_cls()

    def new_view(self) -> ViewT:
        return self.view_cls()

    def create_mapper(self) -> Mapper:
        return self.mapper_factory(self.model_cls, self.view_cls)

    def create_model_mapper(self) -> ModelCopier:
        return self.model_mapper_factory(self.model_cls)
