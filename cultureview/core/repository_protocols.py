"""Boundary Protocols — contracts between the orchestration core and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every persistence call receives the TransactionScope it must run in
    - Gateways report expected failures as OperationResult, never by raising

Design Decisions:
    - Protocol over ABC: structural subtyping, concrete gateways and hooks need no base class
    - Blocking and async contracts declared separately: one Protocol cannot be both
    - Hooks replace overridable methods: an entity plugs cascades in without subclassing
"""

from typing import Any, Protocol

from cultureview.core.domain_types import SupportedCulture
from cultureview.core.operation_result import OperationResult
from cultureview.core.transaction_scope import TransactionScope


class ViewModelLike(Protocol):
    """Structural contract for the orchestrator instance passed to hooks."""
    model: Any
    view: Any
    scopes: Any


# ─── Mapping & validation ────────────────────────────────────────

class Mapper(Protocol):
    """Projects fields between a model and its view."""
    def to_view(self, model: Any, view: Any) -> Any: ...
    def to_model(self, view: Any, model: Any) -> Any: ...


class ModelCopier(Protocol):
    """Duplicates field values between two instances of one model class."""
    def copy(self, source: Any, target: Any) -> Any: ...


class Validator(Protocol):
    """Checks a view's declared constraints. Never consults the store."""
    def validate(self, view: Any) -> tuple[bool, list[str]]: ...


# ─── Persistence gateways ────────────────────────────────────────

class PersistenceGateway(Protocol):
    """Blocking storage contract — implemented by infrastructure."""
    def identity_of(self, model: Any) -> tuple | None: ...
    def check_exists(self, model: Any, scope: TransactionScope) -> bool: ...
    def save_model(
        self, model: Any, view: Any, scope: TransactionScope,
    ) -> OperationResult: ...
    def remove_model(self, model: Any, scope: TransactionScope) -> OperationResult: ...
    def get_single(self, ident: Any, scope: TransactionScope) -> Any | None: ...
    def get_by_culture(
        self, specificulture: str | None, scope: TransactionScope,
    ) -> list[Any]: ...
    def log_error_message(self, fault: BaseException) -> None: ...


class AsyncPersistenceGateway(Protocol):
    """Async storage contract — implemented by infrastructure."""
    def identity_of(self, model: Any) -> tuple | None: ...
    async def check_exists(self, model: Any, scope: TransactionScope) -> bool: ...
    async def save_model(
        self, model: Any, view: Any, scope: TransactionScope,
    ) -> OperationResult: ...
    async def remove_model(
        self, model: Any, scope: TransactionScope,
    ) -> OperationResult: ...
    async def get_single(self, ident: Any, scope: TransactionScope) -> Any | None: ...
    async def get_by_culture(
        self, specificulture: str | None, scope: TransactionScope,
    ) -> list[Any]: ...
    def log_error_message(self, fault: BaseException) -> None: ...


# ─── Cascade hooks ───────────────────────────────────────────────

class ViewModelHooks(Protocol):
    """Per-entity extension points for the blocking pipelines."""
    def expand_view(self, vm: ViewModelLike, scope: TransactionScope) -> bool: ...
    def expand_model(self, vm: ViewModelLike, model: Any) -> None: ...
    def save_sub_models(
        self, vm: ViewModelLike, parent: Any, scope: TransactionScope,
    ) -> OperationResult: ...
    def remove_related_models(
        self, vm: ViewModelLike, scope: TransactionScope,
    ) -> OperationResult: ...
    def clone_sub_models(
        self, vm: ViewModelLike, parent: Any,
        cultures: list[SupportedCulture], scope: TransactionScope,
    ) -> OperationResult: ...


class AsyncViewModelHooks(Protocol):
    """Per-entity extension points for the async pipelines."""
    async def expand_view(self, vm: ViewModelLike, scope: TransactionScope) -> bool: ...
    def expand_model(self, vm: ViewModelLike, model: Any) -> None: ...
    async def save_sub_models(
        self, vm: ViewModelLike, parent: Any, scope: TransactionScope,
    ) -> OperationResult: ...
    async def remove_related_models(
        self, vm: ViewModelLike, scope: TransactionScope,
    ) -> OperationResult: ...
    async def clone_sub_models(
        self, vm: ViewModelLike, parent: Any,
        cultures: list[SupportedCulture], scope: TransactionScope,
    ) -> OperationResult: ...
