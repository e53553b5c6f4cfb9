"""Default Hooks — no-op cascades for entities without sub-models.

Invariants:
    - Every hook succeeds and performs no IO
    - expand_view reports success, so parse_view returns the projected view
"""

from typing import Any

from cultureview.core.domain_types import SupportedCulture
from cultureview.core.operation_result import OperationResult
from cultureview.core.repository_protocols import ViewModelLike
from cultureview.core.transaction_scope import TransactionScope


class NoCascadeHooks:
    """Blocking hooks that do nothing."""

    def expand_view(self, vm: ViewModelLike, scope: TransactionScope) -> bool:
        return True

    def expand_model(self, vm: ViewModelLike, model: Any) -> None:
        pass

    def save_sub_models(
        self, vm: ViewModelLike, parent: Any, scope: TransactionScope,
    ) -> OperationResult:
        return OperationResult.ok(True)

    def remove_related_models(
        self, vm: ViewModelLike, scope: TransactionScope,
    ) -> OperationResult:
        return OperationResult.ok(True)

    def clone_sub_models(
        self, vm: ViewModelLike, parent: Any,
        cultures: list[SupportedCulture], scope: TransactionScope,
    ) -> OperationResult:
        return OperationResult.ok(True)


class AsyncNoCascadeHooks:
    """Async hooks that do nothing."""

    async def expand_view(self, vm: ViewModelLike, scope: TransactionScope) -> bool:
        return True

    def expand_model(self, vm: ViewModelLike, model: Any) -> None:
        pass

    async def save_sub_models(
        self, vm: ViewModelLike, parent: Any, scope: TransactionScope,
    ) -> OperationResult:
        return OperationResult.ok(True)

    async def remove_related_models(
        self, vm: ViewModelLike, scope: TransactionScope,
    ) -> OperationResult:
        return OperationResult.ok(True)

    async def clone_sub_models(
        self, vm: ViewModelLike, parent: Any,
        cultures: list[SupportedCulture], scope: TransactionScope,
    ) -> OperationResult:
        return OperationResult.ok(True)
