"""Operation Result — uniform success/failure envelope returned by every pipeline.

Invariants:
    - success is False whenever errors is non-empty
    - data is authoritative only when success is True
    - absorb() never clears a fault already captured

Design Decisions:
    - Mutable dataclass: pipelines accumulate errors stage by stage into one result
    - Generic over payload type so View, Model and list[View] results share one shape
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """Result of a save/remove/clone call."""
    success: bool = True
    data: T | None = None
    errors: list[str] = field(default_factory=list)
    exception: BaseException | None = None

    def __post_init__(self):
        if self.errors:
            self.success = False

    @classmethod
    def ok(cls, data: T | None = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        errors: list[str] | None = None,
        exception: BaseException | None = None,
        data: T | None = None,
    ) -> "OperationResult[T]":
        return cls(
            success=False, data=data,
            errors=list(errors or []), exception=exception,
        )

    def absorb(self, other: "OperationResult") -> "OperationResult[T]":
        """Fold a sub-result into this one (logical AND on success)."""
        if not other.success:
            self.errors.extend(other.errors)
            if other.exception is not None:
                self.exception = other.exception
        self.success = self.success and other.success
        return self

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.success = False
