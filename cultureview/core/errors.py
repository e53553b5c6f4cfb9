"""Error Hierarchy — typed, categorized exceptions for every pipeline failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and cascade failures are recoverable; persistence faults are critical
    - to_response() produces a uniform error envelope
    - Errors are captured into OperationResult.exception — orchestrators never re-raise them

Design Decisions:
    - Single hierarchy with CultureViewError base: callers can catch or inspect one type
    - ErrorContext as dataclass: rich observability without coupling to the logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CASCADE = "cascade"
    EXPANSION = "expansion"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    specificulture: str | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class CultureViewError(Exception):
    """Base exception for all CultureView errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity": self.context.entity,
                    "specificulture": self.context.specificulture,
                    "stage": self.context.stage,
                },
            }
        }


# ─── Recoverable Errors ─────────────────────────────────────────

class ValidationFailure(CultureViewError):
    """View failed its declared constraints — never reached the store."""
    def __init__(self, errors: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Validation failed: {'; '.join(errors)}" if errors else "Validation failed",
            "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.errors = list(errors)


class CascadeFailure(CultureViewError):
    """A sub-model save/remove or clone step reported failure without raising."""
    def __init__(
        self, stage: str, errors: list[str], context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cascade '{stage}' failed"
            + (f": {'; '.join(errors)}" if errors else ""),
            "CASCADE_FAILED", ErrorCategory.CASCADE,
            ErrorSeverity.ERROR, context,
        )
        self.stage = stage
        self.errors = list(errors)


class ExpansionFault(CultureViewError):
    """View enrichment raised — the view is discarded, the scope rolled back."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"View expansion failed: {message}",
            "EXPANSION_FAULT", ErrorCategory.EXPANSION,
            ErrorSeverity.WARNING, context,
        )


class ResourceNotFoundError(CultureViewError):
    """Requested record does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class PersistenceFault(CultureViewError):
    """Backing-store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_FAULT", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
