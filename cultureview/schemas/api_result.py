"""API Result Envelope — formats an OperationResult for transport to clients.

Invariants:
    - status is SUCCESS only for a successful operation
    - errors are copied, never shared with the source result
    - The captured exception never serializes (diagnostics stay server-side)
"""

from enum import IntEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from cultureview.core.operation_result import OperationResult

T = TypeVar("T")


class ResultStatus(IntEnum):
    FAILED = 0
    SUCCESS = 1


class ApiResult(BaseModel, Generic[T]):
    """Client-facing envelope."""
    status: int
    response_key: str | None = Field(None, serialization_alias="responseKey")
    data: T | None = None
    errors: list[str] = Field(default_factory=list)


def get_result(
    status: int, data: T | None, response_key: str | None, errors: list[str] | None,
) -> ApiResult[T]:
    return ApiResult(
        status=status, response_key=response_key,
        data=data, errors=list(errors or []),
    )


def from_operation(
    result: OperationResult[T], response_key: str | None = None,
) -> ApiResult[T]:
    """Envelope for a pipeline result; failed results carry no data."""
    if result.success:
        return get_result(ResultStatus.SUCCESS, result.data, response_key, [])
    return get_result(ResultStatus.FAILED, None, response_key, result.errors)
