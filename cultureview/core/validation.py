"""View Validation — re-checks a view's declared pydantic constraints before persistence.

Invariants:
    - Never consults the backing store (pure)
    - Validates CURRENT attribute values, including ones assigned after construction
    - Each error rendered as "<field path>: <message>" (model-level errors: message only)

Design Decisions:
    - Constraints declared on the view class (Field(...), field/model validators) — the
      validator holds no rules of its own
    - Result metadata fields (errors, is_valid, exception) excluded from the payload:
      they describe a previous run, not the data
"""

from typing import Any

from pydantic import ValidationError

_RESULT_FIELDS = frozenset({"errors", "is_valid", "exception"})


def format_validation_error(err: dict) -> str:
    path = ".".join(str(part) for part in err.get("loc", ()))
    return f"{path}: {err['msg']}" if path else err["msg"]


class PydanticValidator:
    """Validator backed by the view's own pydantic declaration."""

    def validate(self, view: Any) -> tuple[bool, list[str]]:
        view_cls = type(view)
        payload = {
            name: getattr(view, name)
            for name in view_cls.model_fields
            if name not in _RESULT_FIELDS
        }
        try:
            view_cls.model_validate(payload)
        except ValidationError as e:
            return False, [format_validation_error(err) for err in e.errors()]
        return True, []
