"""View Base — orchestration metadata every entity view carries.

Invariants:
    - Every field has a default: a view is constructible empty (factory contract)
    - errors/is_valid/exception/is_lazy_load never serialize
    - specificulture, priority, isClone and cultures keep their wire names

Design Decisions:
    - validate_assignment off: the pipeline mutates views freely and validates explicitly
      before each save (PydanticValidator)
    - arbitrary_types_allowed for the captured exception
"""

from pydantic import BaseModel, ConfigDict, Field

from cultureview.core.domain_types import SupportedCulture


class ViewBase(BaseModel):
    """Fields shared by every view handled by a view-model."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        from_attributes=True,
    )

    specificulture: str | None = Field(None, max_length=10)
    priority: int = 0
    is_clone: bool = Field(False, alias="isClone")
    cultures: list[SupportedCulture] = Field(default_factory=list)

    is_lazy_load: bool = Field(True, exclude=True)
    is_valid: bool = Field(True, exclude=True)
    errors: list[str] = Field(default_factory=list, exclude=True)
    exception: BaseException | None = Field(None, exclude=True)
