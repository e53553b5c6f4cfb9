"""Domain Types — culture descriptors and pipeline stages shared by every layer.

Invariants:
    - SupportedCulture is immutable (frozen) — descriptors are values, not entities
    - Specificulture wraps a culture code string — never compare raw strings in pipelines
    - PipelineStage enumerates every state of the save pipeline, terminal ones included

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log records without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Specificulture = NewType("Specificulture", str)


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class SupportedCulture:
    """One culture an entity family may be replicated into."""
    code: str
    is_default: bool = False
    is_supported: bool = True
    alias: str | None = None
    full_name: str | None = None
    icon: str | None = None


def select_clone_cultures(
    cultures: list[SupportedCulture] | None, source: str | None,
) -> list[SupportedCulture]:
    """Cultures a record in `source` should be cloned into, in the given order.

    Unsupported cultures and the source culture itself are excluded.
    """
    return [
        c for c in cultures or []
        if c.is_supported and c.code != source
    ]


# ─── Enums ───────────────────────────────────────────────────────

class PipelineStage(str, Enum):
    """Save pipeline states — logged on every transition."""
    DRAFT = "draft"
    VALIDATING = "validating"
    INVALID = "invalid"
    MAPPED = "mapped"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    CASCADING_SUB_MODELS = "cascading_sub_models"
    CLONING = "cloning"
    FAILED = "failed"
    DONE = "done"


TERMINAL_STAGES: frozenset[PipelineStage] = frozenset({
    PipelineStage.INVALID, PipelineStage.FAILED, PipelineStage.DONE,
})
