"""Pydantic Schemas — views (transfer representations) and the API result envelope.

Invariants:
    - Views declare their own field constraints; the validator re-checks them before saves
    - Orchestration metadata is excluded from serialized output except isClone/cultures

Design Decisions:
    - Separate from models: views are transfer contracts, models are persistence
"""
