"""Core Layer — pure orchestration building blocks, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, infrastructure/, models/ or schemas/
    - Boundary collaborators (gateway, hooks) are reached only through Protocols

Design Decisions:
    - Functional core separated from imperative shell: mapping, validation and result
      merging are testable without a database
"""
