"""Infrastructure Layer — database engines, transaction scopes, gateways, logging.

Invariants:
    - Every SQLAlchemy error is mapped to PersistenceFault before leaving this layer
    - Blocking and async implementations honor identical commit/rollback/close semantics

Design Decisions:
    - One module per concern (engines, scopes, gateways, observability)
"""
