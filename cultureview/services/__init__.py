"""Services — view-model orchestrators, cascade hooks and entity services.

Invariants:
    - Services talk to storage only through gateways and scope managers
    - Every public pipeline returns an OperationResult
"""
