"""Transaction Scope — the (session, transaction, is_root) triple handed down a cascade.

Invariants:
    - Exactly one scope per transaction has is_root=True; only it may commit, roll back or close
    - borrow() never changes the session or transaction, only drops ownership
    - closed is set once, by the root owner, after commit/rollback was decided

Design Decisions:
    - Plain dataclass, no IO: managers in infrastructure/ own every session call
    - session/transaction typed loosely: the same value type serves Session and AsyncSession
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class TransactionScope:
    """Backing-store handle plus transaction, tagged with ownership."""
    session: Any
    transaction: Any
    is_root: bool
    closed: bool = False

    def borrow(self) -> "TransactionScope":
        """Same handle and transaction, without ownership — for nested calls."""
        return TransactionScope(
            session=self.session, transaction=self.transaction, is_root=False,
        )
