"""Transaction Scope Managers — create, borrow and finalize transaction scopes.

Invariants:
    - A scope is root only when this manager opened its session
    - Non-root scopes are NEVER committed, rolled back or closed here (all calls are no-ops)
    - The root session is closed only by dispose(), after commit/rollback was decided
    - After a root commit/rollback a fresh transaction is begun, so a root scope stays
      usable for the next clone iteration

Design Decisions:
    - Finalization goes through the Session (commit/rollback), not the SessionTransaction
      handle: the session always finalizes its current transaction
    - scope() context manager pairs init_transaction with dispose — pipelines cannot leak
      a root session on any exit path
    - Blocking and async managers kept in one module: identical semantics side by side
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, sessionmaker

from cultureview.core.operation_result import OperationResult
from cultureview.core.transaction_scope import TransactionScope

logger = logging.getLogger(__name__)


def _failure_from(fault: BaseException) -> OperationResult:
    return OperationResult.failure([str(fault) or type(fault).__name__], exception=fault)


class TransactionScopeManager:
    """Blocking scope manager over a sessionmaker."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def init_transaction(
        self,
        session: Session | None = None,
        transaction=None,
        *,
        scope: TransactionScope | None = None,
    ) -> TransactionScope:
        """Open a root scope, or borrow the caller's session/transaction."""
        if scope is not None:
            return scope.borrow()
        if session is None and transaction is not None:
            session = transaction.session
        if session is None:
            session = self._session_factory()
            return TransactionScope(session, session.begin(), is_root=True)
        if transaction is None:
            transaction = session.get_transaction() or session.begin()
        return TransactionScope(session, transaction, is_root=False)

    def handle_transaction(self, success: bool, scope: TransactionScope) -> None:
        """Root-only: commit on success, roll back otherwise."""
        if not scope.is_root or scope.closed:
            return
        if success:
            scope.session.commit()
            logger.debug("Root transaction committed", extra={"is_root": True})
        else:
            scope.session.rollback()
            logger.debug("Root transaction rolled back", extra={"is_root": True})
        scope.transaction = scope.session.begin()

    def handle_exception(
        self, fault: BaseException, scope: TransactionScope,
    ) -> OperationResult:
        """Root-only rollback; always a failure result carrying the fault."""
        if scope.is_root and not scope.closed:
            try:
                scope.session.rollback()
            except SQLAlchemyError as e:
                logger.error(f"Rollback after fault failed: {e}", exc_info=True)
        return _failure_from(fault)

    def dispose(self, scope: TransactionScope) -> None:
        """Root-only close. Idempotent."""
        if not scope.is_root or scope.closed:
            return
        scope.session.close()
        scope.closed = True

    @contextmanager
    def scope(
        self, parent: TransactionScope | None = None,
    ) -> Generator[TransactionScope, None, None]:
        current = self.init_transaction(scope=parent)
        try:
            yield current
        finally:
            self.dispose(current)


class AsyncTransactionScopeManager:
    """Async scope manager over an async_sessionmaker."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def init_transaction(
        self,
        session: AsyncSession | None = None,
        transaction=None,
        *,
        scope: TransactionScope | None = None,
    ) -> TransactionScope:
        """Open a root scope, or borrow the caller's session/transaction."""
        if scope is not None:
            return scope.borrow()
        if session is None and transaction is not None:
            session = transaction.session
        if session is None:
            session = self._session_factory()
            return TransactionScope(session, await session.begin(), is_root=True)
        if transaction is None:
            transaction = session.get_transaction() or await session.begin()
        return TransactionScope(session, transaction, is_root=False)

    async def handle_transaction(self, success: bool, scope: TransactionScope) -> None:
        """Root-only: commit on success, roll back otherwise."""
        if not scope.is_root or scope.closed:
            return
        if success:
            await scope.session.commit()
            logger.debug("Root transaction committed", extra={"is_root": True})
        else:
            await scope.session.rollback()
            logger.debug("Root transaction rolled back", extra={"is_root": True})
        scope.transaction = await scope.session.begin()

    async def handle_exception(
        self, fault: BaseException, scope: TransactionScope,
    ) -> OperationResult:
        """Root-only rollback; always a failure result carrying the fault."""
        if scope.is_root and not scope.closed:
            try:
                await scope.session.rollback()
            except SQLAlchemyError as e:
                logger.error(f"Rollback after fault failed: {e}", exc_info=True)
        return _failure_from(fault)

    async def dispose(self, scope: TransactionScope) -> None:
        """Root-only close. Idempotent."""
        if not scope.is_root or scope.closed:
            return
        await scope.session.close()
        scope.closed = True

    @asynccontextmanager
    async def scope(
        self, parent: TransactionScope | None = None,
    ) -> AsyncGenerator[TransactionScope, None]:
        current = await self.init_transaction(scope=parent)
        try:
            yield current
        finally:
            await self.dispose(current)
