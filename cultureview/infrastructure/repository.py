"""SQLAlchemy Persistence Gateways — existence checks, upserts and deletes inside a scope.

Invariants:
    - Every call runs on scope.session; gateways never commit, roll back or close
    - Writes run inside a SAVEPOINT: a failed write leaves the enclosing transaction usable
      for the next clone iteration
    - Expected failures (missing row, constraint violation) come back as failure results;
      only unexpected conditions raise
    - A model whose primary key is incomplete never "exists"

Design Decisions:
    - Identity lookup via Session.get: hits the identity map before the database
    - Existing rows updated through merge(): the pipeline always builds a fresh transient
      model, so add() would collide with the persistent instance
"""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError

from cultureview.core.errors import ResourceNotFoundError
from cultureview.core.operation_result import OperationResult
from cultureview.core.transaction_scope import TransactionScope
from cultureview.infrastructure.database import map_sqlalchemy_error

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class _GatewayBase(Generic[ModelT]):
    """Identity and logging helpers shared by both gateways."""

    def __init__(self, model_cls: type[ModelT], culture_attr: str = "specificulture"):
        self.model_cls = model_cls
        self.culture_attr = culture_attr
        mapper = sa_inspect(model_cls)
        self._pk_keys: tuple[str, ...] = tuple(
            mapper.get_property_by_column(col).key for col in mapper.primary_key
        )

    @property
    def entity_name(self) -> str:
        return self.model_cls.__name__

    def identity_of(self, model: Any) -> tuple | None:
        """Primary-key tuple, or None while any key part is unset."""
        ident = tuple(getattr(model, key) for key in self._pk_keys)
        if any(part is None for part in ident):
            return None
        return ident

    def _culture_query(self, specificulture: str | None):
        query = select(self.model_cls)
        if specificulture is not None:
            column = getattr(self.model_cls, self.culture_attr)
            query = query.where(column == specificulture)
        pk_columns = [getattr(self.model_cls, key) for key in self._pk_keys]
        return query.order_by(*pk_columns)

    def _fault_result(self, e: SQLAlchemyError, operation: str) -> OperationResult:
        fault = map_sqlalchemy_error(e, operation)
        fault.__cause__ = e
        self.log_error_message(fault)
        return OperationResult.failure([fault.message], exception=fault)

    def _not_found(self, model: Any) -> OperationResult:
        fault = ResourceNotFoundError(self.entity_name, str(self.identity_of(model)))
        return OperationResult.failure([fault.message], exception=fault)

    def log_error_message(self, fault: BaseException) -> None:
        logger.error(
            f"{self.entity_name} persistence error: {fault}",
            exc_info=(type(fault), fault, fault.__traceback__),
            extra={
                "entity": self.entity_name,
                "error_code": getattr(fault, "code", None),
            },
        )


class SqlAlchemyRepository(_GatewayBase[ModelT]):
    """Blocking gateway over a Session."""

    def check_exists(self, model: Any, scope: TransactionScope) -> bool:
        ident = self.identity_of(model)
        if ident is None:
            return False
        return scope.session.get(self.model_cls, ident) is not None

    def save_model(
        self, model: Any, view: Any, scope: TransactionScope,
    ) -> OperationResult:
        session = scope.session
        try:
            ident = self.identity_of(model)
            existing = session.get(self.model_cls, ident) if ident else None
            with session.begin_nested():
                if existing is None:
                    session.add(model)
                else:
                    session.merge(model)
                session.flush()
        except SQLAlchemyError as e:
            return self._fault_result(e, "save")
        logger.debug(
            f"{self.entity_name} saved",
            extra={"entity": self.entity_name,
                   "specificulture": getattr(model, self.culture_attr, None)},
        )
        return OperationResult.ok(view)

    def remove_model(self, model: Any, scope: TransactionScope) -> OperationResult:
        session = scope.session
        try:
            ident = self.identity_of(model)
            persistent = session.get(self.model_cls, ident) if ident else None
            if persistent is None:
                return self._not_found(model)
            with session.begin_nested():
                session.delete(persistent)
                session.flush()
        except SQLAlchemyError as e:
            return self._fault_result(e, "delete")
        return OperationResult.ok(model)

    def get_single(self, ident: Any, scope: TransactionScope) -> ModelT | None:
        return scope.session.get(self.model_cls, ident)

    def get_by_culture(
        self, specificulture: str | None, scope: TransactionScope,
    ) -> list[ModelT]:
        result = scope.session.execute(self._culture_query(specificulture))
        return list(result.scalars().all())


class AsyncSqlAlchemyRepository(_GatewayBase[ModelT]):
    """Async gateway over an AsyncSession."""

    async def check_exists(self, model: Any, scope: TransactionScope) -> bool:
        ident = self.identity_of(model)
        if ident is None:
            return False
        return await scope.session.get(self.model_cls, ident) is not None

    async def save_model(
        self, model: Any, view: Any, scope: TransactionScope,
    ) -> OperationResult:
        session = scope.session
        try:
            ident = self.identity_of(model)
            existing = await session.get(self.model_cls, ident) if ident else None
            async with session.begin_nested():
                if existing is None:
                    session.add(model)
                else:
                    await session.merge(model)
                await session.flush()
        except SQLAlchemyError as e:
            return self._fault_result(e, "save")
        logger.debug(
            f"{self.entity_name} saved",
            extra={"entity": self.entity_name,
                   "specificulture": getattr(model, self.culture_attr, None)},
        )
        return OperationResult.ok(view)

    async def remove_model(
        self, model: Any, scope: TransactionScope,
    ) -> OperationResult:
        session = scope.session
        try:
            ident = self.identity_of(model)
            persistent = await session.get(self.model_cls, ident) if ident else None
            if persistent is None:
                return self._not_found(model)
            async with session.begin_nested():
                await session.delete(persistent)
                await session.flush()
        except SQLAlchemyError as e:
            return self._fault_result(e, "delete")
        return OperationResult.ok(model)

    async def get_single(self, ident: Any, scope: TransactionScope) -> ModelT | None:
        return await scope.session.get(self.model_cls, ident)

    async def get_by_culture(
        self, specificulture: str | None, scope: TransactionScope,
    ) -> list[ModelT]:
        result = await scope.session.execute(self._culture_query(specificulture))
        return list(result.scalars().all())
