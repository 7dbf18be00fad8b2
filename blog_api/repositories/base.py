"""Shared plumbing for the SQLModel repositories."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Result, Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from blog_api.errors.database import DatabaseError

ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    """
    Statements against a single table.

    Writes are flushed, never committed: the service decides the transaction
    scope with ``blog_api.db.atomic``. Any SQLAlchemy failure surfaces as
    ``DatabaseError`` naming the model.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def name(self) -> str:
        return self.model.__name__

    async def get_by_id(self, record_id: int) -> ModelT | None:
        try:
            return await self.session.get(self.model, record_id)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load {self.name} {record_id}") from e

    async def count(self) -> int:
        result = await self._execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0

    async def _execute(self, statement: Any) -> Result[Any]:
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to query {self.name}") from e

    async def _scalars(self, statement: Select[Any]) -> Sequence[ModelT]:
        return (await self._execute(statement)).scalars().all()

    async def _save(self, record: ModelT) -> ModelT:
        """
        Stage ``record``, flush it and reload the columns the store fills in.

        Raises:
            DatabaseError: A constraint rejected the row or the flush failed.
        """
        self.session.add(record)
        try:
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            raise DatabaseError(f"{self.name} violates a constraint: {e.orig or e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to save {self.name}") from e
        return record
